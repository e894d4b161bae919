"""
Tests for structured logging system.
"""
import unittest
import json
import logging
import tempfile
import shutil
from pathlib import Path
from quantix.utils.logging import get_logger, redact, SensitiveDataFilter


class TestLogging(unittest.TestCase):
    def setUp(self):
        """Create temporary log directory"""
        self.log_dir = tempfile.mkdtemp()
        self._loggers = []

    def tearDown(self):
        """Close handlers and clean up temporary logs"""
        for logger in self._loggers:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
        shutil.rmtree(self.log_dir, ignore_errors=True)

    def _logger(self, name):
        logger = get_logger(name, log_dir=self.log_dir)
        self._loggers.append(logger)
        return logger

    def _lines(self):
        log_file = Path(self.log_dir) / 'quantix.log'
        self.assertTrue(log_file.exists())
        with open(log_file, 'r') as f:
            return [json.loads(line) for line in f if line.strip()]

    def test_json_logging(self):
        """Test that logs are written in JSON format with trade fields"""
        logger = self._logger("test_logging.json")
        logger.info(
            "Order filled",
            extra={'order_id': 'o-1', 'symbol': 'BTCUSDT', 'side': 'buy', 'price': 50000.0},
        )

        log_data = self._lines()[0]
        self.assertIn('timestamp', log_data)
        self.assertEqual(log_data['level'], 'INFO')
        self.assertEqual(log_data['message'], 'Order filled')
        self.assertEqual(log_data['order_id'], 'o-1')
        self.assertEqual(log_data['symbol'], 'BTCUSDT')
        self.assertEqual(log_data['price'], 50000.0)
        self.assertNotIn('transaction_id', log_data)

    def test_per_process_file(self):
        logger = self._logger("test_logging.daily")
        logger.info("hello")
        files = [p.name for p in Path(self.log_dir).glob('quantix_*.log')]
        self.assertEqual(len(files), 1)

    def test_debug_not_written_by_default(self):
        logger = self._logger("test_logging.debug")
        logger.debug("rejected")
        logger.info("filled")
        self.assertEqual([d['message'] for d in self._lines()], ['filled'])

    def test_exception_included(self):
        logger = self._logger("test_logging.exc")
        try:
            raise RuntimeError("provider down")
        except RuntimeError:
            logger.error("monitor failed", exc_info=True)
        self.assertIn('provider down', self._lines()[0]['exception'])

    def test_handlers_added_once(self):
        first = self._logger("test_logging.once")
        second = get_logger("test_logging.once", log_dir=self.log_dir)
        self.assertIs(first, second)
        self.assertEqual(len(second.handlers), 3)

    def test_sensitive_data_redaction(self):
        """Test that sensitive data is redacted"""
        filter_obj = SensitiveDataFilter()

        record = logging.LogRecord(
            name='test', level=logging.INFO, pathname='', lineno=0,
            msg="Connecting with api_key=secret123 and password='mypass'",
            args=(), exc_info=None
        )

        filter_obj.filter(record)

        self.assertIn('***REDACTED***', record.msg)
        self.assertNotIn('secret123', record.msg)
        self.assertNotIn('mypass', record.msg)

    def test_redaction_in_args(self):
        filter_obj = SensitiveDataFilter()
        record = logging.LogRecord(
            name='test', level=logging.INFO, pathname='', lineno=0,
            msg="Price feed %s", args=("token=abc123",), exc_info=None
        )
        filter_obj.filter(record)
        self.assertEqual(record.getMessage(), "Price feed token=***REDACTED***")
        self.assertEqual(redact("balance=500"), "balance=500")


if __name__ == "__main__":
    unittest.main()
