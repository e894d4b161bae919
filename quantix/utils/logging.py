"""
Structured logging for Quantix wallets.

Every module logs through get_logger(__name__). File output is one JSON object
per line so wallet events (placements, fills, expiries, bonus credits) can be
grepped or loaded into pandas; the console gets a short human-readable line.
Credentials that slip into a message are masked before any handler sees them.
"""
import logging
import json
import os
import re
from pathlib import Path
from datetime import datetime, timezone
from typing import Any, Dict

# key=value / key: "value" pairs whose value must never reach a log file
_SECRET_KEYS = r'(password|passwd|pwd|api[_-]?key|apikey|secret|token|auth)'
_SECRET_RE = re.compile(_SECRET_KEYS + r'[\'"]?\s*[:=]\s*[\'"]?([^\s\'"]+)', re.IGNORECASE)
REDACTED = '***REDACTED***'

# Record attributes passed via `extra=` that belong in the JSON payload
EXTRA_FIELDS = (
    'order_id',
    'transaction_id',
    'symbol',
    'side',
    'quantity',
    'price',
    'reason',
)

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def redact(text: str) -> str:
    return _SECRET_RE.sub(lambda m: f"{m.group(1)}={REDACTED}", text)


class SensitiveDataFilter(logging.Filter):
    """Mask secrets in the message template and in string arguments."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = redact(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(redact(a) if isinstance(a, str) else a for a in record.args)
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record, wallet fields included when supplied."""

    def payload(self, record: logging.LogRecord) -> Dict[str, Any]:
        data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }
        data.update({k: getattr(record, k) for k in EXTRA_FIELDS if hasattr(record, k)})
        if record.exc_info:
            data['exception'] = self.formatException(record.exc_info)
        return data

    def format(self, record: logging.LogRecord) -> str:
        # enums and datetimes in extras fall back to str()
        return json.dumps(self.payload(record), default=str)


def _json_file_handler(path: str) -> logging.Handler:
    handler = logging.FileHandler(filename=path, encoding='utf-8', delay=True)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(SensitiveDataFilter())
    return handler


def get_logger(name: str, log_dir: str = None) -> logging.Logger:
    """
    Get a logger writing JSON lines to disk and plain text to the console.

    Two JSON files are written in log_dir: quantix_<date>_<pid>.log, private
    to this process, and quantix.log, a stable name for tooling.

    Args:
        name: Logger name (usually __name__)
        log_dir: Log directory; defaults to $QUANTIX_LOG_DIR, then "logs"

    Returns:
        Configured logger instance. Handlers are attached only once per name.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(os.getenv("QUANTIX_LOG_LEVEL", "INFO").upper())

    log_dir = log_dir or os.getenv("QUANTIX_LOG_DIR", "logs")
    Path(log_dir).mkdir(parents=True, exist_ok=True)

    # Per-process file so concurrent sessions never share a handle
    date_str = datetime.now().strftime("%Y%m%d")
    logger.addHandler(_json_file_handler(os.path.join(log_dir, f"quantix_{date_str}_{os.getpid()}.log")))
    logger.addHandler(_json_file_handler(os.path.join(log_dir, "quantix.log")))

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console.addFilter(SensitiveDataFilter())
    logger.addHandler(console)

    return logger
