"""Background order monitoring for a paper wallet.

The wallet never schedules itself. OrderMonitor is the collaborator that
polls a price provider on a fixed interval and runs one trigger pass per
poll against the snapshot it received.
"""
from __future__ import annotations
from typing import Callable, List, Mapping, Optional
import threading

from ..paper.state import PendingOrder
from ..paper.wallet import Wallet
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

PriceProvider = Callable[[], Mapping[str, float]]


class OrderMonitor:
    """Runs wallet.check_and_execute_orders on a timer."""

    def __init__(
        self,
        wallet: Wallet,
        price_provider: PriceProvider,
        check_interval_seconds: float = 5.0,
        on_orders_changed: Optional[Callable[[List[PendingOrder]], None]] = None,
    ):
        """
        Args:
            wallet: Wallet whose pending orders are evaluated.
            price_provider: Returns the latest symbol -> price snapshot.
            check_interval_seconds: Seconds between passes.
            on_orders_changed: Called with the orders that filled or expired in a pass.
        """
        if check_interval_seconds <= 0:
            raise ValueError("check_interval_seconds must be positive")
        self.wallet = wallet
        self.price_provider = price_provider
        self.check_interval = check_interval_seconds
        self.on_orders_changed = on_orders_changed

        self._running = False
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @classmethod
    def from_config(cls, wallet: Wallet, price_provider: PriceProvider, config=None, **kwargs) -> OrderMonitor:
        """Build a monitor using order_monitor.check_interval_seconds."""
        if config is None:
            from ..config.manager import get_config
            config = get_config()
        interval = config.get("order_monitor.check_interval_seconds", 5.0)
        return cls(wallet, price_provider, check_interval_seconds=interval, **kwargs)

    @property
    def is_running(self) -> bool:
        return self._running

    def run_once(self) -> List[PendingOrder]:
        """Fetch one snapshot and evaluate all pending orders against it."""
        prices = self.price_provider() or {}
        changed = self.wallet.check_and_execute_orders(prices)
        if changed and self.on_orders_changed:
            self.on_orders_changed(changed)
        return changed

    def start(self) -> None:
        """Start the monitoring loop in a background thread."""
        if self._running:
            LOGGER.warning("Order monitor already running")
            return

        self._running = True
        self._stop_event.clear()

        self._thread = threading.Thread(target=self._monitor_loop, name="quantix-order-monitor", daemon=True)
        self._thread.start()
        LOGGER.info(f"Order monitor started (interval: {self.check_interval}s)")

    def stop(self) -> None:
        if not self._running:
            return

        self._running = False
        self._stop_event.set()

        if self._thread:
            self._thread.join(timeout=5)
            self._thread = None

        LOGGER.info("Order monitor stopped")

    def _monitor_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.run_once()
            except Exception as e:
                # logged only; the next poll retries
                LOGGER.error(f"Error in order monitor: {e}", exc_info=True)

            self._stop_event.wait(self.check_interval)
