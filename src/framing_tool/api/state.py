"""
Shared application state for the API: catalog, engine, order and client.

Loaded lazily on first use so importing the app does not touch the network.
"""
import threading
from typing import Optional

from ..config.settings import get_settings, Settings
from ..engine import CatalogSnapshot, PricingEngine
from ..order import OrderAccumulator, OrderSubmitter
from ..services.shopify_client import ShopifyClient, load_session_catalog


class AppState:
    """One order session shared by the API routes."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[ShopifyClient] = None,
                 catalog: Optional[CatalogSnapshot] = None):
        self.settings = settings or get_settings()
        self._client = client
        self._catalog = catalog
        self._engine: Optional[PricingEngine] = None
        self.order = OrderAccumulator(currency=self.settings.currency)
        self._submitter: Optional[OrderSubmitter] = None
        self._lock = threading.Lock()

    @property
    def client(self) -> ShopifyClient:
        if self._client is None:
            self._client = ShopifyClient(self.settings)
        return self._client

    @property
    def submitter(self) -> OrderSubmitter:
        # Routes run in a threadpool; two first calls must share one submitter
        with self._lock:
            if self._submitter is None:
                self._submitter = OrderSubmitter(self.order, self.client)
        return self._submitter

    @property
    def catalog(self) -> CatalogSnapshot:
        if self._catalog is None:
            self._catalog = load_session_catalog(self.settings, self._client)
        return self._catalog

    @property
    def engine(self) -> PricingEngine:
        if self._engine is None:
            self._engine = PricingEngine(self.catalog, self.settings)
        return self._engine

    def reload_catalog(self) -> CatalogSnapshot:
        """Drop the cached catalog and engine; the next access reloads them."""
        self._catalog = None
        self._engine = None
        return self.catalog


_state: Optional[AppState] = None


def get_state() -> AppState:
    """Get the global application state."""
    global _state
    if _state is None:
        _state = AppState()
    return _state


def set_state(state: Optional[AppState]) -> None:
    """Replace the global state (tests, reconfiguration)."""
    global _state
    _state = state
