"""
Debounced customer lookup.

Each keystroke restarts a quiet-period timer; only the last text typed within
the window is sent. Earlier lookups already in flight are not cancelled, and
whichever response arrives last replaces the visible options. Results can
therefore be stale if responses race; this is accepted for exploratory
search.
"""
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from ..engine.models import Customer
from ..exceptions import ShopifyAPIError
from ..logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_DELAY = 0.5


class CustomerLookup(Protocol):
    def search_customers(self, query: str) -> list[Customer]: ...


@dataclass(frozen=True)
class CustomerOption:
    """One entry in the autocomplete list, keyed by the customer gid."""
    value: str
    label: str
    customer: Customer

    @classmethod
    def from_customer(cls, customer: Customer) -> 'CustomerOption':
        return cls(value=customer.id, label=customer.label, customer=customer)


class DebouncedCustomerSearch:
    """
    Customer autocomplete state plus the debounce timer.

    ``on_results`` (optional) is called from the timer thread with the new
    option list each time a response is applied.
    """

    def __init__(
        self,
        lookup: CustomerLookup,
        delay: float = DEFAULT_DELAY,
        on_results: Optional[Callable[[list[CustomerOption]], None]] = None,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self.lookup = lookup
        self.delay = delay
        self.on_results = on_results
        self._timer_factory = timer_factory
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._generation = 0

        self.search_value = ""
        self.options: list[CustomerOption] = []
        self.selected: Optional[Customer] = None
        self.last_error: Optional[str] = None

    def update(self, text: str) -> None:
        """Record typed text and (re)start the quiet-period timer."""
        with self._lock:
            self.search_value = text
            self._cancel_timer()
            if text == "":
                self.options = []
                return
            generation = self._generation
            self._timer = self._timer_factory(self.delay, self._run_lookup, args=(text, generation))
            self._timer.daemon = True
            self._timer.start()

    def _run_lookup(self, text: str, generation: int) -> None:
        try:
            customers = self.lookup.search_customers(text)
        except ShopifyAPIError as e:
            logger.warning(f"Customer lookup for '{text}' failed: {e}")
            with self._lock:
                if generation == self._generation:
                    self.last_error = e.message
            return
        self.apply_results(customers, generation)

    def apply_results(self, customers: list[Customer], generation: Optional[int] = None) -> bool:
        """
        Replace the options with a lookup response.

        Responses issued before the last reset() are discarded; returns
        whether the response was applied.
        """
        with self._lock:
            if generation is not None and generation != self._generation:
                logger.debug("Discarding customer results from before reset")
                return False
            self.options = [CustomerOption.from_customer(c) for c in customers]
            self.last_error = None
            options = list(self.options)
        if self.on_results:
            self.on_results(options)
        return True

    def select(self, value: Optional[str]) -> Optional[Customer]:
        """
        Pick an option by value (customer id).

        None clears the selection; an unknown value leaves it unchanged.
        """
        with self._lock:
            if value is None:
                self.selected = None
                self.search_value = ""
                return None
            for option in self.options:
                if option.value == value:
                    self.selected = option.customer
                    self.search_value = option.label
                    return self.selected
            return self.selected

    def reset(self) -> None:
        """Forget text, options and selection; pending responses will be ignored."""
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self.search_value = ""
            self.options = []
            self.selected = None
            self.last_error = None

    def close(self) -> None:
        with self._lock:
            self._cancel_timer()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
