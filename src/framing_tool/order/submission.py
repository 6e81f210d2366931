"""
Order submission with an in-flight guard.

One submitter wraps one OrderAccumulator. While a create call is waiting on
Shopify a second submit is refused, and a successful create starts a new
order so the same lines cannot be sent twice.
"""
import threading
from typing import Optional, Protocol

from ..engine.models import OrderCreationResult, SubmissionPayload
from ..exceptions import SubmissionInProgressError
from ..logging_config import get_logger
from .accumulator import OrderAccumulator

logger = get_logger(__name__)


class OrderCreator(Protocol):
    def create_order(self, payload: SubmissionPayload) -> OrderCreationResult: ...


class OrderSubmitter:
    """Submits the accumulator's order at most once at a time."""

    def __init__(self, accumulator: OrderAccumulator, client: OrderCreator):
        self.accumulator = accumulator
        self.client = client
        self._lock = threading.Lock()

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    def submit(self, customer_id: Optional[str] = None) -> OrderCreationResult:
        """
        Build the payload and create the order.

        On success the accumulator is reset; with user errors the order is
        kept so the operator can correct it.

        Raises:
            SubmissionInProgressError: if another submit has not returned yet
            EmptyOrderError: if the order has no line items
            ShopifyAPIError: on transport or GraphQL failure
        """
        if not self._lock.acquire(blocking=False):
            logger.warning("Order submission refused, another one is in flight")
            raise SubmissionInProgressError()
        try:
            payload = self.accumulator.to_submission(customer_id=customer_id)
            result = self.client.create_order(payload)
            if result.success:
                self.accumulator.reset_everything()
            return result
        finally:
            self._lock.release()
