"""Order subpackage - line-item accumulation, submission payloads and submission."""
from .accumulator import OrderAccumulator
from .submission import OrderSubmitter

__all__ = ['OrderAccumulator', 'OrderSubmitter']
