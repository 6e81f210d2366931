"""Engine subpackage - pricing models, selection transitions and the pricing engine."""
from .models import (
    CatalogOption,
    CatalogProduct,
    CatalogSnapshot,
    Category,
    Customer,
    LineItem,
    MatType,
    Order,
    PriceBreakdown,
    SelectionKey,
    SelectionState,
    SubmissionPayload,
    OrderCreationResult,
)
from .pricing_engine import PricingEngine, circumference, compute_subtotal, moulding_length

__all__ = [
    'PricingEngine', 'compute_subtotal', 'circumference', 'moulding_length',
    'CatalogOption', 'CatalogProduct', 'CatalogSnapshot', 'Category', 'Customer',
    'LineItem', 'MatType', 'Order', 'PriceBreakdown', 'SelectionKey', 'SelectionState',
    'SubmissionPayload', 'OrderCreationResult',
]
