"""
Order Accumulator - collects priced configurations into one order.

Each "add to order" freezes the current selection and its subtotal into a
LineItem. The running total is kept incrementally; the adjusted total is
always derived from the total and the raw discount string.
"""
from dataclasses import replace
from decimal import Decimal
from typing import Optional

import pandas as pd

from ..engine.models import Customer, LineItem, Order, SelectionState, SubmissionPayload
from ..engine.numbers import format_amount, to_cents
from ..engine.selection import reset_fields as default_selection
from ..exceptions import EmptyOrderError


class OrderAccumulator:
    """
    Owns the order being built in one session.

    Every mutating method stores the new Order and returns it, so callers can
    either keep a reference to the accumulator or thread the Order through.
    """

    def __init__(self, currency: str = "CAD"):
        self.currency = currency
        self.order = Order()

    @property
    def line_items(self) -> tuple[LineItem, ...]:
        return self.order.line_items

    @property
    def total(self) -> Decimal:
        return self.order.total

    @property
    def adjusted_total(self) -> Decimal:
        return self.order.adjusted_total

    def add_line_item(self, selection: SelectionState, subtotal: Decimal) -> Order:
        """
        Commit a priced selection.

        The caller is expected to reset its selection afterwards
        (see reset_fields()).
        """
        item = LineItem(selection=selection, subtotal=subtotal)
        self.order = replace(
            self.order,
            line_items=self.order.line_items + (item,),
            total=self.order.total + subtotal,
        )
        return self.order

    def remove_line_item(self, index: int) -> Order:
        """Drop one committed line and take its subtotal off the total."""
        items = list(self.order.line_items)
        removed = items.pop(index)
        self.order = replace(
            self.order,
            line_items=tuple(items),
            total=self.order.total - removed.subtotal,
        )
        return self.order

    def set_discount(self, value: str) -> Order:
        """Store the raw discount; no validation, negative adjusted totals are allowed."""
        self.order = replace(self.order, discount=value)
        return self.order

    def select_customer(self, customer: Optional[Customer]) -> Order:
        self.order = replace(self.order, customer=customer)
        return self.order

    def reset_fields(self) -> SelectionState:
        """Default selection for the next configuration; the order is untouched."""
        return default_selection()

    def reset_everything(self) -> Order:
        """Start a new order: no items, zero total, discount "0", no customer."""
        self.order = Order()
        return self.order

    def to_submission(self, customer_id: Optional[str] = None, omit_zero: bool = True) -> SubmissionPayload:
        """
        Build the platform order input.

        One external line per committed item, quantity 1, priced at the item's
        subtotal. The customer is attached only when one is given or selected.

        Raises:
            EmptyOrderError: if nothing has been added to the order
        """
        if self.order.is_empty:
            raise EmptyOrderError()

        if customer_id is None and self.order.customer is not None:
            customer_id = self.order.customer.id

        line_items = [
            {
                "title": item.describe(omit_zero=omit_zero),
                "quantity": 1,
                "priceSet": {
                    "shopMoney": {
                        "amount": format_amount(item.subtotal),
                        "currencyCode": self.currency,
                    }
                },
            }
            for item in self.order.line_items
        ]
        return SubmissionPayload(line_items=line_items, customer_id=customer_id or None)

    def to_frame(self) -> pd.DataFrame:
        """Line-item table for display and CSV export."""
        return pd.DataFrame([
            {
                '#': i + 1,
                'Description': item.describe(),
                'Subtotal': float(to_cents(item.subtotal)),
            }
            for i, item in enumerate(self.order.line_items)
        ], columns=['#', 'Description', 'Subtotal'])
