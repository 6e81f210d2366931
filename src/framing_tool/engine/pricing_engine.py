"""
Pricing Engine - turns a framing configuration into a subtotal.

The subtotal is the sum of five contributions:
1. Dropdown options (readymade, glass, mat, printing, mount) at catalog price
2. Checked extras, priced per unit of frame perimeter
3. Custom moulding, bought in whole sticks (96 units by default)
4. Custom mat price, when a custom mat is chosen
5. Labour hours × labour rate

Pricing is pure: nothing here raises on bad input. Unparsable numbers and
stale catalog keys contribute zero.
"""
import math
from decimal import Decimal
from typing import Optional

from ..config.settings import Settings
from .models import CatalogSnapshot, Category, MatType, PriceBreakdown, SelectionKey, SelectionState
from .numbers import ZERO, format_money, parse_decimal, try_parse_decimal

DEFAULT_STICK_LENGTH = 96


def circumference(selection: SelectionState) -> Decimal:
    """Frame perimeter, ``2 × (width + length)``; zero if either side is unparsable."""
    width = try_parse_decimal(selection.width)
    length = try_parse_decimal(selection.length)
    if width is None or length is None:
        return ZERO
    return 2 * (width + length)


def moulding_length(perimeter: Decimal, stick_length: int = DEFAULT_STICK_LENGTH) -> Decimal:
    """
    Moulding to buy for a perimeter: whole sticks, never less than one stick.

    ``max(stick, ceil(perimeter / stick) × stick)``
    """
    stick = Decimal(stick_length)
    sticks = math.ceil(perimeter / stick)
    return max(stick, sticks * stick)


class PricingEngine:
    """
    Prices framing configurations against one catalog snapshot.

    The engine holds no per-request state, so one instance serves the whole
    session.
    """

    def __init__(self, catalog: CatalogSnapshot, settings: Optional[Settings] = None):
        self.catalog = catalog
        # Without explicit settings the built-in pricing rules apply, not the environment
        self.settings = settings or Settings()

    @property
    def stick_length(self) -> int:
        return self.settings.moulding_stick_length or DEFAULT_STICK_LENGTH

    def compute_subtotal(self, selection: SelectionState) -> Decimal:
        """Subtotal for a selection. Never raises."""
        return self.calculate(selection).subtotal

    def calculate(self, selection: SelectionState) -> PriceBreakdown:
        """
        Price a selection with full traceability.

        Args:
            selection: Current SelectionState

        Returns:
            PriceBreakdown with per-contribution amounts and a trace
        """
        perimeter = circumference(selection)
        length = moulding_length(perimeter, self.stick_length)

        breakdown = PriceBreakdown(
            subtotal=ZERO,
            circumference=perimeter,
            moulding_length=length,
        )
        breakdown.add_trace("Dimensions", f"{selection.width} x {selection.length}", f"circumference {perimeter}")

        contributions = {
            "options": self._options_cost(selection, breakdown),
            "extras": self._extras_cost(selection, perimeter, breakdown),
            "moulding": self._moulding_cost(selection, perimeter, length, breakdown),
            "mat": self._mat_cost(selection, breakdown),
            "labour": self._labour_cost(selection, breakdown),
        }
        breakdown.contributions = contributions
        breakdown.subtotal = sum(contributions.values(), ZERO)
        breakdown.add_trace("Subtotal", "Sum of all contributions", format_money(breakdown.subtotal))
        return breakdown

    def _options_cost(self, selection: SelectionState, breakdown: PriceBreakdown) -> Decimal:
        total = ZERO
        for key, value in selection.selected_dropdowns():
            option = self.catalog.find_option(key.category, key.product_title, value)
            if option is None:
                breakdown.add_trace("Option", f"{key} = {value} not in catalog, skipped")
                continue
            total += option.price
            breakdown.add_trace("Option", f"{key} = {value}", format_money(option.price))
        return total

    def _extras_cost(self, selection: SelectionState, perimeter: Decimal, breakdown: PriceBreakdown) -> Decimal:
        total = ZERO
        for product in self.catalog.products(Category.EXTRAS):
            for option in product.options:
                key = SelectionKey.extra(product.title, option.option_title)
                if selection.option_value(key) != "true":
                    continue
                amount = option.price * perimeter
                total += amount
                breakdown.add_trace(
                    "Extra",
                    f"{product.title} ({option.option_title}) {format_money(option.price)} × {perimeter}",
                    format_money(amount),
                )
        return total

    def _moulding_cost(self, selection: SelectionState, perimeter: Decimal, length: Decimal,
                       breakdown: PriceBreakdown) -> Decimal:
        unit_price = parse_decimal(selection.moulding_unit_price)
        if self.settings.moulding_min_order:
            billed = length
            breakdown.add_trace("Moulding", f"{billed} units ({self.stick_length}-unit sticks) × {unit_price}")
        else:
            billed = perimeter
            breakdown.add_trace("Moulding", f"{billed} perimeter units × {unit_price}")
        return billed * unit_price

    def _mat_cost(self, selection: SelectionState, breakdown: PriceBreakdown) -> Decimal:
        if selection.mat_type is not MatType.CUSTOM:
            return ZERO
        price = parse_decimal(selection.custom_mat_price)
        breakdown.add_trace("Custom Mat", "Custom mat price", format_money(price))
        return price

    def _labour_cost(self, selection: SelectionState, breakdown: PriceBreakdown) -> Decimal:
        amount = parse_decimal(selection.labour_hours) * parse_decimal(selection.labour_rate)
        if amount:
            breakdown.add_trace("Labour", f"{selection.labour_hours}h × {selection.labour_rate}", format_money(amount))
        return amount


def compute_subtotal(catalog: CatalogSnapshot, selection: SelectionState,
                     settings: Optional[Settings] = None) -> Decimal:
    """Functional form of PricingEngine.compute_subtotal; default pricing rules unless settings are given."""
    return PricingEngine(catalog, settings).compute_subtotal(selection)
