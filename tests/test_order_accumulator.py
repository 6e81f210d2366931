"""Order accumulator tests: totals, discount, resets and submission payloads."""
from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from framing_tool.engine import Category, Customer, MatType, SelectionState
from framing_tool.engine import selection as transitions
from framing_tool.exceptions import EmptyOrderError
from framing_tool.order import OrderAccumulator


@pytest.fixture
def accumulator():
    return OrderAccumulator()


@pytest.fixture
def customer():
    return Customer(id="gid://shopify/Customer/7001", first_name="Ada", last_name="Lovelace", phone="+15555550100")


def test_add_line_item_n_times(accumulator):
    state = SelectionState(moulding_unit_price="2")
    for _ in range(4):
        accumulator.add_line_item(state, Decimal("192"))

    assert len(accumulator.line_items) == 4
    assert accumulator.total == Decimal("768")


def test_line_items_are_frozen(accumulator):
    order = accumulator.add_line_item(SelectionState(), Decimal("10"))
    with pytest.raises(FrozenInstanceError):
        order.line_items[0].subtotal = Decimal("0")


def test_add_does_not_touch_earlier_items(accumulator):
    first = transitions.set_option(SelectionState(), Category.GLASS, "Glass", "Regular")
    accumulator.add_line_item(first, Decimal("12"))
    accumulator.add_line_item(accumulator.reset_fields(), Decimal("0"))

    assert accumulator.line_items[0].selection is first
    assert accumulator.line_items[1].selection == SelectionState()


@pytest.mark.parametrize("discount, expected", [
    ("0", Decimal("100")),
    ("25", Decimal("75")),
    ("12.50", Decimal("87.50")),
    ("150", Decimal("-50")),
    ("", Decimal("100")),
    ("abc", Decimal("100")),
    ("-10", Decimal("110")),
])
def test_adjusted_total(accumulator, discount, expected):
    accumulator.add_line_item(SelectionState(), Decimal("100"))
    order = accumulator.set_discount(discount)

    assert order.discount == discount
    assert order.adjusted_total == expected
    assert order.show_adjusted_total == (expected > 0)


def test_discount_before_items(accumulator):
    order = accumulator.set_discount("5")
    assert order.adjusted_total == Decimal("-5")
    assert not order.show_adjusted_total

    order = accumulator.add_line_item(SelectionState(), Decimal("20"))
    assert order.adjusted_total == Decimal("15")


def test_reset_fields_keeps_order(accumulator):
    accumulator.add_line_item(SelectionState(width="30"), Decimal("50"))
    fresh = accumulator.reset_fields()

    assert fresh == SelectionState()
    assert len(accumulator.line_items) == 1
    assert accumulator.total == Decimal("50")


def test_reset_everything(accumulator, customer):
    accumulator.add_line_item(SelectionState(), Decimal("40"))
    accumulator.add_line_item(SelectionState(), Decimal("60"))
    accumulator.set_discount("10")
    accumulator.select_customer(customer)

    order = accumulator.reset_everything()

    assert order.line_items == ()
    assert order.total == 0
    assert order.adjusted_total == 0
    assert order.discount == "0"
    assert order.customer is None


def test_remove_line_item(accumulator):
    accumulator.add_line_item(SelectionState(), Decimal("10"))
    accumulator.add_line_item(SelectionState(width="8"), Decimal("25"))
    accumulator.add_line_item(SelectionState(), Decimal("5"))

    order = accumulator.remove_line_item(1)
    assert len(order.line_items) == 2
    assert order.total == Decimal("15")
    assert all(item.selection.width == "12" for item in order.line_items)


def test_submission_lines_sum_to_total(accumulator):
    for subtotal in ("192.00", "57.25", "310.40"):
        accumulator.add_line_item(SelectionState(moulding_unit_price="2"), Decimal(subtotal))

    payload = accumulator.to_submission()

    assert len(payload.line_items) == 3
    assert payload.total == accumulator.total
    for line in payload.line_items:
        assert line["quantity"] == 1
        assert line["priceSet"]["shopMoney"]["currencyCode"] == "CAD"
    assert [line["priceSet"]["shopMoney"]["amount"] for line in payload.line_items] == ["192.00", "57.25", "310.40"]


def test_submission_without_customer(accumulator):
    accumulator.add_line_item(SelectionState(), Decimal("10"))
    payload = accumulator.to_submission()

    assert payload.customer_id is None
    assert "customer" not in payload.to_variables()["order"]


def test_submission_uses_selected_customer(accumulator, customer):
    accumulator.add_line_item(SelectionState(), Decimal("10"))
    accumulator.select_customer(customer)

    variables = accumulator.to_submission().to_variables()
    assert variables["order"]["customer"] == {"toAssociate": {"id": customer.id}}


def test_submission_customer_argument_wins(accumulator, customer):
    accumulator.add_line_item(SelectionState(), Decimal("10"))
    accumulator.select_customer(customer)

    payload = accumulator.to_submission(customer_id="gid://shopify/Customer/1")
    assert payload.customer_id == "gid://shopify/Customer/1"


def test_submission_requires_line_items(accumulator):
    with pytest.raises(EmptyOrderError):
        accumulator.to_submission()


def test_submission_currency(customer):
    accumulator = OrderAccumulator(currency="USD")
    accumulator.add_line_item(SelectionState(), Decimal("1"))
    line = accumulator.to_submission().line_items[0]
    assert line["priceSet"]["shopMoney"]["currencyCode"] == "USD"


def test_line_label_omits_zero_inputs(accumulator):
    state = SelectionState(moulding_unit_price="2")
    state = transitions.set_option(state, Category.GLASS, "Glass", "Museum")
    state = transitions.set_extra(state, "Fillet", "Gold", True)
    accumulator.add_line_item(state, Decimal("345"))

    title = accumulator.to_submission().line_items[0]["title"]
    assert title == "12 x 24, Glass: Museum, Fillet (Gold), Moulding @ $2.00"

    title = accumulator.to_submission(omit_zero=False).line_items[0]["title"]
    assert "Labour 0h @ $0.00" in title


def test_line_label_custom_mat():
    state = transitions.set_mat_type(SelectionState(), MatType.CUSTOM)
    state = transitions.set_custom_mat_price(state, "22.5")
    accumulator = OrderAccumulator()
    accumulator.add_line_item(state, Decimal("22.5"))
    assert "Custom mat $22.50" in accumulator.line_items[0].describe()


def test_to_frame(accumulator):
    accumulator.add_line_item(SelectionState(), Decimal("10.5"))
    accumulator.add_line_item(SelectionState(), Decimal("4"))

    frame = accumulator.to_frame()
    assert list(frame.columns) == ['#', 'Description', 'Subtotal']
    assert frame['Subtotal'].sum() == pytest.approx(14.5)
    assert OrderAccumulator().to_frame().empty
