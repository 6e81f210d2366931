"""Selection state and transition tests."""
from dataclasses import FrozenInstanceError

import pytest

from framing_tool.engine import Category, MatType, SelectionKey, SelectionState
from framing_tool.engine import selection as transitions


def test_defaults():
    state = transitions.reset_fields()
    assert state.width == "12"
    assert state.length == "24"
    assert state.moulding_unit_price == "0"
    assert state.mat_type is MatType.STOCK
    assert state.custom_mat_price == "0"
    assert state.labour_hours == "0"
    assert state.labour_rate == "0"
    assert dict(state.selected_options) == {}


def test_transitions_return_new_state():
    original = SelectionState()
    changed = transitions.set_option(original, Category.GLASS, "Glass", "Museum")

    assert changed is not original
    assert dict(original.selected_options) == {}
    assert changed.option_value(SelectionKey.dropdown(Category.GLASS, "Glass")) == "Museum"

    with pytest.raises(FrozenInstanceError):
        changed.width = "10"


def test_set_extra_stores_checkbox_strings():
    state = transitions.set_extra(SelectionState(), "Fillet", "Gold", True)
    key = SelectionKey.extra("Fillet", "Gold")
    assert state.option_value(key) == "true"
    assert state.checked_extras() == [key]

    state = transitions.set_extra(state, "Fillet", "Gold", False)
    assert state.option_value(key) == "false"
    assert state.checked_extras() == []


def test_set_dimension():
    state = transitions.set_dimension(SelectionState(), "width", "16")
    state = transitions.set_dimension(state, "length", "20.5")
    assert (state.width, state.length) == ("16", "20.5")


def test_set_dimension_rejects_unknown_name():
    with pytest.raises(ValueError):
        transitions.set_dimension(SelectionState(), "depth", "3")


def test_scalar_setters():
    state = SelectionState()
    state = transitions.set_moulding_unit_price(state, "2.25")
    state = transitions.set_labour_hours(state, "1.5")
    state = transitions.set_labour_rate(state, "45")
    state = transitions.set_custom_mat_price(state, "18")
    assert state.moulding_unit_price == "2.25"
    assert state.labour_hours == "1.5"
    assert state.labour_rate == "45"
    assert state.custom_mat_price == "18"


def test_choosing_custom_mat_clears_stock_mat():
    state = SelectionState()
    state = transitions.set_option(state, Category.MAT, "Mat", "Single")
    state = transitions.set_option(state, Category.GLASS, "Glass", "Regular")

    state = transitions.set_mat_type(state, MatType.CUSTOM)

    assert state.mat_type is MatType.CUSTOM
    assert state.option_value(SelectionKey.dropdown(Category.MAT, "Mat")) == "0"
    assert state.option_value(SelectionKey.dropdown(Category.GLASS, "Glass")) == "Regular"


def test_choosing_stock_mat_resets_custom_price():
    state = transitions.set_mat_type(SelectionState(), "custom")
    state = transitions.set_custom_mat_price(state, "30")

    state = transitions.set_mat_type(state, "stock")
    assert state.mat_type is MatType.STOCK
    assert state.custom_mat_price == "0"


def test_selected_dropdowns_skip_blank_and_zero():
    state = SelectionState()
    state = transitions.set_option(state, Category.GLASS, "Glass", "0")
    state = transitions.set_option(state, Category.MOUNT, "Mount", "")
    state = transitions.set_option(state, Category.PRINTING, "Printing", "Canvas")

    assert state.selected_dropdowns() == [(SelectionKey.dropdown(Category.PRINTING, "Printing"), "Canvas")]


def test_extras_key_requires_option():
    with pytest.raises(ValueError):
        SelectionKey.dropdown(Category.EXTRAS, "Fillet")


def test_key_display_form():
    assert str(SelectionKey.dropdown("glass", "Glass")) == "glass-Glass"
    assert str(SelectionKey.extra("Fillet", "Gold")) == "extras-Fillet-Gold"


def test_to_dict_snapshot():
    state = transitions.set_extra(SelectionState(labour_hours="2"), "Fillet", "Gold", True)
    data = state.to_dict()
    assert data["width"] == "12"
    assert data["labour"] == "2"
    assert data["matType"] == "stock"
    assert data["extras-Fillet-Gold"] == "true"
