"""
Selection transitions.

SelectionState is immutable; the form changes it only through these named
functions, each returning a new state.
"""
from .models import (
    Category,
    MatType,
    SelectionKey,
    SelectionState,
)

DIMENSIONS = ("width", "length")


def set_option(state: SelectionState, category: Category | str, product_title: str,
               option_title: str) -> SelectionState:
    """Choose an option for a dropdown product. "0" or "" clears it."""
    key = SelectionKey.dropdown(category, product_title)
    options = dict(state.selected_options)
    options[key] = option_title
    return state.with_changes(selected_options=options)


def set_extra(state: SelectionState, product_title: str, option_title: str, checked: bool) -> SelectionState:
    """Tick or untick one extras checkbox."""
    key = SelectionKey.extra(product_title, option_title)
    options = dict(state.selected_options)
    options[key] = "true" if checked else "false"
    return state.with_changes(selected_options=options)


def set_dimension(state: SelectionState, dimension: str, value: str) -> SelectionState:
    if dimension not in DIMENSIONS:
        raise ValueError(f"Unknown dimension '{dimension}', expected one of {DIMENSIONS}")
    return state.with_changes(**{dimension: value})


def set_moulding_unit_price(state: SelectionState, value: str) -> SelectionState:
    return state.with_changes(moulding_unit_price=value)


def set_mat_type(state: SelectionState, mat_type: MatType | str) -> SelectionState:
    """
    Switch between stock and custom mat.

    Choosing custom clears every stock mat selection; choosing stock resets
    the custom mat price to "0".
    """
    mat_type = MatType(mat_type)
    if mat_type is MatType.CUSTOM:
        options = {
            key: ("0" if key.category is Category.MAT else value)
            for key, value in state.selected_options.items()
        }
        return state.with_changes(mat_type=mat_type, selected_options=options)
    return state.with_changes(mat_type=mat_type, custom_mat_price="0")


def set_custom_mat_price(state: SelectionState, value: str) -> SelectionState:
    return state.with_changes(custom_mat_price=value)


def set_labour_hours(state: SelectionState, value: str) -> SelectionState:
    return state.with_changes(labour_hours=value)


def set_labour_rate(state: SelectionState, value: str) -> SelectionState:
    return state.with_changes(labour_rate=value)


def reset_fields() -> SelectionState:
    """Declared defaults for a fresh configuration."""
    return SelectionState()
