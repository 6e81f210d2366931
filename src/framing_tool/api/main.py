"""
Framing Tool API - FastAPI surface over the pricing engine and order.

Money values are returned as two-decimal strings. Routes that can reach
Shopify (catalog load, customer search, order creation) are plain functions
so FastAPI runs their blocking HTTP calls in its threadpool.
"""
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, field_validator

from .. import __version__
from ..data.catalog_loader import catalog_to_frame, catalog_summary
from ..engine import Category, Customer, MatType, Order, PriceBreakdown, SelectionState
from ..engine import selection as transitions
from ..engine.numbers import format_amount
from ..exceptions import (
    CatalogLoadError,
    EmptyOrderError,
    FramingToolError,
    ShopifyAPIError,
    SubmissionInProgressError,
)
from ..config.settings import get_settings
from ..logging_config import get_logger, setup_logging
from .state import get_state

_settings = get_settings()
setup_logging(
    log_level=_settings.log_level,
    log_dir=_settings.log_dir,
    enable_file_logging=_settings.log_dir is not None,
)
logger = get_logger(__name__)

app = FastAPI(
    title="Framing Order API",
    description="Pricing and order submission for custom picture framing",
    version=__version__
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Pydantic models for API

class OptionChoice(BaseModel):
    """A dropdown choice: one option of one product."""
    category: Category
    product: str
    option: str


class ExtraChoice(BaseModel):
    """An extras checkbox."""
    product: str
    option: str
    checked: bool = True


class SelectionModel(BaseModel):
    """Request body describing a configuration; numbers are raw input strings."""
    options: list[OptionChoice] = []
    extras: list[ExtraChoice] = []
    width: str = "12"
    length: str = "24"
    moulding_unit_price: str = "0"
    mat_type: MatType = MatType.STOCK
    custom_mat_price: str = "0"
    labour_hours: str = "0"
    labour_rate: str = "0"

    @field_validator(
        "width", "length", "moulding_unit_price", "custom_mat_price", "labour_hours", "labour_rate",
        mode="before",
    )
    @classmethod
    def _raw_input(cls, value):
        # Numbers from JSON clients are kept as the text they would have typed
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def to_state(self) -> SelectionState:
        state = SelectionState(
            width=self.width,
            length=self.length,
            moulding_unit_price=self.moulding_unit_price,
            mat_type=self.mat_type,
            custom_mat_price=self.custom_mat_price,
            labour_hours=self.labour_hours,
            labour_rate=self.labour_rate,
        )
        for choice in self.options:
            state = transitions.set_option(state, choice.category, choice.product, choice.option)
        for extra in self.extras:
            state = transitions.set_extra(state, extra.product, extra.option, extra.checked)
        return state


class DiscountRequest(BaseModel):
    discount: str = "0"

    @field_validator("discount", mode="before")
    @classmethod
    def _raw_discount(cls, value):
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class CustomerModel(BaseModel):
    id: str
    first_name: str = ""
    last_name: str = ""
    phone: str = ""


class SubmitRequest(BaseModel):
    customer_id: Optional[str] = None


def _breakdown_response(breakdown: PriceBreakdown) -> dict:
    return {
        "subtotal": format_amount(breakdown.subtotal),
        "circumference": str(breakdown.circumference),
        "moulding_length": str(breakdown.moulding_length),
        "contributions": {k: format_amount(v) for k, v in breakdown.contributions.items()},
        "trace": [{"step": t.step, "description": t.description, "value": t.value} for t in breakdown.trace],
    }


def _customer_response(customer: Optional[Customer]) -> Optional[dict]:
    if customer is None:
        return None
    return {
        "id": customer.id,
        "first_name": customer.first_name,
        "last_name": customer.last_name,
        "phone": customer.phone,
        "label": customer.label,
        "admin_url": customer.admin_url,
    }


def _order_response(order: Order) -> dict:
    return {
        "line_items": [
            {
                "description": item.describe(),
                "subtotal": format_amount(item.subtotal),
                "selection": item.selection.to_dict(),
            }
            for item in order.line_items
        ],
        "total": format_amount(order.total),
        "discount": order.discount,
        "adjusted_total": format_amount(order.adjusted_total),
        "show_adjusted_total": order.show_adjusted_total,
        "customer": _customer_response(order.customer),
    }


def _to_state(selection: SelectionModel) -> SelectionState:
    try:
        return selection.to_state()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


# Endpoints

@app.get("/")
async def root():
    return {"status": "online", "message": "Framing Order API Active"}


@app.get("/catalog")
def get_catalog(category: Optional[Category] = None):
    try:
        catalog = get_state().catalog
    except CatalogLoadError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ShopifyAPIError as e:
        raise HTTPException(status_code=502, detail=str(e))

    if category is None:
        return catalog.to_dict()
    return catalog_to_frame(catalog, category).to_dict(orient="records")


@app.post("/catalog/reload")
def reload_catalog():
    try:
        catalog = get_state().reload_catalog()
    except FramingToolError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"success": True, "products": catalog_summary(catalog)}


@app.post("/price")
def price_selection(selection: SelectionModel):
    state = _to_state(selection)
    try:
        breakdown = get_state().engine.calculate(state)
    except FramingToolError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return _breakdown_response(breakdown)


@app.get("/order")
async def get_order():
    return _order_response(get_state().order.order)


@app.post("/order/items")
def add_line_item(selection: SelectionModel):
    state = _to_state(selection)
    app_state = get_state()
    try:
        subtotal = app_state.engine.compute_subtotal(state)
    except FramingToolError as e:
        raise HTTPException(status_code=503, detail=str(e))
    order = app_state.order.add_line_item(state, subtotal)
    return _order_response(order)


@app.delete("/order/items/{index}")
async def remove_line_item(index: int):
    accumulator = get_state().order
    if index < 0 or index >= len(accumulator.line_items):
        raise HTTPException(status_code=404, detail=f"Line item {index} not found")
    return _order_response(accumulator.remove_line_item(index))


@app.put("/order/discount")
async def set_discount(req: DiscountRequest):
    return _order_response(get_state().order.set_discount(req.discount))


@app.put("/order/customer")
async def set_customer(customer: Optional[CustomerModel] = None):
    selected = Customer(**customer.model_dump()) if customer else None
    return _order_response(get_state().order.select_customer(selected))


@app.post("/order/reset")
async def reset_order():
    return _order_response(get_state().order.reset_everything())


@app.get("/order/submission")
async def preview_submission(customer_id: Optional[str] = None):
    try:
        payload = get_state().order.to_submission(customer_id=customer_id)
    except EmptyOrderError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return payload.to_variables()


@app.post("/order/submit")
def submit_order(req: SubmitRequest):
    try:
        result = get_state().submitter.submit(customer_id=req.customer_id)
    except EmptyOrderError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except SubmissionInProgressError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except ShopifyAPIError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {
        "success": result.success,
        "order_id": result.order_id,
        "order_name": result.order_name,
        "user_errors": result.user_errors,
    }


@app.get("/customers")
def search_customers(q: str = ""):
    try:
        customers = get_state().client.search_customers(q)
    except ShopifyAPIError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return [_customer_response(c) for c in customers]


@app.get("/system/status")
async def get_status():
    app_state = get_state()
    settings = app_state.settings
    return {
        "version": __version__,
        "shop_configured": settings.has_shop,
        "catalog_path": str(settings.catalog_path) if settings.catalog_path else None,
        "currency": settings.currency,
        "moulding_min_order": settings.moulding_min_order,
        "order_lines": len(app_state.order.line_items),
    }
