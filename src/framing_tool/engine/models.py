"""
Data models for the framing tool.

Uses dataclasses for structured, type-safe data representation. Catalog and
selection types are frozen: a catalog is read-only for a session and every
selection change produces a new SelectionState.
"""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional

from .numbers import ZERO, format_money, is_zero_input, parse_decimal


class Category(str, Enum):
    """Catalog partitions, matching the Shopify product_type tag."""
    READYMADE = "readymade"
    GLASS = "glass"
    MAT = "mat"
    PRINTING = "printing"
    MOUNT = "mount"
    EXTRAS = "extras"


# Categories priced by a single chosen option per product
DROPDOWN_CATEGORIES = tuple(c for c in Category if c is not Category.EXTRAS)


class MatType(str, Enum):
    STOCK = "stock"
    CUSTOM = "custom"


@dataclass
class TraceStep:
    """A single step in the pricing trace."""
    step: str
    description: str
    value: Optional[str] = None


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CatalogOption:
    """A priced variant of a catalog product."""
    option_title: str
    price: Decimal

    def to_dict(self) -> dict:
        return {"optionTitle": self.option_title, "price": str(self.price)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'CatalogOption':
        return cls(
            option_title=str(data.get("optionTitle") or ""),
            price=parse_decimal(data.get("price")),
        )


@dataclass(frozen=True)
class CatalogProduct:
    """A catalog product and its ordered options."""
    title: str
    options: tuple[CatalogOption, ...] = ()

    def find_option(self, option_title: str) -> Optional[CatalogOption]:
        for option in self.options:
            if option.option_title == option_title:
                return option
        return None

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "options": [o.to_dict() for o in self.options],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'CatalogProduct':
        return cls(
            title=str(data.get("title") or ""),
            options=tuple(CatalogOption.from_dict(o) for o in data.get("options") or []),
        )


@dataclass(frozen=True)
class CatalogSnapshot:
    """
    Read-only catalog for one session, one product list per category.

    Product titles are lookup keys within a category; if the platform ever
    returns duplicates the first product wins.
    """
    readymade: tuple[CatalogProduct, ...] = ()
    glass: tuple[CatalogProduct, ...] = ()
    mat: tuple[CatalogProduct, ...] = ()
    printing: tuple[CatalogProduct, ...] = ()
    mount: tuple[CatalogProduct, ...] = ()
    extras: tuple[CatalogProduct, ...] = ()

    def products(self, category: Category | str) -> tuple[CatalogProduct, ...]:
        return getattr(self, Category(category).value)

    def find_product(self, category: Category | str, title: str) -> Optional[CatalogProduct]:
        for product in self.products(category):
            if product.title == title:
                return product
        return None

    def find_option(self, category: Category | str, title: str, option_title: str) -> Optional[CatalogOption]:
        product = self.find_product(category, title)
        if product is None:
            return None
        return product.find_option(option_title)

    @property
    def is_empty(self) -> bool:
        return not any(self.products(c) for c in Category)

    def to_dict(self) -> dict:
        return {c.value: [p.to_dict() for p in self.products(c)] for c in Category}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'CatalogSnapshot':
        """Build from ``{category: [{title, options: [{optionTitle, price}]}]}``."""
        return cls(**{
            c.value: tuple(CatalogProduct.from_dict(p) for p in data.get(c.value) or [])
            for c in Category
        })


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SelectionKey:
    """
    Typed key into SelectionState.selected_options.

    Dropdown keys carry a category and product title; extras keys also carry
    the option title, since each extras option is its own checkbox.
    """
    category: Category
    product_title: str
    option_title: Optional[str] = None

    @classmethod
    def dropdown(cls, category: Category | str, product_title: str) -> 'SelectionKey':
        category = Category(category)
        if category is Category.EXTRAS:
            raise ValueError("extras are selected per option, use SelectionKey.extra()")
        return cls(category, product_title)

    @classmethod
    def extra(cls, product_title: str, option_title: str) -> 'SelectionKey':
        return cls(Category.EXTRAS, product_title, option_title)

    @property
    def is_extra(self) -> bool:
        return self.category is Category.EXTRAS

    def __str__(self) -> str:
        if self.is_extra:
            return f"{self.category.value}-{self.product_title}-{self.option_title}"
        return f"{self.category.value}-{self.product_title}"


# Default form values
DEFAULT_WIDTH = "12"
DEFAULT_LENGTH = "24"


@dataclass(frozen=True)
class SelectionState:
    """
    Everything the operator has entered for the configuration being priced.

    Numeric fields hold the raw input strings; they are parsed when priced.
    ``selected_options`` maps a dropdown key to the chosen option title, or an
    extras key to "true"/"false". A missing key or "0" means nothing selected.
    """
    selected_options: Mapping[SelectionKey, str] = field(default_factory=dict)
    width: str = DEFAULT_WIDTH
    length: str = DEFAULT_LENGTH
    moulding_unit_price: str = "0"
    mat_type: MatType = MatType.STOCK
    custom_mat_price: str = "0"
    labour_hours: str = "0"
    labour_rate: str = "0"

    def option_value(self, key: SelectionKey) -> str:
        return self.selected_options.get(key) or ""

    def is_selected(self, key: SelectionKey) -> bool:
        value = self.option_value(key)
        if key.is_extra:
            return value == "true"
        return value not in ("", "0")

    def selected_dropdowns(self) -> list[tuple[SelectionKey, str]]:
        return [
            (key, value) for key, value in self.selected_options.items()
            if not key.is_extra and self.is_selected(key)
        ]

    def checked_extras(self) -> list[SelectionKey]:
        return [key for key in self.selected_options if key.is_extra and self.is_selected(key)]

    def with_changes(self, **changes) -> 'SelectionState':
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Flat, JSON-able snapshot using the display form of each key."""
        data = {
            "width": self.width,
            "length": self.length,
            "mouldingUnitPrice": self.moulding_unit_price,
            "matType": self.mat_type.value,
            "customMatPrice": self.custom_mat_price,
            "labour": self.labour_hours,
            "labourRate": self.labour_rate,
        }
        for key, value in self.selected_options.items():
            data[str(key)] = value
        return data


# ---------------------------------------------------------------------------
# Pricing output
# ---------------------------------------------------------------------------

@dataclass
class PriceBreakdown:
    """Subtotal for one configuration with its contributions and trace."""
    subtotal: Decimal
    circumference: Decimal
    moulding_length: Decimal
    contributions: dict[str, Decimal] = field(default_factory=dict)
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Order
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Customer:
    """A Shopify customer as returned by customer search."""
    id: str
    first_name: str = ""
    last_name: str = ""
    phone: str = ""

    @property
    def label(self) -> str:
        return f"{self.first_name} {self.last_name} ({self.phone})"

    @property
    def admin_url(self) -> str:
        """Admin link built from the numeric tail of the customer gid."""
        customer_id = self.id.split("/")[-1]
        return f"shopify://admin/customers/{customer_id}"

    @classmethod
    def from_node(cls, node: Mapping[str, Any]) -> 'Customer':
        return cls(
            id=str(node.get("id") or ""),
            first_name=node.get("firstName") or "",
            last_name=node.get("lastName") or "",
            phone=node.get("phone") or "",
        )


@dataclass(frozen=True)
class LineItem:
    """A committed configuration and the subtotal it was priced at."""
    selection: SelectionState
    subtotal: Decimal

    def describe(self, omit_zero: bool = True) -> str:
        """
        Human-readable label for the order line.

        With ``omit_zero`` numeric inputs that parse to zero are left out.
        """
        s = self.selection
        parts = [f"{s.width} x {s.length}"]

        for key, value in s.selected_dropdowns():
            parts.append(f"{key.product_title}: {value}")
        for key in s.checked_extras():
            parts.append(f"{key.product_title} ({key.option_title})")

        numeric = [(s.moulding_unit_price, f"Moulding @ {format_money(parse_decimal(s.moulding_unit_price))}")]
        if s.mat_type is MatType.CUSTOM:
            numeric.append((s.custom_mat_price, f"Custom mat {format_money(parse_decimal(s.custom_mat_price))}"))
        numeric.append((s.labour_hours, f"Labour {s.labour_hours or 0}h @ {format_money(parse_decimal(s.labour_rate))}"))

        for raw, text in numeric:
            if omit_zero and is_zero_input(raw):
                continue
            parts.append(text)

        return ", ".join(parts)


@dataclass(frozen=True)
class Order:
    """Committed line items, their total, the discount and the customer."""
    line_items: tuple[LineItem, ...] = ()
    total: Decimal = ZERO
    discount: str = "0"
    customer: Optional[Customer] = None

    @property
    def discount_amount(self) -> Decimal:
        return parse_decimal(self.discount)

    @property
    def adjusted_total(self) -> Decimal:
        return self.total - self.discount_amount

    @property
    def show_adjusted_total(self) -> bool:
        """Adjusted total is only displayed when positive."""
        return self.adjusted_total > 0

    @property
    def is_empty(self) -> bool:
        return not self.line_items


@dataclass
class SubmissionPayload:
    """Order input for the platform's order-creation mutation."""
    line_items: list[dict]
    customer_id: Optional[str] = None

    @property
    def total(self) -> Decimal:
        return sum(
            (Decimal(item["priceSet"]["shopMoney"]["amount"]) for item in self.line_items),
            ZERO,
        )

    def to_variables(self) -> dict:
        order: dict[str, Any] = {"lineItems": self.line_items}
        if self.customer_id:
            order["customer"] = {"toAssociate": {"id": self.customer_id}}
        return {"order": order}


@dataclass
class OrderCreationResult:
    """Outcome of an order-creation call; user errors are passed through as-is."""
    order_id: Optional[str] = None
    order_name: Optional[str] = None
    user_errors: list[dict] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.order_id is not None and not self.user_errors
