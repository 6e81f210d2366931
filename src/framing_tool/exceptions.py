"""
Custom exceptions for the framing tool.

Exception Hierarchy:
    FramingToolError (base)
    ├── CatalogLoadError         - catalog data could not be read or parsed
    ├── ShopifyAPIError          - transport / HTTP failure talking to Shopify
    │   └── ShopifyGraphQLError  - request reached Shopify but returned top-level errors
    └── OrderSubmissionError     - order could not be built for submission
        ├── EmptyOrderError      - no line items to submit
        └── SubmissionInProgressError - order is already being submitted

Pricing never raises: bad numeric input is priced as zero. Everything here
originates at the external boundary.
"""
from typing import Any, Dict, List, Optional


class FramingToolError(Exception):
    """Base exception for all framing tool errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class CatalogLoadError(FramingToolError):
    """The catalog file or the platform's product response could not be read."""

    def __init__(self, message: str, source: Optional[str] = None):
        details = {"source": source} if source else None
        super().__init__(message, details)
        self.source = source


class ShopifyAPIError(FramingToolError):
    """
    A request to the Shopify Admin API failed before producing a result.

    Covers connection errors, timeouts and non-2xx responses.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        error_details = dict(details or {})
        if status_code is not None:
            error_details["status_code"] = status_code
        super().__init__(message, error_details)
        self.status_code = status_code


class ShopifyGraphQLError(ShopifyAPIError):
    """Shopify answered with a top-level GraphQL ``errors`` list."""

    def __init__(self, errors: List[Dict[str, Any]]):
        messages = [str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors]
        super().__init__(
            f"GraphQL errors: {'; '.join(messages)}",
            details={"errors": errors}
        )
        self.errors = errors


class OrderSubmissionError(FramingToolError):
    """The order could not be turned into a submission."""


class EmptyOrderError(OrderSubmissionError):
    """Tried to submit an order with no line items."""

    def __init__(self):
        super().__init__(
            "Order has no line items",
            {"resolution": "Add at least one configuration to the order before creating it"}
        )


class SubmissionInProgressError(OrderSubmissionError):
    """A submission of this order is already waiting on Shopify."""

    def __init__(self):
        super().__init__(
            "Order submission already in progress",
            {"resolution": "Wait for the current submission to finish"}
        )
