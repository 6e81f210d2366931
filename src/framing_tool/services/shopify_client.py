"""
Shopify Admin GraphQL client.

Covers the three calls the order generator makes:
- catalog read (one products query per category)
- customer search
- order creation

Transport failures and top-level GraphQL errors raise; orderCreate
``userErrors`` are returned to the caller untouched.
"""
from typing import Any, Optional

import requests

from ..config.settings import get_settings, Settings
from ..data.catalog_loader import catalog_summary, load_catalog_file, snapshot_from_product_data
from ..engine.models import CatalogSnapshot, Category, Customer, OrderCreationResult, SubmissionPayload
from ..exceptions import CatalogLoadError, ShopifyAPIError, ShopifyGraphQLError
from ..logging_config import get_logger

logger = get_logger(__name__)


PRODUCTS_QUERY = """
query CategoryProducts($query: String!, $first: Int!, $variants: Int!) {
  products(first: $first, query: $query) {
    edges {
      node {
        id
        title
        handle
        productType
        variants(first: $variants) {
          edges {
            node {
              price
              title
            }
          }
        }
      }
    }
  }
}
"""

CUSTOMERS_QUERY = """
query CustomerSearch($query: String!, $first: Int!) {
  customers(first: $first, query: $query) {
    edges {
      node {
        id
        firstName
        lastName
        phone
      }
    }
  }
}
"""

ORDER_CREATE_MUTATION = """
mutation OrderCreate($order: OrderCreateOrderInput!) {
  orderCreate(order: $order) {
    order {
      id
      name
    }
    userErrors {
      field
      message
    }
  }
}
"""


class ShopifyClient:
    """
    Thin wrapper around the Admin GraphQL endpoint.

    One requests.Session is reused across calls.
    """

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self.settings.access_token,
        })

    def graphql(self, query: str, variables: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Run a GraphQL document and return its ``data`` object.

        Raises:
            ShopifyAPIError: on connection errors, timeouts or non-2xx status
            ShopifyGraphQLError: when the response carries top-level errors
        """
        if not self.settings.has_shop:
            raise ShopifyAPIError("Shopify shop and access token are not configured")

        try:
            response = self.session.post(
                self.settings.graphql_url,
                json={"query": query, "variables": variables or {}},
                timeout=self.settings.http_timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Shopify request failed: {e}")
            raise ShopifyAPIError(f"Shopify request failed: {e}") from e

        if not response.ok:
            logger.error(f"Shopify returned HTTP {response.status_code}")
            raise ShopifyAPIError(
                f"Shopify returned HTTP {response.status_code}",
                status_code=response.status_code,
                details={"body": response.text[:500]},
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ShopifyAPIError("Shopify returned a non-JSON response", status_code=response.status_code) from e

        if not isinstance(body, dict):
            raise ShopifyAPIError("Shopify returned an unexpected response body", status_code=response.status_code)

        errors = body.get("errors")
        if errors:
            if not isinstance(errors, list):
                errors = [errors]
            logger.error(f"Shopify GraphQL errors: {errors}")
            raise ShopifyGraphQLError(errors)

        return body.get("data") or {}

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def fetch_category_products(self, category: Category | str) -> list[dict]:
        """Product nodes tagged with the category's product_type."""
        category = Category(category)
        data = self.graphql(PRODUCTS_QUERY, {
            "query": f"product_type:{category.value}",
            "first": self.settings.products_per_category,
            "variants": self.settings.variants_per_product,
        })
        try:
            edges = data["products"]["edges"]
        except (KeyError, TypeError) as e:
            raise CatalogLoadError(f"Unexpected products response for {category.value}", source="shopify") from e
        return [(edge or {}).get("node") for edge in edges]

    def load_catalog(self) -> CatalogSnapshot:
        """Query every category and build the session catalog."""
        product_data = {c.value: self.fetch_category_products(c) for c in Category}
        catalog = snapshot_from_product_data(product_data)
        logger.info(f"Loaded catalog from {self.settings.shop}: {catalog_summary(catalog)}")
        return catalog

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def search_customers(self, query: str) -> list[Customer]:
        """Up to ``search_limit`` customers matching free text (name, phone, email)."""
        if not query or not query.strip():
            return []
        data = self.graphql(CUSTOMERS_QUERY, {"query": query.strip(), "first": self.settings.search_limit})
        edges = (data.get("customers") or {}).get("edges") or []
        customers = []
        for edge in edges:
            node = (edge or {}).get("node")
            if node:
                customers.append(Customer.from_node(node))
        logger.debug(f"Customer search '{query}' returned {len(customers)} result(s)")
        return customers

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def create_order(self, payload: SubmissionPayload) -> OrderCreationResult:
        """
        Submit one order. Not retried.

        Field-level ``userErrors`` come back in the result as ``{field, message}``.
        """
        data = self.graphql(ORDER_CREATE_MUTATION, payload.to_variables())
        result_data = data.get("orderCreate") or {}
        order = result_data.get("order") or {}
        result = OrderCreationResult(
            order_id=order.get("id"),
            order_name=order.get("name"),
            user_errors=[
                {"field": e.get("field"), "message": e.get("message")}
                for e in result_data.get("userErrors") or []
                if isinstance(e, dict)
            ],
        )
        if result.success:
            logger.info(f"Created order {result.order_name or result.order_id} with {len(payload.line_items)} line(s)")
        else:
            logger.warning(f"Order creation returned user errors: {result.user_errors}")
        return result


def load_session_catalog(settings: Optional[Settings] = None, client: Optional[ShopifyClient] = None) -> CatalogSnapshot:
    """
    Catalog for a new session: live from Shopify when credentials are set,
    otherwise the JSON snapshot at ``settings.catalog_path``.
    """
    settings = settings or get_settings()
    if settings.has_shop:
        return (client or ShopifyClient(settings)).load_catalog()
    logger.info("No Shopify credentials configured, using catalog file")
    return load_catalog_file(settings.catalog_path)
