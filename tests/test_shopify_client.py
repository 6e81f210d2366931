"""Shopify client tests against a fake requests session (no network)."""
from dataclasses import replace
from decimal import Decimal

import pytest
import requests

from framing_tool.engine import Category, SelectionState
from framing_tool.exceptions import CatalogLoadError, ShopifyAPIError, ShopifyGraphQLError
from framing_tool.order import OrderAccumulator
from framing_tool.services.shopify_client import (
    CUSTOMERS_QUERY,
    ORDER_CREATE_MUTATION,
    ShopifyClient,
    load_session_catalog,
)


class FakeResponse:
    def __init__(self, body=None, status_code=200, text=None):
        self._body = body
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self.text = text if text is not None else str(body)

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeSession:
    """Records posts and replays queued responses (or raises queued exceptions)."""

    def __init__(self, *responses):
        self.headers = {}
        self.calls = []
        self._responses = list(responses)

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def shop_settings(settings):
    return replace(settings, shop="frames.myshopify.com", access_token="shpat_test")


def _client(shop_settings, *responses):
    session = FakeSession(*responses)
    return ShopifyClient(shop_settings, session=session), session


def _products(*nodes):
    return FakeResponse({"data": {"products": {"edges": [{"node": n} for n in nodes]}}})


def test_session_headers_and_endpoint(shop_settings):
    client, session = _client(shop_settings, FakeResponse({"data": {"ok": True}}))

    assert client.graphql("{ shop { name } }") == {"ok": True}
    assert session.headers["X-Shopify-Access-Token"] == "shpat_test"
    assert session.headers["Content-Type"] == "application/json"
    assert session.calls[0]["url"] == "https://frames.myshopify.com/admin/api/2024-10/graphql.json"
    assert session.calls[0]["json"] == {"query": "{ shop { name } }", "variables": {}}


def test_graphql_requires_configured_shop(settings):
    client = ShopifyClient(settings, session=FakeSession())
    with pytest.raises(ShopifyAPIError):
        client.graphql("{ shop { name } }")


def test_http_error_status(shop_settings):
    client, _ = _client(shop_settings, FakeResponse(status_code=401, text="Invalid API key"))
    with pytest.raises(ShopifyAPIError) as excinfo:
        client.graphql("{ shop { name } }")
    assert excinfo.value.status_code == 401
    assert excinfo.value.details["body"] == "Invalid API key"


def test_transport_error(shop_settings):
    client, _ = _client(shop_settings, requests.ConnectionError("connection refused"))
    with pytest.raises(ShopifyAPIError):
        client.graphql("{ shop { name } }")


def test_non_json_body(shop_settings):
    client, _ = _client(shop_settings, FakeResponse(ValueError("no json"), text="<html>"))
    with pytest.raises(ShopifyAPIError):
        client.graphql("{ shop { name } }")


def test_top_level_graphql_errors(shop_settings):
    errors = [{"message": "Throttled"}]
    client, _ = _client(shop_settings, FakeResponse({"errors": errors}))
    with pytest.raises(ShopifyGraphQLError) as excinfo:
        client.graphql("{ shop { name } }")
    assert excinfo.value.errors == errors
    assert "Throttled" in excinfo.value.message


def test_graphql_errors_given_as_strings(shop_settings):
    client, _ = _client(shop_settings, FakeResponse({"errors": ["Access denied", {"message": "Throttled"}]}))
    with pytest.raises(ShopifyGraphQLError) as excinfo:
        client.graphql("{ shop { name } }")
    assert excinfo.value.message == "GraphQL errors: Access denied; Throttled"


def test_graphql_error_given_as_single_string(shop_settings):
    client, _ = _client(shop_settings, FakeResponse({"errors": "Not found"}))
    with pytest.raises(ShopifyGraphQLError) as excinfo:
        client.graphql("{ shop { name } }")
    assert excinfo.value.errors == ["Not found"]


def test_non_object_body(shop_settings):
    client, _ = _client(shop_settings, FakeResponse(["unexpected"]))
    with pytest.raises(ShopifyAPIError):
        client.graphql("{ shop { name } }")


def test_fetch_category_products_query(shop_settings):
    node = {"title": "Glass", "variants": {"edges": [{"node": {"title": "Regular", "price": "12.00"}}]}}
    client, session = _client(shop_settings, _products(node))

    nodes = client.fetch_category_products(Category.GLASS)

    assert nodes == [node]
    variables = session.calls[0]["json"]["variables"]
    assert variables["query"] == "product_type:glass"
    assert variables["first"] == shop_settings.products_per_category


def test_fetch_category_products_bad_shape(shop_settings):
    client, _ = _client(shop_settings, FakeResponse({"data": {"products": None}}))
    with pytest.raises(CatalogLoadError):
        client.fetch_category_products("mat")


def test_load_catalog_queries_every_category(shop_settings):
    responses = [_products() for _ in Category]
    responses[1] = _products({
        "title": "Glass",
        "variants": {"edges": [{"node": {"title": "Museum", "price": "45.00"}}]},
    })
    client, session = _client(shop_settings, *responses)

    catalog = client.load_catalog()

    assert len(session.calls) == len(Category)
    queried = [call["json"]["variables"]["query"] for call in session.calls]
    assert queried == [f"product_type:{c.value}" for c in Category]
    assert catalog.find_option(Category.GLASS, "Glass", "Museum").price == Decimal("45.00")


def test_search_customers(shop_settings):
    body = {"data": {"customers": {"edges": [
        {"node": {"id": "gid://shopify/Customer/1", "firstName": "Ada", "lastName": "Lovelace", "phone": "+15550001"}},
        {"node": {"id": "gid://shopify/Customer/2", "firstName": "Alan", "lastName": None, "phone": None}},
    ]}}}
    client, session = _client(shop_settings, FakeResponse(body))

    customers = client.search_customers(" ada ")

    assert session.calls[0]["json"]["query"] == CUSTOMERS_QUERY
    assert session.calls[0]["json"]["variables"] == {"query": "ada", "first": 10}
    assert customers[0].label == "Ada Lovelace (+15550001)"
    assert customers[0].admin_url == "shopify://admin/customers/1"
    assert customers[1].last_name == ""


def test_search_customers_skips_null_edges(shop_settings):
    body = {"data": {"customers": {"edges": [
        None,
        {"node": None},
        {"node": {"id": "gid://shopify/Customer/3", "firstName": "Grace", "lastName": "Hopper", "phone": None}},
    ]}}}
    client, _ = _client(shop_settings, FakeResponse(body))

    customers = client.search_customers("grace")
    assert [c.id for c in customers] == ["gid://shopify/Customer/3"]
    assert customers[0].phone == ""


def test_search_customers_blank_query_skips_request(shop_settings):
    client, session = _client(shop_settings)
    assert client.search_customers("   ") == []
    assert session.calls == []


def _payload(customer_id=None):
    accumulator = OrderAccumulator()
    accumulator.add_line_item(SelectionState(moulding_unit_price="2"), Decimal("192"))
    return accumulator.to_submission(customer_id=customer_id)


def test_create_order_success(shop_settings):
    body = {"data": {"orderCreate": {
        "order": {"id": "gid://shopify/Order/55", "name": "#1055"},
        "userErrors": [],
    }}}
    client, session = _client(shop_settings, FakeResponse(body))

    result = client.create_order(_payload("gid://shopify/Customer/1"))

    assert result.success
    assert result.order_name == "#1055"
    sent = session.calls[0]["json"]
    assert sent["query"] == ORDER_CREATE_MUTATION
    order = sent["variables"]["order"]
    assert order["customer"] == {"toAssociate": {"id": "gid://shopify/Customer/1"}}
    assert order["lineItems"][0]["priceSet"]["shopMoney"] == {"amount": "192.00", "currencyCode": "CAD"}


def test_create_order_user_errors_passed_through(shop_settings):
    body = {"data": {"orderCreate": {
        "order": None,
        "userErrors": [{"field": ["order", "lineItems", "0", "priceSet"], "message": "Price is invalid"}],
    }}}
    client, _ = _client(shop_settings, FakeResponse(body))

    result = client.create_order(_payload())

    assert not result.success
    assert result.order_id is None
    assert result.user_errors == [
        {"field": ["order", "lineItems", "0", "priceSet"], "message": "Price is invalid"},
    ]


def test_create_order_ignores_malformed_user_errors(shop_settings):
    body = {"data": {"orderCreate": {
        "order": None,
        "userErrors": ["bad entry", None, {"field": None, "message": "Customer not found"}],
    }}}
    client, _ = _client(shop_settings, FakeResponse(body))

    result = client.create_order(_payload())
    assert result.user_errors == [{"field": None, "message": "Customer not found"}]


def test_load_session_catalog_uses_file_without_shop(settings, catalog):
    from framing_tool.data.catalog_loader import save_catalog_file

    save_catalog_file(catalog, settings.catalog_path)
    assert load_session_catalog(settings) == catalog


def test_load_session_catalog_uses_shopify_with_shop(shop_settings):
    client, session = _client(shop_settings, *[_products() for _ in Category])
    catalog = load_session_catalog(shop_settings, client)
    assert catalog.is_empty
    assert len(session.calls) == len(Category)
