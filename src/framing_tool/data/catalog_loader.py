"""
Catalog Loader - builds the session catalog snapshot.

Sources:
- Shopify product query results (one response per category)
- A JSON snapshot on disk, for running without a store connection

Also flattens the catalog into a pandas DataFrame for display and export.
"""
import json
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

import pandas as pd

from ..engine.models import CatalogOption, CatalogProduct, CatalogSnapshot, Category
from ..engine.numbers import parse_decimal
from ..exceptions import CatalogLoadError
from ..logging_config import get_logger

logger = get_logger(__name__)


def products_from_nodes(nodes: Iterable[Mapping[str, Any]]) -> tuple[CatalogProduct, ...]:
    """
    Convert Shopify product nodes into catalog products.

    Each node is ``{title, variants: {edges: [{node: {title, price}}]}}``; the
    variant title becomes the option title and its price the option price.
    Products repeating an earlier title are dropped.
    """
    products = []
    seen = set()
    for node in nodes:
        if not node:
            continue
        title = node.get("title") or ""
        if title in seen:
            logger.warning(f"Duplicate catalog product '{title}' ignored")
            continue
        seen.add(title)

        edges = (node.get("variants") or {}).get("edges") or []
        options = tuple(
            CatalogOption(
                option_title=(edge.get("node") or {}).get("title") or "",
                price=parse_decimal((edge.get("node") or {}).get("price")),
            )
            for edge in edges
        )
        products.append(CatalogProduct(title=title, options=options))
    return tuple(products)


def snapshot_from_product_data(product_data: Mapping[str, Iterable[Mapping[str, Any]]]) -> CatalogSnapshot:
    """Build a snapshot from ``{category: [product node, ...]}``. Missing categories are empty."""
    return CatalogSnapshot(**{
        c.value: products_from_nodes(product_data.get(c.value) or [])
        for c in Category
    })


def load_catalog_file(path: Path) -> CatalogSnapshot:
    """
    Load a catalog snapshot saved with save_catalog_file().

    Raises:
        CatalogLoadError: if the file is missing or not valid catalog JSON
    """
    path = Path(path)
    if not path.exists():
        raise CatalogLoadError(f"Catalog file not found at {path}", source=str(path))
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogLoadError(f"Could not read catalog file: {e}", source=str(path)) from e

    if not isinstance(data, dict):
        raise CatalogLoadError("Catalog file must contain an object keyed by category", source=str(path))

    catalog = CatalogSnapshot.from_dict(data)
    logger.info(f"Loaded catalog from {path}: {catalog_summary(catalog)}")
    return catalog


def save_catalog_file(catalog: CatalogSnapshot, path: Path) -> Path:
    """Write a catalog snapshot as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(catalog.to_dict(), f, indent=2)
    logger.info(f"Saved catalog to {path}")
    return path


def catalog_summary(catalog: CatalogSnapshot) -> dict[str, int]:
    """Product count per category."""
    return {c.value: len(catalog.products(c)) for c in Category}


def catalog_to_frame(catalog: CatalogSnapshot, category: Optional[Category | str] = None) -> pd.DataFrame:
    """
    Flatten the catalog into one row per option.

    Columns: Category, Product, Option, Price
    """
    categories = [Category(category)] if category else list(Category)
    rows = [
        {
            'Category': c.value,
            'Product': product.title,
            'Option': option.option_title,
            'Price': float(option.price),
        }
        for c in categories
        for product in catalog.products(c)
        for option in product.options
    ]
    return pd.DataFrame(rows, columns=['Category', 'Product', 'Option', 'Price'])
