#!/usr/bin/env python
"""
Export the live Shopify catalog to a JSON snapshot for offline use.

Usage:
    SHOPIFY_SHOP=my-shop.myshopify.com SHOPIFY_ACCESS_TOKEN=... \
        python scripts/export_catalog.py [--output data/catalog.json] [--csv catalog.csv]
"""
import argparse
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from framing_tool.config.settings import get_settings
from framing_tool.data.catalog_loader import catalog_summary, catalog_to_frame, save_catalog_file
from framing_tool.exceptions import FramingToolError
from framing_tool.logging_config import setup_logging
from framing_tool.services.shopify_client import ShopifyClient


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Export the Shopify catalog to JSON")
    parser.add_argument("--output", type=Path, default=settings.catalog_path)
    parser.add_argument("--csv", type=Path, default=None, help="Also write a flat CSV of all options")
    args = parser.parse_args()

    setup_logging(log_level=settings.log_level)

    if not settings.has_shop:
        print("ERROR: set SHOPIFY_SHOP and SHOPIFY_ACCESS_TOKEN first")
        sys.exit(1)

    print("=" * 60)
    print("CATALOG EXPORT")
    print("=" * 60)

    try:
        catalog = ShopifyClient(settings).load_catalog()
    except FramingToolError as e:
        print(f"\n❌ EXPORT FAILED: {e}")
        sys.exit(1)

    save_catalog_file(catalog, args.output)
    if args.csv:
        catalog_to_frame(catalog).to_csv(args.csv, index=False)

    print()
    print("Summary:")
    for category, count in catalog_summary(catalog).items():
        print(f"  {category}: {count} products")
    print(f"\n✅ Written to {args.output}")


if __name__ == "__main__":
    main()
