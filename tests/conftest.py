import os
import sys
from decimal import Decimal

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from framing_tool.config.settings import Settings
from framing_tool.engine import CatalogOption, CatalogProduct, CatalogSnapshot, PricingEngine


def _product(title, *options):
    return CatalogProduct(
        title=title,
        options=tuple(CatalogOption(option_title=t, price=Decimal(p)) for t, p in options),
    )


@pytest.fixture
def settings(tmp_path):
    """Settings with no shop configured and default pricing rules."""
    return Settings(project_root=tmp_path, catalog_path=tmp_path / "catalog.json")


@pytest.fixture
def catalog():
    return CatalogSnapshot(
        readymade=(
            _product("Frame", ("8x10", "24.99"), ("11x14", "34.99")),
            _product("Gallery-Black", ("5x7", "19.00")),
        ),
        glass=(_product("Glass", ("Regular", "12.00"), ("Museum", "45.00")),),
        mat=(_product("Mat", ("Single", "15.00"), ("Double", "25.00")),),
        printing=(_product("Printing", ("Canvas", "30.00")),),
        mount=(_product("Mount", ("Foam Board", "8.00")),),
        extras=(
            _product("Fillet", ("Gold", "1.50"), ("Silver", "1.25")),
            _product("Spacer", ("Standard", "0.75")),
        ),
    )


@pytest.fixture
def engine(catalog, settings):
    return PricingEngine(catalog, settings)
