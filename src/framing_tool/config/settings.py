"""
Centralized settings and path configuration for the framing tool.

Values come from environment variables so the same code runs against a
development store, a production store or an offline catalog file.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 4 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    try:
        return int(value) if value else default
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    try:
        return float(value) if value else default
    except ValueError:
        return default


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path = field(default_factory=get_project_root)

    # Shopify Admin API
    shop: str = ""
    access_token: str = ""
    api_version: str = "2024-10"
    http_timeout: float = 30.0

    # Offline catalog snapshot (JSON), used when no shop is configured
    catalog_path: Optional[Path] = None

    # Order settings
    currency: str = "CAD"

    # Moulding is sold in sticks of this length
    moulding_stick_length: int = 96
    # False switches to raw perimeter × unit price billing
    moulding_min_order: bool = True

    # Customer search
    search_debounce_ms: int = 500
    search_limit: int = 10

    # Catalog query limits
    products_per_category: int = 10
    variants_per_product: int = 100

    # Logging
    log_level: str = "INFO"
    log_dir: Optional[Path] = None

    @property
    def graphql_url(self) -> str:
        """Admin GraphQL endpoint for the configured shop."""
        return f"https://{self.shop}/admin/api/{self.api_version}/graphql.json"

    @property
    def has_shop(self) -> bool:
        return bool(self.shop and self.access_token)

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the environment."""
        root = project_root or get_project_root()

        catalog_env = os.getenv('FRAMING_CATALOG_PATH')
        if catalog_env:
            catalog_path = Path(catalog_env)
        else:
            catalog_path = root / 'data' / 'catalog.json'

        log_dir_env = os.getenv('FRAMING_LOG_DIR')

        return cls(
            project_root=root,
            shop=os.getenv('SHOPIFY_SHOP', ''),
            access_token=os.getenv('SHOPIFY_ACCESS_TOKEN', ''),
            api_version=os.getenv('SHOPIFY_API_VERSION', '2024-10'),
            http_timeout=_env_float('FRAMING_HTTP_TIMEOUT', 30.0),
            catalog_path=catalog_path,
            currency=os.getenv('FRAMING_CURRENCY', 'CAD'),
            moulding_stick_length=_env_int('FRAMING_MOULDING_STICK_LENGTH', 96),
            moulding_min_order=_env_bool('FRAMING_MOULDING_MIN_ORDER', True),
            search_debounce_ms=_env_int('FRAMING_SEARCH_DEBOUNCE_MS', 500),
            log_level=os.getenv('FRAMING_LOG_LEVEL', 'INFO').upper(),
            log_dir=Path(log_dir_env) if log_dir_env else None,
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
