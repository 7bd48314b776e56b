"""
Configuration management for the storefront.

Loads settings from YAML config file, applies environment overrides and
provides typed access.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import yaml

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()


def _project_root() -> Path:
    """Return project root (parent of storefront package)."""
    return Path(__file__).resolve().parent.parent.parent


DEFAULT_CONFIG_PATH = _project_root() / "config" / "default.yaml"
DEFAULT_SESSION_FILE = Path.home() / ".storefront" / "session.json"


@dataclass
class StorefrontConfig:
    """Configuration for the storefront."""

    # Backend
    supabase_url: str = ""
    supabase_key: str = ""
    database_url: str = ""              # Preferred over the REST API when set
    request_timeout: float = 10.0       # Seconds, applied at the transport boundary

    # Cart
    cart_max_retries: int = 5           # Compare-and-swap attempts per add on the REST backend

    # Presentation
    search_debounce_ms: int = 500
    price_ceiling: int = 10_000_000     # Upper bound used when a price range is applied without one
    currency_symbol: str = "₦"

    # Session identity
    session_file: str = str(DEFAULT_SESSION_FILE)

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "StorefrontConfig":
        """Load configuration from YAML file, then apply environment overrides."""
        path = config_path or DEFAULT_CONFIG_PATH
        data = {}
        if path.exists():
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}

        backend_config = data.get('backend', {})
        cart_config = data.get('cart', {})
        presentation_config = data.get('presentation', {})
        session_config = data.get('session', {})

        config = cls(
            supabase_url=backend_config.get('supabase_url', ''),
            supabase_key=backend_config.get('supabase_key', ''),
            database_url=backend_config.get('database_url', ''),
            request_timeout=float(backend_config.get('request_timeout', 10.0)),
            cart_max_retries=int(cart_config.get('max_retries', 5)),
            search_debounce_ms=int(presentation_config.get('search_debounce_ms', 500)),
            price_ceiling=int(presentation_config.get('price_ceiling', 10_000_000)),
            currency_symbol=presentation_config.get('currency_symbol', '₦'),
            session_file=os.path.expanduser(session_config.get('file', str(DEFAULT_SESSION_FILE))),
        )
        return config.with_env_overrides()

    def with_env_overrides(self) -> "StorefrontConfig":
        """Environment variables win over the YAML file."""
        self.supabase_url = os.environ.get("SUPABASE_URL", self.supabase_url)
        self.supabase_key = (
            os.environ.get("SUPABASE_SERVICE_ROLE_KEY")
            or os.environ.get("SUPABASE_KEY")
            or self.supabase_key
        )
        self.database_url = os.environ.get("DATABASE_URL", self.database_url)
        self.session_file = os.environ.get("STOREFRONT_SESSION_FILE", self.session_file)
        return self


# Global config instance
_config: Optional[StorefrontConfig] = None


def get_config() -> StorefrontConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = StorefrontConfig.from_yaml()
    return _config


def set_config(config: StorefrontConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
