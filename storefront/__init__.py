"""
Storefront - product catalog and session cart

A small e-commerce storefront with:
- Multi-predicate product filtering against Supabase or a SQL database
- A session-scoped shopping cart with merge-on-add line items
- A FastAPI JSON API and a command-line client
"""

from storefront.core.config import StorefrontConfig, get_config, set_config
from storefront.core.session import SessionId, get_or_create_session_id
from storefront.data.cart_repository import CartRepository
from storefront.data.catalog_store import CatalogResult, get_catalog_store
from storefront.data.filters import FilterSpec, update_filters
from storefront.data.live_search import LiveSearch

__all__ = [
    'StorefrontConfig',
    'get_config',
    'set_config',
    'SessionId',
    'get_or_create_session_id',
    'CartRepository',
    'CatalogResult',
    'get_catalog_store',
    'FilterSpec',
    'update_filters',
    'LiveSearch',
]

__version__ = '0.1.0'
