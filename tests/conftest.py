"""Pytest configuration for storefront tests."""

from datetime import datetime, timedelta

import pytest

from storefront.core.session import SessionId
from storefront.data.cart_store import SQLCartStore
from storefront.data.catalog_store import SQLCatalogStore
from storefront.data.database import create_db_engine, create_session_factory, init_db
from storefront.data.tables import BrandRow, CategoryRow, ProductRow


BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)

BRANDS = [
    {"id": "b-apple", "name": "Apple"},
    {"id": "b-samsung", "name": "Samsung"},
    {"id": "b-tecno", "name": "Tecno"},
]

CATEGORIES = [
    {"id": "c-phones", "name": "Mobile Phones"},
]

# ---------------------------------------------------------------------------
# Catalog fixture. created_at offsets give the newest-first order:
# p-galaxy-a, p-iphone, p-galaxy, p-iphone-se, p-camon
# ---------------------------------------------------------------------------

PRODUCTS = [
    {
        "id": "p-iphone", "name": "Apple iPhone 13", "price": 300000.0, "original_price": 350000.0,
        "discount_percentage": 14, "rating": 4.6, "review_count": 120, "color": "Black",
        "screen_size": 6.1, "brand_id": "b-apple", "category_id": "c-phones",
        "is_official_store": True, "created_at": BASE_TIME + timedelta(days=3),
    },
    {
        "id": "p-galaxy", "name": "Samsung Galaxy S21", "price": 300000.0, "original_price": None,
        "discount_percentage": 0, "rating": 4.2, "review_count": 80, "color": "Blue",
        "screen_size": 6.2, "brand_id": "b-samsung", "category_id": "c-phones",
        "is_official_store": False, "created_at": BASE_TIME + timedelta(days=2),
    },
    {
        "id": "p-iphone-se", "name": "Apple iPhone SE", "price": 150000.0, "original_price": 180000.0,
        "discount_percentage": 17, "rating": 3.9, "review_count": 40, "color": "White",
        "screen_size": 4.7, "brand_id": "b-apple", "category_id": "c-phones",
        "is_official_store": True, "created_at": BASE_TIME + timedelta(days=1),
    },
    {
        "id": "p-camon", "name": "Tecno Camon 19", "price": 95000.0, "original_price": 100000.0,
        "discount_percentage": 5, "rating": None, "review_count": 0, "color": "Black",
        "screen_size": 6.8, "brand_id": "b-tecno", "category_id": "c-phones",
        "is_official_store": False, "created_at": BASE_TIME,
    },
    {
        "id": "p-galaxy-a", "name": "Samsung Galaxy A54", "price": 250000.0, "original_price": 300000.0,
        "discount_percentage": 17, "rating": 4.8, "review_count": 200, "color": "Black",
        "screen_size": 6.4, "brand_id": "b-samsung", "category_id": "c-phones",
        "is_official_store": True, "created_at": BASE_TIME + timedelta(days=4),
    },
]

NEWEST_FIRST = ["p-galaxy-a", "p-iphone", "p-galaxy", "p-iphone-se", "p-camon"]


def seed_catalog(engine) -> None:
    sessions = create_session_factory(engine)
    with sessions.begin() as db:
        db.add_all([BrandRow(**b) for b in BRANDS])
        db.add_all([CategoryRow(**c) for c in CATEGORIES])
        db.add_all([ProductRow(**p) for p in PRODUCTS])


@pytest.fixture
def engine():
    """In-memory SQLite database with the schema and the fixture catalog."""
    eng = create_db_engine("sqlite://")
    init_db(eng)
    seed_catalog(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def catalog(engine):
    return SQLCatalogStore(engine)


@pytest.fixture
def cart_store(engine):
    return SQLCartStore(engine)


@pytest.fixture
def session():
    return SessionId("session-aaaa-1111")


@pytest.fixture
def other_session():
    return SessionId("session-bbbb-2222")
