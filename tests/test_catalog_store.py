"""
Catalog query tests against the SQL store (in-memory SQLite).
"""

import pytest

from conftest import BRANDS, NEWEST_FIRST, PRODUCTS
from storefront.data.catalog_store import SQLCatalogStore
from storefront.data.database import Base
from storefront.data.filters import FilterSpec, compose_predicates


def ids(products):
    return [p.id for p in products]


def expected_ids(filters):
    """Brute-force the expected result from the fixture rows."""
    brand_ids = [b["id"] for b in BRANDS if b["name"] in filters.brands]
    predicates = compose_predicates(filters, brand_ids)
    matching = {p["id"] for p in PRODUCTS if all(pred.matches(p) for pred in predicates)}
    return [pid for pid in NEWEST_FIRST if pid in matching]


class TestFetchProducts:
    def test_no_filters_returns_everything_newest_first(self, catalog):
        assert ids(catalog.fetch_products(FilterSpec())) == NEWEST_FIRST

    def test_brand_and_price_range(self, catalog):
        filters = FilterSpec(brands={"Apple"}, min_price=200000, max_price=5000000)
        assert ids(catalog.fetch_products(filters)) == ["p-iphone"]

    def test_price_range_is_inclusive(self, catalog):
        filters = FilterSpec(min_price=150000, max_price=300000)
        assert ids(catalog.fetch_products(filters)) == ["p-galaxy-a", "p-iphone", "p-galaxy", "p-iphone-se"]

    def test_single_price_bound_is_ignored(self, catalog):
        assert ids(catalog.fetch_products(FilterSpec(min_price=200000))) == NEWEST_FIRST
        assert ids(catalog.fetch_products(FilterSpec(max_price=100))) == NEWEST_FIRST

    def test_colors(self, catalog):
        filters = FilterSpec(colors={"Black"})
        assert ids(catalog.fetch_products(filters)) == ["p-galaxy-a", "p-iphone", "p-camon"]

    def test_discount_only(self, catalog):
        filters = FilterSpec(discount_only=True)
        assert "p-galaxy" not in ids(catalog.fetch_products(filters))

    def test_min_discount_with_discount_only(self, catalog):
        filters = FilterSpec(discount_only=True, discount_percentage=15)
        assert ids(catalog.fetch_products(filters)) == ["p-galaxy-a", "p-iphone-se"]

    def test_min_rating_excludes_unrated(self, catalog):
        filters = FilterSpec(rating=4.5)
        assert ids(catalog.fetch_products(filters)) == ["p-galaxy-a", "p-iphone"]

    def test_screen_sizes(self, catalog):
        filters = FilterSpec(screen_sizes={6.1, 6.8})
        assert ids(catalog.fetch_products(filters)) == ["p-iphone", "p-camon"]

    def test_search_is_case_insensitive_substring(self, catalog):
        filters = FilterSpec(search="GALAXY")
        assert ids(catalog.fetch_products(filters)) == ["p-galaxy-a", "p-galaxy"]

    def test_search_wildcards_are_literal(self, catalog):
        assert catalog.fetch_products(FilterSpec(search="%")) == []

    def test_unknown_brand_yields_nothing_without_error(self, catalog):
        result = catalog.search_products(FilterSpec(brands={"Nokia"}))
        assert result.products == []
        assert not result.failed

    def test_brand_and_category_names_joined(self, catalog):
        product = catalog.fetch_products(FilterSpec(search="iPhone 13"))[0]
        assert product.brand_name == "Apple"
        assert product.category_name == "Mobile Phones"
        assert product.is_official_store is True

    @pytest.mark.parametrize("filters", [
        FilterSpec(brands={"Apple", "Samsung"}, colors={"Black"}),
        FilterSpec(brands={"Samsung"}, min_price=200000, max_price=260000),
        FilterSpec(discount_only=True, rating=4.0, screen_sizes={6.1, 6.4, 4.7}),
        FilterSpec(colors={"Black", "White"}, search="a"),
        FilterSpec(brands={"Tecno", "Nokia"}, discount_percentage=5),
    ])
    def test_results_satisfy_every_predicate(self, catalog, filters):
        assert ids(catalog.fetch_products(filters)) == expected_ids(filters)


class TestFailures:
    def test_backend_failure_returns_empty_and_reports(self, engine):
        store = SQLCatalogStore(engine)
        Base.metadata.drop_all(engine)
        result = store.search_products(FilterSpec())
        assert result.products == []
        assert result.failed
        assert store.fetch_products(FilterSpec()) == []

    def test_failed_brand_lookup_resolves_nothing(self, engine):
        store = SQLCatalogStore(engine)
        Base.metadata.drop_all(engine)
        assert store.resolve_brand_ids(["Apple"]) == []
        result = store.search_products(FilterSpec(brands={"Apple"}))
        assert result.products == []
        assert not result.failed

    def test_get_brands_failure_is_empty(self, engine):
        store = SQLCatalogStore(engine)
        Base.metadata.drop_all(engine)
        assert store.get_brands() == []


def test_get_brands_sorted_by_name(catalog):
    assert [b.name for b in catalog.get_brands()] == ["Apple", "Samsung", "Tecno"]
