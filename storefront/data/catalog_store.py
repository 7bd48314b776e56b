"""
Catalog data access layer.

Turns a FilterSpec into a product query against either Supabase (PostgREST)
or a direct SQL connection, and returns Product rows with brand and category
names joined in for display. Queries never raise to the caller: failures are
logged and come back as an empty result carrying the error.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from storefront.data.database import create_session_factory, get_engine
from storefront.data.errors import StoreError
from storefront.data.filters import FilterSpec, Predicate, compose_predicates
from storefront.data.models import Brand, Product
from storefront.data.tables import BrandRow, ProductRow
from storefront.utils.logger import get_logger
from storefront.utils.supabase_client import SupabaseClient, get_supabase_client

logger = get_logger("data.catalog_store")


@dataclass
class CatalogResult:
    """Products matching a query, plus the error when the query failed."""
    products: List[Product] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def __len__(self) -> int:
        return len(self.products)


class CatalogStore:
    """Shared query flow; subclasses supply brand lookup and predicate rendering."""

    def fetch_products(self, filters: FilterSpec) -> List[Product]:
        """Products matching every active filter, newest first. Empty on failure."""
        return self.search_products(filters).products

    def search_products(self, filters: FilterSpec) -> CatalogResult:
        brand_ids: Sequence[str] = ()
        if filters.brands:
            brand_ids = self.resolve_brand_ids(filters.brands)

        predicates = compose_predicates(filters, brand_ids)
        if any(p.is_unsatisfiable for p in predicates):
            logger.info(
                "catalog: operation=fetch_products result=empty reason=unresolved_brands brands=%s",
                sorted(filters.brands),
            )
            return CatalogResult()

        try:
            rows = self._query_products(predicates)
            products = [Product.from_row(row) for row in rows]
        except StoreError as e:
            logger.error("catalog: operation=fetch_products result=error error=%s", e)
            return CatalogResult(error=str(e))
        except (KeyError, TypeError, ValueError) as e:
            logger.error("catalog: operation=fetch_products result=error error=malformed row: %s", e)
            return CatalogResult(error=f"malformed product row: {e}")

        logger.info("catalog: operation=fetch_products result=success count=%s", len(products))
        return CatalogResult(products=products)

    def resolve_brand_ids(self, names: Iterable[str]) -> List[str]:
        """Brand ids for ``names``. A failed lookup resolves to nothing."""
        names = sorted(names)
        try:
            ids = self._query_brand_ids(names)
        except StoreError as e:
            logger.error("catalog: operation=resolve_brand_ids names=%s result=error error=%s", names, e)
            return []
        if len(ids) < len(names):
            logger.info("catalog: operation=resolve_brand_ids names=%s resolved=%s", names, len(ids))
        return ids

    def get_brands(self) -> List[Brand]:
        """All brands ordered by name. Empty on failure."""
        try:
            return [Brand.from_row(row) for row in self._query_brands()]
        except StoreError as e:
            logger.error("catalog: operation=get_brands result=error error=%s", e)
            return []

    def _query_brand_ids(self, names: List[str]) -> List[str]:
        raise NotImplementedError

    def _query_products(self, predicates: List[Predicate]) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def _query_brands(self) -> List[Dict[str, Any]]:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Supabase (PostgREST) catalog
# ---------------------------------------------------------------------------

def _format_value(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _in_list(values: Iterable[Any]) -> str:
    """Render a PostgREST ``in`` list; strings are quoted so commas survive."""
    rendered = []
    for value in values:
        if isinstance(value, str):
            escaped = value.replace("\\", "\\\\").replace('"', '\\"')
            rendered.append(f'"{escaped}"')
        else:
            rendered.append(_format_value(value))
    return f"({','.join(rendered)})"


def _like_literal(text: str) -> str:
    """
    Escape LIKE wildcards so search text matches literally, as on the SQL
    backend. PostgREST turns every ``*`` into ``%``, so a literal ``*`` can only
    be sent as the one-character wildcard ``_``.
    """
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return escaped.replace("*", "_")


def render_postgrest_filter(predicate: Predicate) -> str:
    """``Predicate`` → PostgREST filter value, e.g. ``gte.200000``."""
    if predicate.op == "in":
        return f"in.{_in_list(predicate.value)}"
    if predicate.op == "ilike":
        return f"ilike.*{_like_literal(predicate.value)}*"
    if predicate.op in ("gt", "gte", "lte"):
        return f"{predicate.op}.{_format_value(predicate.value)}"
    raise ValueError(f"unknown predicate op {predicate.op!r}")


@dataclass
class SupabaseCatalogStore(CatalogStore):
    """
    Catalog backed by Supabase.
    """
    client: Optional[SupabaseClient] = None

    PRODUCT_SELECT = "*,brand:brands(name),category:categories(name)"

    def __post_init__(self) -> None:
        if self.client is None:
            self.client = get_supabase_client()

    def _query_brand_ids(self, names: List[str]) -> List[str]:
        rows = self.client.select("brands", {"name": f"in.{_in_list(names)}"}, select="id")
        return [str(row["id"]) for row in rows]

    def _query_products(self, predicates: List[Predicate]) -> List[Dict[str, Any]]:
        url_params: Dict[str, Any] = {}

        # Same column may carry several conditions (price gte + lte)
        def add_param(k: str, v: str):
            if k in url_params:
                if isinstance(url_params[k], list):
                    url_params[k].append(v)
                else:
                    url_params[k] = [url_params[k], v]
            else:
                url_params[k] = v

        for predicate in predicates:
            add_param(predicate.column, render_postgrest_filter(predicate))

        return self.client.select(
            "products", url_params, select=self.PRODUCT_SELECT, order="created_at.desc"
        )

    def _query_brands(self) -> List[Dict[str, Any]]:
        return self.client.select("brands", order="name.asc")


# ---------------------------------------------------------------------------
# SQL catalog (DATABASE_URL)
# ---------------------------------------------------------------------------

def predicate_clause(predicate: Predicate):
    """``Predicate`` → SQLAlchemy where-clause on the products table."""
    column = getattr(ProductRow, predicate.column)
    if predicate.op == "in":
        return column.in_(predicate.value)
    if predicate.op == "gt":
        return column > predicate.value
    if predicate.op == "gte":
        return column >= predicate.value
    if predicate.op == "lte":
        return column <= predicate.value
    if predicate.op == "ilike":
        return func.lower(column).contains(predicate.value.lower(), autoescape=True)
    raise ValueError(f"unknown predicate op {predicate.op!r}")


class SQLCatalogStore(CatalogStore):
    """Catalog via a direct database connection."""

    def __init__(self, engine: Engine) -> None:
        self._sessions = create_session_factory(engine)

    def _query_brand_ids(self, names: List[str]) -> List[str]:
        try:
            with self._sessions() as db:
                ids = db.execute(select(BrandRow.id).where(BrandRow.name.in_(names))).scalars().all()
        except SQLAlchemyError as e:
            raise StoreError(f"brand lookup failed: {e}") from e
        return [str(i) for i in ids]

    def _query_products(self, predicates: List[Predicate]) -> List[Dict[str, Any]]:
        stmt = select(ProductRow).order_by(ProductRow.created_at.desc())
        for predicate in predicates:
            stmt = stmt.where(predicate_clause(predicate))
        try:
            with self._sessions() as db:
                rows = db.execute(stmt).unique().scalars().all()
                return [row.to_row() for row in rows]
        except SQLAlchemyError as e:
            raise StoreError(f"product query failed: {e}") from e

    def _query_brands(self) -> List[Dict[str, Any]]:
        try:
            with self._sessions() as db:
                rows = db.execute(select(BrandRow).order_by(BrandRow.name)).scalars().all()
                return [{"id": row.id, "name": row.name} for row in rows]
        except SQLAlchemyError as e:
            raise StoreError(f"brand listing failed: {e}") from e


_catalog_store: Optional[CatalogStore] = None


def get_catalog_store() -> CatalogStore:
    """Return the shared catalog store (SQL preferred, Supabase REST otherwise)."""
    global _catalog_store
    if _catalog_store is None:
        engine = get_engine()
        if engine is not None:
            logger.info("Using SQL catalog store via DATABASE_URL")
            _catalog_store = SQLCatalogStore(engine)
        else:
            _catalog_store = SupabaseCatalogStore()
    return _catalog_store
