"""
Cart line-item storage.

cart_items table:
  id uuid PK default gen_random_uuid()
  session_id text not null
  product_id uuid not null FK products(id) ON DELETE CASCADE
  quantity integer not null default 1
  created_at timestamptz default now()
  updated_at timestamptz default now()
  UNIQUE (session_id, product_id)

Adding a product is an upsert-with-increment so a (session, product) pair never
gets two rows. Every statement filters on session_id, including updates and
deletes by line-item id. Methods raise StoreError; CartRepository turns that
into a failed result.
Prefers DATABASE_URL (SQLAlchemy, native ON CONFLICT) over the Supabase REST API
(compare-and-swap loop).
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from storefront.core.config import get_config
from storefront.core.session import SessionId, require_session
from storefront.data.database import create_session_factory, get_engine
from storefront.data.errors import ConflictError, StoreError
from storefront.data.tables import CartItemRow
from storefront.utils.logger import get_logger
from storefront.utils.supabase_client import SupabaseClient, get_supabase_client

logger = get_logger("data.cart_store")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SupabaseCartStore:
    """
    Cart line items against Supabase's cart_items table.
    All methods take the SessionId that owns the cart.
    """

    def __init__(self, client: Optional[SupabaseClient] = None, max_retries: Optional[int] = None) -> None:
        self.client = client or get_supabase_client()
        self.max_retries = max_retries if max_retries is not None else get_config().cart_max_retries

    def add_item(self, session: SessionId, product_id: str) -> None:
        """
        Create the line item with quantity 1 or bump the existing one by 1.

        The increment is a conditional PATCH on the quantity we read; if another
        writer got there first nothing matches and we read again. An insert that
        hits the unique (session_id, product_id) key is retried as an increment.
        """
        token = require_session(session).token
        for attempt in range(1, self.max_retries + 1):
            rows = self.client.select(
                "cart_items",
                {"session_id": f"eq.{token}", "product_id": f"eq.{product_id}"},
                select="id,quantity",
            )
            now = _now().isoformat()
            if rows:
                row = rows[0]
                updated = self.client.update(
                    "cart_items",
                    {
                        "id": f"eq.{row['id']}",
                        "session_id": f"eq.{token}",
                        "quantity": f"eq.{row['quantity']}",
                    },
                    {"quantity": int(row["quantity"]) + 1, "updated_at": now},
                )
                if updated:
                    return
                logger.info("supabase_cart: method=add_item product_id=%s attempt=%s result=stale_quantity", product_id, attempt)
            else:
                try:
                    self.client.insert(
                        "cart_items",
                        {"session_id": token, "product_id": product_id, "quantity": 1, "updated_at": now},
                    )
                    return
                except ConflictError:
                    logger.info("supabase_cart: method=add_item product_id=%s attempt=%s result=insert_conflict", product_id, attempt)
        raise StoreError(f"add_item for product {product_id} still contended after {self.max_retries} attempts")

    def list_items(self, session: SessionId) -> List[Dict[str, Any]]:
        token = require_session(session).token
        return self.client.select(
            "cart_items",
            {"session_id": f"eq.{token}"},
            select="*,product:products(*)",
            order="created_at.asc",
        )

    def set_quantity(self, session: SessionId, cart_item_id: str, quantity: int) -> None:
        token = require_session(session).token
        self.client.update(
            "cart_items",
            {"id": f"eq.{cart_item_id}", "session_id": f"eq.{token}"},
            {"quantity": quantity, "updated_at": _now().isoformat()},
        )

    def delete_item(self, session: SessionId, cart_item_id: str) -> None:
        token = require_session(session).token
        self.client.delete("cart_items", {"id": f"eq.{cart_item_id}", "session_id": f"eq.{token}"})


# ---------------------------------------------------------------------------
# SQLAlchemy cart store (DATABASE_URL)
# ---------------------------------------------------------------------------

class SQLCartStore:
    """
    Cart line items via a direct database connection.
    Same interface as SupabaseCartStore.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._sessions = create_session_factory(engine)

    def _upsert_statement(self, values: Dict[str, Any]):
        dialect = self._engine.dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            raise StoreError(f"no atomic upsert for dialect {dialect}")
        stmt = insert(CartItemRow).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=["session_id", "product_id"],
            set_={"quantity": CartItemRow.quantity + 1, "updated_at": values["updated_at"]},
        )

    def add_item(self, session: SessionId, product_id: str) -> None:
        token = require_session(session).token
        stmt = self._upsert_statement({
            "id": str(uuid.uuid4()),
            "session_id": token,
            "product_id": product_id,
            "quantity": 1,
            "updated_at": _now(),
        })
        try:
            with self._sessions.begin() as db:
                db.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreError(f"add_item failed: {e}") from e

    def list_items(self, session: SessionId) -> List[Dict[str, Any]]:
        token = require_session(session).token
        stmt = (
            select(CartItemRow)
            .where(CartItemRow.session_id == token)
            .order_by(CartItemRow.created_at.asc(), CartItemRow.id)
        )
        try:
            with self._sessions() as db:
                rows = db.execute(stmt).unique().scalars().all()
                return [row.to_row() for row in rows]
        except SQLAlchemyError as e:
            raise StoreError(f"list_items failed: {e}") from e

    def set_quantity(self, session: SessionId, cart_item_id: str, quantity: int) -> None:
        token = require_session(session).token
        stmt = (
            update(CartItemRow)
            .where(CartItemRow.id == cart_item_id, CartItemRow.session_id == token)
            .values(quantity=quantity, updated_at=_now())
        )
        try:
            with self._sessions.begin() as db:
                db.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreError(f"set_quantity failed: {e}") from e

    def delete_item(self, session: SessionId, cart_item_id: str) -> None:
        token = require_session(session).token
        stmt = delete(CartItemRow).where(CartItemRow.id == cart_item_id, CartItemRow.session_id == token)
        try:
            with self._sessions.begin() as db:
                db.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreError(f"delete_item failed: {e}") from e


_cart_store: Optional[Any] = None


def get_cart_store():
    """Return the shared cart store (SQLAlchemy preferred, REST fallback)."""
    global _cart_store
    if _cart_store is not None:
        return _cart_store
    engine = get_engine()
    if engine is not None:
        logger.info("Using SQLAlchemy cart store via DATABASE_URL")
        _cart_store = SQLCartStore(engine)
    else:
        _cart_store = SupabaseCartStore()
    return _cart_store
