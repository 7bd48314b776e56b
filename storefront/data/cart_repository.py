"""
Session-scoped shopping cart.

A CartRepository is bound to one SessionId and only ever reads or writes that
session's line items. Store failures are logged and reported as ``False`` (or
an empty cart); they are never raised to the caller.
"""
from typing import List, Optional

from storefront.core.session import SessionId, require_session
from storefront.data.cart_store import get_cart_store
from storefront.data.errors import StoreError
from storefront.data.models import CartItem
from storefront.utils.logger import get_logger

logger = get_logger("data.cart")


class CartRepository:
    def __init__(self, session: SessionId, store=None) -> None:
        self.session = require_session(session)
        self.store = store if store is not None else get_cart_store()

    def add_to_cart(self, product_id: str) -> bool:
        """Add one unit of ``product_id``, merging into an existing line item."""
        logger.info("cart: operation=add_to_cart session=%r product_id=%s", self.session, product_id)
        try:
            self.store.add_item(self.session, str(product_id))
        except StoreError as e:
            logger.error("cart: operation=add_to_cart session=%r product_id=%s result=error error=%s", self.session, product_id, e)
            return False
        return True

    def get_cart_items(self) -> List[CartItem]:
        try:
            rows = self.store.list_items(self.session)
            return [CartItem.from_row(row) for row in rows]
        except StoreError as e:
            logger.error("cart: operation=get_cart_items session=%r result=error error=%s", self.session, e)
            return []
        except (KeyError, TypeError, ValueError) as e:
            logger.error("cart: operation=get_cart_items session=%r result=error error=malformed row: %s", self.session, e)
            return []

    def update_cart_item_quantity(self, cart_item_id: str, quantity: int) -> bool:
        """Set the quantity; zero or less removes the line item."""
        if quantity <= 0:
            return self.remove_cart_item(cart_item_id)
        logger.info("cart: operation=update_quantity session=%r cart_item_id=%s quantity=%s", self.session, cart_item_id, quantity)
        try:
            self.store.set_quantity(self.session, str(cart_item_id), int(quantity))
        except StoreError as e:
            logger.error("cart: operation=update_quantity session=%r cart_item_id=%s result=error error=%s", self.session, cart_item_id, e)
            return False
        return True

    def remove_cart_item(self, cart_item_id: str) -> bool:
        """Delete the line item. Removing an absent id succeeds and changes nothing."""
        logger.info("cart: operation=remove_cart_item session=%r cart_item_id=%s", self.session, cart_item_id)
        try:
            self.store.delete_item(self.session, str(cart_item_id))
        except StoreError as e:
            logger.error("cart: operation=remove_cart_item session=%r cart_item_id=%s result=error error=%s", self.session, cart_item_id, e)
            return False
        return True

    def get_cart_count(self, items: Optional[List[CartItem]] = None) -> int:
        """Total units in the cart, derived from the current line items."""
        if items is None:
            items = self.get_cart_items()
        return sum(item.quantity for item in items)

    def get_cart_total(self, items: Optional[List[CartItem]] = None) -> float:
        if items is None:
            items = self.get_cart_items()
        return sum(item.line_total for item in items)
