#!/usr/bin/env python3
"""
Command-line storefront client.

Usage:
    storefront products --brand Apple --price 200000-5000000
    storefront products --search galaxy --discount-only
    storefront brands
    storefront cart add <product_id>
    storefront cart list
    storefront cart update <cart_item_id> <quantity>
    storefront cart remove <cart_item_id>
    storefront cart count
    storefront serve --port 8000

The cart belongs to a session id kept in ``~/.storefront/session.json``
(override with STOREFRONT_SESSION_FILE).
"""
import argparse
import sys
from typing import List, Optional

from storefront.api.formatters import format_cart, format_product
from storefront.core.config import get_config
from storefront.core.session import FileSessionStorage, get_or_create_session_id
from storefront.data.cart_repository import CartRepository
from storefront.data.catalog_store import get_catalog_store
from storefront.data.filters import FilterSpec, parse_price_range, update_filters
from storefront.data.models import Product
from storefront.utils.logger import configure_logging


def format_product_line(product: Product, idx: int) -> str:
    """Format a product for display."""
    card = format_product(product)
    line = f"  {idx}. {card['name']} - {card['price_display']}"
    if card["discount_badge"]:
        line += f" (was {card['original_price_display']}, -{card['discount_badge']})"
    if card["stars"]:
        line += f" {card['stars']} ({card['review_count']})"
    if card["official_store"]:
        line += " [Official Store]"
    return f"{line}\n     id: {card['id']}"


def filters_from_args(args: argparse.Namespace) -> FilterSpec:
    filters = FilterSpec()
    changes = {
        "brands": args.brand or [],
        "colors": args.color or [],
        "screen_sizes": args.screen_size or [],
        "discount_only": args.discount_only,
        "discount_percentage": args.min_discount,
        "rating": args.min_rating,
        "search": args.search or "",
    }
    if args.price:
        changes["min_price"], changes["max_price"] = parse_price_range(args.price, get_config().price_ceiling)
    return update_filters(filters, **changes)


def cmd_products(args: argparse.Namespace) -> int:
    try:
        filters = filters_from_args(args)
    except ValueError as e:
        print(f"Invalid filter: {e}", file=sys.stderr)
        return 2

    result = get_catalog_store().search_products(filters)
    print("=" * 60)
    print("PRODUCTS")
    print("=" * 60)
    if result.failed:
        print(f"Could not load products: {result.error}")
        return 1
    if not result.products:
        print("No products found")
        return 0
    for i, product in enumerate(result.products, 1):
        print(format_product_line(product, i))
    print(f"\nTotal: {len(result.products)} products")
    return 0


def cmd_brands(args: argparse.Namespace) -> int:
    for brand in get_catalog_store().get_brands():
        print(brand.name)
    return 0


def _cart() -> CartRepository:
    session = get_or_create_session_id(FileSessionStorage(get_config().session_file))
    return CartRepository(session)


def cmd_cart(args: argparse.Namespace) -> int:
    cart = _cart()

    if args.cart_command == "add":
        ok = cart.add_to_cart(args.product_id)
        print("Added!" if ok else "Could not add to cart")
        return 0 if ok else 1

    if args.cart_command == "update":
        ok = cart.update_cart_item_quantity(args.cart_item_id, args.quantity)
        print("Updated" if ok else "Could not update cart")
        return 0 if ok else 1

    if args.cart_command == "remove":
        ok = cart.remove_cart_item(args.cart_item_id)
        print("Removed" if ok else "Could not remove item")
        return 0 if ok else 1

    if args.cart_command == "count":
        print(cart.get_cart_count())
        return 0

    view = format_cart(cart.get_cart_items())
    if not view["items"]:
        print("Your cart is empty")
        return 0
    for line in view["items"]:
        print(f"  {line['quantity']} x {line['name']} @ {line['price_display']} = {line['line_total_display']}")
        print(f"     id: {line['id']}")
    print(f"\nItems: {view['count']}  Total: {view['total_display']}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn
    uvicorn.run("storefront.api.server:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="storefront", description="Storefront catalog and cart client")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for diagnostics on stderr (default: LOG_LEVEL or INFO)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    products = sub.add_parser("products", help="List products matching filters")
    products.add_argument("--brand", action="append", help="Brand name (repeatable)")
    products.add_argument("--color", action="append", help="Color (repeatable)")
    products.add_argument("--price", type=str, help="Price range MIN-MAX; a blank side takes the default bound")
    products.add_argument("--discount-only", action="store_true", help="Only discounted products")
    products.add_argument("--min-discount", type=int, help="Minimum discount percentage")
    products.add_argument("--min-rating", type=float, help="Minimum rating")
    products.add_argument("--screen-size", type=float, action="append", help="Screen size (repeatable)")
    products.add_argument("--search", type=str, help="Name contains (case-insensitive)")
    products.set_defaults(func=cmd_products)

    brands = sub.add_parser("brands", help="List brands")
    brands.set_defaults(func=cmd_brands)

    cart = sub.add_parser("cart", help="Manage this session's cart")
    cart_sub = cart.add_subparsers(dest="cart_command", required=True)
    cart_sub.add_parser("list", help="Show cart items and total")
    cart_sub.add_parser("count", help="Number of units in the cart")
    add = cart_sub.add_parser("add", help="Add one unit of a product")
    add.add_argument("product_id")
    update = cart_sub.add_parser("update", help="Set a line item's quantity (0 removes it)")
    update.add_argument("cart_item_id")
    update.add_argument("quantity", type=int)
    remove = cart_sub.add_parser("remove", help="Remove a line item")
    remove.add_argument("cart_item_id")
    cart.set_defaults(func=cmd_cart)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_level:
        configure_logging(args.log_level)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
