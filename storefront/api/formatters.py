from typing import Any, Dict, List, Optional
from urllib.parse import quote

from storefront.core.config import get_config
from storefront.data.models import CartItem, Product

PLACEHOLDER_URL = "https://placehold.co/{size}/f0f0f0/999999?text={text}"


def format_price(value: Optional[float], symbol: Optional[str] = None) -> str:
    """Whole-unit price with thousands separators, e.g. '₦ 300,000'."""
    if symbol is None:
        symbol = get_config().currency_symbol
    if value is None:
        return ""
    amount = float(value)
    text = f"{amount:,.0f}" if amount.is_integer() else f"{amount:,.2f}"
    return f"{symbol} {text}"


def star_rating(rating: Optional[float]) -> str:
    """One star per whole rating point; unrated products get no stars."""
    if not rating:
        return ""
    return "★" * int(rating)


def placeholder_image(text: str, size: str) -> str:
    return PLACEHOLDER_URL.format(size=size, text=quote(text))


def format_product(product: Product) -> Dict[str, Any]:
    """
    Display fields for a product card.

    The discount badge and the original price only show when the product is
    actually discounted.
    """
    card: Dict[str, Any] = {
        "id": product.id,
        "name": product.name,
        "brand": product.brand_name,
        "category": product.category_name,
        "price": product.price,
        "price_display": format_price(product.price),
        "official_store": product.is_official_store,
        "image_url": placeholder_image(product.brand_name or "Phone", "280x200"),
        "color": product.color,
        "screen_size": product.screen_size,
        "rating": product.rating,
        "stars": star_rating(product.rating),
        "review_count": product.review_count,
        "discount_badge": None,
        "original_price_display": None,
    }
    if product.has_discount:
        card["discount_badge"] = f"{product.discount_percentage}%"
        card["original_price_display"] = format_price(product.original_price)
    return card


def format_cart(items: List[CartItem]) -> Dict[str, Any]:
    """Cart view: line items with their totals, unit count and grand total."""
    lines = []
    total = 0.0
    for item in items:
        product = item.product
        total += item.line_total
        lines.append({
            "id": item.id,
            "product_id": item.product_id,
            "name": product.name if product else None,
            "price_display": format_price(product.price) if product else "",
            "quantity": item.quantity,
            "line_total_display": format_price(item.line_total),
            "image_url": placeholder_image(product.name[:10] if product else "", "80x80"),
        })
    return {
        "items": lines,
        "count": sum(item.quantity for item in items),
        "total": total,
        "total_display": format_price(total),
    }
