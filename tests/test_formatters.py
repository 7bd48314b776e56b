from storefront.api.formatters import format_cart, format_price, format_product, star_rating
from storefront.data.models import CartItem, Product


def make_product(**overrides):
    fields = dict(id="p-1", name="Apple iPhone 13", price=300000.0, brand_name="Apple")
    fields.update(overrides)
    return Product(**fields)


def test_format_price_thousands():
    assert format_price(300000, "₦") == "₦ 300,000"
    assert format_price(1234.5, "₦") == "₦ 1,234.50"
    assert format_price(None, "₦") == ""


def test_star_rating_floors():
    assert star_rating(4.6) == "★★★★"
    assert star_rating(None) == ""
    assert star_rating(0) == ""


def test_card_without_discount_has_no_badge():
    card = format_product(make_product(discount_percentage=0, original_price=350000.0))
    assert card["discount_badge"] is None
    assert card["original_price_display"] is None
    assert "text=Apple" in card["image_url"]


def test_card_with_discount():
    card = format_product(make_product(discount_percentage=14, original_price=350000.0, is_official_store=True))
    assert card["discount_badge"] == "14%"
    assert card["original_price_display"].endswith("350,000")
    assert card["official_store"] is True


def test_unbranded_product_placeholder():
    card = format_product(make_product(brand_name=None))
    assert "text=Phone" in card["image_url"]


def test_cart_view_totals():
    items = [
        CartItem(id="c-1", session_id="s", product_id="p-1", quantity=2, product=make_product()),
        CartItem(id="c-2", session_id="s", product_id="p-2", quantity=1,
                 product=make_product(id="p-2", name="Tecno Camon 19", price=95000.0)),
    ]
    view = format_cart(items)
    assert view["count"] == 3
    assert view["total"] == 695000
    assert view["total_display"].endswith("695,000")
    assert view["items"][0]["line_total_display"].endswith("600,000")


def test_empty_cart_view():
    view = format_cart([])
    assert view["items"] == []
    assert view["count"] == 0
    assert view["total"] == 0
