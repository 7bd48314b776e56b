# Data models for catalog and cart rows.
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _embedded_name(row: Dict[str, Any], key: str) -> Optional[str]:
    """PostgREST embeds come back as {"brand": {"name": ...}}; SQL rows are flat."""
    embedded = row.get(key)
    if isinstance(embedded, dict):
        return embedded.get("name")
    return row.get(f"{key}_name")


@dataclass
class Brand:
    id: str
    name: str

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Brand":
        return cls(id=str(row["id"]), name=row["name"])


@dataclass
class Product:
    """Catalog product, read-only from the storefront's side."""
    id: str
    name: str
    price: float
    original_price: Optional[float] = None
    discount_percentage: int = 0
    rating: Optional[float] = None
    review_count: int = 0
    color: Optional[str] = None
    screen_size: Optional[float] = None
    brand_id: Optional[str] = None
    category_id: Optional[str] = None
    is_official_store: bool = False
    created_at: Optional[datetime] = None
    brand_name: Optional[str] = None
    category_name: Optional[str] = None

    @property
    def has_discount(self) -> bool:
        return (self.discount_percentage or 0) > 0

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Product":
        return cls(
            id=str(row["id"]),
            name=row["name"],
            price=float(row["price"]),
            original_price=float(row["original_price"]) if row.get("original_price") is not None else None,
            discount_percentage=int(row.get("discount_percentage") or 0),
            rating=float(row["rating"]) if row.get("rating") is not None else None,
            review_count=int(row.get("review_count") or 0),
            color=row.get("color"),
            screen_size=float(row["screen_size"]) if row.get("screen_size") is not None else None,
            brand_id=str(row["brand_id"]) if row.get("brand_id") is not None else None,
            category_id=str(row["category_id"]) if row.get("category_id") is not None else None,
            is_official_store=bool(row.get("is_official_store")),
            created_at=_parse_timestamp(row.get("created_at")),
            brand_name=_embedded_name(row, "brand"),
            category_name=_embedded_name(row, "category"),
        )


@dataclass
class CartItem:
    """One line item: a session, a product and a quantity."""
    id: str
    session_id: str
    product_id: str
    quantity: int
    updated_at: Optional[datetime] = None
    product: Optional[Product] = None

    @property
    def line_total(self) -> float:
        if self.product is None:
            return 0.0
        return self.product.price * self.quantity

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "CartItem":
        product = row.get("product")
        return cls(
            id=str(row["id"]),
            session_id=row["session_id"],
            product_id=str(row["product_id"]),
            quantity=int(row["quantity"]),
            updated_at=_parse_timestamp(row.get("updated_at")),
            product=Product.from_row(product) if isinstance(product, dict) else product,
        )
