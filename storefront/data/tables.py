"""
SQLAlchemy database models.

Mirror the Supabase tables the storefront reads and writes. The catalog tables
are read-only from the storefront's side; cart_items is the only table it
writes, and (session_id, product_id) is unique so adds can upsert.
"""
import uuid

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.data.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class BrandRow(Base):
    __tablename__ = "brands"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False, unique=True, index=True)


class CategoryRow(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)


class ProductRow(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False, index=True)
    price = Column(Float, nullable=False)
    original_price = Column(Float, nullable=True)
    discount_percentage = Column(Integer, nullable=False, default=0)
    rating = Column(Float, nullable=True)
    review_count = Column(Integer, nullable=False, default=0)
    color = Column(String(64), nullable=True)
    screen_size = Column(Float, nullable=True)
    brand_id = Column(String(36), ForeignKey("brands.id"), nullable=True, index=True)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=True)
    is_official_store = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    brand = relationship(BrandRow, lazy="joined")
    category = relationship(CategoryRow, lazy="joined")

    def to_row(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "original_price": self.original_price,
            "discount_percentage": self.discount_percentage,
            "rating": self.rating,
            "review_count": self.review_count,
            "color": self.color,
            "screen_size": self.screen_size,
            "brand_id": self.brand_id,
            "category_id": self.category_id,
            "is_official_store": self.is_official_store,
            "created_at": self.created_at,
            "brand_name": self.brand.name if self.brand else None,
            "category_name": self.category.name if self.category else None,
        }


class CartItemRow(Base):
    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("session_id", "product_id", name="cart_items_session_product_key"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    session_id = Column(String(64), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    product = relationship(ProductRow, lazy="joined")

    def to_row(self) -> dict:
        return {
            "id": self.id,
            "session_id": self.session_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "updated_at": self.updated_at,
            "product": self.product.to_row() if self.product else None,
        }
