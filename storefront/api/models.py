"""
Pydantic models for storefront API requests and responses.
"""
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List


class ProductCard(BaseModel):
    """A product as rendered on the listing page."""
    id: str
    name: str
    brand: Optional[str] = None
    category: Optional[str] = None
    price: float
    price_display: str
    official_store: bool = False
    image_url: str
    color: Optional[str] = None
    screen_size: Optional[float] = None
    rating: Optional[float] = None
    stars: str = ""
    review_count: int = 0
    discount_badge: Optional[str] = Field(default=None, description="e.g. '15%' when discounted")
    original_price_display: Optional[str] = None


class ProductListResponse(BaseModel):
    """Response model for the product listing."""
    products: List[ProductCard]
    count: int
    filters: Dict[str, Any] = Field(default_factory=dict, description="Filters that were applied")
    error: Optional[str] = Field(default=None, description="Set when the catalog query failed")


class BrandResponse(BaseModel):
    id: str
    name: str


class CartLine(BaseModel):
    id: str
    product_id: str
    name: Optional[str] = None
    price_display: str = ""
    quantity: int
    line_total_display: str
    image_url: str


class CartResponse(BaseModel):
    """Response model for the cart view."""
    items: List[CartLine]
    count: int
    total: float
    total_display: str


class CartCountResponse(BaseModel):
    count: int


class AddToCartRequest(BaseModel):
    product_id: str = Field(description="Product to add one unit of")


class UpdateQuantityRequest(BaseModel):
    quantity: int = Field(description="New quantity; zero or less removes the line item")


class MutationResponse(BaseModel):
    success: bool


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str
    backend: str
