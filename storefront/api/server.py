"""
FastAPI server for the storefront.

Provides the product listing, brand filter and session cart as a JSON API for
the browser front-end. The visitor's session id lives in the ``session_id``
cookie.

Usage:
    uvicorn storefront.api.server:app --reload --port 8000
    # or
    storefront serve
"""
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.formatters import format_cart, format_product
from storefront.api.models import (
    AddToCartRequest,
    BrandResponse,
    CartCountResponse,
    CartResponse,
    HealthResponse,
    MutationResponse,
    ProductListResponse,
    UpdateQuantityRequest,
)
from storefront.core.session import SessionId, get_or_create_session_id
from storefront.data.cart_repository import CartRepository
from storefront.data.cart_store import get_cart_store
from storefront.data.catalog_store import CatalogStore, SQLCatalogStore, get_catalog_store
from storefront.data.filters import FilterSpec
from storefront.utils.logger import get_logger

logger = get_logger("api.server")

SESSION_COOKIE_MAX_AGE = 10 * 365 * 24 * 3600


class CookieSessionStorage:
    """Session storage on the browser's cookie jar."""

    def __init__(self, request: Request, response: Response) -> None:
        self.request = request
        self.response = response
        self._written = {}

    def get(self, key: str) -> Optional[str]:
        if key in self._written:
            return self._written[key]
        return self.request.cookies.get(key)

    def set(self, key: str, value: str) -> None:
        self._written[key] = value
        self.response.set_cookie(
            key,
            value,
            max_age=SESSION_COOKIE_MAX_AGE,
            httponly=True,
            samesite="lax",
        )


# Initialize FastAPI app
app = FastAPI(
    title="Storefront API",
    description="Product catalog with filters and a session-scoped shopping cart",
    version="1.0.0"
)

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_catalog() -> CatalogStore:
    return get_catalog_store()


def get_cart_backend():
    return get_cart_store()


def get_session(request: Request, response: Response) -> SessionId:
    return get_or_create_session_id(CookieSessionStorage(request, response))


def get_cart(
    session: SessionId = Depends(get_session),
    store=Depends(get_cart_backend),
) -> CartRepository:
    return CartRepository(session, store)


@app.get("/health", response_model=HealthResponse)
def health(catalog: CatalogStore = Depends(get_catalog)):
    backend = "sql" if isinstance(catalog, SQLCatalogStore) else "supabase"
    return HealthResponse(status="ok", backend=backend)


@app.get("/brands", response_model=List[BrandResponse])
def list_brands(catalog: CatalogStore = Depends(get_catalog)):
    return [BrandResponse(id=b.id, name=b.name) for b in catalog.get_brands()]


@app.get("/products", response_model=ProductListResponse)
def list_products(
    brand: List[str] = Query(default=[]),
    color: List[str] = Query(default=[]),
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    discount_only: bool = False,
    discount_percentage: Optional[int] = None,
    rating: Optional[float] = None,
    screen_size: List[float] = Query(default=[]),
    search: str = "",
    catalog: CatalogStore = Depends(get_catalog),
):
    """
    Products matching every given filter, newest first.

    A price range applies only when both ``min_price`` and ``max_price`` are
    given. A failed catalog query returns an empty list with ``error`` set.
    """
    try:
        filters = FilterSpec(
            brands=brand,
            colors=color,
            min_price=min_price,
            max_price=max_price,
            discount_only=discount_only,
            discount_percentage=discount_percentage,
            rating=rating,
            screen_sizes=screen_size,
            search=search,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    result = catalog.search_products(filters)
    return ProductListResponse(
        products=[format_product(p) for p in result.products],
        count=len(result.products),
        filters=filters.to_dict(),
        error=result.error,
    )


@app.get("/cart", response_model=CartResponse)
def view_cart(cart: CartRepository = Depends(get_cart)):
    return format_cart(cart.get_cart_items())


@app.get("/cart/count", response_model=CartCountResponse)
def cart_count(cart: CartRepository = Depends(get_cart)):
    return CartCountResponse(count=cart.get_cart_count())


@app.post("/cart/items", response_model=MutationResponse)
def add_cart_item(request: AddToCartRequest, cart: CartRepository = Depends(get_cart)):
    return MutationResponse(success=cart.add_to_cart(request.product_id))


@app.patch("/cart/items/{cart_item_id}", response_model=MutationResponse)
def update_cart_item(
    cart_item_id: str,
    request: UpdateQuantityRequest,
    cart: CartRepository = Depends(get_cart),
):
    return MutationResponse(success=cart.update_cart_item_quantity(cart_item_id, request.quantity))


@app.delete("/cart/items/{cart_item_id}", response_model=MutationResponse)
def delete_cart_item(cart_item_id: str, cart: CartRepository = Depends(get_cart)):
    return MutationResponse(success=cart.remove_cart_item(cart_item_id))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
