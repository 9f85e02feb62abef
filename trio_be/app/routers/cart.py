import logging
import uuid
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session
from typing import List, Optional

from app.config import get_settings
from app.models.database import get_db
from app.models.product import Product
from app.routers.products import to_product_out
from app.schemas.cart import CartEntry, CartItemIn, CartOut, CartQuantityIn
from app.services.cart_storage import DatabaseStorage
from app.services.cart_store import CartError, CartStore
from app.services.documents import BackendError, DocumentCollection

logger = logging.getLogger(__name__)

router = APIRouter()

CART_COUNT_HEADER = "X-Cart-Count"


def get_cart_session(request: Request, response: Response) -> str:
    """Return the shopper's cart session id, issuing a cookie on first use."""
    settings = get_settings()
    cookie_name = settings.CART_COOKIE_NAME
    session_id = request.cookies.get(cookie_name)
    if not session_id or len(session_id) > 64:
        session_id = uuid.uuid4().hex
        response.set_cookie(
            cookie_name,
            session_id,
            max_age=settings.CART_SESSION_DAYS * 24 * 60 * 60,
            httponly=True,
            samesite="lax",
        )
    return session_id


def get_cart_store(
    response: Response,
    session_id: str = Depends(get_cart_session),
    db: Session = Depends(get_db),
) -> CartStore:
    store = CartStore(DatabaseStorage(db, session_id))

    # Keep the cart badge in sync with every mutation made during this request
    def publish_count(entries: List[CartEntry]) -> None:
        response.headers[CART_COUNT_HEADER] = str(sum(e.quantity for e in entries))

    store.subscribe(publish_count)
    return store


def _serialize_cart(store: CartStore) -> CartOut:
    items = store.items()
    return CartOut(
        items=items,
        count=sum(e.quantity for e in items),
        total=sum(e.line_total for e in items),
    )


# Get Cart
@router.get("/", response_model=CartOut)
def get_cart(response: Response, store: CartStore = Depends(get_cart_store)):
    try:
        cart = _serialize_cart(store)
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to load cart")
    response.headers[CART_COUNT_HEADER] = str(cart.count)
    return cart


# Add to Cart
@router.post("/", response_model=CartOut)
def add_to_cart(
    payload: CartItemIn,
    store: CartStore = Depends(get_cart_store),
    db: Session = Depends(get_db),
):
    try:
        product = DocumentCollection(db, Product).get(payload.productId)
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to load product")
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    snapshot = to_product_out(product)
    if not snapshot.inStock:
        raise HTTPException(status_code=400, detail="Product is out of stock")

    size = (payload.selectedSize or "").strip()
    if snapshot.sizes:
        if not size:
            raise HTTPException(status_code=400, detail="Please select a size")
        if size not in snapshot.sizes:
            raise HTTPException(status_code=400, detail=f"Size {size} is not available")
    elif size:
        raise HTTPException(status_code=400, detail="This product has no size options")

    try:
        store.add(snapshot, payload.quantity, size)
        cart = _serialize_cart(store)
    except CartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to update cart")
    logger.info("Added product %s (size=%s, qty=%s) to cart", snapshot.id, size or "-", payload.quantity)
    return cart


# Update Cart Item Quantity (0 or less removes it)
@router.put("/", response_model=CartOut)
def update_cart_quantity(payload: CartQuantityIn, store: CartStore = Depends(get_cart_store)):
    try:
        found = store.set_quantity(payload.productId, payload.quantity, payload.selectedSize or "")
        if not found:
            raise HTTPException(status_code=404, detail="Cart item not found")
        return _serialize_cart(store)
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to update cart")


# Remove Cart Item
@router.delete("/", response_model=CartOut)
def remove_cart_item(
    productId: int = Query(...),
    selectedSize: Optional[str] = Query(None),
    store: CartStore = Depends(get_cart_store),
):
    try:
        store.remove(productId, selectedSize or "")
        return _serialize_cart(store)
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to update cart")


# Clear Cart
@router.delete("/clear", response_model=CartOut)
def clear_cart(store: CartStore = Depends(get_cart_store)):
    try:
        store.clear()
        return _serialize_cart(store)
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to clear cart")
