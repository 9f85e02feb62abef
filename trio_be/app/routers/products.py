from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.models.database import get_db
from app.models.product import Product
from app.schemas.product import (
    CategoryTile,
    HomeOut,
    ProductOut,
    SHOP_CATEGORIES,
    SORT_OPTIONS,
)
from app.services.documents import BackendError, DocumentCollection
from app.utils.decoding import decode_flag, decode_string_list

router = APIRouter()
home_router = APIRouter()

CATEGORY_TILES = [
    CategoryTile(name="Shirts", image="https://images.unsplash.com/photo-1596755094514-f87e34085b2c?w=500&h=600&fit=crop"),
    CategoryTile(name="T-Shirts", image="https://images.unsplash.com/photo-1521572163474-6864f9cf17ab?w=500&h=600&fit=crop"),
    CategoryTile(name="Jackets", image="https://images.unsplash.com/photo-1551028719-00167b16eac5?w=500&h=600&fit=crop"),
    CategoryTile(name="Jeans", image="https://images.unsplash.com/photo-1542272604-787c3835535d?w=500&h=600&fit=crop"),
    CategoryTile(name="Trousers", image="https://www.aristobrat.in/cdn/shop/files/eliteTrouser_GreyMagnetNew_7.jpg?v=1732789315&width=2048"),
]

HOME_PRODUCT_LIMIT = 6


# Helpers

def to_product_out(p: Product) -> ProductOut:
    return ProductOut(
        id=p.id,
        name=p.name,
        category=p.category,
        price=float(p.price or 0),
        sizes=decode_string_list(p.sizes),
        description=p.description,
        images=decode_string_list(p.images, allow_bare=True),
        inStock=decode_flag(p.in_stock, default=True),
        createdAt=p.created_at.isoformat() if p.created_at else None,
    )


def products_collection(db: Session = Depends(get_db)) -> DocumentCollection:
    return DocumentCollection(db, Product)


# Home page: latest arrivals and category tiles
@home_router.get("/home", response_model=HomeOut)
def get_home(products: DocumentCollection = Depends(products_collection)):
    try:
        latest = products.list(order_by=SORT_OPTIONS["newest"], limit=HOME_PRODUCT_LIMIT)
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to load products")
    return HomeOut(products=[to_product_out(p) for p in latest], categories=CATEGORY_TILES)


# Shop listing with category filter and sort
@router.get("/", response_model=List[ProductOut])
def list_products(
    category: Optional[str] = None,
    sort: str = Query("newest", pattern="^(newest|price-low|price-high)$"),
    products: DocumentCollection = Depends(products_collection),
):
    """List products; ``category=all`` (or none) means no filter."""
    where = None
    if category and category.lower() != "all":
        where = {"category": category}
    try:
        rows = products.list(where=where, order_by=SORT_OPTIONS[sort])
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to load products")
    return [to_product_out(p) for p in rows]


@router.get("/categories", response_model=List[str])
def list_categories():
    return SHOP_CATEGORIES


@router.get("/{id}", response_model=ProductOut)
def get_product_by_id(id: int, products: DocumentCollection = Depends(products_collection)):
    try:
        product = products.get(id)
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to load product")
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return to_product_out(product)
