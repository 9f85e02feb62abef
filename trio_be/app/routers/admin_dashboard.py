import logging
import math
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session
from typing import List, Optional

from app.config import get_settings
from app.models.database import get_db
from app.models.order import Order
from app.models.product import Product
from app.routers.products import products_collection, to_product_out
from app.schemas.admin import AdminLogin, AdminSession, DashboardOut
from app.schemas.order import ORDER_STATUSES
from app.schemas.product import AVAILABLE_SIZES, DEFAULT_SIZES, PRODUCT_CATEGORIES, ProductOut
from app.services.documents import BackendError, DocumentCollection
from app.utils.security import AdminGate, get_admin_gate, require_admin
from app.utils.storage import (
    ALLOWED_IMAGE_TYPES,
    StorageError,
    delete_media_files,
    product_image_path,
    upload,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _read_image(file: UploadFile, max_bytes: int) -> bytes:
    """Validate type and size of one uploaded image and return its bytes."""
    if (file.content_type or "").lower() not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=400, detail="Only image files (JPG, PNG, WebP, GIF) are allowed")
    data = file.file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"Each image must be less than {max_bytes // (1024 * 1024)}MB",
        )
    return data


# Admin login: checks the shared credential pair
@router.post("/login", response_model=AdminSession)
def admin_login(payload: AdminLogin, gate: AdminGate = Depends(get_admin_gate)):
    if not gate.configured:
        raise HTTPException(status_code=403, detail="Admin access is not configured")
    if not gate.check(payload.email, payload.password):
        logger.warning("Rejected admin login for %s", payload.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return AdminSession(adminAuth=True, adminEmail=gate.email)


# Dashboard Overview
@router.get("/dashboard", response_model=DashboardOut)
def get_dashboard_overview(
    db: Session = Depends(get_db),
    admin_email: str = Depends(require_admin),
):
    try:
        products = DocumentCollection(db, Product).list()
        orders = DocumentCollection(db, Order).list()
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to load data")
    categories = []
    for p in products:
        if p.category and p.category not in categories:
            categories.append(p.category)
    revenue = float(sum((o.total_amount or 0.0) for o in orders))
    return DashboardOut(
        products=len(products),
        orders=len(orders),
        revenue=revenue,
        productCategories=["All"] + categories,
        orderStatuses=["All"] + ORDER_STATUSES,
    )


# Products tab
@router.get("/products", response_model=List[ProductOut])
def get_admin_products(
    category: Optional[str] = Query(None),
    products: DocumentCollection = Depends(products_collection),
    admin_email: str = Depends(require_admin),
):
    where = None
    if category and category != "All":
        where = {"category": category}
    try:
        rows = products.list(where=where, order_by={"created_at": "desc"})
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to load data")
    return [to_product_out(p) for p in rows]


# Add Product form
@router.post("/products", response_model=ProductOut, status_code=201)
def create_product(
    name: str = Form(""),
    category: str = Form("Shirts"),
    price: Optional[float] = Form(None),
    description: str = Form(""),
    sizes: List[str] = Form(DEFAULT_SIZES),
    inStock: bool = Form(True),
    images: List[UploadFile] = File([]),
    products: DocumentCollection = Depends(products_collection),
    admin_email: str = Depends(require_admin),
):
    settings = get_settings()
    name = name.strip()
    description = description.strip()
    if not name or price is None or not description:
        raise HTTPException(status_code=400, detail="Please fill in all required fields")
    if not math.isfinite(price):
        raise HTTPException(status_code=400, detail="Invalid price")
    if price < 0:
        raise HTTPException(status_code=400, detail="Price cannot be negative")
    if len(name) > Product.name.type.length:
        raise HTTPException(status_code=400, detail=f"Name must be at most {Product.name.type.length} characters")
    if len(description) > Product.description.type.length:
        raise HTTPException(
            status_code=400,
            detail=f"Description must be at most {Product.description.type.length} characters",
        )
    if category not in PRODUCT_CATEGORIES:
        raise HTTPException(status_code=400, detail=f"Unknown category {category}")
    # Multipart sends repeated fields; a single comma separated value is accepted too
    size_list = [s.strip() for value in sizes for s in value.split(",") if s.strip()]
    unknown = [s for s in size_list if s not in AVAILABLE_SIZES]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown sizes: {', '.join(unknown)}")
    size_list = [s for s in AVAILABLE_SIZES if s in size_list]

    files = [f for f in images if f and f.filename]
    if not files:
        raise HTTPException(status_code=400, detail="Please upload at least one image")
    if len(files) > settings.MAX_PRODUCT_IMAGES:
        raise HTTPException(status_code=400, detail=f"Maximum {settings.MAX_PRODUCT_IMAGES} images allowed")
    contents = [_read_image(f, settings.MAX_UPLOAD_BYTES) for f in files]

    image_urls: List[str] = []
    for index, (file, data) in enumerate(zip(files, contents)):
        try:
            image_urls.append(upload(data, product_image_path(file.filename, index), upsert=True))
        except StorageError as e:
            delete_media_files(image_urls)
            raise HTTPException(status_code=500, detail=f"Failed to upload image {index + 1}") from e

    try:
        product_id = products.create({
            "name": name,
            "category": category,
            "price": price,
            "sizes": size_list,
            "description": description,
            "images": image_urls,
            "in_stock": inStock,
        })
        product = products.get(product_id)
    except BackendError:
        delete_media_files(image_urls)
        raise HTTPException(status_code=500, detail="Failed to add product")
    logger.info("Product %s (%s) added by %s", product_id, name, admin_email)
    return to_product_out(product)


# Delete Product
@router.delete("/products/{id}")
def delete_product(
    id: int,
    products: DocumentCollection = Depends(products_collection),
    admin_email: str = Depends(require_admin),
):
    try:
        product = products.get(id)
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")
        images = to_product_out(product).images
        products.delete(id)
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to delete product")
    removed = delete_media_files(images)
    logger.info("Product %s deleted by %s (%d image files removed)", id, admin_email, removed)
    return {"message": "Product deleted"}


# Upload File
@router.post("/upload")
def upload_file(
    file: UploadFile = File(...),
    admin_email: str = Depends(require_admin),
):
    data = _read_image(file, get_settings().MAX_UPLOAD_BYTES)
    try:
        url = upload(data, product_image_path(file.filename), upsert=True)
    except StorageError:
        raise HTTPException(status_code=500, detail="Upload failed")
    return {"url": url}
