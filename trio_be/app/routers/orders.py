import logging
import secrets
import time
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy.orm import Session
from typing import List, Optional

from app.models.database import get_db
from app.models.order import Order
from app.schemas.order import (
    CheckoutIn,
    OrderConfirmation,
    OrderItemSnapshot,
    OrderOut,
    OrderStatusUpdate,
)
from app.routers.cart import get_cart_store
from app.services.cart_store import CartStore
from app.services.documents import BackendError, DocumentCollection
from app.utils.decoding import decode_order_items
from app.utils.security import require_admin

logger = logging.getLogger(__name__)

router = APIRouter()
admin_router = APIRouter()

_EMAIL = TypeAdapter(EmailStr)


def orders_collection(db: Session = Depends(get_db)) -> DocumentCollection:
    return DocumentCollection(db, Order)


def new_order_number() -> str:
    return f"ORD{int(time.time() * 1000)}{secrets.randbelow(1000):03d}"


def map_order_to_out(order: Order) -> OrderOut:
    address = order.address or ""
    return OrderOut(
        id=order.id,
        orderId=order.order_number,
        customerName=order.customer_name,
        email=order.email,
        phone=order.phone,
        address=address,
        addressLines=[line.strip() for line in address.split(",") if line.strip()],
        totalAmount=float(order.total_amount or 0),
        status=order.status,  # type: ignore
        items=decode_order_items(order.items),
        createdAt=order.created_at.isoformat(),
        updatedAt=order.updated_at.isoformat(),
    )


# Checkout: turn the cart into an order
@router.post("/checkout", response_model=OrderConfirmation)
def checkout(
    payload: CheckoutIn,
    store: CartStore = Depends(get_cart_store),
    orders: DocumentCollection = Depends(orders_collection),
):
    fields = {
        "customerName": payload.customerName.strip(),
        "email": payload.email.strip(),
        "phone": payload.phone.strip(),
        "address": payload.address.strip(),
    }
    if not all(fields.values()):
        raise HTTPException(status_code=400, detail="Please fill in all fields")
    try:
        _EMAIL.validate_python(fields["email"])
    except ValidationError:
        raise HTTPException(status_code=400, detail="Please enter a valid email address")

    try:
        entries = store.items()
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to load cart")
    if not entries:
        raise HTTPException(status_code=400, detail="Your cart is empty")

    items = [
        OrderItemSnapshot(
            productId=str(e.product.id),
            quantity=e.quantity,
            name=e.product.name,
            price=e.product.price,
            selectedSize=e.selectedSize or "",
        ).model_dump()
        for e in entries
    ]
    total = sum(e.line_total for e in entries)
    order_number = new_order_number()

    try:
        order_id = orders.create({
            "order_number": order_number,
            "customer_name": fields["customerName"],
            "email": fields["email"],
            "phone": fields["phone"],
            "address": fields["address"],
            "total_amount": total,
            "status": "Pending",
            "items": items,
        })
    except BackendError:
        # Cart is left untouched so the shopper can retry
        raise HTTPException(status_code=500, detail="Failed to place order. Please try again.")

    try:
        store.clear()
    except BackendError:
        logger.error("Order %s placed but the cart could not be cleared", order_number)
    logger.info("Order %s placed (id=%s, total=%.2f)", order_number, order_id, total)

    order = orders.get(order_id)
    return OrderConfirmation(
        orderId=order.order_number,
        totalAmount=float(order.total_amount or 0),
        status=order.status,  # type: ignore
        createdAt=order.created_at.isoformat(),
    )


# Order confirmation by human-readable id
@router.get("/orders/{order_number}", response_model=OrderConfirmation)
def get_order_confirmation(order_number: str, orders: DocumentCollection = Depends(orders_collection)):
    try:
        found = orders.list(where={"order_number": order_number}, limit=1)
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to load order")
    if not found:
        raise HTTPException(status_code=404, detail="Order not found")
    order = found[0]
    return OrderConfirmation(
        orderId=order.order_number,
        totalAmount=float(order.total_amount or 0),
        status=order.status,  # type: ignore
        createdAt=order.created_at.isoformat(),
    )


# Admin: list orders, newest first
@admin_router.get("/", response_model=List[OrderOut])
def get_admin_orders(
    status: Optional[str] = Query(None),
    orders: DocumentCollection = Depends(orders_collection),
    admin_email: str = Depends(require_admin),
):
    where = None
    if status and status != "All":
        where = {"status": status}
    try:
        rows = orders.list(where=where, order_by={"created_at": "desc"})
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to load data")
    return [map_order_to_out(o) for o in rows]


# Admin: order detail panel
@admin_router.get("/{id}", response_model=OrderOut)
def get_admin_order(
    id: int,
    orders: DocumentCollection = Depends(orders_collection),
    admin_email: str = Depends(require_admin),
):
    try:
        order = orders.get(id)
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to load order")
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return map_order_to_out(order)


# Admin: update order status
@admin_router.put("/{id}/status", response_model=OrderOut)
def admin_update_order_status(
    id: int,
    payload: OrderStatusUpdate,
    orders: DocumentCollection = Depends(orders_collection),
    admin_email: str = Depends(require_admin),
):
    try:
        updated = orders.update(id, {"status": payload.status})
        if not updated:
            raise HTTPException(status_code=404, detail="Order not found")
        order = orders.get(id)
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to update order")
    logger.info("Order %s status set to %s by %s", order.order_number, payload.status, admin_email)
    return map_order_to_out(order)


# Admin: delete order
@admin_router.delete("/{id}")
def admin_delete_order(
    id: int,
    orders: DocumentCollection = Depends(orders_collection),
    admin_email: str = Depends(require_admin),
):
    try:
        deleted = orders.delete(id)
    except BackendError:
        raise HTTPException(status_code=500, detail="Failed to delete order")
    if not deleted:
        raise HTTPException(status_code=404, detail="Order not found")
    logger.info("Order %s deleted by %s", id, admin_email)
    return {"message": "Order deleted successfully"}
