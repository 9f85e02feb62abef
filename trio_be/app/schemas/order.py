from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import List, Literal, Optional


OrderStatus = Literal["Pending", "Processing", "Shipped", "Delivered", "Cancelled"]
ORDER_STATUSES: List[str] = ["Pending", "Processing", "Shipped", "Delivered", "Cancelled"]


class OrderItemSnapshot(BaseModel):
    # Legacy rows stored product ids as strings
    model_config = ConfigDict(coerce_numbers_to_str=True)

    productId: str = Field(validation_alias=AliasChoices("productId", "product_id"))
    quantity: int = Field(ge=1)
    name: str = Field(
        default="Unknown Product",
        validation_alias=AliasChoices("productName", "name"),
    )
    price: float = Field(default=0.0, ge=0)
    # Older rows carried the size under a handful of different keys
    selectedSize: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("selectedSize", "size", "option", "variant"),
    )


class CheckoutIn(BaseModel):
    # Limits match the orders table columns
    customerName: str = Field(default="", max_length=255)
    email: str = Field(default="", max_length=255)
    phone: str = Field(default="", max_length=50)
    address: str = Field(default="", max_length=1000)


class OrderConfirmation(BaseModel):
    orderId: str
    totalAmount: float
    status: OrderStatus
    createdAt: str


class OrderOut(BaseModel):
    id: int
    orderId: str
    customerName: str
    email: str
    phone: str
    address: str
    addressLines: List[str]
    totalAmount: float
    status: OrderStatus
    items: List[OrderItemSnapshot]
    createdAt: str
    updatedAt: str


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
