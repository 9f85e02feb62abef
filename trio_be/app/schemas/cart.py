from pydantic import BaseModel, Field
from typing import List, Optional

from app.schemas.product import ProductOut


class CartEntry(BaseModel):
    product: ProductOut
    quantity: int = Field(ge=1)
    selectedSize: Optional[str] = None

    @property
    def size_key(self) -> str:
        return self.selectedSize or ""

    @property
    def line_total(self) -> float:
        return self.product.price * self.quantity


class CartItemIn(BaseModel):
    productId: int
    quantity: int = Field(default=1, gt=0)
    selectedSize: Optional[str] = None


class CartQuantityIn(BaseModel):
    productId: int
    quantity: int
    selectedSize: Optional[str] = None


class CartOut(BaseModel):
    items: List[CartEntry]
    count: int
    total: float
