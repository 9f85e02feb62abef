from pydantic import BaseModel, Field
from typing import List, Optional

SHOP_CATEGORIES = ["Shirts", "T-Shirts", "Jackets", "Jeans", "Trousers"]
PRODUCT_CATEGORIES = SHOP_CATEGORIES + ["Accessories"]
AVAILABLE_SIZES = ["XS", "S", "M", "L", "XL", "XXL"]
DEFAULT_SIZES = ["S", "M", "L", "XL"]

SORT_OPTIONS = {
    "newest": {"created_at": "desc"},
    "price-low": {"price": "asc"},
    "price-high": {"price": "desc"},
}


class ProductOut(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    price: float = Field(ge=0)
    sizes: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    inStock: bool = True
    createdAt: Optional[str] = None


class CategoryTile(BaseModel):
    name: str
    image: str


class HomeOut(BaseModel):
    products: List[ProductOut]
    categories: List[CategoryTile]
