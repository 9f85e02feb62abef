from pydantic import BaseModel, EmailStr
from typing import List


class AdminLogin(BaseModel):
    email: EmailStr
    password: str


class AdminSession(BaseModel):
    adminAuth: bool
    adminEmail: EmailStr


class DashboardOut(BaseModel):
    products: int
    orders: int
    revenue: float
    productCategories: List[str]
    orderStatuses: List[str]
