from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from enum import Enum


class OfferDiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class OfferScope(str, Enum):
    ALL = "all"
    PRODUCTS = "products"
    CATEGORIES = "categories"
    VARIANTS = "variants"


class Offer(SQLModel, table=True):
    """Простая скидка магазина для каталога: без правил, без стекинга"""
    __tablename__ = "offers"

    id: Optional[int] = Field(default=None, primary_key=True)
    store_id: int = Field(foreign_key="stores.id", index=True)
    name: str

    discount_type: OfferDiscountType = Field(default=OfferDiscountType.PERCENTAGE)
    discount_value: Decimal = Field(max_digits=10, decimal_places=2)

    scope_type: OfferScope = Field(default=OfferScope.PRODUCTS)
    scope_products: Optional[List[int]] = Field(default=None, sa_column=Column(JSON))
    scope_categories: Optional[List[int]] = Field(default=None, sa_column=Column(JSON))
    scope_variants: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))

    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    is_active: bool = Field(default=True)

    badge_text: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
