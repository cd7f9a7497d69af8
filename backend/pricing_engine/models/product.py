from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal


class Store(SQLModel, table=True):
    __tablename__ = "stores"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    is_active: bool = Field(default=True)


class Product(SQLModel, table=True):
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    store_id: int = Field(foreign_key="stores.id", index=True)
    name: str = Field(index=True)

    price: Decimal = Field(max_digits=10, decimal_places=2)
    category_id: Optional[int] = Field(default=None, index=True)

    tax_exempt: bool = Field(default=False)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)


class ProductVariant(SQLModel, table=True):
    __tablename__ = "product_variants"

    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    sku: str = Field(unique=True, index=True)

    price: Decimal = Field(max_digits=10, decimal_places=2)

    # Переопределение налоговой ставки (в процентах) для варианта
    tax_rate: Optional[Decimal] = Field(default=None, max_digits=6, decimal_places=3)
    tax_exempt: bool = Field(default=False)
