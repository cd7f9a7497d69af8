from sqlmodel import SQLModel, Field
from typing import Optional
from decimal import Decimal


class PlatformSettings(SQLModel, table=True):
    __tablename__ = "platform_settings"

    id: Optional[int] = Field(default=None, primary_key=True)
    tax_enabled: bool = Field(default=True)


class TaxRule(SQLModel, table=True):
    __tablename__ = "tax_rules"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: Optional[str] = None

    enabled: bool = Field(default=True)
    exempt: bool = Field(default=False)

    category: Optional[str] = None  # None или "general" = глобальное правило
    province: Optional[str] = None

    rate: Decimal = Field(max_digits=6, decimal_places=3)  # В процентах
    priority: int = Field(default=0)
