from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from enum import Enum

from pricing_engine.models.promotion import PromotionStatus


# === Корзина и стекинг акций ===

class CartItem(BaseModel):
    product_id: int
    quantity: int
    price: Decimal
    category_id: Optional[int] = None


class CartContext(BaseModel):
    """Контекст корзины, который собирает checkout-слой"""
    items: List[CartItem] = []
    total: Decimal  # Подытог до скидок
    shipping_cost: Decimal = Decimal("0")
    user_id: Optional[int] = None


class DiscountResult(BaseModel):
    promotion_id: int
    amount: Decimal
    free_shipping: bool = False
    message: Optional[str] = None


class StackingResult(BaseModel):
    applied: List[DiscountResult] = []
    total_discount: Decimal
    final_total: Decimal


# === Налоги ===

class TaxSettings(BaseModel):
    tax_enabled: bool = True

    class Config:
        from_attributes = True


class TaxLine(BaseModel):
    product_id: int
    quantity: int
    price: Decimal
    tax_exempt: bool = False
    variant_tax_rate: Optional[Decimal] = None


class TaxBreakdownLine(BaseModel):
    product_id: int
    rate: Decimal
    tax: Decimal


class TaxResult(BaseModel):
    amount: Decimal
    breakdown: List[TaxBreakdownLine] = []


class TaxRequest(BaseModel):
    items: List[TaxLine]


# === Цена строки ===

class LinePromotionKind(str, Enum):
    OVERRIDE = "override"
    FIXED_OVERRIDE = "fixed_override"
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    BUY_ONE_GET_ONE = "buy_one_get_one"


class LinePriceSource(str, Enum):
    NONE = "none"
    VARIANT_PROMOTION = "variant_promotion"
    PRODUCT_PROMOTION = "product_promotion"
    OFFER = "offer"


class LinePromotion(BaseModel):
    """
    Простая скидка на строку: общий вид для акций на товар/вариант и офферов.
    sku=None означает скидку на базовый товар.
    """
    kind: LinePromotionKind
    value: Decimal = Decimal("0")
    sku: Optional[str] = None
    quantity_limit: int = 0
    badge_text: Optional[str] = None
    promotion_id: Optional[int] = None


class CartLine(BaseModel):
    product_id: int
    variant_sku: Optional[str] = None
    quantity: int = Field(1, ge=1)


class LinePrice(BaseModel):
    product_id: int
    variant_sku: Optional[str] = None
    quantity: int
    unit_price: Decimal
    effective_unit_price: Decimal
    line_total: Decimal
    # Неокруглённая сумма строки для checkout, в ответ не попадает
    line_amount: Decimal = Field(Decimal("0"), exclude=True)
    badge_text: Optional[str] = None
    source: LinePriceSource = LinePriceSource.NONE
    source_id: Optional[int] = None


# === Checkout ===

class QuoteRequest(BaseModel):
    items: List[CartLine]
    shipping_cost: Decimal = Decimal("0")
    user_id: Optional[int] = None


class CheckoutQuote(BaseModel):
    lines: List[LinePrice]
    subtotal: Decimal
    promotions: StackingResult
    tax: TaxResult
    shipping_cost: Decimal
    total: Decimal


# === Привязка товаров к акции ===

class BulkAttachItem(BaseModel):
    product_id: int
    variant_sku: Optional[str] = None
    override_price: Optional[Decimal] = None
    quantity_limit: int = 0


class BulkAttachRequest(BaseModel):
    items: List[BulkAttachItem]


class BulkAttachResult(BaseModel):
    added: int
    invalid: List[int] = []


class PromotionStatusResponse(BaseModel):
    id: int
    name: str
    priority: int
    stackable: bool
    status: PromotionStatus
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
