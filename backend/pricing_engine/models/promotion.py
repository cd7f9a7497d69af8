from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import Optional, Any
from datetime import datetime
from decimal import Decimal
from enum import Enum


class PromotionType(str, Enum):
    """Легаси-тип, используется когда у акции нет явных actions"""
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    BUY_ONE_GET_ONE = "buy_one_get_one"


class PromotionAppliesTo(str, Enum):
    ALL = "all"
    PRODUCT = "product"
    GROUP = "group"


class PromotionStatus(str, Enum):
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    EXPIRED = "expired"
    INACTIVE = "inactive"


class RuleType(str, Enum):
    MIN_ORDER_VALUE = "min_order_value"
    MIN_QUANTITY = "min_quantity"
    SPECIFIC_PRODUCT = "specific_product"
    CUSTOMER_GROUP = "customer_group"


class RuleOperator(str, Enum):
    EQ = "eq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"


class ActionType(str, Enum):
    PERCENTAGE_DISCOUNT = "percentage_discount"
    FIXED_AMOUNT = "fixed_amount"
    FREE_SHIPPING = "free_shipping"


class ActionTarget(str, Enum):
    ORDER_TOTAL = "order_total"


class Promotion(SQLModel, table=True):
    __tablename__ = "promotions"

    id: Optional[int] = Field(default=None, primary_key=True)
    store_id: int = Field(foreign_key="stores.id", index=True)
    name: str
    description: Optional[str] = None

    type: PromotionType = Field(default=PromotionType.PERCENTAGE)
    value: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)

    applies_to: PromotionAppliesTo = Field(default=PromotionAppliesTo.ALL)
    target_id: Optional[int] = None

    priority: int = Field(default=0)  # Выше = раньше
    stackable: bool = Field(default=False)

    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    is_active: bool = Field(default=True)

    # Хранится для CRUD-слоя, движок всегда пересчитывает статус сам
    status: PromotionStatus = Field(default=PromotionStatus.INACTIVE)

    # Лимиты читаются как конфигурация, расход не учитывается
    usage_limit: Optional[int] = None
    usage_limit_per_user: Optional[int] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)


class PromotionRule(SQLModel, table=True):
    __tablename__ = "promotion_rules"

    id: Optional[int] = Field(default=None, primary_key=True)
    promotion_id: int = Field(foreign_key="promotions.id", index=True)

    # Строки, а не enum: неизвестные типы должны доходить до движка и не срабатывать
    type: str
    operator: str = Field(default=RuleOperator.GTE.value)
    value: Any = Field(default=None, sa_column=Column(JSON))


class PromotionAction(SQLModel, table=True):
    __tablename__ = "promotion_actions"

    id: Optional[int] = Field(default=None, primary_key=True)
    promotion_id: int = Field(foreign_key="promotions.id", index=True)

    type: str
    value: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    target: Optional[str] = Field(default=ActionTarget.ORDER_TOTAL.value)


class PromotionProduct(SQLModel, table=True):
    __tablename__ = "promotion_products"

    id: Optional[int] = Field(default=None, primary_key=True)
    promotion_id: int = Field(foreign_key="promotions.id", index=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    variant_sku: Optional[str] = Field(default=None, index=True)

    override_price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    quantity_limit: int = Field(default=0)  # 0 = без ограничения
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
