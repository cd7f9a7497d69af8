"""
Порты чтения для движка цен и их реализации на SQLModel.

Движок ничего не пишет: каждый расчёт получает свежие данные через
эти интерфейсы, а тесты подставляют вместо них простые фейки.
"""
from datetime import datetime
from typing import Protocol, List, Optional, Sequence, Tuple

from sqlmodel import Session, select

from pricing_engine.core.config import settings
from pricing_engine.models.offer import Offer
from pricing_engine.models.product import Product, ProductVariant
from pricing_engine.models.promotion import (
    Promotion, PromotionRule, PromotionAction, PromotionProduct, PromotionAppliesTo,
)
from pricing_engine.models.tax import PlatformSettings, TaxRule
from pricing_engine.schemas.pricing import LinePromotion, TaxSettings
from pricing_engine.services.lifecycle import is_effective
from pricing_engine.services.line_pricing import line_promotion_from


class PromotionRepository(Protocol):
    def get_active_promotions(self, store_id: int, now: Optional[datetime] = None) -> Sequence[Promotion]:
        ...

    def load_promotion_details(self, promotion_id: int) -> Tuple[Sequence[PromotionRule], Sequence[PromotionAction]]:
        ...


class CatalogRepository(Protocol):
    def get_product(self, product_id: int) -> Optional[Product]:
        ...

    def get_variant_by_sku(self, sku: str) -> Optional[ProductVariant]:
        ...

    def get_line_promotions(self, product_id: int, now: Optional[datetime] = None) -> Sequence[LinePromotion]:
        ...

    def get_active_offers(self, store_id: int, now: Optional[datetime] = None) -> Sequence[Offer]:
        ...


def _window_filter(model, now: datetime):
    """Грубый SQL-фильтр по окну дат; точный статус считается в lifecycle"""
    return (
        model.is_active == True,  # noqa: E712
        (model.start_at == None) | (model.start_at <= now),  # noqa: E711
        (model.end_at == None) | (model.end_at >= now),  # noqa: E711
    )


class SqlPromotionRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_active_promotions(self, store_id: int, now: Optional[datetime] = None) -> List[Promotion]:
        """
        Акции магазина на уровне корзины, действующие сейчас (сохранённый status не используется).
        Акции на товар (applies_to=product или привязки PromotionProduct)
        работают только через цену строки и сюда не попадают.
        """
        now = now or datetime.utcnow()
        attached = select(PromotionProduct.promotion_id)
        stmt = select(Promotion).where(
            Promotion.store_id == store_id,
            Promotion.applies_to.in_([PromotionAppliesTo.ALL, PromotionAppliesTo.GROUP]),
            Promotion.id.not_in(attached),
            *_window_filter(Promotion, now),
        ).order_by(Promotion.priority.desc(), Promotion.created_at.asc(), Promotion.id.asc())

        return [p for p in self.db.exec(stmt).all() if is_effective(p, now)]

    def load_promotion_details(self, promotion_id: int) -> Tuple[List[PromotionRule], List[PromotionAction]]:
        rules = self.db.exec(
            select(PromotionRule).where(PromotionRule.promotion_id == promotion_id).order_by(PromotionRule.id)
        ).all()
        actions = self.db.exec(
            select(PromotionAction).where(PromotionAction.promotion_id == promotion_id).order_by(PromotionAction.id)
        ).all()
        return list(rules), list(actions)


class SqlCatalogRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def get_variant_by_sku(self, sku: str) -> Optional[ProductVariant]:
        return self.db.exec(select(ProductVariant).where(ProductVariant.sku == sku)).first()

    def get_line_promotions(self, product_id: int, now: Optional[datetime] = None) -> List[LinePromotion]:
        """
        Скидки на строку товара:
        - привязки PromotionProduct (с override_price / SKU варианта / лимитом)
        - акции с applies_to=product и target_id == product_id
        """
        now = now or datetime.utcnow()
        result: List[LinePromotion] = []
        seen = set()

        rows = self.db.exec(
            select(PromotionProduct, Promotion)
            .join(Promotion, Promotion.id == PromotionProduct.promotion_id)
            .where(
                PromotionProduct.product_id == product_id,
                PromotionProduct.is_active == True,  # noqa: E712
                *_window_filter(Promotion, now),
            )
        ).all()

        for association, promotion in rows:
            if not is_effective(promotion, now):
                continue
            line_promo = line_promotion_from(promotion, association)
            if line_promo is not None:
                result.append(line_promo)
                seen.add(promotion.id)

        targeted = self.db.exec(
            select(Promotion).where(
                Promotion.applies_to == PromotionAppliesTo.PRODUCT,
                Promotion.target_id == product_id,
                *_window_filter(Promotion, now),
            )
        ).all()

        for promotion in targeted:
            if promotion.id in seen or not is_effective(promotion, now):
                continue
            line_promo = line_promotion_from(promotion)
            if line_promo is not None:
                result.append(line_promo)

        return result

    def get_active_offers(self, store_id: int, now: Optional[datetime] = None) -> List[Offer]:
        now = now or datetime.utcnow()
        stmt = select(Offer).where(Offer.store_id == store_id, *_window_filter(Offer, now))
        return [o for o in self.db.exec(stmt).all() if is_effective(o, now)]


class SqlTaxRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_platform_settings(self) -> TaxSettings:
        row = self.db.exec(select(PlatformSettings)).first()
        if row is None:
            return TaxSettings(tax_enabled=settings.TAX_ENABLED_DEFAULT)
        return TaxSettings(tax_enabled=bool(row.tax_enabled))

    def get_tax_rules(self) -> List[TaxRule]:
        return list(self.db.exec(select(TaxRule)).all())
