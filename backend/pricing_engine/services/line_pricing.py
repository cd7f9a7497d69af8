from decimal import Decimal
from typing import Any, Optional, List, Sequence, Tuple

from pricing_engine.core.config import settings
from pricing_engine.models.offer import Offer, OfferDiscountType, OfferScope
from pricing_engine.models.promotion import Promotion, PromotionProduct, PromotionType
from pricing_engine.schemas.pricing import (
    CartLine, LinePrice, LinePriceSource, LinePromotion, LinePromotionKind,
)
from pricing_engine.services.money import ZERO, HUNDRED, to_decimal, round_money

PROMOTION_KINDS = {
    PromotionType.PERCENTAGE: LinePromotionKind.PERCENTAGE,
    PromotionType.FIXED: LinePromotionKind.FIXED,
    PromotionType.BUY_ONE_GET_ONE: LinePromotionKind.BUY_ONE_GET_ONE,
}


def apply_simple_discount(price: Decimal, kind: LinePromotionKind, value: Decimal) -> Decimal:
    """Цена одной единицы после простой скидки (без BOGO)"""
    if kind in (LinePromotionKind.OVERRIDE, LinePromotionKind.FIXED_OVERRIDE):
        return max(value, ZERO)
    elif kind == LinePromotionKind.PERCENTAGE:
        return max(price * (HUNDRED - value) / HUNDRED, ZERO)
    elif kind == LinePromotionKind.FIXED:
        return max(price - value, ZERO)
    return price


def bogo_unit_price(unit_price: Decimal, quantity: int) -> Decimal:
    """
    Buy-one-get-one: в каждой паре вторая единица бесплатно.
    qty=4, price=100 → pairs=2, paid=2, цена за единицу 50.
    """
    if quantity < 2:
        return unit_price
    pairs = quantity // 2
    paid_units = pairs + quantity % 2
    return paid_units * unit_price / quantity


def discounted_unit_price(unit_price: Decimal, promo: LinePromotion, quantity: int) -> Decimal:
    """
    Эффективная цена единицы с учётом quantity_limit:
    скидка действует только на первые quantity_limit единиц, остальные по полной цене.
    """
    value = to_decimal(promo.value)
    quantity = max(quantity, 0)
    limit = promo.quantity_limit or 0
    discounted_units = min(quantity, limit) if limit > 0 else quantity

    if discounted_units <= 0:
        return unit_price

    if promo.kind == LinePromotionKind.BUY_ONE_GET_ONE:
        discounted = bogo_unit_price(unit_price, discounted_units)
    else:
        discounted = apply_simple_discount(unit_price, promo.kind, value)

    if discounted_units == quantity:
        return discounted
    full_units = quantity - discounted_units
    return (discounted * discounted_units + unit_price * full_units) / quantity


def line_promotion_from(
    promotion: Promotion,
    association: Optional[PromotionProduct] = None,
) -> Optional[LinePromotion]:
    """Привести акцию (и её привязку к товару) к простой скидке на строку"""
    if association is not None and association.override_price is not None:
        kind = LinePromotionKind.OVERRIDE
        value = to_decimal(association.override_price)
    else:
        try:
            kind = PROMOTION_KINDS[PromotionType(promotion.type)]
        except ValueError:
            return None
        value = to_decimal(promotion.value)

    return LinePromotion(
        kind=kind,
        value=value,
        sku=association.variant_sku if association is not None else None,
        quantity_limit=(association.quantity_limit or 0) if association is not None else 0,
        badge_text=promotion.name,
        promotion_id=promotion.id,
    )


def line_promotion_from_offer(offer: Offer) -> LinePromotion:
    """Оффер это та же простая скидка, только без правил и стекинга"""
    kind = LinePromotionKind.FIXED if offer.discount_type == OfferDiscountType.FIXED else LinePromotionKind.PERCENTAGE
    return LinePromotion(
        kind=kind,
        value=to_decimal(offer.discount_value),
        badge_text=offer.badge_text or settings.DEFAULT_OFFER_BADGE,
        promotion_id=offer.id,
    )


def offer_matches(
    offer: Offer,
    product_id: int,
    category_id: Optional[int] = None,
    variant_sku: Optional[str] = None,
) -> bool:
    """Подходит ли оффер товару по scope_type"""
    scope = str(getattr(offer.scope_type, "value", offer.scope_type) or OfferScope.PRODUCTS.value).lower()

    if scope == OfferScope.ALL.value:
        return True
    if scope == OfferScope.PRODUCTS.value:
        return str(product_id) in {str(p) for p in (offer.scope_products or [])}
    if scope == OfferScope.CATEGORIES.value:
        return category_id is not None and str(category_id) in {str(c) for c in (offer.scope_categories or [])}
    if scope == OfferScope.VARIANTS.value:
        return variant_sku is not None and variant_sku in (offer.scope_variants or [])
    return False


def _best(
    unit_price: Decimal,
    candidates: Sequence[LinePromotion],
    quantity: int,
) -> Tuple[Optional[LinePromotion], Decimal]:
    """Выбрать скидку с минимальной итоговой ценой; только если она реально снижает цену"""
    best_promo = None
    best_price = unit_price
    for promo in candidates:
        price = discounted_unit_price(unit_price, promo, quantity)
        if price < best_price:
            best_price = price
            best_promo = promo
    return best_promo, best_price


def resolve_line_price(
    line: CartLine,
    base_price: Any,
    line_promotions: Sequence[LinePromotion] = (),
    offers: Sequence[Offer] = (),
    variant_price: Optional[Any] = None,
    category_id: Optional[int] = None,
) -> LinePrice:
    """
    Эффективная цена одной строки каталога/корзины.

    Порядок:
    1. Выбран вариант: акции с совпадающим SKU (база: цена варианта)
    2. Акции на базовый товар (без SKU)
    3. Офферы магазина (в каталоге; checkout передаёт их так же)
    В каждой группе выигрывает минимальная цена.
    """
    quantity = int(to_decimal(line.quantity))
    use_variant = line.variant_sku is not None and variant_price is not None
    unit_price = to_decimal(variant_price if use_variant else base_price)

    promo: Optional[LinePromotion] = None
    effective = unit_price
    source = LinePriceSource.NONE

    if line.variant_sku is not None:
        variant_promos = [p for p in line_promotions if p.sku == line.variant_sku]
        promo, effective = _best(unit_price, variant_promos, quantity)
        if promo is not None:
            source = LinePriceSource.VARIANT_PROMOTION

    if promo is None:
        product_promos = [p for p in line_promotions if p.sku is None]
        promo, effective = _best(unit_price, product_promos, quantity)
        if promo is not None:
            source = LinePriceSource.PRODUCT_PROMOTION

    if promo is None and offers:
        offer_promos: List[LinePromotion] = [
            line_promotion_from_offer(o)
            for o in offers
            if offer_matches(o, line.product_id, category_id, line.variant_sku)
        ]
        promo, effective = _best(unit_price, offer_promos, quantity)
        if promo is not None:
            source = LinePriceSource.OFFER

    # Округляем только итоги, цена за единицу в ответе для отображения
    line_amount = effective * quantity

    return LinePrice(
        product_id=line.product_id,
        variant_sku=line.variant_sku,
        quantity=quantity,
        unit_price=round_money(unit_price),
        effective_unit_price=round_money(effective),
        line_total=round_money(line_amount),
        line_amount=line_amount,
        badge_text=promo.badge_text if promo is not None else None,
        source=source,
        source_id=promo.promotion_id if promo is not None else None,
    )
