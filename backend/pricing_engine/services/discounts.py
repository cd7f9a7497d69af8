import logging
from decimal import Decimal
from typing import Sequence

from pricing_engine.models.promotion import (
    Promotion, PromotionAction, PromotionType, ActionType, ActionTarget,
)
from pricing_engine.schemas.pricing import CartContext, DiscountResult
from pricing_engine.services.money import ZERO, HUNDRED, to_decimal, round_money

logger = logging.getLogger(__name__)


def _legacy_discount(promotion: Promotion, total: Decimal) -> Decimal:
    """Скидка по type/value самой акции, когда actions не заданы"""
    value = to_decimal(promotion.value)
    if promotion.type == PromotionType.PERCENTAGE:
        return total * value / HUNDRED
    elif promotion.type == PromotionType.FIXED:
        return value
    # buy_one_get_one считается по строкам, на уровне корзины скидки нет
    return ZERO


def _action_discount(action: PromotionAction, context: CartContext) -> Decimal:
    total = to_decimal(context.total)
    value = to_decimal(action.value)

    if action.type == ActionType.PERCENTAGE_DISCOUNT.value:
        target = action.target or ActionTarget.ORDER_TOTAL.value
        if target == ActionTarget.ORDER_TOTAL.value:
            return total * value / HUNDRED
        return ZERO
    if action.type == ActionType.FIXED_AMOUNT.value:
        return value
    if action.type == ActionType.FREE_SHIPPING.value:
        # Бесплатная доставка выражается как денежный кредит
        return to_decimal(context.shipping_cost)

    logger.warning("Unknown action type %r on promotion %s, ignored", action.type, action.promotion_id)
    return ZERO


def calculate_discount(
    promotion: Promotion,
    actions: Sequence[PromotionAction],
    context: CartContext,
) -> DiscountResult:
    """
    Рассчитать скидку акции для корзины.
    Итог зажат в [0, context.total] и округлён до копеек.
    """
    total = to_decimal(context.total)
    free_shipping = False

    if not actions:
        discount = _legacy_discount(promotion, total)
    else:
        discount = ZERO
        for action in actions:
            if action.type == ActionType.FREE_SHIPPING.value:
                free_shipping = True
            discount += _action_discount(action, context)

    # Не скидываем больше суммы и не уходим в минус
    discount = max(ZERO, min(discount, max(total, ZERO)))

    return DiscountResult(
        promotion_id=promotion.id,
        amount=round_money(discount),
        free_shipping=free_shipping,
    )
