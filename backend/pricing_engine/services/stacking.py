import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from pricing_engine.models.promotion import Promotion, PromotionRule, PromotionAction
from pricing_engine.schemas.pricing import CartContext, DiscountResult, StackingResult
from pricing_engine.services.discounts import calculate_discount
from pricing_engine.services.money import ZERO, to_decimal, round_money
from pricing_engine.services.repository import PromotionRepository
from pricing_engine.services.rules import validate_rules

logger = logging.getLogger(__name__)

DetailsLoader = Callable[[int], Tuple[Sequence[PromotionRule], Sequence[PromotionAction]]]


def priority_key(promotion: Promotion):
    """priority по убыванию, при равенстве раньше созданная, затем меньший id"""
    return (
        -(promotion.priority or 0),
        promotion.created_at or datetime.min,
        promotion.id or 0,
    )


def order_by_priority(promotions: Iterable[Promotion]) -> List[Promotion]:
    return sorted(promotions, key=priority_key)


def resolve_stack(
    promotions: Sequence[Promotion],
    load_details: DetailsLoader,
    context: CartContext,
) -> StackingResult:
    """
    Применить акции по очереди (promotions уже отсортированы по приоритету).

    Условия проверяются по исходной корзине, а скидка считается
    от текущей (уже уменьшенной) суммы. Нестекуемая акция после
    применения останавливает перебор.
    """
    original_total = to_decimal(context.total)
    running_total = original_total
    applied: List[DiscountResult] = []

    for promo in promotions:
        rules, actions = load_details(promo.id)

        if not validate_rules(rules, context):
            logger.debug("Promotion %s: rules not satisfied", promo.id)
            continue

        running_context = context.model_copy(update={"total": running_total})
        result = calculate_discount(promo, actions, running_context)

        if result.amount > ZERO or result.free_shipping:
            applied.append(result)
            running_total -= result.amount
            logger.debug(
                "Promotion %s applied: -%s (free_shipping=%s), running total %s",
                promo.id, result.amount, result.free_shipping, running_total,
            )

            if not promo.stackable:
                logger.debug("Promotion %s is not stackable, stopping", promo.id)
                break

    final_total = max(ZERO, running_total)
    total_discount = original_total - final_total

    return StackingResult(
        applied=applied,
        total_discount=round_money(total_discount),
        final_total=round_money(final_total),
    )


class PromotionEngine:
    """
    Движок акций магазина. Без состояния: создаётся на каждый расчёт
    с репозиторием, из которого читает акции, правила и действия.
    """

    def __init__(self, repository: PromotionRepository):
        self.repository = repository

    def apply_promotions(
        self,
        store_id: int,
        context: CartContext,
        now: Optional[datetime] = None,
    ) -> StackingResult:
        promotions = order_by_priority(self.repository.get_active_promotions(store_id, now))
        logger.info("Store %s: %d active promotions for cart total %s", store_id, len(promotions), context.total)

        result = resolve_stack(promotions, self.repository.load_promotion_details, context)

        logger.info(
            "Store %s: %d promotions applied, discount %s, final %s",
            store_id, len(result.applied), result.total_discount, result.final_total,
        )
        return result
