import logging
from decimal import Decimal
from typing import Iterable, Any, Optional

from pricing_engine.models.promotion import PromotionRule, RuleType, RuleOperator
from pricing_engine.schemas.pricing import CartContext
from pricing_engine.services.money import parse_decimal, to_decimal

logger = logging.getLogger(__name__)


def compare(actual: Decimal, operator: str, target: Optional[Decimal]) -> bool:
    """Сравнение по оператору правила; неизвестный оператор или порог дают False"""
    if target is None:
        return False
    try:
        op = RuleOperator(operator)
    except ValueError:
        logger.warning("Unknown rule operator %r, rule not satisfied", operator)
        return False

    if op == RuleOperator.EQ:
        return actual == target
    elif op == RuleOperator.GT:
        return actual > target
    elif op == RuleOperator.GTE:
        return actual >= target
    elif op == RuleOperator.LT:
        return actual < target
    elif op == RuleOperator.LTE:
        return actual <= target
    return False


def _as_id_set(value: Any) -> set:
    values = value if isinstance(value, (list, tuple, set)) else [value]
    return {str(v) for v in values if v is not None}


def evaluate_rule(rule: PromotionRule, context: CartContext) -> bool:
    """Проверить одно правило. Неизвестный тип правила не срабатывает"""
    try:
        rule_type = RuleType(rule.type)
    except ValueError:
        logger.warning("Unknown rule type %r on promotion %s, rule not satisfied", rule.type, rule.promotion_id)
        return False

    if rule_type == RuleType.MIN_ORDER_VALUE:
        return compare(to_decimal(context.total), rule.operator, parse_decimal(rule.value))

    if rule_type == RuleType.MIN_QUANTITY:
        total_qty = sum((to_decimal(item.quantity) for item in context.items), Decimal("0"))
        return compare(total_qty, rule.operator, parse_decimal(rule.value))

    if rule_type == RuleType.SPECIFIC_PRODUCT:
        # Значение: один id или список
        product_ids = _as_id_set(rule.value)
        return any(str(item.product_id) in product_ids for item in context.items)

    if rule_type == RuleType.CUSTOMER_GROUP:
        # TODO: подключить сегменты покупателей, когда checkout начнёт передавать группу пользователя
        return True

    return False


def validate_rules(rules: Iterable[PromotionRule], context: CartContext) -> bool:
    """
    Все правила должны выполниться (AND).
    Пустой список: акция подходит всем.
    """
    for rule in rules:
        if not evaluate_rule(rule, context):
            return False
    return True
