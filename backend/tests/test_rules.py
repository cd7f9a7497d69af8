from decimal import Decimal

import pytest

from pricing_engine.models.promotion import PromotionRule
from pricing_engine.schemas.pricing import CartContext, CartItem
from pricing_engine.services.rules import compare, evaluate_rule, validate_rules


def _context(total="1000", items=None):
    items = items if items is not None else [
        CartItem(product_id=1, quantity=2, price=Decimal("300")),
        CartItem(product_id=2, quantity=1, price=Decimal("400")),
    ]
    return CartContext(items=items, total=Decimal(total))


def _rule(type_, operator="gte", value=None):
    return PromotionRule(promotion_id=1, type=type_, operator=operator, value=value)


def test_empty_rule_set_always_qualifies():
    assert validate_rules([], _context()) is True
    assert validate_rules([], _context(total="0", items=[])) is True


@pytest.mark.parametrize("operator,target,expected", [
    ("eq", "1000", True),
    ("gt", "1000", False),
    ("gte", "1000", True),
    ("lt", "1001", True),
    ("lte", "999", False),
    ("between", "1000", False),
])
def test_compare_operators(operator, target, expected):
    assert compare(Decimal("1000"), operator, Decimal(target)) is expected


def test_min_order_value_uses_cart_total():
    assert evaluate_rule(_rule("min_order_value", "gte", 500), _context()) is True
    assert evaluate_rule(_rule("min_order_value", "gte", "1500"), _context()) is False


def test_min_quantity_sums_line_quantities():
    assert evaluate_rule(_rule("min_quantity", "gte", 3), _context()) is True
    assert evaluate_rule(_rule("min_quantity", "gt", 3), _context()) is False


def test_specific_product_accepts_scalar_or_list():
    assert evaluate_rule(_rule("specific_product", value=2), _context()) is True
    assert evaluate_rule(_rule("specific_product", value=["7", "2"]), _context()) is True
    assert evaluate_rule(_rule("specific_product", value=[7, 8]), _context()) is False


def test_customer_group_is_open_extension_point():
    assert evaluate_rule(_rule("customer_group", "eq", "vip"), _context()) is True


def test_unknown_rule_type_fails_closed():
    assert evaluate_rule(_rule("weather_is_sunny", "eq", True), _context()) is False


def test_non_numeric_threshold_fails_closed():
    assert evaluate_rule(_rule("min_order_value", "gte", "lots"), _context()) is False
    assert evaluate_rule(_rule("min_quantity", "gte", None), _context()) is False


def test_rules_are_and_folded():
    rules = [
        _rule("min_order_value", "gte", 500),
        _rule("specific_product", value=99),
    ]
    assert validate_rules(rules, _context()) is False
    assert validate_rules(rules[:1], _context()) is True
