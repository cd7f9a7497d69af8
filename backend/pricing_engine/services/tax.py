import logging
from decimal import Decimal
from typing import Callable, List, Sequence, Optional

from pricing_engine.models.tax import TaxRule
from pricing_engine.schemas.pricing import TaxLine, TaxSettings, TaxResult, TaxBreakdownLine
from pricing_engine.services.money import ZERO, HUNDRED, parse_decimal, to_decimal, round_money

logger = logging.getLogger(__name__)

GENERAL_CATEGORY = "general"

GetPlatformSettings = Callable[[], TaxSettings]
GetTaxRules = Callable[[], Sequence[TaxRule]]


def _is_general(rule: TaxRule) -> bool:
    return (not rule.category or str(rule.category).lower() == GENERAL_CATEGORY) and not rule.province


def global_rate(rules: Sequence[TaxRule]) -> Decimal:
    """
    Глобальная ставка платформы:
    1. Только enabled и не exempt
    2. Предпочитаем правила без провинции и с категорией general/пустой
    3. Если таких нет: любые enabled не exempt
    4. Берём ставку правила с максимальным priority; не положительная ставка = 0
    """
    candidates = [r for r in rules if r.enabled and not r.exempt]
    general = [r for r in candidates if _is_general(r)]
    chosen = sorted(general or candidates, key=lambda r: -(r.priority or 0))

    if not chosen:
        return ZERO

    rate = parse_decimal(chosen[0].rate)
    if rate is None or rate <= ZERO:
        return ZERO
    return rate


def _line_rate(line: TaxLine, default_rate: Decimal) -> Decimal:
    """Ставка варианта важнее глобальной, если она задана и не отрицательна"""
    variant_rate = parse_decimal(line.variant_tax_rate)
    if variant_rate is not None and variant_rate >= ZERO:
        return variant_rate
    return default_rate


def compute_tax(
    lines: Sequence[TaxLine],
    settings: TaxSettings,
    rules: Sequence[TaxRule],
) -> TaxResult:
    """
    Налог по строкам. Округляется только итог, строки в breakdown
    остаются неокруглёнными.
    """
    if not settings.tax_enabled:
        return TaxResult(
            amount=round_money(ZERO),
            breakdown=[TaxBreakdownLine(product_id=line.product_id, rate=ZERO, tax=ZERO) for line in lines],
        )

    rate_default = global_rate(rules)
    total = ZERO
    breakdown: List[TaxBreakdownLine] = []

    for line in lines:
        amount = to_decimal(line.price) * to_decimal(line.quantity)
        rate = _line_rate(line, rate_default)

        tax = ZERO
        if not line.tax_exempt and amount > ZERO and rate > ZERO:
            tax = rate / HUNDRED * amount

        total += tax
        breakdown.append(TaxBreakdownLine(product_id=line.product_id, rate=rate, tax=tax))

    return TaxResult(amount=round_money(total), breakdown=breakdown)


class TaxService:
    """Расчёт налога с подключаемыми источниками настроек и правил"""

    def __init__(self, get_platform_settings: GetPlatformSettings, get_tax_rules: GetTaxRules):
        self.get_platform_settings = get_platform_settings
        self.get_tax_rules = get_tax_rules

    def compute(self, lines: Sequence[TaxLine]) -> TaxResult:
        settings = self.get_platform_settings()
        rules: Optional[Sequence[TaxRule]] = None
        if settings.tax_enabled:
            rules = self.get_tax_rules()

        result = compute_tax(lines, settings, rules or [])
        logger.info("Tax for %d lines: %s (enabled=%s)", len(lines), result.amount, settings.tax_enabled)
        return result
