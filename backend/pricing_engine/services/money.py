from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Число из чего угодно (str/int/float/Decimal); None если это не конечное число"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
    if not result.is_finite():
        return None
    return result


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """Безопасное приведение: NaN, inf, None и мусор превращаются в default"""
    result = parse_decimal(value)
    return default if result is None else result


def round_money(amount: Decimal) -> Decimal:
    """Округление до копеек, half-up"""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)
