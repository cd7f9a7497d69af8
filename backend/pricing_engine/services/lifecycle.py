from datetime import datetime
from typing import Optional, Any

from pricing_engine.models.promotion import PromotionStatus


def effective_status(
    start_at: Optional[datetime],
    end_at: Optional[datetime],
    is_active: bool,
    now: Optional[datetime] = None,
) -> PromotionStatus:
    """
    Статус акции/оффера всегда вычисляется от текущего времени:
    1. now < start → scheduled
    2. now > end → expired
    3. start <= now <= end и is_active → active
    4. иначе inactive
    Пустая граница = открытый интервал.
    """
    now = now or datetime.utcnow()

    if start_at is not None and now < start_at:
        return PromotionStatus.SCHEDULED
    if end_at is not None and now > end_at:
        return PromotionStatus.EXPIRED
    if is_active:
        return PromotionStatus.ACTIVE
    return PromotionStatus.INACTIVE


def status_of(record: Any, now: Optional[datetime] = None) -> PromotionStatus:
    """Статус для Promotion или Offer (у обоих start_at/end_at/is_active)"""
    return effective_status(record.start_at, record.end_at, bool(record.is_active), now)


def is_effective(record: Any, now: Optional[datetime] = None) -> bool:
    return status_of(record, now) == PromotionStatus.ACTIVE
