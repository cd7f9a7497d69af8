from datetime import datetime, timedelta

from pricing_engine.models.offer import Offer
from pricing_engine.models.promotion import Promotion, PromotionStatus
from pricing_engine.services.lifecycle import effective_status, is_effective, status_of

NOW = datetime(2025, 6, 1, 12, 0)
DAY = timedelta(days=1)


def test_scheduled_before_start():
    assert effective_status(NOW + DAY, NOW + 2 * DAY, True, NOW) == PromotionStatus.SCHEDULED


def test_expired_after_end():
    assert effective_status(NOW - 2 * DAY, NOW - DAY, True, NOW) == PromotionStatus.EXPIRED


def test_active_inside_window():
    assert effective_status(NOW - DAY, NOW + DAY, True, NOW) == PromotionStatus.ACTIVE
    assert effective_status(NOW, NOW, True, NOW) == PromotionStatus.ACTIVE


def test_inactive_flag_inside_window():
    assert effective_status(NOW - DAY, NOW + DAY, False, NOW) == PromotionStatus.INACTIVE


def test_open_bounds():
    assert effective_status(None, None, True, NOW) == PromotionStatus.ACTIVE
    assert effective_status(None, NOW - DAY, True, NOW) == PromotionStatus.EXPIRED


def test_persisted_status_is_ignored():
    promo = Promotion(
        id=1, store_id=1, name="Stale", status=PromotionStatus.ACTIVE,
        start_at=NOW - 3 * DAY, end_at=NOW - DAY, is_active=True,
    )
    assert status_of(promo, NOW) == PromotionStatus.EXPIRED
    assert is_effective(promo, NOW) is False


def test_offers_share_lifecycle():
    offer = Offer(id=1, store_id=1, name="Eid", discount_value=10, start_at=NOW - DAY, end_at=NOW + DAY)
    assert is_effective(offer, NOW) is True
