import logging
from typing import List, Sequence

from sqlmodel import Session, select

from pricing_engine.models.product import Product
from pricing_engine.models.promotion import Promotion, PromotionProduct
from pricing_engine.schemas.pricing import BulkAttachItem, BulkAttachResult

logger = logging.getLogger(__name__)


def attach_products(db: Session, promotion: Promotion, items: Sequence[BulkAttachItem]) -> BulkAttachResult:
    """
    Массово привязать товары к акции.
    Невалидные товары (нет, чужой магазин, неактивен, уже привязан, дубль)
    не валят весь батч, а попадают в invalid.
    """
    rows = db.exec(
        select(PromotionProduct.product_id, PromotionProduct.variant_sku)
        .where(PromotionProduct.promotion_id == promotion.id)
    ).all()
    existing = {(product_id, variant_sku) for product_id, variant_sku in rows}

    invalid: List[int] = []
    seen = set()
    added = 0

    for item in items:
        key = (item.product_id, item.variant_sku)
        product = db.get(Product, item.product_id)

        if (
            product is None
            or product.store_id != promotion.store_id
            or not product.is_active
            or key in existing
            or key in seen
        ):
            invalid.append(item.product_id)
            continue

        seen.add(key)
        db.add(PromotionProduct(
            promotion_id=promotion.id,
            product_id=item.product_id,
            variant_sku=item.variant_sku,
            override_price=item.override_price,
            quantity_limit=item.quantity_limit,
        ))
        added += 1

    db.commit()
    logger.info("Promotion %s: %d products attached, %d invalid", promotion.id, added, len(invalid))

    return BulkAttachResult(added=added, invalid=invalid)
