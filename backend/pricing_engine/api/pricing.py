from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select
from typing import List, Optional
from datetime import datetime
from pricing_engine.api.deps import (
    get_db, get_promotion_engine, get_tax_service, get_checkout_service,
)
from pricing_engine.models.product import Store
from pricing_engine.models.promotion import Promotion
from pricing_engine.schemas.pricing import (
    CartContext, StackingResult, QuoteRequest, CheckoutQuote, TaxRequest, TaxResult,
    CartLine, LinePrice, BulkAttachRequest, BulkAttachResult, PromotionStatusResponse,
)
from pricing_engine.services.associations import attach_products
from pricing_engine.services.checkout import CheckoutService
from pricing_engine.services.lifecycle import status_of
from pricing_engine.services.line_pricing import resolve_line_price
from pricing_engine.services.repository import SqlCatalogRepository
from pricing_engine.services.stacking import PromotionEngine, order_by_priority
from pricing_engine.services.tax import TaxService

router = APIRouter(prefix="/api/pricing", tags=["pricing"])


def _get_store(db: Session, store_id: int) -> Store:
    store = db.get(Store, store_id)
    if not store:
        raise HTTPException(status_code=404, detail="Store not found")
    return store


# === Корзина ===

@router.post("/stores/{store_id}/promotions/apply", response_model=StackingResult)
def apply_store_promotions(
    store_id: int,
    context: CartContext,
    db: Session = Depends(get_db),
    engine: PromotionEngine = Depends(get_promotion_engine),
):
    """Применить действующие акции магазина к корзине"""
    _get_store(db, store_id)
    return engine.apply_promotions(store_id, context)


@router.post("/stores/{store_id}/quote", response_model=CheckoutQuote)
def quote_cart(
    store_id: int,
    data: QuoteRequest,
    db: Session = Depends(get_db),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    """Полный расчёт: цены строк, акции, налог, итог"""
    _get_store(db, store_id)
    return checkout.quote(store_id, data.items, data.shipping_cost, data.user_id)


@router.post("/tax", response_model=TaxResult)
def compute_cart_tax(
    data: TaxRequest,
    tax_service: TaxService = Depends(get_tax_service),
):
    """Налог по строкам корзины"""
    return tax_service.compute(data.items)


# === Каталог ===

@router.get("/products/{product_id}/price", response_model=LinePrice)
def get_product_price(
    product_id: int,
    variant_sku: Optional[str] = Query(None),
    quantity: int = Query(1, ge=1),
    db: Session = Depends(get_db),
):
    """Цена товара для витрины (с акциями и офферами магазина)"""
    catalog = SqlCatalogRepository(db)

    product = catalog.get_product(product_id)
    if not product or not product.is_active:
        raise HTTPException(status_code=404, detail="Product not found")

    variant = None
    if variant_sku:
        variant = catalog.get_variant_by_sku(variant_sku)
        if not variant or variant.product_id != product.id:
            raise HTTPException(status_code=404, detail="Variant not found")

    return resolve_line_price(
        CartLine(product_id=product.id, variant_sku=variant_sku, quantity=quantity),
        base_price=product.price,
        line_promotions=catalog.get_line_promotions(product.id),
        offers=catalog.get_active_offers(product.store_id),
        variant_price=variant.price if variant else None,
        category_id=product.category_id,
    )


# === Акции магазина ===

@router.get("/stores/{store_id}/promotions", response_model=List[PromotionStatusResponse])
def list_store_promotions(store_id: int, db: Session = Depends(get_db)):
    """Все акции магазина с вычисленным статусом, в порядке применения"""
    _get_store(db, store_id)
    now = datetime.utcnow()

    promotions = db.exec(select(Promotion).where(Promotion.store_id == store_id)).all()

    return [
        PromotionStatusResponse(
            id=p.id,
            name=p.name,
            priority=p.priority,
            stackable=p.stackable,
            status=status_of(p, now),
            start_at=p.start_at,
            end_at=p.end_at,
        )
        for p in order_by_priority(promotions)
    ]


@router.post("/promotions/{promotion_id}/products", response_model=BulkAttachResult)
def attach_promotion_products(
    promotion_id: int,
    data: BulkAttachRequest,
    db: Session = Depends(get_db),
):
    """Массово привязать товары к акции"""
    promo = db.get(Promotion, promotion_id)
    if not promo:
        raise HTTPException(status_code=404, detail="Promotion not found")

    return attach_products(db, promo, data.items)
