import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence

from pricing_engine.schemas.pricing import (
    CartLine, CartItem, CartContext, CheckoutQuote, LinePrice, StackingResult, TaxLine,
)
from pricing_engine.services.line_pricing import resolve_line_price
from pricing_engine.services.money import ZERO, to_decimal, round_money
from pricing_engine.services.repository import CatalogRepository, PromotionRepository
from pricing_engine.services.stacking import PromotionEngine
from pricing_engine.services.tax import TaxService

logger = logging.getLogger(__name__)


def merchandise_discount(stacking: StackingResult, shipping: Decimal) -> Decimal:
    """Скидка корзины без кредита за бесплатную доставку: только она уменьшает налоговую базу"""
    shipping_credit = ZERO
    for result in stacking.applied:
        if result.free_shipping:
            shipping_credit += min(to_decimal(shipping), result.amount)
    return max(ZERO, stacking.total_discount - shipping_credit)


def apply_discount_to_lines(lines: Sequence[TaxLine], discount: Decimal) -> List[TaxLine]:
    """
    Разложить скидку корзины по строкам пропорционально их суммам.
    Строки должны быть в виде quantity=1, price=сумма строки.
    """
    base = sum((to_decimal(line.price) for line in lines), ZERO)
    if discount <= ZERO or base <= ZERO:
        return list(lines)

    discount = min(discount, base)
    return [
        line.model_copy(update={"price": to_decimal(line.price) - discount * to_decimal(line.price) / base})
        for line in lines
    ]


class CheckoutService:
    """
    Полный расчёт корзины магазина:
    цены строк → подытог → акции (стекинг) → налог → итог к оплате.
    """

    def __init__(
        self,
        catalog: CatalogRepository,
        promotions: PromotionRepository,
        tax_service: TaxService,
    ):
        self.catalog = catalog
        self.promotions = promotions
        self.tax_service = tax_service

    def quote(
        self,
        store_id: int,
        lines: Sequence[CartLine],
        shipping_cost: Decimal = ZERO,
        user_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> CheckoutQuote:
        offers = self.catalog.get_active_offers(store_id, now)

        priced: List[LinePrice] = []
        cart_items: List[CartItem] = []
        tax_lines: List[TaxLine] = []

        for line in lines:
            product = self.catalog.get_product(line.product_id)
            if product is None or product.store_id != store_id:
                logger.warning("Store %s: product %s not found, line skipped", store_id, line.product_id)
                continue

            variant = None
            if line.variant_sku:
                variant = self.catalog.get_variant_by_sku(line.variant_sku)
                if variant is None or variant.product_id != product.id:
                    logger.warning("Product %s: invalid variant %s, line skipped", product.id, line.variant_sku)
                    continue

            line_price = resolve_line_price(
                line,
                base_price=product.price,
                line_promotions=self.catalog.get_line_promotions(product.id, now),
                offers=offers,
                variant_price=variant.price if variant is not None else None,
                category_id=product.category_id,
            )
            logger.debug(
                "Item pricing: product=%s qty=%s base=%s effective=%s",
                product.id, line.quantity, line_price.unit_price, line_price.effective_unit_price,
            )
            priced.append(line_price)

            cart_items.append(CartItem(
                product_id=product.id,
                quantity=line_price.quantity,
                price=line_price.line_amount / line_price.quantity,
                category_id=product.category_id,
            ))
            # Налог считается от суммы строки, чтобы на неё можно было разложить скидку корзины
            tax_lines.append(TaxLine(
                product_id=product.id,
                quantity=1,
                price=line_price.line_amount,
                tax_exempt=bool((variant is not None and variant.tax_exempt) or product.tax_exempt),
                variant_tax_rate=variant.tax_rate if variant is not None else None,
            ))

        subtotal = round_money(sum((p.line_amount for p in priced), ZERO))
        shipping = to_decimal(shipping_cost)

        context = CartContext(items=cart_items, total=subtotal, shipping_cost=shipping, user_id=user_id)
        stacking = PromotionEngine(self.promotions).apply_promotions(store_id, context, now)
        discount = merchandise_discount(stacking, shipping)
        tax = self.tax_service.compute(apply_discount_to_lines(tax_lines, discount))

        total = round_money(stacking.final_total + shipping + tax.amount)

        return CheckoutQuote(
            lines=priced,
            subtotal=subtotal,
            promotions=stacking,
            tax=tax,
            shipping_cost=round_money(shipping),
            total=total,
        )
