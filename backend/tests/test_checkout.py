from decimal import Decimal

from pricing_engine.models.product import Product
from pricing_engine.models.tax import TaxRule
from pricing_engine.schemas.pricing import (
    CartLine, DiscountResult, LinePromotion, LinePromotionKind, StackingResult, TaxLine, TaxSettings,
)
from pricing_engine.services.checkout import CheckoutService, apply_discount_to_lines, merchandise_discount
from pricing_engine.services.tax import TaxService


class _FakeCatalog:
    def __init__(self, products, line_promotions=None):
        self.products = {p.id: p for p in products}
        self.line_promotions = line_promotions or {}

    def get_product(self, product_id):
        return self.products.get(product_id)

    def get_variant_by_sku(self, sku):
        return None

    def get_line_promotions(self, product_id, now=None):
        return self.line_promotions.get(product_id, [])

    def get_active_offers(self, store_id, now=None):
        return []


class _NoPromotions:
    def get_active_promotions(self, store_id, now=None):
        return []

    def load_promotion_details(self, promotion_id):
        return [], []


def _tax_service(rate):
    rules = [TaxRule(category="general", rate=Decimal(rate), priority=1)]
    return TaxService(lambda: TaxSettings(tax_enabled=True), lambda: rules)


def _line(product_id, amount):
    return TaxLine(product_id=product_id, quantity=1, price=Decimal(amount))


def test_discount_is_split_in_proportion_to_line_amounts():
    lines = apply_discount_to_lines([_line(1, "300"), _line(2, "100")], Decimal("100"))
    assert [line.price for line in lines] == [Decimal("225"), Decimal("75")]


def test_discount_never_exceeds_line_amounts():
    lines = apply_discount_to_lines([_line(1, "50")], Decimal("80"))
    assert lines[0].price == Decimal("0")


def test_no_discount_leaves_lines_untouched():
    lines = [_line(1, "50")]
    assert apply_discount_to_lines(lines, Decimal("0"))[0].price == Decimal("50")


def test_free_shipping_credit_is_not_a_merchandise_discount():
    stacking = StackingResult(
        applied=[
            DiscountResult(promotion_id=1, amount=Decimal("250"), free_shipping=True),
            DiscountResult(promotion_id=2, amount=Decimal("100")),
        ],
        total_discount=Decimal("350"),
        final_total=Decimal("650"),
    )
    # 250 = 200 кредита за доставку + 50 скидки
    assert merchandise_discount(stacking, Decimal("200")) == Decimal("150")


def test_quote_bogo_subtotal_is_not_rounded_per_unit():
    catalog = _FakeCatalog(
        [Product(id=1, store_id=1, name="Khussa", price=Decimal("100"))],
        line_promotions={1: [LinePromotion(kind=LinePromotionKind.BUY_ONE_GET_ONE)]},
    )
    service = CheckoutService(catalog, _NoPromotions(), _tax_service("3"))

    quote = service.quote(1, [CartLine(product_id=1, quantity=3)])

    assert quote.lines[0].line_total == Decimal("200.00")
    assert quote.subtotal == Decimal("200.00")
    assert quote.tax.amount == Decimal("6.00")
    assert quote.total == Decimal("206.00")
