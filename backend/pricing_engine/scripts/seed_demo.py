"""
Seed-скрипт: таблицы, настройки платформы и демо-магазин с акциями
Запуск: python -m pricing_engine.scripts.seed_demo
"""
from decimal import Decimal
from sqlmodel import Session, select
from pricing_engine.db.session import engine, create_tables
from pricing_engine.models import (
    Store, Product, ProductVariant, Promotion, PromotionRule, PromotionAction,
    PromotionType, RuleType, RuleOperator, ActionType, Offer, OfferScope,
    PlatformSettings, TaxRule,
)


def seed_platform(session: Session):
    """Настройки налога платформы, если их ещё нет"""
    if session.exec(select(PlatformSettings)).first():
        print("Platform settings already exist")
        return

    session.add(PlatformSettings(tax_enabled=True))
    session.add(TaxRule(name="General", category="general", rate=Decimal("3"), priority=100))
    session.commit()
    print("Platform settings created")


def seed_demo_store(session: Session):
    """Демо-магазин: товар с вариантами, две акции и оффер"""
    if session.exec(select(Store).where(Store.name == "Demo Store")).first():
        print("Demo store already exists")
        return

    store = Store(name="Demo Store")
    session.add(store)
    session.commit()
    session.refresh(store)

    product = Product(store_id=store.id, name="Khussa", price=Decimal("1000"), category_id=1)
    session.add(product)
    session.commit()
    session.refresh(product)

    session.add(ProductVariant(product_id=product.id, sku="KHUSSA-RED-40", price=Decimal("1100")))

    welcome = Promotion(
        store_id=store.id, name="100 off", type=PromotionType.FIXED,
        value=Decimal("100"), priority=20, stackable=True,
    )
    big_cart = Promotion(
        store_id=store.id, name="10% on big carts", type=PromotionType.PERCENTAGE,
        value=Decimal("10"), priority=10, stackable=False,
    )
    session.add(welcome)
    session.add(big_cart)
    session.commit()
    session.refresh(big_cart)

    session.add(PromotionRule(
        promotion_id=big_cart.id, type=RuleType.MIN_ORDER_VALUE.value,
        operator=RuleOperator.GTE.value, value=500,
    ))
    session.add(PromotionAction(
        promotion_id=big_cart.id, type=ActionType.PERCENTAGE_DISCOUNT.value, value=Decimal("10"),
    ))
    session.add(Offer(
        store_id=store.id, name="Eid sale", discount_value=Decimal("15"),
        scope_type=OfferScope.ALL, badge_text="Eid -15%",
    ))
    session.commit()
    print(f"Demo store created: {store.id}")


def main():
    print("Creating tables...")
    create_tables()
    with Session(engine) as session:
        print("Seeding platform...")
        seed_platform(session)
        print("Seeding demo store...")
        seed_demo_store(session)
    print("Done!")


if __name__ == "__main__":
    main()
