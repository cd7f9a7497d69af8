from fastapi import Depends
from sqlmodel import Session
from pricing_engine.db.session import engine
from pricing_engine.services.checkout import CheckoutService
from pricing_engine.services.repository import (
    SqlPromotionRepository, SqlCatalogRepository, SqlTaxRepository,
)
from pricing_engine.services.stacking import PromotionEngine
from pricing_engine.services.tax import TaxService


def get_db():
    with Session(engine) as session:
        yield session


def get_promotion_engine(db: Session = Depends(get_db)) -> PromotionEngine:
    return PromotionEngine(SqlPromotionRepository(db))


def get_tax_service(db: Session = Depends(get_db)) -> TaxService:
    repo = SqlTaxRepository(db)
    return TaxService(repo.get_platform_settings, repo.get_tax_rules)


def get_checkout_service(db: Session = Depends(get_db)) -> CheckoutService:
    repo = SqlTaxRepository(db)
    return CheckoutService(
        catalog=SqlCatalogRepository(db),
        promotions=SqlPromotionRepository(db),
        tax_service=TaxService(repo.get_platform_settings, repo.get_tax_rules),
    )
