from .product import Store, Product, ProductVariant
from .promotion import (
    Promotion, PromotionRule, PromotionAction, PromotionProduct,
    PromotionType, PromotionAppliesTo, PromotionStatus,
    RuleType, RuleOperator, ActionType, ActionTarget,
)
from .offer import Offer, OfferDiscountType, OfferScope
from .tax import PlatformSettings, TaxRule

__all__ = [
    "Store", "Product", "ProductVariant",
    "Promotion", "PromotionRule", "PromotionAction", "PromotionProduct",
    "PromotionType", "PromotionAppliesTo", "PromotionStatus",
    "RuleType", "RuleOperator", "ActionType", "ActionTarget",
    "Offer", "OfferDiscountType", "OfferScope",
    "PlatformSettings", "TaxRule",
]
