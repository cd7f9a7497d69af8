from .pricing import (
    CartItem, CartContext, DiscountResult, StackingResult,
    TaxSettings, TaxLine, TaxResult, TaxRequest,
    CartLine, LinePrice, LinePromotion, QuoteRequest, CheckoutQuote,
    BulkAttachRequest, BulkAttachResult, PromotionStatusResponse,
)

__all__ = [
    "CartItem", "CartContext", "DiscountResult", "StackingResult",
    "TaxSettings", "TaxLine", "TaxResult", "TaxRequest",
    "CartLine", "LinePrice", "LinePromotion", "QuoteRequest", "CheckoutQuote",
    "BulkAttachRequest", "BulkAttachResult", "PromotionStatusResponse",
]
