# Register Models

from .product import ProductRef
from .cart import (
    CartLine,
    CartState,
    CartSummary,
    DiscountType,
    AddLineRequest,
    UpdateLineQuantityRequest,
    LineDiscountRequest,
    CartDiscountRequest,
    CustomerRequest,
    NotesRequest,
    TaxRateRequest,
    CartResponse,
)
from .payment import PaymentMethod, PaymentOutcome
from .transaction import (
    Transaction,
    TransactionStatus,
    TransactionFilter,
    StoredPaymentMethod,
    SplitPayment,
    PaymentDetails,
    HeldSale,
    CheckoutResponse,
    StatusChangeRequest,
)

__all__ = [
    "ProductRef",
    "CartLine",
    "CartState",
    "CartSummary",
    "DiscountType",
    "AddLineRequest",
    "UpdateLineQuantityRequest",
    "LineDiscountRequest",
    "CartDiscountRequest",
    "CustomerRequest",
    "NotesRequest",
    "TaxRateRequest",
    "CartResponse",
    "PaymentMethod",
    "PaymentOutcome",
    "Transaction",
    "TransactionStatus",
    "TransactionFilter",
    "StoredPaymentMethod",
    "SplitPayment",
    "PaymentDetails",
    "HeldSale",
    "CheckoutResponse",
    "StatusChangeRequest",
]
