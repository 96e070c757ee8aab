"""Transaction models for the register"""

from pydantic import BaseModel, ConfigDict
from typing import Any, Optional
from datetime import datetime
from enum import Enum

from .cart import CartLine, CartState, DiscountType


class TransactionStatus(str, Enum):
    COMPLETED = "completed"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


class StoredPaymentMethod(str, Enum):
    """Payment method as recorded on a transaction"""
    CASH = "cash"
    CARD = "card"
    MOBILE = "mobile"
    SPLIT = "split"


class SplitPayment(BaseModel):
    """One tender within a split payment"""
    method: StoredPaymentMethod
    amount: float
    details: dict[str, Any] = {}


class PaymentDetails(BaseModel):
    """Method-specific payment data"""
    # Cash
    cash_received: Optional[float] = None
    # Card
    card_type: Optional[str] = None
    card_last4: Optional[str] = None
    card_reference: Optional[str] = None
    # Mobile
    mobile_provider: Optional[str] = None
    mobile_number: Optional[str] = None
    mobile_reference: Optional[str] = None
    # Split
    split_payments: Optional[list[SplitPayment]] = None


class Transaction(BaseModel):
    """Finalized sale.

    Monetary fields are a frozen copy of the cart totals at payment time.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    transaction_number: str
    date: datetime
    items: list[CartLine]
    subtotal: float
    discount_type: DiscountType
    discount_value: float
    discount_amount: float
    tax_rate: float
    tax_amount: float
    total: float
    amount_paid: float
    change: float
    payment_method: StoredPaymentMethod
    payment_details: PaymentDetails
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    cashier_id: str
    cashier_name: str
    tenant_id: str
    store_name: str
    notes: Optional[str] = None
    status: TransactionStatus = TransactionStatus.COMPLETED


class TransactionFilter(BaseModel):
    """Search criteria for transaction history"""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    payment_method: Optional[StoredPaymentMethod] = None
    cashier_id: Optional[str] = None
    customer_id: Optional[str] = None
    status: Optional[TransactionStatus] = None
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    search_term: Optional[str] = None


class HeldSale(BaseModel):
    """Suspended cart waiting to be recalled"""
    id: str
    timestamp: datetime
    snapshot: CartState


class CheckoutResponse(BaseModel):
    """Response from checkout.

    ``saved`` is False when the backend could not confirm the transaction;
    the local transaction is still returned for the receipt.
    """
    success: bool
    transaction: Optional[Transaction] = None
    saved: bool = False
    warning: Optional[str] = None
    error_message: Optional[str] = None


class StatusChangeRequest(BaseModel):
    reason: str
