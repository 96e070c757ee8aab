"""Payment models for the register"""

from pydantic import BaseModel
from typing import Optional
from enum import Enum


class PaymentMethod(str, Enum):
    """Tender selected at the payment step"""
    CASH = "cash"
    CARD = "card"
    MOBILE = "mobile"
    MULTIPLE = "multiple"


class PaymentOutcome(BaseModel):
    """Result of the payment step.

    For ``multiple`` the per-tender parts are carried in ``cash_amount``,
    ``card_amount`` and ``mobile_amount`` and ``amount_paid`` is their sum.
    """
    payment_method: PaymentMethod
    amount_paid: float
    cash_amount: Optional[float] = None
    card_amount: Optional[float] = None
    mobile_amount: Optional[float] = None
    change: float = 0.0
    card_type: Optional[str] = None
    card_last_four: Optional[str] = None
    mobile_provider: Optional[str] = None
    mobile_number: Optional[str] = None
    reference: Optional[str] = None

    @property
    def split_total(self) -> float:
        """Sum of the split parts, missing parts counted as zero"""
        return (self.cash_amount or 0) + (self.card_amount or 0) + (self.mobile_amount or 0)
