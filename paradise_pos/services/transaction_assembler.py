"""
Transaction Assembler

Freezes a cart and a payment outcome into an immutable Transaction.
Totals are copied from the cart as they are at call time and never
recomputed afterwards.
"""

import time
import uuid
from datetime import datetime, timezone
from typing import Optional

from ..models.cart import CartState
from ..models.payment import PaymentMethod, PaymentOutcome
from ..models.transaction import (
    PaymentDetails,
    SplitPayment,
    StoredPaymentMethod,
    Transaction,
    TransactionStatus,
)


class TransactionNumberGenerator:
    """Issues TXN<epoch-millis> numbers, strictly increasing per process"""

    def __init__(self, prefix: str = "TXN"):
        self.prefix = prefix
        self._last = 0

    def next(self) -> str:
        millis = max(int(time.time() * 1000), self._last + 1)
        self._last = millis
        return f"{self.prefix}{millis}"


transaction_numbers = TransactionNumberGenerator()


def amount_tendered(outcome: PaymentOutcome) -> float:
    """Amount recorded as paid. A split payment is the sum of its parts."""
    if outcome.payment_method == PaymentMethod.MULTIPLE:
        return outcome.split_total
    return outcome.amount_paid


def compute_change(total: float, outcome: PaymentOutcome) -> float:
    """Change owed to the customer.

    Card and mobile are exact tender. Cash change is not floored since the
    caller has already checked the tender covers the total.
    """
    if outcome.payment_method == PaymentMethod.CASH:
        return outcome.amount_paid - total
    if outcome.payment_method == PaymentMethod.MULTIPLE:
        return max(0.0, outcome.split_total - total)
    return 0.0


def build_split_payments(outcome: PaymentOutcome) -> list[SplitPayment]:
    """Per-tender parts of a split payment, skipping zero amounts"""
    parts = []
    if outcome.cash_amount and outcome.cash_amount > 0:
        parts.append(SplitPayment(
            method=StoredPaymentMethod.CASH,
            amount=outcome.cash_amount,
        ))
    if outcome.card_amount and outcome.card_amount > 0:
        parts.append(SplitPayment(
            method=StoredPaymentMethod.CARD,
            amount=outcome.card_amount,
            details={"card_type": outcome.card_type, "card_last4": outcome.card_last_four},
        ))
    if outcome.mobile_amount and outcome.mobile_amount > 0:
        parts.append(SplitPayment(
            method=StoredPaymentMethod.MOBILE,
            amount=outcome.mobile_amount,
            details={"provider": outcome.mobile_provider, "number": outcome.mobile_number},
        ))
    return parts


def build_payment_details(outcome: PaymentOutcome) -> PaymentDetails:
    is_split = outcome.payment_method == PaymentMethod.MULTIPLE
    return PaymentDetails(
        cash_received=outcome.cash_amount,
        card_type=outcome.card_type,
        card_last4=outcome.card_last_four,
        card_reference=outcome.reference if outcome.payment_method == PaymentMethod.CARD else None,
        mobile_provider=outcome.mobile_provider,
        mobile_number=outcome.mobile_number,
        mobile_reference=outcome.reference if outcome.payment_method == PaymentMethod.MOBILE else None,
        split_payments=build_split_payments(outcome) if is_split else None,
    )


def normalize_payment_method(method: PaymentMethod) -> StoredPaymentMethod:
    if method == PaymentMethod.MULTIPLE:
        return StoredPaymentMethod.SPLIT
    return StoredPaymentMethod(method.value)


def assemble_transaction(
    cart: CartState,
    outcome: PaymentOutcome,
    cashier_id: str,
    cashier_name: str,
    tenant_id: str,
    store_name: str,
    transaction_number: Optional[str] = None,
    date: Optional[datetime] = None,
) -> Transaction:
    """
    Build a completed Transaction from a cart snapshot and a payment outcome.

    The caller guarantees the cart is not empty and the tender covers the
    total (the sum of parts for a split payment); neither is checked here.

    Args:
        cart: Cart as of payment completion
        outcome: Result of the payment step
        cashier_id: Cashier ringing the sale
        cashier_name: Display name of the cashier
        tenant_id: Tenant owning the store
        store_name: Store name printed on the receipt
        transaction_number: Override for the generated number
        date: Override for the transaction timestamp

    Returns:
        Frozen Transaction with deep-copied lines
    """
    return Transaction(
        id=str(uuid.uuid4()),
        transaction_number=transaction_number or transaction_numbers.next(),
        date=date or datetime.now(timezone.utc),
        items=[line.model_copy(deep=True) for line in cart.items],
        subtotal=cart.subtotal,
        discount_type=cart.discount_type,
        discount_value=cart.discount_value,
        discount_amount=cart.discount_amount,
        tax_rate=cart.tax_rate,
        tax_amount=cart.tax_amount,
        total=cart.total,
        amount_paid=amount_tendered(outcome),
        change=compute_change(cart.total, outcome),
        payment_method=normalize_payment_method(outcome.payment_method),
        payment_details=build_payment_details(outcome),
        customer_id=cart.customer_id,
        customer_name=cart.customer_name,
        cashier_id=cashier_id,
        cashier_name=cashier_name,
        tenant_id=tenant_id,
        store_name=store_name,
        notes=cart.notes,
        status=TransactionStatus.COMPLETED,
    )


def with_status(transaction: Transaction, status: TransactionStatus) -> Transaction:
    """Copy of a transaction with a new status; totals are untouched"""
    return transaction.model_copy(update={"status": status})
