"""
Checkout Service

Takes a register session from payment to a finalized transaction:
validate tender, assemble the transaction, clear the cart, then try to
save to the backend. The cart is cleared before the save is attempted and
a failed save never rolls it back; the locally assembled transaction is
used for the receipt instead.
"""

import asyncio
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from ..database.held_sales import HeldSaleStore
from ..database.transactions import TransactionJournal
from ..models.cart import CartState
from ..models.payment import PaymentMethod, PaymentOutcome
from ..models.transaction import (
    CheckoutResponse,
    HeldSale,
    Transaction,
    TransactionFilter,
    TransactionStatus,
)
from . import cart_engine
from .transaction_assembler import assemble_transaction, transaction_numbers
from .transaction_client import TransactionClient

logger = logging.getLogger(__name__)

SAVE_FAILED_WARNING = "Payment processed but failed to save transaction"


class CheckoutRejectedError(Exception):
    """Checkout refused before any transaction was created"""


class BackendUnavailableError(Exception):
    """Operation needs the transactions backend but none is configured"""


def tender_shortfall(total: float, outcome: PaymentOutcome) -> Optional[str]:
    """Reason the tender does not cover the total, or None if it does.

    Card and mobile are treated as exact tender.
    """
    if outcome.payment_method == PaymentMethod.CASH and outcome.amount_paid < total:
        return f"Insufficient cash: received {outcome.amount_paid:.2f}, due {total:.2f}"
    if outcome.payment_method == PaymentMethod.MULTIPLE and outcome.split_total < total:
        return f"Split payment short: received {outcome.split_total:.2f}, due {total:.2f}"
    return None


class CheckoutService:
    """
    Checkout, hold and recall for register sessions.

    Sessions are duck-typed: anything with ``cart``, ``apply``,
    ``reset_cart``, ``cashier_id`` and ``cashier_name`` works.
    """

    def __init__(
        self,
        journal: TransactionJournal,
        held_sales: HeldSaleStore,
        client: Optional[TransactionClient] = None,
        store_name: str = "Paradise POS",
        tenant_id: str = "TENANT001",
        save_timeout: float = 10.0,
    ):
        self.journal = journal
        self.held_sales = held_sales
        self.client = client
        self.store_name = store_name
        self.tenant_id = tenant_id
        self.save_timeout = save_timeout

    async def complete(self, session, outcome: PaymentOutcome) -> CheckoutResponse:
        """
        Finalize the session's cart against a payment outcome.

        Raises:
            CheckoutRejectedError: empty cart, checkout already in flight,
                or tender below the total. The cart is left unchanged.
        """
        if cart_engine.is_empty(session.cart):
            raise CheckoutRejectedError("Cart is empty")
        if session.cart.is_processing:
            raise CheckoutRejectedError("Checkout already in progress")

        session.apply(cart_engine.begin_checkout)

        shortfall = tender_shortfall(session.cart.total, outcome)
        if shortfall:
            session.apply(cart_engine.checkout_failed, shortfall)
            logger.info(f"Checkout rejected for session {session.session_id}: {shortfall}")
            raise CheckoutRejectedError(shortfall)

        transaction = assemble_transaction(
            cart=session.cart,
            outcome=outcome,
            cashier_id=session.cashier_id,
            cashier_name=session.cashier_name,
            tenant_id=self.tenant_id,
            store_name=self.store_name,
        )

        # The cart moves on before the backend has answered.
        session.apply(cart_engine.checkout_succeeded, transaction.id)
        session.reset_cart()
        self.journal.record(transaction)

        logger.info(
            f"Transaction {transaction.transaction_number} completed: "
            f"{transaction.total:.2f} via {transaction.payment_method.value}"
        )

        if self.client is None:
            return CheckoutResponse(success=True, transaction=transaction, saved=False)

        confirmed = await self._save(transaction)
        if confirmed is None:
            return CheckoutResponse(
                success=True,
                transaction=transaction,
                saved=False,
                warning=SAVE_FAILED_WARNING,
            )

        self.journal.replace(transaction.id, confirmed)
        return CheckoutResponse(success=True, transaction=confirmed, saved=True)

    def fail(self, session, reason: str) -> CartState:
        """Abandon an in-flight checkout, e.g. when the payment is cancelled"""
        logger.info(f"Checkout failed for session {session.session_id}: {reason}")
        return session.apply(cart_engine.checkout_failed, reason)

    async def _save(self, transaction: Transaction) -> Optional[Transaction]:
        """Save once with a bounded timeout. No retry: the cart has already moved on."""
        try:
            return await asyncio.wait_for(
                self.client.save_transaction(transaction),
                timeout=self.save_timeout,
            )
        except (httpx.HTTPError, asyncio.TimeoutError, ValidationError) as e:
            logger.warning(
                f"Error saving transaction {transaction.transaction_number}: {e!r}"
            )
            return None

    # ==================== Hold / recall ====================

    def hold(self, session) -> HeldSale:
        """Park the current cart and start a fresh one"""
        if cart_engine.is_empty(session.cart):
            raise CheckoutRejectedError("Cannot hold an empty cart")

        held = self.held_sales.hold(session.cart)
        session.reset_cart()
        return held

    def recall(self, session, held_id: Optional[str] = None) -> CartState:
        """
        Restore a held sale into the session, the most recent by default.

        Held lines are replayed onto the session's cart, so anything already
        on the till stays. Cart discount, tax rate and customer are taken
        from the held sale.

        Raises:
            HeldSaleNotFoundError: nothing held, or no sale with that id
        """
        held = self.held_sales.pop(held_id)
        session.apply(cart_engine.recall_cart, held.snapshot)
        logger.info(f"Recalled held sale {held.id} into session {session.session_id}")
        return session.cart

    # ==================== History ====================

    async def find_transaction(self, key: str) -> Optional[Transaction]:
        """Look up a transaction by id or number, local journal first.

        Backend errors other than 404 propagate.
        """
        transaction = self.journal.get(key) or self.journal.get_by_number(key)
        if transaction is not None or self.client is None:
            return transaction

        try:
            if key.startswith(transaction_numbers.prefix):
                return await self.client.get_transaction_by_number(key)
            return await self.client.get_transaction(key)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise

    async def backend_history(
        self,
        filter: TransactionFilter,
        page: int = 1,
        limit: int = 50,
    ) -> tuple[list[Transaction], int]:
        """Page through the backend's history, searching when any filter field is set"""
        if self.client is None:
            raise BackendUnavailableError("No transactions backend configured")
        if filter.model_dump(exclude_none=True):
            return await self.client.search_transactions(filter, page=page, limit=limit)
        return await self.client.list_transactions(page=page, limit=limit)

    # ==================== Status changes ====================

    async def change_status(
        self,
        transaction_id: str,
        status: TransactionStatus,
        reason: str,
    ) -> Optional[Transaction]:
        """
        Refund or cancel a transaction.

        The local journal is updated first; a backend failure is logged and
        the local status stands.
        """
        transaction = self.journal.update_status(transaction_id, status)
        if transaction is None:
            return None

        logger.info(f"Transaction {transaction.transaction_number} marked {status.value}: {reason}")

        if self.client is None:
            return transaction

        try:
            if status == TransactionStatus.REFUNDED:
                confirmed = await self.client.refund_transaction(transaction_id, reason)
            else:
                confirmed = await self.client.cancel_transaction(transaction_id, reason)
        except (httpx.HTTPError, ValidationError) as e:
            logger.warning(f"Error updating transaction {transaction_id} on backend: {e!r}")
            return transaction

        return self.journal.record(confirmed)
