"""Checkout API routes for the register"""

from typing import Optional

import httpx
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, ValidationError

from ..core.session import RegisterSession
from ..database.held_sales import HeldSaleNotFoundError
from ..models.cart import CartResponse
from ..models.payment import PaymentOutcome
from ..models.transaction import (
    CheckoutResponse,
    HeldSale,
    StatusChangeRequest,
    Transaction,
    TransactionFilter,
    TransactionStatus,
)
from ..services.checkout import BackendUnavailableError, CheckoutRejectedError, CheckoutService
from .deps import get_checkout_service, get_register_session

router = APIRouter(tags=["Checkout"])


class CheckoutFailedRequest(BaseModel):
    reason: str = "Payment cancelled"


class RecallRequest(BaseModel):
    held_id: Optional[str] = None


class TransactionPage(BaseModel):
    transactions: list[Transaction]
    total: int
    page: int
    limit: int


@router.post("/api/sessions/{session_id}/checkout", response_model=CheckoutResponse)
async def checkout(
    outcome: PaymentOutcome,
    session: RegisterSession = Depends(get_register_session),
    service: CheckoutService = Depends(get_checkout_service),
):
    """
    Complete checkout with the result of the payment step.

    The cart is cleared as soon as the transaction is assembled. If the
    backend save fails the response still succeeds, with ``saved`` false
    and a warning, and carries the local transaction for the receipt.
    """
    try:
        return await service.complete(session, outcome)
    except CheckoutRejectedError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/api/sessions/{session_id}/checkout/cancel", response_model=CartResponse)
async def cancel_checkout(
    request: CheckoutFailedRequest,
    session: RegisterSession = Depends(get_register_session),
    service: CheckoutService = Depends(get_checkout_service),
):
    """Abandon an in-flight checkout; the cart is kept"""
    cart = service.fail(session, request.reason)
    return CartResponse(session_id=session.session_id, cart=cart, message=request.reason)


@router.post("/api/sessions/{session_id}/hold", response_model=HeldSale)
async def hold_sale(
    session: RegisterSession = Depends(get_register_session),
    service: CheckoutService = Depends(get_checkout_service),
):
    """Park the current cart and start a new one"""
    try:
        return service.hold(session)
    except CheckoutRejectedError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/api/sessions/{session_id}/recall", response_model=CartResponse)
async def recall_sale(
    request: Optional[RecallRequest] = None,
    session: RegisterSession = Depends(get_register_session),
    service: CheckoutService = Depends(get_checkout_service),
):
    """Restore a held sale, the most recent one unless an id is given"""
    held_id = request.held_id if request else None
    try:
        cart = service.recall(session, held_id)
    except HeldSaleNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return CartResponse(session_id=session.session_id, cart=cart, message="Cart recalled")


@router.get("/api/held-sales", response_model=list[HeldSale])
async def list_held_sales(service: CheckoutService = Depends(get_checkout_service)):
    return service.held_sales.list_held()


@router.get("/api/transactions", response_model=list[Transaction])
async def list_transactions(
    limit: int = 50,
    service: CheckoutService = Depends(get_checkout_service),
):
    """List recent transactions from the local journal"""
    return service.journal.list_recent(limit=limit)


@router.get("/api/backend/transactions", response_model=TransactionPage)
async def backend_history(
    filter: TransactionFilter = Depends(),
    page: int = 1,
    limit: int = 50,
    service: CheckoutService = Depends(get_checkout_service),
):
    """Transaction history from the backend, filtered when any criteria are given"""
    try:
        transactions, total = await service.backend_history(filter, page=page, limit=limit)
    except BackendUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except (httpx.HTTPError, ValidationError) as e:
        raise HTTPException(status_code=502, detail=f"Transactions backend error: {e}")
    return TransactionPage(transactions=transactions, total=total, page=page, limit=limit)


@router.get("/api/transactions/{transaction_id}", response_model=Transaction)
async def get_transaction(
    transaction_id: str,
    service: CheckoutService = Depends(get_checkout_service),
):
    """Find a transaction by id or number, asking the backend if it is not local"""
    try:
        transaction = await service.find_transaction(transaction_id)
    except (httpx.HTTPError, ValidationError) as e:
        raise HTTPException(status_code=502, detail=f"Transactions backend error: {e}")
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction


@router.post("/api/transactions/{transaction_id}/refund", response_model=Transaction)
async def refund_transaction(
    transaction_id: str,
    request: StatusChangeRequest,
    service: CheckoutService = Depends(get_checkout_service),
):
    transaction = await service.change_status(transaction_id, TransactionStatus.REFUNDED, request.reason)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction


@router.post("/api/transactions/{transaction_id}/cancel", response_model=Transaction)
async def cancel_transaction(
    transaction_id: str,
    request: StatusChangeRequest,
    service: CheckoutService = Depends(get_checkout_service),
):
    transaction = await service.change_status(transaction_id, TransactionStatus.CANCELLED, request.reason)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction
