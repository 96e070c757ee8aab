"""Cart API routes for the register"""

from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..core.session import RegisterSession, SessionManager
from ..models.cart import (
    AddLineRequest,
    CartDiscountRequest,
    CartResponse,
    CartSummary,
    CustomerRequest,
    LineDiscountRequest,
    NotesRequest,
    TaxRateRequest,
    UpdateLineQuantityRequest,
)
from ..services import cart_engine
from .deps import get_register_session, get_session_manager

router = APIRouter(prefix="/api/sessions", tags=["Cart"])


class CreateSessionRequest(BaseModel):
    cashier_id: Optional[str] = None
    cashier_name: Optional[str] = None


def _response(session: RegisterSession, message: Optional[str] = None) -> CartResponse:
    return CartResponse(session_id=session.session_id, cart=session.cart, message=message)


@router.post("", response_model=CartResponse)
async def create_session(
    request: Optional[CreateSessionRequest] = None,
    manager: SessionManager = Depends(get_session_manager),
):
    """Open a register session with an empty cart"""
    request = request or CreateSessionRequest()
    session = manager.create_session(request.cashier_id, request.cashier_name)
    return _response(session, "Session created")


@router.get("/{session_id}/cart", response_model=CartResponse)
async def get_cart(session: RegisterSession = Depends(get_register_session)):
    return _response(session)


@router.get("/{session_id}/cart/summary", response_model=CartSummary)
async def get_cart_summary(session: RegisterSession = Depends(get_register_session)):
    return cart_engine.cart_summary(session.cart)


@router.post("/{session_id}/cart/items", response_model=CartResponse)
async def add_line(
    request: AddLineRequest,
    session: RegisterSession = Depends(get_register_session),
):
    """Add a product to the cart"""
    session.apply(cart_engine.add_line, request.product, request.quantity)
    return _response(session, f"Added {request.quantity}x {request.product.name} to cart")


@router.put("/{session_id}/cart/items/{product_id}", response_model=CartResponse)
async def update_line_quantity(
    product_id: str,
    request: UpdateLineQuantityRequest,
    session: RegisterSession = Depends(get_register_session),
):
    """Update line quantity; zero or less removes the line"""
    session.apply(cart_engine.update_line_quantity, product_id, request.quantity)
    return _response(session, "Cart updated")


@router.delete("/{session_id}/cart/items/{product_id}", response_model=CartResponse)
async def remove_line(
    product_id: str,
    session: RegisterSession = Depends(get_register_session),
):
    session.apply(cart_engine.remove_line, product_id)
    return _response(session, "Item removed")


@router.put("/{session_id}/cart/items/{product_id}/discount", response_model=CartResponse)
async def set_line_discount(
    product_id: str,
    request: LineDiscountRequest,
    session: RegisterSession = Depends(get_register_session),
):
    session.apply(cart_engine.set_line_discount, product_id, request.discount)
    return _response(session, "Item discount applied")


@router.delete("/{session_id}/cart/items/{product_id}/discount", response_model=CartResponse)
async def remove_line_discount(
    product_id: str,
    session: RegisterSession = Depends(get_register_session),
):
    session.apply(cart_engine.remove_line_discount, product_id)
    return _response(session, "Item discount removed")


@router.put("/{session_id}/cart/items/{product_id}/notes", response_model=CartResponse)
async def set_line_notes(
    product_id: str,
    request: NotesRequest,
    session: RegisterSession = Depends(get_register_session),
):
    session.apply(cart_engine.set_line_notes, product_id, request.notes)
    return _response(session)


@router.put("/{session_id}/cart/discount", response_model=CartResponse)
async def set_cart_discount(
    request: CartDiscountRequest,
    session: RegisterSession = Depends(get_register_session),
):
    session.apply(cart_engine.set_cart_discount, request.discount_type, request.discount_value)
    return _response(session, "Cart discount applied")


@router.delete("/{session_id}/cart/discount", response_model=CartResponse)
async def remove_cart_discount(session: RegisterSession = Depends(get_register_session)):
    session.apply(cart_engine.remove_cart_discount)
    return _response(session, "Cart discount removed")


@router.put("/{session_id}/cart/customer", response_model=CartResponse)
async def set_customer(
    request: CustomerRequest,
    session: RegisterSession = Depends(get_register_session),
):
    session.apply(cart_engine.set_customer, request.customer_id, request.customer_name)
    return _response(session, f"Customer {request.customer_name} attached")


@router.delete("/{session_id}/cart/customer", response_model=CartResponse)
async def remove_customer(session: RegisterSession = Depends(get_register_session)):
    session.apply(cart_engine.remove_customer)
    return _response(session, "Customer removed")


@router.put("/{session_id}/cart/notes", response_model=CartResponse)
async def set_notes(
    request: NotesRequest,
    session: RegisterSession = Depends(get_register_session),
):
    session.apply(cart_engine.set_notes, request.notes)
    return _response(session)


@router.put("/{session_id}/cart/tax-rate", response_model=CartResponse)
async def set_tax_rate(
    request: TaxRateRequest,
    session: RegisterSession = Depends(get_register_session),
):
    session.apply(cart_engine.set_tax_rate, request.tax_rate)
    return _response(session, "Tax rate updated")


@router.delete("/{session_id}/cart", response_model=CartResponse)
async def clear_cart(session: RegisterSession = Depends(get_register_session)):
    """Clear all items from cart"""
    session.reset_cart()
    return _response(session, "Cart cleared")
