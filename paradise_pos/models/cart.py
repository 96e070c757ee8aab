"""Cart models for the register"""

from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum

from .product import ProductRef


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class CartLine(BaseModel):
    """One product in the cart"""
    product: ProductRef
    quantity: int
    discount: float = 0.0  # percent, 0-100
    discount_amount: float = 0.0
    subtotal: float = 0.0
    total: float = 0.0
    notes: Optional[str] = None


class CartState(BaseModel):
    """Register cart.

    ``subtotal``, ``discount_amount``, ``tax_amount`` and ``total`` are
    derived and only ever written by the totals recompute.
    """
    items: list[CartLine] = []
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    discount_type: DiscountType = DiscountType.PERCENTAGE
    discount_value: float = 0.0
    discount_amount: float = 0.0
    subtotal: float = 0.0
    tax_amount: float = 0.0
    tax_rate: float = 0.0
    total: float = 0.0
    notes: Optional[str] = None
    hold_id: Optional[str] = None
    is_processing: bool = False


class CartSummary(BaseModel):
    """Read-only view of the cart for display"""
    item_count: int
    subtotal: float
    discount_amount: float
    tax_amount: float
    total: float
    discount_type: DiscountType
    discount_value: float
    tax_rate: float
    items: list[CartLine]
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    is_loyalty_pricing_active: bool = False


class AddLineRequest(BaseModel):
    """Request to add a product to the cart"""
    product: ProductRef
    quantity: int = Field(default=1, gt=0)


class UpdateLineQuantityRequest(BaseModel):
    """Request to set a line quantity; zero or less removes the line"""
    quantity: int


class LineDiscountRequest(BaseModel):
    discount: float


class CartDiscountRequest(BaseModel):
    discount_type: DiscountType = DiscountType.PERCENTAGE
    discount_value: float


class CustomerRequest(BaseModel):
    customer_id: str
    customer_name: str


class NotesRequest(BaseModel):
    notes: str


class TaxRateRequest(BaseModel):
    tax_rate: float = Field(ge=0)


class CartResponse(BaseModel):
    """Cart API response"""
    session_id: str
    cart: CartState
    message: Optional[str] = None
