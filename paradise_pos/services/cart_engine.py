"""
Cart Engine

Pure state transitions for the register cart. Every operation takes the
current CartState and returns a new one; the input is never mutated.
Derived totals are recomputed from the raw fields after every structural
change, so replaying the same operations always yields the same totals.

Numeric input is clamped, never rejected, and unknown product ids are
silent no-ops.
"""

from typing import Optional

from ..models.cart import CartLine, CartState, CartSummary, DiscountType
from ..models.product import ProductRef


def initial_state() -> CartState:
    """Empty cart as created at shift start or after checkout"""
    return CartState()


def calculate_totals(state: CartState) -> CartState:
    """Recompute line and cart totals.

    Order is fixed: line discount, sum, cart discount, tax on the net
    amount, then floor the grand total at zero.
    """
    items = []
    for line in state.items:
        subtotal = line.product.price * line.quantity
        discount_amount = subtotal * line.discount / 100
        items.append(line.model_copy(update={
            "subtotal": subtotal,
            "discount_amount": discount_amount,
            "total": subtotal - discount_amount,
        }))

    subtotal = sum(line.total for line in items)

    if state.discount_type == DiscountType.PERCENTAGE:
        discount_amount = subtotal * state.discount_value / 100
    else:
        # A fixed discount is not capped at the subtotal. The net amount can
        # go negative and the tax below with it; only the grand total is floored.
        discount_amount = state.discount_value

    net = subtotal - discount_amount
    tax_amount = net * state.tax_rate / 100

    return state.model_copy(update={
        "items": items,
        "subtotal": subtotal,
        "discount_amount": discount_amount,
        "tax_amount": tax_amount,
        "total": max(0.0, net + tax_amount),
    })


def _map_line(state: CartState, product_id: str, **changes) -> list[CartLine]:
    return [
        line.model_copy(update=changes) if line.product.id == product_id else line
        for line in state.items
    ]


# ==================== Lines ====================

def add_line(state: CartState, product: ProductRef, quantity: int = 1) -> CartState:
    """Add a product, or bump its quantity if it is already in the cart.

    ``quantity`` is expected to be positive; sign checks belong to the caller.
    """
    existing = find_line(state, product.id)

    if existing:
        items = _map_line(state, product.id, quantity=existing.quantity + quantity)
    else:
        items = [*state.items, CartLine(product=product, quantity=quantity)]

    return calculate_totals(state.model_copy(update={"items": items}))


def update_line_quantity(state: CartState, product_id: str, quantity: int) -> CartState:
    """Set a line quantity, floored at zero. A zero quantity removes the line."""
    items = [
        line for line in _map_line(state, product_id, quantity=max(0, quantity))
        if line.quantity > 0
    ]
    return calculate_totals(state.model_copy(update={"items": items}))


def remove_line(state: CartState, product_id: str) -> CartState:
    items = [line for line in state.items if line.product.id != product_id]
    return calculate_totals(state.model_copy(update={"items": items}))


def clear_cart(state: Optional[CartState] = None) -> CartState:
    """Back to the empty cart. The tax rate is reset to 0 as well."""
    return initial_state()


# ==================== Discounts ====================

def set_line_discount(state: CartState, product_id: str, discount: float) -> CartState:
    """Set a line discount percentage, clamped to [0, 100]"""
    items = _map_line(state, product_id, discount=min(100.0, max(0.0, discount)))
    return calculate_totals(state.model_copy(update={"items": items}))


def remove_line_discount(state: CartState, product_id: str) -> CartState:
    return set_line_discount(state, product_id, 0)


def set_cart_discount(
    state: CartState,
    discount_type: DiscountType,
    discount_value: float,
) -> CartState:
    """Set the cart-level discount. Negative values are floored at 0."""
    return calculate_totals(state.model_copy(update={
        "discount_type": DiscountType(discount_type),
        "discount_value": max(0.0, discount_value),
    }))


def remove_cart_discount(state: CartState) -> CartState:
    return calculate_totals(state.model_copy(update={
        "discount_type": DiscountType.PERCENTAGE,
        "discount_value": 0.0,
    }))


# ==================== Metadata ====================

def set_customer(state: CartState, customer_id: str, customer_name: str) -> CartState:
    return state.model_copy(update={
        "customer_id": customer_id,
        "customer_name": customer_name,
    })


def remove_customer(state: CartState) -> CartState:
    return state.model_copy(update={"customer_id": None, "customer_name": None})


def set_notes(state: CartState, notes: str) -> CartState:
    return state.model_copy(update={"notes": notes})


def set_line_notes(state: CartState, product_id: str, notes: str) -> CartState:
    return state.model_copy(update={"items": _map_line(state, product_id, notes=notes)})


def set_tax_rate(state: CartState, tax_rate: float) -> CartState:
    """Set the tax rate percentage.

    Only the caller guards against negative rates; anything above 100
    passes through unchanged.
    """
    return calculate_totals(state.model_copy(update={"tax_rate": tax_rate}))


def hold_cart(state: CartState, hold_id: str) -> CartState:
    return state.model_copy(update={"hold_id": hold_id})


# ==================== Checkout ====================

def begin_checkout(state: CartState) -> CartState:
    """Mark checkout as in flight.

    Callers should stop dispatching mutations while this is set; the
    engine does not refuse them.
    """
    return state.model_copy(update={"is_processing": True})


def checkout_succeeded(state: CartState, transaction_id: Optional[str] = None) -> CartState:
    return initial_state()


def checkout_failed(state: CartState, reason: Optional[str] = None) -> CartState:
    """Drop the processing flag; lines and totals are left as they were"""
    return state.model_copy(update={"is_processing": False})


def recalculate(state: CartState) -> CartState:
    return calculate_totals(state)


# ==================== Held sales ====================

def recall_cart(state: CartState, snapshot: CartState) -> CartState:
    """Replay a held snapshot onto the current cart.

    Held lines go through add_line, so lines already on the till are kept
    and a product present in both has its quantities summed. Replaying
    add_line alone drops line discounts, line notes, the cart discount, the
    tax rate and the customer, so those are re-applied from the snapshot
    afterwards.
    """
    for line in snapshot.items:
        state = add_line(state, line.product, line.quantity)

    for line in snapshot.items:
        if line.discount:
            state = set_line_discount(state, line.product.id, line.discount)
        if line.notes:
            state = set_line_notes(state, line.product.id, line.notes)

    state = set_cart_discount(state, snapshot.discount_type, snapshot.discount_value)
    state = set_tax_rate(state, snapshot.tax_rate)

    if snapshot.customer_id:
        state = set_customer(state, snapshot.customer_id, snapshot.customer_name or "")
    if snapshot.notes:
        state = set_notes(state, snapshot.notes)

    return state


def restore_held_cart(snapshot: CartState) -> CartState:
    """Rebuild a cart from a held snapshot alone"""
    return recall_cart(initial_state(), snapshot)


# ==================== Accessors ====================

def find_line(state: CartState, product_id: str) -> Optional[CartLine]:
    return next((line for line in state.items if line.product.id == product_id), None)


def line_quantity(state: CartState, product_id: str) -> int:
    line = find_line(state, product_id)
    return line.quantity if line else 0


def item_count(state: CartState) -> int:
    """Total units in the cart, not the number of lines"""
    return sum(line.quantity for line in state.items)


def is_empty(state: CartState) -> bool:
    return not state.items


def can_checkout(state: CartState) -> bool:
    return not is_empty(state) and not state.is_processing


def customer(state: CartState) -> Optional[dict[str, str]]:
    if not state.customer_id:
        return None
    return {"id": state.customer_id, "name": state.customer_name or ""}


def is_loyalty_pricing_active(state: CartState) -> bool:
    return bool(state.customer_id)


def cart_summary(state: CartState) -> CartSummary:
    return CartSummary(
        item_count=item_count(state),
        subtotal=state.subtotal,
        discount_amount=state.discount_amount,
        tax_amount=state.tax_amount,
        total=state.total,
        discount_type=state.discount_type,
        discount_value=state.discount_value,
        tax_rate=state.tax_rate,
        items=state.items,
        customer_id=state.customer_id,
        customer_name=state.customer_name,
        is_loyalty_pricing_active=is_loyalty_pricing_active(state),
    )
