"""Held sale storage for the register"""

import logging
import time
from datetime import datetime
from typing import Optional

from ..models.cart import CartState
from ..models.transaction import HeldSale
from ..services.cart_engine import hold_cart

logger = logging.getLogger(__name__)

class HeldSaleNotFoundError(Exception):
    """No held sale matches the request"""

class HeldSaleStore:
    """In-memory held sale storage, most recent last"""

    def __init__(self):
        self.held: list[HeldSale] = []
        self._last_millis = 0

    def _next_id(self) -> str:
        millis = max(int(time.time() * 1000), self._last_millis + 1)
        self._last_millis = millis
        return f"HELD-{millis}"

    def hold(self, cart: CartState) -> HeldSale:
        """Store a copy of the cart"""
        held_id = self._next_id()
        sale = HeldSale(
            id=held_id,
            timestamp=datetime.utcnow(),
            snapshot=hold_cart(cart, held_id).model_copy(deep=True),
        )
        self.held.append(sale)
        logger.info(f"Held sale {held_id} with {len(cart.items)} line(s)")
        return sale

    def list_held(self) -> list[HeldSale]:
        """List held sales, most recent first"""
        return list(reversed(self.held))

    def get(self, held_id: str) -> Optional[HeldSale]:
        """Get a held sale by ID"""
        return next((sale for sale in self.held if sale.id == held_id), None)

    def pop(self, held_id: Optional[str] = None) -> HeldSale:
        """Remove and return a held sale, the most recent one by default"""
        if not self.held:
            raise HeldSaleNotFoundError("No held sales available")

        if held_id is None:
            return self.held.pop()

        sale = self.get(held_id)
        if sale is None:
            raise HeldSaleNotFoundError(f"Held sale {held_id} not found")
        self.held.remove(sale)
        return sale


# Singleton instance
held_sale_store = HeldSaleStore()
