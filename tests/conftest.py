"""
Shared fixtures for register tests.
"""
import pytest

from paradise_pos.core.session import SessionManager
from paradise_pos.database.held_sales import HeldSaleStore
from paradise_pos.database.transactions import TransactionJournal
from paradise_pos.models.product import ProductRef
from paradise_pos.services import cart_engine
from paradise_pos.services.checkout import CheckoutService


@pytest.fixture
def make_product():
    """Factory for product descriptors."""
    def _make(product_id="P1", price=100.0, name=None):
        return ProductRef(
            id=product_id,
            name=name or f"Product {product_id}",
            price=price,
            sku=f"SKU-{product_id}",
        )
    return _make


@pytest.fixture
def empty_cart():
    return cart_engine.initial_state()


@pytest.fixture
def cart_of_two(make_product):
    """P1 x2 at 100.00: subtotal 200, no tax."""
    return cart_engine.add_line(cart_engine.initial_state(), make_product("P1", 100.0), 2)


@pytest.fixture
def session_manager():
    return SessionManager(default_cashier_id="C-7", default_cashier_name="Nimal")


@pytest.fixture
def session(session_manager):
    return session_manager.create_session()


@pytest.fixture
def journal():
    return TransactionJournal()


@pytest.fixture
def held_sales():
    return HeldSaleStore()


@pytest.fixture
def local_checkout(journal, held_sales):
    """Checkout service with no backend configured."""
    return CheckoutService(
        journal=journal,
        held_sales=held_sales,
        store_name="Test Store",
        tenant_id="T-1",
    )
