"""Shared service instances for the register API"""

from typing import Optional
from fastapi import Depends, HTTPException

from ..core.config import settings
from ..core.session import RegisterSession, SessionManager, SessionNotFoundError
from ..database.held_sales import held_sale_store
from ..database.transactions import transaction_journal
from ..services.checkout import CheckoutService
from ..services.transaction_client import TransactionClient

# Initialize services (overridden through app.dependency_overrides in tests)
session_manager = SessionManager(
    default_cashier_id=settings.default_cashier_id,
    default_cashier_name=settings.default_cashier_name,
    default_tax_rate=settings.default_tax_rate,
)
transaction_client: Optional[TransactionClient] = None
checkout_service: Optional[CheckoutService] = None


def get_transaction_client() -> Optional[TransactionClient]:
    """Get or create the backend client; None when running local-only"""
    global transaction_client
    if transaction_client is None and settings.backend_configured:
        transaction_client = TransactionClient(
            base_url=settings.transactions_api_url,
            api_token=settings.transactions_api_token,
            timeout=settings.transaction_save_timeout,
        )
    return transaction_client


def get_session_manager() -> SessionManager:
    return session_manager


def get_checkout_service() -> CheckoutService:
    """Get or create checkout service"""
    global checkout_service
    if checkout_service is None:
        checkout_service = CheckoutService(
            journal=transaction_journal,
            held_sales=held_sale_store,
            client=get_transaction_client(),
            store_name=settings.store_name,
            tenant_id=settings.tenant_id,
            save_timeout=settings.transaction_save_timeout,
        )
    return checkout_service


def get_register_session(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
) -> RegisterSession:
    """Resolve the session in the path or 404"""
    try:
        return manager.require_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")


async def close_clients() -> None:
    if transaction_client is not None:
        await transaction_client.close()
