"""Register session management"""

import uuid
from datetime import datetime
from typing import Optional
from dataclasses import dataclass, field

from ..models.cart import CartState
from ..services import cart_engine


class SessionNotFoundError(Exception):
    """No register session with the given id"""


@dataclass
class RegisterSession:
    """One register (till) session.

    Owns the single CartState for that register. All cart changes go
    through ``apply`` so the session stays the only writer.
    """
    session_id: str
    created_at: datetime
    updated_at: datetime
    cashier_id: str
    cashier_name: str
    default_tax_rate: float = 0.0
    cart: CartState = field(default_factory=cart_engine.initial_state)

    def apply(self, operation, *args, **kwargs) -> CartState:
        """Run a cart engine operation against this session's cart"""
        self.cart = operation(self.cart, *args, **kwargs)
        self.updated_at = datetime.utcnow()
        return self.cart

    def reset_cart(self) -> CartState:
        """Empty the cart and re-apply the register's default tax rate"""
        self.cart = cart_engine.clear_cart(self.cart)
        if self.default_tax_rate:
            self.cart = cart_engine.set_tax_rate(self.cart, self.default_tax_rate)
        self.updated_at = datetime.utcnow()
        return self.cart


class SessionManager:
    """Manages register sessions"""

    def __init__(
        self,
        default_cashier_id: str = "CASH001",
        default_cashier_name: str = "Current User",
        default_tax_rate: float = 0.0,
    ):
        self.default_cashier_id = default_cashier_id
        self.default_cashier_name = default_cashier_name
        self.default_tax_rate = default_tax_rate
        self.sessions: dict[str, RegisterSession] = {}

    def create_session(
        self,
        cashier_id: Optional[str] = None,
        cashier_name: Optional[str] = None,
    ) -> RegisterSession:
        """Create a new session with an empty cart"""
        now = datetime.utcnow()
        session = RegisterSession(
            session_id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            cashier_id=cashier_id or self.default_cashier_id,
            cashier_name=cashier_name or self.default_cashier_name,
            default_tax_rate=self.default_tax_rate,
        )
        session.reset_cart()
        self.sessions[session.session_id] = session
        return session

    def get_session(self, session_id: str) -> Optional[RegisterSession]:
        """Get session by ID"""
        return self.sessions.get(session_id)

    def require_session(self, session_id: str) -> RegisterSession:
        session = self.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def cleanup_old_sessions(self, max_age_hours: int = 24) -> int:
        """Remove sessions idle for longer than max_age_hours"""
        now = datetime.utcnow()
        old_sessions = [
            sid for sid, session in self.sessions.items()
            if (now - session.updated_at).total_seconds() > max_age_hours * 3600
        ]
        for sid in old_sessions:
            del self.sessions[sid]
        return len(old_sessions)
