"""Session management for storefront shoppers"""

import uuid
from datetime import datetime, timezone
from typing import Callable, Optional
from dataclasses import dataclass, field

from ..services.cart import Cart
from ..services.checkout import CheckoutOrchestrator

SHOPPER_ROLE = "user"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class UserSession:
    """
    One shopper's session.

    Owns the cart and the checkout workflow for it. The role comes from
    the authentication layer and is only read here.
    """
    session_id: str
    created_at: datetime
    updated_at: datetime
    user_id: str = ""
    role: str = SHOPPER_ROLE
    cart: Cart = field(default_factory=Cart)
    checkout: Optional[CheckoutOrchestrator] = None

    @property
    def can_shop(self) -> bool:
        """Cart and checkout are only offered to the shopper role"""
        return self.role == SHOPPER_ROLE

    def touch(self) -> None:
        self.updated_at = _utcnow()


OrchestratorFactory = Callable[[UserSession], CheckoutOrchestrator]


class SessionManager:
    """Manages shopper sessions in memory"""

    def __init__(self, orchestrator_factory: Optional[OrchestratorFactory] = None):
        self.sessions: dict[str, UserSession] = {}
        self.orchestrator_factory = orchestrator_factory

    def create_session(self, user_id: str = "", role: str = SHOPPER_ROLE) -> UserSession:
        """Create a new session with an empty cart"""
        now = _utcnow()
        session = UserSession(
            session_id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            user_id=user_id,
            role=role,
        )
        if self.orchestrator_factory:
            session.checkout = self.orchestrator_factory(session)
        self.sessions[session.session_id] = session
        return session

    def get_session(self, session_id: str) -> Optional[UserSession]:
        """Get session by ID"""
        return self.sessions.get(session_id)

    def delete_session(self, session_id: str) -> bool:
        """Delete a session"""
        if session_id in self.sessions:
            del self.sessions[session_id]
            return True
        return False

    def cleanup_old_sessions(self, max_age_hours: int = 24) -> int:
        """Remove sessions idle for longer than max_age_hours"""
        now = _utcnow()
        old_sessions = [
            sid for sid, session in self.sessions.items()
            if (now - session.updated_at).total_seconds() > max_age_hours * 3600
            and not (session.checkout and session.checkout.pending_order_id)
        ]
        for sid in old_sessions:
            del self.sessions[sid]
        return len(old_sessions)
