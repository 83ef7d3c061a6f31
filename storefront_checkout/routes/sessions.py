"""Shopper session routes"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..core.session import SHOPPER_ROLE, SessionManager, UserSession
from .deps import get_session_manager, get_user_session

router = APIRouter(prefix="/api/sessions", tags=["Sessions"])


class CreateSessionRequest(BaseModel):
    """Actor resolved by the authentication layer"""
    user_id: str = ""
    role: str = SHOPPER_ROLE


class SessionResponse(BaseModel):
    session_id: str
    user_id: str
    role: str
    can_shop: bool
    cart_items: int
    checkout_state: Optional[str] = None
    created_at: datetime


def _to_response(session: UserSession) -> SessionResponse:
    return SessionResponse(
        session_id=session.session_id,
        user_id=session.user_id,
        role=session.role,
        can_shop=session.can_shop,
        cart_items=session.cart.item_count,
        checkout_state=session.checkout.state.value if session.checkout else None,
        created_at=session.created_at,
    )


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    request: CreateSessionRequest,
    manager: SessionManager = Depends(get_session_manager),
):
    """Start a session with an empty cart"""
    session = manager.create_session(user_id=request.user_id, role=request.role)
    return _to_response(session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session: UserSession = Depends(get_user_session)):
    """Get session details"""
    return _to_response(session)


@router.delete("/{session_id}")
async def delete_session(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
):
    """Delete a session"""
    if manager.delete_session(session_id):
        return {"message": "Session deleted"}
    raise HTTPException(status_code=404, detail="Session not found")
