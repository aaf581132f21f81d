from fastapi import Depends, HTTPException, Request

from .api_client import CrmApiClient
from .schemas.auth import AuthUser, Role
from .session import SessionManager


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_api_client(request: Request) -> CrmApiClient:
    return request.app.state.api_client


def get_current_user(session: SessionManager = Depends(get_session_manager)) -> AuthUser:
    """
    Returns the signed-in user, or 401 when the dashboard has no session.
    """
    if not session.is_authenticated or session.user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return session.user


def get_current_user_optional(session: SessionManager = Depends(get_session_manager)) -> AuthUser | None:
    return session.user


def require_admin(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    """Requires the ADMIN role"""
    if user.role != Role.ADMIN:
        raise HTTPException(status_code=403, detail="Admin privileges required")
    return user
