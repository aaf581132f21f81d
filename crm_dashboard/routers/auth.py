from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_current_user_optional, get_session_manager
from ..errors import AuthError, ValidationError
from ..schemas.auth import AuthUser, LoginPayload, RegisterPayload, Session, SessionStatus
from ..session import SessionManager
from ..utils.logging import log_action

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=Session)
async def login(payload: LoginPayload, session: SessionManager = Depends(get_session_manager)):
    try:
        result = await session.login(payload.phone, payload.password)
    except AuthError as e:
        # Backend unreachable or its answer unusable
        status_code = 502 if e.status_code is None else 401
        raise HTTPException(status_code=status_code, detail=e.message)

    if session.tokens != result.tokens:
        raise HTTPException(status_code=409, detail="Login was superseded by a newer request")
    return result


@router.post("/register", response_model=dict)
async def register(
    payload: RegisterPayload,
    session: SessionManager = Depends(get_session_manager),
    user: AuthUser | None = Depends(get_current_user_optional),
):
    """Creates an account. The new user still has to sign in."""
    try:
        created = await session.register(payload)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except AuthError as e:
        raise HTTPException(status_code=502 if e.status_code is None else 400, detail=e.message)

    log_action(user, "create", "user", created.get("id"), {"role": payload.role.value})
    return created


@router.post("/logout")
def logout(session: SessionManager = Depends(get_session_manager)):
    session.logout()
    return {"status": "ok"}


@router.get("/me", response_model=SessionStatus)
def me(session: SessionManager = Depends(get_session_manager)):
    return SessionStatus(
        state=session.state.value,
        user=session.user,
        is_loading=session.is_loading,
        last_error=session.last_error,
    )
