import logging
from enum import Enum
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .api_client import CrmApiClient
from .errors import ApiError, AuthError, StorageCorruptError, ValidationError
from .schemas.auth import AuthUser, LoginResponse, RegisterPayload, Session, TokenPair
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

TOKENS_KEY = "tokens"
USER_KEY = "user"

LOGIN_PATH = "/api/auth/login/"
REGISTER_PATH = "/api/auth/register/"


class SessionState(str, Enum):
    UNINITIALIZED = "UNINITIALIZED"
    RESTORING = "RESTORING"
    AUTHENTICATED = "AUTHENTICATED"
    ANONYMOUS = "ANONYMOUS"


class SessionManager:
    """
    Owns the signed-in user and their token pair, and keeps both in the
    key-value store so a restart can pick the session back up.

    `user` and `tokens` are always set together or cleared together.
    """

    def __init__(self, client: CrmApiClient, store: KeyValueStore):
        self._client = client
        self._store = store
        self._state = SessionState.UNINITIALIZED
        self._session: Session | None = None
        self._last_error: str | None = None
        self._in_flight = 0
        self._login_generation = 0

    # -- lifecycle -------------------------------------------------------

    def init(self) -> SessionState:
        """Restore a persisted session. Never raises; bad data means anonymous."""
        if self._state != SessionState.UNINITIALIZED:
            return self._state

        self._state = SessionState.RESTORING
        try:
            self._session = self._restore()
        except StorageCorruptError as exc:
            logger.warning("Discarding stored session: %s", exc.message)
            self._clear_storage()
            self._session = None

        if self._session is not None:
            self._state = SessionState.AUTHENTICATED
            logger.info("Restored session for user %s", self._session.user.id)
        else:
            self._state = SessionState.ANONYMOUS
        return self._state

    def dispose(self) -> None:
        """Forget in-memory state. Storage is left alone for the next start."""
        self._session = None
        self._last_error = None
        self._login_generation += 1
        self._state = SessionState.UNINITIALIZED

    def _restore(self) -> Session | None:
        raw_tokens = self._store.get(TOKENS_KEY)
        raw_user = self._store.get(USER_KEY)
        if raw_tokens is None and raw_user is None:
            return None
        if raw_tokens is None or raw_user is None:
            raise StorageCorruptError("only one of tokens/user is stored")
        try:
            tokens = TokenPair.model_validate_json(raw_tokens)
            user = AuthUser.model_validate_json(raw_user)
        except PydanticValidationError as exc:
            raise StorageCorruptError(f"stored session cannot be parsed ({exc.error_count()} errors)") from exc
        return Session(user=user, tokens=tokens)

    def _clear_storage(self) -> None:
        self._store.remove(TOKENS_KEY)
        self._store.remove(USER_KEY)

    def _require_initialized(self) -> None:
        if self._state in (SessionState.UNINITIALIZED, SessionState.RESTORING):
            raise RuntimeError("SessionManager.init() must be called first")

    # -- state -----------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def user(self) -> AuthUser | None:
        return self._session.user if self._session else None

    @property
    def tokens(self) -> TokenPair | None:
        return self._session.tokens if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._state == SessionState.AUTHENTICATED

    @property
    def is_loading(self) -> bool:
        return self._state == SessionState.RESTORING or self._in_flight > 0

    @property
    def last_error(self) -> str | None:
        return self._last_error

    def auth_headers(self) -> dict[str, str]:
        self._require_initialized()
        if self._session is None:
            raise AuthError("Not authenticated")
        return {"Authorization": f"Bearer {self._session.tokens.access}"}

    # -- operations ------------------------------------------------------

    async def login(self, phone: str, password: str) -> Session:
        """
        Authenticate against the backend and persist the resulting session.

        On failure `last_error` is set and AuthError is raised; the current
        session and storage are left as they were. Only the most recently
        issued login may change state.
        """
        self._require_initialized()
        self._login_generation += 1
        generation = self._login_generation
        self._in_flight += 1
        try:
            try:
                data = await self._client.post(
                    LOGIN_PATH,
                    json={"phone": phone, "password": password},
                    error_message="Login failed",
                )
                response = LoginResponse.model_validate(data)
            except (ApiError, PydanticValidationError) as exc:
                message = exc.message if isinstance(exc, ApiError) else "Login failed: unexpected response"
                if generation == self._login_generation:
                    self._last_error = message
                else:
                    logger.debug("Ignoring failure of superseded login request %s", generation)
                status_code = exc.status_code if isinstance(exc, ApiError) else None
                raise AuthError(message, status_code) from exc
        finally:
            self._in_flight -= 1

        session = Session(user=response.user, tokens=TokenPair(access=response.access, refresh=response.refresh))
        if generation != self._login_generation:
            logger.debug("Ignoring response of superseded login request %s", generation)
            return session

        self._store.set(TOKENS_KEY, session.tokens.model_dump_json())
        self._store.set(USER_KEY, session.user.model_dump_json())
        self._session = session
        self._last_error = None
        self._state = SessionState.AUTHENTICATED
        logger.info("User %s logged in", session.user.id)
        return session

    async def register(self, payload: RegisterPayload) -> dict[str, Any]:
        """Create an account. Does not sign the new user in."""
        self._require_initialized()
        _check_registration(payload)
        self._in_flight += 1
        try:
            data = await self._client.post(
                REGISTER_PATH,
                json=payload.model_dump(mode="json"),
                error_message="Registration failed",
            )
        except ApiError as exc:
            self._last_error = exc.message
            raise AuthError(exc.message, exc.status_code) from exc
        finally:
            self._in_flight -= 1

        self._last_error = None
        logger.info("Registered account for %s", payload.phone)
        return data if isinstance(data, dict) else {"result": data}

    def logout(self) -> None:
        had_session = self._session is not None
        self._session = None
        self._last_error = None
        self._login_generation += 1
        self._clear_storage()
        self._state = SessionState.ANONYMOUS
        if had_session:
            logger.info("Logged out")


def _check_registration(payload: RegisterPayload) -> None:
    for field_name in ("phone", "first_name", "last_name", "email", "password", "password2"):
        if not str(getattr(payload, field_name) or "").strip():
            raise ValidationError("Please fill in all fields")
    if payload.password != payload.password2:
        raise ValidationError("Passwords do not match")
