class CrmError(Exception):
    """Base class for dashboard errors that carry a user-facing message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CrmError):
    """Input rejected before any request is sent (empty fields, mismatched passwords)."""


class AuthError(CrmError):
    """
    Login or registration rejected by the backend, or the backend was unreachable.
    `status_code` is the backend's HTTP status, None when no usable answer came back.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class StorageCorruptError(CrmError):
    """A persisted session value exists but cannot be parsed."""


class FetchError(CrmError):
    """Retrieving or mutating dashboard records failed."""


class ApiError(Exception):
    """
    Raised by the API client for non-2xx responses and transport failures.
    `status_code` is None when no response was received.
    """

    def __init__(self, status_code: int | None, message: str, payload=None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload
