"""Adapter layer errors."""

from typing import Optional


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class ProviderError(AdapterError):
    """External provider error."""

    pass


class AuthError(ProviderError):
    """Credentials missing or rejected by the portal API."""

    def __init__(
        self, message: str = "Authentication required", status_code: int = 401
    ):
        self.status_code = status_code
        super().__init__(message)


class NetworkError(ProviderError):
    """The request never got a response (connection, DNS, timeout)."""

    pass


class ServerError(ProviderError):
    """The portal API answered with an application error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
