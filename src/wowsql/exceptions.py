"""Exception classes for WOWSQL client operations."""

from typing import Any, Dict, Optional


class WOWSQLError(Exception):
    """Base exception for all WOWSQL SDK errors.

    Carries the HTTP status code (when the failure came from a response) and
    the decoded error body so callers can branch on them programmatically.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response: Dict[str, Any] = response or {}

    def __str__(self):
        return self.message


class AuthError(WOWSQLError):
    """Exception raised when an authentication flow fails."""

    pass


class StorageError(WOWSQLError):
    """Exception raised when a storage operation fails."""

    pass


class StorageLimitExceededError(StorageError):
    """Exception raised when an upload would exceed the storage quota."""

    def __init__(self, message: str, response: Optional[Dict[str, Any]] = None):
        super().__init__(message, 413, response)


class PermissionDeniedError(WOWSQLError):
    """Exception raised when an operation needs a service role key."""

    def __init__(self, message: str):
        super().__init__(message, 403)


# Names used by the other WOWSQL SDKs
WOWSQLException = WOWSQLError
AuthException = AuthError
StorageException = StorageError
StorageLimitExceededException = StorageLimitExceededError
PermissionException = PermissionDeniedError
