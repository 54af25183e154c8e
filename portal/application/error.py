"""Application layer errors."""

from typing import Optional

_OPERATIONS = {
    "load": "load comments",
    "count": "count comments",
    "create": "create comment",
    "edit": "update comment",
    "delete": "delete comment",
    "like": "like comment",
    "unlike": "unlike comment",
    "flag": "flag comment",
}


class ApplicationError(Exception):
    """Base application error."""

    pass


class CommentOperationError(ApplicationError):
    """A comment operation was rejected by the comment API.

    Wraps the adapter error so callers handle a single error type; the
    original error stays available as `cause` and `__cause__`.
    """

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        self.status_code: Optional[int] = getattr(cause, "status_code", None)
        action = _OPERATIONS.get(operation, f"{operation} comment")
        super().__init__(f"Failed to {action}: {cause}")
