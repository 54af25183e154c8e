"""Base use case."""

from abc import ABC, abstractmethod
from typing import Any, Optional

import logfire
from pydantic import BaseModel

from portal.application.error import CommentOperationError
from portal.application.store import CommentStore
from portal.domain.gateway import CommentApi
from portal.domain.service import ServiceSelector
from portal.domain.value import ActorType, SessionContext


class BaseUseCase(ABC):
    """Base use case for orchestrating domain services."""

    @abstractmethod
    async def execute(self, request: Any) -> Any:
        pass


class ThreadRequest(BaseModel):
    """Who is acting on a comment thread."""

    session: SessionContext = SessionContext()
    role_hint: Optional[ActorType] = None


class ThreadUseCase(BaseUseCase):
    """Use case operating on the held state of one comment thread."""

    def __init__(self, store: CommentStore, selector: ServiceSelector) -> None:
        """Initialize thread use case.

        Args:
            store: State of the thread being acted on
            selector: Resolves the role-scoped comment API
        """
        self.store = store
        self.selector = selector

    def api_for(self, request: ThreadRequest) -> CommentApi:
        return self.selector.resolve_binding(request.role_hint, request.session)

    def failed(self, operation: str, error: Exception) -> CommentOperationError:
        """Record a rejected call on the store and normalize the error."""
        failure = CommentOperationError(operation, error)
        logfire.error(
            "Comment operation failed",
            operation=operation,
            scope=str(self.store.scope),
            error=str(error),
            error_type=type(error).__name__,
        )
        self.store.fail(failure)
        return failure
