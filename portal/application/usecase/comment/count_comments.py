"""Count comments use case."""

import logfire
from pydantic import BaseModel

from portal.adapter.error import AdapterError
from portal.application.usecase.base import ThreadRequest, ThreadUseCase
from portal.domain.value import FetchOptions


class CountCommentsRequest(ThreadRequest):
    """Count comments request."""

    pass


class CountCommentsResponse(BaseModel):
    """Count comments response."""

    total: int


class CountCommentsUseCase(ThreadUseCase):
    """Use case for reading a scope's comment total without loading it."""

    async def execute(self, request: CountCommentsRequest) -> CountCommentsResponse:
        """Execute count comments flow.

        Fetches a single-item page and reads the pagination total. Held
        state is left untouched.

        Raises:
            CommentOperationError: If the fetch is rejected
        """
        scope = self.store.scope
        with logfire.span("count_comments", scope=str(scope)):
            api = self.api_for(request)
            try:
                page = await api.fetch_by_scope(scope, FetchOptions(page=1, limit=1))
            except AdapterError as e:
                raise self.failed("count", e) from e

            logfire.debug(
                "Comments counted", scope=str(scope), total=page.pagination.total
            )
            return CountCommentsResponse(total=page.pagination.total)
