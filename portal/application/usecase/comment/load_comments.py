"""Load comments use case."""

import logfire
from pydantic import BaseModel, Field

from portal.adapter.error import AdapterError
from portal.application.store import CommentStore
from portal.application.usecase.base import ThreadRequest, ThreadUseCase
from portal.domain.model import Comment, CommentForest
from portal.domain.service import ServiceSelector, build_forest
from portal.domain.value import CommentId, FetchOptions, Pagination


class LoadCommentsRequest(ThreadRequest):
    """Load comments request."""

    page: int = Field(default=1, ge=1)


class LoadCommentsResponse(BaseModel):
    """Load comments response."""

    forest: CommentForest
    pagination: Pagination


class LoadCommentsUseCase(ThreadUseCase):
    """Use case for fetching a scope's comments and rebuilding its forest."""

    def __init__(
        self,
        store: CommentStore,
        selector: ServiceSelector,
        defaults: FetchOptions | None = None,
    ) -> None:
        """Initialize load comments use case.

        Args:
            store: Thread state to fill
            selector: Resolves the role-scoped comment API
            defaults: Page size and sort used for every fetch
        """
        super().__init__(store, selector)
        self.defaults = defaults or FetchOptions()

    async def execute(self, request: LoadCommentsRequest) -> LoadCommentsResponse:
        """Execute load comments flow.

        Steps:
        1. Drop held state if a different account is now acting
        2. Fetch the requested page through the resolved binding
        3. Rebuild the forest: page 1 replaces everything (pending
           placeholders included), later pages extend what is held

        Raises:
            CommentOperationError: If the fetch is rejected
        """
        store = self.store
        with logfire.span(
            "load_comments", scope=str(store.scope), page=request.page
        ):
            identity = request.session.identity
            previous = store.session_identity
            if previous is not None and previous != identity:
                logfire.info(
                    "Acting account changed, clearing comments",
                    scope=str(store.scope),
                )
                store.reset()
            store.session_identity = identity

            api = self.api_for(request)
            options = self.defaults.model_copy(update={"page": request.page})

            store.clear_error()
            store.set_loading(True)
            try:
                page = await api.fetch_by_scope(store.scope, options)
            except AdapterError as e:
                raise self.failed("load", e) from e
            finally:
                store.set_loading(False)

            if request.page > 1:
                records = _merge(store.forest.flatten(), page.comments)
            else:
                records = list(page.comments)

            forest = build_forest(records)
            store.replace(forest, pagination=page.pagination)
            logfire.info(
                "Comments loaded",
                scope=str(store.scope),
                page=request.page,
                count=len(page.comments),
                total=page.pagination.total,
            )
            return LoadCommentsResponse(forest=forest, pagination=page.pagination)


def _merge(held: list[Comment], fetched: tuple[Comment, ...]) -> list[Comment]:
    # Fetched records win over held ones; placeholders are never carried over
    fetched_ids: set[CommentId] = {c.id for c in fetched}
    kept = [c for c in held if not c.pending and c.id not in fetched_ids]
    return kept + list(fetched)
