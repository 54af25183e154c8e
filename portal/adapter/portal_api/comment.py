"""HTTP binding of the comment API for one actor role."""

from typing import Any

import logfire

from portal.adapter.error import ServerError
from portal.adapter.portal_api.client import PortalApiClient
from portal.adapter.portal_api.mappers import (
    new_comment_to_row,
    row_to_comment,
    row_to_pagination,
)
from portal.domain.gateway import CommentApi
from portal.domain.model import Comment, CommentPage, NewComment
from portal.domain.value import (
    ActorType,
    CommentId,
    CommentScope,
    FetchOptions,
    ReactionId,
    ScopeKind,
)

COMMENTS_PATH = "/api/comments"


class HttpCommentApi(CommentApi):
    """Comment API over the portal's REST endpoints.

    Each instance is bound to one role; the role's bearer token is carried by
    the underlying client.
    """

    def __init__(self, actor_type: ActorType, client: PortalApiClient) -> None:
        """Initialize HTTP comment API.

        Args:
            actor_type: Role the binding acts as
            client: Portal API client authenticated for that role
        """
        self._actor_type = actor_type
        self.client = client

    @property
    def actor_type(self) -> ActorType:
        return self._actor_type

    async def fetch_by_scope(
        self, scope: CommentScope, options: FetchOptions
    ) -> CommentPage:
        params: dict[str, Any] = {
            "page": options.page,
            "limit": options.limit,
            "sort_by": options.sort_by,
            "sort_order": options.sort_order.value,
        }
        if scope.kind == ScopeKind.ANNOUNCEMENT:
            path = COMMENTS_PATH
            params["announcement_id"] = scope.id
        else:
            path = f"{COMMENTS_PATH}/calendar/{scope.id}"

        data = await self.client.request("GET", path, params=params)
        data = data or {}
        if not isinstance(data, dict):
            kind = type(data).__name__
            raise ServerError(
                f"Malformed comment listing: expected an object, got {kind}"
            )
        rows = data.get("comments", data.get("data", [])) or []
        try:
            page = CommentPage(
                comments=tuple(row_to_comment(row) for row in rows),
                pagination=row_to_pagination(data.get("pagination")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ServerError(f"Malformed comment listing: {e}") from e
        logfire.info(
            "Comments fetched",
            scope=str(scope),
            role=self._actor_type.value,
            count=len(page.comments),
            page=options.page,
        )
        return page

    async def create(self, data: NewComment) -> Comment:
        if data.scope.kind == ScopeKind.ANNOUNCEMENT:
            path = COMMENTS_PATH
        else:
            path = f"{COMMENTS_PATH}/calendar/{data.scope.id}"

        result = await self.client.request("POST", path, json=new_comment_to_row(data))
        return self._comment_from(result, "create")

    async def edit(self, comment_id: CommentId, text: str) -> Comment:
        result = await self.client.request(
            "PUT", f"{COMMENTS_PATH}/{comment_id}", json={"comment_text": text}
        )
        return self._comment_from(result, "edit")

    async def delete(self, comment_id: CommentId) -> None:
        await self.client.request("DELETE", f"{COMMENTS_PATH}/{comment_id}")

    async def react(self, comment_id: CommentId, reaction_id: ReactionId) -> None:
        await self.client.request(
            "POST",
            f"{COMMENTS_PATH}/{comment_id}/like",
            json={"reaction_id": reaction_id},
        )

    async def unreact(self, comment_id: CommentId) -> None:
        await self.client.request("DELETE", f"{COMMENTS_PATH}/{comment_id}/like")

    async def flag(self, comment_id: CommentId, reason: str) -> None:
        await self.client.request(
            "POST", f"{COMMENTS_PATH}/{comment_id}/flag", json={"reason": reason}
        )

    @staticmethod
    def _comment_from(result: Any, operation: str) -> Comment:
        row = result.get("comment") if isinstance(result, dict) else None
        if not isinstance(row, dict):
            raise ServerError(f"Portal API returned no comment for {operation}")
        try:
            return row_to_comment(row)
        except (KeyError, TypeError, ValueError) as e:
            raise ServerError(f"Malformed comment in {operation} response: {e}") from e
