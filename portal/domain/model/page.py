"""Comment listing and creation payloads exchanged with the comment API."""

from typing import Optional

from pydantic import Field

from portal.domain.model.comment import Comment
from portal.domain.model.common import DomainModel
from portal.domain.value import CommentId, CommentScope, Pagination


class CommentPage(DomainModel):
    """One page of flat comment records for a scope."""

    comments: tuple[Comment, ...] = ()
    pagination: Pagination = Pagination()


class NewComment(DomainModel):
    """Data sent to the API to create a comment or a reply."""

    scope: CommentScope
    text: str = Field(min_length=1, max_length=10000)
    parent_id: Optional[CommentId] = None
    is_anonymous: bool = False
