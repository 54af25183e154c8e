"""Comment API gateway interface."""

from abc import ABC, abstractmethod

from portal.domain.model.comment import Comment
from portal.domain.model.page import CommentPage, NewComment
from portal.domain.value import (
    ActorType,
    CommentId,
    CommentScope,
    FetchOptions,
    ReactionId,
)


class CommentApi(ABC):
    """Role-scoped binding to the portal's comment endpoints.

    Defines the contract the comment engine consumes. Implementations live
    in the adapter layer and raise AdapterError subclasses on failure.
    """

    @property
    @abstractmethod
    def actor_type(self) -> ActorType:
        """Role this binding acts as."""
        pass

    @abstractmethod
    async def fetch_by_scope(
        self, scope: CommentScope, options: FetchOptions
    ) -> CommentPage:
        """Fetch one page of flat comment records for a scope.

        Args:
            scope: Announcement or calendar event
            options: Page, limit and sort parameters

        Returns:
            Comments of the page and pagination metadata
        """
        pass

    @abstractmethod
    async def create(self, data: NewComment) -> Comment:
        """Create a comment or reply.

        Args:
            data: Scope, text, optional parent and anonymity flag

        Returns:
            The comment as stored by the server
        """
        pass

    @abstractmethod
    async def edit(self, comment_id: CommentId, text: str) -> Comment:
        """Replace a comment's text.

        Returns:
            The updated comment
        """
        pass

    @abstractmethod
    async def delete(self, comment_id: CommentId) -> None:
        pass

    @abstractmethod
    async def react(self, comment_id: CommentId, reaction_id: ReactionId) -> None:
        """Apply the viewer's reaction to a comment."""
        pass

    @abstractmethod
    async def unreact(self, comment_id: CommentId) -> None:
        """Remove the viewer's reaction from a comment."""
        pass

    @abstractmethod
    async def flag(self, comment_id: CommentId, reason: str) -> None:
        """Report a comment for moderation."""
        pass
