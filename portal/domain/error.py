"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Input rejected before it reaches any gateway."""

    pass


class InvalidScopeError(DomainError):
    """Raised when a comment or thread names zero or two scopes."""

    pass


class CommentCycleError(DomainError):
    """Raised when a parent chain revisits a comment."""

    def __init__(self, comment_id: int, chain: list[int]):
        self.comment_id = comment_id
        self.chain = chain
        path = " -> ".join(str(c) for c in chain)
        super().__init__(f"Comment parent chain loops back to {comment_id}: {path}")
