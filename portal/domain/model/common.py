"""Base model for comment domain entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for comments, forests and pages.

    Instances are frozen: a change to a comment or a forest is always a new
    object, which is what lets thread state be swapped in one assignment.
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # Value objects nested as fields
    )
