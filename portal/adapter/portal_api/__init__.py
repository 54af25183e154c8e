"""Portal REST API adapters."""

from .client import PortalApiClient
from .comment import HttpCommentApi
from .inmemory import InMemoryCommentApi, InMemoryCommentBackend
from .time import HttpTrustedClock, MockTrustedClock

__all__ = [
    "HttpCommentApi",
    "HttpTrustedClock",
    "InMemoryCommentApi",
    "InMemoryCommentBackend",
    "MockTrustedClock",
    "PortalApiClient",
]
