"""Infrastructure providers."""

# Import bases
from .api import ApiProvider
from .realtime import RealtimeProvider

# Import implementations (needed for __subclasses__())
from .api import ProdApiProvider  # noqa: F401

__all__ = [
    "ApiProvider",
    "ProdApiProvider",
    "RealtimeProvider",
]
