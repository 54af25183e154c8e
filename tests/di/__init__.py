"""Mock providers for testing."""

from .api import MockApiProvider
from .container import build_test_container

__all__ = [
    "MockApiProvider",
    "build_test_container",
]
