"""Realtime adapters."""

from .channel import LocalPushChannel

__all__ = ["LocalPushChannel"]
