"""Realtime reconciliation of pushed comment events."""

from .reconciler import CommentReconciler

__all__ = ["CommentReconciler"]
