"""Domain services."""

from . import depth_policy
from .base import Service
from .depth_policy import (
    MAX_DEPTH,
    DepthCheck,
    calculate_depth,
    calculate_indentation,
    can_reply,
    redirect_parent,
    validate_reply_depth,
)
from .forest_builder import build_forest
from .service_selector import ServiceSelector

__all__ = [
    "MAX_DEPTH",
    "DepthCheck",
    "Service",
    "ServiceSelector",
    "build_forest",
    "calculate_depth",
    "calculate_indentation",
    "can_reply",
    "depth_policy",
    "redirect_parent",
    "validate_reply_depth",
]
