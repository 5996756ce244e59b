"""Relative Placement ranking engine."""

from .engine import PlacementEngine, strict_majority
from .validation import OrdinalValidationError

__all__ = ["OrdinalValidationError", "PlacementEngine", "strict_majority"]
