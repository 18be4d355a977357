"""Prop binding: defaults, required checks and type validation."""

from .lib import BindingResult, BoundProps, BoundValue, PropBinder

__all__ = [
    "BoundValue",
    "BoundProps",
    "BindingResult",
    "PropBinder",
]
