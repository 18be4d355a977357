"""Composition validation."""

from .lib import ValidationReport, is_valid, validate_composition

__all__ = ["ValidationReport", "validate_composition", "is_valid"]
