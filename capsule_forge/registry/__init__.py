"""Capsule registry: explicit, injectable catalog store."""

from .lib import CapsuleFilter, CapsuleRegistry, RegistryStats

__all__ = [
    "CapsuleFilter",
    "CapsuleRegistry",
    "RegistryStats",
]
