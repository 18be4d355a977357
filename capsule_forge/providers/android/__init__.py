"""Jetpack Compose emitter for the Android target."""

from .lib import AndroidEmitter

__all__ = ["AndroidEmitter"]
