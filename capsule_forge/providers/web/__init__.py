"""React + TypeScript emitter for the web target."""

from .lib import WebEmitter

__all__ = ["WebEmitter"]
