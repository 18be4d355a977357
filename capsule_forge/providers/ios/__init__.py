"""SwiftUI emitter for the iOS target."""

from .lib import IOSEmitter

__all__ = ["IOSEmitter"]
