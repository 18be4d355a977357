"""Tauri desktop emitter: React UI plus Rust shell."""

from .lib import SHELL_PATH, DesktopEmitter

__all__ = ["DesktopEmitter", "SHELL_PATH"]
