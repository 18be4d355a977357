"""Per-target file tree assembly."""

from .lib import (
    AssemblyOutput,
    CancelFlag,
    FileTreeAssembler,
    ProgressCallback,
    assemble,
    inline_theme_colors,
)

__all__ = [
    "AssemblyOutput",
    "CancelFlag",
    "FileTreeAssembler",
    "ProgressCallback",
    "assemble",
    "inline_theme_colors",
]
