"""Output formatting for compositions, file trees and export results."""

from .lib import (
    format_catalog,
    format_composition_tree,
    format_file_tree,
    format_result,
    format_size,
    format_summary,
)

__all__ = [
    "format_size",
    "format_composition_tree",
    "format_file_tree",
    "format_result",
    "format_summary",
    "format_catalog",
]
