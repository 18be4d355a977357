"""Output formatting for export results.

Generates human-readable text representations of compositions, generated
file trees and export summaries for the CLI.
"""

from collections.abc import Iterable

from capsule_forge.export import CompilationResult, summarize
from capsule_forge.mid import CapsuleInstance, ProjectComposition
from capsule_forge.platform import get_platform_info
from capsule_forge.providers import GeneratedFile
from capsule_forge.schema import CapsuleDefinition


def format_size(size: int) -> str:
    """Byte count as B / KB / MB."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def _connectors(prefix: str, is_last: bool, is_root: bool) -> tuple[str, str]:
    if is_root:
        return "", ""
    connector = "└── " if is_last else "├── "
    child_prefix = prefix + ("    " if is_last else "│   ")
    return connector, child_prefix


# =============================================================================
# Composition Tree
# =============================================================================


def format_composition_tree(composition: ProjectComposition) -> str:
    """Format a composition's instance tree.

    Example output:
        root [card]
        ├── title [text]
        └── footer: cta [button]
    """
    lines: list[str] = []
    _format_instance(composition.root, lines, "", is_last=True, is_root=True)
    return "\n".join(lines)


def _format_instance(
    instance: CapsuleInstance,
    lines: list[str],
    prefix: str,
    is_last: bool,
    is_root: bool = False,
    slot: str | None = None,
) -> None:
    connector, child_prefix = _connectors(prefix, is_last, is_root)
    label = f"{slot}: {instance.id}" if slot else instance.id
    lines.append(f"{prefix}{connector}{label} [{instance.capsule_id}]")

    nested: list[tuple[str | None, CapsuleInstance]] = [
        (None, child) for child in instance.children
    ]
    for name, contents in instance.slots.items():
        nested.extend((name, child) for child in contents)
    for i, (name, child) in enumerate(nested):
        _format_instance(
            child, lines, child_prefix, i == len(nested) - 1, slot=name
        )


# =============================================================================
# File Tree
# =============================================================================


def format_file_tree(files: Iterable[GeneratedFile], root: str = ".") -> str:
    """Format generated files as a directory tree.

    Directories are listed before files; both keep first-seen order.

    Example output:
        .
        └── src
            ├── components
            │   └── Button.tsx (1.2 KB)
            └── App.tsx (845 B)
    """
    tree: dict = {}
    for generated in files:
        *dirs, name = generated.path.split("/")
        node = tree
        for part in dirs:
            node = node.setdefault(part + "/", {})
        node[name] = generated

    lines = [root]
    _format_dir(tree, lines, "")
    return "\n".join(lines)


def _format_dir(node: dict, lines: list[str], prefix: str) -> None:
    entries = [k for k in node if k.endswith("/")] + [
        k for k in node if not k.endswith("/")
    ]
    for i, key in enumerate(entries):
        connector, child_prefix = _connectors(prefix, i == len(entries) - 1, False)
        value = node[key]
        if isinstance(value, dict):
            lines.append(f"{prefix}{connector}{key[:-1]}")
            _format_dir(value, lines, child_prefix)
        else:
            lines.append(f"{prefix}{connector}{key} ({format_size(value.size)})")


# =============================================================================
# Results
# =============================================================================


def format_result(result: CompilationResult, show_files: bool = True) -> str:
    """Format one target's result: status line, file tree and diagnostics."""
    info = get_platform_info(result.platform)
    meta = result.metadata
    lines = [
        f"{info.display_name} ({info.framework}): {result.status.value}, "
        f"{meta.total_files} files, {format_size(meta.total_size)}, "
        f"{meta.capsule_count} capsules"
    ]
    if show_files and result.files:
        lines.append(format_file_tree(result.files))
    if meta.dependencies:
        lines.append(f"Dependencies: {', '.join(meta.dependencies)}")
    for error in result.errors:
        lines.append(f"  error   {error}")
    for warning in result.warnings:
        lines.append(f"  warning {warning}")
    return "\n".join(lines)


def format_summary(results: list[CompilationResult]) -> str:
    """One line per target plus an overall summary line."""
    lines = []
    for result in results:
        marker = "✓" if result.success and not result.has_errors else "✗"
        if result.cancelled:
            marker = "-"
        lines.append(
            f"{marker} {result.platform.value:<8} {result.status.value:<10} "
            f"{result.metadata.total_files:>3} files  "
            f"{len(result.errors)} errors  {len(result.warnings)} warnings"
        )
    lines.append(str(summarize(results)))
    return "\n".join(lines)


# =============================================================================
# Catalog
# =============================================================================


def format_catalog(definitions: Iterable[CapsuleDefinition]) -> str:
    """Format catalog entries as aligned rows."""
    rows = [
        (
            d.id,
            d.name,
            d.category.value,
            ", ".join(p.value for p in d.supported_platforms()),
        )
        for d in definitions
    ]
    if not rows:
        return "No capsules found"
    widths = [max(len(row[i]) for row in rows) for i in range(3)]
    return "\n".join(
        f"{cid:<{widths[0]}}  {name:<{widths[1]}}  {cat:<{widths[2]}}  {platforms}"
        for cid, name, cat, platforms in rows
    )


__all__ = [
    "format_size",
    "format_composition_tree",
    "format_file_tree",
    "format_result",
    "format_summary",
    "format_catalog",
]
