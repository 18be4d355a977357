"""Composition validation and static analysis.

Detects structural problems in a ProjectComposition before any file is
generated. Errors make the export precondition fail; warnings are carried
into every target's result.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

from capsule_forge.errors import Diagnostic, ErrorCode, Severity
from capsule_forge.mid import CapsuleInstance, ProjectComposition


@dataclass
class ValidationReport:
    """Outcome of validating a composition.

    Attributes:
        errors: Problems that prevent export.
        warnings: Findings that do not.
    """

    errors: list[Diagnostic] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _error(message: str, instance_id: str | None = None) -> Diagnostic:
    return Diagnostic(
        code=ErrorCode.INVALID_COMPOSITION, message=message, instance_id=instance_id
    )


def _nested(instance: CapsuleInstance) -> Iterator[CapsuleInstance]:
    yield from instance.children
    for items in instance.slots.values():
        yield from items


def validate_composition(
    composition: ProjectComposition, registry=None
) -> ValidationReport:
    """Validate a composition for structural issues.

    Performs the following checks:
        - Non-empty project name
        - Non-empty instance and capsule ids
        - Unique instance ids
        - Cycle detection (no instance is its own ancestor)
        - Slot keys declared by the capsule (warning, needs a registry)

    Args:
        composition: Project to validate.
        registry: Optional CapsuleRegistry used for slot checks.

    Returns:
        ValidationReport with errors and warnings.

    Example:
        >>> report = validate_composition(project, registry)
        >>> if not report.ok:
        ...     for e in report.errors:
        ...         print(e)
    """
    report = ValidationReport()

    if not composition.name.strip():
        report.errors.append(_error("Project name must not be empty"))

    id_counts: dict[str, int] = {}
    report.errors.extend(_walk(composition.root, id_counts, registry, report))

    for instance_id, count in id_counts.items():
        if count > 1:
            report.errors.append(
                _error(
                    f"Duplicate instance id '{instance_id}' appears {count} times",
                    instance_id,
                )
            )
    return report


def _walk(
    root: CapsuleInstance,
    id_counts: dict[str, int],
    registry,
    report: ValidationReport,
) -> list[Diagnostic]:
    """Visit every instance once; report empty ids, cycles and slot keys."""
    errors: list[Diagnostic] = []
    visited: set[int] = set()

    def _check(n: CapsuleInstance, path: set[int]) -> None:
        obj_id = id(n)
        if obj_id in path:
            errors.append(
                _error(f"Cycle detected: instance '{n.id}' is its own ancestor", n.id)
            )
            return
        if obj_id in visited:
            return
        visited.add(obj_id)

        id_counts[n.id] = id_counts.get(n.id, 0) + 1
        if not n.id.strip():
            errors.append(_error(f"Instance of '{n.capsule_id}' has an empty id"))
        if not n.capsule_id.strip():
            errors.append(_error(f"Instance '{n.id}' has an empty capsule id", n.id))
        if registry is not None:
            report.warnings.extend(_slot_warnings(n, registry))

        path.add(obj_id)
        for child in _nested(n):
            _check(child, path)
        path.remove(obj_id)

    _check(root, set())
    return errors


def _slot_warnings(instance: CapsuleInstance, registry) -> list[Diagnostic]:
    definition = registry.get(instance.capsule_id)
    if definition is None:
        return []
    declared = set(definition.slot_names())
    return [
        Diagnostic(
            code=ErrorCode.UNKNOWN_SLOT,
            message=f"Slot '{key}' is not declared by capsule '{definition.id}'",
            severity=Severity.WARNING,
            instance_id=instance.id,
            capsule_id=instance.capsule_id,
            prop_name=key,
        )
        for key in instance.slots
        if key not in declared
    ]


def is_valid(composition: ProjectComposition, registry=None) -> bool:
    """Check if a composition is valid.

    Convenience function that returns True if no validation errors exist.
    """
    return validate_composition(composition, registry).ok


__all__ = ["ValidationReport", "validate_composition", "is_valid"]
