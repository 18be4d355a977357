"""Capsule catalog store.

The registry is an explicitly constructed object handed to the exporter
and to catalog-browsing callers; there is no module-level catalog. Each
definition's platform templates are parsed once, at registration.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from capsule_forge.config import get_strict_templates
from capsule_forge.errors import TemplateSyntaxError
from capsule_forge.platform import Platform
from capsule_forge.schema import CapsuleCategory, CapsuleDefinition
from capsule_forge.template import CompiledCapsuleTemplate, compile_platform_template

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapsuleFilter:
    """Catalog query.

    All given criteria must match. Tags match when the capsule carries
    every listed tag; the query matches case-insensitively against id,
    name, description and tags.
    """

    category: CapsuleCategory | None = None
    platform: Platform | None = None
    tags: tuple[str, ...] = ()
    query: str | None = None

    def matches(self, definition: CapsuleDefinition) -> bool:
        if self.category is not None and definition.category != self.category:
            return False
        if (
            self.platform is not None
            and definition.template_source(self.platform) is None
        ):
            return False
        if self.tags and not set(self.tags) <= set(definition.tags):
            return False
        if self.query:
            needle = self.query.strip().lower()
            haystack = " ".join(
                (definition.id, definition.name, definition.description, *definition.tags)
            ).lower()
            if needle not in haystack:
                return False
        return True


@dataclass
class RegistryStats:
    """Catalog counts."""

    total: int = 0
    by_category: dict[str, int] = field(default_factory=dict)
    by_platform: dict[str, int] = field(default_factory=dict)
    template_errors: int = 0


class CapsuleRegistry:
    """Store of capsule definitions and their parsed templates.

    Registration normally happens once at startup. Re-registering an id
    replaces the previous definition and logs a warning; definitions are
    never merged. A malformed template does not block registration: the
    TemplateSyntaxError is logged and kept per (capsule, platform) so the
    exporter can stub that one file. With ``strict_templates`` the error
    is raised instead.

    Reads are safe from many threads once registration is done; writes are
    serialized by a lock.

    Example:
        >>> registry = CapsuleRegistry()
        >>> registry.register(button_definition)
        >>> registry.supports_platform("button", Platform.IOS)
        True
    """

    def __init__(self, strict_templates: bool | None = None):
        self._definitions: dict[str, CapsuleDefinition] = {}
        self._compiled: dict[tuple[str, Platform], CompiledCapsuleTemplate] = {}
        self._errors: dict[tuple[str, Platform], TemplateSyntaxError] = {}
        self._lock = threading.Lock()
        self.strict_templates = get_strict_templates(strict_templates)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def register(
        self, definition: CapsuleDefinition | dict[str, Any]
    ) -> CapsuleDefinition:
        """Register a capsule definition.

        Args:
            definition: Definition model or an equivalent dict.

        Returns:
            The registered definition.

        Raises:
            TemplateSyntaxError: Only in strict mode, for malformed templates.
            pydantic.ValidationError: If a dict does not describe a valid
                definition.
        """
        if not isinstance(definition, CapsuleDefinition):
            definition = CapsuleDefinition.model_validate(definition)

        compiled: dict[tuple[str, Platform], CompiledCapsuleTemplate] = {}
        errors: dict[tuple[str, Platform], TemplateSyntaxError] = {}
        for platform in definition.platform_templates:
            key = (definition.id, platform)
            try:
                compiled[key] = compile_platform_template(definition, platform)
            except TemplateSyntaxError as e:
                if self.strict_templates:
                    raise
                logger.error(
                    f"Template error in capsule '{definition.id}' "
                    f"for {platform.value}: {e}"
                )
                errors[key] = e

        with self._lock:
            if definition.id in self._definitions:
                logger.warning(
                    f"Capsule '{definition.id}' registered twice; "
                    "replacing previous definition"
                )
                self._drop(definition.id)
            self._definitions[definition.id] = definition
            self._compiled.update(compiled)
            self._errors.update(errors)

        logger.debug(
            f"Registered capsule '{definition.id}' "
            f"({len(compiled)} templates, {len(errors)} errors)"
        )
        return definition

    def register_many(
        self, definitions: Iterable[CapsuleDefinition | dict[str, Any]]
    ) -> list[CapsuleDefinition]:
        """Register several definitions in order."""
        return [self.register(d) for d in definitions]

    def unregister(self, capsule_id: str) -> bool:
        """Remove a definition. Returns False if it was not registered."""
        with self._lock:
            if capsule_id not in self._definitions:
                return False
            self._drop(capsule_id)
            return True

    def _drop(self, capsule_id: str) -> None:
        del self._definitions[capsule_id]
        for store in (self._compiled, self._errors):
            for key in [k for k in store if k[0] == capsule_id]:
                del store[key]

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get(self, capsule_id: str) -> CapsuleDefinition | None:
        """Get a definition by id."""
        return self._definitions.get(capsule_id)

    def list(self, capsule_filter: CapsuleFilter | None = None) -> list[CapsuleDefinition]:
        """List definitions in registration order, optionally filtered."""
        definitions = list(self._definitions.values())
        if capsule_filter is None:
            return definitions
        return [d for d in definitions if capsule_filter.matches(d)]

    def search(self, query: str) -> list[CapsuleDefinition]:
        """Free-text search over id, name, description and tags."""
        return self.list(CapsuleFilter(query=query))

    def supports_platform(self, capsule_id: str, platform: Platform) -> bool:
        """Whether a capsule declares a template usable on a platform."""
        definition = self.get(capsule_id)
        return definition is not None and definition.template_source(platform) is not None

    def get_supported_platforms(self, capsule_id: str) -> list[Platform]:
        """Platforms a capsule can render on (empty for unknown ids)."""
        definition = self.get(capsule_id)
        return definition.supported_platforms() if definition is not None else []

    def compiled_template(
        self, capsule_id: str, platform: Platform
    ) -> CompiledCapsuleTemplate | None:
        """Parsed templates serving a platform, following fallbacks."""
        source = self._template_source(capsule_id, platform)
        return self._compiled.get((capsule_id, source)) if source else None

    def template_error(
        self, capsule_id: str, platform: Platform
    ) -> TemplateSyntaxError | None:
        """Recorded parse error of the template serving a platform, if any."""
        source = self._template_source(capsule_id, platform)
        return self._errors.get((capsule_id, source)) if source else None

    def _template_source(self, capsule_id: str, platform: Platform) -> Platform | None:
        definition = self.get(capsule_id)
        return definition.template_source(platform) if definition is not None else None

    def stats(self) -> RegistryStats:
        """Counts by category and platform."""
        result = RegistryStats(template_errors=len(self._errors))
        for definition in self._definitions.values():
            result.total += 1
            category = definition.category.value
            result.by_category[category] = result.by_category.get(category, 0) + 1
            for platform in definition.supported_platforms():
                result.by_platform[platform.value] = (
                    result.by_platform.get(platform.value, 0) + 1
                )
        return result

    # Catalog browsing names used by the editor
    def get_capsule(self, capsule_id: str) -> CapsuleDefinition | None:
        return self.get(capsule_id)

    def get_all_capsules(self) -> list[CapsuleDefinition]:
        return self.list()

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, capsule_id: object) -> bool:
        return capsule_id in self._definitions

    def __iter__(self) -> Iterator[CapsuleDefinition]:
        return iter(list(self._definitions.values()))


__all__ = [
    "CapsuleFilter",
    "RegistryStats",
    "CapsuleRegistry",
]
