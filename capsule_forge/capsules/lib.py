"""Built-in capsule catalog.

Every definition here is a plain CapsuleDefinition; nothing is registered
at import time. Callers load the catalog into a registry they own.
"""

import logging

from capsule_forge.capsules.auth_screen import AUTH_SCREEN
from capsule_forge.capsules.button import BUTTON
from capsule_forge.capsules.card import CARD
from capsule_forge.capsules.data_table import DATA_TABLE
from capsule_forge.capsules.map import MAP
from capsule_forge.capsules.text import TEXT
from capsule_forge.registry import CapsuleRegistry
from capsule_forge.schema import CapsuleDefinition

logger = logging.getLogger(__name__)

BUILTIN_CAPSULES: tuple[CapsuleDefinition, ...] = (
    BUTTON,
    TEXT,
    CARD,
    AUTH_SCREEN,
    DATA_TABLE,
    MAP,
)


def load_builtin_capsules(registry: CapsuleRegistry) -> list[CapsuleDefinition]:
    """Register the built-in catalog into a registry.

    Args:
        registry: Target registry. Existing ids are replaced.

    Returns:
        The registered definitions, in catalog order.
    """
    loaded = registry.register_many(BUILTIN_CAPSULES)
    logger.debug(f"Loaded {len(loaded)} built-in capsules")
    return loaded


def create_default_registry(strict_templates: bool | None = None) -> CapsuleRegistry:
    """New registry holding the built-in catalog."""
    registry = CapsuleRegistry(strict_templates=strict_templates)
    load_builtin_capsules(registry)
    return registry


__all__ = [
    "BUILTIN_CAPSULES",
    "load_builtin_capsules",
    "create_default_registry",
]
