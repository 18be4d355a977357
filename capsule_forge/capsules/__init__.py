"""Built-in capsule catalog.

Example usage:
    >>> from capsule_forge.capsules import create_default_registry
    >>> registry = create_default_registry()
    >>> registry.supports_platform("map", Platform.IOS)
    False
"""

from .auth_screen import AUTH_SCREEN
from .button import BUTTON
from .card import CARD
from .data_table import DATA_TABLE
from .lib import BUILTIN_CAPSULES, create_default_registry, load_builtin_capsules
from .map import MAP
from .text import TEXT

__all__ = [
    # Definitions
    "BUTTON",
    "TEXT",
    "CARD",
    "AUTH_SCREEN",
    "DATA_TABLE",
    "MAP",
    "BUILTIN_CAPSULES",
    # Loading
    "load_builtin_capsules",
    "create_default_registry",
]
