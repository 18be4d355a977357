"""Platform emitter abstraction and registry.

Example usage:
    >>> from capsule_forge.platform import Platform
    >>> from capsule_forge.providers import get_emitter
    >>> emitter = get_emitter(Platform.WEB)
    >>> emitter.component_path("Button", app)
    'src/components/Button.tsx'
"""

from .lib import (
    DEFAULT_APP_PACKAGE,
    STUB_COMPONENT,
    AppNames,
    ComponentRef,
    EntryContext,
    GeneratedFile,
    PlatformEmitter,
    PropArgument,
    base_package,
    get_emitter,
    indent,
    list_emitters,
    package_segment,
    register_emitter,
)

__all__ = [
    # Data
    "GeneratedFile",
    "AppNames",
    "PropArgument",
    "ComponentRef",
    "EntryContext",
    "STUB_COMPONENT",
    "DEFAULT_APP_PACKAGE",
    # Naming
    "package_segment",
    "base_package",
    # Emitters
    "PlatformEmitter",
    "register_emitter",
    "get_emitter",
    "list_emitters",
    "indent",
]
