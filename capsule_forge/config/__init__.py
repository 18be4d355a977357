"""Centralized configuration management for capsule-forge.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from capsule_forge.config import EnvVar, get_environment
    >>>
    >>> workers = get_environment(EnvVar.MAX_WORKERS)  # Returns int: 4
    >>> workers = get_environment(EnvVar.MAX_WORKERS, override=1)

Environment Variable Categories:
    logging: Log level for the CLI
    export: Worker counts and default targets for exports
    output: Package prefix used in generated mobile code
"""

from .lib import (
    EnvConfig,
    EnvVar,
    get_app_package,
    get_default_targets,
    get_environment,
    get_environment_info,
    get_max_workers,
    get_render_workers,
    get_strict_templates,
    list_environment_variables,
)

__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_max_workers",
    "get_render_workers",
    "get_default_targets",
    "get_app_package",
    "get_strict_templates",
    # Introspection
    "list_environment_variables",
]
