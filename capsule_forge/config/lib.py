"""Centralized environment configuration management for capsule-forge.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from capsule_forge.config import EnvVar, get_environment
    >>>
    >>> workers = get_environment(EnvVar.MAX_WORKERS)  # Returns int
    >>> workers = get_environment(EnvVar.MAX_WORKERS, override=1)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "CAPSULE_FORGE_MAX_WORKERS").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, bool).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by capsule-forge.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - logging: Log output configuration
        - export: Export orchestration tuning
        - output: Naming of generated projects
    """

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    LOG_LEVEL = EnvConfig(
        name="CAPSULE_FORGE_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level name for the CLI (DEBUG, INFO, WARNING, ...)",
        category="logging",
    )

    # -------------------------------------------------------------------------
    # Export Orchestration
    # -------------------------------------------------------------------------
    MAX_WORKERS = EnvConfig(
        name="CAPSULE_FORGE_MAX_WORKERS",
        default=4,
        var_type=int,
        description="Parallel target tasks per export (1 = sequential)",
        category="export",
    )
    RENDER_WORKERS = EnvConfig(
        name="CAPSULE_FORGE_RENDER_WORKERS",
        default=1,
        var_type=int,
        description="Parallel component-file renders within one target",
        category="export",
    )
    DEFAULT_TARGETS = EnvConfig(
        name="CAPSULE_FORGE_DEFAULT_TARGETS",
        default="web,ios,android,desktop",
        var_type=str,
        description="Comma-separated targets used when a composition names none",
        category="export",
    )
    STRICT_TEMPLATES = EnvConfig(
        name="CAPSULE_FORGE_STRICT_TEMPLATES",
        default=False,
        var_type=bool,
        description="Raise on malformed capsule templates at registration",
        category="export",
    )

    # -------------------------------------------------------------------------
    # Generated Output
    # -------------------------------------------------------------------------
    APP_PACKAGE = EnvConfig(
        name="CAPSULE_FORGE_APP_PACKAGE",
        default="com.capsuleforge",
        var_type=str,
        description="Base package/bundle prefix for generated Android/iOS code",
        category="output",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    # Unknown type, return as-is
    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str, int, or bool).

    Example:
        >>> get_environment(EnvVar.MAX_WORKERS)
        4
        >>> get_environment(EnvVar.MAX_WORKERS, override=1)
        1
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable."""
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_max_workers(override: int | None = None) -> int:
    """Get the number of parallel target tasks, never below 1."""
    return max(1, get_environment(EnvVar.MAX_WORKERS, override=override))


def get_render_workers(override: int | None = None) -> int:
    """Get the number of parallel component renders per target, never below 1."""
    return max(1, get_environment(EnvVar.RENDER_WORKERS, override=override))


def get_default_targets(override: str | None = None) -> list[str]:
    """Get default target platform names.

    Resolution: override > CAPSULE_FORGE_DEFAULT_TARGETS > all platforms.
    Blank entries are dropped; names are lower-cased.
    """
    raw = get_environment(EnvVar.DEFAULT_TARGETS, override=override)
    return [name.strip().lower() for name in raw.split(",") if name.strip()]


def get_app_package(override: str | None = None) -> str:
    """Get the base package prefix for generated mobile code."""
    return get_environment(EnvVar.APP_PACKAGE, override=override)


def get_strict_templates(override: bool | None = None) -> bool:
    """Whether registration raises on malformed templates instead of recording."""
    return get_environment(EnvVar.STRICT_TEMPLATES, override=override)


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (logging, export, output).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


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
