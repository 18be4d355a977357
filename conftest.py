"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- The built-in capsule registry
- Common compositions used by scenario tests
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from dotenv import load_dotenv

if TYPE_CHECKING:
    from capsule_forge.mid import ProjectComposition, Theme
    from capsule_forge.registry import CapsuleRegistry

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Registry Fixtures
# =============================================================================


@pytest.fixture
def default_registry() -> CapsuleRegistry:
    """Create a registry holding the built-in catalog.

    Returns:
        Fresh CapsuleRegistry; templates are recorded, not raised, on error.
    """
    from capsule_forge.capsules import create_default_registry

    return create_default_registry(strict_templates=False)


# =============================================================================
# Common Test Fixtures
# =============================================================================


@pytest.fixture
def theme() -> Theme:
    """Create a non-default theme with nested text colors.

    Returns:
        Theme with a custom primary color and relaxed spacing.
    """
    from capsule_forge.mid import Theme

    return Theme.model_validate(
        {
            "name": "Modern Blue",
            "colors": {
                "primary": "#2563EB",
                "text": {"primary": "#0F172A", "secondary": "#64748B"},
            },
            "spacing": "relaxed",
            "borderRadius": "lg",
        }
    )


@pytest.fixture
def dashboard_composition(theme: Theme) -> ProjectComposition:
    """Create a card-rooted composition using several built-in capsules.

    Returns:
        A login screen and a data table inside a card, with a button in
        the card's footer slot.
    """
    from capsule_forge.mid import ProjectComposition

    return ProjectComposition.model_validate(
        {
            "name": "Team Dashboard",
            "version": "2.1.0",
            "targets": ["web", "ios", "android", "desktop"],
            "theme": theme,
            "root": {
                "id": "root",
                "capsuleId": "card",
                "props": {"title": "Dashboard"},
                "children": [
                    {
                        "id": "login",
                        "capsuleId": "auth-screen",
                        "props": {"onLogin": "handleLogin", "mode": "signup"},
                    },
                    {
                        "id": "members",
                        "capsuleId": "data-table",
                        "props": {
                            "columns": ["name", "role"],
                            "data": [
                                {"name": "Ada", "role": "admin"},
                                {"name": "Linus", "role": "member"},
                            ],
                            "onRowClick": "openMember",
                        },
                    },
                ],
                "slots": {
                    "footer": [
                        {
                            "id": "refresh",
                            "capsuleId": "button",
                            "props": {"text": "Refresh", "onPress": "refresh"},
                        }
                    ]
                },
            },
        }
    )
