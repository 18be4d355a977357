"""Unit tests for the composition model."""

import pytest
from pydantic import ValidationError

from capsule_forge.mid import (
    DEFAULT_COLORS,
    CapsuleInstance,
    ProjectComposition,
    Theme,
    export_json_schema,
)
from capsule_forge.platform import Platform
from capsule_forge.schema import PropType


class TestTheme:
    """Tests for Theme tokens."""

    @pytest.mark.unit
    def test_defaults(self):
        """Default theme carries the standard palette."""
        theme = Theme()
        assert theme.colors == DEFAULT_COLORS
        assert theme.color("primary") == "#3B82F6"
        assert theme.color("colors.primary") == "#3B82F6"

    @pytest.mark.unit
    def test_nested_text_colors_flatten(self):
        """Nested text colors become textPrimary etc."""
        theme = Theme.model_validate(
            {"colors": {"primary": "#000000", "text": {"primary": "#111111"}}}
        )
        assert theme.colors["primary"] == "#000000"
        assert theme.colors["textPrimary"] == "#111111"
        assert theme.colors["secondary"] == DEFAULT_COLORS["secondary"]

    @pytest.mark.unit
    def test_rejects_non_hex_color(self):
        """Theme colors must be hex."""
        with pytest.raises(ValidationError):
            Theme(colors={"primary": "blue"})

    @pytest.mark.unit
    def test_tokens(self):
        """tokens() flattens the theme with typed values."""
        theme = Theme.model_validate(
            {"spacing": "relaxed", "borderRadius": "full", "typography": {"scale": "large"}}
        )
        tokens = theme.tokens()
        assert tokens["colors.primary"].type == PropType.COLOR
        assert tokens["spacing"].value == 24
        assert tokens["radius"].value == 9999
        assert tokens["typography.scale"].value == 1.125
        assert tokens["typography.headingFont"].value == "Inter"
        assert tokens["shadows"] == (PropType.BOOLEAN, True)


class TestCapsuleInstance:
    """Tests for the instance tree."""

    @pytest.mark.unit
    def test_camel_case_capsule_id(self):
        """capsuleId is accepted."""
        node = CapsuleInstance.model_validate({"id": "a", "capsuleId": "button"})
        assert node.capsule_id == "button"

    @pytest.mark.unit
    def test_iter_tree_preorder(self):
        """Pre-order: instance, children, then slots."""
        root = CapsuleInstance(
            id="root",
            capsule_id="card",
            children=[
                CapsuleInstance(
                    id="c1",
                    capsule_id="text",
                    children=[CapsuleInstance(id="c1a", capsule_id="text")],
                ),
                CapsuleInstance(id="c2", capsule_id="button"),
            ],
            slots={"footer": [CapsuleInstance(id="s1", capsule_id="button")]},
        )
        assert [n.id for n in root.iter_tree()] == ["root", "c1", "c1a", "c2", "s1"]
        assert root.count() == 5


class TestProjectComposition:
    """Tests for ProjectComposition parsing."""

    @pytest.mark.unit
    def test_targets_deduplicated_in_order(self):
        """Target platforms are normalized and deduplicated."""
        project = ProjectComposition.model_validate(
            {
                "name": "Demo",
                "targetPlatforms": ["iOS", "web", "ios"],
                "root": {"id": "r", "capsuleId": "card"},
            }
        )
        assert project.target_platforms == [Platform.IOS, Platform.WEB]

    @pytest.mark.unit
    def test_unknown_target_rejected(self):
        """Unknown platform names fail validation."""
        with pytest.raises(ValidationError):
            ProjectComposition.model_validate(
                {"name": "Demo", "targets": ["windows"], "root": {"id": "r", "capsuleId": "x"}}
            )

    @pytest.mark.unit
    def test_capsule_ids_first_seen(self):
        """capsule_ids lists distinct ids in first-seen order."""
        project = ProjectComposition(
            name="Demo",
            root=CapsuleInstance(
                id="r",
                capsule_id="card",
                children=[
                    CapsuleInstance(id="b1", capsule_id="button"),
                    CapsuleInstance(id="t1", capsule_id="text"),
                    CapsuleInstance(id="b2", capsule_id="button"),
                ],
            ),
        )
        assert project.capsule_ids() == ["card", "button", "text"]

    @pytest.mark.unit
    def test_json_schema(self):
        """Schema export describes the composition."""
        schema = export_json_schema()
        assert schema["title"] == "ProjectComposition"
        assert "root" in schema["properties"]
