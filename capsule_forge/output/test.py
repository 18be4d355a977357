"""Tests for output module."""

import pytest

from capsule_forge.errors import capability_error
from capsule_forge.export import (
    CompilationMetadata,
    CompilationResult,
    CompilationStatus,
)
from capsule_forge.mid import CapsuleInstance, ProjectComposition
from capsule_forge.output import (
    format_catalog,
    format_composition_tree,
    format_file_tree,
    format_result,
    format_size,
    format_summary,
)
from capsule_forge.platform import Platform
from capsule_forge.providers import GeneratedFile
from capsule_forge.schema import CapsuleDefinition


@pytest.fixture
def files():
    """Create a small web file tree."""
    return [
        GeneratedFile("src/components/Card.tsx", "x" * 2048, "typescript"),
        GeneratedFile("src/components/Button.tsx", "abc", "typescript"),
        GeneratedFile("src/App.tsx", "app", "typescript"),
    ]


class TestFormatSize:
    """Tests for format_size."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "size,expected",
        [(0, "0 B"), (1023, "1023 B"), (2048, "2.0 KB"), (3 * 1024 * 1024, "3.0 MB")],
    )
    def test_units(self, size, expected):
        """Sizes pick the largest fitting unit."""
        assert format_size(size) == expected


class TestFormatCompositionTree:
    """Tests for format_composition_tree."""

    @pytest.mark.unit
    def test_children_and_slots(self):
        """Children come first, slot contents are labelled."""
        composition = ProjectComposition(
            name="Demo",
            root=CapsuleInstance(
                id="root",
                capsule_id="card",
                children=[CapsuleInstance(id="title", capsule_id="text")],
                slots={"footer": [CapsuleInstance(id="cta", capsule_id="button")]},
            ),
        )
        assert format_composition_tree(composition) == (
            "root [card]\n├── title [text]\n└── footer: cta [button]"
        )


class TestFormatFileTree:
    """Tests for format_file_tree."""

    @pytest.mark.unit
    def test_directories_before_files(self, files):
        """Nested directories render with connectors and sizes."""
        assert format_file_tree(files) == "\n".join(
            [
                ".",
                "└── src",
                "    ├── components",
                "    │   ├── Card.tsx (2.0 KB)",
                "    │   └── Button.tsx (3 B)",
                "    └── App.tsx (3 B)",
            ]
        )

    @pytest.mark.unit
    def test_empty(self):
        """No files renders only the root."""
        assert format_file_tree([]) == "."


class TestFormatResults:
    """Tests for format_result and format_summary."""

    @pytest.fixture
    def results(self, files):
        web = CompilationResult(
            platform=Platform.WEB,
            status=CompilationStatus.COMPLETED,
            files=files,
            metadata=CompilationMetadata(
                capsule_count=2, total_files=3, total_size=2054, dependencies=["react"]
            ),
        )
        ios = CompilationResult(
            platform=Platform.IOS,
            status=CompilationStatus.COMPLETED,
            errors=[capability_error("m", "map", Platform.IOS, "no iOS template")],
        )
        android = CompilationResult(
            platform=Platform.ANDROID, status=CompilationStatus.CANCELLED
        )
        return [web, ios, android]

    @pytest.mark.unit
    def test_result(self, results):
        """Status line, tree, dependencies and diagnostics."""
        text = format_result(results[0])
        assert text.startswith("Web (React + Vite): completed, 3 files, 2.0 KB, 2 capsules")
        assert "Button.tsx" in text
        assert "Dependencies: react" in text

        ios = format_result(results[1])
        assert "error   [CapabilityError] m:" in ios

    @pytest.mark.unit
    def test_summary(self, results):
        """One marker line per target and a summary line."""
        lines = format_summary(results).splitlines()
        assert lines[0].startswith("✓ web")
        assert lines[1].startswith("✗ ios")
        assert lines[2].startswith("- android")
        assert lines[-1] == "2 of 3 platforms exported cleanly, 1 cancelled"


class TestFormatCatalog:
    """Tests for format_catalog."""

    @pytest.mark.unit
    def test_rows(self):
        """Rows list id, name, category and platforms."""
        definition = CapsuleDefinition.model_validate(
            {
                "id": "button",
                "name": "Button",
                "category": "ui",
                "platforms": {"web": {"code": "x"}, "ios": {"code": "y"}},
            }
        )
        assert format_catalog([definition]) == "button  Button  ui  web, ios, desktop"

    @pytest.mark.unit
    def test_empty(self):
        """An empty catalog says so."""
        assert format_catalog([]) == "No capsules found"
