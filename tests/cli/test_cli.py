"""Tests for the command line interface."""

import json
import subprocess
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]

COMPOSITION = {
    "name": "Cli Demo",
    "targets": ["web", "android"],
    "root": {
        "id": "root",
        "capsuleId": "card",
        "children": [
            {"id": "go", "capsuleId": "button", "props": {"text": "Go", "onPress": "go"}}
        ],
    },
}


def _run(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, ".", *args],
        capture_output=True,
        text=True,
        cwd=ROOT,
        timeout=60,
    )


@pytest.fixture
def composition_file(tmp_path: Path) -> Path:
    path = tmp_path / "app.json"
    path.write_text(json.dumps(COMPOSITION), encoding="utf-8")
    return path


@pytest.mark.slow
class TestCli:
    """Tests for python . <command>."""

    def test_help(self):
        """No command prints usage and fails."""
        result = _run()
        assert result.returncode == 1
        assert "Usage: python . {command}" in result.stdout

    def test_capsules_platform_filter(self):
        """The iOS catalog omits the map."""
        result = _run("capsules", "--platform", "ios")
        assert result.returncode == 0
        assert "auth-screen" in result.stdout
        assert "map" not in result.stdout.split()

    def test_capsules_json(self):
        """--json prints full definitions."""
        result = _run("capsules", "--json", "--category", "data")
        assert result.returncode == 0
        assert [d["id"] for d in json.loads(result.stdout)] == ["data-table"]

    def test_export_writes_tree(self, composition_file: Path, tmp_path: Path):
        """-o writes each target under its own directory."""
        out = tmp_path / "build"
        result = _run("export", str(composition_file), "-o", str(out))
        assert result.returncode == 0, result.stderr
        assert "2 of 2 platforms exported cleanly" in result.stdout
        assert (out / "web" / "src" / "App.tsx").is_file()
        assert (
            out
            / "android"
            / "app/src/main/java/com/capsuleforge/clidemo/MainActivity.kt"
        ).is_file()

    def test_export_json_format(self, composition_file: Path):
        """--format json prints one result per target."""
        result = _run("export", str(composition_file), "-t", "ios", "--format", "json")
        assert result.returncode == 0, result.stderr
        [ios] = json.loads(result.stdout)
        assert ios["platform"] == "ios"
        assert ios["status"] == "completed"

    def test_export_rejects_unknown_target(self, composition_file: Path):
        """Unknown targets are a precondition failure."""
        result = _run("export", str(composition_file), "-t", "watchos")
        assert result.returncode == 2
        assert "Unknown target platform" in result.stderr

    def test_schema(self):
        """schema prints the composition JSON schema."""
        result = _run("schema")
        assert result.returncode == 0
        assert "root" in json.loads(result.stdout)["properties"]
