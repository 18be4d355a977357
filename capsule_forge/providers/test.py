"""Unit tests for the emitter registry and shared provider types."""

import logging

import pytest

from capsule_forge.mid import CapsuleInstance, ProjectComposition
from capsule_forge.platform import Platform
from capsule_forge.providers import (
    AppNames,
    GeneratedFile,
    PlatformEmitter,
    base_package,
    get_emitter,
    list_emitters,
    package_segment,
)


def _composition(name: str) -> ProjectComposition:
    return ProjectComposition(
        name=name,
        root=CapsuleInstance(id="root", capsule_id="button"),
        targets=["web"],
    )


class TestPlatformEmitterContract:
    """Tests for the PlatformEmitter abstract base class."""

    @pytest.mark.unit
    def test_is_abstract(self):
        """PlatformEmitter cannot be instantiated directly."""
        with pytest.raises(TypeError, match="abstract"):
            PlatformEmitter()  # type: ignore

    @pytest.mark.unit
    def test_incomplete_emitter_rejected(self):
        """Concrete emitters must implement every abstract member."""

        class Incomplete(PlatformEmitter):
            @property
            def platform(self) -> Platform:
                return Platform.WEB

        with pytest.raises(TypeError, match="abstract"):
            Incomplete()


class TestEmitterRegistry:
    """Tests for get_emitter / list_emitters."""

    @pytest.mark.unit
    def test_every_platform_has_emitter(self):
        """Each Platform member resolves to an emitter for that platform."""
        assert list_emitters() == list(Platform)
        for platform in Platform:
            assert get_emitter(platform).platform == platform

    @pytest.mark.unit
    def test_accepts_platform_value(self):
        """Platform string values resolve like members."""
        assert get_emitter("ios").platform == Platform.IOS

    @pytest.mark.unit
    def test_fresh_instance_per_call(self):
        """Each lookup returns a new emitter instance."""
        assert get_emitter(Platform.WEB) is not get_emitter(Platform.WEB)


class TestAppNames:
    """Tests for names derived from a composition."""

    @pytest.mark.unit
    def test_from_composition(self):
        """Identifier is PascalCase; package segment is lower-case."""
        app = AppNames.from_composition(_composition("My App"), "com.example")
        assert app.identifier == "MyApp"
        assert app.package == "com.example.myapp"
        assert app.package_path == "com/example/myapp"
        assert app.display_name == "My App"

    @pytest.mark.unit
    def test_unusable_name_falls_back(self):
        """A name without identifier characters yields App / app."""
        app = AppNames.from_composition(_composition("!!!"), "com.example")
        assert app.identifier == "App"
        assert app.package == "com.example.app"

    @pytest.mark.unit
    def test_leading_digit_package_segment(self):
        """Package segments never start with a digit."""
        app = AppNames.from_composition(_composition("3D Viewer"), "com.example")
        assert app.package == "com.example.app3dviewer"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name,segment",
        [("Fun", "appfun"), ("Object", "appobject"), ("When", "appwhen"), ("Val", "appval")],
    )
    def test_keyword_package_segment(self, name, segment):
        """Project names that are Kotlin keywords get a prefixed segment."""
        app = AppNames.from_composition(_composition(name), "com.example")
        assert app.package == f"com.example.{segment}"

    @pytest.mark.unit
    def test_configured_package_is_checked(self, caplog):
        """Configured base packages are rewritten segment by segment."""
        with caplog.at_level(logging.WARNING):
            app = AppNames.from_composition(_composition("Demo"), "org.fun.my-co.")
        assert app.package == "org.appfun.myco.demo"
        assert "not a legal package" in caplog.text

    @pytest.mark.unit
    def test_package_helpers(self):
        """Segments and base packages are always legal Kotlin."""
        assert package_segment("is") == "appis"
        assert package_segment("2d") == "app2d"
        assert package_segment("") == "app"
        assert package_segment("widgets") == "widgets"
        assert base_package("com.example") == "com.example"
        assert base_package("...") == "com.capsuleforge"


class TestGeneratedFile:
    """Tests for GeneratedFile."""

    @pytest.mark.unit
    def test_size_is_utf8_bytes(self):
        """Size counts encoded bytes, not characters."""
        file = GeneratedFile(path="a.tsx", content="é", language="typescript")
        assert file.size == 2

    @pytest.mark.unit
    def test_to_dict(self):
        """to_dict includes the computed size."""
        file = GeneratedFile(path="a.tsx", content="abc", language="typescript")
        assert file.to_dict() == {
            "path": "a.tsx",
            "content": "abc",
            "language": "typescript",
            "size": 3,
        }
