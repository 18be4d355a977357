"""Unit tests for the Tauri emitter."""

import pytest

from capsule_forge.mid import Theme
from capsule_forge.platform import Platform
from capsule_forge.providers import AppNames, ComponentRef, EntryContext
from capsule_forge.providers.desktop import SHELL_PATH, DesktopEmitter

APP = AppNames(
    display_name='Desk "Top"',
    identifier="DeskTop",
    package="com.example.desktop",
    version="2.0.0",
)


def _ctx(**kwargs) -> EntryContext:
    return EntryContext(
        app=APP,
        theme=Theme(),
        components=[
            ComponentRef("card", "Card", "Card", "src/components/Card.tsx"),
        ],
        root="<Card />",
        **kwargs,
    )


class TestDesktopEmitter:
    """Tests for the desktop UI tree and Rust shell."""

    @pytest.mark.unit
    def test_ui_follows_web_conventions(self):
        """Component paths and call sites match the web target."""
        emitter = DesktopEmitter()
        assert emitter.platform == Platform.DESKTOP
        assert emitter.component_path("Card", APP) == "src/components/Card.tsx"
        assert emitter.dialect.action("save") == "handlers.save"

    @pytest.mark.unit
    def test_entry_files_include_shell(self):
        """The shell follows App.tsx in the entry file list."""
        files = DesktopEmitter().entry_files(_ctx())
        assert [f.path for f in files] == ["src/App.tsx", SHELL_PATH]
        assert [f.language for f in files] == ["typescript", "rust"]

    @pytest.mark.unit
    def test_shell_registers_handlers(self):
        """Handlers become snake_case Tauri commands."""
        source = DesktopEmitter().shell_source(_ctx(handlers={"onLogin": "onLogin"}))
        assert source.count("pub fn on_login()") == 1
        assert "tauri::generate_handler![app_info, handlers::on_login]" in source

    @pytest.mark.unit
    def test_shell_commands_stay_distinct(self):
        """Action names that snake_case alike get numbered commands."""
        handlers = {"onLogin": "onLogin", "on_login": "onLogin2", "appInfo": "appInfo"}
        source = DesktopEmitter().shell_source(_ctx(handlers=handlers))
        assert "pub fn on_login()" in source
        assert "pub fn on_login2()" in source
        assert "pub fn app_info2()" in source
        assert (
            "generate_handler![app_info, handlers::on_login, "
            "handlers::on_login2, handlers::app_info2]"
        ) in source

    @pytest.mark.unit
    def test_shell_escapes_metadata(self):
        """App metadata uses Rust string escaping."""
        source = DesktopEmitter().shell_source(_ctx())
        assert 'name: "Desk \\"Top\\"",' in source
        assert 'components: vec!["Card"],' in source
        assert 'HashMap::from([("name", "Desk \\"Top\\""), ("version", "2.0.0")])' in source

    @pytest.mark.unit
    def test_shell_without_handlers(self):
        """An empty handler module still compiles."""
        source = DesktopEmitter().shell_source(_ctx())
        assert "mod handlers {}" in source
        assert "generate_handler![app_info]" in source

    @pytest.mark.unit
    def test_dependencies(self):
        """Desktop projects add the Tauri API package."""
        assert "@tauri-apps/api" in DesktopEmitter().dependencies()
