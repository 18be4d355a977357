"""Tauri + React emitter.

The UI tree is identical to the web target. In addition the emitter writes
the Tauri shell ``src-tauri/src/main.rs`` which registers one command per
handler and exposes app metadata to the webview.
"""

from capsule_forge.platform import Dialect, Platform
from capsule_forge.providers.lib import (
    EntryContext,
    GeneratedFile,
    indent,
    register_emitter,
)
from capsule_forge.providers.web.lib import WebEmitter
from capsule_forge.serialize import get_dialect

SHELL_PATH = "src-tauri/src/main.rs"


@register_emitter
class DesktopEmitter(WebEmitter):
    """Emits a React UI tree plus a Rust Tauri shell."""

    @property
    def platform(self) -> Platform:
        return Platform.DESKTOP

    def dependencies(self) -> list[str]:
        return [*super().dependencies(), "@tauri-apps/api"]

    def shell_source(self, ctx: EntryContext) -> str:
        """Rust source of the Tauri entry point."""
        rust = get_dialect(Dialect.RUST)
        scope = rust.handler_scope("desktop:commands")
        scope.reserve("app_info")
        handlers = [scope.claim(raw) for raw in ctx.handlers]
        components = rust.array([rust.string(ref.identifier) for ref in ctx.components])
        metadata = rust.mapping(
            [
                ("name", rust.string(ctx.app.display_name)),
                ("version", rust.string(ctx.app.version)),
            ]
        )

        commands = "\n\n".join(
            "#[tauri::command]\n"
            f"pub fn {name}() {{\n"
            f"    println!(\"{{}}\", {rust.string(name)});\n"
            "}"
            for name in handlers
        )
        registered = ", ".join(
            ["app_info", *(f"handlers::{name}" for name in handlers)]
        )

        parts = [
            "#![cfg_attr(\n"
            "    all(not(debug_assertions), target_os = \"windows\"),\n"
            "    windows_subsystem = \"windows\"\n"
            ")]",
            "use std::collections::HashMap;",
            "struct AppConfig {\n"
            "    name: &'static str,\n"
            "    version: &'static str,\n"
            "    components: Vec<&'static str>,\n"
            "}",
            f"mod handlers {{\n{indent(commands, 4)}\n}}" if commands else "mod handlers {}",
            "#[tauri::command]\n"
            "fn app_info() -> HashMap<&'static str, &'static str> {\n"
            f"    {metadata}\n"
            "}",
            "fn main() {\n"
            "    let config = AppConfig {\n"
            f"        name: {rust.string(ctx.app.display_name)},\n"
            f"        version: {rust.string(ctx.app.version)},\n"
            f"        components: {components},\n"
            "    };\n"
            "    println!(\n"
            "        \"Starting {} v{} ({} components)\",\n"
            "        config.name,\n"
            "        config.version,\n"
            "        config.components.len()\n"
            "    );\n"
            "\n"
            "    tauri::Builder::default()\n"
            f"        .invoke_handler(tauri::generate_handler![{registered}])\n"
            "        .run(tauri::generate_context!())\n"
            "        .expect(\"error while running tauri application\");\n"
            "}",
        ]
        return "\n\n".join(parts) + "\n"

    def entry_files(self, ctx: EntryContext) -> list[GeneratedFile]:
        shell = GeneratedFile(
            path=SHELL_PATH, content=self.shell_source(ctx), language="rust"
        )
        return [*super().entry_files(ctx), shell]
