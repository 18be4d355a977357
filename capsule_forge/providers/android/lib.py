"""Jetpack Compose emitter.

Components are ``@Composable`` functions under
``<package>/ui/components``; the emitter prepends the package declaration
to every component file. ``MainActivity.kt`` holds ``AppTheme``,
``Handlers``, the root ``AppContent`` composable and the activity.
"""

from collections.abc import Mapping

from capsule_forge.mid import Theme
from capsule_forge.platform import Platform
from capsule_forge.providers.lib import (
    STUB_COMPONENT,
    AppNames,
    ComponentRef,
    EntryContext,
    GeneratedFile,
    PlatformEmitter,
    PropArgument,
    indent,
    register_emitter,
)
from capsule_forge.serialize import Casing, derive_identifier

_ENTRY_IMPORTS = (
    "android.os.Bundle",
    "androidx.activity.ComponentActivity",
    "androidx.activity.compose.setContent",
    "androidx.compose.runtime.Composable",
    "androidx.compose.ui.graphics.Color",
    "androidx.compose.ui.unit.dp",
)


@register_emitter
class AndroidEmitter(PlatformEmitter):
    """Emits a Jetpack Compose source tree."""

    reserved_names = frozenset(
        {
            STUB_COMPONENT,
            "App",
            "AppTheme",
            "Handlers",
            "AppContent",
            "MainActivity",
            "Color",
            "Composable",
            "Bundle",
            "ComponentActivity",
        }
    )

    @property
    def platform(self) -> Platform:
        return Platform.ANDROID

    def components_package(self, app: AppNames) -> str:
        return f"{app.package}.ui.components"

    def component_path(self, stem: str, app: AppNames) -> str:
        return f"app/src/main/java/{app.package_path}/ui/components/{stem}.kt"

    def entry_path(self, app: AppNames) -> str:
        return f"app/src/main/java/{app.package_path}/MainActivity.kt"

    def component_header(self, ref: ComponentRef, app: AppNames) -> str:
        return f"package {self.components_package(app)}\n\n"

    def comment(self, text: str) -> str:
        return "\n".join(f"// {line}".rstrip() for line in text.splitlines() or [""])

    def argument(self, arg: PropArgument) -> str:
        literal = self.dialect.serialize(
            arg.value,
            arg.spec.type,
            arg.spec.item_type,
            arg.spec.fields,
            handlers=arg.handlers,
        )
        return f"{arg.name} = {literal}"

    def render_call(
        self,
        component: str,
        args: list[PropArgument],
        children: list[str],
        slots: list[tuple[str, str]],
    ) -> str:
        parts = [self.argument(a) for a in args]
        for name, content in slots:
            parts.append(f"{name} = {{\n{indent(content, 4)}\n}}")
        if not children:
            return f"{component}({', '.join(parts)})"
        head = f"{component}({', '.join(parts)})" if parts else component
        body = "\n".join(children)
        return f"{head} {{\n{indent(body, 4)}\n}}"

    def stub_call(self, capsule_name: str, reason: str) -> str:
        kt = self.dialect
        return (
            f"{self.comment(reason)}\n"
            f"{STUB_COMPONENT}(capsule = {kt.string(capsule_name)}, "
            f"reason = {kt.string(reason)})"
        )

    def stub_component(self, identifier: str, capsule_id: str, reason: str) -> str:
        return (
            "import androidx.compose.runtime.Composable\n"
            "\n"
            f"{self.comment(reason)}\n"
            "@Composable\n"
            f"fun {identifier}() {{\n"
            f"    androidx.compose.material3.Text(text = {self.dialect.string(reason)})\n"
            "}\n"
        )

    def dependencies(self) -> list[str]:
        return [
            "androidx.activity:activity-compose",
            "androidx.compose.material3:material3",
        ]

    # -------------------------------------------------------------------------
    # Entry file
    # -------------------------------------------------------------------------

    def theme_object(self, theme: Theme) -> str:
        kt = self.dialect
        tokens = theme.tokens()
        seen: set[str] = set()
        lines = ["object AppTheme {"]

        def constant(raw: str, keyword: str, literal: str) -> None:
            name = derive_identifier(raw, Casing.PASCAL)
            if not name or name in seen:
                return
            seen.add(name)
            lines.append(f"    {keyword} {name} = {literal}")

        for key, value in theme.colors.items():
            constant(key, "val", kt.color_hex(value))
        for raw in ("fontFamily", "headingFont", "monoFont"):
            constant(raw, "const val", kt.string(tokens[f"typography.{raw}"].value))
        constant("typeScale", "const val", kt.number(tokens["typography.scale"].value))
        for raw in ("spacing", "radius"):
            constant(raw, "val", kt.dimension_literal(kt.number(tokens[raw].value)))
        constant("shadows", "const val", kt.boolean(theme.shadows))
        lines.append("}")
        return "\n".join(lines)

    def handlers_object(self, handlers: Mapping[str, str]) -> str:
        names = list(handlers.values())
        if not names:
            return "object Handlers"
        body = "\n\n".join(
            f"    fun {name}() {{\n"
            f"        println({self.dialect.string(name)})\n"
            "    }"
            for name in names
        )
        return f"object Handlers {{\n{body}\n}}"

    def stub_definition(self) -> str:
        return (
            "@Composable\n"
            f"fun {STUB_COMPONENT}(capsule: String, reason: String) {{\n"
            '    androidx.compose.material3.Text(text = "$capsule is unavailable: $reason")\n'
            "}"
        )

    def entry_source(self, ctx: EntryContext) -> str:
        components_package = self.components_package(ctx.app)
        imports = [f"import {name}" for name in _ENTRY_IMPORTS]
        imports += [
            f"import {components_package}.{ref.identifier}" for ref in ctx.components
        ]
        sections = [
            f"package {ctx.app.package}",
            "\n".join(imports),
            self.theme_object(ctx.theme),
            self.handlers_object(ctx.handlers),
        ]
        if ctx.needs_stub:
            sections.append(self.stub_definition())
        sections.append(
            "@Composable\n"
            "fun AppContent() {\n"
            f"{indent(ctx.root, 4)}\n"
            "}"
        )
        sections.append(
            "class MainActivity : ComponentActivity() {\n"
            "    override fun onCreate(savedInstanceState: Bundle?) {\n"
            "        super.onCreate(savedInstanceState)\n"
            "        setContent {\n"
            "            AppContent()\n"
            "        }\n"
            "    }\n"
            "}"
        )
        return "\n\n".join(sections) + "\n"

    def entry_files(self, ctx: EntryContext) -> list[GeneratedFile]:
        return [
            GeneratedFile(
                path=self.entry_path(ctx.app),
                content=self.entry_source(ctx),
                language=self.language,
            )
        ]
