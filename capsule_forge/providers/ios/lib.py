"""SwiftUI emitter.

Every component is a ``View`` struct in ``Sources/<App>/Views``. The entry
file declares the ``Theme`` and ``Handlers`` namespaces, a ``ContentView``
holding the root composition, and the ``@main`` app struct.

Generated code qualifies SwiftUI views it uses itself (``SwiftUI.Text``) so
that a capsule named ``Text`` or ``Button`` never shadows them.
"""

from collections.abc import Mapping

from capsule_forge.mid import Theme
from capsule_forge.platform import Platform
from capsule_forge.providers.lib import (
    STUB_COMPONENT,
    AppNames,
    EntryContext,
    GeneratedFile,
    PlatformEmitter,
    PropArgument,
    indent,
    register_emitter,
)


@register_emitter
class IOSEmitter(PlatformEmitter):
    """Emits a SwiftUI source tree."""

    reserved_names = frozenset(
        {
            STUB_COMPONENT,
            "App",
            "Theme",
            "Handlers",
            "ContentView",
            "SwiftUI",
            "View",
            "Scene",
            "WindowGroup",
            "Color",
            "CGFloat",
        }
    )

    @property
    def platform(self) -> Platform:
        return Platform.IOS

    def app_reserved_names(self, app: AppNames) -> set[str]:
        return {app.identifier, f"{app.identifier}App"}

    def component_path(self, stem: str, app: AppNames) -> str:
        return f"Sources/{app.identifier}/Views/{stem}.swift"

    def entry_path(self, app: AppNames) -> str:
        return f"Sources/{app.identifier}/{app.identifier}App.swift"

    def comment(self, text: str) -> str:
        return "\n".join(f"// {line}".rstrip() for line in text.splitlines() or [""])

    def render_call(
        self,
        component: str,
        args: list[PropArgument],
        children: list[str],
        slots: list[tuple[str, str]],
    ) -> str:
        parts = [self.argument(a) for a in args]
        for name, content in slots:
            parts.append(f"{name}: {{\n{indent(content, 4)}\n}}")
        head = f"{component}({', '.join(parts)})"
        if not children:
            return head
        body = "\n".join(children)
        return f"{head} {{\n{indent(body, 4)}\n}}"

    def stub_call(self, capsule_name: str, reason: str) -> str:
        swift = self.dialect
        return (
            f"{self.comment(reason)}\n"
            f"{STUB_COMPONENT}(capsule: {swift.string(capsule_name)}, "
            f"reason: {swift.string(reason)})"
        )

    def stub_component(self, identifier: str, capsule_id: str, reason: str) -> str:
        return (
            "import SwiftUI\n"
            "\n"
            f"{self.comment(reason)}\n"
            f"struct {identifier}: View {{\n"
            "    var body: some View {\n"
            f"        SwiftUI.Text({self.dialect.string(reason)})\n"
            "            .foregroundColor(.secondary)\n"
            "    }\n"
            "}\n"
        )

    # -------------------------------------------------------------------------
    # Entry file
    # -------------------------------------------------------------------------

    def theme_enum(self, theme: Theme) -> str:
        swift = self.dialect
        tokens = theme.tokens()
        seen: set[str] = set()
        lines = ["enum Theme {"]

        def constant(raw: str, declaration: str) -> None:
            member = swift.member(raw)
            if member is None or member in seen:
                return
            seen.add(member)
            lines.append(f"    static let {member}{declaration}")

        for key, value in theme.colors.items():
            constant(key, f" = {swift.color_hex(value)}")
        typography = theme.typography
        constant("fontFamily", f" = {swift.string(typography.font_family)}")
        constant(
            "headingFont",
            f" = {swift.string(tokens['typography.headingFont'].value)}",
        )
        constant("monoFont", f" = {swift.string(typography.mono_font)}")
        constant("typeScale", f": CGFloat = {swift.number(tokens['typography.scale'].value)}")
        constant("spacing", f": CGFloat = {swift.number(tokens['spacing'].value)}")
        constant("radius", f": CGFloat = {swift.number(tokens['radius'].value)}")
        constant("shadows", f" = {swift.boolean(theme.shadows)}")
        lines.append("}")
        return "\n".join(lines)

    def handlers_enum(self, handlers: Mapping[str, str]) -> str:
        names = list(handlers.values())
        if not names:
            return "enum Handlers {}"
        body = "\n\n".join(
            f"    static func {name}() {{\n"
            f"        print({self.dialect.string(name)})\n"
            "    }"
            for name in names
        )
        return f"enum Handlers {{\n{body}\n}}"

    def stub_definition(self) -> str:
        return (
            f"struct {STUB_COMPONENT}: View {{\n"
            "    let capsule: String\n"
            "    let reason: String\n"
            "\n"
            "    var body: some View {\n"
            '        SwiftUI.Text("\\(capsule) is unavailable")\n'
            "            .foregroundColor(.secondary)\n"
            "            .help(reason)\n"
            "    }\n"
            "}"
        )

    def entry_source(self, ctx: EntryContext) -> str:
        components = ", ".join(ref.identifier for ref in ctx.components)
        sections = [
            "import SwiftUI",
            self.comment(f"Components: {components}") if components else "",
            self.theme_enum(ctx.theme),
            self.handlers_enum(ctx.handlers),
        ]
        if ctx.needs_stub:
            sections.append(self.stub_definition())
        sections.append(
            "struct ContentView: View {\n"
            "    var body: some View {\n"
            f"{indent(ctx.root, 8)}\n"
            "    }\n"
            "}"
        )
        sections.append(
            "@main\n"
            f"struct {ctx.app.identifier}App: App {{\n"
            "    var body: some Scene {\n"
            "        WindowGroup {\n"
            "            ContentView()\n"
            "        }\n"
            "    }\n"
            "}"
        )
        return "\n\n".join(s for s in sections if s) + "\n"

    def entry_files(self, ctx: EntryContext) -> list[GeneratedFile]:
        return [
            GeneratedFile(
                path=self.entry_path(ctx.app),
                content=self.entry_source(ctx),
                language=self.language,
            )
        ]
