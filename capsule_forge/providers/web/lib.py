"""React + Vite emitter.

Components are TSX modules under ``src/components``; the entry module
``src/App.tsx`` imports them, declares the theme object and the handler
stubs, and renders the root composition.

Example entry output:
    ```tsx
    import { AuthScreen } from './components/AuthScreen'

    export const theme = { ... } as const

    export const handlers = {
      onLogin: () => {
        console.log('onLogin')
      },
    }

    export default function App() {
      return (
        <AuthScreen mode="login" onSubmit={handlers.onLogin} />
      )
    }
    ```
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


def _jsx_comment(text: str) -> str:
    return "{/* " + text.replace("*/", "* /") + " */}"


@register_emitter
class WebEmitter(PlatformEmitter):
    """Emits a React + TypeScript source tree."""

    reserved_names = frozenset({STUB_COMPONENT, "App", "React", "Fragment"})

    @property
    def platform(self) -> Platform:
        return Platform.WEB

    def component_path(self, stem: str, app: AppNames) -> str:
        return f"src/components/{stem}.tsx"

    def entry_path(self, app: AppNames) -> str:
        return "src/App.tsx"

    def comment(self, text: str) -> str:
        return "\n".join(f"// {line}".rstrip() for line in text.splitlines() or [""])

    def argument(self, arg: PropArgument) -> str:
        return self.dialect.jsx_attribute(
            arg.name,
            arg.value,
            arg.spec.type,
            arg.spec.item_type,
            arg.spec.fields,
            handlers=arg.handlers,
        )

    def props_list(self, args: list[PropArgument]) -> str:
        return " ".join(self.argument(a) for a in args)

    def render_call(
        self,
        component: str,
        args: list[PropArgument],
        children: list[str],
        slots: list[tuple[str, str]],
    ) -> str:
        attributes = [self.argument(a) for a in args]
        for name, content in slots:
            attributes.append(f"{name}={{<>\n{indent(content, 2)}\n</>}}")
        head = component + "".join(f" {a}" for a in attributes)
        if not children:
            return f"<{head} />"
        body = "\n".join(children)
        return f"<{head}>\n{indent(body, 2)}\n</{component}>"

    def stub_call(self, capsule_name: str, reason: str) -> str:
        stub = (
            f"<{STUB_COMPONENT} capsule={{{self.dialect.string(capsule_name)}}} "
            f"reason={{{self.dialect.string(reason)}}} />"
        )
        return f"<>\n  {_jsx_comment(reason)}\n  {stub}\n</>"

    def stub_component(self, identifier: str, capsule_id: str, reason: str) -> str:
        message = self.dialect.string(reason)
        return (
            f"{self.comment(reason)}\n"
            f"export function {identifier}(_props: Record<string, unknown>) {{\n"
            f"  return <div data-capsule-stub={self.dialect.string(capsule_id)}>"
            f"{{{message}}}</div>\n"
            f"}}\n"
            f"\n"
            f"export default {identifier}\n"
        )

    def dependencies(self) -> list[str]:
        return ["react", "react-dom"]

    # -------------------------------------------------------------------------
    # Entry file
    # -------------------------------------------------------------------------

    def theme_object(self, theme: Theme) -> str:
        """``export const theme = {...} as const`` declaration."""
        ts = self.dialect
        tokens = theme.tokens()
        colors = [
            f"    {ts.object_key(key)}: {ts.string(value)},"
            for key, value in theme.colors.items()
        ]
        typography = []
        for name in ("fontFamily", "headingFont", "monoFont", "scale"):
            token = tokens[f"typography.{name}"]
            typography.append(f"    {name}: {ts.serialize(token.value, token.type)},")
        lines = [
            "export const theme = {",
            f"  name: {ts.string(theme.name)},",
            "  colors: {",
            *colors,
            "  },",
            "  typography: {",
            *typography,
            "  },",
            f"  spacing: {ts.number(tokens['spacing'].value)},",
            f"  radius: {ts.number(tokens['radius'].value)},",
            f"  shadows: {ts.boolean(theme.shadows)},",
            "} as const",
        ]
        return "\n".join(lines)

    def handler_object(self, handlers: Mapping[str, str]) -> str:
        names = list(handlers.values())
        if not names:
            return "export const handlers = {}"
        lines = ["export const handlers = {"]
        for name in names:
            lines.append(f"  {name}: () => {{")
            lines.append(f"    console.log({self.dialect.string(name)})")
            lines.append("  },")
        lines.append("}")
        return "\n".join(lines)

    def stub_definition(self) -> str:
        return (
            f"function {STUB_COMPONENT}({{ capsule, reason }}: "
            "{ capsule: string; reason: string }) {\n"
            "  return (\n"
            "    <div data-capsule-stub={capsule} title={reason}>\n"
            "      {capsule} is unavailable\n"
            "    </div>\n"
            "  )\n"
            "}"
        )

    def entry_source(self, ctx: EntryContext) -> str:
        imports = [
            f"import {{ {ref.identifier} }} from './components/{ref.stem}'"
            for ref in ctx.components
        ]
        sections = [
            "\n".join(imports) if imports else "",
            self.theme_object(ctx.theme),
            self.handler_object(ctx.handlers),
        ]
        if ctx.needs_stub:
            sections.append(self.stub_definition())
        sections.append(
            "export default function App() {\n"
            "  return (\n"
            f"{indent(ctx.root, 4)}\n"
            "  )\n"
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
