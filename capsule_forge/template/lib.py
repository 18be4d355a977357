"""Template parsing and rendering.

Platform templates are parsed once, at registration, into an ordered tuple
of literal segments and placeholder references. Rendering walks the tokens
and substitutes values from a RenderContext; it never re-reads the raw
source, so malformed placeholders surface at startup instead of during an
export.

Placeholder syntax is ``{% namespace.path %}`` with optional inner
whitespace. ``{%%`` emits a literal ``{%``.

Namespaces:
    component        Component identifier claimed for the capsule.
    capsule.id       Registry key of the capsule.
    capsule.name     Display name of the capsule.
    props            Full call-site argument list (usage templates only).
    props.<name>     Serialized value of a declared prop.
    theme.<path>     Serialized theme token (e.g. theme.colors.primary).
    children         Rendered child output (usage templates only).
    slot.<name>      Rendered contents of a declared slot (usage only).
    instance.id      Instance identifier (usage templates only).
    app.name         Application identifier.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from capsule_forge.errors import Diagnostic, ErrorCode, Severity, TemplateSyntaxError
from capsule_forge.mid import Theme
from capsule_forge.platform import Platform
from capsule_forge.schema import CapsuleDefinition
from capsule_forge.serialize import dialect_for

OPEN = "{%"
CLOSE = "%}"
ESCAPED_OPEN = "{%%"

_SEGMENT = r"[A-Za-z_][A-Za-z0-9_-]*"
_PATH_PATTERN = re.compile(rf"{_SEGMENT}(?:\.{_SEGMENT})*")


class TemplateKind(str, Enum):
    """Where a template is rendered, which limits its namespaces."""

    COMPONENT = "component"
    USAGE = "usage"
    FILE_NAME = "file_name"
    ENTRY = "entry"


_USAGE_ONLY = frozenset({"props", "children", "slot", "instance"})

_ALLOWED_NAMESPACES: dict[TemplateKind, frozenset[str]] = {
    TemplateKind.COMPONENT: frozenset({"component", "capsule", "props", "theme", "app"}),
    TemplateKind.USAGE: frozenset(
        {"component", "capsule", "props", "theme", "app", "children", "slot", "instance"}
    ),
    TemplateKind.FILE_NAME: frozenset({"component", "capsule"}),
    TemplateKind.ENTRY: frozenset({"app", "theme"}),
}

_KNOWN_NAMESPACES = frozenset().union(*_ALLOWED_NAMESPACES.values())


# =============================================================================
# Tokens
# =============================================================================


@dataclass(frozen=True)
class LiteralSegment:
    """Verbatim template text."""

    text: str


@dataclass(frozen=True)
class Placeholder:
    """Reference to a value substituted at render time.

    Attributes:
        namespace: First path segment (props, theme, ...).
        path: Remaining path segments.
        line: 1-based line of the opening delimiter.
        column: 1-based column of the opening delimiter.
    """

    namespace: str
    path: tuple[str, ...]
    line: int
    column: int

    @property
    def dotted(self) -> str:
        return ".".join((self.namespace, *self.path))


Token = LiteralSegment | Placeholder


@dataclass
class RenderContext:
    """Values available to a template render.

    Attributes:
        platform: Target platform (selects the literal dialect).
        component: Component identifier.
        capsule_id: Capsule registry key.
        capsule_name: Capsule display name.
        app_name: Application identifier.
        instance_id: Instance identifier (usage renders).
        props: Serialized literal text per prop name.
        props_list: Rendered call-site argument list (usage renders).
        children: Rendered child output (usage renders).
        slots: Rendered output per slot name (usage renders).
        theme: Theme whose tokens resolve ``theme.*`` placeholders.
        warnings: Sink for non-fatal render diagnostics.
    """

    platform: Platform
    component: str = ""
    capsule_id: str = ""
    capsule_name: str = ""
    app_name: str = ""
    instance_id: str = ""
    props: Mapping[str, str] = field(default_factory=dict)
    props_list: str = ""
    children: str = ""
    slots: Mapping[str, str] = field(default_factory=dict)
    theme: Theme | None = None
    warnings: list[Diagnostic] = field(default_factory=list)


@dataclass(frozen=True)
class CompiledTemplate:
    """A parsed template ready for rendering."""

    tokens: tuple[Token, ...]
    kind: TemplateKind = TemplateKind.COMPONENT

    def placeholders(self) -> list[Placeholder]:
        return [t for t in self.tokens if isinstance(t, Placeholder)]

    def references(self, namespace: str) -> set[str]:
        """Dotted sub-paths referenced under a namespace."""
        return {
            ".".join(p.path) for p in self.placeholders() if p.namespace == namespace
        }

    def render(self, context: RenderContext) -> str:
        """Render the template.

        Deterministic and side-effect free apart from appending
        UnresolvedThemeToken warnings to ``context.warnings``.
        """
        out: list[str] = []
        for token in self.tokens:
            if isinstance(token, LiteralSegment):
                out.append(token.text)
            else:
                out.append(_resolve(token, context))
        return "".join(out)


# =============================================================================
# Parsing
# =============================================================================


def _position(source: str, offset: int) -> tuple[int, int]:
    line = source.count("\n", 0, offset) + 1
    column = offset - (source.rfind("\n", 0, offset) + 1) + 1
    return line, column


def parse_template(
    source: str,
    kind: TemplateKind = TemplateKind.COMPONENT,
    declared_props: Iterable[str] = (),
    declared_slots: Iterable[str] = (),
) -> CompiledTemplate:
    """Parse template source into tokens.

    Args:
        source: Raw template text.
        kind: Render site, which restricts the namespaces allowed.
        declared_props: Prop names a ``props.<name>`` reference may use.
        declared_slots: Slot names a ``slot.<name>`` reference may use.

    Returns:
        CompiledTemplate with literal and placeholder tokens.

    Raises:
        TemplateSyntaxError: On unterminated, empty, nested or invalid
            placeholders, unknown namespaces, undeclared props or slots, and
            namespaces not available for the template kind.
    """
    kind = TemplateKind(kind)
    props = set(declared_props)
    slots = set(declared_slots)
    tokens: list[Token] = []
    buffer: list[str] = []
    pos = 0

    def flush() -> None:
        if buffer:
            tokens.append(LiteralSegment("".join(buffer)))
            buffer.clear()

    while True:
        start = source.find(OPEN, pos)
        if start < 0:
            buffer.append(source[pos:])
            break
        buffer.append(source[pos:start])

        if source.startswith(ESCAPED_OPEN, start):
            buffer.append(OPEN)
            pos = start + len(ESCAPED_OPEN)
            continue

        line, column = _position(source, start)
        end = source.find(CLOSE, start + len(OPEN))
        if end < 0:
            raise TemplateSyntaxError("Unterminated placeholder", line, column)

        inner = source[start + len(OPEN) : end]
        if OPEN in inner:
            nested_line, nested_col = _position(
                source, start + len(OPEN) + inner.index(OPEN)
            )
            raise TemplateSyntaxError(
                "Nested placeholder opening", nested_line, nested_col
            )

        expression = inner.strip()
        if not expression:
            raise TemplateSyntaxError("Empty placeholder", line, column)
        if not _PATH_PATTERN.fullmatch(expression):
            raise TemplateSyntaxError(
                f"Invalid placeholder path '{expression}'", line, column
            )

        namespace, *rest = expression.split(".")
        placeholder = Placeholder(namespace, tuple(rest), line, column)
        _check_placeholder(placeholder, kind, props, slots)

        flush()
        tokens.append(placeholder)
        pos = end + len(CLOSE)

    flush()
    return CompiledTemplate(tokens=tuple(tokens), kind=kind)


def _check_placeholder(
    p: Placeholder, kind: TemplateKind, props: set[str], slots: set[str]
) -> None:
    def fail(message: str) -> None:
        raise TemplateSyntaxError(message, p.line, p.column)

    if p.namespace not in _KNOWN_NAMESPACES:
        fail(f"Unknown namespace '{p.namespace}'")
    if p.namespace not in _ALLOWED_NAMESPACES[kind]:
        if p.namespace in _USAGE_ONLY:
            fail(f"'{p.dotted}' is only available in usage templates")
        fail(f"'{p.dotted}' is not available in {kind.value} templates")

    match p.namespace:
        case "component" | "children":
            if p.path:
                fail(f"'{p.namespace}' takes no sub-path")
        case "capsule":
            if p.path not in (("id",), ("name",)):
                fail(f"Unknown capsule field '{p.dotted}'")
        case "instance":
            if p.path != ("id",):
                fail(f"Unknown instance field '{p.dotted}'")
        case "app":
            if p.path != ("name",):
                fail(f"Unknown app field '{p.dotted}'")
        case "props":
            if not p.path:
                if kind != TemplateKind.USAGE:
                    fail("'props' is only available in usage templates")
            elif len(p.path) != 1 or p.path[0] not in props:
                fail(f"Undeclared prop '{'.'.join(p.path)}'")
        case "slot":
            if len(p.path) != 1 or p.path[0] not in slots:
                fail(f"Undeclared slot '{'.'.join(p.path)}'")
        case "theme":
            if not p.path:
                fail("'theme' requires a token path")


# =============================================================================
# Rendering
# =============================================================================


def _resolve(p: Placeholder, ctx: RenderContext) -> str:
    dialect = dialect_for(ctx.platform)
    match p.namespace:
        case "component":
            return ctx.component
        case "capsule":
            return ctx.capsule_id if p.path == ("id",) else ctx.capsule_name
        case "app":
            return ctx.app_name
        case "instance":
            return ctx.instance_id
        case "children":
            return ctx.children
        case "slot":
            return ctx.slots.get(p.path[0], "")
        case "props":
            if not p.path:
                return ctx.props_list
            return ctx.props.get(p.path[0], dialect.null_literal)
        case "theme":
            return _resolve_theme(p, ctx)
    return ""


def _resolve_theme(p: Placeholder, ctx: RenderContext) -> str:
    dialect = dialect_for(ctx.platform)
    path = ".".join(p.path)
    token = ctx.theme.tokens().get(path) if ctx.theme is not None else None
    if token is None:
        ctx.warnings.append(
            Diagnostic(
                code=ErrorCode.UNRESOLVED_THEME_TOKEN,
                message=f"Theme token '{path}' is not defined",
                severity=Severity.WARNING,
                capsule_id=ctx.capsule_id or None,
                instance_id=ctx.instance_id or None,
                platform=ctx.platform.value,
            )
        )
        return dialect.null_literal
    return dialect.serialize(token.value, token.type)


# =============================================================================
# Capsule Templates
# =============================================================================


@dataclass(frozen=True)
class CompiledCapsuleTemplate:
    """All parsed templates of one capsule for one declared platform.

    Attributes:
        platform: Platform the template was declared for.
        component: Component file body.
        file_name: Component file stem.
        usage: Call-site template, if the capsule declares one.
        dependencies: Packages the component file needs.
    """

    platform: Platform
    component: CompiledTemplate
    file_name: CompiledTemplate
    usage: CompiledTemplate | None
    dependencies: tuple[str, ...] = ()


def compile_platform_template(
    definition: CapsuleDefinition, platform: Platform
) -> CompiledCapsuleTemplate:
    """Parse every template a capsule declares for a platform.

    Raises:
        KeyError: If the capsule declares no template for the platform.
        TemplateSyntaxError: If any of its templates is malformed.
    """
    template = definition.platform_templates[Platform(platform)]
    props = definition.prop_names()
    slots = definition.slot_names()
    usage = None
    if template.usage_template is not None:
        usage = parse_template(template.usage_template, TemplateKind.USAGE, props, slots)
    return CompiledCapsuleTemplate(
        platform=Platform(platform),
        component=parse_template(
            template.raw_source, TemplateKind.COMPONENT, props, slots
        ),
        file_name=parse_template(template.file_name_template, TemplateKind.FILE_NAME),
        usage=usage,
        dependencies=tuple(template.declared_dependencies),
    )


__all__ = [
    "OPEN",
    "CLOSE",
    "ESCAPED_OPEN",
    "TemplateKind",
    "LiteralSegment",
    "Placeholder",
    "Token",
    "RenderContext",
    "CompiledTemplate",
    "parse_template",
    "CompiledCapsuleTemplate",
    "compile_platform_template",
]
