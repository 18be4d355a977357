"""Template parsing and rendering for capsule platform templates."""

from .lib import (
    CLOSE,
    ESCAPED_OPEN,
    OPEN,
    CompiledCapsuleTemplate,
    CompiledTemplate,
    LiteralSegment,
    Placeholder,
    RenderContext,
    TemplateKind,
    Token,
    compile_platform_template,
    parse_template,
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
