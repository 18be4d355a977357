"""Literal serialization for the four source dialects.

Converts bound prop values into literal text that is syntactically valid in
the target language and cannot break out of its enclosing expression:
strings are quoted with dialect-specific escaping, collections use the
dialect's native literal syntax, enums become symbols or strings, and
actions become references to named handlers declared by the entry file.
"""

import math
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from capsule_forge.errors import SerializationError
from capsule_forge.platform import Dialect, Platform
from capsule_forge.schema import (
    HEX_COLOR_PATTERN,
    SIZE_SCALE,
    SPACING_SCALE,
    PropSpec,
    PropType,
)

from .identifiers import Casing, IdentifierScope, derive_identifier
from .keywords import KEYWORDS

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

_TS_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_JSX_SAFE_TEXT = re.compile(r'[^"\\{}<>&\x00-\x1f\x7f\u2028\u2029]*')

_STRING_LIKE = (PropType.STRING, PropType.ICON, PropType.IMAGE)


def infer_prop_type(value: Any) -> PropType | None:
    """Infer a prop type for an untyped nested value (None for null)."""
    if value is None:
        return None
    if isinstance(value, bool):
        return PropType.BOOLEAN
    if isinstance(value, (int, float)):
        return PropType.NUMBER
    if isinstance(value, str):
        return PropType.STRING
    if isinstance(value, (list, tuple)):
        return PropType.ARRAY
    if isinstance(value, dict):
        return PropType.OBJECT
    raise SerializationError(f"Cannot serialize value of type {type(value).__name__}")


def hex_channels(value: str) -> tuple[int, int, int, int | None]:
    """Split a hex color into (r, g, b, alpha-or-None) channel bytes."""
    if not HEX_COLOR_PATTERN.fullmatch(value):
        raise SerializationError(f"Not a hex color: {value!r}")
    digits = value[1:]
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
    alpha = int(digits[6:8], 16) if len(digits) == 8 else None
    return r, g, b, alpha


class LiteralDialect(ABC):
    """Literal grammar of one source dialect.

    Subclasses define string escaping, collection syntax and the spelling
    of enum members, handler references and color values.
    """

    dialect: Dialect
    null_literal: str = "null"
    handler_casing: Casing = Casing.CAMEL
    string_escapes: dict[str, str] = {}

    @property
    def keywords(self) -> frozenset[str]:
        return KEYWORDS[self.dialect]

    # -------------------------------------------------------------------------
    # Scalars
    # -------------------------------------------------------------------------

    @abstractmethod
    def _control_escape(self, code: int) -> str: ...

    def _needs_control_escape(self, ch: str) -> bool:
        code = ord(ch)
        return code < 0x20 or code == 0x7F

    def escape(self, value: str) -> str:
        """Escape a string body (without quotes)."""
        out: list[str] = []
        for ch in value:
            replacement = self.string_escapes.get(ch)
            if replacement is not None:
                out.append(replacement)
            elif self._needs_control_escape(ch):
                out.append(self._control_escape(ord(ch)))
            else:
                out.append(ch)
        return "".join(out)

    def string(self, value: str) -> str:
        return f'"{self.escape(value)}"'

    def number(self, value: Any) -> str:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SerializationError(f"Not a number: {value!r}")
        if isinstance(value, float):
            if not math.isfinite(value):
                raise SerializationError(f"Non-finite number: {value!r}")
            return repr(value)
        return self._integer(value)

    def _integer(self, value: int) -> str:
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise SerializationError(
                f"Integer {value} does not fit a 64-bit {self.dialect.value} literal"
            )
        return str(value)

    def boolean(self, value: bool) -> str:
        if not isinstance(value, bool):
            raise SerializationError(f"Not a boolean: {value!r}")
        return "true" if value else "false"

    # -------------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------------

    @abstractmethod
    def array(self, items: list[str]) -> str:
        """Sequence literal from already-serialized items."""

    @abstractmethod
    def mapping(self, entries: list[tuple[str, str]]) -> str:
        """Keyed-map literal from (raw key, serialized value) pairs."""

    # -------------------------------------------------------------------------
    # Domain values
    # -------------------------------------------------------------------------

    def enum(self, value: str) -> str:
        return self.string(value)

    def handler_name(self, raw: str) -> str:
        """Identifier of the handler stub declared for an action name."""
        name = derive_identifier(raw, self.handler_casing)
        if not name:
            name = derive_identifier("handler", self.handler_casing)
        if name in self.keywords:
            name = f"{name}_"
        return name

    def handler_scope(self, name: str = "handlers") -> IdentifierScope:
        """Fresh scope for the handler identifiers of one generated app.

        Action names that sanitize to the same identifier are claimed as
        ``onLogin``, ``onLogin2``, ... and keywords are reserved.
        """
        return IdentifierScope(name, self.handler_casing, self.keywords)

    def handler_ref(self, name: str, handlers: Mapping[str, str] | None = None) -> str:
        """Claimed identifier of an action name, else its derived name."""
        if handlers is not None and name in handlers:
            return handlers[name]
        return self.handler_name(name)

    @abstractmethod
    def action(self, name: str, handlers: Mapping[str, str] | None = None) -> str:
        """Reference to a named handler."""

    @abstractmethod
    def color_hex(self, value: str) -> str: ...

    @abstractmethod
    def color_token(self, token: str) -> str: ...

    def color(self, value: str) -> str:
        if not isinstance(value, str):
            raise SerializationError(f"Not a color: {value!r}")
        if value.startswith("#"):
            return self.color_hex(value)
        return self.color_token(value.removeprefix("colors."))

    def dimension_literal(self, text: str) -> str:
        return text

    def dimension(self, value: Any, prop_type: PropType) -> str:
        if isinstance(value, str):
            scale = SIZE_SCALE if prop_type == PropType.SIZE else SPACING_SCALE
            if value not in scale:
                raise SerializationError(
                    f"Unknown {prop_type.value} keyword: {value!r}"
                )
            value = scale[value]
        return self.dimension_literal(self.number(value))

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def serialize(
        self,
        value: Any,
        prop_type: PropType | None,
        item_type: PropType | None = None,
        fields: dict[str, PropType] | None = None,
        handlers: Mapping[str, str] | None = None,
    ) -> str:
        """Serialize a value of a declared prop type.

        Args:
            value: Bound value (already validated by the binder).
            prop_type: Declared type; None infers from the Python value.
            item_type: Element type for arrays.
            fields: Value types for object keys.
            handlers: Claimed handler identifiers by action name.

        Returns:
            Literal source text.

        Raises:
            SerializationError: If the value has no literal form.
        """
        if value is None:
            return self.null_literal
        if prop_type is None:
            prop_type = infer_prop_type(value)

        match PropType(prop_type):
            case PropType.STRING | PropType.ICON | PropType.IMAGE:
                if not isinstance(value, str):
                    raise SerializationError(f"Not a string: {value!r}")
                return self.string(value)
            case PropType.NUMBER:
                return self.number(value)
            case PropType.BOOLEAN:
                return self.boolean(value)
            case PropType.COLOR:
                return self.color(value)
            case PropType.SIZE | PropType.SPACING:
                return self.dimension(value, PropType(prop_type))
            case PropType.ACTION:
                return self.action(value, handlers)
            case PropType.ENUM:
                return self.enum(value)
            case PropType.ARRAY:
                if not isinstance(value, (list, tuple)):
                    raise SerializationError(f"Not an array: {value!r}")
                return self.array(
                    [self.serialize(item, item_type, handlers=handlers) for item in value]
                )
            case PropType.OBJECT:
                if not isinstance(value, dict):
                    raise SerializationError(f"Not an object: {value!r}")
                entries = []
                for key, item in value.items():
                    if not isinstance(key, str):
                        raise SerializationError(f"Object key must be a string: {key!r}")
                    entries.append(
                        (
                            key,
                            self.serialize(
                                item, (fields or {}).get(key), handlers=handlers
                            ),
                        )
                    )
                return self.mapping(entries)
            case PropType.SLOT:
                raise SerializationError("Slot contents render as nested output")


class TypeScriptDialect(LiteralDialect):
    """TypeScript / TSX literals (web and desktop UI)."""

    dialect = Dialect.TYPESCRIPT
    null_literal = "null"
    string_escapes = {
        "\\": "\\\\",
        '"': '\\"',
        "\n": "\\n",
        "\r": "\\r",
        "\t": "\\t",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }

    def _control_escape(self, code: int) -> str:
        return f"\\u{code:04x}"

    def array(self, items: list[str]) -> str:
        return f"[{', '.join(items)}]"

    def object_key(self, key: str) -> str:
        return key if _TS_IDENTIFIER.fullmatch(key) else self.string(key)

    def mapping(self, entries: list[tuple[str, str]]) -> str:
        if not entries:
            return "{}"
        body = ", ".join(f"{self.object_key(k)}: {v}" for k, v in entries)
        return f"{{ {body} }}"

    def action(self, name: str, handlers: Mapping[str, str] | None = None) -> str:
        return f"handlers.{self.handler_ref(name, handlers)}"

    def color_hex(self, value: str) -> str:
        hex_channels(value)
        return self.string(value)

    def color_token(self, token: str) -> str:
        if _TS_IDENTIFIER.fullmatch(token):
            return f"theme.colors.{token}"
        return f"theme.colors[{self.string(token)}]"

    def jsx_attribute(
        self,
        name: str,
        value: Any,
        prop_type: PropType | None,
        item_type: PropType | None = None,
        fields: dict[str, PropType] | None = None,
        handlers: Mapping[str, str] | None = None,
    ) -> str:
        """Render a JSX attribute.

        Plain strings without JSX metacharacters render as ``name="text"``;
        everything else is wrapped in an expression container.
        """
        if (
            prop_type in (*_STRING_LIKE, PropType.ENUM)
            and isinstance(value, str)
            and _JSX_SAFE_TEXT.fullmatch(value)
        ):
            return f'{name}="{value}"'
        literal = self.serialize(value, prop_type, item_type, fields, handlers)
        return f"{name}={{{literal}}}"


class SwiftDialect(LiteralDialect):
    """Swift literals (SwiftUI)."""

    dialect = Dialect.SWIFT
    null_literal = "nil"
    string_escapes = {
        "\\": "\\\\",
        '"': '\\"',
        "\n": "\\n",
        "\r": "\\r",
        "\t": "\\t",
        "\0": "\\0",
    }

    def _control_escape(self, code: int) -> str:
        return f"\\u{{{code:x}}}"

    def array(self, items: list[str]) -> str:
        return f"[{', '.join(items)}]"

    def mapping(self, entries: list[tuple[str, str]]) -> str:
        if not entries:
            return "[:]"
        body = ", ".join(f"{self.string(k)}: {v}" for k, v in entries)
        return f"[{body}]"

    def member(self, raw: str) -> str | None:
        """Swift member name for a raw value, backticked when reserved."""
        name = derive_identifier(raw, Casing.CAMEL)
        if not name:
            return None
        return f"`{name}`" if name in self.keywords else name

    def enum(self, value: str) -> str:
        member = self.member(value)
        return f".{member}" if member else self.string(value)

    def action(self, name: str, handlers: Mapping[str, str] | None = None) -> str:
        return f"Handlers.{self.handler_ref(name, handlers)}"

    def color_hex(self, value: str) -> str:
        r, g, b, alpha = hex_channels(value)
        args = f"red: {r / 255:.3f}, green: {g / 255:.3f}, blue: {b / 255:.3f}"
        if alpha is not None:
            args += f", opacity: {alpha / 255:.3f}"
        return f"Color({args})"

    def color_token(self, token: str) -> str:
        member = self.member(token)
        if member is None:
            raise SerializationError(f"Invalid color token: {token!r}")
        return f"Theme.{member}"


class KotlinDialect(LiteralDialect):
    """Kotlin literals (Jetpack Compose)."""

    dialect = Dialect.KOTLIN
    null_literal = "null"
    string_escapes = {
        "\\": "\\\\",
        '"': '\\"',
        "\n": "\\n",
        "\r": "\\r",
        "\t": "\\t",
        "\b": "\\b",
        "$": "\\$",
    }

    def _control_escape(self, code: int) -> str:
        return f"\\u{code:04x}"

    def _integer(self, value: int) -> str:
        text = super()._integer(value)
        if not _INT32_MIN <= value <= _INT32_MAX:
            return f"{text}L"
        return text

    def array(self, items: list[str]) -> str:
        if not items:
            return "emptyList<Any?>()"
        return f"listOf({', '.join(items)})"

    def mapping(self, entries: list[tuple[str, str]]) -> str:
        if not entries:
            return "emptyMap<String, Any?>()"
        body = ", ".join(f"{self.string(k)} to {v}" for k, v in entries)
        return f"mapOf({body})"

    def action(self, name: str, handlers: Mapping[str, str] | None = None) -> str:
        return f"Handlers::{self.handler_ref(name, handlers)}"

    def color_hex(self, value: str) -> str:
        r, g, b, alpha = hex_channels(value)
        a = 0xFF if alpha is None else alpha
        return f"Color(0x{a:02X}{r:02X}{g:02X}{b:02X})"

    def color_token(self, token: str) -> str:
        name = derive_identifier(token, Casing.PASCAL)
        if not name:
            raise SerializationError(f"Invalid color token: {token!r}")
        return f"AppTheme.{name}"

    def dimension_literal(self, text: str) -> str:
        return f"{text}.dp"


class RustDialect(LiteralDialect):
    """Rust literals (Tauri shell)."""

    dialect = Dialect.RUST
    null_literal = "None"
    handler_casing = Casing.SNAKE
    string_escapes = {
        "\\": "\\\\",
        '"': '\\"',
        "\n": "\\n",
        "\r": "\\r",
        "\t": "\\t",
        "\0": "\\0",
    }

    def _control_escape(self, code: int) -> str:
        return f"\\u{{{code:x}}}"

    def array(self, items: list[str]) -> str:
        return f"vec![{', '.join(items)}]"

    def mapping(self, entries: list[tuple[str, str]]) -> str:
        if not entries:
            return "HashMap::new()"
        body = ", ".join(f"({self.string(k)}, {v})" for k, v in entries)
        return f"HashMap::from([{body}])"

    def action(self, name: str, handlers: Mapping[str, str] | None = None) -> str:
        return f"handlers::{self.handler_ref(name, handlers)}"

    def color_hex(self, value: str) -> str:
        hex_channels(value)
        return self.string(value)

    def color_token(self, token: str) -> str:
        return self.string(token)


DIALECTS: dict[Dialect, LiteralDialect] = {
    Dialect.TYPESCRIPT: TypeScriptDialect(),
    Dialect.SWIFT: SwiftDialect(),
    Dialect.KOTLIN: KotlinDialect(),
    Dialect.RUST: RustDialect(),
}


def get_dialect(dialect: Dialect) -> LiteralDialect:
    """Get the literal grammar for a dialect."""
    return DIALECTS[Dialect(dialect)]


def dialect_for(platform: Platform) -> LiteralDialect:
    """Get the literal grammar used for a platform's UI files."""
    match Platform(platform):
        case Platform.WEB | Platform.DESKTOP:
            return DIALECTS[Dialect.TYPESCRIPT]
        case Platform.IOS:
            return DIALECTS[Dialect.SWIFT]
        case Platform.ANDROID:
            return DIALECTS[Dialect.KOTLIN]


def serialize(
    value: Any,
    prop_type: PropType | None,
    platform: Platform,
    *,
    item_type: PropType | None = None,
    fields: dict[str, PropType] | None = None,
) -> str:
    """Serialize a value to literal text for a platform.

    Example:
        >>> serialize("login", PropType.ENUM, Platform.IOS)
        '.login'
        >>> serialize(["a", "b"], PropType.ARRAY, Platform.ANDROID)
        'listOf("a", "b")'
    """
    return dialect_for(platform).serialize(value, prop_type, item_type, fields)


def serialize_prop(value: Any, spec: PropSpec, platform: Platform) -> str:
    """Serialize a value using the types declared by a PropSpec."""
    return dialect_for(platform).serialize(
        value, spec.type, spec.item_type, spec.fields
    )


__all__ = [
    "infer_prop_type",
    "hex_channels",
    "LiteralDialect",
    "TypeScriptDialect",
    "SwiftDialect",
    "KotlinDialect",
    "RustDialect",
    "DIALECTS",
    "get_dialect",
    "dialect_for",
    "serialize",
    "serialize_prop",
]
