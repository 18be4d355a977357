"""Literal serializers and identifier derivation per target dialect."""

from .identifiers import Casing, IdentifierScope, derive_identifier, split_words
from .keywords import KEYWORDS
from .lib import (
    DIALECTS,
    KotlinDialect,
    LiteralDialect,
    RustDialect,
    SwiftDialect,
    TypeScriptDialect,
    dialect_for,
    get_dialect,
    hex_channels,
    infer_prop_type,
    serialize,
    serialize_prop,
)

__all__ = [
    # Identifiers
    "Casing",
    "IdentifierScope",
    "derive_identifier",
    "split_words",
    "KEYWORDS",
    # Dialects
    "LiteralDialect",
    "TypeScriptDialect",
    "SwiftDialect",
    "KotlinDialect",
    "RustDialect",
    "DIALECTS",
    "get_dialect",
    "dialect_for",
    # Serialization
    "serialize",
    "serialize_prop",
    "infer_prop_type",
    "hex_channels",
]
