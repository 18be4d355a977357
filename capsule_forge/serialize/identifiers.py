"""Identifier derivation and per-scope disambiguation."""

import logging
import re
import threading
import unicodedata
import uuid
from collections.abc import Iterable
from enum import Enum

from capsule_forge.errors import Diagnostic, ErrorCode, Severity

logger = logging.getLogger(__name__)

_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")

# Namespace for fallback identifiers; fixed so output stays reproducible.
_FALLBACK_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "capsule-forge/identifiers")


class Casing(str, Enum):
    """Identifier casing conventions."""

    PASCAL = "pascal"
    CAMEL = "camel"
    SNAKE = "snake"
    KEBAB = "kebab"


def split_words(raw: str) -> list[str]:
    """Split a free-form name into ASCII words.

    Accents are folded, punctuation and whitespace separate words, and
    camelCase / PascalCase boundaries split as well.

    Example:
        >>> split_words("My Button!")
        ['My', 'Button']
        >>> split_words("dataTable2")
        ['data', 'Table', '2']
    """
    folded = unicodedata.normalize("NFKD", raw).encode("ascii", "ignore").decode()
    return _WORD_PATTERN.findall(folded)


def derive_identifier(raw: str, casing: Casing = Casing.PASCAL) -> str:
    """Derive a legal identifier from a free-form name.

    Non-identifier characters are stripped, the casing rule is applied and
    a leading digit gets an underscore prefix. Returns an empty string when
    nothing usable remains.

    Args:
        raw: Source name (capsule name, prop name, handler name, ...).
        casing: Target casing convention.

    Returns:
        Sanitized identifier, or "" if raw contains no letters or digits.
    """
    words = split_words(raw)
    if not words:
        return ""

    match Casing(casing):
        case Casing.PASCAL:
            result = "".join(w[:1].upper() + w[1:] for w in words)
        case Casing.CAMEL:
            head, *rest = words
            result = head.lower() + "".join(w[:1].upper() + w[1:] for w in rest)
        case Casing.SNAKE:
            result = "_".join(w.lower() for w in words)
        case Casing.KEBAB:
            result = "-".join(w.lower() for w in words)

    if result[0].isdigit():
        result = f"_{result}"
    return result


class IdentifierScope:
    """Hands out unique identifiers within one emission scope.

    Claims are resolved in first-seen order: the first claim of a base name
    gets it unchanged, later distinct keys get ``Name2``, ``Name3``, ...
    Claiming the same key again returns the identifier it already owns.
    Comparison is case-insensitive so derived file names never collide on
    case-insensitive file systems.

    When no numeric suffix is available (or the name sanitizes to nothing)
    a deterministic UUID5-suffixed identifier is issued and an
    IdentifierCollisionError warning is recorded in ``warnings``.

    Example:
        >>> scope = IdentifierScope("components")
        >>> scope.claim("Name", key="a"), scope.claim("Name", key="b")
        ('Name', 'Name2')
    """

    def __init__(
        self,
        name: str = "module",
        casing: Casing = Casing.PASCAL,
        reserved: Iterable[str] = (),
        max_suffix: int = 999,
    ):
        self.name = name
        self.casing = Casing(casing)
        self.max_suffix = max_suffix
        self.warnings: list[Diagnostic] = []
        self._by_key: dict[str, str] = {}
        self._taken: set[str] = {r.casefold() for r in reserved}
        self._lock = threading.Lock()

    def reserve(self, identifier: str) -> None:
        """Mark an identifier as unavailable."""
        with self._lock:
            self._taken.add(identifier.casefold())

    def is_taken(self, identifier: str) -> bool:
        return identifier.casefold() in self._taken

    def get(self, key: str) -> str | None:
        """Identifier already claimed for a key, if any."""
        return self._by_key.get(key)

    def claimed(self) -> dict[str, str]:
        """Key -> identifier in claim order."""
        return dict(self._by_key)

    def claim(self, raw: str, key: str | None = None) -> str:
        """Claim an identifier for a raw name.

        Args:
            raw: Name to derive the identifier from.
            key: Ownership key (defaults to raw). Repeated claims with the
                same key return the same identifier.

        Returns:
            Identifier unique within this scope.
        """
        key = raw if key is None else key
        with self._lock:
            existing = self._by_key.get(key)
            if existing is not None:
                return existing

            base = derive_identifier(raw, self.casing)
            identifier = self._first_free(base) if base else None
            if identifier is None:
                identifier = self._fallback(base, key)
                self.warnings.append(
                    Diagnostic(
                        code=ErrorCode.IDENTIFIER_COLLISION,
                        message=(
                            f"Could not derive a unique identifier for {raw!r} "
                            f"in scope '{self.name}'; using '{identifier}'"
                        ),
                        severity=Severity.WARNING,
                    )
                )
                logger.warning(
                    f"Identifier fallback in scope '{self.name}': "
                    f"{raw!r} -> {identifier}"
                )

            self._taken.add(identifier.casefold())
            self._by_key[key] = identifier
            return identifier

    def _first_free(self, base: str) -> str | None:
        if base.casefold() not in self._taken:
            return base
        for n in range(2, self.max_suffix + 1):
            candidate = f"{base}{n}"
            if candidate.casefold() not in self._taken:
                return candidate
        return None

    def _fallback(self, base: str, key: str) -> str:
        stem = base or derive_identifier("identifier", self.casing)
        digest = uuid.uuid5(_FALLBACK_NAMESPACE, f"{self.name}:{key}").hex
        for width in (8, 12, 16, 32):
            candidate = f"{stem}_{digest[:width]}"
            if candidate.casefold() not in self._taken:
                return candidate
        # A 128-bit digest collision in one scope is not a practical case.
        raise RuntimeError(f"Identifier space exhausted for {key!r}")


__all__ = [
    "Casing",
    "split_words",
    "derive_identifier",
    "IdentifierScope",
]
