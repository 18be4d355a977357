"""Platform emitter abstraction and registry.

An emitter owns everything convention-specific about a target platform:
where component files live, how an instance call site is spelled, what a
stub looks like, and how the app-entry file wires components, theme
constants and handler stubs together. Emitters register themselves by
platform; the assembler looks them up through ``get_emitter``.
"""

import importlib
import logging
import re
import textwrap
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from capsule_forge.config import get_app_package
from capsule_forge.mid import ProjectComposition, Theme
from capsule_forge.platform import Dialect, Platform, PlatformInfo, get_platform_info
from capsule_forge.schema import PropSpec
from capsule_forge.serialize import (
    KEYWORDS,
    Casing,
    IdentifierScope,
    LiteralDialect,
    derive_identifier,
    dialect_for,
)

logger = logging.getLogger(__name__)

STUB_COMPONENT = "CapsuleStub"
DEFAULT_APP_PACKAGE = "com.capsuleforge"

_PACKAGE_SEGMENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True)
class GeneratedFile:
    """A generated source file.

    Attributes:
        path: Path relative to the target's output root.
        content: File text.
        language: Language tag (typescript, swift, kotlin, rust).
    """

    path: str
    content: str
    language: str

    @property
    def size(self) -> int:
        """Size in bytes when encoded as UTF-8."""
        return len(self.content.encode("utf-8"))

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "content": self.content,
            "language": self.language,
            "size": self.size,
        }


def package_segment(raw: str) -> str:
    """Legal package segment for a raw name.

    Characters outside ``[A-Za-z0-9_]`` are dropped. Empty segments,
    segments starting with a digit and Kotlin keywords get an ``app``
    prefix, so ``fun`` becomes ``appfun`` and ``3d`` becomes ``app3d``.
    """
    segment = re.sub(r"[^A-Za-z0-9_]", "", raw)
    if not _PACKAGE_SEGMENT.fullmatch(segment) or segment in KEYWORDS[Dialect.KOTLIN]:
        segment = f"app{segment}"
    return segment


def base_package(raw: str) -> str:
    """Legal dotted base package from a configured value.

    Blank segments are dropped and every remaining segment goes through
    ``package_segment``. A value with no usable segment falls back to
    ``DEFAULT_APP_PACKAGE``.
    """
    segments = [package_segment(s) for s in raw.split(".") if s.strip()]
    package = ".".join(segments) or DEFAULT_APP_PACKAGE
    if package != raw:
        logger.warning(f"App package '{raw}' is not a legal package; using '{package}'")
    return package


@dataclass(frozen=True)
class AppNames:
    """Names derived from the composition for generated projects.

    Attributes:
        display_name: Project name as authored.
        identifier: PascalCase app identifier.
        package: Android/JVM package of the app.
        version: Project version string.
    """

    display_name: str
    identifier: str
    package: str
    version: str = "1.0.0"

    @classmethod
    def from_composition(
        cls, composition: ProjectComposition, app_package: str | None = None
    ) -> "AppNames":
        identifier = derive_identifier(composition.name, Casing.PASCAL) or "App"
        segment = package_segment(
            derive_identifier(composition.name, Casing.SNAKE).replace("_", "")
        )
        base = base_package(get_app_package(app_package))
        return cls(
            display_name=composition.name,
            identifier=identifier,
            package=f"{base}.{segment}",
            version=composition.version,
        )

    @property
    def package_path(self) -> str:
        return self.package.replace(".", "/")


@dataclass(frozen=True)
class PropArgument:
    """One bound prop passed at a call site.

    Attributes:
        name: Argument name on the target platform.
        value: Bound value.
        spec: Declaring PropSpec.
        handlers: Handler identifier per action name, as claimed for
            the assembly.
    """

    name: str
    value: Any
    spec: PropSpec
    handlers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ComponentRef:
    """A component file the entry file must reference.

    Attributes:
        capsule_id: Capsule the file implements.
        identifier: Exported component identifier.
        stem: File name without extension.
        path: File path.
    """

    capsule_id: str
    identifier: str
    stem: str
    path: str


@dataclass
class EntryContext:
    """Everything the entry file is assembled from.

    Attributes:
        app: Derived app names.
        theme: Composition theme.
        components: Component files in first-seen order.
        root: Rendered root composition.
        handlers: Action name -> handler identifier, in first-seen order.
        needs_stub: Whether any call site uses the stub component.
    """

    app: AppNames
    theme: Theme
    components: list[ComponentRef] = field(default_factory=list)
    root: str = ""
    handlers: dict[str, str] = field(default_factory=dict)
    needs_stub: bool = False


def indent(text: str, width: int) -> str:
    """Indent every non-empty line."""
    return textwrap.indent(text, " " * width)


class PlatformEmitter(ABC):
    """Abstract base class for platform emitters.

    Subclasses must implement:
        - platform: Target platform
        - component_path: Component file location
        - comment: Line comment syntax
        - render_call: Default call-site rendering
        - stub_call: Call site for an instance that cannot render
        - stub_component: Placeholder component file body
        - entry_files: App-entry file(s)
    """

    #: Names used by generated entry code; never handed to components.
    reserved_names: frozenset[str] = frozenset({STUB_COMPONENT, "App"})

    @property
    @abstractmethod
    def platform(self) -> Platform:
        """Target platform."""
        ...

    @property
    def info(self) -> PlatformInfo:
        return get_platform_info(self.platform)

    @property
    def dialect(self) -> LiteralDialect:
        return dialect_for(self.platform)

    @property
    def language(self) -> str:
        return self.info.language

    def component_scope(self, app: AppNames) -> IdentifierScope:
        """Fresh identifier scope for component names of one assembly."""
        reserved = set(self.reserved_names) | set(self.dialect.keywords)
        reserved |= self.app_reserved_names(app)
        return IdentifierScope(
            f"{self.platform.value}:components", Casing.PASCAL, reserved
        )

    def app_reserved_names(self, app: AppNames) -> set[str]:
        """App-specific names that components must not take."""
        return set()

    @abstractmethod
    def component_path(self, stem: str, app: AppNames) -> str:
        """Path of a component file."""
        ...

    def component_file(
        self, content: str, ref: ComponentRef, app: AppNames
    ) -> GeneratedFile:
        """Wrap rendered component text into a GeneratedFile."""
        header = self.component_header(ref, app)
        body = content.strip("\n") + "\n"
        return GeneratedFile(path=ref.path, content=header + body, language=self.language)

    def component_header(self, ref: ComponentRef, app: AppNames) -> str:
        """Text prepended to every component file."""
        return ""

    @abstractmethod
    def comment(self, text: str) -> str:
        """Line comment(s) for text."""
        ...

    def argument(self, arg: PropArgument) -> str:
        """One call-site argument."""
        literal = self.dialect.serialize(
            arg.value,
            arg.spec.type,
            arg.spec.item_type,
            arg.spec.fields,
            handlers=arg.handlers,
        )
        return f"{arg.name}: {literal}"

    def props_list(self, args: list[PropArgument]) -> str:
        """Argument list for the bare ``{% props %}`` placeholder."""
        return ", ".join(self.argument(a) for a in args)

    @abstractmethod
    def render_call(
        self,
        component: str,
        args: list[PropArgument],
        children: list[str],
        slots: list[tuple[str, str]],
    ) -> str:
        """Call site of one instance.

        Args:
            component: Component identifier.
            args: Non-slot bound props in declaration order.
            children: Rendered child call sites.
            slots: (argument name, rendered contents) per filled slot.
        """
        ...

    @abstractmethod
    def stub_call(self, capsule_name: str, reason: str) -> str:
        """Comment plus stub call for an instance that cannot render."""
        ...

    @abstractmethod
    def stub_component(self, identifier: str, capsule_id: str, reason: str) -> str:
        """Placeholder component file body."""
        ...

    @abstractmethod
    def entry_files(self, ctx: EntryContext) -> list[GeneratedFile]:
        """App-entry file(s), entry file first."""
        ...

    def dependencies(self) -> list[str]:
        """Packages every generated project of this platform needs."""
        return []


# Emitter registry - populated by emitter modules on import
_registry: dict[Platform, type[PlatformEmitter]] = {}


def register_emitter(emitter_cls: type[PlatformEmitter]) -> type[PlatformEmitter]:
    """Register an emitter class for its platform.

    Example:
        >>> @register_emitter
        ... class WebEmitter(PlatformEmitter):
        ...     platform = Platform.WEB
    """
    _registry[emitter_cls().platform] = emitter_cls
    return emitter_cls


def get_emitter(platform: Platform) -> PlatformEmitter:
    """Get an emitter instance for a platform.

    Raises:
        KeyError: If no emitter is registered for the platform.
    """
    platform = Platform(platform)
    if platform not in _registry:
        _import_emitters()
        if platform not in _registry:
            raise KeyError(f"No emitter registered for '{platform.value}'")
    return _registry[platform]()


def list_emitters() -> list[Platform]:
    """Platforms with a registered emitter, in Platform order."""
    _import_emitters()
    return [p for p in Platform if p in _registry]


def _import_emitters() -> None:
    """Import emitter modules to trigger registration."""
    for module_name in ("web", "ios", "android", "desktop"):
        importlib.import_module(f"capsule_forge.providers.{module_name}")


__all__ = [
    "STUB_COMPONENT",
    "DEFAULT_APP_PACKAGE",
    "package_segment",
    "base_package",
    "GeneratedFile",
    "AppNames",
    "PropArgument",
    "ComponentRef",
    "EntryContext",
    "indent",
    "PlatformEmitter",
    "register_emitter",
    "get_emitter",
    "list_emitters",
]
