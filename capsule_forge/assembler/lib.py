"""File tree assembly for one target platform.

A single coordinating pass walks the composition in pre-order (instance,
children, then slots), binds every renderable instance and plans one
component file per distinct capsule id. Identifier claims and the
deduplication map are owned by that pass; only the pure component-file
renders may run on worker threads. The entry file is built last from the
rendered call sites.
"""

import logging
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Protocol

from capsule_forge.binding import BindingResult, BoundProps, BoundValue, PropBinder
from capsule_forge.errors import (
    Diagnostic,
    ErrorCode,
    ExportCancelled,
    SerializationError,
    Severity,
    capability_error,
)
from capsule_forge.mid import CapsuleInstance, ProjectComposition, Theme
from capsule_forge.platform import Platform
from capsule_forge.providers import (
    AppNames,
    ComponentRef,
    EntryContext,
    GeneratedFile,
    PlatformEmitter,
    PropArgument,
    get_emitter,
)
from capsule_forge.registry import CapsuleRegistry
from capsule_forge.schema import CapsuleDefinition, PropType
from capsule_forge.serialize import Casing, IdentifierScope
from capsule_forge.template import CompiledCapsuleTemplate, RenderContext

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class CancelFlag(Protocol):
    """Anything with an ``is_set()`` method, e.g. threading.Event."""

    def is_set(self) -> bool: ...


# =============================================================================
# Result
# =============================================================================


@dataclass
class AssemblyOutput:
    """Files and diagnostics produced for one target.

    Attributes:
        platform: Target platform.
        files: Component files in first-seen order, then entry file(s).
        errors: Instance and file errors.
        warnings: Non-fatal findings.
        capsule_count: Distinct capsules used by the composition.
        dependencies: Packages the generated project needs.
    """

    platform: Platform
    files: list[GeneratedFile] = field(default_factory=list)
    errors: list[Diagnostic] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)
    capsule_count: int = 0
    dependencies: list[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        """Whether a component file had to be replaced by an error stub."""
        return any(e.code == ErrorCode.TEMPLATE_SYNTAX_ERROR for e in self.errors)

    @property
    def total_size(self) -> int:
        return sum(f.size for f in self.files)


# =============================================================================
# Planning
# =============================================================================


@dataclass
class _Unit:
    """One planned component file."""

    capsule_id: str
    display_name: str
    identifier: str
    definition: CapsuleDefinition | None = None
    compiled: CompiledCapsuleTemplate | None = None
    ref: ComponentRef | None = None
    stub_reason: str | None = None
    template_failed: bool = False


def _arguments(
    bound: BoundProps, platform: Platform, handlers: Mapping[str, str]
) -> tuple[list[PropArgument], list[tuple[str, Any]]]:
    """Split bound props into call-site arguments and filled slots."""
    args: list[PropArgument] = []
    slots: list[tuple[str, Any]] = []
    for bound_value in bound.values():
        spec = bound_value.spec
        if spec.is_slot:
            if bound_value.value:
                slots.append((spec.name, bound_value.value))
            continue
        args.append(
            PropArgument(spec.name_for(platform), bound_value.value, spec, handlers)
        )
    return args, slots


def _actions(bound: BoundProps) -> list[str]:
    """Handler names referenced by bound action props."""
    names: list[str] = []
    for bound_value in bound.values():
        spec = bound_value.spec
        if spec.type == PropType.ACTION and isinstance(bound_value.value, str):
            names.append(bound_value.value)
        elif spec.type == PropType.ARRAY and spec.item_type == PropType.ACTION:
            names.extend(v for v in bound_value.value if isinstance(v, str))
    return names


def _inline_color(
    value: Any, prop_type: PropType | None, theme: Theme, missing: list[str]
) -> Any:
    if prop_type != PropType.COLOR or not isinstance(value, str) or value.startswith("#"):
        return value
    resolved = theme.color(value)
    if resolved is None:
        missing.append(value)
    return resolved


def inline_theme_colors(bound: BoundProps, theme: Theme) -> tuple[BoundProps, list[str]]:
    """Replace color tokens in bound values by the theme's hex colors.

    Component files cannot see the theme object declared by the entry
    file, so their defaults carry literal colors. Tokens the theme does not
    define become None and are returned as the second element.
    """
    missing: list[str] = []
    values: dict[str, BoundValue] = {}
    for name, bound_value in bound.items():
        spec, value = bound_value.spec, bound_value.value
        if spec.type == PropType.COLOR:
            value = _inline_color(value, PropType.COLOR, theme, missing)
        elif spec.type == PropType.ARRAY and isinstance(value, (list, tuple)):
            value = [_inline_color(v, spec.item_type, theme, missing) for v in value]
        elif spec.type == PropType.OBJECT and spec.fields and isinstance(value, dict):
            value = {
                k: _inline_color(v, spec.fields.get(k), theme, missing)
                for k, v in value.items()
            }
        values[name] = BoundValue(spec, value, bound_value.explicit)
    return BoundProps(values), missing


class FileTreeAssembler:
    """Builds the file list of one composition for one platform.

    An assembler instance is single-use: it owns the identifier scopes and
    the dedup map of exactly one ``assemble`` run.
    """

    def __init__(
        self,
        composition: ProjectComposition,
        platform: Platform,
        registry: CapsuleRegistry,
        *,
        render_workers: int = 1,
        app_package: str | None = None,
    ):
        self.composition = composition
        self.platform = Platform(platform)
        self.registry = registry
        self.render_workers = max(1, render_workers)
        self.emitter: PlatformEmitter = get_emitter(self.platform)
        self.app = AppNames.from_composition(composition, app_package)
        self.binder = PropBinder()
        self.output = AssemblyOutput(platform=self.platform)

        self._components = self.emitter.component_scope(self.app)
        self._files = IdentifierScope(f"{self.platform.value}:files", Casing.PASCAL)
        self._units: dict[str, _Unit] = {}
        self._bindings: dict[int, BindingResult] = {}
        self._handlers = self.emitter.dialect.handler_scope(
            f"{self.platform.value}:handlers"
        )
        self._needs_stub = False

    # -------------------------------------------------------------------------
    # Coordinator pass
    # -------------------------------------------------------------------------

    def plan(self) -> None:
        """Bind instances and claim one component per distinct capsule."""
        theme = self.composition.theme
        for instance in self.composition.iter_instances():
            unit = self._units.get(instance.capsule_id)
            if unit is None:
                unit = self._plan_unit(instance.capsule_id)
                self._units[instance.capsule_id] = unit

            if unit.stub_reason is not None:
                if not unit.template_failed:
                    self.output.errors.append(
                        capability_error(
                            instance.id,
                            instance.capsule_id,
                            self.platform.value,
                            unit.stub_reason,
                        )
                    )
                continue

            result = self.binder.bind(instance, unit.definition, theme)
            self._bindings[id(instance)] = result
            platform = self.platform.value
            self.output.errors.extend(
                e.with_context(platform=platform) for e in result.errors
            )
            self.output.warnings.extend(
                w.with_context(platform=platform) for w in result.warnings
            )
            if result.ok:
                for action in _actions(result.props):
                    self._handlers.claim(action)

        self.output.capsule_count = len(self._units)
        self.output.warnings.extend(self._components.warnings)
        self.output.warnings.extend(self._files.warnings)
        self.output.warnings.extend(self._handlers.warnings)

    def _plan_unit(self, capsule_id: str) -> _Unit:
        definition = self.registry.get(capsule_id)
        name = definition.name if definition is not None else capsule_id
        identifier = self._components.claim(name, key=capsule_id)
        unit = _Unit(
            capsule_id=capsule_id,
            display_name=name,
            identifier=identifier,
            definition=definition,
        )

        error = None
        if definition is None:
            unit.stub_reason = f"Capsule '{capsule_id}' is not registered"
        elif (error := self.registry.template_error(capsule_id, self.platform)) is not None:
            unit.template_failed = True
            unit.stub_reason = (
                f"Template of '{name}' for {self.platform.value} is malformed: {error}"
            )
        elif (compiled := self.registry.compiled_template(capsule_id, self.platform)) is None:
            unit.stub_reason = (
                f"Capsule '{name}' has no {self.emitter.info.display_name} template"
            )
        else:
            unit.compiled = compiled

        stem = identifier
        if unit.compiled is not None and unit.stub_reason is None:
            rendered = unit.compiled.file_name.render(self._context(unit))
            stem = rendered.strip() or identifier
        stem = self._files.claim(stem, key=capsule_id)
        unit.ref = ComponentRef(
            capsule_id=capsule_id,
            identifier=identifier,
            stem=stem,
            path=self.emitter.component_path(stem, self.app),
        )

        if error is not None:
            self.output.errors.append(
                error.to_diagnostic(capsule_id, self.platform.value, unit.ref.path)
            )
            logger.error(f"[{self.platform.value}] stubbing {unit.ref.path}: {error}")
        return unit

    # -------------------------------------------------------------------------
    # Component files
    # -------------------------------------------------------------------------

    def _context(self, unit: _Unit, **kwargs: Any) -> RenderContext:
        return RenderContext(
            platform=self.platform,
            component=unit.identifier,
            capsule_id=unit.capsule_id,
            capsule_name=unit.display_name,
            app_name=self.app.display_name,
            theme=self.composition.theme,
            **kwargs,
        )

    def _literals(self, bound: BoundProps) -> dict[str, str]:
        dialect = self.emitter.dialect
        handlers = self._handlers.claimed()
        return {
            name: dialect.serialize(
                bv.value, bv.spec.type, bv.spec.item_type, bv.spec.fields, handlers
            )
            for name, bv in bound.items()
            if not bv.spec.is_slot
        }

    def render_component(self, unit: _Unit) -> tuple[GeneratedFile, list[Diagnostic]]:
        """Render one component file. Pure; safe to run on a worker thread."""
        if unit.stub_reason is not None:
            body = self.emitter.stub_component(
                unit.identifier, unit.capsule_id, unit.stub_reason
            )
            return self.emitter.component_file(body, unit.ref, self.app), []

        defaults, missing = inline_theme_colors(
            self.binder.defaults(unit.definition), self.composition.theme
        )
        context = self._context(unit, props=self._literals(defaults))
        body = unit.compiled.component.render(context)
        for token in missing:
            context.warnings.append(
                Diagnostic(
                    code=ErrorCode.UNRESOLVED_THEME_TOKEN,
                    message=f"Theme color '{token}' is not defined",
                    severity=Severity.WARNING,
                    platform=self.platform.value,
                )
            )
        warnings = [
            w.with_context(file=unit.ref.path, capsule_id=unit.capsule_id)
            for w in context.warnings
        ]
        return self.emitter.component_file(body, unit.ref, self.app), warnings

    def _safe_render(self, unit: _Unit) -> tuple[GeneratedFile, list[Diagnostic]]:
        try:
            return self.render_component(unit)
        except SerializationError as e:
            unit.stub_reason = (
                f"Default props of '{unit.display_name}' cannot be rendered: {e}"
            )
            file, _ = self.render_component(unit)
            error = Diagnostic(
                code=ErrorCode.INVALID_PROP_TYPE,
                message=str(e),
                capsule_id=unit.capsule_id,
                platform=self.platform.value,
                file=unit.ref.path,
            )
            return file, [error]

    def emit_components(
        self,
        cancel: CancelFlag | None = None,
        progress: ProgressCallback | None = None,
    ) -> list[GeneratedFile]:
        """Render every planned component file in first-seen order.

        Raises:
            ExportCancelled: If cancel is set between two emissions.
        """
        units = list(self._units.values())
        total = len(units)
        files: list[GeneratedFile] = []

        def collect(results) -> None:
            for emitted, (file, diagnostics) in enumerate(results, start=1):
                for diagnostic in diagnostics:
                    if diagnostic.is_error:
                        self.output.errors.append(diagnostic)
                    else:
                        self.output.warnings.append(diagnostic)
                files.append(file)
                if progress is not None:
                    progress(emitted, total)
                if cancel is not None and cancel.is_set():
                    raise ExportCancelled(self.platform.value)

        if cancel is not None and cancel.is_set():
            raise ExportCancelled(self.platform.value)

        if self.render_workers > 1 and total > 1:
            with ThreadPoolExecutor(max_workers=self.render_workers) as executor:
                try:
                    collect(executor.map(self._safe_render, units))
                except ExportCancelled:
                    executor.shutdown(wait=True, cancel_futures=True)
                    raise
        else:
            collect(self._safe_render(unit) for unit in units)
        return files

    # -------------------------------------------------------------------------
    # Call sites and entry
    # -------------------------------------------------------------------------

    def render_instance(self, instance: CapsuleInstance) -> str:
        """Call site of an instance and, recursively, its subtree."""
        unit = self._units[instance.capsule_id]
        if unit.stub_reason is not None:
            self._needs_stub = True
            return self.emitter.stub_call(unit.display_name, unit.stub_reason)

        binding = self._bindings[id(instance)]
        if not binding.ok:
            self._needs_stub = True
            problems = "; ".join(e.message for e in binding.errors)
            return self.emitter.stub_call(
                unit.display_name, f"Instance '{instance.id}' has invalid props: {problems}"
            )

        try:
            args, slot_values = _arguments(
                binding.props, self.platform, self._handlers.claimed()
            )
            literals = self._literals(binding.props)
        except SerializationError as e:
            self.output.errors.append(
                Diagnostic(
                    code=ErrorCode.INVALID_PROP_TYPE,
                    message=str(e),
                    instance_id=instance.id,
                    capsule_id=instance.capsule_id,
                    platform=self.platform.value,
                )
            )
            self._needs_stub = True
            return self.emitter.stub_call(unit.display_name, str(e))

        children: list[str] = []
        if instance.children and not unit.definition.accepts_children:
            self.output.warnings.append(
                Diagnostic(
                    code=ErrorCode.INVALID_COMPOSITION,
                    message=(
                        f"Capsule '{unit.display_name}' does not accept children; "
                        f"{len(instance.children)} child instance(s) not rendered"
                    ),
                    severity=Severity.WARNING,
                    instance_id=instance.id,
                    capsule_id=instance.capsule_id,
                    platform=self.platform.value,
                )
            )
        else:
            children = [self.render_instance(child) for child in instance.children]

        slots = [
            (name, "\n".join(self.render_instance(item) for item in items))
            for name, items in slot_values
        ]

        if unit.compiled.usage is None:
            platform_slots = [
                (unit.definition.get_prop(name).name_for(self.platform), text)
                for name, text in slots
            ]
            return self.emitter.render_call(unit.identifier, args, children, platform_slots)

        context = self._context(
            unit,
            instance_id=instance.id,
            props=literals,
            props_list=self.emitter.props_list(args),
            children="\n".join(children),
            slots=dict(slots),
        )
        text = unit.compiled.usage.render(context)
        self.output.warnings.extend(
            w.with_context(instance_id=instance.id, capsule_id=instance.capsule_id)
            for w in context.warnings
        )
        return text.strip("\n")

    def emit_entry(self) -> list[GeneratedFile]:
        root = self.render_instance(self.composition.root)
        context = EntryContext(
            app=self.app,
            theme=self.composition.theme,
            components=[unit.ref for unit in self._units.values()],
            root=root,
            handlers=self._handlers.claimed(),
            needs_stub=self._needs_stub,
        )
        return self.emitter.entry_files(context)

    def dependencies(self) -> list[str]:
        deps = list(self.emitter.dependencies())
        for unit in self._units.values():
            if unit.compiled is not None and unit.stub_reason is None:
                deps.extend(unit.compiled.dependencies)
        return list(dict.fromkeys(deps))

    def assemble(
        self,
        cancel: CancelFlag | None = None,
        progress: ProgressCallback | None = None,
    ) -> AssemblyOutput:
        self.plan()
        components = self.emit_components(cancel, progress)
        if cancel is not None and cancel.is_set():
            raise ExportCancelled(self.platform.value)
        self.output.files = [*components, *self.emit_entry()]
        self.output.dependencies = self.dependencies()
        logger.debug(
            f"[{self.platform.value}] assembled {len(self.output.files)} file(s), "
            f"{len(self.output.errors)} error(s)"
        )
        return self.output


def assemble(
    composition: ProjectComposition,
    platform: Platform,
    registry: CapsuleRegistry,
    cancel: CancelFlag | None = None,
    progress: ProgressCallback | None = None,
    render_workers: int = 1,
    app_package: str | None = None,
) -> AssemblyOutput:
    """Assemble the file tree of a composition for one platform.

    Args:
        composition: Project to generate.
        platform: Target platform.
        registry: Capsule definitions and compiled templates.
        cancel: Checked between component-file emissions.
        progress: Called with (emitted, total) after each component file.
        render_workers: Threads used for component-file renders.
        app_package: Override of the generated app's base package.

    Returns:
        AssemblyOutput with files in deterministic order.

    Raises:
        ExportCancelled: If cancelled; no files are returned.
    """
    assembler = FileTreeAssembler(
        composition,
        platform,
        registry,
        render_workers=render_workers,
        app_package=app_package,
    )
    return assembler.assemble(cancel, progress)


__all__ = [
    "AssemblyOutput",
    "CancelFlag",
    "ProgressCallback",
    "FileTreeAssembler",
    "assemble",
    "inline_theme_colors",
]
