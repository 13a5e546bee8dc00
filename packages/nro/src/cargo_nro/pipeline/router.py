from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from cargo_nro.core import ILogger, get_logger, monotonic_ms
from cargo_nro.core.paths import (
    CONTAINER_SUFFIX,
    MANIFEST_NAME,
    RESOURCE_DIR_NAME,
    container_output_path,
    require_project_root,
    resolve_resource_dir,
)
from cargo_nro.events import (
    ArtifactEvent,
    BuildScriptEvent,
    CompilerMessageEvent,
    DecodedEvent,
    MalformedEvent,
    OtherEvent,
)
from cargo_nro.pack import PackagedArtifact, Packager
from rich.console import Console
from rich.text import Text

from .events import EventType
from .render import print_diagnostic, render_diagnostic


@dataclass(slots=True)
class RouterConfig:
    manifest_name: str = MANIFEST_NAME
    resource_dir_name: str = RESOURCE_DIR_NAME
    container_suffix: str = CONTAINER_SUFFIX


@dataclass(slots=True)
class RouteSummary:
    packaged: list[PackagedArtifact] = field(default_factory=list)
    skipped_artifacts: int = 0
    diagnostics: int = 0
    errors: int = 0
    build_scripts: int = 0
    malformed: int = 0
    ignored: int = 0
    duration_ms: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "packaged": [p.to_dict() for p in self.packaged],
            "skipped_artifacts": self.skipped_artifacts,
            "diagnostics": self.diagnostics,
            "errors": self.errors,
            "build_scripts": self.build_scripts,
            "malformed": self.malformed,
            "ignored": self.ignored,
            "duration_ms": self.duration_ms,
        }


class EventRouter:
    """
    Acts on decoded build events one at a time, in arrival order.

    Binary artifacts are packaged, compiler diagnostics are printed, malformed
    events are reported and skipped. Everything else is ignored. Fatal
    conditions raise a CargoNroError subclass and end the run.
    """

    def __init__(
        self,
        *,
        packager: Packager,
        console: Console | None = None,
        cfg: RouterConfig | None = None,
        logger: ILogger | None = None,
    ) -> None:
        self.packager = packager
        self.console = console or Console()
        self.cfg = cfg or RouterConfig()
        self.logger: ILogger = logger or get_logger("cargo_nro.router")

    def emit(self, event: EventType, **kw: object) -> None:
        self.logger.debug(event.value, event_type=event.value, **kw)

    def run(self, events: Iterable[DecodedEvent]) -> RouteSummary:
        summary = RouteSummary()
        t0 = monotonic_ms()
        for event in events:
            self.handle(event, summary)
        summary.duration_ms = monotonic_ms() - t0
        return summary

    def handle(self, event: DecodedEvent, summary: RouteSummary) -> None:
        if isinstance(event, ArtifactEvent):
            if event.is_binary:
                summary.packaged.append(self.package_artifact(event))
            else:
                summary.skipped_artifacts += 1
                self.emit(
                    EventType.ARTIFACT_SKIPPED,
                    package_id=event.package_id,
                    kind=event.target.primary_kind.value,
                )
        elif isinstance(event, CompilerMessageEvent):
            diag = render_diagnostic(event.message)
            print_diagnostic(self.console, diag)
            summary.diagnostics += 1
            if diag.level == "error":
                summary.errors += 1
            self.emit(
                EventType.DIAGNOSTIC, package_id=event.package_id, level=diag.level
            )
        elif isinstance(event, MalformedEvent):
            summary.malformed += 1
            self.console.print(
                Text(
                    f"skipping malformed {event.reason} event "
                    f"(line {event.line_no}): {event.error}",
                    style="yellow",
                ),
                soft_wrap=True,
            )
            self.logger.warning(
                "Malformed build event",
                reason=event.reason,
                line_no=event.line_no,
                error=event.error,
            )
        elif isinstance(event, BuildScriptEvent):
            summary.build_scripts += 1
            self.emit(EventType.BUILD_SCRIPT, package_id=event.package_id)
        elif isinstance(event, OtherEvent):
            summary.ignored += 1
            self.emit(EventType.EVENT_IGNORED, reason=event.reason)

    def package_artifact(self, artifact: ArtifactEvent) -> PackagedArtifact:
        root = require_project_root(artifact.target.src_path, self.cfg.manifest_name)
        resource_dir = resolve_resource_dir(root, self.cfg.resource_dir_name)

        image = artifact.primary_path
        output = container_output_path(image, self.cfg.container_suffix)

        self.packager.package(image, output, resource_dir)

        romfs = f"using {resource_dir} as romfs" if resource_dir else "no romfs"
        self.console.print(
            Text.assemble(("Built ", "bold green"), str(output), f" ({romfs})"),
            highlight=False,
            soft_wrap=True,
        )
        self.emit(
            EventType.ARTIFACT_PACKAGED,
            package_id=artifact.package_id,
            output=str(output),
            resource_dir=str(resource_dir) if resource_dir else None,
            fresh=artifact.fresh,
        )
        return PackagedArtifact(
            package_id=artifact.package_id,
            image=image,
            output=output,
            resource_dir=resource_dir,
        )
