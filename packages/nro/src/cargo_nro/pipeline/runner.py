from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Sequence

from cargo_nro.build import DriverCommand, resolve_target_path, spawn_build
from cargo_nro.build.driver import PopenFn
from cargo_nro.core import ILogger, Settings, format_duration_ms, get_logger
from cargo_nro.events import iter_build_events
from cargo_nro.pack import LinklePackager, Packager
from rich.console import Console

from .events import EventType
from .router import EventRouter, RouterConfig, RouteSummary


def build_and_package(
    *,
    settings: Settings,
    driver: str | None = None,
    target: str | None = None,
    extra_args: Sequence[str] = (),
    console: Console | None = None,
    packager: Packager | None = None,
    logger: ILogger | None = None,
    cwd: Path | None = None,
    popen: PopenFn = subprocess.Popen,
) -> RouteSummary:
    """
    Run the build driver and package every binary it reports.

    Any CargoNroError raised here is fatal for the run.
    """
    log: ILogger = logger or get_logger("cargo_nro.runner")

    target_path = resolve_target_path(
        settings.rust_target_path, cwd=cwd, marker=settings.manifest_name
    )
    cmd = DriverCommand(
        driver=driver or settings.driver,
        target=target or settings.target,
        target_path=target_path,
        extra_args=tuple(extra_args),
    )
    router = EventRouter(
        packager=packager or LinklePackager(linkle_binary=settings.linkle),
        console=console,
        cfg=RouterConfig(
            manifest_name=settings.manifest_name,
            resource_dir_name=settings.resource_dir_name,
            container_suffix=settings.container_suffix,
        ),
        logger=log,
    )

    log.info(
        "Build starting",
        argv=cmd.argv(),
        target_path=str(target_path),
        event_type=EventType.RUN_START.value,
    )

    with spawn_build(cmd, popen=popen, cwd=cwd) as proc:
        router.emit(EventType.DRIVER_SPAWN, pid=proc.pid)
        summary = router.run(iter_build_events(proc.stdout))
        rc = proc.finish()
        router.emit(EventType.DRIVER_EXIT, returncode=rc)

    log.info(
        "Build finished",
        packaged=len(summary.packaged),
        diagnostics=summary.diagnostics,
        malformed=summary.malformed,
        duration=format_duration_ms(summary.duration_ms),
        event_type=EventType.RUN_FINISH.value,
    )
    return summary
