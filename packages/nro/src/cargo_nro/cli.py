from __future__ import annotations

import argparse
import json
import sys
import uuid
from dataclasses import dataclass

from cargo_nro import __version__
from cargo_nro.core import (
    CargoNroError,
    bind,
    clear_bindings,
    configure_logging,
    format_duration_ms,
    get_logger,
    load_settings,
)
from cargo_nro.pipeline import RouteSummary, build_and_package
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

console = Console()

# `cargo nro ...` invokes us as `cargo-nro nro ...`
_SUBCOMMAND = "nro"


@dataclass(frozen=True, slots=True)
class _Args:
    driver: str | None
    target: str | None
    log_level: str | None
    json: bool
    passthrough: tuple[str, ...]


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="cargo-nro",
        allow_abbrev=False,
        description=(
            "Build the current project and package every binary artifact as an NRO. "
            "Unrecognized arguments are passed through to the build driver."
        ),
    )
    p.add_argument(
        "--driver",
        default=None,
        help="Build driver executable. If omitted: CARGO_NRO_DRIVER or xargo.",
    )
    p.add_argument(
        "--target",
        default=None,
        help="Target triple. If omitted: CARGO_NRO_TARGET or aarch64-roblabla-switch.",
    )
    p.add_argument("--log-level", default=None, help="Override CARGO_NRO_LOG_LEVEL")
    p.add_argument(
        "--json",
        action="store_true",
        help="Print the run summary as JSON instead of a table.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def _parse(argv: list[str]) -> _Args:
    if argv[:1] == [_SUBCOMMAND]:
        argv = argv[1:]
    args, rest = _build_parser().parse_known_args(argv)
    return _Args(
        driver=(str(args.driver) if args.driver else None),
        target=(str(args.target) if args.target else None),
        log_level=(str(args.log_level) if args.log_level else None),
        json=bool(args.json),
        passthrough=tuple(rest),
    )


def _result_table(summary: RouteSummary) -> Table:
    tbl = Table(title="Result", show_header=True, box=None)
    tbl.add_column("package")
    tbl.add_column("output")
    tbl.add_column("romfs")
    for p in summary.packaged:
        tbl.add_row(
            p.package_id.split(" ")[0],
            str(p.output),
            str(p.resource_dir) if p.resource_dir else "-",
        )
    tbl.caption = (
        f"{len(summary.packaged)} packaged, {summary.skipped_artifacts} skipped, "
        f"{summary.diagnostics} diagnostics, {summary.malformed} malformed, "
        f"{format_duration_ms(summary.duration_ms)}"
    )
    return tbl


def main(argv: list[str] | None = None) -> int:
    args = _parse(list(sys.argv[1:] if argv is None else argv))

    s = load_settings()
    configure_logging(level=args.log_level or s.log_level, fmt=s.log_format)
    log = get_logger("cargo_nro")

    run_id = uuid.uuid4().hex
    target = args.target or s.target
    clear_bindings()
    bind(run_id=run_id, target=target)

    if not args.json:
        console.print(
            Panel.fit(
                Text(
                    f"cargo-nro {__version__}\nrun_id={run_id}\ntarget={target}",
                    style="bold",
                ),
                title="Run",
            )
        )

    try:
        summary = build_and_package(
            settings=s,
            driver=args.driver,
            target=target,
            extra_args=args.passthrough,
            console=console,
            logger=log,
        )
    except CargoNroError as e:
        log.error("Run failed", exc_type=type(e).__name__, error=str(e))
        console.print(Text(f"error: {e}", style="bold red"), soft_wrap=True)
        return 1

    if args.json:
        payload = {"run_id": run_id, "target": target, **summary.to_dict()}
        console.out(json.dumps(payload, indent=2), highlight=False)
    else:
        console.print(_result_table(summary))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
