from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any

import pytest
from cargo_nro import cli
from cargo_nro.core.errors import ProjectRootNotFoundError
from cargo_nro.pack import PackagedArtifact
from cargo_nro.pipeline import RouteSummary
from rich.console import Console


def test_parse_drops_cargo_subcommand_and_passes_unknown_args() -> None:
    args = cli._parse(["nro", "--target", "t", "--release", "--features", "x"])
    assert args.target == "t"
    assert args.driver is None
    assert args.passthrough == ("--release", "--features", "x")


def test_parse_without_subcommand() -> None:
    args = cli._parse(["--driver", "cargo"])
    assert args.driver == "cargo"
    assert args.passthrough == ()


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> io.StringIO:
    buf = io.StringIO()
    monkeypatch.setattr(cli, "console", Console(file=buf, width=1000, color_system=None))
    return buf


def test_main_success_prints_result(
    monkeypatch: pytest.MonkeyPatch, captured: io.StringIO
) -> None:
    seen: dict[str, Any] = {}

    def fake_build(**kw: Any) -> RouteSummary:
        seen.update(kw)
        return RouteSummary(
            packaged=[
                PackagedArtifact(
                    package_id="app 0.1.0 (path+file:///p)",
                    image=Path("/p/target/out"),
                    output=Path("/p/target/out.nro"),
                    resource_dir=None,
                )
            ]
        )

    monkeypatch.setattr(cli, "build_and_package", fake_build)

    assert cli.main(["nro", "--target", "t", "--release"]) == 0
    assert seen["target"] == "t"
    assert seen["extra_args"] == ("--release",)
    text = captured.getvalue()
    assert "/p/target/out.nro" in text
    assert "1 packaged" in text


def test_main_fatal_error_exits_nonzero(
    monkeypatch: pytest.MonkeyPatch, captured: io.StringIO
) -> None:
    def fake_build(**kw: Any) -> RouteSummary:
        raise ProjectRootNotFoundError(Path("/nowhere"), "Cargo.toml")

    monkeypatch.setattr(cli, "build_and_package", fake_build)

    assert cli.main([]) == 1
    assert "error: No Cargo.toml found in /nowhere" in captured.getvalue()


def test_main_json_prints_summary_only(
    monkeypatch: pytest.MonkeyPatch, captured: io.StringIO
) -> None:
    def fake_build(**kw: Any) -> RouteSummary:
        return RouteSummary(
            packaged=[
                PackagedArtifact(
                    package_id="app 0.1.0 (path+file:///p)",
                    image=Path("/p/target/out"),
                    output=Path("/p/target/out.nro"),
                    resource_dir=Path("/p/res"),
                )
            ],
            skipped_artifacts=2,
            diagnostics=3,
            errors=1,
        )

    monkeypatch.setattr(cli, "build_and_package", fake_build)

    assert cli.main(["nro", "--json", "--target", "t"]) == 0
    summary = json.loads(captured.getvalue())
    assert summary["target"] == "t"
    assert summary["packaged"] == [
        {
            "package_id": "app 0.1.0 (path+file:///p)",
            "image": "/p/target/out",
            "output": "/p/target/out.nro",
            "resource_dir": "/p/res",
        }
    ]
    assert (summary["skipped_artifacts"], summary["diagnostics"], summary["errors"]) == (
        2,
        3,
        1,
    )
