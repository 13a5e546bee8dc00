from __future__ import annotations

import io
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import pytest
from cargo_nro.core.errors import PackagingError
from rich.console import Console


@dataclass
class RecordingPackager:
    calls: list[tuple[Path, Path, Optional[Path]]] = field(default_factory=list)
    fail_with: Optional[str] = None

    def package(
        self, image: Path, output: Path, resource_dir: Optional[Path] = None
    ) -> Path:
        self.calls.append((Path(image), Path(output), resource_dir))
        if self.fail_with is not None:
            raise PackagingError(self.fail_with)
        return output


def make_target(
    kind: str = "bin", src_path: str = "/p/src/main.rs", name: str = "app"
) -> dict[str, Any]:
    return {
        "kind": [kind],
        "crate_types": [kind],
        "name": name,
        "src_path": src_path,
        "edition": "2018",
        "doctest": False,
    }


def make_artifact(
    *,
    kind: str = "bin",
    src_path: str = "/p/src/main.rs",
    filenames: list[str] | None = None,
    package_id: str = "app 0.1.0 (path+file:///p)",
) -> dict[str, Any]:
    return {
        "reason": "compiler-artifact",
        "package_id": package_id,
        "target": make_target(kind, src_path),
        "profile": {
            "opt_level": "0",
            "debuginfo": 2,
            "debug_assertions": True,
            "overflow_checks": True,
            "test": False,
        },
        "features": [],
        "filenames": filenames if filenames is not None else ["/p/target/out"],
        "executable": None,
        "fresh": False,
    }


def make_compiler_message(message: Any) -> dict[str, Any]:
    return {
        "reason": "compiler-message",
        "package_id": "app 0.1.0 (path+file:///p)",
        "target": make_target(),
        "message": message,
    }


def make_build_script() -> dict[str, Any]:
    return {
        "reason": "build-script-executed",
        "package_id": "ring 0.16.20 (registry+https://github.com/rust-lang/crates.io-index)",
        "linked_libs": ["static=ring-core"],
        "linked_paths": ["native=/p/target/build/ring/out"],
        "cfgs": [],
        "env": [["RING_CORE_PREFIX", "ring_core_0_16_20_"]],
        "out_dir": "/p/target/build/ring/out",
    }


def ndjson(*objs: Any) -> bytes:
    return b"".join(json.dumps(o).encode("utf-8") + b"\n" for o in objs)


@pytest.fixture
def packager() -> RecordingPackager:
    return RecordingPackager()


@pytest.fixture
def out() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(out: io.StringIO) -> Console:
    return Console(file=out, width=1000, color_system=None, force_terminal=False)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """
    A synthetic cargo project:

      {tmp}/p/Cargo.toml
      {tmp}/p/src/main.rs
      {tmp}/p/res/
      {tmp}/p/target/out
    """
    root = tmp_path / "p"
    (root / "src").mkdir(parents=True)
    (root / "res").mkdir()
    (root / "target").mkdir()
    (root / "Cargo.toml").write_text('[package]\nname = "app"\n')
    (root / "src" / "main.rs").write_text("fn main() {}\n")
    (root / "target" / "out").write_bytes(b"\x7fELF")
    return root
