from __future__ import annotations

import os
import subprocess
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Callable, Iterator, Mapping, Optional

import structlog
from cargo_nro.core.errors import BuildDriverError
from cargo_nro.core.paths import MANIFEST_NAME, require_project_root

log = structlog.get_logger(__name__)

TARGET_PATH_ENV = "RUST_TARGET_PATH"

PopenFn = Callable[..., "subprocess.Popen[bytes]"]


def resolve_target_path(
    explicit: Optional[Path] = None,
    *,
    cwd: Optional[Path] = None,
    marker: str = MANIFEST_NAME,
) -> Path:
    """
    Directory the driver searches for custom target specs.

    An explicit value (normally RUST_TARGET_PATH from the environment) wins.
    Otherwise the project root above `cwd` is used; no root is fatal.
    """
    if explicit is not None:
        return Path(explicit)
    return require_project_root(Path.cwd() if cwd is None else Path(cwd), marker)


@dataclass(frozen=True, slots=True)
class DriverCommand:
    driver: str
    target: str
    target_path: Path
    extra_args: tuple[str, ...] = ()

    def argv(self) -> list[str]:
        return [
            self.driver,
            "build",
            f"--target={self.target}",
            "--message-format=json",
            *self.extra_args,
        ]

    def env(self, base: Optional[Mapping[str, str]] = None) -> dict[str, str]:
        env = dict(os.environ if base is None else base)
        env[TARGET_PATH_ENV] = str(self.target_path)
        return env


class BuildProcess:
    def __init__(self, proc: "subprocess.Popen[bytes]", argv: list[str]) -> None:
        self._proc = proc
        self.argv = argv

    @property
    def pid(self) -> int:
        return self._proc.pid

    @property
    def stdout(self) -> IO[bytes]:
        if self._proc.stdout is None:
            raise BuildDriverError("build driver was started without a stdout pipe")
        return self._proc.stdout

    def finish(self) -> int:
        """Wait for the driver after its output is exhausted; non-zero is fatal."""
        rc = self._proc.wait()
        log.debug("Build driver exited", returncode=rc)
        if rc != 0:
            raise BuildDriverError(
                f"{self.argv[0]} exited with status {rc}", returncode=rc
            )
        return rc


@contextmanager
def spawn_build(
    cmd: DriverCommand,
    *,
    popen: PopenFn = subprocess.Popen,
    cwd: Optional[Path] = None,
) -> Iterator[BuildProcess]:
    """
    Run the build driver with its JSON output piped back to us.

    The pipe is closed and the process reaped on every exit path; if the caller
    fails while the driver is still running, the driver is killed.
    """
    argv = cmd.argv()
    try:
        proc = popen(
            argv,
            stdout=subprocess.PIPE,
            env=cmd.env(),
            cwd=str(cwd) if cwd is not None else None,
        )
    except OSError as exc:
        raise BuildDriverError(f"Could not start {argv[0]}: {exc}") from exc

    log.debug("Build driver started", argv=argv, pid=proc.pid)
    try:
        yield BuildProcess(proc, argv)
    except BaseException:
        if proc.poll() is None:
            log.debug("Killing build driver", pid=proc.pid)
            proc.kill()
        raise
    finally:
        if proc.stdout is not None:
            proc.stdout.close()
        proc.wait()
