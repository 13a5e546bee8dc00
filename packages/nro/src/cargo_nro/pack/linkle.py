from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Optional, Sequence

import structlog
from cargo_nro.core.errors import PackagingError

log = structlog.get_logger(__name__)

RunFn = Callable[..., subprocess.CompletedProcess[str]]

_STDERR_TAIL = 2000


def _tail(text: str | None) -> str | None:
    if not text:
        return None
    text = text.strip()
    return text[-_STDERR_TAIL:] if text else None


class LinklePackager:
    """
    Packages NRO files through the `linkle` command line tool.
    """

    def __init__(
        self,
        *,
        linkle_binary: str = "linkle",
        run_fn: RunFn = subprocess.run,
    ) -> None:
        self._linkle_binary = linkle_binary
        self._run_fn = run_fn

    def command(
        self, image: Path, output: Path, resource_dir: Optional[Path] = None
    ) -> list[str]:
        cmd = [self._linkle_binary, "nro", str(image), str(output)]
        if resource_dir is not None:
            cmd.append(f"--romfs-path={resource_dir}")
        return cmd

    def _run(self, cmd: Sequence[str]) -> subprocess.CompletedProcess[str]:
        try:
            return self._run_fn(
                list(cmd),
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise PackagingError(
                f"linkle binary '{self._linkle_binary}' not found", command=cmd
            ) from exc

    def package(
        self, image: Path, output: Path, resource_dir: Optional[Path] = None
    ) -> Path:
        image = Path(image)
        output = Path(output)
        if not image.is_file():
            raise PackagingError(f"Executable image not found: {image}")

        cmd = self.command(image, output, resource_dir)
        log.debug("Running linkle", command=cmd)
        proc = self._run(cmd)

        if proc.returncode != 0:
            raise PackagingError(
                f"linkle failed ({proc.returncode}) for {image}",
                command=cmd,
                stderr=_tail(proc.stderr) or _tail(proc.stdout),
            )
        if not output.is_file():
            raise PackagingError(
                f"linkle reported success but {output} was not written", command=cmd
            )
        return output
