from __future__ import annotations

from pathlib import Path
from typing import Sequence


class CargoNroError(RuntimeError):
    """Base error"""


class StreamCorruptError(CargoNroError):
    """
    The build event stream itself is unusable (invalid JSON text, bad encoding,
    read failure). Terminates the run.
    """

    def __init__(self, message: str, *, line_no: int | None = None) -> None:
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)
        self.line_no = line_no


class ProjectRootNotFoundError(CargoNroError):
    def __init__(self, start: Path, marker: str) -> None:
        super().__init__(f"No {marker} found in {start} or any parent directory")
        self.start = start
        self.marker = marker


class OutputPathError(CargoNroError):
    """Container output path cannot be derived from the artifact path"""


class MalformedDiagnosticError(CargoNroError):
    """
    A compiler-message payload did not have the expected shape.

    The build driver guarantees structured diagnostics, so this is treated as a
    broken contract rather than a skippable event.
    """


class PackagingError(CargoNroError):
    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] | None = None,
        stderr: str | None = None,
    ) -> None:
        if stderr:
            message += f" (stderr: {stderr})"
        super().__init__(message)
        self.command = list(command) if command is not None else None
        self.stderr = stderr


class BuildDriverError(CargoNroError):
    """Build driver could not be spawned or exited unsuccessfully"""

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode
