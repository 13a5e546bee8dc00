from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol


class Packager(Protocol):
    """
    Turns an executable image (ELF) plus an optional resource directory into a
    container file at `output`. Implementations raise PackagingError.
    """

    def package(
        self, image: Path, output: Path, resource_dir: Optional[Path] = None
    ) -> Path: ...


@dataclass(frozen=True, slots=True)
class PackagedArtifact:
    package_id: str
    image: Path
    output: Path
    resource_dir: Optional[Path]

    def to_dict(self) -> dict[str, object]:
        return {
            "package_id": self.package_id,
            "image": str(self.image),
            "output": str(self.output),
            "resource_dir": str(self.resource_dir) if self.resource_dir else None,
        }
