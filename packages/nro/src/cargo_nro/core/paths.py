from __future__ import annotations

from pathlib import Path

from .errors import OutputPathError, ProjectRootNotFoundError

MANIFEST_NAME = "Cargo.toml"
RESOURCE_DIR_NAME = "res"
CONTAINER_SUFFIX = ".nro"


def find_project_root(start: Path, marker: str = MANIFEST_NAME) -> Path | None:
    """
    Return the nearest of `start` and its ancestors that holds a `marker` file.

    Only the ancestor chain is inspected, never siblings or children. `start`
    itself counts when it is a directory.
    """
    start = Path(start)
    for candidate in (start, *start.parents):
        if (candidate / marker).is_file():
            return candidate
    return None


def require_project_root(start: Path, marker: str = MANIFEST_NAME) -> Path:
    root = find_project_root(start, marker)
    if root is None:
        raise ProjectRootNotFoundError(Path(start), marker)
    return root


def resolve_resource_dir(root: Path, name: str = RESOURCE_DIR_NAME) -> Path | None:
    res = Path(root) / name
    return res if res.is_dir() else None


def container_output_path(image: Path | str, suffix: str = CONTAINER_SUFFIX) -> Path:
    """
    `target/.../app` -> `target/.../app.nro`, `app.elf` -> `app.nro`.
    """
    p = Path(image)
    if not p.name:
        raise OutputPathError(f"Artifact path has no file name: {str(image)!r}")
    try:
        return p.with_suffix(suffix)
    except ValueError as e:
        raise OutputPathError(f"Cannot derive output path from {p}: {e}") from e
