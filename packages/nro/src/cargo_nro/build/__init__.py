from .driver import (
    TARGET_PATH_ENV,
    BuildProcess,
    DriverCommand,
    resolve_target_path,
    spawn_build,
)

__all__ = [
    "TARGET_PATH_ENV",
    "BuildProcess",
    "DriverCommand",
    "resolve_target_path",
    "spawn_build",
]
