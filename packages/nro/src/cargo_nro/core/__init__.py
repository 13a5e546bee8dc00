from .config import Settings, load_settings
from .errors import (
    BuildDriverError,
    CargoNroError,
    MalformedDiagnosticError,
    OutputPathError,
    PackagingError,
    ProjectRootNotFoundError,
    StreamCorruptError,
)
from .logging import ILogger, bind, clear_bindings, configure_logging, get_logger
from .paths import (
    container_output_path,
    find_project_root,
    require_project_root,
    resolve_resource_dir,
)
from .time import format_duration_ms, monotonic_ms

__all__ = [
    "Settings",
    "load_settings",
    "CargoNroError",
    "StreamCorruptError",
    "ProjectRootNotFoundError",
    "OutputPathError",
    "MalformedDiagnosticError",
    "PackagingError",
    "BuildDriverError",
    "ILogger",
    "configure_logging",
    "get_logger",
    "bind",
    "clear_bindings",
    "find_project_root",
    "require_project_root",
    "resolve_resource_dir",
    "container_output_path",
    "monotonic_ms",
    "format_duration_ms",
]
