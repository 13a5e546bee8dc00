from .events import EventType
from .render import RenderedDiagnostic, print_diagnostic, render_diagnostic
from .router import EventRouter, RouterConfig, RouteSummary
from .runner import build_and_package

__all__ = [
    "EventRouter",
    "EventType",
    "RenderedDiagnostic",
    "RouteSummary",
    "RouterConfig",
    "print_diagnostic",
    "render_diagnostic",
    "build_and_package",
]
