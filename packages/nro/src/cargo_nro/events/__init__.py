from .decoder import DecodedEvent, decode_event, iter_build_events
from .models import (
    ArtifactEvent,
    ArtifactProfile,
    BuildEvent,
    BuildScriptEvent,
    CompilerMessageEvent,
    MalformedEvent,
    OtherEvent,
    Target,
    TargetKind,
)

__all__ = [
    "ArtifactEvent",
    "ArtifactProfile",
    "BuildEvent",
    "BuildScriptEvent",
    "CompilerMessageEvent",
    "DecodedEvent",
    "MalformedEvent",
    "OtherEvent",
    "Target",
    "TargetKind",
    "decode_event",
    "iter_build_events",
]
