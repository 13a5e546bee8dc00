from __future__ import annotations

from enum import Enum


class EventType(str, Enum):
    RUN_START = "run.start"
    RUN_FINISH = "run.finish"

    DRIVER_SPAWN = "driver.spawn"
    DRIVER_EXIT = "driver.exit"

    ARTIFACT_PACKAGED = "artifact.packaged"
    ARTIFACT_SKIPPED = "artifact.skipped"

    DIAGNOSTIC = "diagnostic"
    BUILD_SCRIPT = "build_script"

    EVENT_MALFORMED = "event.malformed"
    EVENT_IGNORED = "event.ignored"
