from __future__ import annotations

import json
from typing import IO, Any, Iterable, Iterator, Union

from cargo_nro.core.errors import StreamCorruptError
from pydantic import ValidationError

from .models import (
    BUILD_EVENT_ADAPTER,
    KNOWN_REASONS,
    ArtifactEvent,
    BuildScriptEvent,
    CompilerMessageEvent,
    MalformedEvent,
    OtherEvent,
)

DecodedEvent = Union[
    ArtifactEvent, CompilerMessageEvent, BuildScriptEvent, OtherEvent, MalformedEvent
]

_JSON = json.JSONDecoder()


def _summarize(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors(include_url=False):
        loc = ".".join(str(x) for x in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def decode_event(obj: Any, *, line_no: int = 0) -> DecodedEvent:
    """
    Classify one decoded JSON value.

    The `reason` discriminant is checked before any field validation so that
    event kinds we do not act on never count as failures.
    """
    reason = obj.get("reason") if isinstance(obj, dict) else None
    if not isinstance(reason, str) or reason not in KNOWN_REASONS:
        return OtherEvent(reason=reason if isinstance(reason, str) else None)

    try:
        return BUILD_EVENT_ADAPTER.validate_python(obj)
    except ValidationError as e:
        return MalformedEvent(reason=reason, line_no=line_no, error=_summarize(e))


def _values_in_line(text: str, *, line_no: int) -> Iterator[Any]:
    # one line normally carries one value; tolerate several separated by spaces
    idx = 0
    end = len(text)
    while True:
        while idx < end and text[idx].isspace():
            idx += 1
        if idx >= end:
            return
        try:
            value, idx = _JSON.raw_decode(text, idx)
        except json.JSONDecodeError as e:
            raise StreamCorruptError(f"invalid JSON: {e}", line_no=line_no) from e
        yield value


def iter_build_events(stream: IO[bytes] | Iterable[bytes]) -> Iterator[DecodedEvent]:
    """
    Lazily decode a newline-delimited JSON build event stream.

    Each value is yielded before the next line is read, so this blocks on a
    live pipe only until the driver emits its next event. The iterator is
    consumed destructively and ends when the stream is exhausted.

    Raises StreamCorruptError for invalid JSON, invalid UTF-8 or a failed read.
    """
    line_no = 0
    lines = iter(stream)
    while True:
        try:
            raw = next(lines)
        except StopIteration:
            return
        except OSError as e:
            raise StreamCorruptError(f"read failed: {e}", line_no=line_no + 1) from e

        line_no += 1
        try:
            text = raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)
        except UnicodeDecodeError as e:
            raise StreamCorruptError(f"invalid UTF-8: {e}", line_no=line_no) from e

        for value in _values_in_line(text, line_no=line_no):
            yield decode_event(value, line_no=line_no)
