"""Call-site capture for trace entries.

The provider walks outward from its caller and reports the first frame that
does not belong to this package, so helpers such as ``with_trace()`` or
``stack()`` always record the application's call site rather than their own.
"""

from __future__ import annotations

import inspect
from pathlib import Path
from types import FrameType

from typed_errors.core.trace import UNKNOWN_TRACE, TraceEntry

_PACKAGE = "typed_errors"


def _is_internal(frame: FrameType) -> bool:
    module = frame.f_globals.get("__name__", "")
    return module == _PACKAGE or module.startswith(_PACKAGE + ".")


def _describe(frame: FrameType) -> TraceEntry:
    code = frame.f_code
    function = getattr(code, "co_qualname", code.co_name)
    return TraceEntry(
        file=Path(code.co_filename).name,
        function=function,
        line=frame.f_lineno,
    )


def current_location(skip: int = 0) -> TraceEntry:
    """Return the call site that requested a trace entry.

    Args:
        skip: Additional application frames to skip past the first
            non-library frame (useful from inside wrapper helpers).

    Returns:
        TraceEntry for the resolved frame, or ``UNKNOWN_TRACE`` when the
        call stack is too shallow.
    """

    frame: FrameType | None = inspect.currentframe()
    try:
        while frame is not None and _is_internal(frame):
            frame = frame.f_back
        for _ in range(max(skip, 0)):
            if frame is None:
                break
            frame = frame.f_back
        if frame is None:
            return UNKNOWN_TRACE
        return _describe(frame)
    finally:
        # Break the frame reference cycle
        del frame


def trace() -> TraceEntry:
    """Capture the caller's location for ``stack()`` or construction."""

    return current_location()
