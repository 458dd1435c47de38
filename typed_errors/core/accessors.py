"""Accessors that work on any error value.

Each function accepts a typed error, a plain exception or None and has a
defined result for all three, so callers can use them unconditionally on
errors that never passed through this library.
"""

from __future__ import annotations

import json
import logging
from typing import TypeVar

from typed_errors.core.errors import TypedError
from typed_errors.core.trace import EMPTY_TRACE, TraceEntry
from typed_errors.schemas.payload import ErrorPayload, TraceEntrySchema

logger = logging.getLogger(__name__)

ErrT = TypeVar("ErrT", bound=BaseException)


def stack(err: ErrT | None, entry: TraceEntry | None = None) -> ErrT | None:
    """Append a trace entry to a typed error.

    Args:
        err: Error being propagated.
        entry: Call site to record; the caller's location when omitted.

    Returns:
        ``err`` itself. Plain exceptions and None pass through untouched.
    """

    if isinstance(err, TypedError):
        err.push(entry)
    elif err is not None:
        logger.debug(
            "errors.stack_skipped",
            extra={"error_type": type(err).__name__},
        )
    return err


def stack_with_message(
    err: ErrT | None, message: str, entry: TraceEntry | None = None
) -> ErrT | None:
    """Append a trace entry and replace the stack message in one step."""

    if isinstance(err, TypedError):
        err.push(entry, message)
    elif err is not None:
        logger.debug(
            "errors.stack_skipped",
            extra={"error_type": type(err).__name__},
        )
    return err


def get_cause(err: BaseException | None) -> str:
    """Cause text, falling back to the message and then to ``str(err)``."""

    if err is None:
        return ""
    if not isinstance(err, TypedError):
        return str(err)
    return err.cause or err.message or str(err)


def get_message(err: BaseException | None) -> str:
    if err is None:
        return ""
    if isinstance(err, TypedError) and err.message:
        return err.message
    return str(err)


def get_code(err: BaseException | None) -> int:
    """Resolved status code; 0 for plain exceptions and None."""

    if isinstance(err, TypedError):
        return err.code
    return 0


def get_trace(err: BaseException | None) -> TraceEntry:
    if isinstance(err, TypedError):
        return err.trace
    return EMPTY_TRACE


def get_stack(err: BaseException | None) -> list[TraceEntry]:
    """Copy of the trace history; empty for anything but a typed error."""

    if isinstance(err, TypedError):
        return err.stack
    return []


def get_stack_json(err: BaseException | None) -> str:
    """Trace history as a JSON list of ``{file, function, line}`` objects."""

    if err is None:
        return ""
    entries = [
        TraceEntrySchema.model_validate(entry).model_dump()
        for entry in get_stack(err)
    ]
    return json.dumps(entries)


def get_wrapped_cause(err: BaseException | None) -> BaseException | None:
    """The wrapped exception, or ``err`` itself when nothing is wrapped."""

    if isinstance(err, TypedError) and err.wrapped is not None:
        return err.wrapped
    return err


def unwrap(err: BaseException | None) -> BaseException | None:
    """One level down the chain: the wrapped error, or ``__cause__``."""

    if err is None:
        return None
    if isinstance(err, TypedError):
        return err.unwrap()
    return err.__cause__


def render_full(err: BaseException | None) -> str:
    """Multi-line dump for typed errors; ``str(err)`` for anything else."""

    if err is None:
        return ""
    if isinstance(err, TypedError):
        return err.render()
    return str(err)


def to_payload(err: BaseException | None) -> ErrorPayload | None:
    """Serializable snapshot of a typed error's record."""

    if not isinstance(err, TypedError):
        return None

    record = err.record
    entries, stack_message = record.snapshot()
    return ErrorPayload(
        cause=record.cause,
        message=record.message,
        stack_message=stack_message,
        code=record.status_code,
        trace=TraceEntrySchema.model_validate(record.trace),
        stack=[TraceEntrySchema.model_validate(entry) for entry in entries],
    )


def to_json(err: BaseException | None) -> str:
    payload = to_payload(err)
    if payload is None:
        return ""
    return payload.model_dump_json()
