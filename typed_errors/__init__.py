"""Typed error values with status codes, causes and call-site traces.

Typical use::

    from typed_errors import NotFoundError, stack, with_cause, with_message, with_trace

    def load_user(user_id):
        try:
            return repo.get(user_id)
        except LookupError as exc:
            raise NotFoundError(with_cause(exc), with_message("user not found"), with_trace())

    def handler(user_id):
        try:
            return load_user(user_id)
        except NotFoundError as err:
            raise stack(err)
"""

from __future__ import annotations

import logging

from typed_errors.core.accessors import (
    get_cause,
    get_code,
    get_message,
    get_stack,
    get_stack_json,
    get_trace,
    get_wrapped_cause,
    render_full,
    stack,
    stack_with_message,
    to_json,
    to_payload,
    unwrap,
)
from typed_errors.core.errors import (
    BadRequestError,
    Category,
    ConflictError,
    ErrorRecord,
    FatalError,
    InternalError,
    NoContentError,
    NotFoundError,
    TypedError,
    UnauthorizedError,
    category_of,
    default_code,
    find,
    is_bad_request,
    is_category,
    is_caused_by,
    is_conflict,
    is_fatal,
    is_internal,
    is_no_content,
    is_not_found,
    is_unauthorized,
    iter_chain,
    new_error,
)
from typed_errors.core.options import (
    CauseOption,
    CodeOption,
    MessageOption,
    Option,
    TraceOption,
    with_cause,
    with_code,
    with_message,
    with_messagef,
    with_trace,
)
from typed_errors.core.trace import EMPTY_TRACE, UNKNOWN_TRACE, TraceEntry
from typed_errors.schemas.payload import ErrorPayload, TraceEntrySchema
from typed_errors.utils.location import current_location, trace

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BadRequestError",
    "Category",
    "CauseOption",
    "CodeOption",
    "ConflictError",
    "EMPTY_TRACE",
    "ErrorPayload",
    "ErrorRecord",
    "FatalError",
    "InternalError",
    "MessageOption",
    "NoContentError",
    "NotFoundError",
    "Option",
    "TraceEntry",
    "TraceEntrySchema",
    "TraceOption",
    "TypedError",
    "UNKNOWN_TRACE",
    "UnauthorizedError",
    "category_of",
    "current_location",
    "default_code",
    "find",
    "get_cause",
    "get_code",
    "get_message",
    "get_stack",
    "get_stack_json",
    "get_trace",
    "get_wrapped_cause",
    "is_bad_request",
    "is_category",
    "is_caused_by",
    "is_conflict",
    "is_fatal",
    "is_internal",
    "is_no_content",
    "is_not_found",
    "is_unauthorized",
    "iter_chain",
    "new_error",
    "render_full",
    "stack",
    "stack_with_message",
    "to_json",
    "to_payload",
    "trace",
    "unwrap",
    "with_cause",
    "with_code",
    "with_message",
    "with_messagef",
    "with_trace",
]
