"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It pins the rendering settings to their defaults so a developer's
environment cannot change expected error strings.
"""

import os

# CRITICAL: Set these before any imports that might build settings
os.environ.pop("TYPED_ERRORS_ENV_FILE", None)
os.environ["TYPED_ERRORS_MAX_CAUSE_LENGTH"] = "200"
os.environ["TYPED_ERRORS_ELLIPSIS"] = "..."

import logging
from io import StringIO

import pytest

from typed_errors.core.logging import JsonFormatter, TypedErrorFilter


@pytest.fixture
def log_stream():
    """Logger writing JSON lines through the typed-error filter into a buffer."""

    logger = logging.getLogger("tests.typed_errors")
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(TypedErrorFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    yield logger, stream

    logger.handlers.clear()
