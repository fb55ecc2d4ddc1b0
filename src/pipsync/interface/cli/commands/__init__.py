"""
CLI command functions.

Each function receives the application container through the typer context.
"""

import logging
import sqlite3
from contextlib import contextmanager

import typer

from pipsync.domain.errors import UnknownIdentifierError
from pipsync.interface.cli.formatters.result_formatters import display_error

logger = logging.getLogger(__name__)

HANDLED_ERRORS = (ValueError, UnknownIdentifierError, OSError, sqlite3.Error)


@contextmanager
def command_errors(action: str):
    """Turn expected failures into an error message and exit code 1."""
    try:
        yield
    except HANDLED_ERRORS as e:
        logger.error("%s failed: %s", action, e)
        display_error(e)
        raise typer.Exit(1)
