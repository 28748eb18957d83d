"""Error taxonomy for the admin layer.

Every error carries a stable ``code`` (the only thing an HTTP caller sees)
and the ``status_code`` the dispatcher maps it to.
"""

from __future__ import annotations

from typing import Optional


class AdminError(Exception):
    code = "internal_error"
    status_code = 500

    def __init__(self, message: str = "", *, cause: Optional[BaseException] = None):
        super().__init__(message or self.code)
        self.cause = cause


class BadInput(AdminError):
    """Unreadable or unparseable request body / identifier."""
    code = "bad_input"
    status_code = 400


class EngineConnectionError(AdminError):
    """The engine could not be opened or did not answer the probe."""
    code = "connection_error"
    status_code = 500


class InvalidConnectionString(EngineConnectionError):
    """The driver refused to open a handle from the given string."""
    code = "invalid_connection_string"
    status_code = 400


class NoActiveConnection(AdminError):
    code = "no_active_connection"
    status_code = 409


class CursorError(AdminError):
    """Cursor metadata unreadable or the cursor broke mid-stream."""
    code = "cursor_error"
    status_code = 500


class StatementError(AdminError):
    """The engine rejected a statement."""
    code = "statement_error"
    status_code = 500


class StatementTimeout(StatementError):
    code = "statement_timeout"
    status_code = 504


class RowDecodeError(AdminError):
    """A single row could not be decoded. Never escapes the transcoder."""
    code = "row_decode_error"
