"""
Errors raised from command bodies.

``run_command`` turns a ``CLIError`` into a failed ``CommandResult`` with the
error's own exit code; API and client errors are mapped in ``context.py``.
"""

from __future__ import annotations

import os
from typing import Any

USAGE_EXIT_CODE = 2


class CLIError(Exception):
    """A command failure that already knows its exit code and ``ErrorInfo.type``."""

    def __init__(
        self,
        message: str,
        *,
        exit_code: int = 1,
        error_type: str = "error",
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code
        self.error_type = error_type
        self.hint = hint
        self.details = details

    @classmethod
    def usage(cls, message: str, *, hint: str | None = None) -> CLIError:
        """Bad flags or arguments that click itself cannot reject."""
        return cls(message, exit_code=USAGE_EXIT_CODE, error_type="usage_error", hint=hint)

    @classmethod
    def io(
        cls,
        action: str,
        path: str | os.PathLike[str],
        exc: OSError,
        *,
        exit_code: int = 1,
    ) -> CLIError:
        """A local file could not be read or written (never a Consul failure)."""
        reason = exc.strerror or str(exc)
        return cls(
            f"Cannot {action} {path}: {reason}",
            exit_code=exit_code,
            error_type="io_error",
            details={"path": str(path)},
        )

    def __str__(self) -> str:
        return self.message
