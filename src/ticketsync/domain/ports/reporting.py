"""Port for forwarding errors to an external reporting service."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ErrorReporter(Protocol):
    """Fire-and-forget error sink. Implementations must not raise or block."""

    def report_error(self, error: BaseException) -> None: ...
