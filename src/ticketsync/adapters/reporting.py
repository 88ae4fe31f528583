"""Error reporter adapters."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

DEFAULT_REPORT_LOGGER = "ticketsync.errors"


class LoggingErrorReporter:
    """Forward errors to a dedicated logger, e.g. one shipped to an alerting backend."""

    def __init__(self, logger_name: str = DEFAULT_REPORT_LOGGER) -> None:
        self._log = getLogger(logger_name)
        self.reported = 0

    def report_error(self, error: BaseException) -> None:
        self.reported += 1
        self._log.error(
            "Reported %s: %s",
            type(error).__name__,
            error,
            exc_info=(type(error), error, error.__traceback__),
        )


class NullErrorReporter:
    def report_error(self, error: BaseException) -> None:
        _ = error


if TYPE_CHECKING:
    from ticketsync.domain.ports import ErrorReporter

    _logging_check: ErrorReporter = LoggingErrorReporter()
    _null_check: ErrorReporter = NullErrorReporter()
