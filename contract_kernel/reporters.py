# contract_kernel/reporters.py
"""
Validation reporters - sinks for soft-mode failure lists.

Reporters only render what they are given: they never re-run predicates
and never reorder the list.

- ConsoleReporter: rich-rendered lines on the terminal (default)
- LoggingReporter: same content through a logging.Logger at WARNING
- CallbackReporter: hands the list to a caller-supplied channel
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from .config import settings
from .validation import FailureRecord, ValidationLevel


logger = logging.getLogger(__name__)


class ValidationReporter(ABC):
    """Base class for failure reporters."""

    @abstractmethod
    def report(self, failures: Sequence[FailureRecord]) -> None:
        """Render an ordered list of failures."""


def summary_line(failures: Sequence[FailureRecord]) -> str:
    """Header naming how many errors and warnings follow."""
    errors = sum(1 for f in failures if f.level is ValidationLevel.ERROR)
    warnings = len(failures) - errors
    parts = [
        f"{count} {noun}" if count == 1 else f"{count} {noun}s"
        for count, noun in ((errors, "error"), (warnings, "warning"))
        if count
    ]
    if not parts:
        return "Validation reported no issues"
    return f"Validation reported {' and '.join(parts)}:"


class ConsoleReporter(ValidationReporter):
    """Prints failures to the terminal with rich."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console if console is not None else Console()

    def report(self, failures: Sequence[FailureRecord]) -> None:
        if not failures:
            return
        self.console.print(f"[bold yellow]{summary_line(failures)}[/bold yellow]")
        for failure in failures:
            style = "red" if failure.level is ValidationLevel.ERROR else "yellow"
            self.console.print(f"[{style}]- {escape(failure.describe())}[/{style}]")


class LoggingReporter(ValidationReporter):
    """Routes failures through a logger at WARNING severity."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger if logger is not None else logging.getLogger(settings.reporter_logger_name)

    def report(self, failures: Sequence[FailureRecord]) -> None:
        if not failures:
            return
        self.logger.warning(summary_line(failures))
        for failure in failures:
            self.logger.warning(
                f"- {failure.describe()}",
                extra={
                    "validation_code": failure.code,
                    "validation_level": failure.level.value,
                },
            )


class CallbackReporter(ValidationReporter):
    """Forwards failures to a callable, e.g. a queue's put or a metrics hook."""

    def __init__(self, callback: Callable[[List[FailureRecord]], None]):
        self.callback = callback

    def report(self, failures: Sequence[FailureRecord]) -> None:
        if failures:
            self.callback(list(failures))


REPORTERS = {
    "console": ConsoleReporter,
    "logging": LoggingReporter,
}


def get_default_reporter() -> ValidationReporter:
    """Build the reporter named by settings.default_reporter."""
    name = settings.default_reporter.lower()
    if name not in REPORTERS:
        raise ValueError(
            f"Unknown reporter: {settings.default_reporter}. "
            f"Available: {', '.join(sorted(REPORTERS))}"
        )
    logger.debug(f"[REPORTER] Using {name} reporter")
    return REPORTERS[name]()


__all__ = [
    "ValidationReporter",
    "ConsoleReporter",
    "LoggingReporter",
    "CallbackReporter",
    "get_default_reporter",
    "summary_line",
]
