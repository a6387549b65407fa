"""Diagnostics sink shared by one generation run"""

import logging
import threading
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class Severity(IntEnum):
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    message: str
    source: Optional[str] = None

    def __str__(self) -> str:
        if self.source:
            return f"{self.source}: {self.message}"
        return self.message


class Diagnostics:
    """Collects diagnostics for a run and forwards each one to a logger.

    Every resolver, builder and the orchestrator take the sink explicitly, so
    two runs never share state. Recording is guarded by a lock because the
    orchestrator may build units on worker threads.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("bridgegen")
        self._records: list[Diagnostic] = []
        self._lock = threading.Lock()

    def report(self, severity: Severity, message: str, source: Optional[str] = None) -> Diagnostic:
        diagnostic = Diagnostic(severity, message, source)
        with self._lock:
            self._records.append(diagnostic)
        self.logger.log(int(severity), "%s", diagnostic)
        return diagnostic

    def debug(self, message: str, source: Optional[str] = None) -> Diagnostic:
        return self.report(Severity.DEBUG, message, source)

    def info(self, message: str, source: Optional[str] = None) -> Diagnostic:
        return self.report(Severity.INFO, message, source)

    def warning(self, message: str, source: Optional[str] = None) -> Diagnostic:
        return self.report(Severity.WARNING, message, source)

    def error(self, message: str, source: Optional[str] = None) -> Diagnostic:
        return self.report(Severity.ERROR, message, source)

    @property
    def records(self) -> list[Diagnostic]:
        with self._lock:
            return list(self._records)

    def of_severity(self, severity: Severity) -> list[Diagnostic]:
        return [d for d in self.records if d.severity == severity]

    @property
    def warnings(self) -> list[Diagnostic]:
        return self.of_severity(Severity.WARNING)

    @property
    def errors(self) -> list[Diagnostic]:
        return self.of_severity(Severity.ERROR)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
