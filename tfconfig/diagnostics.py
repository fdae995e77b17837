"""
Diagnostics

Errors and warnings recorded while loading a module. Problems are collected
here instead of being raised so that a partially valid module can still be
inspected.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, List, Optional

if TYPE_CHECKING:
    from tfconfig.module import SourcePos


class DiagSeverity(str, Enum):
    """Kind of a diagnostic record."""

    ERROR = "error"
    WARNING = "warning"


@dataclass
class Diagnostic:
    """A single error or warning."""

    severity: DiagSeverity
    summary: str
    detail: str = ""
    pos: Optional["SourcePos"] = None

    def __str__(self) -> str:
        text = f"{self.severity.value.capitalize()}: {self.summary}"
        if self.pos is not None:
            text = f"{text} ({self.pos.filename}:{self.pos.line})"
        if self.detail:
            text = f"{text}\n  {self.detail}"
        return text


class Diagnostics(List[Diagnostic]):
    """Ordered collection of diagnostics.

    Records keep the order they were appended in and are never deduplicated.
    Not safe for concurrent mutation.
    """

    def error(self, summary: str, detail: str = "", pos: Optional["SourcePos"] = None) -> None:
        self.append(Diagnostic(DiagSeverity.ERROR, summary, detail, pos))

    def warning(self, summary: str, detail: str = "", pos: Optional["SourcePos"] = None) -> None:
        self.append(Diagnostic(DiagSeverity.WARNING, summary, detail, pos))

    def has_errors(self) -> bool:
        """Return True if any record is an error."""
        return any(d.severity == DiagSeverity.ERROR for d in self)

    def errors(self) -> List[Diagnostic]:
        return [d for d in self if d.severity == DiagSeverity.ERROR]

    def warnings(self) -> List[Diagnostic]:
        return [d for d in self if d.severity == DiagSeverity.WARNING]


class DiagnosticsError(Exception):
    """Raised by callers that decide to abort on error diagnostics."""

    def __init__(self, diagnostics: Iterable[Diagnostic]):
        self.diagnostics = Diagnostics(diagnostics)
        messages = [str(d) for d in self.diagnostics.errors()] or [str(d) for d in self.diagnostics]
        super().__init__("\n".join(messages))
