"""Result objects and diagnostic types for XML pretty printing.

This module defines the result objects returned by formatting operations,
carrying the formatted text together with diagnostics and performance
information.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from xml_pretty_printer.syntax.nodes import Document


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Something was skipped or degraded
    ERROR = auto()      # Error conditions


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class FormatMetrics:
    """Performance and volume metrics for one formatting pass."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    elements_printed: int = 0
    fragments_collected: int = 0
    ignore_ranges_spliced: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms


@dataclass
class FormatResult:
    """Outcome of formatting a single document."""

    formatted: str
    original: str
    document: Optional["Document"] = None
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: FormatMetrics = field(default_factory=FormatMetrics)
    correlation_id: Optional[str] = None

    @property
    def changed(self) -> bool:
        """Check if formatting changed the input."""
        return self.formatted != self.original

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Add a diagnostic entry to the result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                position=position,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self, severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get all diagnostics of the given severity."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def summary(self) -> Dict[str, Any]:
        """Get a JSON-friendly summary of the result."""
        return {
            "changed": self.changed,
            "processing_time_ms": self.metrics.processing_time_ms,
            "characters_processed": self.metrics.characters_processed,
            "elements_printed": self.metrics.elements_printed,
            "ignore_ranges_spliced": self.metrics.ignore_ranges_spliced,
            "diagnostics": [
                {
                    "severity": diag.severity.name,
                    "message": diag.message,
                    "component": diag.component,
                }
                for diag in self.diagnostics
            ],
        }
