"""Diagnostic models for credential health checks.

These models capture the outcome of each credential check and the folded
verdict produced by :class:`~stax_credentials.diagnostics.DiagnosticsAggregator`.
They are recomputed on every run and never cached.

Example:
    Inspecting a report::

        report = DiagnosticsAggregator(settings).run()
        if report.overall_status is DiagnosticStatus.ERROR:
            for action in report.recommended_actions:
                print(action)
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from stax_credentials.enums import DiagnosticStatus


@dataclass
class DiagnosticResult:
    """Result of a single credential check."""

    name: str
    """Display name of the check, e.g. "Keychain Storage"."""

    status: DiagnosticStatus
    """ok, warning or error."""

    message: str
    """One-line summary of what the check found."""

    details: list[str] = field(default_factory=list)
    """Supporting lines: locations, permission modes, fix commands."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "details": list(self.details),
        }


def fold_status(statuses: Iterable[DiagnosticStatus]) -> DiagnosticStatus:
    """Fold statuses into the worst one present.

    error beats warning beats ok; the order of the input does not matter.
    An empty input folds to ok.
    """
    worst = DiagnosticStatus.OK
    for status in statuses:
        if status.severity > worst.severity:
            worst = status
    return worst


@dataclass
class CredentialDiagnostics:
    """Complete credential diagnostic verdict.

    Individual results stay inspectable in battery order; the overall status
    and recommendations are derived from them.
    """

    results: list[DiagnosticResult] = field(default_factory=list)
    recommended_actions: list[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def overall_status(self) -> DiagnosticStatus:
        return fold_status(r.status for r in self.results)

    def get(self, name: str) -> DiagnosticResult | None:
        """Look up a result by check name."""
        for result in self.results:
            if result.name == name:
                return result
        return None

    def results_by_status(self) -> dict[DiagnosticStatus, list[DiagnosticResult]]:
        """Group results by status, worst first."""
        grouped: dict[DiagnosticStatus, list[DiagnosticResult]] = {
            status: [] for status in reversed(list(DiagnosticStatus))
        }
        for result in self.results:
            grouped[result.status].append(result)
        return grouped

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "overall_status": self.overall_status.value,
            "results": [r.to_dict() for r in self.results],
            "recommended_actions": list(self.recommended_actions),
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string.

        Args:
            indent: Number of spaces for indentation
        """
        return json.dumps(self.to_dict(), indent=indent)
