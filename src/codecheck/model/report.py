"""Per-module outcomes and the terminal ``AnalysisReport`` aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from . import ModuleStatus, QualityTier, RunState, Severity
from .issue import FixSuggestion, Issue, SecurityFinding

REPORT_SCHEMA_VERSION = "analysis_report_v1"


@dataclass(slots=True)
class ModuleResult:
    """What one analyzer module contributes: issues, suggestions, metrics."""

    issues: list[Issue] = field(default_factory=list)
    suggestions: list[FixSuggestion] = field(default_factory=list)
    metrics: dict[str, float] = field(default_factory=dict)

    def extend(self, other: "ModuleResult") -> None:
        self.issues.extend(other.issues)
        self.suggestions.extend(other.suggestions)
        self.metrics.update(other.metrics)


@dataclass(frozen=True, slots=True)
class ModuleOutcome:
    """Explicit result value for one module run, never an unwound exception."""

    module_id: str
    status: ModuleStatus
    result: Optional[ModuleResult] = None
    error: Optional[str] = None
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status is ModuleStatus.OK and self.result is not None


@dataclass(slots=True)
class AnalysisReport:
    """Assembled analysis result.

    Severity tallies are derived from ``issues`` so they can never drift from
    the issue list: every issue lands in exactly one bucket.
    """

    success: bool
    issues: list[Issue] = field(default_factory=list)
    metrics: dict[str, float] = field(default_factory=dict)
    suggestions: list[FixSuggestion] = field(default_factory=list)
    analysis_time_ms: int = 0
    error_message: Optional[str] = None
    quality_score: Optional[int] = None
    quality_tier: Optional[QualityTier] = None
    state: RunState = RunState.COMPLETED

    @classmethod
    def failure(cls, message: str, *, analysis_time_ms: int = 0) -> "AnalysisReport":
        return cls(
            success=False,
            error_message=message,
            analysis_time_ms=analysis_time_ms,
            state=RunState.ABORTED,
        )

    # ── tallies ─────────────────────────────────────────────────────

    def _count(self, severity: Severity) -> int:
        return sum(1 for i in self.issues if i.severity is severity)

    @property
    def error_count(self) -> int:
        return self._count(Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return self._count(Severity.WARNING)

    @property
    def info_count(self) -> int:
        return self._count(Severity.INFO)

    @property
    def security_findings(self) -> list[SecurityFinding]:
        return [i for i in self.issues if isinstance(i, SecurityFinding)]

    # ── serialisation ───────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """Produce the outbound report payload matching the bundled schema."""
        d: dict[str, Any] = {
            "schema_version": REPORT_SCHEMA_VERSION,
            "success": self.success,
            "issues": [i.to_dict() for i in self.issues],
            "security_findings": [f.to_dict() for f in self.security_findings],
            "metrics": dict(self.metrics),
            "suggestions": [s.to_dict() for s in self.suggestions],
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "info_count": self.info_count,
            "analysis_time_ms": self.analysis_time_ms,
        }
        if self.quality_score is not None:
            d["quality_score"] = self.quality_score
        if self.quality_tier is not None:
            d["quality_tier"] = self.quality_tier.value
        if not self.success:
            d["error_message"] = self.error_message or "analysis failed"
        return d
