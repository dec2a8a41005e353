"""Score → tier and report → exit-code policy.

The aggregator and the CLI derive tier and exit code from here instead of
hard-coding thresholds locally.
"""

from __future__ import annotations

from dataclasses import dataclass

from codecheck.model import QualityTier
from codecheck.model.report import AnalysisReport
from codecheck.utils.exit_codes import ExitCode


@dataclass(frozen=True, slots=True)
class ScoreThresholds:
    green_min: int = 75
    yellow_min: int = 55


DEFAULT_THRESHOLDS = ScoreThresholds()


def tier_from_score(
    score: int,
    *,
    thresholds: ScoreThresholds = DEFAULT_THRESHOLDS,
) -> QualityTier:
    """Policy: ≥75 green, 55-74 yellow, <55 red."""
    if score >= thresholds.green_min:
        return QualityTier.GREEN
    if score >= thresholds.yellow_min:
        return QualityTier.YELLOW
    return QualityTier.RED


def exit_code_for_report(report: AnalysisReport) -> ExitCode:
    """Fatal → 2, any Error issue → 1, otherwise 0."""
    if not report.success:
        return ExitCode.ERROR
    if report.error_count:
        return ExitCode.VIOLATION
    return ExitCode.SUCCESS
