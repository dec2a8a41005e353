"""Diagnostic aggregator: folds module outcomes into one ``AnalysisReport``.

Issues keep the order in which modules were scheduled; they are not
re-sorted.  Metrics merge by insertion: a later metric with the same name
overwrites an earlier one (each name has exactly one producer).
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from codecheck.insights.score import compute_quality_score
from codecheck.model import RunState, Severity
from codecheck.model.issue import FixSuggestion, Issue
from codecheck.model.report import AnalysisReport, ModuleOutcome
from codecheck.model.request import AnalysisOptions
from codecheck.policy.thresholds import tier_from_score

_logger = logging.getLogger(__name__)


def apply_options(issues: Iterable[Issue], options: AnalysisOptions) -> list[Issue]:
    """Strict promotion first, then the include filters."""
    out: list[Issue] = []
    for issue in issues:
        if options.strict_mode and issue.severity is Severity.WARNING:
            issue = issue.with_severity(Severity.ERROR)
        if issue.severity is Severity.WARNING and not options.include_warnings:
            continue
        if issue.severity is Severity.INFO and not options.include_hints:
            continue
        out.append(issue)
    return out


def _kept_suggestions(
    suggestions: Iterable[FixSuggestion],
    issues: Sequence[Issue],
    options: AnalysisOptions,
) -> list[FixSuggestion]:
    if not options.include_hints:
        return []
    live = {i.fingerprint for i in issues}
    return [s for s in suggestions if s.issue_ref in live]


def merge(
    outcomes: Iterable[ModuleOutcome],
    options: AnalysisOptions,
    *,
    analysis_time_ms: int = 0,
) -> AnalysisReport:
    """Merge successful outcomes; failed ones contribute nothing."""
    issues: list[Issue] = []
    suggestions: list[FixSuggestion] = []
    metrics: dict[str, float] = {}

    for outcome in outcomes:
        if not outcome.ok:
            _logger.debug("Module '%s' contributed nothing (%s)", outcome.module_id, outcome.status.value)
            continue
        issues.extend(outcome.result.issues)
        suggestions.extend(outcome.result.suggestions)
        metrics.update(outcome.result.metrics)

    issues = apply_options(issues, options)
    score = compute_quality_score(issues)
    return AnalysisReport(
        success=True,
        issues=issues,
        metrics=metrics,
        suggestions=_kept_suggestions(suggestions, issues, options),
        analysis_time_ms=analysis_time_ms,
        quality_score=score,
        quality_tier=tier_from_score(score),
        state=RunState.COMPLETED,
    )
