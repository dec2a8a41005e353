"""Quality scorer: one number summarizing an analysis report.

Formula:
    score = clamp(base − risk_penalty − overwhelm_penalty + recovery_bonus, 0, 100)
"""

from __future__ import annotations

from typing import Sequence

from codecheck.model import Severity
from codecheck.model.issue import Issue, SecurityFinding

# ── severity weights ────────────────────────────────────────────────
_SEVERITY_WEIGHT: dict[Severity, float] = {
    Severity.ERROR: 12.0,
    Severity.WARNING: 4.0,
    Severity.INFO: 0.5,
}

# Security findings weigh more than other issues of the same severity.
_SECURITY_FACTOR = 1.5

# ── volume factor (capped) ──────────────────────────────────────────
_VOLUME_CAP = 30

# ── overwhelm penalty ───────────────────────────────────────────────
_OVERWHELM_THRESHOLD = 15
_OVERWHELM_PER_ISSUE = 0.3
_OVERWHELM_CAP = 10

_BASE = 78

# ── recovery bonus (no Error issues) ────────────────────────────────
_RECOVERY_BONUS = 5


def _clamp(value: float, lo: int, hi: int) -> int:
    return max(lo, min(hi, int(round(value))))


def compute_quality_score(issues: Sequence[Issue]) -> int:
    """Return a 0-100 integer quality score.

    Higher is better: ≥75 green, 55-74 yellow, <55 red.
    """
    if not issues:
        return _BASE + _RECOVERY_BONUS

    risk = 0.0
    for issue in issues:
        weight = _SEVERITY_WEIGHT.get(issue.severity, 1.0)
        if isinstance(issue, SecurityFinding):
            weight *= _SECURITY_FACTOR
        risk += weight
    volume = min(len(issues), _VOLUME_CAP)
    risk_penalty = risk * (volume / _VOLUME_CAP)

    overwhelm = 0.0
    if len(issues) > _OVERWHELM_THRESHOLD:
        overwhelm = min(
            (len(issues) - _OVERWHELM_THRESHOLD) * _OVERWHELM_PER_ISSUE,
            _OVERWHELM_CAP,
        )

    has_errors = any(i.severity is Severity.ERROR for i in issues)
    recovery = 0 if has_errors else _RECOVERY_BONUS

    return _clamp(_BASE - risk_penalty - overwhelm + recovery, 0, 100)
