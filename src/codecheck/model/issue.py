"""Issue: the canonical diagnostic record every analyzer module emits into."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, replace

from . import RiskLevel, Severity


@dataclass(frozen=True, slots=True)
class Issue:
    """Immutable, tool-agnostic diagnostic.

    ``source_tool`` records provenance (``clang-tidy``, ``cppcheck`` or
    ``custom`` for in-process checks) and is never lost in the aggregate.
    """

    file: str
    line: int
    column: int
    severity: Severity
    message: str
    rule: str
    source_tool: str

    @property
    def fingerprint(self) -> str:
        return make_fingerprint(self.rule, self.file, self.line, self.message)

    def with_severity(self, severity: Severity) -> "Issue":
        return replace(self, severity=severity)

    # ── serialisation ───────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "severity": self.severity.value,
            "message": self.message,
            "rule": self.rule,
            "source_tool": self.source_tool,
            "fingerprint": self.fingerprint,
        }


@dataclass(frozen=True, slots=True)
class SecurityFinding(Issue):
    """An ``Issue`` raised by a security check, with vulnerability metadata."""

    vulnerability_type: str
    risk_level: RiskLevel

    def to_dict(self) -> dict:
        d = Issue.to_dict(self)
        d["vulnerability_type"] = self.vulnerability_type
        d["risk_level"] = self.risk_level.value
        return d


@dataclass(frozen=True, slots=True)
class FixSuggestion:
    """A before/after rewrite proposed for one issue."""

    issue_ref: str          # fingerprint of the issue this fixes
    before_snippet: str
    after_snippet: str
    rationale: str

    def to_dict(self) -> dict:
        return {
            "issue_ref": self.issue_ref,
            "before_snippet": self.before_snippet,
            "after_snippet": self.after_snippet,
            "rationale": self.rationale,
        }


def make_fingerprint(rule: str, file: str, line: int, message: str) -> str:
    """Deterministic issue fingerprint: sha256(rule|file|line|message)."""
    file = file.replace("\\", "/")
    payload = "|".join([rule, file, str(line), message.strip()])
    return "sha256:" + hashlib.sha256(payload.encode()).hexdigest()
