"""Analyzer modules: the unit the orchestrator schedules.

Two kinds share one calling convention (``Analyzer`` protocol):

1. **Rule checks**: pure functions ``check(source_text) -> ModuleResult``
   wrapped in ``RuleCheck``.  Textual heuristics only; they never assume
   the input parses and never touch the filesystem.
2. **External tools**: ``ExternalToolAnalyzer`` (see ``external``), which
   run a binary against the session's source file and parse its output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from codecheck.core.config import EngineConfig
from codecheck.model import Severity
from codecheck.model.issue import Issue
from codecheck.model.report import ModuleResult
from codecheck.model.request import SOURCE_FILENAME, AnalysisOptions, AnalysisSession

# ``source_tool`` for every in-process check.
CUSTOM_TOOL = "custom"


@dataclass(frozen=True, slots=True)
class AnalysisContext:
    """Everything one module run may read.  Shared read-only across modules."""

    source_text: str
    session: AnalysisSession
    options: AnalysisOptions
    config: EngineConfig


class Analyzer(Protocol):
    """Every analyzer module exposes ``id``, ``version``, and ``run()``."""

    id: str
    version: str

    def run(self, ctx: AnalysisContext) -> ModuleResult:
        ...


CheckFn = Callable[[str], ModuleResult]


@dataclass(frozen=True)
class RuleCheck:
    """Adapts a pure text check to the ``Analyzer`` protocol."""

    id: str
    check: CheckFn
    version: str = "1.0.0"

    def run(self, ctx: AnalysisContext) -> ModuleResult:
        return self.check(ctx.source_text)


# ── helpers shared by the rule checks ───────────────────────────────


def line_at(text: str, offset: int) -> int:
    """1-based line number of *offset*, counting newlines before it."""
    return text.count("\n", 0, offset) + 1


def column_at(text: str, offset: int) -> int:
    """1-based column of *offset* within its line."""
    return offset - (text.rfind("\n", 0, offset) + 1) + 1


def custom_issue(
    line: int,
    message: str,
    rule: str,
    severity: Severity,
    *,
    column: int = 1,
) -> Issue:
    return Issue(
        file=SOURCE_FILENAME,
        line=line,
        column=column,
        severity=severity,
        message=message,
        rule=rule,
        source_tool=CUSTOM_TOOL,
    )
