"""Complexity estimates: cyclomatic complexity and whole-snippet metrics.

Both are keyword counts over raw text, not control-flow graphs.
"""

from __future__ import annotations

import math
import re

from codecheck.analyzers import custom_issue
from codecheck.model import Severity
from codecheck.model.report import ModuleResult
from codecheck.rules import COMPLEXITY

DEFAULT_COMPLEXITY_THRESHOLD = 15

# "else if" is counted on top of its "if", as a chained branch.
_DECISION_RE = re.compile(
    r"\belse\s+if\b|\bif\b|\bwhile\b|\bfor\b|\bswitch\b|\bcase\b|\bcatch\b|&&|\|\|"
)


def count_decision_points(source: str) -> int:
    count = 0
    for m in _DECISION_RE.finditer(source):
        count += 2 if m.group(0).startswith("else") else 1
    return count


def check_cyclomatic(
    source: str,
    *,
    threshold: int = DEFAULT_COMPLEXITY_THRESHOLD,
) -> ModuleResult:
    complexity = 1 + count_decision_points(source)
    result = ModuleResult(metrics={"cyclomatic_complexity": float(complexity)})
    if complexity > threshold:
        result.issues.append(
            custom_issue(
                1,
                f"High cyclomatic complexity ({complexity}). Consider refactoring.",
                COMPLEXITY,
                Severity.WARNING,
            )
        )
    return result


# ── code metrics ────────────────────────────────────────────────────

_FUNCTION_RE = re.compile(
    r"\b(?!(?:if|for|while|switch|catch|return)\b)\w+\s*\([^()]*\)\s*(?:const\s*)?(?:noexcept\s*)?\{"
)
_CLASS_RE = re.compile(r"\b(?:class|struct)\s+\w+")
_INCLUDE_RE = re.compile(r"^\s*#\s*include\b", re.MULTILINE)
_COMMENT_RE = re.compile(r"//|/\*")


def _max_nesting_depth(source: str) -> int:
    depth = deepest = 0
    for ch in source:
        if ch == "{":
            depth += 1
            deepest = max(deepest, depth)
        elif ch == "}":
            depth = max(0, depth - 1)
    return deepest


def check_code_metrics(source: str) -> ModuleResult:
    """Size and shape metrics; never emits issues."""
    lines = source.splitlines()
    loc = sum(1 for line in lines if line.strip())
    comment_lines = sum(1 for line in lines if _COMMENT_RE.search(line))
    decisions = count_decision_points(source)

    metrics = {
        "lines_of_code": float(loc),
        "function_count": float(len(_FUNCTION_RE.findall(source))),
        "class_count": float(len(_CLASS_RE.findall(source))),
        "include_count": float(len(_INCLUDE_RE.findall(source))),
        "comment_ratio": round(100.0 * comment_lines / len(lines), 2) if lines else 0.0,
        "nesting_depth": float(_max_nesting_depth(source)),
        "cognitive_complexity": round(decisions * 1.2, 2),
        "maintainability_index": round(
            max(0.0, 171 - 5.2 * math.log(max(loc, 1)) - 0.23 * decisions), 2
        ),
    }
    return ModuleResult(metrics=metrics)
