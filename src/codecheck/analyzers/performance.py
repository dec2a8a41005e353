"""Performance checks: inefficient idioms, oversized arrays, deep loop nests."""

from __future__ import annotations

import re

from codecheck.analyzers import column_at, custom_issue, line_at
from codecheck.model import Severity
from codecheck.model.issue import FixSuggestion
from codecheck.model.report import ModuleResult
from codecheck.rules import ALGORITHM_COMPLEXITY, MEMORY_USAGE, PERFORMANCE

DEFAULT_LARGE_ARRAY_THRESHOLD = 10_000

# ── Inefficient idioms (first match per pattern) ────────────────────

_VECTOR_DECL_RE = re.compile(r"\bvector\s*<[^;{}]*>\s+(\w+)\s*;")
_STRING_CONCAT_RE = re.compile(r"\bstring\s+\w+\s*=\s*\w+\s*\+\s*\w+")
_SIZE_IN_LOOP_RE = re.compile(r"\bfor\s*\([^;{}]*;[^;{}]*\.\s*size\s*\(\s*\)")


def _unreserved_push_back(source: str) -> tuple[re.Match, re.Match] | None:
    """First vector declaration that is filled by push_back but never reserved."""
    for decl in _VECTOR_DECL_RE.finditer(source):
        name = re.escape(decl.group(1))
        push = re.compile(rf"\b{name}\s*\.\s*push_back\s*\(").search(source, decl.end())
        if push is None:
            continue
        if re.search(rf"\b{name}\s*\.\s*reserve\s*\(", source):
            continue
        return decl, push
    return None


def check_inefficiencies(source: str) -> ModuleResult:
    result = ModuleResult()

    found = _unreserved_push_back(source)
    if found is not None:
        decl, push = found
        issue = custom_issue(
            line_at(source, push.start()),
            "Consider reserving vector capacity before push_back",
            PERFORMANCE,
            Severity.INFO,
            column=column_at(source, push.start()),
        )
        result.issues.append(issue)
        before = decl.group(0)
        result.suggestions.append(
            FixSuggestion(
                issue_ref=issue.fingerprint,
                before_snippet=before,
                after_snippet=f"{before}\n{decl.group(1)}.reserve(expected_size);",
                rationale="Pre-allocating vector capacity avoids repeated reallocation",
            )
        )

    m = _STRING_CONCAT_RE.search(source)
    if m is not None:
        result.issues.append(
            custom_issue(
                line_at(source, m.start()),
                "Consider using string streams or reserve() for concatenation",
                PERFORMANCE,
                Severity.INFO,
                column=column_at(source, m.start()),
            )
        )

    m = _SIZE_IN_LOOP_RE.search(source)
    if m is not None:
        result.issues.append(
            custom_issue(
                line_at(source, m.start()),
                "Cache container size in loops",
                PERFORMANCE,
                Severity.INFO,
                column=column_at(source, m.start()),
            )
        )
    return result


# ── Large fixed-size arrays ─────────────────────────────────────────

_ARRAY_SIZE_RE = re.compile(r"\[\s*(\d+)\s*\]")
# Longer sizes are summarised in messages rather than spelled out.
_MAX_SHOWN_DIGITS = 12


def check_large_arrays(
    source: str,
    *,
    threshold: int = DEFAULT_LARGE_ARRAY_THRESHOLD,
) -> ModuleResult:
    result = ModuleResult()
    for m in _ARRAY_SIZE_RE.finditer(source):
        digits = m.group(1).lstrip("0") or "0"
        # Compare by length first; huge literals never reach int().
        if len(digits) <= len(str(threshold)) and int(digits) <= threshold:
            continue
        size = digits if len(digits) <= _MAX_SHOWN_DIGITS else f"{len(digits)}-digit"
        result.issues.append(
            custom_issue(
                line_at(source, m.start()),
                f"Large static array ({size} elements). Consider dynamic allocation.",
                MEMORY_USAGE,
                Severity.WARNING,
                column=column_at(source, m.start()),
            )
        )
    return result


# ── Triple-nested loops ─────────────────────────────────────────────

# Loop header; tolerates one level of nested parentheses in the header.
_LOOP_HEADER = r"\b(?:for|while)\s*\((?:[^()]|\([^()]*\))*\)"
# Either a braced body up to the next loop, or a brace-less direct nest.
_LOOP_LEVEL = _LOOP_HEADER + r"(?:\s*\{[^}]*?|\s*)"
_NESTED_LOOP_RE = re.compile(_LOOP_LEVEL + _LOOP_LEVEL + _LOOP_HEADER)


def check_nested_loops(source: str) -> ModuleResult:
    """Structural check: one finding if any triple nest exists."""
    result = ModuleResult()
    m = _NESTED_LOOP_RE.search(source)
    if m is not None:
        result.issues.append(
            custom_issue(
                line_at(source, m.start()),
                "Triple nested loop detected. Consider algorithm optimization.",
                ALGORITHM_COMPLEXITY,
                Severity.WARNING,
                column=column_at(source, m.start()),
            )
        )
    return result
