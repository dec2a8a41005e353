"""Style checks: type naming, line formatting, modern C++ idioms."""

from __future__ import annotations

import re

from codecheck.analyzers import column_at, custom_issue, line_at
from codecheck.model import Severity
from codecheck.model.issue import FixSuggestion
from codecheck.model.report import ModuleResult
from codecheck.rules import LINE_LENGTH, MODERNIZE_USE_NULLPTR, NAMING_CONVENTION, NO_TABS

DEFAULT_MAX_LINE_LENGTH = 100

_TYPE_DECL_RE = re.compile(r"\b(?:class|struct)\s+([a-z]\w*)")


def check_naming(source: str) -> ModuleResult:
    """Flag type names that start lowercase.

    Walks the text with an explicit search cursor; each scan region yields
    its first match and the line is derived from the match offset.
    """
    result = ModuleResult()
    pos = 0
    while True:
        m = _TYPE_DECL_RE.search(source, pos)
        if m is None:
            break
        name = m.group(1)
        result.issues.append(
            custom_issue(
                line_at(source, m.start(1)),
                f"Class name '{name}' should start with uppercase",
                NAMING_CONVENTION,
                Severity.INFO,
                column=column_at(source, m.start(1)),
            )
        )
        pos = m.end()
    return result


def check_formatting(
    source: str,
    *,
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
) -> ModuleResult:
    result = ModuleResult()
    for lineno, line in enumerate(source.splitlines(), start=1):
        if len(line) > max_line_length:
            result.issues.append(
                custom_issue(
                    lineno,
                    f"Line too long ({len(line)} > {max_line_length} characters)",
                    LINE_LENGTH,
                    Severity.INFO,
                    column=max_line_length + 1,
                )
            )
        tab = line.find("\t")
        if tab >= 0:
            result.issues.append(
                custom_issue(
                    lineno,
                    "Use spaces instead of tabs",
                    NO_TABS,
                    Severity.INFO,
                    column=tab + 1,
                )
            )
    return result


_NULL_RE = re.compile(r"\bNULL\b")


def check_modernization(source: str) -> ModuleResult:
    """Suggest ``nullptr`` for every line still using ``NULL``."""
    result = ModuleResult()
    for lineno, line in enumerate(source.splitlines(), start=1):
        m = _NULL_RE.search(line)
        if m is None:
            continue
        issue = custom_issue(
            lineno,
            "Use nullptr instead of NULL",
            MODERNIZE_USE_NULLPTR,
            Severity.INFO,
            column=m.start() + 1,
        )
        result.issues.append(issue)
        before = line.strip()
        result.suggestions.append(
            FixSuggestion(
                issue_ref=issue.fingerprint,
                before_snippet=before,
                after_snippet=_NULL_RE.sub("nullptr", before),
                rationale="nullptr is type-safe and preferred in modern C++",
            )
        )
    return result
