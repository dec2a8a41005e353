"""Common C++ anti-patterns, matched line by line."""

from __future__ import annotations

import re

from codecheck.analyzers import custom_issue
from codecheck.model import Severity
from codecheck.model.report import ModuleResult
from codecheck.rules import CUSTOM_PATTERN

ANTI_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\busing\s+namespace\s+std\s*;"),
     "Avoid 'using namespace std'; it pulls every std name into scope"),
    (re.compile(r"\bmalloc\s*\("),
     "Consider using 'new' or a container instead of 'malloc' in C++"),
    (re.compile(r"#\s*include\s*<bits/stdc\+\+\.h>"),
     "Avoid <bits/stdc++.h>; include only the headers you need"),
    (re.compile(r"\bcatch\s*\(\s*\.\.\.\s*\)"),
     "Catching all exceptions with '...' can hide errors"),
)


def check_anti_patterns(source: str) -> ModuleResult:
    """At most one Warning per line: the first pattern that matches."""
    result = ModuleResult()
    for lineno, line in enumerate(source.splitlines(), start=1):
        for pattern, message in ANTI_PATTERNS:
            m = pattern.search(line)
            if m is None:
                continue
            result.issues.append(
                custom_issue(lineno, message, CUSTOM_PATTERN, Severity.WARNING, column=m.start() + 1)
            )
            break
    return result
