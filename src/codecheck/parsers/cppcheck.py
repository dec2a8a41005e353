"""Parser for cppcheck diagnostics.

cppcheck is invoked with an explicit ``--template`` so every diagnostic
arrives on stderr as::

    <file>:<line>:<column>: <severity>: <message> [<id>]

The trailing ``[<id>]`` is optional; without it the rule falls back to
``cppcheck-<severity>``.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from codecheck.errors import ParseFormatError
from codecheck.model import Severity
from codecheck.model.issue import Issue
from codecheck.parsers import coerce_int, display_path, parse_lines

TOOL = "cppcheck"

_LINE_RE = re.compile(
    r"^(?P<file>.+?):(?P<line>\w*):(?P<column>\w*):\s+"
    r"(?P<severity>error|warning|style|performance|portability|information):\s+"
    r"(?P<message>.+?)(?:\s+\[(?P<rule>[^\]\s]+)\])?$"
)

_SEVERITY = {
    "error": Severity.ERROR,
    "warning": Severity.WARNING,
    "performance": Severity.WARNING,
    "portability": Severity.WARNING,
    "style": Severity.INFO,
    "information": Severity.INFO,
}


def parse_line(line: str, base_dir: Optional[Path] = None) -> Issue:
    m = _LINE_RE.match(line)
    if m is None:
        raise ParseFormatError(TOOL, line)
    severity = m["severity"]
    return Issue(
        file=display_path(m["file"], base_dir),
        line=coerce_int(m["line"]),
        column=coerce_int(m["column"]),
        severity=_SEVERITY[severity],
        message=m["message"].strip(),
        rule=m["rule"] or f"cppcheck-{severity}",
        source_tool=TOOL,
    )


def parse(raw: str, *, base_dir: Optional[Path] = None) -> list[Issue]:
    return parse_lines(raw, parse_line, base_dir=base_dir)
