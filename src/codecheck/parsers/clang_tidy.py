"""Parser for clang-tidy diagnostics.

Format::

    <file>:<line>:<column>: <severity>: <message> [<rule>]

Code-snippet echo lines, caret markers and the trailing
"N warnings generated." summary are not diagnostics and are skipped.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from codecheck.errors import ParseFormatError
from codecheck.model import Severity
from codecheck.model.issue import Issue
from codecheck.parsers import coerce_int, display_path, parse_lines

TOOL = "clang-tidy"

_LINE_RE = re.compile(
    r"^(?P<file>.+?):(?P<line>\w*):(?P<column>\w*):\s+"
    r"(?P<severity>warning|error|note):\s+"
    r"(?P<message>.+?)\s+\[(?P<rule>[^\]]+)\]$"
)

_SEVERITY = {
    "note": Severity.INFO,
    "warning": Severity.WARNING,
    "error": Severity.ERROR,
}


def parse_line(line: str, base_dir: Optional[Path] = None) -> Issue:
    m = _LINE_RE.match(line)
    if m is None:
        raise ParseFormatError(TOOL, line)
    return Issue(
        file=display_path(m["file"], base_dir),
        line=coerce_int(m["line"]),
        column=coerce_int(m["column"]),
        severity=_SEVERITY[m["severity"]],
        message=m["message"].strip(),
        rule=m["rule"].strip(),
        source_tool=TOOL,
    )


def parse(raw: str, *, base_dir: Optional[Path] = None) -> list[Issue]:
    return parse_lines(raw, parse_line, base_dir=base_dir)
