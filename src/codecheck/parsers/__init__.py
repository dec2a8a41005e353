"""Output parsers: one per external tool diagnostic format.

Every parser exposes ``parse(raw, *, base_dir=None) -> list[Issue]``.
Parsing is line-oriented: a line that does not match the tool's format
raises ``ParseFormatError`` inside ``parse_line`` and is skipped by the
shared loop below.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePath
from typing import Callable, Optional

from codecheck.errors import ParseFormatError
from codecheck.model.issue import Issue

_logger = logging.getLogger(__name__)

LineParser = Callable[[str, Optional[Path]], Issue]


def parse_lines(raw: str, parse_line: LineParser, *, base_dir: Optional[Path] = None) -> list[Issue]:
    """Apply *parse_line* to each non-blank line; skip lines that don't match."""
    issues: list[Issue] = []
    skipped = 0
    for line in raw.splitlines():
        line = line.rstrip()
        if not line.strip():
            continue
        try:
            issues.append(parse_line(line, base_dir))
        except ParseFormatError as e:
            skipped += 1
            _logger.debug("%s", e)
    if skipped:
        _logger.debug("Skipped %d unrecognised output line(s)", skipped)
    return issues


def coerce_int(value: Optional[str], default: int = 0) -> int:
    """Parse a numeric field; anything malformed becomes *default*."""
    try:
        return int(value) if value else default
    except (TypeError, ValueError):
        return default


def display_path(file: str, base_dir: Optional[Path]) -> str:
    """Strip the session directory so reports never leak workspace paths."""
    file = file.strip()
    if base_dir is None:
        return file
    try:
        return PurePath(file).relative_to(base_dir).as_posix()
    except ValueError:
        return file
