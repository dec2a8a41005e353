"""Shallow syntax checks that work without a compiler.

Comments and literals (strings, raw strings, characters and numbers, the
latter so a digit separator like ``1'000`` is not read as a character literal)
are blanked out, offsets and newlines preserved, before scanning.
"""

from __future__ import annotations

import bisect
import re

from codecheck.analyzers import column_at, custom_issue, line_at
from codecheck.model import Severity
from codecheck.model.report import ModuleResult
from codecheck.rules import ASSIGNMENT_IN_CONDITION, UNBALANCED_DELIMITERS

_NOISE_RE = re.compile(
    r"//[^\n]*"
    r"|/\*.*?(?:\*/|\Z)"
    r'|(?<![\w])(?:u8|[uUL])?R"([^()\\\s"]{0,16})\(.*?(?:\)\1"|\Z)'
    r'|"(?:\\.|[^"\\\n])*"?'
    r"|(?<!\w)\.?\d(?:[eEpP][+-]|'?[\w.])*"
    r"|'(?:\\.|[^'\\\n])*'?",
    re.DOTALL,
)


def blank_noise(source: str) -> str:
    """Replace comments and literals with spaces, keeping newlines."""
    return _NOISE_RE.sub(lambda m: re.sub(r"[^\n]", " ", m.group(0)), source)


# ── assignment inside a condition ───────────────────────────────────

_CONDITION_START_RE = re.compile(r"\b(?:if|while)\s*\(")
_BARE_ASSIGN_RE = re.compile(r"(?<![=!<>+\-*/%&|^])=(?!=)")


def _match_parens(text: str) -> dict[int, int]:
    """Map each '(' offset to its ')' offset; unclosed openers are absent."""
    matches: dict[int, int] = {}
    stack: list[int] = []
    for i, ch in enumerate(text):
        if ch == "(":
            stack.append(i)
        elif ch == ")" and stack:
            matches[stack.pop()] = i
    return matches


def _first_in(positions: list[int], start: int, end: int) -> int | None:
    i = bisect.bisect_left(positions, start)
    if i < len(positions) and positions[i] < end:
        return positions[i]
    return None


def _is_wrapped(text: str, parens: dict[int, int], start: int, end: int) -> bool:
    """True when text[start:end] is one parenthesised expression."""
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    return start < end and parens.get(start) == end - 1


def check_assignment_in_condition(source: str) -> ModuleResult:
    result = ModuleResult()
    text = blank_noise(source)
    parens = _match_parens(text)
    assigns = [a.start() for a in _BARE_ASSIGN_RE.finditer(text)]
    semicolons = [i for i, ch in enumerate(text) if ch == ";"]
    for m in _CONDITION_START_RE.finditer(text):
        open_idx = m.end() - 1
        close_idx = parens.get(open_idx)
        if close_idx is None:
            continue
        start, end = open_idx + 1, close_idx
        # Extra parentheses or an init-statement mark the assignment as intended.
        if _first_in(semicolons, start, end) is not None or _is_wrapped(text, parens, start, end):
            continue
        offset = _first_in(assigns, start, end)
        if offset is None:
            continue
        result.issues.append(
            custom_issue(
                line_at(source, offset),
                "Possible assignment in conditional statement; use == for comparison "
                "or wrap the assignment in parentheses",
                ASSIGNMENT_IN_CONDITION,
                Severity.WARNING,
                column=column_at(source, offset),
            )
        )
    return result


# ── delimiter balance ───────────────────────────────────────────────

_PAIRS = {"}": "{", ")": "(", "]": "["}
_OPENERS = frozenset(_PAIRS.values())


def check_delimiters(source: str) -> ModuleResult:
    """At most one Error per delimiter kind: the first stray closer, else the
    innermost opener left unclosed."""
    text = blank_noise(source)
    stacks: dict[str, list[int]] = {o: [] for o in _OPENERS}
    stray: dict[str, int] = {}
    for i, ch in enumerate(text):
        if ch in _OPENERS:
            stacks[ch].append(i)
        elif ch in _PAIRS:
            opener = _PAIRS[ch]
            if stacks[opener]:
                stacks[opener].pop()
            else:
                stray.setdefault(ch, i)

    result = ModuleResult()
    for closer, opener in _PAIRS.items():
        if closer in stray:
            offset, msg = stray[closer], f"Unmatched closing '{closer}'"
        elif stacks[opener]:
            offset, msg = stacks[opener][-1], f"Unclosed '{opener}'"
        else:
            continue
        total_open = text.count(opener)
        total_close = text.count(closer)
        result.issues.append(
            custom_issue(
                line_at(source, offset),
                f"{msg} ({total_open} '{opener}' vs {total_close} '{closer}')",
                UNBALANCED_DELIMITERS,
                Severity.ERROR,
                column=column_at(source, offset),
            )
        )
    return result


def check_syntax(source: str) -> ModuleResult:
    result = check_assignment_in_condition(source)
    result.extend(check_delimiters(source))
    return result
