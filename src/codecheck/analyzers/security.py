"""Security checks: unsafe calls, allocation balance, unchecked input.

v1 scope: textual heuristics with no flow analysis.  Comments and string
literals are scanned like code; expect the occasional false positive.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from codecheck.analyzers import CUSTOM_TOOL, column_at, line_at
from codecheck.model import RiskLevel, Severity
from codecheck.model.issue import SecurityFinding
from codecheck.model.report import ModuleResult
from codecheck.model.request import SOURCE_FILENAME
from codecheck.rules import (
    SECURITY_BUFFER_OVERFLOW,
    SECURITY_INPUT_VALIDATION,
    SECURITY_MEMORY_LEAK,
    SECURITY_UNSAFE_FUNCTION,
)


def _finding(
    line: int,
    column: int,
    severity: Severity,
    message: str,
    rule: str,
    vulnerability_type: str,
    risk: RiskLevel,
) -> SecurityFinding:
    return SecurityFinding(
        file=SOURCE_FILENAME,
        line=line,
        column=column,
        severity=severity,
        message=message,
        rule=rule,
        source_tool=CUSTOM_TOOL,
        vulnerability_type=vulnerability_type,
        risk_level=risk,
    )


# ── Unsafe function calls ───────────────────────────────────────────


@dataclass(frozen=True)
class _UnsafeCall:
    name: str
    rule: str
    severity: Severity
    vulnerability_type: str
    risk: RiskLevel
    message: str


_UNSAFE_CALLS = (
    # Unchecked copies / formatted writes into fixed buffers
    _UnsafeCall("strcpy", SECURITY_BUFFER_OVERFLOW, Severity.ERROR, "buffer-overflow", RiskLevel.HIGH,
                "Unsafe function 'strcpy' may cause buffer overflow; use std::string or strncpy"),
    _UnsafeCall("strcat", SECURITY_BUFFER_OVERFLOW, Severity.ERROR, "buffer-overflow", RiskLevel.HIGH,
                "Unsafe function 'strcat' may cause buffer overflow; use std::string or strncat"),
    _UnsafeCall("sprintf", SECURITY_BUFFER_OVERFLOW, Severity.ERROR, "buffer-overflow", RiskLevel.HIGH,
                "Unsafe function 'sprintf' may cause buffer overflow; use snprintf"),
    _UnsafeCall("gets", SECURITY_BUFFER_OVERFLOW, Severity.ERROR, "buffer-overflow", RiskLevel.CRITICAL,
                "Unsafe function 'gets' cannot bound its input; use fgets or std::getline"),
    _UnsafeCall("scanf", SECURITY_BUFFER_OVERFLOW, Severity.ERROR, "buffer-overflow", RiskLevel.MEDIUM,
                "Unsafe function 'scanf' may cause buffer overflow with unbounded %s"),
    # Weak randomness, process spawning, dynamic evaluation
    _UnsafeCall("rand", SECURITY_UNSAFE_FUNCTION, Severity.WARNING, "weak-randomness", RiskLevel.LOW,
                "Unsafe function detected: use random number generators from <random> instead of rand()"),
    _UnsafeCall("system", SECURITY_UNSAFE_FUNCTION, Severity.WARNING, "command-injection", RiskLevel.HIGH,
                "Unsafe function detected: avoid system() calls for security reasons"),
    _UnsafeCall("eval", SECURITY_UNSAFE_FUNCTION, Severity.WARNING, "code-injection", RiskLevel.HIGH,
                "Unsafe function detected: avoid eval() functions"),
    _UnsafeCall("exec", SECURITY_UNSAFE_FUNCTION, Severity.WARNING, "code-injection", RiskLevel.MEDIUM,
                "Unsafe function detected: be careful with exec() functions"),
)

_UNSAFE_PATTERNS = [(re.compile(rf"\b{c.name}\s*\("), c) for c in _UNSAFE_CALLS]


def check_unsafe_functions(source: str) -> ModuleResult:
    """One finding per call occurrence, line by line.  Not deduplicated."""
    result = ModuleResult()
    for lineno, line in enumerate(source.splitlines(), start=1):
        for pattern, call in _UNSAFE_PATTERNS:
            for m in pattern.finditer(line):
                result.issues.append(
                    _finding(
                        lineno,
                        m.start() + 1,
                        call.severity,
                        call.message,
                        call.rule,
                        call.vulnerability_type,
                        call.risk,
                    )
                )
    return result


# ── Allocation / deallocation balance ───────────────────────────────

_ALLOC_RE = re.compile(r"\bnew\s+|\b(?:malloc|calloc)\s*\(")
_DEALLOC_RE = re.compile(r"\bdelete(?:\s*\[\s*\])?\s+|\bfree\s*\(")


def check_resource_balance(source: str) -> ModuleResult:
    """Raw keyword counting over the whole text; at most one finding."""
    result = ModuleResult()
    allocs = list(_ALLOC_RE.finditer(source))
    deallocs = len(_DEALLOC_RE.findall(source))
    if len(allocs) > deallocs:
        first = allocs[0].start()
        result.issues.append(
            _finding(
                line_at(source, first),
                column_at(source, first),
                Severity.WARNING,
                f"Potential memory leak: allocation/deallocation imbalance "
                f"({len(allocs)} allocations but {deallocs} deallocations)",
                SECURITY_MEMORY_LEAK,
                "memory-leak",
                RiskLevel.MEDIUM,
            )
        )
    return result


# ── Unchecked stream input ──────────────────────────────────────────

_READ_RE = re.compile(r"\bcin\s*>>")
_GUARD_RE = re.compile(
    r"\bcin\s*\.\s*(?:fail|good|clear)\s*\("
    r"|!\s*(?:std::)?cin\b"
    r"|\b(?:if|while)\s*\(\s*!?\s*(?:std::)?cin\b"
    r"|!\s*\(\s*(?:std::)?cin\s*>>"
    r"|\(\s*(?:std::)?cin\s*>>[^()\n]*\)\s*\.\s*(?:fail|good)\s*\("
)
# Lines after a read that may still hold its failure check.
_GUARD_WINDOW = 3


def check_input_validation(source: str) -> ModuleResult:
    """Flag the first ``cin >>`` read that has no failure check nearby."""
    result = ModuleResult()
    lines = source.splitlines()
    for idx, line in enumerate(lines):
        m = _READ_RE.search(line)
        if m is None:
            continue
        window = "\n".join(lines[idx: idx + 1 + _GUARD_WINDOW])
        if _GUARD_RE.search(window):
            continue
        result.issues.append(
            _finding(
                idx + 1,
                m.start() + 1,
                Severity.WARNING,
                "Input read with 'cin >>' is not checked; validate input with cin.fail() checks",
                SECURITY_INPUT_VALIDATION,
                "input-validation",
                RiskLevel.LOW,
            )
        )
        break
    return result
