"""Canonical rule ID registry.

Single source of truth for every ``rule`` value emitted by the in-process
checks.  External tools keep their own identifiers (clang-tidy check names,
cppcheck message ids) and are not listed here.
"""

from __future__ import annotations

# ── Security ────────────────────────────────────────────────────────
SECURITY_BUFFER_OVERFLOW = "security-buffer-overflow"
SECURITY_UNSAFE_FUNCTION = "security-unsafe-function"
SECURITY_MEMORY_LEAK = "security-memory-leak"
SECURITY_INPUT_VALIDATION = "security-input-validation"

# ── Performance ─────────────────────────────────────────────────────
PERFORMANCE = "performance"
MEMORY_USAGE = "memory-usage"
ALGORITHM_COMPLEXITY = "algorithm-complexity"

# ── Style ───────────────────────────────────────────────────────────
NAMING_CONVENTION = "naming-convention"
LINE_LENGTH = "line-length"
NO_TABS = "no-tabs"
MODERNIZE_USE_NULLPTR = "modernize-use-nullptr"

# ── Complexity / custom ─────────────────────────────────────────────
COMPLEXITY = "complexity"
CUSTOM_PATTERN = "custom-pattern"

# ── Syntax ──────────────────────────────────────────────────────────
ASSIGNMENT_IN_CONDITION = "assignment-in-condition"
UNBALANCED_DELIMITERS = "unbalanced-delimiters"

RULE_IDS: list[str] = sorted([
    SECURITY_BUFFER_OVERFLOW,
    SECURITY_UNSAFE_FUNCTION,
    SECURITY_MEMORY_LEAK,
    SECURITY_INPUT_VALIDATION,
    PERFORMANCE,
    MEMORY_USAGE,
    ALGORITHM_COMPLEXITY,
    NAMING_CONVENTION,
    LINE_LENGTH,
    NO_TABS,
    MODERNIZE_USE_NULLPTR,
    COMPLEXITY,
    CUSTOM_PATTERN,
    ASSIGNMENT_IN_CONDITION,
    UNBALANCED_DELIMITERS,
])

SECURITY_RULE_IDS: list[str] = sorted(r for r in RULE_IDS if r.startswith("security-"))


def _assert_rule_registry_invariants() -> None:
    """Fail fast on invariant violations.

    Called at import time so CI and local runs catch issues immediately.
    """
    import re

    rule_re = re.compile(r"^[a-z][a-z0-9]*(-[a-z0-9]+)*$")

    if RULE_IDS != sorted(RULE_IDS):
        raise AssertionError("RULE_IDS must be sorted")
    if len(RULE_IDS) != len(set(RULE_IDS)):
        raise AssertionError("RULE_IDS must contain unique IDs")
    bad = [x for x in RULE_IDS if not rule_re.match(x)]
    if bad:
        raise AssertionError(f"RULE_IDS contains invalid rule IDs: {bad}")


_assert_rule_registry_invariants()
