"""Enums shared across the engine, the aggregator and the insight layer."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Optional

_logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Canonical issue severity; every analyzer module normalizes into these."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Category(str, Enum):
    """A requested class of analysis, resolved to analyzer modules."""

    SYNTAX = "syntax"
    STATIC_LINT = "static_lint"
    SECURITY = "security"
    PERFORMANCE = "performance"
    STYLE = "style"
    COMPLEXITY = "complexity"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: "Category | str") -> Optional["Category"]:
        """Return the matching category, or ``None`` for unknown values."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        key = _CATEGORY_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return None

    @classmethod
    def parse_many(cls, values: Iterable["Category | str"]) -> frozenset["Category"]:
        """Parse *values*, silently dropping unsupported categories."""
        parsed: set[Category] = set()
        for value in values:
            category = cls.parse(value)
            if category is None:
                _logger.debug("Ignoring unsupported analysis category %r", value)
                continue
            parsed.add(category)
        return frozenset(parsed)


_CATEGORY_ALIASES = {
    "staticlint": "static_lint",
    "lint": "static_lint",
}


class RiskLevel(str, Enum):
    """Exploitability estimate attached to security findings."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class QualityTier(str, Enum):
    """User-facing quality tier, at most three levels."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class RunState(str, Enum):
    """Lifecycle of one orchestrated analysis request."""

    CREATED = "created"
    WORKSPACE_READY = "workspace_ready"
    RUNNING = "running"
    AGGREGATING = "aggregating"
    COMPLETED = "completed"
    ABORTED = "aborted"


class ModuleStatus(str, Enum):
    """How a single analyzer module ended."""

    OK = "ok"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"
    FAILED = "failed"
