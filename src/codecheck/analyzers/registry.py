"""Category → analyzer module resolution.

``MODULE_ORDER`` is the run order and therefore the issue order of every
report.  A module requested by several categories runs once.
"""

from __future__ import annotations

from functools import partial
from typing import Iterable, Optional

from codecheck.analyzers import Analyzer, RuleCheck
from codecheck.analyzers.complexity import check_code_metrics, check_cyclomatic
from codecheck.analyzers.external import ExternalToolAnalyzer
from codecheck.analyzers.patterns import check_anti_patterns
from codecheck.analyzers.performance import (
    check_inefficiencies,
    check_large_arrays,
    check_nested_loops,
)
from codecheck.analyzers.security import (
    check_input_validation,
    check_resource_balance,
    check_unsafe_functions,
)
from codecheck.analyzers.style import check_formatting, check_modernization, check_naming
from codecheck.analyzers.syntax import check_syntax
from codecheck.core.config import EngineConfig
from codecheck.core.process import ProcessExecutor, run_process
from codecheck.core.tools import CLANG_TIDY, CPPCHECK, ToolAvailability, default_tool_specs
from codecheck.model import Category
from codecheck.parsers import clang_tidy, cppcheck

MODULE_ORDER: tuple[str, ...] = (
    "syntax",
    CLANG_TIDY,
    CPPCHECK,
    "unsafe-functions",
    "resource-balance",
    "input-validation",
    "inefficiencies",
    "large-arrays",
    "nested-loops",
    "naming",
    "formatting",
    "modernization",
    "cyclomatic",
    "code-metrics",
    "anti-patterns",
)

CATEGORY_MODULES: dict[Category, tuple[str, ...]] = {
    Category.SYNTAX: ("syntax",),
    Category.STATIC_LINT: (CLANG_TIDY, CPPCHECK),
    Category.SECURITY: ("unsafe-functions", "resource-balance", "input-validation"),
    Category.PERFORMANCE: ("inefficiencies", "large-arrays", "nested-loops"),
    Category.STYLE: ("naming", "formatting", "modernization"),
    Category.COMPLEXITY: ("cyclomatic", "code-metrics"),
    Category.CUSTOM: ("anti-patterns", "naming", "cyclomatic"),
}

_PARSERS = {
    CLANG_TIDY: clang_tidy.parse,
    CPPCHECK: cppcheck.parse,
}


def resolve_modules(
    categories: Iterable[Category],
    *,
    order: Iterable[str] = MODULE_ORDER,
) -> list[str]:
    """Module ids for *categories*, deduplicated, in run order."""
    wanted: set[str] = set()
    for category in categories:
        wanted.update(CATEGORY_MODULES.get(category, ()))
    return [m for m in order if m in wanted]


def build_modules(
    config: EngineConfig,
    tools: ToolAvailability,
    *,
    executor: Optional[ProcessExecutor] = None,
) -> dict[str, Analyzer]:
    """Instantiate every module once per engine, keyed by id in run order."""
    run = executor or run_process
    externals = {
        spec.name: ExternalToolAnalyzer(
            spec,
            _PARSERS[spec.name],
            binary=tools.path_for(spec.name),
            executor=run,
            timeout_s=config.tool_timeout_s,
        )
        for spec in default_tool_specs(config)
    }
    checks = {
        "syntax": RuleCheck("syntax", check_syntax),
        "unsafe-functions": RuleCheck("unsafe-functions", check_unsafe_functions),
        "resource-balance": RuleCheck("resource-balance", check_resource_balance),
        "input-validation": RuleCheck("input-validation", check_input_validation),
        "inefficiencies": RuleCheck("inefficiencies", check_inefficiencies),
        "large-arrays": RuleCheck(
            "large-arrays",
            partial(check_large_arrays, threshold=config.large_array_threshold),
        ),
        "nested-loops": RuleCheck("nested-loops", check_nested_loops),
        "naming": RuleCheck("naming", check_naming),
        "formatting": RuleCheck(
            "formatting",
            partial(check_formatting, max_line_length=config.max_line_length),
        ),
        "modernization": RuleCheck("modernization", check_modernization),
        "cyclomatic": RuleCheck(
            "cyclomatic",
            partial(check_cyclomatic, threshold=config.complexity_threshold),
        ),
        "code-metrics": RuleCheck("code-metrics", check_code_metrics),
        "anti-patterns": RuleCheck("anti-patterns", check_anti_patterns),
    }
    merged: dict[str, Analyzer] = {**externals, **checks}
    return {mid: merged[mid] for mid in MODULE_ORDER}
