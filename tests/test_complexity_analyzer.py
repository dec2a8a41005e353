"""Tests for cyclomatic complexity and code metrics."""

import math
import textwrap

import pytest

from codecheck.analyzers.complexity import (
    check_code_metrics,
    check_cyclomatic,
    count_decision_points,
)
from codecheck.model import Severity
from codecheck.rules import COMPLEXITY


def cpp(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


class TestDecisionPoints:

    @pytest.mark.parametrize(
        "src, expected",
        [
            ("if (a) {}", 1),
            ("while (a) {}", 1),
            ("for (;;) {}", 1),
            ("switch (x) { case 1: break; case 2: break; }", 3),
            ("try {} catch (...) {}", 1),
            ("if (a && b || c) {}", 3),
            ("if (a) {} else if (b) {}", 3),
            ("int iffy = notify(forward);", 0),
        ],
    )
    def test_counts(self, src, expected):
        assert count_decision_points(src) == expected


class TestCyclomatic:

    def test_straight_line_code_is_one(self):
        result = check_cyclomatic("int main() { return 0; }")
        assert result.metrics == {"cyclomatic_complexity": 1.0}
        assert result.issues == []

    def test_triple_nested_loop_is_at_least_four(self):
        src = "for(;;){for(;;){for(;;){}}}"
        assert check_cyclomatic(src).metrics["cyclomatic_complexity"] >= 4

    def test_above_threshold_warns_once(self):
        src = "\n".join(f"if (x == {i}) y++;" for i in range(16))
        result = check_cyclomatic(src)

        assert result.metrics["cyclomatic_complexity"] == 17.0
        assert len(result.issues) == 1
        assert result.issues[0].rule == COMPLEXITY
        assert result.issues[0].severity is Severity.WARNING
        assert "(17)" in result.issues[0].message

    def test_at_threshold_does_not_warn(self):
        src = "\n".join(f"if (x == {i}) y++;" for i in range(14))
        assert check_cyclomatic(src).issues == []

    def test_custom_threshold(self):
        assert len(check_cyclomatic("if (a) {}", threshold=1).issues) == 1


class TestCodeMetrics:

    def test_metrics_for_small_program(self):
        src = cpp("""
            #include <iostream>
            #include <vector>

            // entry point
            class Greeter {
            public:
                void greet() const {
                    if (ready) { std::cout << "hi"; }
                }
            };

            int main() {
                return 0;
            }
        """)
        m = check_code_metrics(src).metrics

        assert m["lines_of_code"] == 12.0
        assert m["include_count"] == 2.0
        assert m["class_count"] == 1.0
        assert m["function_count"] == 2.0
        assert m["nesting_depth"] == 3.0
        assert m["comment_ratio"] == round(100.0 / 14, 2)
        assert m["cognitive_complexity"] == 1.2
        assert m["maintainability_index"] == round(171 - 5.2 * math.log(12) - 0.23, 2)

    def test_never_emits_issues(self):
        assert check_code_metrics("if (a) { if (b) { if (c) {} } }").issues == []

    def test_maintainability_floors_at_zero(self):
        src = "if (a) {}\n" * 2000
        assert check_code_metrics(src).metrics["maintainability_index"] == 0.0

    def test_unbalanced_braces_do_not_go_negative(self):
        assert check_code_metrics("}}} {").metrics["nesting_depth"] == 1.0
