"""Tests for the clang-tidy and cppcheck output parsers."""

from pathlib import Path

import pytest

from codecheck.errors import ParseFormatError
from codecheck.model import Severity
from codecheck.parsers import clang_tidy, coerce_int, cppcheck, display_path


CLANG_TIDY_OUTPUT = """\
/tmp/codecheck/abc123/source.cpp:4:5: warning: call to 'strcpy' is insecure [clang-analyzer-security.insecureAPI.strcpy]
    strcpy(buf, argv[1]);
    ^
/tmp/codecheck/abc123/source.cpp:7:12: error: use of undeclared identifier 'y' [clang-diagnostic-error]
/tmp/codecheck/abc123/source.cpp:9:1: note: previous declaration is here [readability-redundant-declaration]
2 warnings generated.
Suppressed 12 warnings (12 in non-user code).
"""

CPPCHECK_OUTPUT = """\
/tmp/codecheck/abc123/source.cpp:5:9: error: Array 'buf[8]' accessed at index 10, which is out of bounds. [arrayIndexOutOfBounds]
/tmp/codecheck/abc123/source.cpp:3:0: style: The scope of the variable 'i' can be reduced. [variableScope]
/tmp/codecheck/abc123/source.cpp:12:3: performance: Function parameter 'v' should be passed by const reference. [passedByValue]
nofile:0:0: information: Cppcheck cannot find all the include files [missingIncludeSystem]
Checking source.cpp ...
"""


class TestClangTidy:

    def test_parses_diagnostics_and_skips_noise(self):
        issues = clang_tidy.parse(CLANG_TIDY_OUTPUT)

        assert [i.severity for i in issues] == [Severity.WARNING, Severity.ERROR, Severity.INFO]
        first = issues[0]
        assert first.line == 4
        assert first.column == 5
        assert first.message == "call to 'strcpy' is insecure"
        assert first.rule == "clang-analyzer-security.insecureAPI.strcpy"
        assert first.source_tool == "clang-tidy"

    def test_base_dir_is_stripped(self):
        issues = clang_tidy.parse(CLANG_TIDY_OUTPUT, base_dir=Path("/tmp/codecheck/abc123"))
        assert {i.file for i in issues} == {"source.cpp"}

    def test_non_numeric_positions_default_to_zero(self):
        issue = clang_tidy.parse_line("source.cpp:x:y: warning: odd [some-check]")
        assert (issue.line, issue.column) == (0, 0)

    def test_line_without_rule_is_rejected(self):
        with pytest.raises(ParseFormatError):
            clang_tidy.parse_line("source.cpp:1:1: warning: no rule here")

    def test_unknown_severity_is_rejected(self):
        with pytest.raises(ParseFormatError):
            clang_tidy.parse_line("source.cpp:1:1: fatal: boom [x]")

    def test_empty_output(self):
        assert clang_tidy.parse("") == []


class TestCppcheck:

    def test_severity_mapping(self):
        issues = cppcheck.parse(CPPCHECK_OUTPUT)

        assert [i.severity for i in issues] == [
            Severity.ERROR,
            Severity.INFO,
            Severity.WARNING,
            Severity.INFO,
        ]
        assert all(i.source_tool == "cppcheck" for i in issues)

    def test_rule_from_trailing_id(self):
        issue = cppcheck.parse(CPPCHECK_OUTPUT)[0]
        assert issue.rule == "arrayIndexOutOfBounds"
        assert issue.message == "Array 'buf[8]' accessed at index 10, which is out of bounds."
        assert (issue.line, issue.column) == (5, 9)

    def test_rule_falls_back_to_severity(self):
        issue = cppcheck.parse_line("source.cpp:2:1: warning: Uninitialized variable: x")
        assert issue.rule == "cppcheck-warning"
        assert issue.message == "Uninitialized variable: x"

    def test_portability_is_warning(self):
        issue = cppcheck.parse_line("a.cpp:1:1: portability: Casting between pointer types [invalidPointerCast]")
        assert issue.severity is Severity.WARNING

    def test_progress_lines_skipped(self):
        assert cppcheck.parse("Checking source.cpp ...\n1/1 files checked 100% done\n") == []

    def test_files_outside_base_dir_are_kept(self):
        issues = cppcheck.parse(CPPCHECK_OUTPUT, base_dir=Path("/tmp/codecheck/abc123"))
        assert [i.file for i in issues] == ["source.cpp"] * 3 + ["nofile"]


class TestHelpers:

    @pytest.mark.parametrize("raw, expected", [("12", 12), ("", 0), (None, 0), ("x", 0)])
    def test_coerce_int(self, raw, expected):
        assert coerce_int(raw) == expected

    def test_display_path(self):
        assert display_path("/w/s/source.cpp", Path("/w/s")) == "source.cpp"
        assert display_path("/other/x.h", Path("/w/s")) == "/other/x.h"
        assert display_path(" source.cpp", None) == "source.cpp"
