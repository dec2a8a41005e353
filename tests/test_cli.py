"""Tests for the codecheck command line, run in-process through ``main``."""

from __future__ import annotations

import io
import json
import os
import textwrap

import pytest

from codecheck.__main__ import main
from codecheck.api import analyze_source

CLEAN = textwrap.dedent("""\
    #include <iostream>

    int main() {
        std::cout << "Hello" << std::endl;
        return 0;
    }
""")

UNSAFE = "int main() {\n    char b[4];\n    gets(b);\n}\n"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.setenv("CODECHECK_WORKSPACE_ROOT", str(tmp_path / "ws"))
    monkeypatch.setenv("CODECHECK_ENABLE_EXTERNAL_TOOLS", "false")


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestAnalyze:

    def test_clean_file_exits_0(self, tmp_path, capsys):
        src = _write(tmp_path, "hello.cpp", CLEAN)
        assert main(["analyze", src]) == 0
        err = capsys.readouterr().err
        assert "0 error(s)" in err

    def test_error_issues_exit_1(self, tmp_path, capsys):
        src = _write(tmp_path, "bad.cpp", UNSAFE)
        assert main(["analyze", src]) == 1
        err = capsys.readouterr().err
        assert f"{src}:3:5: error:" in err
        assert "[security-buffer-overflow]" in err

    def test_json_report_on_stdout(self, tmp_path, capsys):
        src = _write(tmp_path, "bad.cpp", UNSAFE)
        code = main(["analyze", src, "--json"])
        out = capsys.readouterr().out

        payload = json.loads(out)
        assert code == 1
        assert payload["success"] is True
        assert payload["error_count"] >= 1
        assert out.endswith("\n")

    def test_empty_file_exits_2(self, tmp_path, capsys):
        src = _write(tmp_path, "empty.cpp", "")
        assert main(["analyze", src, "--json"]) == 2
        payload = json.loads(capsys.readouterr().out)
        assert payload["success"] is False
        assert payload["error_message"]

    def test_missing_file_exits_2(self, tmp_path, capsys):
        assert main(["analyze", str(tmp_path / "nope.cpp")]) == 2
        assert "cannot read" in capsys.readouterr().err

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(UNSAFE))
        assert main(["analyze", "-"]) == 1
        assert "<stdin>:3:5:" in capsys.readouterr().err

    def test_strict_promotes_warnings(self, tmp_path):
        src = _write(tmp_path, "rand.cpp", "int main() { return rand(); }\n")
        assert main(["analyze", src]) == 0
        assert main(["analyze", src, "--strict"]) == 1

    def test_categories_repeatable_and_comma_separated(self, tmp_path, capsys):
        src = _write(tmp_path, "mixed.cpp", "class widget {};\n" + UNSAFE)
        main(["analyze", src, "--json", "-c", "style,bogus", "-c", "complexity"])
        payload = json.loads(capsys.readouterr().out)

        rules = {i["rule"] for i in payload["issues"]}
        assert rules == {"naming-convention"}
        assert "cyclomatic_complexity" in payload["metrics"]

    def test_no_hints_drops_info(self, tmp_path, capsys):
        src = _write(tmp_path, "w.cpp", "class widget {};\nint* p = NULL;\n")
        main(["analyze", src, "--json", "--no-hints"])
        payload = json.loads(capsys.readouterr().out)
        assert payload["info_count"] == 0
        assert payload["suggestions"] == []

    def test_bad_std_is_usage_error(self, tmp_path):
        src = _write(tmp_path, "a.cpp", CLEAN)
        with pytest.raises(SystemExit) as exc:
            main(["analyze", src, "--std", "c++98"])
        assert exc.value.code == 2

    def test_unreadable_config_exits_2(self, tmp_path, capsys):
        src = _write(tmp_path, "a.cpp", CLEAN)
        cfg = _write(tmp_path, "bad.yaml", "analysis: [unterminated\n")
        assert main(["analyze", src, "--config", cfg]) == 2
        assert "cannot load config" in capsys.readouterr().err


class TestTools:

    def test_json_probe(self, tmp_path, monkeypatch, capsys):
        monkeypatch.delenv("CODECHECK_ENABLE_EXTERNAL_TOOLS")
        bindir = tmp_path / "bin"
        bindir.mkdir()
        exe = bindir / "clang-tidy"
        exe.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
        os.chmod(exe, 0o755)
        monkeypatch.setenv("PATH", str(tmp_path / "empty"))
        cfg = _write(
            tmp_path,
            "engine.yaml",
            f"clang_tidy_path: {exe}\ncppcheck_path: /nonexistent/cppcheck\n",
        )

        assert main(["tools", "--config", cfg, "--json"]) == 0
        assert json.loads(capsys.readouterr().out) == {
            "clang-tidy": str(exe),
            "cppcheck": None,
        }

    def test_disabled_tools_listed_as_unavailable(self, capsys):
        assert main(["tools"]) == 0
        out = capsys.readouterr().out
        assert "clang-tidy: not available" in out
        assert "cppcheck: not available" in out

    def test_unreadable_config_exits_2(self, tmp_path, capsys):
        cfg = _write(tmp_path, "bad.yaml", "analysis: [unterminated\n")
        assert main(["tools", "--config", cfg]) == 2
        assert "cannot load config" in capsys.readouterr().err


class TestValidate:

    def test_valid_report(self, tmp_path, engine, capsys):
        _, d = analyze_source(UNSAFE, engine=engine)
        path = _write(tmp_path, "report.json", json.dumps(d))
        assert main(["validate", path]) == 0
        assert "OK" in capsys.readouterr().out

    def test_schema_violation_exits_1(self, tmp_path, engine):
        _, d = analyze_source(UNSAFE, engine=engine)
        del d["issues"]
        path = _write(tmp_path, "report.json", json.dumps(d))
        assert main(["validate", path]) == 1

    def test_not_json_exits_2(self, tmp_path):
        path = _write(tmp_path, "report.json", "{not json")
        assert main(["validate", path]) == 2

    def test_missing_file_exits_2(self, tmp_path):
        assert main(["validate", str(tmp_path / "missing.json")]) == 2


class TestUsage:

    def test_no_command_exits_2(self, capsys):
        assert main([]) == 2
        assert "usage" in capsys.readouterr().err.lower()

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert "codecheck" in capsys.readouterr().out
