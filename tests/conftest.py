"""Shared fixtures: isolated engine config, a scripted process executor."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pytest

from codecheck.core.config import EngineConfig
from codecheck.core.orchestrator import AnalysisEngine
from codecheck.core.process import ProcessResult
from codecheck.core.tools import CLANG_TIDY, CPPCHECK, ToolAvailability


class FakeExecutor:
    """Stands in for ``run_process``.

    Results are scripted per tool, keyed by the executable's file name.
    Every call is recorded along with the source file's content at call
    time, so tests can inspect what each tool would have seen.
    """

    def __init__(self, results: dict[str, ProcessResult] | None = None) -> None:
        self.results = dict(results or {})
        self.calls: list[list[str]] = []
        self.seen_sources: list[str] = []

    def __call__(self, args: Sequence[str], timeout_s: float) -> ProcessResult:
        argv = [str(a) for a in args]
        self.calls.append(argv)
        source = next((a for a in argv if a.endswith(".cpp")), None)
        if source is not None and Path(source).exists():
            self.seen_sources.append(Path(source).read_text(encoding="utf-8"))
        name = Path(argv[0]).name
        return self.results.get(name, ProcessResult(exit_code=0))

    def tools_called(self) -> list[str]:
        return [Path(c[0]).name for c in self.calls]


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    return tmp_path / "scratch"


@pytest.fixture
def config(workspace_root: Path) -> EngineConfig:
    return EngineConfig(
        workspace_root=workspace_root,
        clang_tidy_path="/opt/fake/clang-tidy",
        cppcheck_path="/opt/fake/cppcheck",
        enable_external_tools=False,
        request_timeout_s=30.0,
    )


@pytest.fixture
def engine(config: EngineConfig) -> AnalysisEngine:
    """Engine with every external tool marked unavailable."""
    return AnalysisEngine(config, ToolAvailability.none())


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def tools_available() -> ToolAvailability:
    return ToolAvailability.of({
        CLANG_TIDY: "/opt/fake/clang-tidy",
        CPPCHECK: "/opt/fake/cppcheck",
    })


@pytest.fixture
def engine_with_tools(
    config: EngineConfig,
    tools_available: ToolAvailability,
    fake_executor: FakeExecutor,
) -> AnalysisEngine:
    """Engine whose external tools run through ``fake_executor``."""
    return AnalysisEngine(config, tools_available, executor=fake_executor)
