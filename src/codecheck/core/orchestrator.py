"""Analyzer orchestrator: the engine's single entry point.

States: created → workspace_ready → running → aggregating → completed,
with aborted reachable from every non-terminal state.

An ``AnalysisEngine`` is built once per process (tool probing happens in
``create``) and is stateless per request: every ``analyze`` call gets its
own session, its own context and its own thread pool.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Mapping, Optional, Sequence

from codecheck.analyzers import AnalysisContext, Analyzer
from codecheck.analyzers.registry import build_modules, resolve_modules
from codecheck.core.aggregator import merge
from codecheck.core.config import EngineConfig
from codecheck.core.process import ProcessExecutor, run_process
from codecheck.core.tools import ToolAvailability, default_tool_specs, probe_tools
from codecheck.core.workspace import WorkspaceManager
from codecheck.errors import (
    AnalysisCancelledError,
    InternalError,
    ToolTimeoutError,
    ToolUnavailableError,
    WorkspaceError,
)
from codecheck.model import ModuleStatus, RunState
from codecheck.model.report import AnalysisReport, ModuleOutcome
from codecheck.model.request import AnalysisRequest

_logger = logging.getLogger(__name__)

# How often the collector wakes up to look at the cancel flag.
_POLL_INTERVAL_S = 0.05

_TRANSITIONS: dict[RunState, frozenset[RunState]] = {
    RunState.CREATED: frozenset({RunState.WORKSPACE_READY, RunState.ABORTED}),
    RunState.WORKSPACE_READY: frozenset({RunState.RUNNING, RunState.ABORTED}),
    RunState.RUNNING: frozenset({RunState.AGGREGATING, RunState.ABORTED}),
    RunState.AGGREGATING: frozenset({RunState.COMPLETED, RunState.ABORTED}),
    RunState.COMPLETED: frozenset(),
    RunState.ABORTED: frozenset(),
}


class _Run:
    """Per-request state holder; never shared between requests."""

    def __init__(self) -> None:
        self.state = RunState.CREATED
        self.analysis_id = "-"
        self.started = time.monotonic()

    def advance(self, new: RunState) -> None:
        if new not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"illegal run transition {self.state.value} -> {new.value}")
        _logger.debug("Analysis %s: %s -> %s", self.analysis_id, self.state.value, new.value)
        self.state = new

    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.started) * 1000)


def run_module(module: Analyzer, ctx: AnalysisContext) -> ModuleOutcome:
    """Module boundary: every failure becomes an outcome value, never a raise."""
    t0 = time.monotonic()
    status = ModuleStatus.OK
    result = None
    error: Optional[str] = None
    try:
        result = module.run(ctx)
    except ToolUnavailableError as e:
        status, error = ModuleStatus.UNAVAILABLE, str(e)
        _logger.debug("Module '%s' skipped: %s", module.id, e)
    except ToolTimeoutError as e:
        status, error = ModuleStatus.TIMEOUT, str(e)
        _logger.warning("Module '%s' skipped: %s", module.id, e)
    except Exception as e:
        status, error = ModuleStatus.FAILED, str(InternalError(module.id, e))
        _logger.exception("Module '%s' raised an exception; skipped", module.id)
    duration_ms = int((time.monotonic() - t0) * 1000)
    _logger.debug("Module '%s' finished: %s in %dms", module.id, status.value, duration_ms)
    return ModuleOutcome(
        module_id=module.id,
        status=status,
        result=result,
        error=error,
        duration_ms=duration_ms,
    )


class AnalysisEngine:
    """Stateless-per-request analysis service.

    Parameters
    ----------
    config:
        Engine settings.
    tools:
        Result of the startup probe; read-only for the engine's lifetime.
    executor:
        Process runner for external tools (``run_process`` by default).
    modules:
        Override the module set, keyed by id in run order.  Defaults to
        ``build_modules(config, tools, executor=executor)``.
    """

    def __init__(
        self,
        config: EngineConfig,
        tools: ToolAvailability,
        *,
        executor: ProcessExecutor = run_process,
        modules: Optional[Mapping[str, Analyzer]] = None,
    ) -> None:
        self.config = config
        self.tools = tools
        self.workspace = WorkspaceManager(config.workspace_root)
        self.modules: Mapping[str, Analyzer] = (
            dict(modules) if modules is not None
            else build_modules(config, tools, executor=executor)
        )

    @classmethod
    def create(
        cls,
        config: Optional[EngineConfig] = None,
        *,
        executor: ProcessExecutor = run_process,
    ) -> "AnalysisEngine":
        """Load config (if not given), probe external tools once, build the engine."""
        config = config or EngineConfig.load()
        tools = probe_tools(default_tool_specs(config), enabled=config.enable_external_tools)
        return cls(config, tools, executor=executor)

    # ── public API ──────────────────────────────────────────────────

    def analyze(
        self,
        request: AnalysisRequest,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> AnalysisReport:
        """Run every module the request's categories resolve to.

        Returns ``success=False`` only for invalid source text or a
        workspace failure.  Raises ``AnalysisCancelledError`` (after
        teardown) if *cancel_event* is set while modules are running.
        """
        run = _Run()
        text = request.source_text

        problem = self._reject_reason(text)
        if problem is not None:
            run.advance(RunState.ABORTED)
            _logger.info("Analysis rejected: %s", problem)
            return AnalysisReport.failure(problem, analysis_time_ms=run.elapsed_ms())

        module_ids = resolve_modules(request.requested_categories, order=self.modules)
        try:
            with self.workspace.session() as session:
                run.analysis_id = session.session_id
                self.workspace.write_source(session, text)
                run.advance(RunState.WORKSPACE_READY)
                _logger.info(
                    "Analysis %s started: categories=%s modules=%d source_chars=%d",
                    run.analysis_id,
                    ",".join(sorted(c.value for c in request.requested_categories)) or "-",
                    len(module_ids),
                    len(text),
                )

                ctx = AnalysisContext(
                    source_text=text,
                    session=session,
                    options=request.options,
                    config=self.config,
                )
                run.advance(RunState.RUNNING)
                try:
                    outcomes = self._run_modules(
                        [self.modules[m] for m in module_ids], ctx, run, cancel_event
                    )
                except AnalysisCancelledError:
                    run.advance(RunState.ABORTED)
                    _logger.info("Analysis %s cancelled; partial results discarded", run.analysis_id)
                    raise

                run.advance(RunState.AGGREGATING)
                report = merge(outcomes, request.options, analysis_time_ms=run.elapsed_ms())
        except WorkspaceError as e:
            run.advance(RunState.ABORTED)
            _logger.warning("Analysis aborted: %s", e)
            return AnalysisReport.failure(str(e), analysis_time_ms=run.elapsed_ms())

        run.advance(RunState.COMPLETED)
        _logger.info(
            "Analysis %s completed: %d issue(s) in %dms",
            run.analysis_id,
            len(report.issues),
            report.analysis_time_ms,
        )
        return report

    # ── internals ───────────────────────────────────────────────────

    def _reject_reason(self, text: str) -> Optional[str]:
        if not text or not text.strip():
            return "Source text is empty"
        if "\x00" in text:
            return "Source text contains NUL characters"
        if len(text) > self.config.max_source_chars:
            return (
                f"Source text exceeds {self.config.max_source_chars} characters "
                f"({len(text)})"
            )
        return None

    def _run_modules(
        self,
        modules: Sequence[Analyzer],
        ctx: AnalysisContext,
        run: _Run,
        cancel_event: Optional[threading.Event],
    ) -> list[ModuleOutcome]:
        """Run *modules* concurrently; return outcomes in *modules* order."""
        if not modules:
            return []

        deadline = run.started + self.config.request_timeout_s
        pool = ThreadPoolExecutor(
            max_workers=max(1, min(self.config.max_workers, len(modules))),
            thread_name_prefix=f"codecheck-{run.analysis_id[:8]}",
        )
        futures: list[tuple[Analyzer, Future[ModuleOutcome]]] = [
            (m, pool.submit(run_module, m, ctx)) for m in modules
        ]
        try:
            pending = {f for _, f in futures}
            while pending:
                if cancel_event is not None and cancel_event.is_set():
                    raise AnalysisCancelledError(f"analysis {run.analysis_id} cancelled")
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    _logger.warning(
                        "Analysis %s hit the %.0fs request timeout; %d module(s) dropped",
                        run.analysis_id,
                        self.config.request_timeout_s,
                        len(pending),
                    )
                    break
                _, pending = wait(
                    pending,
                    timeout=min(remaining, _POLL_INTERVAL_S),
                    return_when=FIRST_COMPLETED,
                )
            if cancel_event is not None and cancel_event.is_set():
                raise AnalysisCancelledError(f"analysis {run.analysis_id} cancelled")
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        outcomes: list[ModuleOutcome] = []
        for module, future in futures:
            if future.done() and not future.cancelled():
                outcomes.append(future.result())
            else:
                outcomes.append(
                    ModuleOutcome(
                        module_id=module.id,
                        status=ModuleStatus.TIMEOUT,
                        error="request deadline exceeded",
                    )
                )
        return outcomes
