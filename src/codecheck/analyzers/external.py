"""External tool adapter: run a probed binary, parse what it reports."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from codecheck.analyzers import AnalysisContext
from codecheck.core.process import ProcessExecutor
from codecheck.core.tools import ToolSpec
from codecheck.errors import ToolTimeoutError, ToolUnavailableError
from codecheck.model.issue import Issue
from codecheck.model.report import ModuleResult

_logger = logging.getLogger(__name__)

OutputParser = Callable[..., list[Issue]]

# Exit codes whose output is parsed; 1 means "diagnostics found".
_PARSEABLE_EXIT_CODES = frozenset({0, 1})


class ExternalToolAnalyzer:
    """Invokes ``<binary> <fixed flags> <source file>`` for one tool.

    *binary* comes from the startup probe; ``None`` means the tool is not
    installed and the module fails fast without spawning anything.
    """

    version = "1.0.0"

    def __init__(
        self,
        spec: ToolSpec,
        parser: OutputParser,
        *,
        binary: Optional[str],
        executor: ProcessExecutor,
        timeout_s: float,
    ) -> None:
        self.id = spec.name
        self.spec = spec
        self._parse = parser
        self._binary = binary
        self._executor = executor
        self._timeout_s = timeout_s

    @property
    def available(self) -> bool:
        return self._binary is not None

    def run(self, ctx: AnalysisContext) -> ModuleResult:
        if self._binary is None:
            raise ToolUnavailableError(self.id, "not installed")

        args = self.spec.command(ctx.session.source_file_path, ctx.options, binary=self._binary)
        proc = self._executor(args, self._timeout_s)

        if not proc.available:
            raise ToolUnavailableError(self.id, proc.stderr.strip())
        if proc.timed_out:
            raise ToolTimeoutError(self.id, self._timeout_s)
        if proc.exit_code not in _PARSEABLE_EXIT_CODES:
            _logger.warning(
                "Tool '%s' exited with code %d; output discarded", self.id, proc.exit_code
            )
            raise ToolUnavailableError(self.id, f"exited with code {proc.exit_code}")

        issues = self._parse(
            proc.stream(self.spec.output_stream),
            base_dir=Path(ctx.session.workspace_path),
        )
        _logger.debug("Tool '%s' reported %d issue(s)", self.id, len(issues))
        return ModuleResult(issues=issues)
