"""Error taxonomy for the analysis engine.

Only ``WorkspaceError`` (and empty/invalid source text) ever turns a report
into ``success=False``.  Every other kind is absorbed at the analyzer-module
boundary and shows up only as the absence of that module's output.
"""

from __future__ import annotations


class CodecheckError(Exception):
    """Base class for all engine errors."""


class WorkspaceError(CodecheckError):
    """The per-request scratch workspace could not be created or written."""


class ToolUnavailableError(CodecheckError):
    """An external analyzer binary is missing or could not be started."""

    def __init__(self, tool: str, detail: str = "") -> None:
        self.tool = tool
        msg = f"tool '{tool}' is not available"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class ToolTimeoutError(CodecheckError):
    """An external analyzer exceeded its wall-clock budget and was killed."""

    def __init__(self, tool: str, timeout_s: float) -> None:
        self.tool = tool
        self.timeout_s = timeout_s
        super().__init__(f"tool '{tool}' timed out after {timeout_s:g}s")


class ParseFormatError(CodecheckError):
    """A single line of tool output did not match the expected format."""

    def __init__(self, tool: str, line: str) -> None:
        self.tool = tool
        self.line = line
        super().__init__(f"{tool}: unrecognised output line {line[:80]!r}")


class InternalError(CodecheckError):
    """Unexpected failure inside an in-process rule check."""

    def __init__(self, module_id: str, cause: BaseException) -> None:
        self.module_id = module_id
        self.cause = cause
        super().__init__(f"check '{module_id}' failed: {type(cause).__name__}: {cause}")


class AnalysisCancelledError(CodecheckError):
    """The caller cancelled an in-flight analysis; partial results are discarded."""
