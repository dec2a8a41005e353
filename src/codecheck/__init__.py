"""codecheck: code analysis aggregation engine for untrusted C++ snippets."""

__all__ = [
    "__version__",
    "AnalysisEngine",
    "analyze_source",
    "validate_instance",
]
__version__ = "0.1.0"

# Programmatic engine entrypoints (backend use).
from codecheck.api import analyze_source, validate_instance  # noqa: E402, F401
from codecheck.core.orchestrator import AnalysisEngine  # noqa: E402, F401
