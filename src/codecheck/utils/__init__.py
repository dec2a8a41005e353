"""Shared utilities for codecheck."""

from codecheck.utils.exit_codes import ExitCode
from codecheck.utils.json_norm import stable_json_dump, stable_json_dumps

__all__ = [
    "ExitCode",
    "stable_json_dump",
    "stable_json_dumps",
]
