"""External tool specs and the once-per-process availability probe."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional

from codecheck.core.config import EngineConfig
from codecheck.model.request import AnalysisOptions

_logger = logging.getLogger(__name__)

CLANG_TIDY = "clang-tidy"
CPPCHECK = "cppcheck"

# Whole-program checks that only make noise on a single snippet.
CLANG_TIDY_CHECKS = "*,-fuchsia-*,-llvm-header-guard,-google-readability-todo"
CPPCHECK_TEMPLATE = "{file}:{line}:{column}: {severity}: {message} [{id}]"

ArgBuilder = Callable[[str, Path, AnalysisOptions], list[str]]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """How to invoke one external analyzer and which stream it reports on."""

    name: str
    binary: str
    output_stream: str
    build_args: ArgBuilder

    def command(
        self,
        source_path: Path,
        options: AnalysisOptions,
        *,
        binary: Optional[str] = None,
    ) -> list[str]:
        return self.build_args(binary or self.binary, source_path, options)


def _clang_tidy_args(binary: str, source_path: Path, options: AnalysisOptions) -> list[str]:
    args = [binary, f"-checks={CLANG_TIDY_CHECKS}", "--format-style=llvm"]
    if options.strict_mode:
        args.append("--warnings-as-errors=*")
    args += [str(source_path), "--", f"-std={options.standard_profile}"]
    return args


def _cppcheck_args(binary: str, source_path: Path, options: AnalysisOptions) -> list[str]:
    return [
        binary,
        "--enable=all",
        f"--std={options.standard_profile}",
        "--platform=unix64",
        "--inline-suppr",
        "--quiet",
        f"--template={CPPCHECK_TEMPLATE}",
        str(source_path),
    ]


def default_tool_specs(config: EngineConfig) -> tuple[ToolSpec, ...]:
    return (
        # clang-tidy splits diagnostics across both streams.
        ToolSpec(CLANG_TIDY, config.clang_tidy_path, "both", _clang_tidy_args),
        # cppcheck reports on stderr only.
        ToolSpec(CPPCHECK, config.cppcheck_path, "stderr", _cppcheck_args),
    )


@dataclass(frozen=True)
class ToolAvailability:
    """Read-only result of the startup probe: tool name → resolved binary."""

    paths: Mapping[str, Optional[str]] = field(default_factory=lambda: MappingProxyType({}))

    def is_available(self, name: str) -> bool:
        return self.paths.get(name) is not None

    def path_for(self, name: str) -> Optional[str]:
        return self.paths.get(name)

    @classmethod
    def of(cls, paths: Mapping[str, Optional[str]]) -> "ToolAvailability":
        return cls(paths=MappingProxyType(dict(paths)))

    @classmethod
    def none(cls, names: Iterable[str] = (CLANG_TIDY, CPPCHECK)) -> "ToolAvailability":
        return cls.of({n: None for n in names})

    def to_dict(self) -> dict[str, Optional[str]]:
        return dict(sorted(self.paths.items()))


def resolve_binary(binary: str) -> Optional[str]:
    """Return an executable path for *binary*, or ``None``.

    Explicit paths are checked in place; if missing, the bare executable
    name is looked up on ``PATH``.
    """
    if os.sep in binary or (os.altsep and os.altsep in binary):
        p = Path(binary)
        if p.is_file() and os.access(p, os.X_OK):
            return str(p)
        return shutil.which(p.name)
    return shutil.which(binary)


def probe_tools(
    specs: Iterable[ToolSpec],
    *,
    enabled: bool = True,
) -> ToolAvailability:
    """Probe every tool once.  Call at startup; the result never changes."""
    paths: dict[str, Optional[str]] = {}
    for spec in specs:
        resolved = resolve_binary(spec.binary) if enabled else None
        paths[spec.name] = resolved
        if resolved:
            _logger.info("External tool %s available at %s", spec.name, resolved)
        elif enabled:
            _logger.warning("External tool %s not found (configured: %s)", spec.name, spec.binary)
    return ToolAvailability.of(paths)
