"""Engine configuration.

Defaults are overridden by an optional YAML file, then by environment
variables prefixed ``CODECHECK_`` (e.g. ``CODECHECK_TOOL_TIMEOUT_S=30``).
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

_logger = logging.getLogger(__name__)

ENV_PREFIX = "CODECHECK_"

# Keys accepted from the legacy engine config file's ``analysis`` section.
_FILE_ALIASES = {
    "analysis_timeout": "tool_timeout_s",
    "temp_dir": "workspace_root",
}


def _default_workspace_root() -> Path:
    return Path(tempfile.gettempdir()) / "codecheck"


@dataclass(frozen=True)
class EngineConfig:
    """Immutable engine configuration, built once at process startup."""

    # Workspace
    workspace_root: Path = field(default_factory=_default_workspace_root)

    # External tools
    clang_tidy_path: str = "/usr/bin/clang-tidy"
    cppcheck_path: str = "/usr/bin/cppcheck"
    enable_external_tools: bool = True
    tool_timeout_s: float = 60.0

    # Orchestration
    request_timeout_s: float = 120.0
    max_workers: int = 4
    max_source_chars: int = 50_000

    # Rule engine thresholds
    complexity_threshold: int = 15
    large_array_threshold: int = 10_000
    max_line_length: int = 100

    # ── loaders ─────────────────────────────────────────────────────

    @classmethod
    def load(
        cls,
        path: Optional[str | Path] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "EngineConfig":
        """Defaults → YAML file (if given) → environment overrides."""
        base = cls.from_file(path) if path is not None else cls()
        return base.with_env(environ)

    @classmethod
    def from_file(cls, path: str | Path) -> "EngineConfig":
        """Load settings from a YAML file.

        Accepts flat keys or an ``analysis:`` section.  Unknown keys are
        logged and ignored.
        """
        try:
            raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"{path}: invalid YAML: {e}") from e
        if not isinstance(raw, dict):
            raise ValueError(f"{path}: expected a mapping at the top level")

        values: dict[str, Any] = {k: v for k, v in raw.items() if k != "analysis"}
        section = raw.get("analysis")
        if isinstance(section, dict):
            values.update(section)

        base = cls()
        known = {f.name for f in fields(cls)}
        updates: dict[str, Any] = {}
        for key, value in values.items():
            name = _FILE_ALIASES.get(key, key)
            if name not in known:
                _logger.warning("Ignoring unknown config key %r in %s", key, path)
                continue
            updates[name] = _coerce(name, value, getattr(base, name))
        return replace(base, **updates)

    def with_env(self, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Return a copy with ``CODECHECK_*`` environment overrides applied."""
        env = os.environ if environ is None else environ
        updates: dict[str, Any] = {}
        for f in fields(self):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is not None:
                updates[f.name] = _coerce(f.name, raw, getattr(self, f.name))
        return replace(self, **updates) if updates else self


def _coerce(name: str, value: Any, current: Any) -> Any:
    """Convert *value* to the type of the field's current value."""
    try:
        if isinstance(current, bool):
            if isinstance(value, bool):
                return value
            return str(value).strip().lower() in ("true", "1", "yes", "on")
        if isinstance(current, int):
            return int(value)
        if isinstance(current, float):
            return float(value)
        if isinstance(current, Path):
            return Path(value).expanduser()
        return str(value)
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"config '{name}': cannot use {value!r} as {type(current).__name__}"
        ) from e
