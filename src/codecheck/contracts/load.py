"""Load bundled JSON schemas and validate report payloads against them.

Usage::

    from codecheck.contracts.load import validate_instance, validate_file

    validate_instance(report.to_dict(), REPORT_SCHEMA)
    validate_file(Path("report.json"))
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import jsonschema

SCHEMA_DIR = "data/schemas"
REPORT_SCHEMA = "analysis_report.schema.json"


def _schema_path(name: str) -> Path:
    """Resolve a bundled schema.

    Priority:
    1. ``src/codecheck/data/schemas/`` relative to this file (checkout / editable)
    2. installed package data via importlib.resources
    """
    local = Path(__file__).resolve().parents[1] / SCHEMA_DIR / name
    if local.exists():
        return local
    with resources.as_file(resources.files("codecheck") / SCHEMA_DIR / name) as p:
        return p


@lru_cache(maxsize=None)
def load_schema(name: str) -> dict[str, Any]:
    """Load a bundled JSON schema by filename.

    Raises ``FileNotFoundError`` for unknown names.
    """
    path = _schema_path(name)
    return json.loads(path.read_text(encoding="utf-8"))


def validate_instance(instance: Any, schema_name: str = REPORT_SCHEMA) -> None:
    """Validate *instance* against the named schema.

    Raises ``jsonschema.ValidationError`` on failure.
    """
    schema = load_schema(schema_name)
    jsonschema.validate(instance=instance, schema=schema)


def validate_file(instance_path: Path, schema_name: str = REPORT_SCHEMA) -> None:
    """Load a JSON file and validate it against the named schema."""
    instance = json.loads(Path(instance_path).read_text(encoding="utf-8"))
    validate_instance(instance, schema_name)
