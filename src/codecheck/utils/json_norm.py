"""Canonical JSON serialization: the single dump path for reports.

Guarantees:
  - Stable key ordering (``sort_keys=True``)
  - Trailing newline at EOF
  - Enums → their values, ``Path`` → POSIX strings
  - Objects with ``to_dict()`` (model records) → that dict
  - Optional float rounding for byte-stable output
"""

from __future__ import annotations

import json
import math
from enum import Enum
from pathlib import Path
from typing import IO, Any, Mapping


def _to_builtin(obj: Any) -> Any:
    if obj is None or isinstance(obj, (bool, int, float, str)) and not isinstance(obj, Enum):
        return obj
    if isinstance(obj, Enum):
        return _to_builtin(obj.value)
    if isinstance(obj, Path):
        return obj.as_posix()
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return _to_builtin(to_dict())
    if isinstance(obj, Mapping):
        return {str(k): _to_builtin(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [_to_builtin(v) for v in obj]
    raise TypeError(f"cannot serialize {type(obj).__name__} to JSON")


def _round_floats(obj: Any, ndigits: int) -> Any:
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            return str(obj)
        return round(obj, ndigits)
    if isinstance(obj, dict):
        return {k: _round_floats(v, ndigits) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_round_floats(v, ndigits) for v in obj]
    return obj


def stable_json_dumps(
    obj: Any,
    *,
    indent: int | None = 2,
    round_floats: int | None = None,
) -> str:
    built = _to_builtin(obj)
    if round_floats is not None:
        built = _round_floats(built, round_floats)
    return json.dumps(built, indent=indent, sort_keys=True, ensure_ascii=False) + "\n"


def stable_json_dump(obj: Any, fp: IO[str], **kwargs: Any) -> None:
    fp.write(stable_json_dumps(obj, **kwargs))
