"""Process exit codes returned by the ``codecheck`` commands.

``analyze``
    0 when the report has no Error issues (after ``--strict`` promotion),
    1 when it has at least one, 2 for usage errors, an unreadable source or
    config file, and failed analyses (``success: false``).

``validate``
    0 when the report matches the bundled schema, 1 when it violates it,
    2 when the file is missing or is not JSON.

``tools``
    0 after listing the resolved analyzer binaries, 2 when the config file
    cannot be loaded.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    VIOLATION = 1
    ERROR = 2
