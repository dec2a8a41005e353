"""Process invocation adapter.

Runs one external analyzer binary under a hard wall-clock timeout and hands
back exit code, stdout and stderr as a plain value.  Nothing here raises on
a nonzero exit, a timeout, or a missing binary; callers inspect the result.
"""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

_logger = logging.getLogger(__name__)

# Sentinel exit codes (real processes never report negative codes on POSIX
# except for signals, which the adapter does not surface separately).
TIMEOUT_EXIT_CODE = -1
UNAVAILABLE_EXIT_CODE = 127

# How long to wait for the pipes to drain once the process group is killed.
_DRAIN_TIMEOUT_S = 2.0


@dataclass(frozen=True, slots=True)
class ProcessResult:
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    available: bool = True

    def stream(self, name: str) -> str:
        """Return ``stdout``, ``stderr`` or ``both`` (stdout then stderr)."""
        if name == "stdout":
            return self.stdout
        if name == "stderr":
            return self.stderr
        if name == "both":
            if self.stdout and self.stderr:
                return self.stdout.rstrip("\n") + "\n" + self.stderr
            return self.stdout or self.stderr
        raise ValueError(f"unknown output stream {name!r}")


# Signature shared by ``run_process`` and test doubles.
ProcessExecutor = Callable[[Sequence[str], float], ProcessResult]


def run_process(
    args: Sequence[str],
    timeout_s: float,
    *,
    cwd: Optional[Path] = None,
) -> ProcessResult:
    """Spawn exactly one child process and wait at most *timeout_s* seconds.

    The child runs in its own session so that on timeout the whole process
    group (including anything it forked) is killed.
    """
    argv = [str(a) for a in args]
    try:
        proc = subprocess.Popen(  # nosec B603 - fixed argument vector, no shell
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=str(cwd) if cwd is not None else None,
            encoding="utf-8",
            errors="replace",
            start_new_session=True,
        )
    except OSError as e:
        # FileNotFoundError, PermissionError, exec format errors.
        _logger.debug("Cannot start %s: %s", argv[0] if argv else "<empty>", e)
        return ProcessResult(
            exit_code=UNAVAILABLE_EXIT_CODE,
            stderr=str(e),
            available=False,
        )

    try:
        stdout, stderr = proc.communicate(timeout=timeout_s)
    except subprocess.TimeoutExpired:
        _kill_process_group(proc)
        stdout, stderr = _drain(proc, argv[0])
        _logger.warning("Process %s killed after %.1fs timeout", argv[0], timeout_s)
        return ProcessResult(
            exit_code=TIMEOUT_EXIT_CODE,
            stdout=stdout or "",
            stderr=stderr or "",
            timed_out=True,
        )

    return ProcessResult(exit_code=proc.returncode, stdout=stdout or "", stderr=stderr or "")


def _drain(proc: subprocess.Popen, name: str) -> tuple[str, str]:
    """Collect what is left on the pipes after a kill.

    A descendant that left the process group may still hold the pipes open;
    its output is dropped rather than waited for.
    """
    try:
        return proc.communicate(timeout=_DRAIN_TIMEOUT_S)
    except subprocess.TimeoutExpired:
        _logger.debug("Pipes of %s still open after kill; discarding output", name)
    try:
        proc.kill()
    except ProcessLookupError:
        pass
    for pipe in (proc.stdout, proc.stderr):
        if pipe is not None:
            pipe.close()
    proc.wait()
    return "", ""


def _kill_process_group(proc: subprocess.Popen) -> None:
    if hasattr(os, "killpg"):
        try:
            os.killpg(proc.pid, signal.SIGKILL)
            return
        except ProcessLookupError:
            return
        except OSError as e:
            _logger.debug("killpg(%d) failed: %s; killing child only", proc.pid, e)
    try:
        proc.kill()
    except ProcessLookupError:
        pass
