"""Workspace manager: one isolated scratch directory per analysis request."""

from __future__ import annotations

import logging
import re
import secrets
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from codecheck.errors import WorkspaceError
from codecheck.model.request import SOURCE_FILENAME, AnalysisSession

_logger = logging.getLogger(__name__)

# Session ids become directory names; never allow separators or dots.
_SESSION_ID_RE = re.compile(r"^[A-Za-z0-9_-]{8,64}$")


def new_session_id() -> str:
    """128 bits from the OS CSPRNG, so concurrent sessions cannot collide."""
    return secrets.token_hex(16)


class WorkspaceManager:
    """Creates, populates and removes per-request session directories.

    The scratch root is assumed to be dedicated to this engine.
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def create(self, session_id: Optional[str] = None) -> AnalysisSession:
        """Allocate ``<root>/<session_id>``.

        Raises ``WorkspaceError`` if the directory cannot be created; this is
        the one failure that aborts a whole analysis.
        """
        sid = session_id or new_session_id()
        if not _SESSION_ID_RE.match(sid):
            raise WorkspaceError(f"invalid session id {sid!r}")

        path = self.root / sid
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            # exist_ok=False: a pre-existing directory means a collision.
            path.mkdir(mode=0o700)
        except OSError as e:
            raise WorkspaceError(f"cannot create workspace {path}: {e}") from e

        _logger.debug("Created workspace %s", path)
        return AnalysisSession(
            session_id=sid,
            workspace_path=path,
            source_file_path=path / SOURCE_FILENAME,
        )

    def write_source(self, session: AnalysisSession, text: str) -> Path:
        """Write *text* verbatim (no newline translation) into the session."""
        try:
            with open(session.source_file_path, "w", encoding="utf-8", newline="") as fh:
                fh.write(text)
        except OSError as e:
            raise WorkspaceError(
                f"cannot write source file {session.source_file_path}: {e}"
            ) from e
        return session.source_file_path

    def destroy(self, session: AnalysisSession) -> None:
        """Best-effort recursive removal.  Idempotent; never raises."""
        path = session.workspace_path
        if not path.exists():
            return
        try:
            shutil.rmtree(path)
            _logger.debug("Removed workspace %s", path)
        except OSError as e:
            _logger.warning("Failed to clean up analysis session %s: %s", session.session_id, e)

    @contextmanager
    def session(self, session_id: Optional[str] = None) -> Iterator[AnalysisSession]:
        """Scoped acquisition: ``destroy`` runs exactly once on every exit path."""
        session = self.create(session_id)
        try:
            yield session
        finally:
            self.destroy(session)
