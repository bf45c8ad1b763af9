"""
Append-only audit log.

Line formats are read by tailing tools and must not change:

    [YYYY-MM-DD HH:MM:SS] APPROVED pane=<pane_id> pattern="<pattern>"
    [YYYY-MM-DD HH:MM:SS] Daemon started for session=<session>
    [YYYY-MM-DD HH:MM:SS] Daemon exited (code=<code>, session=<session>)

Writes are best-effort: an unwritable log never stops the daemon.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Union

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_approval(ts: str, pane_id: str, pattern: str) -> str:
    return f'[{ts}] APPROVED pane={pane_id} pattern="{pattern}"'


def format_started(ts: str, session_name: str) -> str:
    return f"[{ts}] Daemon started for session={session_name}"


def format_exited(ts: str, exit_code: int, session_name: str) -> str:
    return f"[{ts}] Daemon exited (code={exit_code}, session={session_name})"


class AuditLog:
    """Audit destination owned by one daemon instance."""

    def __init__(
        self,
        path: Union[str, Path],
        session_name: str,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.path = Path(path)
        self.session_name = session_name
        self._now = now

    def _timestamp(self) -> str:
        return self._now().strftime(TIMESTAMP_FORMAT)

    def _append(self, line: str) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
            return True
        except OSError as e:
            logger.debug(f"Audit write to {self.path} failed: {e}")
            return False

    def record(self, pane_id: str, pattern: str) -> bool:
        """Append an APPROVED line. Returns False if the write failed."""
        ok = self._append(format_approval(self._timestamp(), pane_id, pattern))
        if ok:
            logger.info(f'Auto-approved: pane={pane_id} pattern="{pattern}"')
        else:
            logger.warning(
                f'Approved pane={pane_id} pattern="{pattern}" but audit write to {self.path} failed'
            )
        return ok

    def record_lifecycle_start(self) -> bool:
        return self._append(format_started(self._timestamp(), self.session_name))

    def record_lifecycle_exit(self, exit_code: int) -> bool:
        return self._append(format_exited(self._timestamp(), exit_code, self.session_name))
