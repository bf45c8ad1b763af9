"""
Approver daemon.

Polls every pane of one tmux session, and when a Codex permission prompt is
showing, presses Enter to accept the pre-selected option. Per-pane errors are
skipped until the next tick; only the session disappearing (or a signal)
stops the loop.
"""

import enum
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .audit import AuditLog
from .classifier import classify
from .config import Config
from .cooldown import CooldownTracker
from .errors import SessionNotFoundError
from .tmux import Multiplexer, TmuxMultiplexer

logger = logging.getLogger(__name__)


class DaemonState(enum.Enum):
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class Approval:
    pane_id: str
    pattern: str
    audited: bool = True


@dataclass
class TickReport:
    """What happened during one tick."""
    session_gone: bool = False
    panes: List[str] = field(default_factory=list)
    cooldown_skips: List[str] = field(default_factory=list)
    approvals: List[Approval] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


class ApproverDaemon:
    """Auto-approver bound to a single tmux session.

    Owns its cooldown table and audit log, so several daemons can run side by
    side (in one process or many) without touching each other's state.
    """

    def __init__(
        self,
        config: Config,
        mux: Optional[Multiplexer] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        audit: Optional[AuditLog] = None,
    ):
        self.config = config
        self.mux = mux if mux is not None else TmuxMultiplexer()
        self.cooldown = CooldownTracker(config.cooldown_secs, clock)
        self.audit = audit if audit is not None else AuditLog(
            config.resolved_audit_log(), config.session_name
        )
        self.state = DaemonState.STOPPED
        self._sleep = sleep
        self._stop_requested = False
        self._stop_signum: Optional[int] = None

    @property
    def session_name(self) -> str:
        return self.config.session_name

    def start(self) -> None:
        """Enter RUNNING. Raises SessionNotFoundError if the session is missing."""
        if not self.mux.session_exists(self.session_name):
            raise SessionNotFoundError(self.session_name)

        self.state = DaemonState.RUNNING
        logger.info(
            f"Approver daemon started for session '{self.session_name}' "
            f"(poll={self.config.poll_interval}s, cooldown={self.config.cooldown_secs}s)"
        )
        self.audit.record_lifecycle_start()

    def stop(self, signum: Optional[int] = None) -> None:
        """Ask the loop to exit after the current tick. Safe from a signal handler."""
        self._stop_requested = True
        if signum is not None:
            self._stop_signum = signum

    def tick(self) -> TickReport:
        """Run one poll over every pane of the session."""
        report = TickReport()

        if not self.mux.session_exists(self.session_name):
            logger.warning(f"Session '{self.session_name}' no longer exists, exiting daemon")
            self.state = DaemonState.STOPPED
            report.session_gone = True
            return report

        panes = self.mux.list_panes(self.session_name)
        if not panes.ok:
            # Transient; the session check above decides whether to stop
            logger.debug(f"list-panes failed for '{self.session_name}': {panes.error}")
            report.errors.append(panes.error)
            return report

        report.panes = list(panes.value)
        for pane_id in report.panes:
            self._check_pane(pane_id, report)
        return report

    def _check_pane(self, pane_id: str, report: TickReport) -> None:
        if self.cooldown.is_in_cooldown(pane_id):
            report.cooldown_skips.append(pane_id)
            return

        capture = self.mux.capture_pane(pane_id)
        if not capture.ok:
            logger.debug(f"capture-pane failed for {pane_id}: {capture.error}")
            report.errors.append(capture.error)
            return

        snapshot = capture.value or ""
        if not snapshot:
            return

        result = classify(snapshot)
        if not result:
            return

        sent = self.mux.send_confirm(pane_id)
        if not sent.ok:
            logger.debug(f"send-keys failed for {pane_id}: {sent.error}")
            report.errors.append(sent.error)
            return

        self.cooldown.record_approval(pane_id)
        audited = self.audit.record(pane_id, result.pattern)
        report.approvals.append(Approval(pane_id, result.pattern, audited))

    def run(self) -> int:
        """
        Poll until the session disappears or stop() is called.

        Returns:
            0 when the session went away, 128 + signum when stopped by a
            signal. An unexpected exception is re-raised after the exit
            record is written with code 1.
        """
        self.start()

        exit_code = 1
        try:
            while self.state is DaemonState.RUNNING and not self._stop_requested:
                self.tick()
                if self.state is DaemonState.RUNNING and not self._stop_requested:
                    self._sleep(self.config.poll_interval)

            exit_code = 128 + self._stop_signum if self._stop_signum else 0
            return exit_code
        finally:
            self.state = DaemonState.STOPPED
            self.audit.record_lifecycle_exit(exit_code)
            logger.warning(f"Approver daemon exiting (code={exit_code})")
