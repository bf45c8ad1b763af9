"""
tmux adapter.

Wraps the handful of tmux commands the approver needs. Every call returns a
TmuxResult instead of raising, so the daemon decides where failures are
discarded.
"""

import shutil
import subprocess
from dataclasses import dataclass
from typing import Any, List, Protocol, runtime_checkable

# Seconds before a tmux call is abandoned
TMUX_TIMEOUT = 3


@dataclass(frozen=True)
class TmuxResult:
    """Outcome of one tmux command."""
    ok: bool
    value: Any = None
    error: str = ""

    @classmethod
    def success(cls, value: Any = None) -> "TmuxResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "TmuxResult":
        return cls(ok=False, error=error)


@runtime_checkable
class Multiplexer(Protocol):
    def session_exists(self, session_name: str) -> bool: ...
    def list_panes(self, session_name: str) -> TmuxResult: ...
    def capture_pane(self, pane_id: str) -> TmuxResult: ...
    def send_confirm(self, pane_id: str) -> TmuxResult: ...


def tmux_available() -> bool:
    """Return True if the tmux binary is on PATH."""
    return shutil.which("tmux") is not None


def _run_tmux(args: List[str], timeout: float = TMUX_TIMEOUT) -> TmuxResult:
    """Run `tmux <args>` and return its stdout on success."""
    try:
        result = subprocess.run(
            ["tmux", *args],
            capture_output=True, text=True, errors="replace", timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        return TmuxResult.failure(f"tmux {args[0]} timed out")
    except OSError as e:
        return TmuxResult.failure(f"tmux {args[0]} failed: {e}")
    except ValueError as e:
        # Undecodable output from a pane
        return TmuxResult.failure(f"tmux {args[0]} output unreadable: {e}")

    if result.returncode != 0:
        return TmuxResult.failure(result.stderr.strip() or f"exit status {result.returncode}")
    return TmuxResult.success(result.stdout)


class TmuxMultiplexer:
    """Multiplexer backed by the tmux CLI."""

    def __init__(self, timeout: float = TMUX_TIMEOUT):
        self.timeout = timeout

    def session_exists(self, session_name: str) -> bool:
        return _run_tmux(["has-session", "-t", session_name], self.timeout).ok

    def list_panes(self, session_name: str) -> TmuxResult:
        """List pane ids across every window of the session."""
        result = _run_tmux(
            ["list-panes", "-s", "-t", session_name, "-F", "#{pane_id}"],
            self.timeout,
        )
        if not result.ok:
            return result
        panes = [p.strip() for p in result.value.split("\n") if p.strip()]
        return TmuxResult.success(panes)

    def capture_pane(self, pane_id: str) -> TmuxResult:
        """Capture the visible text of a pane."""
        return _run_tmux(["capture-pane", "-p", "-t", pane_id], self.timeout)

    def send_confirm(self, pane_id: str) -> TmuxResult:
        """Press Enter, accepting the pre-selected first option."""
        return _run_tmux(["send-keys", "-t", pane_id, "Enter"], self.timeout)
