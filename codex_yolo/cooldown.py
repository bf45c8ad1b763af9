"""
Per-pane approval cooldown.

After Enter is sent, the dialog can stay on screen for a poll or two while
Codex redraws. The cooldown keeps the same pane from being approved twice.
"""

import time
from typing import Callable, Dict, Optional

DEFAULT_COOLDOWN_SECS = 2.0


class CooldownTracker:
    """Last-approval timestamps keyed by pane id."""

    def __init__(
        self,
        window: float = DEFAULT_COOLDOWN_SECS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.window = window
        self._clock = clock
        self._last_approved: Dict[str, float] = {}

    def is_in_cooldown(self, pane_id: str, now: Optional[float] = None) -> bool:
        """True while less than `window` seconds have passed since the last approval."""
        last = self._last_approved.get(pane_id)
        if last is None:
            return False
        now = self._clock() if now is None else now
        return now - last < self.window

    def record_approval(self, pane_id: str, now: Optional[float] = None) -> None:
        self._last_approved[pane_id] = self._clock() if now is None else now

    def remaining(self, pane_id: str, now: Optional[float] = None) -> float:
        """Seconds left in the pane's cooldown, 0.0 if none."""
        last = self._last_approved.get(pane_id)
        if last is None:
            return 0.0
        now = self._clock() if now is None else now
        return max(0.0, self.window - (now - last))

    def forget(self, pane_id: str) -> None:
        self._last_approved.pop(pane_id, None)

    def __contains__(self, pane_id: str) -> bool:
        return pane_id in self._last_approved

    def __len__(self) -> int:
        return len(self._last_approved)
