"""
codex-yolo approver - unattended Codex CLI sessions in tmux.

Watches every pane of a tmux session and presses Enter on Codex permission
prompts (run command, edit files, tool call, trust directory, full access,
network access, MCP information requests). Codex's sandbox stays in place;
only the interactive confirmation is automated.

Usage:
    codex-yolo-approver my-session
    codex-yolo-approver my-session 0.5 /tmp/my-session-audit.log
"""

__version__ = "0.1.0"

from .classifier import ClassificationResult, MatchKind, Signal, classify
from .config import Config, load_config
from .daemon import ApproverDaemon

__all__ = [
    "ApproverDaemon",
    "ClassificationResult",
    "Config",
    "MatchKind",
    "Signal",
    "classify",
    "load_config",
    "__version__",
]
