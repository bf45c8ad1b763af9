"""Exception types raised outside the daemon's running state."""


class ApproverError(Exception):
    """Base class for approver errors."""


class ConfigError(ApproverError):
    """Invalid configuration supplied at startup."""


class SessionNotFoundError(ApproverError):
    """The target tmux session does not exist."""

    def __init__(self, session_name: str):
        super().__init__(f"tmux session '{session_name}' not found")
        self.session_name = session_name
