"""
Configuration system for the Codex approver daemon.

Supports:
- YAML config files (.codex-yolo.yaml)
- Environment variable overrides (CODEX_YOLO_*, loaded from .env)
- CLI argument overrides
- Sensible defaults
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .cooldown import DEFAULT_COOLDOWN_SECS
from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".codex-yolo.yaml"
DEFAULT_POLL_INTERVAL = 0.3

ENV_POLL_INTERVAL = "CODEX_YOLO_POLL_INTERVAL"
ENV_COOLDOWN = "CODEX_YOLO_COOLDOWN"
ENV_AUDIT_LOG = "CODEX_YOLO_AUDIT_LOG"
ENV_LOG_DIR = "CODEX_YOLO_LOG_DIR"


def log_dir(probe_dir: Path = Path("/tmp"), home: Optional[Path] = None) -> Path:
    """
    Return a writable directory for audit logs.

    Prefers /tmp; falls back to ~/.codex-yolo/logs where /tmp is not
    writable (e.g. Termux).
    """
    probe = probe_dir / ".codex-yolo-probe"
    try:
        probe.touch()
        probe.unlink()
        return probe_dir
    except OSError:
        pass

    fallback = (home or Path.home()) / ".codex-yolo" / "logs"
    try:
        fallback.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning(f"Could not create log directory {fallback}: {e}")
    return fallback


@dataclass
class Config:
    """Configuration for one approver daemon."""

    # Target tmux session
    session_name: str = ""

    # Seconds between polls
    poll_interval: float = DEFAULT_POLL_INTERVAL

    # Seconds a pane is left alone after an approval
    cooldown_secs: float = DEFAULT_COOLDOWN_SECS

    # Audit destination (default: <log_dir>/codex-yolo-<session>.log)
    audit_log: Optional[Path] = None

    # Directory for the default audit log (default: probed)
    log_dir: Optional[Path] = None

    verbose: bool = False

    def resolved_audit_log(self) -> Path:
        """Audit log path, derived from the session name when not set."""
        if self.audit_log is not None:
            return self.audit_log
        directory = self.log_dir if self.log_dir is not None else log_dir()
        return directory / f"codex-yolo-{self.session_name}.log"

    def validate(self) -> None:
        if not self.session_name:
            raise ConfigError("a tmux session name is required")
        if self.poll_interval <= 0:
            raise ConfigError(f"poll interval must be positive, got {self.poll_interval}")
        if self.cooldown_secs < 0:
            raise ConfigError(f"cooldown must not be negative, got {self.cooldown_secs}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_name": self.session_name,
            "poll_interval": self.poll_interval,
            "cooldown_secs": self.cooldown_secs,
            "audit_log": str(self.audit_log) if self.audit_log else None,
            "log_dir": str(self.log_dir) if self.log_dir else None,
        }

    def to_yaml(self) -> str:
        """Convert config to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)


def _to_float(value: Any, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}")


def load_config(path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, returns defaults.

    Returns:
        Config instance with loaded values merged over defaults.
    """
    config = Config()

    if path is None or not path.exists():
        return config

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return config

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config {path}: expected a mapping")
        return config

    if "session_name" in data:
        config.session_name = str(data["session_name"])
    for key in ("poll_interval", "cooldown_secs"):
        if key not in data:
            continue
        try:
            setattr(config, key, _to_float(data[key], key))
        except ConfigError as e:
            logger.warning(f"Ignoring {key} in {path}: {e}")
    if data.get("audit_log"):
        config.audit_log = Path(data["audit_log"]).expanduser()
    if data.get("log_dir"):
        config.log_dir = Path(data["log_dir"]).expanduser()

    return config


def apply_env(config: Config, environ: Optional[Mapping[str, str]] = None) -> Config:
    """Apply CODEX_YOLO_* environment overrides in place."""
    env = os.environ if environ is None else environ

    if env.get(ENV_POLL_INTERVAL):
        config.poll_interval = _to_float(env[ENV_POLL_INTERVAL], ENV_POLL_INTERVAL)
    if env.get(ENV_COOLDOWN):
        config.cooldown_secs = _to_float(env[ENV_COOLDOWN], ENV_COOLDOWN)
    if env.get(ENV_AUDIT_LOG):
        config.audit_log = Path(env[ENV_AUDIT_LOG]).expanduser()
    if env.get(ENV_LOG_DIR):
        config.log_dir = Path(env[ENV_LOG_DIR]).expanduser()
    return config


def find_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """
    Find .codex-yolo.yaml by walking up directory tree.

    Args:
        start_dir: Directory to start from. Defaults to cwd.

    Returns:
        Path to config file if found, None otherwise.
    """
    start = start_dir or Path.cwd()

    for parent in [start] + list(start.parents):
        config_file = parent / CONFIG_FILENAME
        if config_file.exists():
            return config_file

        # Stop at git root
        if (parent / ".git").exists():
            break

    return None
