"""
CLI entrypoint for the Codex approver daemon.

Usage:
    codex-yolo-approver my-session                 # Defaults: 0.3s poll, /tmp log
    codex-yolo-approver my-session 0.5 audit.log   # Positional poll + log path
    codex-yolo-approver my-session --cooldown 5
    codex-yolo-approver my-session --print-config  # Print resolved config
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from . import __version__
from .config import Config, apply_env, find_config_file, load_config
from .daemon import ApproverDaemon
from .errors import ConfigError, SessionNotFoundError
from .tmux import tmux_available

logger = logging.getLogger("codex_yolo")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codex-yolo-approver",
        description="Auto-approve Codex CLI permission prompts in a tmux session",
    )

    parser.add_argument(
        "session",
        nargs="?",
        help="tmux session to monitor",
    )
    parser.add_argument(
        "poll_interval",
        nargs="?",
        type=float,
        help="Seconds between polls (default: 0.3)",
    )
    parser.add_argument(
        "audit_log",
        nargs="?",
        type=Path,
        help="Audit log path (default: <log dir>/codex-yolo-<session>.log)",
    )
    parser.add_argument(
        "--cooldown",
        type=float,
        help="Seconds before the same pane may be approved again (default: 2)",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Path to config file (default: auto-discover .codex-yolo.yaml)",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Print resolved config as YAML and exit",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"codex-yolo-approver {__version__}",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> Config:
    """Defaults < YAML file < environment < command line."""
    config_path = args.config if args.config else find_config_file()
    config = load_config(config_path)
    apply_env(config)

    if args.session:
        config.session_name = args.session
    if args.poll_interval is not None:
        config.poll_interval = args.poll_interval
    if args.audit_log is not None:
        config.audit_log = args.audit_log
    if args.cooldown is not None:
        config.cooldown_secs = args.cooldown
    config.verbose = args.verbose
    return config


def install_signal_handlers(daemon: ApproverDaemon) -> None:
    def _handle(signum, frame):
        logger.info(f"Received signal {signum}, stopping")
        daemon.stop(signum)

    signal.signal(signal.SIGTERM, _handle)
    signal.signal(signal.SIGINT, _handle)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entrypoint."""
    # Load environment variables from .env file
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config(args)
        if args.print_config:
            print(config.to_yaml())
            return 0
        config.validate()
    except ConfigError as e:
        parser.error(str(e))

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format="[%(asctime)s %(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    if not tmux_available():
        logger.error("tmux is not installed")
        return 1

    daemon = ApproverDaemon(config)
    install_signal_handlers(daemon)

    try:
        return daemon.run()
    except SessionNotFoundError as e:
        logger.error(str(e))
        return 1
    except Exception:
        logger.exception("Approver daemon crashed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
