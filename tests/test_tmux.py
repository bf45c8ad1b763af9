"""Tests for the tmux adapter (mocked subprocess)."""

import subprocess
from unittest.mock import MagicMock, patch

from codex_yolo.tmux import Multiplexer, TmuxMultiplexer, TmuxResult, tmux_available


def _completed(returncode=0, stdout="", stderr=""):
    return MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)


class TestTmuxResult:
    def test_success(self):
        result = TmuxResult.success(["%1"])
        assert result.ok is True
        assert result.value == ["%1"]

    def test_failure(self):
        result = TmuxResult.failure("no server running")
        assert result.ok is False
        assert result.error == "no server running"


class TestTmuxMultiplexer:
    def test_satisfies_protocol(self):
        assert isinstance(TmuxMultiplexer(), Multiplexer)

    @patch("codex_yolo.tmux.subprocess.run")
    def test_session_exists(self, mock_run):
        mock_run.return_value = _completed(0)
        assert TmuxMultiplexer().session_exists("work") is True
        args = mock_run.call_args[0][0]
        assert args == ["tmux", "has-session", "-t", "work"]

    @patch("codex_yolo.tmux.subprocess.run")
    def test_session_missing(self, mock_run):
        mock_run.return_value = _completed(1, stderr="can't find session: work")
        assert TmuxMultiplexer().session_exists("work") is False

    @patch("codex_yolo.tmux.subprocess.run")
    def test_list_panes(self, mock_run):
        mock_run.return_value = _completed(0, stdout="%0\n%3\n\n%7\n")
        result = TmuxMultiplexer().list_panes("work")
        assert result.ok
        assert result.value == ["%0", "%3", "%7"]
        args = mock_run.call_args[0][0]
        assert args == ["tmux", "list-panes", "-s", "-t", "work", "-F", "#{pane_id}"]

    @patch("codex_yolo.tmux.subprocess.run")
    def test_list_panes_failure(self, mock_run):
        mock_run.return_value = _completed(1, stderr="can't find session: work\n")
        result = TmuxMultiplexer().list_panes("work")
        assert not result.ok
        assert result.error == "can't find session: work"

    @patch("codex_yolo.tmux.subprocess.run")
    def test_capture_pane(self, mock_run):
        mock_run.return_value = _completed(0, stdout="hello\n")
        result = TmuxMultiplexer().capture_pane("%3")
        assert result.ok
        assert result.value == "hello\n"
        assert mock_run.call_args[0][0] == ["tmux", "capture-pane", "-p", "-t", "%3"]

    @patch("codex_yolo.tmux.subprocess.run")
    def test_send_confirm(self, mock_run):
        mock_run.return_value = _completed(0)
        assert TmuxMultiplexer().send_confirm("%3").ok
        assert mock_run.call_args[0][0] == ["tmux", "send-keys", "-t", "%3", "Enter"]

    @patch("codex_yolo.tmux.subprocess.run")
    def test_timeout_is_failure(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="tmux", timeout=3)
        result = TmuxMultiplexer().capture_pane("%3")
        assert not result.ok
        assert "timed out" in result.error

    @patch("codex_yolo.tmux.subprocess.run")
    def test_missing_binary_is_failure(self, mock_run):
        mock_run.side_effect = FileNotFoundError("tmux")
        assert TmuxMultiplexer().send_confirm("%3").ok is False
        assert TmuxMultiplexer().session_exists("work") is False

    @patch("codex_yolo.tmux.subprocess.run")
    def test_undecodable_output_is_failure(self, mock_run):
        mock_run.side_effect = UnicodeDecodeError("utf-8", b"\xff\xfe", 0, 1, "invalid start byte")
        result = TmuxMultiplexer().capture_pane("%1")
        assert not result.ok
        assert "unreadable" in result.error

    @patch("codex_yolo.tmux.subprocess.run")
    def test_decodes_with_replacement(self, mock_run):
        mock_run.return_value = _completed(0, stdout="ok")
        TmuxMultiplexer().capture_pane("%1")
        assert mock_run.call_args[1]["errors"] == "replace"

    @patch("codex_yolo.tmux.subprocess.run")
    def test_nonzero_without_stderr(self, mock_run):
        mock_run.return_value = _completed(1)
        assert TmuxMultiplexer().send_confirm("%3").error == "exit status 1"


class TestTmuxAvailable:
    @patch("codex_yolo.tmux.shutil.which", return_value="/usr/bin/tmux")
    def test_available(self, _which):
        assert tmux_available() is True

    @patch("codex_yolo.tmux.shutil.which", return_value=None)
    def test_missing(self, _which):
        assert tmux_available() is False
