"""Tests for harbormaster.cli."""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from harbormaster.cli import build_parser, main
from harbormaster.errors import ComposeError


class TestParser:
    def test_version(self, capsys):
        from harbormaster import __version__

        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_check_target(self):
        args = build_parser().parse_args(["check", "media.plex"])
        assert args.command == "check"
        assert args.target == "media.plex"
        assert args.timeout is None

    def test_check_flags(self):
        args = build_parser().parse_args(["check", "media", "--timeout", "3", "--retries", "2"])
        assert args.timeout == 3.0
        assert args.retries == 2

    def test_check_requires_target(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["check"])
        assert exc_info.value.code == 2

    def test_list(self):
        assert build_parser().parse_args(["list"]).command == "list"

    def test_config_init(self):
        args = build_parser().parse_args(["config", "--init"])
        assert args.init is True

    def test_no_command_prints_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "usage:" in capsys.readouterr().out


class TestVerbose:
    def test_verbose_sets_debug(self):
        with pytest.raises(SystemExit):
            main(["-v", "--version"])
        assert logging.getLogger("harbormaster").level == logging.DEBUG

    def test_no_verbose_sets_warning(self):
        with pytest.raises(SystemExit):
            main(["--version"])
        assert logging.getLogger("harbormaster").level == logging.WARNING

    def test_verbose_stripped_from_args(self, tmp_home, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["list", "--verbose"])
        assert exc_info.value.code == 0

    def test_epilog_mentions_verbose(self):
        assert "--verbose" in build_parser().epilog


class TestDispatch:
    def test_harbormaster_error_exits_1(self, capsys):
        with patch("harbormaster.commands.list_cmd.run", side_effect=ComposeError("boom")):
            with pytest.raises(SystemExit) as exc_info:
                main(["list"])
        assert exc_info.value.code == 1
        assert "Error: boom" in capsys.readouterr().err

    def test_keyboard_interrupt_exits_130(self):
        with patch("harbormaster.commands.list_cmd.run", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                main(["list"])
        assert exc_info.value.code == 130
