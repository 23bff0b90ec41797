"""Tests for harbormaster.commands.list_cmd."""

from __future__ import annotations

import argparse

from harbormaster.commands.list_cmd import run


class TestList:
    def test_lists_projects(self, make_project, capsys):
        make_project("media")
        make_project("auth", filename="docker-compose.yml")
        rc = run(argparse.Namespace())
        assert rc == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split()[0] == "auth"
        assert lines[0].endswith("docker-compose.yml")
        assert lines[1].split()[0] == "media"

    def test_empty(self, tmp_home, capsys):
        rc = run(argparse.Namespace())
        assert rc == 0
        assert "No projects found" in capsys.readouterr().out
