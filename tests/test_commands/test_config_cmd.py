"""Tests for harbormaster.commands.config_cmd."""

from __future__ import annotations

import argparse

from harbormaster.commands.config_cmd import run
from harbormaster.config import config_file_path


class TestConfigCmd:
    def test_show_defaults(self, tmp_home, capsys):
        rc = run(argparse.Namespace(init=False))
        assert rc == 0
        out = capsys.readouterr().out
        assert out.startswith("# defaults")
        assert "registry.url = https://registry-1.docker.io" in out
        assert f"paths.projects = {tmp_home / 'projects'}" in out

    def test_init_writes_file(self, tmp_home, capsys):
        rc = run(argparse.Namespace(init=True))
        assert rc == 0
        path = config_file_path()
        assert path.is_file()
        assert "[registry]" in path.read_text()
        assert "Wrote" in capsys.readouterr().out

    def test_init_keeps_existing(self, tmp_home, capsys):
        path = config_file_path()
        path.write_text('[paths]\nprojects = "/srv"\n')
        rc = run(argparse.Namespace(init=True))
        assert rc == 0
        assert path.read_text() == '[paths]\nprojects = "/srv"\n'
        assert "already exists" in capsys.readouterr().out

    def test_show_file_source(self, tmp_home, capsys):
        path = config_file_path()
        path.write_text('[registry]\ntimeout = 12\n')
        run(argparse.Namespace(init=False))
        out = capsys.readouterr().out
        assert out.startswith(f"# {path}")
        assert "registry.timeout = 12" in out
