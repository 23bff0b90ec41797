"""Shared fixtures for harbormaster tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from harbormaster.config import HarbormasterConfig
from harbormaster.errors import AuthError
from harbormaster.images import AuthToken, Digest
from harbormaster.projects import Project

DIGEST_A = "sha256:" + "a" * 64
DIGEST_B = "sha256:" + "b" * 64


@pytest.fixture
def tmp_home(tmp_path, monkeypatch):
    """Set HOME and XDG_CONFIG_HOME to an isolated temp tree."""
    home = tmp_path / "home"
    home.mkdir()
    config_home = tmp_path / "config"
    config_home.mkdir()
    projects = tmp_path / "projects"
    projects.mkdir()

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("HARBORMASTER_PROJECTS_DIR", str(projects))
    monkeypatch.delenv("HARBORMASTER_DOCKER_CMD", raising=False)

    return tmp_path


@pytest.fixture
def sample_config(tmp_home):
    """Return a HarbormasterConfig pointing at the temp projects root."""
    return HarbormasterConfig(paths_projects=str(tmp_home / "projects"))


@pytest.fixture
def make_project(tmp_home):
    """Create ``projects/<name>/compose.yaml`` and return a Project."""

    def _make(name: str = "web", filename: str = "compose.yaml") -> Project:
        directory = tmp_home / "projects" / name
        directory.mkdir(parents=True, exist_ok=True)
        compose_file = directory / filename
        compose_file.write_text("services: {}\n")
        return Project(name=name, directory=directory, compose_file=compose_file)

    return _make


class FakeRuntime:
    """In-memory stand-in for ComposeRuntime."""

    def __init__(
        self,
        images: dict[str, str | None] | None = None,
        digests: dict[str, str | None] | None = None,
        running: list[str] | None = None,
    ) -> None:
        self.images = images or {}
        self.digests = digests or {}
        self.running = running if running is not None else list(self.digests)

    def list_running_services(self, project: Project) -> list[str]:
        return list(self.running)

    def get_service_image(self, project: Project, service: str) -> str | None:
        return self.images.get(service)

    def get_running_image_digest(self, project: Project, service: str) -> str | None:
        return self.digests.get(service)


class FakeRegistry:
    """In-memory registry keyed by normalized repository."""

    def __init__(
        self,
        digests: dict[str, str] | None = None,
        deny: set[str] | None = None,
    ) -> None:
        self.digests = digests or {}
        self.deny = deny or set()
        self.token_requests: list[str] = []

    def get_token(self, repository: str) -> AuthToken:
        self.token_requests.append(repository)
        if repository in self.deny:
            raise AuthError(f"token request for {repository} returned HTTP 401")
        return AuthToken(f"token-{repository}")

    def fetch_config_digest(self, image, token: AuthToken) -> Digest:
        return Digest(self.digests[image.repository])


@pytest.fixture
def fake_runtime():
    return FakeRuntime


@pytest.fixture
def fake_registry():
    return FakeRegistry
