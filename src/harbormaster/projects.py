"""Project discovery and ``<project>[.<service>]`` target resolution."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from harbormaster.config import HarbormasterConfig
from harbormaster.errors import ProjectError

_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


@dataclass(frozen=True)
class ServiceReference:
    """A project, optionally narrowed to one service."""

    project: str
    service: str | None = None

    def __str__(self) -> str:
        if self.service:
            return f"{self.project}.{self.service}"
        return self.project


@dataclass(frozen=True)
class Project:
    """A compose project: one directory holding one compose file."""

    name: str
    directory: Path
    compose_file: Path


def parse_target(target: str) -> ServiceReference:
    """Split ``project`` or ``project.service`` into a ServiceReference.

    Only the first ``.`` separates project from service, so service names
    may themselves contain dots.
    """
    project, sep, service = target.strip().partition(".")
    if not _NAME_RE.match(project):
        raise ProjectError(f"Invalid project name in target: {target!r}")
    if sep and not service:
        raise ProjectError(f"Missing service name after '.' in target: {target!r}")
    return ServiceReference(project, service or None)


def find_compose_file(directory: Path, names: list[str]) -> Path | None:
    """Return the first compose file from *names* present in *directory*."""
    for name in names:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def resolve_project(config: HarbormasterConfig, name: str) -> Project:
    """Locate project *name* under the projects root.

    Raises ProjectError if the directory or its compose file is missing.
    """
    directory = config.projects_dir / name
    if not directory.is_dir():
        raise ProjectError(
            f"Unknown project '{name}' (no directory {directory})"
        )
    compose_file = find_compose_file(directory, config.compose_file_names)
    if compose_file is None:
        raise ProjectError(
            f"No compose file in {directory} "
            f"(looked for: {', '.join(config.compose_file_names)})"
        )
    return Project(name=name, directory=directory, compose_file=compose_file)


def list_projects(config: HarbormasterConfig) -> list[Project]:
    """Return every project under the projects root, sorted by name.

    Directories without a compose file are skipped.
    """
    root = config.projects_dir
    if not root.is_dir():
        return []
    projects: list[Project] = []
    for entry in sorted(root.iterdir()):
        if not entry.is_dir() or not _NAME_RE.match(entry.name):
            continue
        compose_file = find_compose_file(entry, config.compose_file_names)
        if compose_file is not None:
            projects.append(Project(entry.name, entry, compose_file))
    return projects
