"""ComposeRuntime: detect docker/podman and query compose projects."""

from __future__ import annotations

import json
import os
import shutil
import subprocess

from harbormaster.errors import ComposeError
from harbormaster.log import get_logger
from harbormaster.projects import Project

logger = get_logger("compose")


class ComposeRuntime:
    """Wrapper around the ``docker compose`` / ``podman compose`` CLI.

    Only read-only queries live here; the freshness checker depends on
    nothing else, so tests substitute any object with the same three
    methods.
    """

    def __init__(self, command: str | None = None) -> None:
        if command:
            self.cmd = command
        else:
            self.cmd = self._detect()

    @staticmethod
    def _detect() -> str:
        env = os.environ.get("HARBORMASTER_DOCKER_CMD")
        if env:
            return env
        for name in ("docker", "podman"):
            path = shutil.which(name)
            if path:
                return path
        raise ComposeError(
            "No container runtime found. Install docker or podman."
        )

    def _compose(self, project: Project, *args: str) -> subprocess.CompletedProcess[str]:
        cmd = [self.cmd, "compose", "-f", str(project.compose_file), *args]
        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                cwd=project.directory,
            )
        except OSError as e:
            raise ComposeError(f"Cannot run {self.cmd}: {e}") from e
        if result.returncode != 0:
            raise ComposeError(
                f"'{' '.join(args)}' failed for project {project.name}:\n"
                f"{result.stderr.strip()}"
            )
        return result

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_running_services(self, project: Project) -> list[str]:
        """Return the names of running services in *project*."""
        result = self._compose(
            project, "ps", "--services", "--filter", "status=running",
        )
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def get_service_image(self, project: Project, service: str) -> str | None:
        """Return the declared ``image:`` of *service*, or None if not declared.

        Raises ComposeError if the configuration cannot be rendered.
        """
        result = self._compose(project, "config", "--format", "json")
        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ComposeError(
                f"Unreadable compose config for project {project.name}: {e}"
            ) from e
        services = data.get("services", {}) if isinstance(data, dict) else None
        if not isinstance(services, dict):
            raise ComposeError(
                f"Unexpected compose config layout for project {project.name}"
            )
        entry = services.get(service)
        if not isinstance(entry, dict):
            return None
        image = entry.get("image")
        return image if isinstance(image, str) else None

    def get_running_image_digest(self, project: Project, service: str) -> str | None:
        """Return the image ID behind *service*'s container, or None.

        Docker prints a bare hex ID here; callers normalize it.
        """
        result = self._compose(project, "images", "-q", service)
        for line in result.stdout.splitlines():
            if line.strip():
                return line.strip()
        return None
