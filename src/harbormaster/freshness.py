"""Registry freshness check: compare running image digests with the registry."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from harbormaster.errors import (
    ComposeError,
    ConfigLookupError,
    FreshnessError,
    LocalDigestError,
)
from harbormaster.images import AuthToken, Digest, ImageReference, parse_image_ref
from harbormaster.log import get_logger
from harbormaster.projects import Project

logger = get_logger("freshness")


class Runtime(Protocol):
    def list_running_services(self, project: Project) -> list[str]: ...

    def get_service_image(self, project: Project, service: str) -> str | None: ...

    def get_running_image_digest(self, project: Project, service: str) -> str | None: ...


class Registry(Protocol):
    def get_token(self, repository: str) -> AuthToken: ...

    def fetch_config_digest(self, image: ImageReference, token: AuthToken) -> Digest: ...


class FreshnessStatus(Enum):
    UP_TO_DATE = "up-to-date"
    UPDATE_AVAILABLE = "update-available"
    FAILED = "failed"


@dataclass(frozen=True)
class FreshnessResult:
    """Outcome of checking one service."""

    service: str
    status: FreshnessStatus
    image: str | None = None
    local: Digest | None = None
    remote: Digest | None = None
    error: FreshnessError | None = None

    @property
    def failed(self) -> bool:
        return self.status is FreshnessStatus.FAILED

    def message(self) -> str:
        if self.status is FreshnessStatus.UP_TO_DATE:
            return f"Service {self.service} is up-to-date"
        if self.status is FreshnessStatus.UPDATE_AVAILABLE:
            return f"Service {self.service} can be updated"
        stage = self.error.stage if self.error else "check"
        return f"Service {self.service}: {stage} failed: {self.error}"


def check_freshness(
    runtime: Runtime,
    registry: Registry,
    project: Project,
    service: str | None = None,
) -> list[FreshnessResult]:
    """Check *service*, or every running service of *project*.

    Stopped services are skipped when checking a whole project.  Each
    service yields exactly one result; a failure in one never stops the
    others.  Results are sorted by service name.

    Errors enumerating running services (ComposeError) propagate.
    """
    if service is not None:
        services = [service]
    else:
        services = runtime.list_running_services(project)
        logger.debug("Running services in %s: %s", project.name, services)

    return [
        check_service(runtime, registry, project, name)
        for name in sorted(set(services))
    ]


def check_service(
    runtime: Runtime, registry: Registry, project: Project, service: str,
) -> FreshnessResult:
    """Run the full pipeline for one service, converting failures to a result."""
    try:
        return _check(runtime, registry, project, service)
    except FreshnessError as e:
        logger.debug("Check failed for %s.%s at %s: %s", project.name, service, e.stage, e)
        return FreshnessResult(service, FreshnessStatus.FAILED, error=e)


def _check(
    runtime: Runtime, registry: Registry, project: Project, service: str,
) -> FreshnessResult:
    declared = _lookup_image(runtime, project, service)
    try:
        image = parse_image_ref(declared)
    except ValueError as e:
        raise ConfigLookupError(str(e)) from e

    token = registry.get_token(image.repository)
    remote = registry.fetch_config_digest(image, token)
    local = _local_digest(runtime, project, service)
    logger.debug("%s: local=%s remote=%s", service, local, remote)

    status = (
        FreshnessStatus.UP_TO_DATE if local == remote
        else FreshnessStatus.UPDATE_AVAILABLE
    )
    return FreshnessResult(service, status, image=str(image), local=local, remote=remote)


def _lookup_image(runtime: Runtime, project: Project, service: str) -> str:
    try:
        declared = runtime.get_service_image(project, service)
    except ComposeError as e:
        raise ConfigLookupError(str(e)) from e
    if not declared:
        raise ConfigLookupError(
            f"service '{service}' is not declared with an image in "
            f"{project.compose_file.name}"
        )
    return declared


def _local_digest(runtime: Runtime, project: Project, service: str) -> Digest:
    try:
        raw = runtime.get_running_image_digest(project, service)
    except ComposeError as e:
        raise LocalDigestError(str(e)) from e
    if not raw:
        raise LocalDigestError(f"no running image found for service '{service}'")
    try:
        return Digest.normalize(raw)
    except ValueError as e:
        raise LocalDigestError(str(e)) from e
