"""Image reference, digest, and token value types."""

from __future__ import annotations

import re
from dataclasses import dataclass

DEFAULT_TAG = "latest"
DEFAULT_NAMESPACE = "library"

_DIGEST_RE = re.compile(r"^[a-z0-9]+(?:[+._-][a-z0-9]+)*:[0-9A-Fa-f]{32,}$")
_BARE_HEX_RE = re.compile(r"^[0-9A-Fa-f]{32,}$")


@dataclass(frozen=True)
class Digest:
    """Content digest such as ``sha256:<hex>``.

    Compared as an opaque string: no case-folding, no trimming of the
    payload.
    """

    value: str

    def __post_init__(self) -> None:
        if not _DIGEST_RE.match(self.value):
            raise ValueError(f"Not a valid digest: {self.value!r}")

    @classmethod
    def normalize(cls, raw: str) -> Digest:
        """Build a Digest from runtime output, adding ``sha256:`` to bare hex."""
        raw = raw.strip()
        if _BARE_HEX_RE.match(raw):
            raw = f"sha256:{raw}"
        return cls(raw)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class AuthToken:
    """Bearer token for a single registry pull scope."""

    value: str

    def header(self) -> str:
        return f"Bearer {self.value}"

    def __repr__(self) -> str:
        return "AuthToken(***)"


@dataclass(frozen=True)
class ImageReference:
    """A declared image split into ``repository`` and ``tag``.

    Build with :func:`parse_image_ref` so the ``library/`` rule is applied.
    """

    repository: str
    tag: str = DEFAULT_TAG

    def __str__(self) -> str:
        return f"{self.repository}:{self.tag}"


def normalize_repository(repository: str) -> str:
    """Qualify an official image: ``redis`` → ``library/redis``.

    Repositories that already contain ``/`` are returned unchanged.
    """
    if "/" in repository:
        return repository
    return f"{DEFAULT_NAMESPACE}/{repository}"


def parse_image_ref(image: str) -> ImageReference:
    """Split a declared image into a normalized repository and tag.

    ``redis`` → ``library/redis:latest``; ``bitnami/redis:7.2`` →
    ``bitnami/redis:7.2``.  A trailing ``@sha256:...`` pin is dropped.
    Raises ``ValueError`` on an empty reference.
    """
    ref = image.strip()
    if "@" in ref:
        ref = ref.split("@", 1)[0]
    if not ref:
        raise ValueError(f"Cannot parse image reference: {image!r}")

    # A colon in the last path component is a tag; earlier ones are ports.
    if ":" in ref.rsplit("/", 1)[-1]:
        repository, tag = ref.rsplit(":", 1)
    else:
        repository, tag = ref, DEFAULT_TAG
    if not repository or not tag:
        raise ValueError(f"Cannot parse image reference: {image!r}")

    return ImageReference(normalize_repository(repository), tag)
