"""Registry v2 client: bearer-token auth and manifest config digests (stdlib only)."""

from __future__ import annotations

import http.client
import json
import time
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass

from harbormaster.config import HarbormasterConfig
from harbormaster.errors import AuthError, ManifestFetchError, ManifestParseError
from harbormaster.images import AuthToken, Digest, ImageReference
from harbormaster.log import get_logger

logger = get_logger("registry")

MANIFEST_V2 = "application/vnd.docker.distribution.manifest.v2+json"
_USER_AGENT = "harbormaster"
_TIMEOUT = 5
_BACKOFF = 0.5

# http.client errors (truncated body, bad status line) are not OSErrors.
_TRANSPORT_ERRORS = (OSError, http.client.HTTPException)


@dataclass
class RegistryClient:
    """Talks to one registry and its token service."""

    auth_url: str = "https://auth.docker.io/token"
    auth_service: str = "registry.docker.io"
    url: str = "https://registry-1.docker.io"
    timeout: float = _TIMEOUT
    retries: int = 0

    @classmethod
    def from_config(cls, config: HarbormasterConfig) -> RegistryClient:
        return cls(
            auth_url=config.registry_auth_url,
            auth_service=config.registry_auth_service,
            url=config.registry_url.rstrip("/"),
            timeout=config.timeout,
            retries=config.retries,
        )

    def get_token(self, repository: str) -> AuthToken:
        """Obtain a pull-scoped bearer token for *repository*.

        Raises AuthError on any failure or a response without ``token``.
        """
        query = urllib.parse.urlencode(
            {"scope": f"repository:{repository}:pull", "service": self.auth_service},
            safe=":/",
        )
        req = urllib.request.Request(
            f"{self.auth_url}?{query}", headers={"User-Agent": _USER_AGENT},
        )
        try:
            body = self._open(req)
        except urllib.error.HTTPError as e:
            raise AuthError(f"token request for {repository} returned HTTP {e.code}") from e
        except _TRANSPORT_ERRORS as e:
            raise AuthError(f"token request for {repository} failed: {_reason(e)}") from e

        try:
            data = json.loads(body)
        except ValueError as e:
            raise AuthError(f"token response for {repository} is not JSON") from e
        token = data.get("token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthError(f"token response for {repository} has no token")
        return AuthToken(token)

    def fetch_config_digest(self, image: ImageReference, token: AuthToken) -> Digest:
        """GET the v2 manifest and return its ``config.digest``."""
        url = f"{self.url}/v2/{image.repository}/manifests/{image.tag}"
        req = urllib.request.Request(
            url,
            headers={
                "User-Agent": _USER_AGENT,
                "Accept": MANIFEST_V2,
                "Authorization": token.header(),
            },
        )
        try:
            body = self._open(req)
        except urllib.error.HTTPError as e:
            raise ManifestFetchError(f"manifest request for {image} returned HTTP {e.code}") from e
        except _TRANSPORT_ERRORS as e:
            raise ManifestFetchError(f"manifest request for {image} failed: {_reason(e)}") from e
        return parse_config_digest(body, str(image))

    def _open(self, req: urllib.request.Request) -> bytes:
        """Perform *req*, retrying transport errors and 5xx responses.

        Client errors (4xx) are raised on the first attempt.
        """
        attempts = max(self.retries, 0) + 1
        attempt = 0
        while True:
            attempt += 1
            logger.debug("GET %s (attempt %d/%d)", _strip_query(req.full_url), attempt, attempts)
            try:
                with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                    return resp.read()
            except urllib.error.HTTPError as e:
                if e.code < 500 or attempt >= attempts:
                    raise
                logger.debug("HTTP %d, retrying", e.code)
            except _TRANSPORT_ERRORS as e:
                if attempt >= attempts:
                    raise
                logger.debug("Transport error (%s), retrying", _reason(e))
            time.sleep(_BACKOFF * attempt)


def parse_config_digest(body: bytes, image: str) -> Digest:
    """Extract ``config.digest`` from a v2 manifest body.

    Raises ManifestParseError if the body is not JSON or the field is
    missing or malformed.
    """
    try:
        data = json.loads(body)
    except ValueError as e:
        raise ManifestParseError(f"manifest for {image} is not JSON") from e
    config = data.get("config") if isinstance(data, dict) else None
    raw = config.get("digest") if isinstance(config, dict) else None
    if not isinstance(raw, str):
        raise ManifestParseError(f"manifest for {image} has no config.digest")
    try:
        return Digest(raw)
    except ValueError as e:
        raise ManifestParseError(f"manifest for {image}: {e}") from e


def _reason(exc: Exception) -> str:
    if isinstance(exc, urllib.error.URLError):
        return str(exc.reason)
    return str(exc) or type(exc).__name__


def _strip_query(url: str) -> str:
    return url.split("?", 1)[0]
