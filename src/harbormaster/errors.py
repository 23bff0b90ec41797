"""Harbormaster error hierarchy."""


class HarbormasterError(Exception):
    """Base exception for all harbormaster errors."""


class ConfigError(HarbormasterError):
    """Configuration file missing or malformed."""


class ProjectError(HarbormasterError):
    """Project or target cannot be resolved."""


class ComposeError(HarbormasterError):
    """Compose runtime missing or a compose invocation failed."""


class FreshnessError(HarbormasterError):
    """A freshness check failed for a single service.

    ``stage`` names the pipeline step that failed and is used when the
    failure is reported.
    """

    stage = "check"


class ConfigLookupError(FreshnessError):
    """Service is missing from the project configuration or declares no image."""

    stage = "config lookup"


class AuthError(FreshnessError):
    """Registry token request failed or returned no token."""

    stage = "registry auth"


class ManifestFetchError(FreshnessError):
    """Manifest request failed."""

    stage = "manifest fetch"


class ManifestParseError(FreshnessError):
    """Manifest body has no usable ``config.digest``."""

    stage = "manifest parse"


class LocalDigestError(FreshnessError):
    """Runtime reported no image digest for the running service."""

    stage = "local digest"
