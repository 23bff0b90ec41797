"""TOML config loading, writing, defaults, and environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path

# Python 3.11+ stdlib
import tomllib

from harbormaster.errors import ConfigError


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

_DEFAULTS = {
    "paths_projects": "~/docker",
    "compose_command": "",
    "compose_files": "compose.yaml,compose.yml,docker-compose.yaml,docker-compose.yml",
    "registry_auth_url": "https://auth.docker.io/token",
    "registry_auth_service": "registry.docker.io",
    "registry_url": "https://registry-1.docker.io",
    "registry_timeout": "5",
    "registry_retries": "0",
}

# Environment variable -> config field.
_ENV_OVERRIDES: dict[str, str] = {
    "HARBORMASTER_PROJECTS_DIR": "paths_projects",
    "HARBORMASTER_DOCKER_CMD": "compose_command",
}


@dataclass
class HarbormasterConfig:
    """Merged configuration (hardcoded defaults < harbormaster.toml < env < CLI)."""

    paths_projects: str = _DEFAULTS["paths_projects"]
    compose_command: str = _DEFAULTS["compose_command"]
    compose_files: str = _DEFAULTS["compose_files"]
    registry_auth_url: str = _DEFAULTS["registry_auth_url"]
    registry_auth_service: str = _DEFAULTS["registry_auth_service"]
    registry_url: str = _DEFAULTS["registry_url"]
    registry_timeout: str = _DEFAULTS["registry_timeout"]
    registry_retries: str = _DEFAULTS["registry_retries"]

    @property
    def projects_dir(self) -> Path:
        return Path(self.paths_projects).expanduser()

    @property
    def compose_file_names(self) -> list[str]:
        return [n.strip() for n in self.compose_files.split(",") if n.strip()]

    @property
    def timeout(self) -> float:
        try:
            return float(self.registry_timeout)
        except ValueError:
            raise ConfigError(
                f"registry.timeout must be a number, got {self.registry_timeout!r}"
            )

    @property
    def retries(self) -> int:
        try:
            return max(int(self.registry_retries), 0)
        except ValueError:
            raise ConfigError(
                f"registry.retries must be an integer, got {self.registry_retries!r}"
            )


def _flatten_toml(data: dict, prefix: str = "") -> dict[str, str]:
    """Flatten nested TOML dict into underscore-joined keys.

    ``{"registry": {"url": "x"}}`` → ``{"registry_url": "x"}``
    """
    out: dict[str, str] = {}
    for k, v in data.items():
        key = f"{prefix}_{k}" if prefix else k
        if isinstance(v, dict):
            out.update(_flatten_toml(v, key))
        else:
            out[key] = str(v)
    return out


def xdg(env_var: str, default_suffix: str) -> Path:
    """Resolve an XDG directory from environment or default under $HOME."""
    val = os.environ.get(env_var, "")
    if val:
        return Path(val).resolve()
    return Path.home() / default_suffix


def config_file_path(config_home: Path | None = None) -> Path:
    """Return the path to harbormaster.toml under *config_home*."""
    if config_home is None:
        config_home = xdg("XDG_CONFIG_HOME", ".config")
    return config_home / "harbormaster.toml"


def load_config(path: Path) -> HarbormasterConfig:
    """Read a single TOML file and return a HarbormasterConfig with defaults filled in."""
    cfg = HarbormasterConfig()
    if path.exists():
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Malformed config file {path}: {e}")
        flat = _flatten_toml(data)
        valid_keys = {fld.name for fld in fields(cfg)}
        for k, v in flat.items():
            if k in valid_keys:
                setattr(cfg, k, v)
    return cfg


def load_merged_config(
    path: Path | None = None,
    *,
    cli_overrides: dict[str, str | None] | None = None,
) -> HarbormasterConfig:
    """Load the config file, overlay environment, then CLI overrides.

    Precedence: CLI flags > environment > harbormaster.toml > hardcoded defaults.
    ``None`` values in *cli_overrides* are ignored.
    """
    cfg = load_config(path if path is not None else config_file_path())
    for env_var, key in _ENV_OVERRIDES.items():
        val = os.environ.get(env_var, "")
        if val:
            setattr(cfg, key, val)
    if cli_overrides:
        valid_keys = {fld.name for fld in fields(cfg)}
        for k, v in cli_overrides.items():
            if k in valid_keys and v is not None:
                setattr(cfg, k, str(v))
    return cfg


def write_global_config(path: Path, cfg: HarbormasterConfig | None = None) -> None:
    """Write a TOML config file with the structured layout.

    If *cfg* is None, writes defaults.
    """
    if cfg is None:
        cfg = HarbormasterConfig()
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [
        "[paths]",
        f'projects = "{cfg.paths_projects}"',
        "",
        "[compose]",
        "# docker or podman; empty means auto-detect",
        f'command = "{cfg.compose_command}"',
        f'files = "{cfg.compose_files}"',
        "",
        "[registry]",
        f'auth_url = "{cfg.registry_auth_url}"',
        f'auth_service = "{cfg.registry_auth_service}"',
        f'url = "{cfg.registry_url}"',
        f"timeout = {cfg.registry_timeout}",
        f"retries = {cfg.registry_retries}",
        "",
    ]
    path.write_text("\n".join(lines))


def config_items(cfg: HarbormasterConfig) -> list[tuple[str, str]]:
    """Return ``(dotted.key, value)`` pairs for display."""
    items: list[tuple[str, str]] = []
    for fld in fields(cfg):
        section, _, key = fld.name.partition("_")
        items.append((f"{section}.{key}", getattr(cfg, fld.name)))
    return items
