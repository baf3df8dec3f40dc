"""Connection configuration for the admin API."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/streamadm/config.json")
DEFAULT_ADMIN_HOSTS = ["127.0.0.1:9644"]

_TRUE_VALUES = {"1", "true", "yes", "on"}


class ConfigError(Exception):
    """Configuration could not be loaded or is invalid."""


@dataclass
class ConnectionConfig:
    """Where and how to reach the cluster admin API."""

    admin_hosts: list[str] = field(default_factory=lambda: list(DEFAULT_ADMIN_HOSTS))
    username: str = ""
    password: str = ""
    tls_enabled: bool = False
    ca_file: str | None = None
    cert_file: str | None = None
    key_file: str | None = None
    insecure_skip_verify: bool = False
    timeout: float = 10.0

    def validate(self) -> None:
        """Check field values, raising ConfigError on the first problem."""
        if (
            not isinstance(self.admin_hosts, list)
            or not self.admin_hosts
            or not all(isinstance(h, str) and h.strip() for h in self.admin_hosts)
        ):
            raise ConfigError("admin_hosts must list at least one address")
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)):
            raise ConfigError(f"timeout must be a number, got {self.timeout!r}")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        if self.key_file and not self.cert_file:
            raise ConfigError("key_file requires cert_file")


def _split_hosts(value: str) -> list[str]:
    return [h.strip() for h in value.split(",") if h.strip()]


def _from_mapping(config: ConnectionConfig, data: Mapping[str, Any]) -> None:
    known = {f.name for f in fields(ConnectionConfig)}
    for key, value in data.items():
        if key not in known:
            logger.warning(f"Ignoring unknown config key: {key}")
            continue
        if key == "admin_hosts" and isinstance(value, str):
            value = _split_hosts(value)
        setattr(config, key, value)


def _env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}

    if env.get("STREAMADM_ADMIN_HOSTS"):
        overrides["admin_hosts"] = _split_hosts(env["STREAMADM_ADMIN_HOSTS"])
    if "STREAMADM_USER" in env:
        overrides["username"] = env["STREAMADM_USER"]
    if "STREAMADM_PASSWORD" in env:
        overrides["password"] = env["STREAMADM_PASSWORD"]
    if "STREAMADM_TLS_ENABLED" in env:
        overrides["tls_enabled"] = env["STREAMADM_TLS_ENABLED"].lower() in _TRUE_VALUES
    for name in ("ca_file", "cert_file", "key_file"):
        var = f"STREAMADM_TLS_{name.upper()}"
        if env.get(var):
            overrides[name] = env[var]
    if "STREAMADM_TIMEOUT" in env:
        try:
            overrides["timeout"] = float(env["STREAMADM_TIMEOUT"])
        except ValueError as e:
            raise ConfigError(f"invalid STREAMADM_TIMEOUT: {e}") from e

    return overrides


def load_config(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ConnectionConfig:
    """Resolve connection configuration.

    Values are layered: defaults, then the JSON config file, then
    ``STREAMADM_*`` environment variables, then explicit overrides
    (command-line flags). ``None`` overrides are ignored.

    Args:
        path: Config file path. Falls back to ``STREAMADM_CONFIG`` and then
            the default path; only an explicitly given file must exist.
        env: Environment mapping (defaults to os.environ)
        overrides: Final values, usually from command-line flags

    Returns:
        A validated ConnectionConfig

    Raises:
        ConfigError: if the file is unreadable or malformed, or a value is invalid
    """
    env = os.environ if env is None else env
    config = ConnectionConfig()

    explicit = path is not None or bool(env.get("STREAMADM_CONFIG"))
    config_path = Path(path or env.get("STREAMADM_CONFIG") or DEFAULT_CONFIG_PATH).expanduser()

    if config_path.exists():
        try:
            with open(config_path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"unable to read {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path} must contain a JSON object")
        _from_mapping(config, data)
        logger.debug(f"Loaded config from {config_path}")
    elif explicit:
        raise ConfigError(f"config file not found: {config_path}")

    _from_mapping(config, _env_overrides(env))
    _from_mapping(config, {k: v for k, v in (overrides or {}).items() if v is not None})

    config.validate()
    return config
