"""
config.py

Responsibility: Resolve client settings into a typed, immutable model.

Sources, lowest to highest precedence:
- built-in defaults
- an optional YAML file (top-level mapping with `address`, `token`, `timeout`)
- environment variables ATLAS_ADDRESS / ATLAS_TOKEN / ATLAS_TIMEOUT

CLI flags are applied on top by `cli.py`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from buildconf.transport import Transport

DEFAULT_ADDRESS = "https://atlas.hashicorp.com"
DEFAULT_TIMEOUT = 30.0

ENV_ADDRESS = "ATLAS_ADDRESS"
ENV_TOKEN = "ATLAS_TOKEN"
ENV_TIMEOUT = "ATLAS_TIMEOUT"


class SettingsError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    address: str = DEFAULT_ADDRESS
    token: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    def transport(self) -> Transport:
        return Transport(self.address, self.token, timeout=self.timeout)


def parse_timeout(raw: Any, source: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError) as e:
        raise SettingsError(f"{source}: timeout must be a number, got {raw!r}") from e
    if value <= 0:
        raise SettingsError(f"{source}: timeout must be positive, got {value}")
    return value


def _load_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise SettingsError(f"Config file does not exist: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except OSError as e:
        raise SettingsError(f"Config file could not be read: {path} ({e})") from e
    except yaml.YAMLError as e:
        raise SettingsError(f"Config file is not valid YAML: {path}") from e
    if not isinstance(data, dict):
        raise SettingsError("Config file must be a mapping/object at the top level.")
    return data


def load_settings(path: str | Path | None = None, *, env: Mapping[str, str] | None = None) -> Settings:
    """
    Build `Settings` from defaults, an optional YAML file and the environment.
    """
    env = os.environ if env is None else env
    data = _load_file(Path(path)) if path is not None else {}

    address = str(data.get("address") or DEFAULT_ADDRESS).strip()
    token = data.get("token")
    timeout = parse_timeout(data["timeout"], str(path)) if data.get("timeout") is not None else DEFAULT_TIMEOUT

    if env.get(ENV_ADDRESS):
        address = env[ENV_ADDRESS].strip()
    if env.get(ENV_TOKEN):
        token = env[ENV_TOKEN]
    if env.get(ENV_TIMEOUT):
        timeout = parse_timeout(env[ENV_TIMEOUT], ENV_TIMEOUT)

    if token is not None:
        token = str(token).strip() or None

    return Settings(address=address, token=token, timeout=timeout)
