from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from fbclient.core.exceptions import ClientMisconfigured

_CONFIG_CACHE: Dict[str, Any] | None = None

FACEBOOK_FLAGS = ("use_beta", "secure_connection")
FACEBOOK_KEYS = {"timeout", *FACEBOOK_FLAGS}


def repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def load_config(path: str | Path | None = None) -> Dict[str, Any]:
    root = repo_root()
    env_path = root / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = Path(path) if path else Path(os.getenv("FBCLIENT_CONFIG", root / "config" / "default.yaml"))
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    _check_facebook_section(data, config_path)
    return data


def _check_facebook_section(data: Dict[str, Any], source: Path) -> None:
    section = data.get("facebook")
    if section is None:
        return
    if not isinstance(section, dict):
        raise ClientMisconfigured(f"{source}: 'facebook' must be a mapping")
    unknown = sorted(set(section) - FACEBOOK_KEYS)
    if unknown:
        raise ClientMisconfigured(f"{source}: unknown facebook settings: {', '.join(unknown)}")
    timeout = section.get("timeout")
    if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0):
        raise ClientMisconfigured(f"{source}: facebook.timeout must be a positive number")
    for flag in FACEBOOK_FLAGS:
        if flag in section and not isinstance(section[flag], bool):
            raise ClientMisconfigured(f"{source}: facebook.{flag} must be true or false")


def get_config(refresh: bool = False) -> Dict[str, Any]:
    global _CONFIG_CACHE
    if refresh or _CONFIG_CACHE is None:
        _CONFIG_CACHE = load_config()
    return _CONFIG_CACHE


def configure_logging(level: Optional[str] = None) -> None:
    if level is None:
        level = str(get_config().get("logging", {}).get("level", "WARNING"))
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


__all__ = ["configure_logging", "get_config", "load_config", "repo_root"]
