"""Runtime configuration assembled once at process start.

The resulting ``AppConfig`` is immutable and passed explicitly into
adapters, clients, the installer and crawlers; none of them read the
environment on their own.

Precedence (highest first): CLI flags, environment variables, YAML config
file (``--config`` or METAPKG_CONFIG), built-in defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)

_CONFIG_KEYS = (
    "home",
    "github_token",
    "user_agent",
    "request_timeout",
    "download_timeout",
    "github_api_base",
)


def default_home(env: Optional[Mapping[str, str]] = None) -> str:
    """Return HOME, else USERPROFILE, else ".", without a trailing separator."""
    env = os.environ if env is None else env
    home = env.get("HOME") or env.get("USERPROFILE") or "."
    return home.rstrip(os.sep) or os.sep


@dataclass(frozen=True)
class AppConfig:
    """Process-wide, read-only settings."""

    home: str = "."
    github_token: Optional[str] = None
    user_agent: str = Constants.USER_AGENT
    request_timeout: float = Constants.REQUEST_TIMEOUT
    download_timeout: float = Constants.DOWNLOAD_TIMEOUT
    github_api_base: str = Constants.GITHUB_API_BASE

    @property
    def meta_root(self) -> str:
        """Root of the artifact cache, ``{home}/.metapkg``."""
        return os.path.join(self.home, Constants.META_DIR_NAME)

    @property
    def has_token(self) -> bool:
        return bool(self.github_token)

    def github_headers(self) -> Dict[str, str]:
        """Headers sent with every GitHub API request."""
        headers = {
            "Accept": Constants.GITHUB_ACCEPT,
            "User-Agent": self.user_agent,
        }
        if self.github_token:
            headers["Authorization"] = f"Bearer {self.github_token}"
        return headers


def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """Load settings from a YAML (or JSON) file.

    Unknown keys are ignored; a missing or malformed file yields ``{}``.
    """
    if not path:
        return {}
    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Could not read config file %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        return {}
    # Accept either a flat mapping or one nested under "metapkg"
    section = data.get("metapkg", data)
    if not isinstance(section, dict):
        return {}
    return {key: section[key] for key in _CONFIG_KEYS if section.get(key) is not None}


def load_config(args: Any = None, env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Build the AppConfig for this invocation.

    Args:
        args: Parsed CLI namespace (optional); reads CONFIG and HOME.
        env: Environment mapping, defaults to ``os.environ``.
    """
    env = os.environ if env is None else env

    config_path = getattr(args, "CONFIG", None) or env.get(Constants.ENV_CONFIG)
    values = load_config_file(config_path)

    env_home = env.get(Constants.ENV_HOME)
    if env_home:
        values["home"] = env_home
    env_token = env.get(Constants.ENV_GITHUB_TOKEN)
    if env_token:
        values["github_token"] = env_token

    cli_home = getattr(args, "HOME", None)
    if cli_home:
        values["home"] = cli_home

    home = str(values.get("home") or default_home(env))
    return AppConfig(
        home=os.path.expanduser(home),
        github_token=values.get("github_token") or None,
        user_agent=str(values.get("user_agent") or Constants.USER_AGENT),
        request_timeout=float(values.get("request_timeout") or Constants.REQUEST_TIMEOUT),
        download_timeout=float(values.get("download_timeout") or Constants.DOWNLOAD_TIMEOUT),
        github_api_base=str(values.get("github_api_base") or Constants.GITHUB_API_BASE).rstrip("/"),
    )
