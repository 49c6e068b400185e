"""
startupconnect.config — YAML Configuration Loader
===================================================

Reads ``config.yaml`` for application identity and presentation settings
(name, tagline, feed page size).  Secrets and connection strings stay in
the environment (``DATABASE_URL``, ``JWT_SECRET``) and are read where they
are used.

Usage::

    from startupconnect.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.app_name)          # "StartupConnect"
    print(cfg.feed_page_size)    # 20
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class AppConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    app_name: str
    tagline: str

    # API
    api_port: int
    feed_page_size: int

    # Optional
    default_language: str = "en"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> AppConfig:
    """Read *path* and return an :class:`AppConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    return AppConfig(
        app_name=raw["app_name"],
        tagline=raw["tagline"],
        api_port=int(raw["api_port"]),
        feed_page_size=int(raw["feed_page_size"]),
        default_language=raw.get("default_language") or "en",
    )
