"""Configuration loading and runtime overrides.

Precedence (highest first):
  1) explicit arguments (CLI flags / ``ManifestResolver`` parameters)
  2) environment variables (``CRATEREF_SELF_REFERENCE``)
  3) YAML config file (``--config`` path or the default search locations)
  4) built-in defaults from ``Constants``

Config loading never raises: a missing file yields an empty config and a
malformed one is logged and ignored.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Optional

import yaml

from constants import Constants, SelfReferencePolicy

logger = logging.getLogger(__name__)


def _read_yaml(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as e:
        logger.warning("Could not read config file %s: %s", path, e)
        return {}
    except yaml.YAMLError as e:
        logger.warning("Ignoring malformed config file %s: %s", path, e)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: top level is not a mapping", path)
        return {}
    return data


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load the YAML configuration.

    An explicit ``config_path`` is used as-is; otherwise the first existing
    file from ``Constants.CONFIG_SEARCH_PATHS`` is read.
    """
    if config_path:
        if not os.path.isfile(config_path):
            logger.warning("Config file not found: %s", config_path)
            return {}
        return _read_yaml(config_path)
    for candidate in Constants.CONFIG_SEARCH_PATHS:
        if os.path.isfile(candidate):
            logger.debug("Using config file %s", candidate)
            return _read_yaml(candidate)
    return {}


def _section(cfg: Optional[Mapping[str, Any]], name: str) -> Dict[str, Any]:
    value = (cfg or {}).get(name)
    return value if isinstance(value, dict) else {}


def apply_config_overrides(cfg: Optional[Mapping[str, Any]]) -> None:
    """Apply the ``resolver`` section of ``cfg`` onto ``Constants``."""
    section = _section(cfg, "resolver")
    if isinstance(section.get("manifest_filename"), str):
        Constants.MANIFEST_FILE = section["manifest_filename"]
    if isinstance(section.get("manifest_dir_env"), str):
        Constants.ENV_MANIFEST_DIR = section["manifest_dir_env"]
    if isinstance(section.get("secondary_marker_env"), str):
        Constants.ENV_SECONDARY_MARKER = section["secondary_marker_env"]
    if isinstance(section.get("self_reference"), str):
        Constants.DEFAULT_SELF_REFERENCE = section["self_reference"]


def resolver_setting(cfg: Optional[Mapping[str, Any]], key: str) -> Optional[str]:
    """Return the string ``resolver.<key>`` from ``cfg``, if set."""
    value = _section(cfg, "resolver").get(key)
    return value if isinstance(value, str) else None


def config_log_level(cfg: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Return ``logging.level`` from ``cfg`` upper-cased, if set."""
    level = _section(cfg, "logging").get("level")
    return str(level).upper() if level else None


def self_reference_policy(
    explicit: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    cfg: Optional[Mapping[str, Any]] = None,
) -> SelfReferencePolicy:
    """Pick the self-reference policy by precedence.

    ``cfg`` is a loaded config whose ``resolver.self_reference`` ranks below
    the environment and above ``Constants.DEFAULT_SELF_REFERENCE``.

    Raises:
        ValueError: the chosen value is not a known policy.
    """
    env = os.environ if environ is None else environ
    raw = (
        explicit
        or env.get(Constants.ENV_SELF_REFERENCE)
        or resolver_setting(cfg, "self_reference")
        or Constants.DEFAULT_SELF_REFERENCE
    )
    try:
        return SelfReferencePolicy(str(raw).strip().lower())
    except ValueError:
        raise ValueError(
            f"Invalid self-reference policy {raw!r}; expected one of "
            f"{', '.join(Constants.SELF_REFERENCE_POLICIES)}"
        ) from None
