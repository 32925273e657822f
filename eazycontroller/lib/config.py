# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Shared configuration loader for eazycontroller.

Loads a single JSON config file per host.  Search order:
  1. $EAZY_CONFIG                         (explicit override)
  2. /etc/eazycontroller/config.json      (system install)
  3. config.json                          (CWD, handy for local dev)
  4. ../../config/default.json            (repo fallback)

A couple of values can also be overridden from the environment
(EAZY_PORT, EAZY_LOG_LEVEL) so a service unit can tweak them without
editing the file.

Usage:
    from eazycontroller.lib.config import cfg

    port     = cfg("server", "port", default=8800)
    interval = cfg("media", "poll_interval", default=0.5)
    provider = cfg("provider")  # returns the whole dict
"""

import json
import logging
import os

logger = logging.getLogger(__name__)

_config: dict | None = None

_SEARCH_PATHS = [
    "/etc/eazycontroller/config.json",
    "config.json",
    os.path.join(os.path.dirname(__file__), "..", "..", "config", "default.json"),
]

PROVIDER_TYPES = ("demo", "unsupported")

# (section, key) -> environment variable
_ENV_OVERRIDES = {
    ("server", "port"): "EAZY_PORT",
    ("logging", "level"): "EAZY_LOG_LEVEL",
}


def _search_paths() -> list[str]:
    override = os.environ.get("EAZY_CONFIG")
    if override:
        return [override] + _SEARCH_PATHS
    return list(_SEARCH_PATHS)


def _validate(config: dict, path: str) -> None:
    """Warn about missing or suspicious config values."""
    provider = config.get("provider") or {}
    ptype = provider.get("type", "demo")
    if ptype not in PROVIDER_TYPES:
        logger.warning("Config %s: unknown provider.type '%s'", path, ptype)
    server = config.get("server") or {}
    port = server.get("port", 8800)
    if not isinstance(port, int) or not 0 < port < 65536:
        logger.warning("Config %s: invalid server.port %r", path, port)
    static_dir = server.get("static_dir")
    if static_dir and not os.path.isdir(static_dir):
        logger.warning("Config %s: server.static_dir %s does not exist — UI disabled", path, static_dir)
    media = config.get("media") or {}
    for key in ("poll_interval", "cache_max_age"):
        value = media.get(key)
        if value is not None and (not isinstance(value, (int, float)) or value <= 0):
            logger.warning("Config %s: media.%s must be a positive number", path, key)


def load_config() -> dict:
    """Load config from the first JSON file found. Cached after first call."""
    global _config
    if _config is not None:
        return _config

    for path in _search_paths():
        try:
            with open(path) as f:
                _config = json.load(f)
                logger.info("Config loaded from %s", path)
                _validate(_config, path)
                return _config
        except FileNotFoundError:
            continue
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in %s: %s", path, e)
            continue

    logger.info("No config.json found — using defaults")
    _config = {}
    return _config


def _env_override(section: str, key: str | None):
    env_name = _ENV_OVERRIDES.get((section, key))
    if not env_name:
        return None
    raw = os.environ.get(env_name)
    if raw is None or raw == "":
        return None
    if key == "port":
        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring %s=%r (not an integer)", env_name, raw)
            return None
    return raw


def cfg(section: str, key: str | None = None, *, default=None):
    """Read a config value.

    cfg("server")                      → config["server"]
    cfg("server", "port")              → config["server"]["port"]
    cfg("media", "poll_interval", default=0.5)
    """
    override = _env_override(section, key)
    if override is not None:
        return override
    config = load_config()
    val = config.get(section)
    if key is None:
        return val if val is not None else default
    if isinstance(val, dict):
        return val.get(key, default)
    return default


def reload_config():
    """Force re-read from disk (for testing or hot-reload)."""
    global _config
    _config = None
    return load_config()
