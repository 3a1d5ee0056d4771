import json
import logging
import os

logger = logging.getLogger(__name__)

CONFIG_FILE = os.path.expanduser("~/.tbrowser_config.json")

DEFAULT_CONFIG = {
    "COLOR_THEME": "default",
    "WRAP_WIDTH": 0,
    "LINES_PER_PAGE": 0,
    "MAX_TABS": 10,
    "ENABLE_TABS": True,
    "ENABLE_BOOKMARKS": True,
    "ENABLE_HISTORY": True,
    "ENABLE_SEARCH": True,
    "ENABLE_READER_MODE": True,
    "START_IN_READER_MODE": False,
    "SAFE_MODE": True,
    "TIMEOUT": 15,
    "WORKERS": 4,
    "BOOKMARK_FILE": "~/.tbrowser_bookmarks",
    "IMAGE_VIEWERS": ["imv", "shotwell", "feh", "gpicview"],
    "LOG_LEVEL": "WARNING",
    "LOG_FILE": None,
}

# env var -> (config key, kind)
ENV_OVERRIDES = {
    "TBROWSER_READER_MODE": ("START_IN_READER_MODE", "bool"),
    "TBROWSER_MAX_TABS": ("MAX_TABS", "int"),
    "TBROWSER_BOOKMARKS": ("ENABLE_BOOKMARKS", "bool"),
    "TBROWSER_HISTORY": ("ENABLE_HISTORY", "bool"),
    "TBROWSER_SEARCH": ("ENABLE_SEARCH", "bool"),
    "TBROWSER_TABS": ("ENABLE_TABS", "bool"),
    "TBROWSER_LOG_LEVEL": ("LOG_LEVEL", "str"),
}


def _as_bool(value):
    return value.strip().lower() in ("1", "true", "yes", "on")


def apply_env_overrides(cfg, environ=None):
    if environ is None:
        environ = os.environ

    for var, (key, kind) in ENV_OVERRIDES.items():
        val = environ.get(var)
        if not val:
            continue
        if kind == "bool":
            cfg[key] = _as_bool(val)
        elif kind == "int":
            try:
                cfg[key] = int(val)
            except ValueError:
                logger.warning("Ignoring %s=%r: not an integer", var, val)
        else:
            cfg[key] = val
    return cfg


def load_config(path=None, environ=None):
    path = path or CONFIG_FILE
    cfg = DEFAULT_CONFIG.copy()

    if os.path.exists(path):
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read config %s: %s", path, e)
            data = {}

        if isinstance(data, dict):
            for k in DEFAULT_CONFIG:
                if k in data:
                    cfg[k] = data[k]

    return apply_env_overrides(cfg, environ)


def save_config(cfg, path=None):
    path = path or CONFIG_FILE
    data = {k: cfg.get(k, v) for k, v in DEFAULT_CONFIG.items()}
    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def bookmark_path(cfg):
    return os.path.expanduser(cfg["BOOKMARK_FILE"])
