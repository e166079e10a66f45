import copy
import json
import logging
import os

from hangul import BACKSPACE_JASO, BACKSPACE_MODES

logger = logging.getLogger(__name__)

CONFIG_ENV = "IBUS_SMK_CONFIG"
DEFAULT_CONFIG_PATH = os.path.join("~", ".config", "ibus-smk", "config.json")

DEFAULT_CONFIG = {
    "EnableLeadClusters": True,
    "BackspaceMode": BACKSPACE_JASO,
    "EnableIndicator": True,
    "ToggleKeys": ["Shift+space", "Hangul"],
    "StartInHangul": True,
}

_BOOL_KEYS = ("EnableLeadClusters", "EnableIndicator", "StartInHangul")


def config_path():
    return os.path.expanduser(os.environ.get(CONFIG_ENV) or DEFAULT_CONFIG_PATH)


def load_config(path=None):
    """Read the JSON config file on top of DEFAULT_CONFIG.

    A missing file is normal. An unreadable file or a bad value is logged
    and the default is used instead.
    """
    if path is None:
        path = config_path()
    config = copy.deepcopy(DEFAULT_CONFIG)
    if not os.path.exists(path):
        return config

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Error loading config %s: %s", path, e)
        return config

    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not an object", path)
        return config

    for key, value in data.items():
        if key not in DEFAULT_CONFIG:
            logger.warning("Unknown config key %r", key)
            continue
        if _valid(key, value):
            config[key] = value
        else:
            logger.warning("Invalid value for %s: %r, using %r",
                           key, value, DEFAULT_CONFIG[key])
    return config


def _valid(key, value):
    if key in _BOOL_KEYS:
        return isinstance(value, bool)
    if key == "BackspaceMode":
        return value in BACKSPACE_MODES
    if key == "ToggleKeys":
        return isinstance(value, list) and all(isinstance(k, str) for k in value)
    return False
