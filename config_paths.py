import json
import logging
import logging.handlers
import os
import tempfile

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "csvtui")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
LEGACY_CONFIG_JSON = os.path.join(HOME, ".csvtui.json")
LOG_PATH = os.path.join(CONFIG_DIR, "csvtui.log")

# default settings
LOG_LEVEL_DEFAULT = "INFO"
LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 2


class ConfigError(Exception):
    pass


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)


def _config_source() -> str | None:
    if os.path.exists(CONFIG_JSON):
        return CONFIG_JSON
    if os.path.exists(LEGACY_CONFIG_JSON):
        return LEGACY_CONFIG_JSON
    return None


def _read_json(path: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"failed to read config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"failed to parse config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a JSON object")
    return data


def load_config():
    cfg = {
        "COLORS": {},
        "HOTKEYS": {},
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
        "WARNINGS": [],
    }

    path = _config_source()
    if path is None:
        return cfg

    try:
        data = _read_json(path)
    except ConfigError as e:
        cfg["WARNINGS"].append(f"Failed to load config: {e}")
        return cfg

    colors = data.get("colors")
    if isinstance(colors, dict):
        cfg["COLORS"] = {
            str(name): value
            for name, value in colors.items()
            if isinstance(value, str) and value.strip()
        }

    hotkeys = data.get("hotkeys")
    if isinstance(hotkeys, dict):
        for name, keys in hotkeys.items():
            if isinstance(keys, list) and keys and all(isinstance(k, str) for k in keys):
                cfg["HOTKEYS"][str(name)] = list(keys)

    level = data.get("log_level")
    if isinstance(level, str) and level.strip():
        cfg["LOG_LEVEL"] = level.strip().upper()

    return cfg


def setup_logging(level: str = LOG_LEVEL_DEFAULT, log_path: str | None = None) -> str:
    """Send log records to a rotating file; returns the file in use.

    The terminal belongs to curses, so nothing is logged to stderr. When the
    config dir cannot be created the log goes to the system temp dir.
    """
    if log_path is None:
        log_path = LOG_PATH
        try:
            ensure_config_dirs()
        except OSError:
            log_path = os.path.join(tempfile.gettempdir(), "csvtui.log")

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
    )
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)-8s - %(name)s - %(message)s")
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return log_path
