"""
Single place for the shell's defaults.
Each value can be overridden with the environment variable named next to it.
The game engine reads none of these; only main.py does.
A malformed value stops the program with a message naming the variable.
"""
import logging
import os

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _int_setting(environ, name, default):
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise SystemExit(f"Configuration error: {name} must be a whole number, got {raw!r}.") from None


def load_settings(environ=os.environ):
    """Reads every setting from `environ` and returns them as a dict."""
    log_level = environ.get("WAR_LOG_LEVEL", "WARNING").strip().upper()
    if log_level not in LOG_LEVELS:
        raise SystemExit(f"Configuration error: WAR_LOG_LEVEL must be one of "
                         f"{', '.join(LOG_LEVELS)}, got {log_level!r}.")
    port = _int_setting(environ, "WAR_VISUALISER_PORT", 8765)
    if not 0 < port < 65536:
        raise SystemExit(f"Configuration error: WAR_VISUALISER_PORT must be between 1 and 65535, got {port}.")
    return {
        # WAR_SEED: seed the session's random generator for a reproducible game. Unset means OS entropy.
        "RANDOM_SEED": _int_setting(environ, "WAR_SEED", None),
        # WAR_LOG_LEVEL: level passed to logging.basicConfig.
        "LOG_LEVEL": getattr(logging, log_level),
        # WAR_VISUALISER: "1" starts the read-only websocket feed for a board visualiser.
        "VISUALISER_ENABLED": environ.get("WAR_VISUALISER", "0").strip() == "1",
        "VISUALISER_HOST": environ.get("WAR_VISUALISER_HOST", "localhost"),
        "VISUALISER_PORT": port,
    }


_settings = load_settings()
RANDOM_SEED = _settings["RANDOM_SEED"]
LOG_LEVEL = _settings["LOG_LEVEL"]
VISUALISER_ENABLED = _settings["VISUALISER_ENABLED"]
VISUALISER_HOST = _settings["VISUALISER_HOST"]
VISUALISER_PORT = _settings["VISUALISER_PORT"]
