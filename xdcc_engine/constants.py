"""
Configuration constants for the XDCC request engine

This module contains all configurable defaults used throughout the package.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Attempts to parse the environment variable as a float. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Overall request budget (connect + register + join + await offer)
XDCC_REQUEST_TIMEOUT = _get_env_float("XDCC_REQUEST_TIMEOUT", 30.0)
XDCC_CONNECT_TIMEOUT = _get_env_float(
    "XDCC_CONNECT_TIMEOUT", 10.0
)  # Capped by whatever remains of the request budget

# Registration
XDCC_NICK_RETRY_LIMIT = _get_env_int(
    "XDCC_NICK_RETRY_LIMIT", 3
)  # Fresh nicknames tried after the first one collides
XDCC_NICKNAME_MAX_LENGTH = _get_env_int("XDCC_NICKNAME_MAX_LENGTH", 16)
XDCC_REALNAME = os.getenv("XDCC_REALNAME", "xdcc-engine")

# Wire
IRC_DEFAULT_PORT = _get_env_int("IRC_DEFAULT_PORT", 6667)
IRC_DEFAULT_TLS_PORT = _get_env_int("IRC_DEFAULT_TLS_PORT", 6697)
IRC_READ_CHUNK_SIZE = _get_env_int("IRC_READ_CHUNK_SIZE", 4096)
IRC_MAX_LINE_LENGTH = _get_env_int(
    "IRC_MAX_LINE_LENGTH", 16384
)  # Partial line bytes buffered before the peer is considered desynced
IRC_QUIT_MESSAGE = os.getenv("IRC_QUIT_MESSAGE", "done")
