"""Validated configuration and request models."""

from .model import (  # noqa: F401
    DEFAULT_REJECTION_PATTERNS,
    EngineConfig,
    RequestInfo,
    split_server_address,
)

__all__ = [
    "DEFAULT_REJECTION_PATTERNS",
    "EngineConfig",
    "RequestInfo",
    "split_server_address",
]
