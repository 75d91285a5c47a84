"""
Runtime Configuration Module

Provides configuration loading and management for the airdrop tool.
"""

from .runtime import (
    DEFAULT_BASE_URL,
    DEFAULT_SIZE_LIMIT,
    DatasetConfig,
    HttpConfig,
    NetworkConfig,
    PipelineConfig,
    RPC_PORTS,
    RuntimeConfig,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_SIZE_LIMIT",
    "DatasetConfig",
    "HttpConfig",
    "NetworkConfig",
    "PipelineConfig",
    "RPC_PORTS",
    "RuntimeConfig",
]
