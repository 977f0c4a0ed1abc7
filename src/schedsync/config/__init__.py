"""Application configuration helpers."""

from __future__ import annotations

from .chzzk import ChzzkConfig, get_chzzk_config
from .env import int_from_env, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .reconciliation import (
    ApprovalConfig,
    ReconciliationConfig,
    get_approval_config,
    get_reconciliation_config,
)
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_storage_config,
)

__all__ = [
    "ApprovalConfig",
    "ChzzkConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ReconciliationConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "get_approval_config",
    "get_chzzk_config",
    "get_database_config",
    "get_reconciliation_config",
    "get_storage_config",
    "int_from_env",
    "require_env_var",
    "require_env_vars",
]
