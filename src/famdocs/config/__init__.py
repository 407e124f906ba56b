"""Configuration module for famdocs."""

from .constants import (
    DowngradePolicy,
    ErrorCodes,
    GrantSortField,
    Headers,
    SortOrder,
    ValidationLimits,
)
from .settings import FamdocsSettings, get_settings
from .logging_config import (
    LogFormat,
    LoggingConfig,
    LogVerbosity,
    get_logger,
    setup_logging,
)

__all__ = [
    # Constants
    "DowngradePolicy",
    "ErrorCodes",
    "GrantSortField",
    "Headers",
    "SortOrder",
    "ValidationLimits",

    # Settings
    "FamdocsSettings",
    "get_settings",

    # Logging
    "LogFormat",
    "LoggingConfig",
    "LogVerbosity",
    "get_logger",
    "setup_logging",
]
