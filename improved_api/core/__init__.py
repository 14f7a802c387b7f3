# ==============================================================================
# CORE PACKAGE INITIALIZATION
# ==============================================================================
# Core utilities: Settings, Security, Exceptions, Logging
# ==============================================================================

"""
Core Module
===========

- settings: Environment configuration management
- security: JWT token issuing and validation
- exceptions: Custom exception classes
- logging_config: Root logger setup
"""

from improved_api.core.settings import Settings, TokenConfiguration, get_settings
from improved_api.core.exceptions import (
    AppException,
    AuthenticationError,
    ConfigurationError,
    DatabaseError,
    HandlerNotFoundError,
    IntegrityViolationError,
    MappingError,
    NotFoundError,
    TransactionError,
)

__all__ = [
    "Settings",
    "TokenConfiguration",
    "get_settings",
    "AppException",
    "AuthenticationError",
    "ConfigurationError",
    "DatabaseError",
    "HandlerNotFoundError",
    "IntegrityViolationError",
    "MappingError",
    "NotFoundError",
    "TransactionError",
]
