# ==============================================================================
# MIDDLEWARE PACKAGE INITIALIZATION
# ==============================================================================

"""
Middleware Module
=================

- Error handling with request tracing
"""

from improved_api.middleware.error_handling import ErrorHandlingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
]
