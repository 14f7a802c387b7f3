# ==============================================================================
# API PACKAGE INITIALIZATION
# ==============================================================================

"""
API Module
==========

- controllers: Generic query and CRUD controllers
- dependencies: Request-scoped services and authentication
- startup: Application bootstrap base class
"""

from improved_api.api.controllers import ImprovedController, ImprovedQueryController
from improved_api.api.startup import ImprovedStartup

__all__ = [
    "ImprovedController",
    "ImprovedQueryController",
    "ImprovedStartup",
]
