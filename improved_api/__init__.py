# ==============================================================================
# IMPROVED API PACKAGE INITIALIZATION
# ==============================================================================
# Reusable scaffolding for CRUD REST APIs with FastAPI and SQLAlchemy
# Architecture: Startup, Db Context, Repository, Unit of Work, Mediator, Mapper
# ==============================================================================

"""
Improved API
============

A scaffolding layer for building CRUD-style REST APIs on top of a
relational database.

Features:
---------
- Reusable startup base class wiring every service into a FastAPI app
- Async SQLAlchemy db context with per-request Unit of Work
- Generic query and record repositories
- Mediator-based command dispatch with generic CRUD handlers
- Object-to-view-model mapping profiles
- JWT bearer authentication
- Swagger/OpenAPI documentation
- Error handling and request logging middleware

Usage:
------
    from improved_api.api.startup import ImprovedStartup

    class Startup(ImprovedStartup):
        def create_context(self):
            return MyContext(self.settings)

    app = Startup().create_app()
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
