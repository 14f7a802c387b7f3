# ==============================================================================
# DATABASE PACKAGE INITIALIZATION
# ==============================================================================

"""
Database Module
===============

Key Components:
- SQLBase: Declarative base for entities
- ImprovedDbContext: Engine, sessions and entity registry
- Repositories: Query and record data access
- Unit of Work: Transaction management
"""

from improved_api.database.base import SQLBase
from improved_api.database.context import ImprovedDbContext
from improved_api.database.repositories import (
    ImprovedRecordRepository,
    ImprovedRepository,
)
from improved_api.database.unit_of_work import ImprovedUnitOfWork

__all__ = [
    "SQLBase",
    "ImprovedDbContext",
    "ImprovedRepository",
    "ImprovedRecordRepository",
    "ImprovedUnitOfWork",
]
