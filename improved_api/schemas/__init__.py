"""Shared response schemas."""

from improved_api.schemas.base import (
    APIResponse,
    BaseSchema,
    HealthResponse,
    PaginatedResponse,
)

__all__ = [
    "APIResponse",
    "BaseSchema",
    "HealthResponse",
    "PaginatedResponse",
]
