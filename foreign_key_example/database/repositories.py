# ==============================================================================
# EXAMPLE REPOSITORIES
# ==============================================================================

from __future__ import annotations

from improved_api.database.repositories import ImprovedRecordRepository

from foreign_key_example.domain_models import Category, Many, One, ToOne


class CategoryRepository(ImprovedRecordRepository[Category]):
    model = Category


class OneRepository(ImprovedRecordRepository[One]):
    model = One


class ManyRepository(ImprovedRecordRepository[Many]):
    model = Many


class ToOneRepository(ImprovedRecordRepository[ToOne]):
    """Writable from code; the HTTP surface only reads it."""

    model = ToOne
