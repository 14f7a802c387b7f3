"""
Domain Models
=============

- Category: Standalone entity
- One / Many: One-to-many foreign key relationship
- ToOne: Read-only entity referencing One
"""

from foreign_key_example.domain_models.category import Category
from foreign_key_example.domain_models.foreign_key import Many, One, ToOne

__all__ = ["Category", "One", "Many", "ToOne"]
