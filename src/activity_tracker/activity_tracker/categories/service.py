from __future__ import annotations

from ..core.exceptions import CategoryNotFoundError
from .model import Category
from .repository import CategoryRepository


class CategoryResolver:
    """Resolve a category id to its current name, at call time."""

    def __init__(self, categories: CategoryRepository):
        self._categories = categories

    def resolve(self, category_id: int) -> Category:
        category = self._categories.get_by_id(int(category_id))
        if not category or category.is_deleted:
            raise CategoryNotFoundError(f"Category {category_id} not found")
        return category
