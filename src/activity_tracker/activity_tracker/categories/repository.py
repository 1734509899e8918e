from __future__ import annotations

from typing import Optional, Protocol

from .model import Category


class CategoryRepository(Protocol):
    def get_by_id(self, category_id: int) -> Optional[Category]:
        raise NotImplementedError
