from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    """Work category as seen by the engine: id, current name, existence."""

    category_id: int
    name: str
    is_deleted: bool = False
