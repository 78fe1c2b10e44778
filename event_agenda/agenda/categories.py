"""Category registry: fixed default categories plus user-defined ones."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional

_WHITESPACE = re.compile(r"\s+")

ALL_CATEGORY_ID = "all"


@dataclass(frozen=True, slots=True)
class Category:
    """A discovery category. ``id`` is the slug of ``label``."""

    id: str
    label: str

    def to_api_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label}


DEFAULT_CATEGORIES = (
    Category(ALL_CATEGORY_ID, "All Events"),
    Category("social", "Social Events"),
    Category("cultural", "Culture/Art"),
    Category("sports", "Sports"),
    Category("food", "Food & Drink"),
    Category("music", "Music/Concerts"),
    Category("business", "Networking/Business"),
)


def slugify(label: str) -> str:
    """Trim, lowercase and collapse internal whitespace runs into one hyphen."""
    return _WHITESPACE.sub("-", label.strip().lower())


class CategoryRegistry:
    """Ordered set of categories with unique ids."""

    def __init__(self, categories: Optional[Iterable[Category]] = None) -> None:
        self._categories: List[Category] = []
        for category in DEFAULT_CATEGORIES if categories is None else categories:
            if not self.contains(category.id):
                self._categories.append(category)

    def __iter__(self) -> Iterator[Category]:
        return iter(list(self._categories))

    def __len__(self) -> int:
        return len(self._categories)

    def contains(self, category_id: str) -> bool:
        return any(c.id == category_id for c in self._categories)

    def get(self, category_id: str) -> Optional[Category]:
        return next((c for c in self._categories if c.id == category_id), None)

    def register(self, label: str) -> Optional[Category]:
        """Append a custom category.

        Returns:
            The new Category, or None when the label is blank or its slug
            already exists (silently ignored).
        """
        trimmed = (label or "").strip()
        if not trimmed:
            return None
        category_id = slugify(trimmed)
        if self.contains(category_id):
            return None
        category = Category(id=category_id, label=trimmed)
        self._categories.append(category)
        return category
