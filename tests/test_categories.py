"""Tests for the category registry."""
from __future__ import annotations

from event_agenda.agenda import DEFAULT_CATEGORIES, CategoryRegistry, slugify


class TestSlugify:

    def test_lowercases_and_hyphenates(self):
        assert slugify("  Kite   Surfing ") == "kite-surfing"

    def test_single_word(self):
        assert slugify("Music") == "music"


class TestCategoryRegistry:

    def test_defaults_first(self):
        registry = CategoryRegistry()
        ids = [c.id for c in registry]
        assert ids[0] == "all"
        assert len(registry) == len(DEFAULT_CATEGORIES)

    def test_register_custom(self):
        registry = CategoryRegistry()
        category = registry.register("Kite Surfing")

        assert category.id == "kite-surfing"
        assert category.label == "Kite Surfing"
        assert list(registry)[-1] == category
        assert registry.get("kite-surfing") == category

    def test_register_duplicate_slug_ignored(self):
        registry = CategoryRegistry()
        registry.register("Kite Surfing")
        before = len(registry)

        assert registry.register("kite  surfing") is None
        assert registry.register("Music") is None
        assert len(registry) == before

    def test_register_blank_ignored(self):
        registry = CategoryRegistry()
        assert registry.register("   ") is None
        assert len(registry) == len(DEFAULT_CATEGORIES)

    def test_to_api_dict(self):
        category = CategoryRegistry().get("food")
        assert category.to_api_dict() == {"id": "food", "label": "Food & Drink"}
