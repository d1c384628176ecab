"""Application tests for category administration."""

import pytest
from catalogue.category.management import list_categories, upsert_category
from shared.errors import Conflict, NotFound


class TestUpsertCategory:
    def test_create(self, uow):
        category = upsert_category(uow, "Apparel")
        assert [c.id for c in list_categories(uow)] == [category.id]

    def test_duplicate_name_conflicts(self, uow):
        upsert_category(uow, "Apparel")
        with pytest.raises(Conflict):
            upsert_category(uow, "Apparel")

    def test_rename(self, uow):
        category = upsert_category(uow, "Apparel")
        upsert_category(uow, "Clothing", category_id=category.id)
        assert [c.name for c in list_categories(uow)] == ["Clothing"]

    def test_rename_onto_another_name_conflicts(self, uow):
        upsert_category(uow, "Apparel")
        mugs = upsert_category(uow, "Mugs")
        with pytest.raises(Conflict):
            upsert_category(uow, "Apparel", category_id=mugs.id)

    def test_rename_unknown_category(self, uow):
        with pytest.raises(NotFound):
            upsert_category(uow, "Apparel", category_id="missing")

    def test_listed_by_name(self, uow):
        upsert_category(uow, "Mugs")
        upsert_category(uow, "Apparel")
        assert [c.name for c in list_categories(uow)] == ["Apparel", "Mugs"]
