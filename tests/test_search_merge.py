"""Tests for bilingual multi-field search: merge order, dedup, budget, and SQL matching."""

from types import SimpleNamespace

import pytest

from madad.services import restaurant_store
from madad.services.search_merge import (
    field_priority,
    make_field_search,
    merge_batches,
    search_by_name,
)
from tests.conftest import add_restaurant, restaurant_fields


def _card(rid: int, **overrides) -> SimpleNamespace:
    """An object shaped like a Restaurant row, enough for card projection."""
    return SimpleNamespace(id=rid, **restaurant_fields(slug=f"r-{rid}", **overrides))


class FakeFieldSearch:
    """Records calls and returns canned per-field hits."""

    def __init__(self, hits: dict[str, list] | None = None):
        self.hits = hits or {}
        self.calls: list[tuple[str, str, int]] = []

    async def __call__(self, field, query, limit):
        self.calls.append((field, query, limit))
        return self.hits.get(field, [])[:limit]


class TestFieldPriority:
    def test_english(self):
        assert field_priority("en") == [
            "name", "type", "address", "description",
            "name_he", "type_he", "description_he",
        ]

    def test_hebrew(self):
        assert field_priority("he") == [
            "name_he", "type_he", "address", "description_he",
            "name", "type", "description",
        ]


class TestMergeBatches:
    def test_first_seen_wins(self):
        a, b, c = _card(1), _card(2), _card(3)
        merged = merge_batches([[a, b], [b, c], [a]], limit=30)
        assert [r.id for r in merged] == [1, 2, 3]

    def test_truncates(self):
        batch = [_card(i) for i in range(50)]
        assert len(merge_batches([batch], limit=30)) == 30


class TestSearchByName:
    @pytest.mark.parametrize("query", ["", "   ", "\t\n"])
    async def test_blank_query_never_calls_store(self, query):
        search = FakeFieldSearch()
        assert await search_by_name(query, "en", search) == []
        assert search.calls == []

    async def test_queries_every_field_with_caps(self):
        search = FakeFieldSearch()
        await search_by_name(" pizza ", "he", search)

        assert {field for field, _, _ in search.calls} == set(restaurant_store.SEARCHABLE_FIELDS)
        assert all(query == "pizza" for _, query, _ in search.calls)
        limits = {field: limit for field, _, limit in search.calls}
        assert limits["description"] == 10
        assert limits["description_he"] == 10
        assert limits["name"] == 15
        assert limits["address"] == 15

    async def test_english_priority_order(self):
        search = FakeFieldSearch({
            "name": [_card(1)],
            "type": [_card(2)],
            "address": [_card(3)],
            "description": [_card(4)],
            "name_he": [_card(5)],
            "type_he": [_card(6)],
            "description_he": [_card(7)],
        })
        results = await search_by_name("pasta", "en", search)
        assert [r.id for r in results] == [1, 2, 3, 4, 5, 6, 7]

    async def test_hebrew_priority_order(self):
        search = FakeFieldSearch({
            "name": [_card(1)],
            "type": [_card(2)],
            "address": [_card(3)],
            "description": [_card(4)],
            "name_he": [_card(5)],
            "type_he": [_card(6)],
            "description_he": [_card(7)],
        })
        results = await search_by_name("pasta", "he", search)
        assert [r.id for r in results] == [5, 6, 3, 7, 1, 2, 4]

    async def test_native_name_match_ranks_before_description_match(self):
        name_match = _card(1, name_he="פסטה Pasta")
        desc_match = _card(2, description="Fresh pasta daily")
        search = FakeFieldSearch({"name_he": [name_match], "description": [desc_match]})

        results = await search_by_name("Pasta", "he", search)

        assert [r.id for r in results] == [1, 2]

    async def test_english_description_match_ranks_before_hebrew_name_match(self):
        name_match = _card(1, name_he="פסטה Pasta")
        desc_match = _card(2, description="Fresh pasta daily")
        search = FakeFieldSearch({"name_he": [name_match], "description": [desc_match]})

        results = await search_by_name("Pasta", "en", search)

        assert [r.id for r in results] == [2, 1]

    async def test_other_language_hits_still_surface(self):
        search = FakeFieldSearch({"name_he": [_card(9)]})
        results = await search_by_name("pasta", "en", search)
        assert [r.id for r in results] == [9]

    async def test_name_and_address_match_appears_once(self):
        both = _card(1, name="Harbour", address="Harbour St 1")
        search = FakeFieldSearch({"name": [both], "address": [both]})

        results = await search_by_name("harbour", "en", search)

        assert [r.id for r in results] == [1]

    async def test_result_budget(self):
        search = FakeFieldSearch({
            "name": [_card(i) for i in range(15)],
            "type": [_card(i) for i in range(15, 30)],
            "address": [_card(i) for i in range(30, 45)],
        })
        results = await search_by_name("x", "en", search)
        assert len(results) == 30
        assert results[-1].id == 29

    async def test_cards_omit_descriptions(self):
        search = FakeFieldSearch({"name": [_card(1, name="Pasta", description="long text")]})
        results = await search_by_name("pasta", "en", search)
        dumped = results[0].model_dump()
        assert "description" not in dumped
        assert "description_he" not in dumped


class TestSearchField:
    async def test_case_insensitive_substring(self, db):
        await add_restaurant(db, name="Pasta Basta")
        await add_restaurant(db, name="Sushi Bar")

        hits = await restaurant_store.search_field(db, "name", "pasta", 15)

        assert [r.name for r in hits] == ["Pasta Basta"]

    async def test_more_matched_terms_rank_first(self, db):
        await add_restaurant(db, name="Green Cafe")
        await add_restaurant(db, name="Green Leaf Cafe")
        await add_restaurant(db, name="Leaf")

        hits = await restaurant_store.search_field(db, "name", "green leaf", 15)

        assert [r.name for r in hits] == ["Green Leaf Cafe", "Green Cafe", "Leaf"]

    async def test_like_wildcards_are_literal(self, db):
        await add_restaurant(db, name="100% Vegan")
        await add_restaurant(db, name="Vegan Corner")

        hits = await restaurant_store.search_field(db, "name", "100%", 15)

        assert [r.name for r in hits] == ["100% Vegan"]

    async def test_respects_limit(self, db):
        for i in range(5):
            await add_restaurant(db, name=f"Pizza {i}")

        hits = await restaurant_store.search_field(db, "name", "pizza", 3)

        assert len(hits) == 3

    async def test_rejects_unknown_field(self, db):
        with pytest.raises(ValueError):
            await restaurant_store.search_field(db, "slug", "x", 5)


class TestSearchAgainstDatabase:
    async def test_end_to_end_bilingual_merge(self, db, session_factory):
        desc = await add_restaurant(db, name="Trattoria", description="Handmade pasta")
        hebrew = await add_restaurant(db, name="Nona", name_he="פסטה נונה")
        native = await add_restaurant(db, name="Pasta Fresca")
        addr = await add_restaurant(db, name="Corner", address="Pasta Street 4")

        search = make_field_search(session_factory)
        results = await search_by_name("pasta", "en", search)

        assert [r.id for r in results] == [native.id, addr.id, desc.id]

        results = await search_by_name("פסטה", "he", search)
        assert [r.id for r in results] == [hebrew.id]

    async def test_dedup_across_fields(self, db, session_factory):
        both = await add_restaurant(db, name="Harbour Grill", address="Harbour Road")

        results = await search_by_name("harbour", "en", make_field_search(session_factory))

        assert [r.id for r in results] == [both.id]
