"""
Tests for bookmarks.
"""
import json

import pytest

from vocabpro.managers.bookmarks_manager import BookmarksManager


@pytest.fixture
def bookmarks(store):
    return BookmarksManager(store)


class TestBookmarks:
    """Tests for adding, removing and updating bookmarks"""

    def test_add(self, bookmarks, catalog, clock):
        assert bookmarks.add(catalog.find("Brave"))

        saved = bookmarks.get("Brave")
        assert saved.item["word"] == "Brave"
        assert saved.item["synonyms"] == ["courageous", "bold", "fearless"]
        assert saved.mode == "vocab"
        assert saved.added_at == clock.now
        assert bookmarks.is_bookmarked("Brave")

    def test_add_twice(self, bookmarks, catalog):
        bookmarks.add(catalog.find("Brave"))
        assert not bookmarks.add(catalog.find("Brave"))
        assert bookmarks.count() == 1

    def test_remove(self, bookmarks, catalog):
        bookmarks.add(catalog.find("RBI"), "acronym")
        assert bookmarks.remove("RBI")
        assert not bookmarks.remove("RBI")
        assert bookmarks.get_all() == []

    def test_toggle(self, bookmarks, catalog):
        item = catalog.find("Frugal")
        assert bookmarks.toggle(item)
        assert not bookmarks.toggle(item)
        assert not bookmarks.is_bookmarked("Frugal")

    def test_mark_reviewed(self, bookmarks, catalog, clock):
        bookmarks.add(catalog.find("Brave"))
        clock.advance(hours=1)

        bookmark = bookmarks.mark_reviewed("Brave")

        assert bookmark.review_count == 1
        assert bookmark.last_reviewed == clock.now
        assert bookmarks.mark_reviewed("Nothing") is None

    def test_notes(self, bookmarks, catalog):
        bookmarks.add(catalog.find("Brave"))
        assert bookmarks.update_notes("Brave", "opposite of timid").notes == "opposite of timid"
        assert bookmarks.get("Brave").notes == "opposite of timid"
        assert bookmarks.update_notes("Nothing", "x") is None

    def test_practice_order(self, bookmarks, catalog):
        for key in ("Abundant", "Brave", "Candid"):
            bookmarks.add(catalog.find(key))
        bookmarks.mark_reviewed("Abundant")
        bookmarks.mark_reviewed("Abundant")
        bookmarks.mark_reviewed("Candid")

        assert [b.id for b in bookmarks.get_for_practice()] == ["Brave", "Candid", "Abundant"]
        assert [b.id for b in bookmarks.get_for_practice(limit=1)] == ["Brave"]

    def test_clear(self, bookmarks, catalog):
        bookmarks.add(catalog.find("Brave"))
        bookmarks.clear()
        assert bookmarks.count() == 0


class TestBookmarkTransfer:
    """Tests for bookmark export and import"""

    def test_export(self, bookmarks, catalog):
        bookmarks.add(catalog.find("Brave"))
        exported = json.loads(bookmarks.export_json())
        assert exported[0]["id"] == "Brave"
        assert exported[0]["wordData"]["word"] == "Brave"
        assert exported[0]["reviewCount"] == 0

    def test_import_merges(self, bookmarks, catalog):
        bookmarks.add(catalog.find("Brave"))
        text = json.dumps([
            {"id": "Brave", "wordData": {"word": "Brave"}, "notes": "duplicate"},
            {"id": "Candid", "wordData": {"word": "Candid"}, "mode": "vocab", "reviewCount": 2},
        ])

        assert bookmarks.import_json(text) == 1

        assert [b.id for b in bookmarks.get_all()] == ["Brave", "Candid"]
        assert bookmarks.get("Brave").notes == ""
        assert bookmarks.get("Candid").review_count == 2

    @pytest.mark.parametrize("text", ["not json", '{"id": "x"}', '[{"mode": "vocab"}]'])
    def test_import_invalid(self, bookmarks, text):
        assert bookmarks.import_json(text) == 0
        assert bookmarks.count() == 0
