"""
Bookmarks Manager
Items saved by the learner for later practice.
"""
import json
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from vocabpro.managers.base_manager import BaseManager
from vocabpro.models.catalog import LearningItem
from vocabpro.models.state import Bookmark


_bookmark_list = TypeAdapter(list[Bookmark])


class BookmarksManager(BaseManager):
    """
    Bookmarks Manager.

    Bookmarks are keyed by the item key; an item is bookmarked at most once.
    """

    @property
    def name(self) -> str:
        return "bookmarks"

    @property
    def description(self) -> str:
        return "Saves items for later practice"

    # ==================== CHANGES ====================

    def add(self, item: LearningItem, mode: str = "vocab") -> bool:
        """Bookmark an item. Returns False if it was already bookmarked."""
        with self.store.mutate() as state:
            if any(b.id == item.key for b in state.bookmarks):
                return False
            state.bookmarks.append(Bookmark(
                id=item.key,
                item=item.model_dump(mode="json", exclude_none=True),
                mode=mode,
                added_at=self.now(),
            ))
        self.log_debug("Bookmark added", {"id": item.key})
        return True

    def remove(self, item_key: str) -> bool:
        """Remove a bookmark. Returns False if it did not exist."""
        with self.store.mutate() as state:
            kept = [b for b in state.bookmarks if b.id != item_key]
            removed = len(kept) < len(state.bookmarks)
            state.bookmarks = kept
        return removed

    def toggle(self, item: LearningItem, mode: str = "vocab") -> bool:
        """Flip the bookmark of an item. Returns True if it is now bookmarked."""
        if self.is_bookmarked(item.key):
            self.remove(item.key)
            return False
        return self.add(item, mode)

    def mark_reviewed(self, item_key: str) -> Optional[Bookmark]:
        with self.store.mutate() as state:
            bookmark = self._find(state.bookmarks, item_key)
            if bookmark is not None:
                bookmark.review_count += 1
                bookmark.last_reviewed = self.now()
        return bookmark

    def update_notes(self, item_key: str, notes: str) -> Optional[Bookmark]:
        with self.store.mutate() as state:
            bookmark = self._find(state.bookmarks, item_key)
            if bookmark is not None:
                bookmark.notes = notes
        return bookmark

    def clear(self) -> None:
        with self.store.mutate() as state:
            state.bookmarks = []
        self.log_debug("All bookmarks cleared")

    # ==================== QUERIES ====================

    def is_bookmarked(self, item_key: str) -> bool:
        return self._find(self.store.load().bookmarks, item_key) is not None

    def get_all(self) -> list[Bookmark]:
        return self.store.load().bookmarks

    def count(self) -> int:
        return len(self.store.load().bookmarks)

    def get(self, item_key: str) -> Optional[Bookmark]:
        return self._find(self.store.load().bookmarks, item_key)

    def get_for_practice(self, limit: int = 10) -> list[Bookmark]:
        """Least-reviewed bookmarks first (stable for ties)."""
        bookmarks = sorted(self.store.load().bookmarks, key=lambda b: b.review_count)
        return bookmarks[:limit]

    @staticmethod
    def _find(bookmarks: list[Bookmark], item_key: str) -> Optional[Bookmark]:
        for bookmark in bookmarks:
            if bookmark.id == item_key:
                return bookmark
        return None

    # ==================== EXPORT / IMPORT ====================

    def export_json(self) -> str:
        return json.dumps(
            [b.to_storage() for b in self.store.load().bookmarks],
            indent=2,
            ensure_ascii=False
        )

    def import_json(self, text: str) -> int:
        """
        Merge bookmarks from an exported list.

        Entries whose id is already bookmarked are ignored.

        Returns:
            Number of bookmarks added (0 for anything that is not a valid list)
        """
        try:
            imported = _bookmark_list.validate_json(text)
        except ValidationError as e:
            self.logger.warning(f"[{self.name}] Bookmark import rejected: {e.error_count()} errors")
            return 0

        with self.store.mutate() as state:
            known = {b.id for b in state.bookmarks}
            added = []
            for bookmark in imported:
                if bookmark.id not in known:
                    known.add(bookmark.id)
                    added.append(bookmark)
            state.bookmarks.extend(added)

        self.log_debug("Bookmarks imported", {"added": len(added)})
        return len(added)
