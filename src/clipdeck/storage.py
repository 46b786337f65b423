import dataclasses
import threading
import uuid
from collections.abc import Callable

from clipdeck.config import DEFAULT_MAX_ENTRIES
from clipdeck.models import ClipboardEntry


class EntryStore:
    """Newest-first, capacity-bounded clipboard history.

    Every read and mutation holds one re-entrant lock, which makes the store
    the single serialization point for the poll timer, the expiry sweep, OCR
    results and user actions. Compound changes (dedup + insert + purge) are
    single methods so they are atomic.
    """

    def __init__(self, max_entries: int | None = None):
        self._max_entries = max_entries if max_entries is not None else DEFAULT_MAX_ENTRIES
        self._entries: list[ClipboardEntry] = []
        self._lock = threading.RLock()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def entries(self) -> list[ClipboardEntry]:
        with self._lock:
            return list(self._entries)

    def count(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.count()

    def get_entry(self, entry_id: uuid.UUID) -> ClipboardEntry | None:
        with self._lock:
            for entry in self._entries:
                if entry.id == entry_id:
                    return entry
            return None

    def add_entry(self, entry: ClipboardEntry) -> ClipboardEntry:
        """Insert entry at the head without deduplication."""
        with self._lock:
            self._entries = [e for e in self._entries if e.id != entry.id]
            self._entries.insert(0, entry)
            self.purge_old()
            return entry

    def insert(
        self,
        entry: ClipboardEntry,
        is_duplicate: Callable[[ClipboardEntry], bool],
    ) -> ClipboardEntry:
        """Replace any duplicates of entry and insert it at the head.

        The star of the most recent duplicate carries over to the new entry.

        Returns:
            The entry as stored.
        """
        with self._lock:
            duplicates = [e for e in self._entries if is_duplicate(e)]
            if duplicates and duplicates[0].is_starred and not entry.is_starred:
                entry = dataclasses.replace(entry, is_starred=True)
            if duplicates:
                self._entries = [e for e in self._entries if not is_duplicate(e)]
            return self.add_entry(entry)

    def update_entry(self, entry_id: uuid.UUID, **changes) -> ClipboardEntry | None:
        """Replace fields of the entry with entry_id, keeping its id and position.

        Returns:
            The updated entry, or None if no entry has that id.
        """
        with self._lock:
            for index, entry in enumerate(self._entries):
                if entry.id == entry_id:
                    updated = dataclasses.replace(entry, **changes)
                    self._entries[index] = updated
                    return updated
            return None

    def toggle_star(self, entry_id: uuid.UUID) -> bool | None:
        with self._lock:
            entry = self.get_entry(entry_id)
            if entry is None:
                return None
            self.update_entry(entry_id, is_starred=not entry.is_starred)
            return not entry.is_starred

    def delete_entry(self, entry_id: uuid.UUID) -> bool:
        with self._lock:
            before = len(self._entries)
            self._entries = [e for e in self._entries if e.id != entry_id]
            return len(self._entries) != before

    def remove_expired(self) -> int:
        with self._lock:
            before = len(self._entries)
            self._entries = [e for e in self._entries if not e.is_expired]
            return before - len(self._entries)

    def purge_old(self, keep_count: int | None = None) -> int:
        keep = keep_count if keep_count is not None else self._max_entries
        with self._lock:
            deleted = max(0, len(self._entries) - keep)
            if deleted:
                del self._entries[keep:]
            return deleted

    def clear_all(self) -> int:
        with self._lock:
            deleted = len(self._entries)
            self._entries = []
            return deleted
