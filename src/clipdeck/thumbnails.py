import threading
import uuid
from collections.abc import Iterable

from clipdeck.config import THUMBNAIL_SIZE
from clipdeck.models import ClipboardEntry, EntryType
from clipdeck.utils import create_thumbnail


class ThumbnailCache:
    """Lazily built PNG thumbnails for image entries, keyed by entry id.

    Lives beside the history rather than on the entries, so entries stay
    immutable values. Callers prune it against the current entry ids.
    """

    def __init__(self, size: tuple[int, int] = THUMBNAIL_SIZE):
        self._size = size
        self._thumbnails: dict[uuid.UUID, bytes | None] = {}
        self._lock = threading.Lock()

    def get(self, entry: ClipboardEntry) -> bytes | None:
        if entry.entry_type != EntryType.IMAGE or not entry.image_data:
            return None

        with self._lock:
            if entry.id in self._thumbnails:
                return self._thumbnails[entry.id]

        thumbnail = create_thumbnail(entry.image_data, self._size)
        with self._lock:
            self._thumbnails[entry.id] = thumbnail
        return thumbnail

    def discard(self, entry_id: uuid.UUID) -> None:
        with self._lock:
            self._thumbnails.pop(entry_id, None)

    def prune(self, live_ids: Iterable[uuid.UUID]) -> int:
        keep = set(live_ids)
        with self._lock:
            stale = [entry_id for entry_id in self._thumbnails if entry_id not in keep]
            for entry_id in stale:
                del self._thumbnails[entry_id]
        return len(stale)

    def __contains__(self, entry_id: uuid.UUID) -> bool:
        with self._lock:
            return entry_id in self._thumbnails

    def __len__(self) -> int:
        with self._lock:
            return len(self._thumbnails)
