import logging
import threading
import uuid
from collections.abc import Callable
from concurrent.futures import Executor, ThreadPoolExecutor

from clipdeck.config import MonitorSettings
from clipdeck.fuzzy import filter_entries
from clipdeck.markdown import markdown_to_html
from clipdeck.models import ClipboardEntry, EntryType
from clipdeck.ocr import TextRecognizer, VisionRecognizer
from clipdeck.pasteboard import (
    IMAGE_TYPES,
    RICH_TYPES,
    TYPE_FILE_URL,
    TYPE_HTML,
    TYPE_STRING,
    Pasteboard,
    SystemPasteboard,
)
from clipdeck.redact import is_concealed_content, is_password_like
from clipdeck.storage import EntryStore
from clipdeck.timers import RepeatingTimer
from clipdeck.utils import compute_hash, entry_preview, is_decodable_image, parse_file_url

logger = logging.getLogger(__name__)


class ClipboardManager:
    """Watches a pasteboard and keeps a deduplicated, capacity-bounded history.

    Two periodic triggers feed the history: a fast poll that captures
    clipboard changes and a slow sweep that drops expired passwords. Text
    recognition for images runs on a background executor and its results are
    applied through the store, which serializes all mutations. Results for
    entries that no longer exist are dropped.
    """

    def __init__(
        self,
        pasteboard: Pasteboard | None = None,
        on_change: Callable[[], None] | None = None,
        recognizer: TextRecognizer | None = None,
        settings: MonitorSettings | None = None,
        ocr_executor: Executor | None = None,
    ):
        self._settings = settings or MonitorSettings()
        self._pasteboard = pasteboard if pasteboard is not None else SystemPasteboard()
        self._on_change = on_change
        self._recognizer = recognizer if recognizer is not None else VisionRecognizer()
        self._store = EntryStore(max_entries=self._settings.max_entries)
        self._ocr_executor = ocr_executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="clipdeck-ocr")
        self._pasteboard_lock = threading.RLock()
        self._last_change_count = self._pasteboard.change_count()
        self._poll_timer = RepeatingTimer(self._settings.poll_interval, self.check_for_changes, name="clipdeck-poll")
        self._expiry_timer = RepeatingTimer(
            self._settings.expiry_sweep_interval, self.remove_expired_entries, name="clipdeck-expiry"
        )

    @property
    def entries(self) -> list[ClipboardEntry]:
        return self._store.entries

    @property
    def is_monitoring(self) -> bool:
        return self._poll_timer.is_running

    def start_monitoring(self) -> None:
        self._poll_timer.start()
        self._expiry_timer.start()

    def stop_monitoring(self) -> None:
        self._poll_timer.stop()
        self._expiry_timer.stop()

    def close(self) -> None:
        self.stop_monitoring()
        self._ocr_executor.shutdown(wait=False)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def check_for_changes(self) -> bool:
        """Capture the clipboard if it changed since the last check.

        Returns:
            True if a new entry was added to the history.
        """
        with self._pasteboard_lock:
            current_count = self._pasteboard.change_count()
            if current_count == self._last_change_count:
                return False

            self._last_change_count = current_count

            try:
                types = self._pasteboard.types() or []
                entry = self._read_image(types) or self._read_file_url(types) or self._read_text(types)
            except Exception:
                logger.exception("Error reading clipboard")
                return False

        if entry is None:
            return False

        logger.debug("Captured %s entry: %s", entry.entry_type.value, entry_preview(entry))
        self._notify()
        return True

    def _read_image(self, types: list[str]) -> ClipboardEntry | None:
        for img_type in IMAGE_TYPES:
            if img_type not in types:
                continue

            img_bytes = self._pasteboard.data_for_type(img_type)
            if img_bytes is None:
                continue
            if len(img_bytes) > self._settings.max_image_size:
                logger.warning("Image too large (%d bytes), skipping", len(img_bytes))
                continue
            if not is_decodable_image(img_bytes):
                logger.warning("Could not decode %s data, skipping", img_type)
                continue

            content_hash = compute_hash(img_bytes)
            entry = self._store.insert(
                ClipboardEntry(
                    content="",
                    entry_type=EntryType.IMAGE,
                    image_data=img_bytes,
                    content_hash=content_hash,
                ),
                lambda e: e.entry_type == EntryType.IMAGE and e.content_hash == content_hash,
            )
            self._schedule_ocr(entry)
            return entry

        return None

    def _read_file_url(self, types: list[str]) -> ClipboardEntry | None:
        if TYPE_FILE_URL not in types:
            return None

        raw = self._pasteboard.string_for_type(TYPE_FILE_URL)
        parsed = parse_file_url(raw) if raw else None
        if parsed is None:
            return None

        url, name = parsed
        return self._store.insert(
            ClipboardEntry(content=name, entry_type=EntryType.FILE_URL, file_url=url),
            lambda e: e.entry_type == EntryType.FILE_URL and e.file_url == url,
        )

    def _read_text(self, types: list[str]) -> ClipboardEntry | None:
        text = self._pasteboard.string_for_type(TYPE_STRING)
        if not text or not text.strip():
            return None

        is_password = is_concealed_content(types) or is_password_like(text)
        pasteboard_data = None if is_password else self._read_rich_data(types)

        return self._store.insert(
            ClipboardEntry(content=text, is_password=is_password, pasteboard_data=pasteboard_data),
            lambda e: e.entry_type == EntryType.TEXT and e.content == text,
        )

    def _read_rich_data(self, types: list[str]) -> dict[str, bytes] | None:
        rich: dict[str, bytes] = {}
        for rich_type in RICH_TYPES:
            if rich_type in types:
                data = self._pasteboard.data_for_type(rich_type)
                if data is not None:
                    rich[rich_type] = data
        return rich or None

    def _schedule_ocr(self, entry: ClipboardEntry) -> None:
        try:
            self._ocr_executor.submit(self._run_ocr, entry.id, entry.image_data)
        except RuntimeError:
            logger.debug("OCR executor is shut down, not recognizing entry %s", entry.id)

    def _run_ocr(self, entry_id: uuid.UUID, image_data: bytes) -> None:
        try:
            result = self._recognizer.recognize(image_data)
        except Exception:
            logger.debug("Text recognition failed for entry %s", entry_id, exc_info=True)
            return

        if not result.success or not result.text.strip():
            logger.debug("No text recognized for entry %s: %s", entry_id, result.error)
            return

        self._apply_recognized_text(entry_id, result.text)

    def _apply_recognized_text(self, entry_id: uuid.UUID, text: str) -> None:
        if self._store.update_entry(entry_id, content=text) is None:
            logger.debug("Entry %s is gone, dropping recognized text", entry_id)
            return
        self._notify()

    def remove_expired_entries(self) -> int:
        removed = self._store.remove_expired()
        if removed:
            logger.debug("Removed %d expired entries", removed)
            self._notify()
        return removed

    def add_entry(self, entry: ClipboardEntry) -> None:
        self._store.add_entry(entry)
        self._notify()

    def delete_entry(self, entry_id: uuid.UUID) -> None:
        if self._store.delete_entry(entry_id):
            self._notify()

    def update_entry_content(self, entry_id: uuid.UUID, new_content: str) -> None:
        # Rich representations describe the old text, so they are dropped.
        if self._store.update_entry(entry_id, content=new_content, pasteboard_data=None) is not None:
            self._notify()

    def toggle_star(self, entry_id: uuid.UUID) -> None:
        if self._store.toggle_star(entry_id) is not None:
            self._notify()

    def clear_history(self) -> None:
        if self._store.clear_all():
            self._notify()

    def search(self, query: str) -> list[ClipboardEntry]:
        return filter_entries(self._store.entries, query)

    def select_entry(self, entry: ClipboardEntry) -> bool:
        """Put entry back on the clipboard in its native representation."""

        def write() -> None:
            if entry.entry_type == EntryType.IMAGE and entry.image_data is not None:
                self._pasteboard.write_image(entry.image_data)
            elif entry.entry_type == EntryType.FILE_URL and entry.file_url:
                self._pasteboard.write_file_url(entry.file_url)
            else:
                self._pasteboard.set_string(entry.content, TYPE_STRING)
                for rich_type, data in (entry.pasteboard_data or {}).items():
                    self._pasteboard.set_data(data, rich_type)

        return self._write_pasteboard(write)

    def select_entry_as_plain_text(self, entry: ClipboardEntry) -> bool:
        return self._write_pasteboard(lambda: self._pasteboard.set_string(entry.content, TYPE_STRING))

    def select_entry_as_rendered_markdown(self, entry: ClipboardEntry) -> bool:
        html = markdown_to_html(entry.content)

        def write() -> None:
            self._pasteboard.set_string(entry.content, TYPE_STRING)
            self._pasteboard.set_data(html.encode("utf-8"), TYPE_HTML)

        return self._write_pasteboard(write)

    def _write_pasteboard(self, write: Callable[[], object]) -> bool:
        with self._pasteboard_lock:
            try:
                self._pasteboard.clear_contents()
                write()
            except Exception:
                logger.exception("Error copying entry to clipboard")
                return False
            finally:
                # Our own write must not be captured as a new clipboard change.
                self._last_change_count = self._pasteboard.change_count()
        return True

    def _notify(self) -> None:
        if self._on_change:
            self._on_change()
