import io
from concurrent.futures import Executor, Future
from unittest.mock import MagicMock

import pytest
from PIL import Image

from clipdeck.config import MonitorSettings
from clipdeck.models import ClipboardEntry
from clipdeck.monitor import ClipboardManager
from clipdeck.ocr import OCRResult
from clipdeck.pasteboard import TYPE_FILE_URL, TYPE_PNG, TYPE_STRING
from clipdeck.storage import EntryStore


class FakePasteboard:
    """In-memory stand-in for the system pasteboard."""

    def __init__(self):
        self._change_count = 0
        self._items: dict[str, str | bytes] = {}
        self.written_images: list[bytes] = []
        self.written_file_urls: list[str] = []

    def simulate_copy(self, items: dict[str, str | bytes]) -> None:
        self._items = dict(items)
        self._change_count += 1

    def copy_text(self, text: str, **extra: str | bytes) -> None:
        self.simulate_copy({TYPE_STRING: text, **extra})

    def change_count(self) -> int:
        return self._change_count

    def types(self) -> list[str] | None:
        return list(self._items)

    def string_for_type(self, type_: str) -> str | None:
        value = self._items.get(type_)
        return value if isinstance(value, str) else None

    def data_for_type(self, type_: str) -> bytes | None:
        value = self._items.get(type_)
        return value if isinstance(value, bytes) else None

    def clear_contents(self) -> int:
        self._items = {}
        self._change_count += 1
        return self._change_count

    def set_string(self, value: str, type_: str) -> bool:
        self._items[type_] = value
        self._change_count += 1
        return True

    def set_data(self, data: bytes, type_: str) -> bool:
        self._items[type_] = data
        self._change_count += 1
        return True

    def write_image(self, data: bytes) -> bool:
        self.written_images.append(data)
        self._items[TYPE_PNG] = data
        self._change_count += 1
        return True

    def write_file_url(self, url: str) -> bool:
        self.written_file_urls.append(url)
        self._items[TYPE_FILE_URL] = url
        self._change_count += 1
        return True


class ManualExecutor(Executor):
    """Executor that only runs submitted work when told to."""

    def __init__(self):
        self.pending: list[tuple[Future, object, tuple, dict]] = []

    def submit(self, fn, /, *args, **kwargs) -> Future:
        future: Future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run_pending(self) -> None:
        while self.pending:
            future, fn, args, kwargs = self.pending.pop(0)
            try:
                future.set_result(fn(*args, **kwargs))
            except Exception as e:
                future.set_exception(e)


@pytest.fixture
def pasteboard():
    return FakePasteboard()


@pytest.fixture
def ocr_executor():
    return ManualExecutor()


@pytest.fixture
def recognizer():
    mock = MagicMock()
    mock.recognize.return_value = OCRResult(text="Recognized text", success=True)
    return mock


@pytest.fixture
def on_change():
    return MagicMock()


@pytest.fixture
def manager(pasteboard, recognizer, ocr_executor, on_change):
    mgr = ClipboardManager(
        pasteboard=pasteboard,
        on_change=on_change,
        recognizer=recognizer,
        settings=MonitorSettings(),
        ocr_executor=ocr_executor,
    )
    yield mgr
    mgr.close()


@pytest.fixture
def store():
    return EntryStore(max_entries=50)


@pytest.fixture
def make_png():
    """Factory fixture producing encoded PNG bytes."""

    def _make_png(color: str = "red", size: tuple[int, int] = (100, 50)) -> bytes:
        out = io.BytesIO()
        Image.new("RGB", size, color).save(out, format="PNG")
        return out.getvalue()

    return _make_png


@pytest.fixture
def make_entry():
    """Factory fixture to create ClipboardEntry instances for testing."""

    def _make_entry(text: str = "hello world", **kwargs) -> ClipboardEntry:
        return ClipboardEntry(content=text, **kwargs)

    return _make_entry
