"""Pasteboard access.

The manager only talks to the narrow ``Pasteboard`` protocol below, so tests
can substitute an in-memory double. ``SystemPasteboard`` adapts the macOS
general pasteboard; AppKit is imported lazily so the rest of the package works
wherever PyObjC is not installed.
"""

from typing import Protocol

# Uniform type identifiers; these are the values of the matching AppKit constants.
TYPE_STRING = "public.utf8-plain-text"
TYPE_PNG = "public.png"
TYPE_TIFF = "public.tiff"
TYPE_FILE_URL = "public.file-url"
TYPE_RTF = "public.rtf"
TYPE_HTML = "public.html"
TYPE_CONCEALED = "org.nspasteboard.ConcealedType"

IMAGE_TYPES = (TYPE_PNG, TYPE_TIFF)
RICH_TYPES = (TYPE_RTF, TYPE_HTML)


class Pasteboard(Protocol):
    def change_count(self) -> int: ...

    def types(self) -> list[str] | None: ...

    def string_for_type(self, type_: str) -> str | None: ...

    def data_for_type(self, type_: str) -> bytes | None: ...

    def clear_contents(self) -> int: ...

    def set_string(self, value: str, type_: str) -> bool: ...

    def set_data(self, data: bytes, type_: str) -> bool: ...

    def write_image(self, data: bytes) -> bool: ...

    def write_file_url(self, url: str) -> bool: ...


class SystemPasteboard:
    """The macOS general pasteboard, through PyObjC."""

    def __init__(self):
        from AppKit import NSPasteboard

        self._pasteboard = NSPasteboard.generalPasteboard()

    def change_count(self) -> int:
        return int(self._pasteboard.changeCount())

    def types(self) -> list[str] | None:
        types = self._pasteboard.types()
        if types is None:
            return None
        return [str(t) for t in types]

    def string_for_type(self, type_: str) -> str | None:
        value = self._pasteboard.stringForType_(type_)
        if value is None:
            return None
        if type_ == TYPE_FILE_URL:
            return self._resolve_file_url(str(value))
        return str(value)

    @staticmethod
    def _resolve_file_url(value: str) -> str:
        """Turn a Finder file-reference URL into a path-based file URL."""
        from Foundation import NSURL

        url = NSURL.URLWithString_(value)
        if url is None:
            return value
        path_url = url.filePathURL()
        if path_url is None:
            return value
        return str(path_url.absoluteString())

    def data_for_type(self, type_: str) -> bytes | None:
        data = self._pasteboard.dataForType_(type_)
        return bytes(data) if data is not None else None

    def clear_contents(self) -> int:
        return int(self._pasteboard.clearContents())

    def set_string(self, value: str, type_: str) -> bool:
        return bool(self._pasteboard.setString_forType_(value, type_))

    def set_data(self, data: bytes, type_: str) -> bool:
        from Foundation import NSData

        ns_data = NSData.dataWithBytes_length_(data, len(data))
        if not ns_data:
            return False
        return bool(self._pasteboard.setData_forType_(ns_data, type_))

    def write_image(self, data: bytes) -> bool:
        from AppKit import NSImage
        from Foundation import NSData

        image = NSImage.alloc().initWithData_(NSData.dataWithBytes_length_(data, len(data)))
        if not image:
            return False
        return bool(self._pasteboard.writeObjects_([image]))

    def write_file_url(self, url: str) -> bool:
        from Foundation import NSURL

        ns_url = NSURL.URLWithString_(url)
        if ns_url is None:
            return False
        return bool(self._pasteboard.writeObjects_([ns_url]))
