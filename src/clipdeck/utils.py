import hashlib
import io
from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

from PIL import Image

from clipdeck.config import DATA_DIR, PREVIEW_LENGTH
from clipdeck.models import ClipboardEntry, EntryType

# Finder file-reference URLs look like file:///.file/id=6571367.8623342
FILE_REFERENCE_PREFIX = "/.file/"


def compute_hash(data: str | bytes) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def truncate_text(text: str, max_len: int) -> str:
    single_line = " ".join(text.split())
    if len(single_line) <= max_len:
        return single_line
    return single_line[: max_len - 3] + "..."


def ensure_dirs() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def is_decodable_image(image_bytes: bytes) -> bool:
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            image.verify()
    except Exception:
        return False
    return True


def get_image_dimensions(image_bytes: bytes) -> tuple[int, int]:
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            return image.size
    except Exception:
        return (0, 0)


def create_thumbnail(image_bytes: bytes, size: tuple[int, int] = (32, 32)) -> bytes | None:
    """Create a PNG thumbnail from encoded image data.

    Args:
        image_bytes: The source image in any format Pillow can read
        size: Bounding box in pixels (width, height); aspect ratio is kept

    Returns:
        PNG bytes, or None if the image could not be read
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            image.thumbnail(size)
            if image.mode not in ("RGB", "RGBA", "L", "LA"):
                image = image.convert("RGBA")
            out = io.BytesIO()
            image.save(out, format="PNG")
            return out.getvalue()
    except Exception:
        return None


def parse_file_url(raw: str) -> tuple[str, str] | None:
    """Parse a file URL string from the pasteboard.

    Only ``file`` URLs with a path are accepted. Unresolved file-reference
    URLs are rejected since their last component is an inode id, not a name.

    Returns:
        (absolute URL string, last path component), or None if raw is not a
        usable file URL
    """
    candidate = raw.strip()
    if not candidate or any(ch.isspace() for ch in candidate):
        return None
    parsed = urlparse(candidate)
    if parsed.scheme.lower() != "file" or not parsed.path:
        return None
    if parsed.path.startswith(FILE_REFERENCE_PREFIX):
        return None
    name = PurePosixPath(unquote(parsed.path)).name
    if not name:
        return None
    return parsed.geturl(), name


def entry_preview(entry: ClipboardEntry, max_len: int = PREVIEW_LENGTH) -> str:
    if entry.entry_type == EntryType.IMAGE:
        if entry.content.strip():
            return truncate_text(f"[Image] {entry.content}", max_len)
        width, height = get_image_dimensions(entry.image_data or b"")
        return f"[Image: {width}x{height}]" if width > 0 else "[Image]"
    if entry.entry_type == EntryType.FILE_URL:
        return truncate_text(f"[File] {entry.content}", max_len)
    prefix = "🔒 " if entry.is_password else ""
    return prefix + truncate_text(entry.display_content, max_len)
