import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

from clipdeck.config import PASSWORD_TTL
from clipdeck.formats import MARKDOWN_THRESHOLD, FormatCategory, classify_text, markdown_score
from clipdeck.pasteboard import TYPE_HTML, TYPE_RTF
from clipdeck.redact import MASKED_CONTENT


class EntryType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    FILE_URL = "file_url"


@dataclass(frozen=True, eq=False)
class ClipboardEntry:
    """One captured clipboard item.

    Entries are immutable; mutations produce a copy with the same ``id``
    (see ``dataclasses.replace``). Two entries are equal iff their ids match.
    """

    content: str
    entry_type: EntryType = EntryType.TEXT
    is_password: bool = False
    is_starred: bool = False
    timestamp: datetime = field(default_factory=datetime.now)
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    image_data: bytes | None = None
    content_hash: str | None = None  # sha256 of image_data
    file_url: str | None = None
    pasteboard_data: dict[str, bytes] | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClipboardEntry):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def expiration_date(self) -> datetime | None:
        if not self.is_password:
            return None
        return self.timestamp + timedelta(seconds=PASSWORD_TTL)

    @property
    def is_expired(self) -> bool:
        expiration = self.expiration_date
        if expiration is None:
            return False
        return datetime.now() > expiration

    @property
    def display_content(self) -> str:
        return MASKED_CONTENT if self.is_password else self.content

    @property
    def markdown_score(self) -> int:
        return markdown_score(self.content)

    @property
    def is_markdown_content(self) -> bool:
        return self.markdown_score >= MARKDOWN_THRESHOLD

    @property
    def format_category(self) -> FormatCategory:
        if self.entry_type != EntryType.TEXT:
            return FormatCategory.OTHER
        return classify_text(self.content)

    @property
    def has_rich_data(self) -> bool:
        if not self.pasteboard_data:
            return False
        return TYPE_RTF in self.pasteboard_data or TYPE_HTML in self.pasteboard_data

    @property
    def time_ago(self) -> str:
        seconds = (datetime.now() - self.timestamp).total_seconds()
        if seconds < 60:
            return "just now"
        if seconds < 3600:
            return f"{int(seconds // 60)}m ago"
        if seconds < 86400:
            return f"{int(seconds // 3600)}h ago"
        return f"{int(seconds // 86400)}d ago"
