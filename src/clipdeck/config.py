import os
from dataclasses import dataclass
from pathlib import Path

DATA_DIR = Path(os.environ.get("CLIPDECK_DATA_DIR", Path.home() / ".local" / "share" / "clipdeck"))
LOG_PATH = DATA_DIR / "clipdeck.log"

DEFAULT_MAX_ENTRIES = 50
DEFAULT_POLL_INTERVAL = 0.5  # seconds between clipboard checks
EXPIRY_SWEEP_INTERVAL = 5.0  # seconds between password expiry sweeps
MAX_IMAGE_SIZE = 10_000_000  # 10MB image limit
PASSWORD_TTL = 60  # seconds a password entry stays in history
PREVIEW_LENGTH = 60  # characters shown in log lines and CLI output
THUMBNAIL_SIZE = (32, 32)  # pixels


def _parse_max_entries() -> int:
    raw = os.environ.get("CLIPDECK_MAX_ENTRIES")
    if raw is None:
        return DEFAULT_MAX_ENTRIES
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_MAX_ENTRIES
    return max(10, min(500, value))


def _parse_poll_interval() -> float:
    raw = os.environ.get("CLIPDECK_POLL_INTERVAL")
    if raw is None:
        return DEFAULT_POLL_INTERVAL
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_POLL_INTERVAL
    return max(0.1, min(5.0, value))


MAX_ENTRIES = _parse_max_entries()
POLL_INTERVAL = _parse_poll_interval()


@dataclass(frozen=True)
class MonitorSettings:
    """Values a ClipboardManager needs, passed in rather than read globally.

    The defaults are fixed. ``from_env`` applies the ``CLIPDECK_MAX_ENTRIES``
    and ``CLIPDECK_POLL_INTERVAL`` overrides; only the CLI uses it.
    """

    max_entries: int = DEFAULT_MAX_ENTRIES
    poll_interval: float = DEFAULT_POLL_INTERVAL
    expiry_sweep_interval: float = EXPIRY_SWEEP_INTERVAL
    max_image_size: int = MAX_IMAGE_SIZE

    @classmethod
    def from_env(cls) -> "MonitorSettings":
        return cls(
            max_entries=MAX_ENTRIES,
            poll_interval=POLL_INTERVAL,
            expiry_sweep_interval=EXPIRY_SWEEP_INTERVAL,
            max_image_size=MAX_IMAGE_SIZE,
        )
