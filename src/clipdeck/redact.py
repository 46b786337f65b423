"""Password detection and masking for clipboard entries."""

from collections.abc import Iterable

from clipdeck.pasteboard import TYPE_CONCEALED

MASKED_CONTENT = "********"

# Punctuation common in paths, URLs and identifiers; not counted as "special".
_ORDINARY_PUNCTUATION = frozenset("/.:-_~")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_SCHEME_SEPARATOR = "://"

MIN_PASSWORD_LENGTH = 5


def _is_special(char: str) -> bool:
    return not (char.isalnum() or char.isspace() or char in _ORDINARY_PUNCTUATION)


def is_likely_commit_hash(text: str) -> bool:
    """Check if text is made only of hex digits, like a git/hg commit hash.

    Args:
        text: The text to check.

    Returns:
        True if every character is a hexadecimal digit.
    """
    return all(char in _HEX_DIGITS for char in text)


def is_password_like(text: str) -> bool:
    """Check if text looks like a password.

    A password-like string is a single token of at least five characters that
    contains a lowercase letter and a special character. Hex-only strings are
    excluded since they are almost always commit hashes. URLs pass this test;
    that is accepted.

    Args:
        text: The copied text.

    Returns:
        True if the text should be treated as a secret.
    """
    trimmed = text.strip()
    if not trimmed:
        return False
    if any(char.isspace() for char in trimmed):
        return False
    if len(trimmed) < MIN_PASSWORD_LENGTH:
        return False
    if not any(char.islower() for char in trimmed):
        return False
    # A URL scheme separator counts as a special character.
    if _SCHEME_SEPARATOR not in trimmed and not any(_is_special(char) for char in trimmed):
        return False
    if is_likely_commit_hash(trimmed):
        return False
    return True


def is_concealed_content(types: Iterable[str] | None) -> bool:
    """Check if a password manager marked the clipboard contents as concealed.

    Args:
        types: The representation types currently on the pasteboard.

    Returns:
        True if the concealed marker type is present.
    """
    if types is None:
        return False
    return TYPE_CONCEALED in types
