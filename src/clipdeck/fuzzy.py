"""Fuzzy subsequence search over clipboard entries."""

from collections.abc import Sequence

from clipdeck.models import ClipboardEntry

SEPARATORS = frozenset(" /-_.")

MATCH_SCORE = 1
CONSECUTIVE_BONUS = 2
START_BONUS = 3
SEPARATOR_BONUS = 2


def score(query: str, text: str) -> int | None:
    """Score how well query matches text as a case-insensitive subsequence.

    Returns:
        The score (higher is better), 0 for an empty query, or None if some
        query character cannot be matched in order.
    """
    if not query:
        return 0

    query_chars = query.lower()
    text_chars = text.lower()

    query_index = 0
    total = 0
    last_match = -1
    for index, char in enumerate(text_chars):
        if query_index == len(query_chars):
            break
        if char != query_chars[query_index]:
            continue

        total += MATCH_SCORE
        if index == last_match + 1:
            total += CONSECUTIVE_BONUS
        if index == 0:
            total += START_BONUS
        elif text_chars[index - 1] in SEPARATORS:
            total += SEPARATOR_BONUS
        last_match = index
        query_index += 1

    if query_index != len(query_chars):
        return None
    return total


def filter_entries(entries: Sequence[ClipboardEntry], query: str) -> list[ClipboardEntry]:
    """Filter entries by query and rank them, starred entries first.

    Password entries are searched as empty text, so they never match a
    non-empty query. Equal scores keep their original relative order.
    """
    if not query:
        return list(entries)

    scored: list[tuple[ClipboardEntry, int]] = []
    for entry in entries:
        search_text = "" if entry.is_password else entry.content
        entry_score = score(query, search_text)
        if entry_score is not None:
            scored.append((entry, entry_score))

    starred = sorted((pair for pair in scored if pair[0].is_starred), key=lambda pair: pair[1], reverse=True)
    unstarred = sorted((pair for pair in scored if not pair[0].is_starred), key=lambda pair: pair[1], reverse=True)
    return [entry for entry, _ in starred + unstarred]
