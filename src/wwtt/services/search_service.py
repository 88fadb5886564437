"""Incremental search over tag and note names."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from wwtt.models.schema import ALL_TAG
from wwtt.storage.note_store import NoteStore

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """The names matching a query, with the previous selection's new position.

    Attributes:
        items: Matching candidates, in candidate order.
        selected_index: Index in ``items`` of the previously selected label,
            or None when it no longer matches (or nothing was selected).
    """

    items: List[str] = field(default_factory=list)
    selected_index: Optional[int] = None

    @property
    def selected(self) -> Optional[str]:
        """The previously selected label if it survived the filter."""
        if self.selected_index is None:
            return None
        return self.items[self.selected_index]

    def __len__(self) -> int:
        return len(self.items)


def normalize(text: str) -> str:
    """Fold text for matching: trimmed and lowercased."""
    return text.strip().lower()


def filter_names(
    candidates: Sequence[str],
    query: str,
    previous_selection: Optional[str] = None,
) -> MatchResult:
    """Filter ``candidates`` down to those containing ``query``.

    Matching is a case-insensitive substring test on the trimmed forms of
    both sides. A query that is empty after trimming matches everything.
    The filter never reorders candidates.

    Args:
        candidates: Names to filter.
        query: Text typed so far.
        previous_selection: Label the cursor was on before this keystroke.

    Returns:
        The matches, plus the index of ``previous_selection`` among them
        if it is still present.
    """
    needle = normalize(query)
    result = MatchResult()

    for candidate in candidates:
        if needle and needle not in normalize(candidate):
            continue
        if (
            previous_selection is not None
            and result.selected_index is None
            and candidate == previous_selection
        ):
            result.selected_index = len(result.items)
        result.items.append(candidate)

    return result


class SearchService:
    """Search tags and notes of a store."""

    def __init__(self, store: NoteStore):
        self.store = store

    def search_tags(
        self, query: str = "", previous_selection: Optional[str] = None
    ) -> MatchResult:
        """Filter the tag list ("all" included) by ``query``."""
        return filter_names(self.store.list_tag_names(), query, previous_selection)

    def search_notes(
        self,
        tag: str = ALL_TAG,
        query: str = "",
        previous_selection: Optional[str] = None,
    ) -> MatchResult:
        """Filter the names of the notes visible under ``tag`` by ``query``."""
        result = filter_names(self.store.list_note_names(tag), query, previous_selection)
        logger.debug(
            f"Search tag={tag!r} query={query!r}: {len(result)} matches"
        )
        return result
