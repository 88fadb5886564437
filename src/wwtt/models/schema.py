"""Data models for wwtt."""

import datetime
import re
from datetime import timezone
from typing import Any, List

from pydantic import BaseModel, Field, field_validator

# Wildcard tag that matches every note. It is never stored as a real tag.
ALL_TAG = "all"

# Timestamp given to notes persisted before updated_at existed.
ZERO_TIME = datetime.datetime(1, 1, 1, tzinfo=timezone.utc)

# Fractional seconds beyond microseconds (e.g. "12:00:00.123456789Z")
_EXCESS_FRACTION_PATTERN = re.compile(r"(\.\d{6})\d+")


def utc_now() -> datetime.datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Current time with UTC timezone info attached.
    """
    return datetime.datetime.now(timezone.utc)


def ensure_timezone_aware(dt_value: datetime.datetime) -> datetime.datetime:
    """Ensure a datetime is timezone-aware, treating naive datetimes as UTC.

    Args:
        dt_value: A datetime that may or may not have timezone info.

    Returns:
        The same datetime with UTC timezone if it was naive, otherwise unchanged.
    """
    if dt_value.tzinfo is None:
        return dt_value.replace(tzinfo=timezone.utc)
    return dt_value


class Tag(BaseModel):
    """A tag grouping notes. Each note carries exactly one."""

    name: str = Field(..., description="Tag name")

    model_config = {"validate_assignment": True, "frozen": True}

    def __str__(self) -> str:
        """Return string representation of tag."""
        return self.name


class Note(BaseModel):
    """A named text record with one tag and a content body."""

    name: str = Field(..., description="Unique name of the note, used as lookup key")
    content: str = Field(default="", description="Body of the note, may be empty")
    tag: Tag = Field(..., description="The single tag of the note")
    updated_at: datetime.datetime = Field(
        default=ZERO_TIME, description="When the content was last updated (UTC)"
    )

    model_config = {"validate_assignment": True, "extra": "ignore"}

    @field_validator("updated_at", mode="before")
    @classmethod
    def truncate_fraction(cls, v: Any) -> Any:
        """Truncate nanosecond timestamps to the microseconds datetime holds."""
        if v is None:
            return ZERO_TIME
        if isinstance(v, str):
            return _EXCESS_FRACTION_PATTERN.sub(r"\1", v)
        return v

    @field_validator("updated_at")
    @classmethod
    def validate_updated_at(cls, v: datetime.datetime) -> datetime.datetime:
        return ensure_timezone_aware(v)

    @property
    def tag_name(self) -> str:
        return self.tag.name

    def record(self, content: str) -> None:
        """Replace the content and refresh updated_at."""
        self.content = content
        self.updated_at = utc_now()

    def is_visible_in(self, tag: str) -> bool:
        """Whether the note shows up when browsing ``tag``.

        The empty tag means no tag is selected yet, so nothing is visible.
        """
        if not tag:
            return False
        return tag == ALL_TAG or self.tag.name == tag


class NoteCollection(BaseModel):
    """The full ordered set of notes of one notes file.

    This is also the shape of the file on disk: a single ``notes`` list.
    """

    notes: List[Note] = Field(default_factory=list, description="Notes in order")

    model_config = {"extra": "ignore"}

    def __len__(self) -> int:
        return len(self.notes)

    def sort_by_recency_descending(self) -> None:
        """Reorder so the most recently updated note comes first.

        The sort is stable, so notes with equal timestamps keep their
        relative order and sorting twice gives the same order as once.
        """
        self.notes.sort(key=lambda note: note.updated_at, reverse=True)
