"""Browsing session over a note store.

Holds what a front end needs between keystrokes (the selected tag, the two
search queries and the open note) and implements the actions that touch
the store: creating a note from the search box, recording content and
deleting the open note. Every mutating action saves inline.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from wwtt.exceptions import NoteNotFoundError, StorageError, ValidationError
from wwtt.models.schema import ALL_TAG, Note
from wwtt.services.search_service import MatchResult, SearchService
from wwtt.storage.note_store import NoteStore

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """Selection state of one browsing session."""

    current_tag: str = ALL_TAG
    tag_query: str = ""
    note_query: str = ""
    current_note_name: Optional[str] = None


@dataclass
class SaveOutcome:
    """Result of an action that mutates the store and then saves it.

    The two steps fail independently: a failed record is still followed by
    a save, and a failed save does not undo the in-memory change.
    """

    recorded: bool
    saved: bool
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.recorded and self.saved


class NoteSession:
    """Session actions for a front end driving a NoteStore."""

    def __init__(self, store: NoteStore, state: Optional[SessionState] = None):
        self.store = store
        self.state = state or SessionState()
        self.search_service = SearchService(store)

    def visible_tags(self) -> MatchResult:
        return self.search_service.search_tags(
            self.state.tag_query, previous_selection=self.state.current_tag
        )

    def visible_notes(self) -> MatchResult:
        return self.search_service.search_notes(
            self.state.current_tag,
            self.state.note_query,
            previous_selection=self.state.current_note_name,
        )

    def select_tag(self, tag: str) -> MatchResult:
        """Switch the tag view and return the notes now visible."""
        self.state.current_tag = tag
        return self.visible_notes()

    def set_tag_query(self, query: str) -> MatchResult:
        self.state.tag_query = query
        return self.visible_tags()

    def set_note_query(self, query: str) -> MatchResult:
        self.state.note_query = query
        return self.visible_notes()

    def find_visible_note(self, name: str) -> Optional[Note]:
        """Find a note by name among those visible under the current tag."""
        return self.store.find_visible_note(name, self.state.current_tag)

    def open_note(self, name: str) -> Optional[Note]:
        """Make ``name`` the current note if it is visible."""
        note = self.find_visible_note(name)
        if note is not None:
            self.state.current_note_name = name
        return note

    def submit_query(self) -> Note:
        """Open the note named by the search query, creating it if needed.

        A new note gets the current tag and is saved right away.

        Raises:
            ValidationError: If the query is empty or only whitespace.
            StorageError: If the new note could not be saved.
        """
        name = self.state.note_query
        if not name.strip():
            raise ValidationError("Note name cannot be empty", field="name", value=name)

        note = self.find_visible_note(name)
        if note is None:
            note = self.store.create_note(name, self.state.current_tag)
            logger.info(f"Created note '{name}' under tag '{self.state.current_tag}'")
            self.store.save()

        self.state.current_note_name = name
        return note

    def record(self, content: str) -> SaveOutcome:
        """Store ``content`` in the current note, then save.

        The current note is resolved under the current tag, so a same-name
        note filed under another tag is never touched.
        """
        recorded = True
        errors: List[str] = []
        name = self.state.current_note_name
        try:
            if name is None:
                raise NoteNotFoundError("", message="No note is open")
            note = self.find_visible_note(name)
            if note is None:
                raise NoteNotFoundError(name)
            self.store.record_note(note, content)
        except NoteNotFoundError as e:
            recorded = False
            errors.append(e.message)
            logger.warning(f"Failed to record note: {e}")

        saved = self._save(errors)
        return SaveOutcome(recorded=recorded, saved=saved, error="; ".join(errors) or None)

    def delete_current(self) -> SaveOutcome:
        """Delete the current note if it is visible under the current tag, then save."""
        name = self.state.current_note_name
        note = self.find_visible_note(name) if name is not None else None
        if note is None:
            return SaveOutcome(recorded=False, saved=False, error="No note to delete")

        self.store.remove_note(note)
        self.state.current_note_name = None
        errors: List[str] = []
        saved = self._save(errors)
        return SaveOutcome(recorded=True, saved=saved, error="; ".join(errors) or None)

    def _save(self, errors: List[str]) -> bool:
        try:
            self.store.save()
            return True
        except StorageError as e:
            errors.append(e.message)
            logger.error(f"Failed to save notes: {e}")
            return False
