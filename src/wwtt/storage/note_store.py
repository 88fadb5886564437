"""In-memory note store backed by a single JSON file."""
import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from wwtt.exceptions import NoteNotFoundError
from wwtt.models.schema import ALL_TAG, Note, NoteCollection, Tag, utc_now
from wwtt.storage.json_storage import JsonNoteStorage

logger = logging.getLogger(__name__)


class NoteStore:
    """Authoritative in-memory collection of notes with CRUD and queries.

    Lookups are linear scans over the ordered collection, which is fine for
    personal note counts and keeps first-seen tag order trivially correct.

    Names are expected to be unique, but the store does not enforce it.
    A second note created under an existing name is shadowed: lookups,
    updates and deletes act on the first match only, so the later note
    becomes reachable once the earlier one is deleted.
    """

    def __init__(
        self,
        collection: Optional[NoteCollection] = None,
        path: Optional[Union[str, Path]] = None,
    ):
        """Initialize the store.

        Args:
            collection: Notes to start from. Defaults to an empty collection.
            path: Notes file used by save() when no explicit path is given.
        """
        self._collection = collection if collection is not None else NoteCollection()
        self.path = Path(path) if path is not None else None

    @classmethod
    def load(cls, path: Union[str, Path]) -> "NoteStore":
        """Load a store from the notes file at ``path``.

        Raises:
            StorageError: If the file cannot be opened or read.
            StorageFormatError: If the file is not a valid notes document.
        """
        storage = JsonNoteStorage(path)
        return cls(storage.load(), path=storage.path)

    @classmethod
    def open(cls, path: Union[str, Path], create_if_missing: bool = False) -> "NoteStore":
        """Load a store, optionally creating an empty notes file first."""
        storage = JsonNoteStorage(path)
        if create_if_missing:
            return cls(storage.initialize(), path=storage.path)
        return cls(storage.load(), path=storage.path)

    def save(self, path: Optional[Union[str, Path]] = None) -> None:
        """Sort by recency and write the collection out.

        Args:
            path: Destination file. Defaults to the path the store was loaded from.

        Raises:
            ValueError: If no path was given and the store has none.
            StorageError: If the file cannot be created or written.
        """
        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("No path to save the notes to")
        JsonNoteStorage(target).save(self._collection)

    @property
    def notes(self) -> Tuple[Note, ...]:
        """Read-only view of the notes, in collection order."""
        return tuple(self._collection.notes)

    @property
    def collection(self) -> NoteCollection:
        return self._collection

    def __len__(self) -> int:
        return len(self._collection.notes)

    def _index_of(self, name: str) -> int:
        for index, note in enumerate(self._collection.notes):
            if note.name == name:
                return index
        return -1

    def find_note(self, name: str) -> Optional[Note]:
        """Find the first note whose name is exactly ``name``.

        Returns:
            The note, or None if there is no such note.
        """
        index = self._index_of(name)
        if index < 0:
            return None
        return self._collection.notes[index]

    def find_visible_note(self, name: str, tag: str) -> Optional[Note]:
        """Find the first note named ``name`` that is visible under ``tag``.

        Unlike find_note(), a same-name note under another tag is skipped.
        """
        for note in self._collection.notes:
            if note.name == name and note.is_visible_in(tag):
                return note
        return None

    def create_note(self, name: str, tag: str) -> Note:
        """Append a new note with empty content under ``tag``.

        No uniqueness check is made; call find_note() first to avoid
        shadowed duplicates.
        """
        note = Note(name=name, content="", tag=Tag(name=tag), updated_at=utc_now())
        self._collection.notes.append(note)
        logger.debug(f"Created note '{name}' with tag '{tag}'")
        return note

    def update_content(self, name: str, content: str) -> Note:
        """Replace the content of the note named ``name``.

        Raises:
            NoteNotFoundError: If there is no such note. Nothing is changed.
        """
        note = self.find_note(name)
        if note is None:
            raise NoteNotFoundError(name)
        note.record(content)
        logger.debug(f"Recorded {len(content)} characters into note '{name}'")
        return note

    def record_note(self, note: Note, content: str) -> Note:
        """Replace the content of this exact note object.

        Raises:
            NoteNotFoundError: If the note is no longer in the store.
        """
        if not any(n is note for n in self._collection.notes):
            raise NoteNotFoundError(note.name)
        note.record(content)
        logger.debug(f"Recorded {len(content)} characters into note '{note.name}'")
        return note

    def remove_note(self, note: Note) -> bool:
        """Remove this exact note object, leaving same-name notes alone.

        Returns:
            True if the note was removed, False if it was not in the store.
        """
        for index, candidate in enumerate(self._collection.notes):
            if candidate is note:
                del self._collection.notes[index]
                logger.debug(f"Deleted note '{note.name}' (tag '{note.tag.name}')")
                return True
        return False

    def delete_note(self, name: str, tag: str = ALL_TAG) -> bool:
        """Remove the first note named ``name``.

        ``tag`` is accepted for symmetry with the tag-filtered views that
        call this, but matching is on the name alone, like find_note().
        Callers that need tag scoping resolve the note with
        find_visible_note() and pass it to remove_note().

        Returns:
            True if a note was removed, False if there was none.
        """
        index = self._index_of(name)
        if index < 0:
            logger.debug(f"Delete of missing note '{name}' ignored")
            return False
        del self._collection.notes[index]
        logger.debug(f"Deleted note '{name}' (viewing tag '{tag}')")
        return True

    def list_tag_names(self) -> List[str]:
        """Return "all" followed by each distinct tag in first-seen order."""
        names = [ALL_TAG]
        seen = {ALL_TAG}
        for note in self._collection.notes:
            if note.tag.name not in seen:
                seen.add(note.tag.name)
                names.append(note.tag.name)
        return names

    def list_note_names(self, tag: str) -> List[str]:
        """Return the names of the notes visible under ``tag``.

        Every note is visible under "all"; no note is visible under the
        empty string, which stands for "no tag selected yet".
        """
        if not tag:
            return []
        return [note.name for note in self._collection.notes if note.is_visible_in(tag)]

    def sort_by_recency_descending(self) -> None:
        """Stable sort putting the most recently updated note first."""
        self._collection.sort_by_recency_descending()
