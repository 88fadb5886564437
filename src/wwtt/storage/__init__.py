"""Storage layer for wwtt."""

from wwtt.storage.json_storage import JsonNoteStorage
from wwtt.storage.note_store import NoteStore

__all__ = [
    "JsonNoteStorage",
    "NoteStore",
]
