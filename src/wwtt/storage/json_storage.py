"""JSON file persistence for the note collection.

The whole collection lives in one JSON document with a single ``notes``
list. Loading reads and parses the file in one go; saving sorts the
collection by recency, serializes it with two-space indentation and
replaces the file through a sibling temporary file so a crash mid-write
never leaves a truncated notes file behind.
"""
import logging
import os
from pathlib import Path
from typing import Union

from pydantic import ValidationError as PydanticValidationError

from wwtt.exceptions import ErrorCode, StorageError, StorageFormatError
from wwtt.models.schema import NoteCollection
from wwtt.observability import timed_operation

logger = logging.getLogger(__name__)

# Indentation used for the human-readable notes file
JSON_INDENT = 2


class JsonNoteStorage:
    """Reads and writes a NoteCollection at a fixed path."""

    def __init__(self, path: Union[str, Path]):
        """Initialize the storage.

        Args:
            path: Path of the notes file.
        """
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"JsonNoteStorage({str(self.path)!r})"

    @property
    def _temp_path(self) -> Path:
        return self.path.with_name(self.path.name + ".tmp")

    def exists(self) -> bool:
        """Whether the notes file is present."""
        return self.path.is_file()

    def load(self) -> NoteCollection:
        """Read and parse the notes file.

        Returns:
            The parsed collection, in file order.

        Raises:
            StorageError: If the file cannot be opened or read.
            StorageFormatError: If the content is not valid UTF-8 or not a
                valid notes document.
        """
        with timed_operation("load", path=self.path.name) as op:
            try:
                with open(self.path, "rb") as f:
                    raw = f.read()
            except OSError as e:
                raise StorageError(
                    f"Failed to read notes file: {e}",
                    operation="load",
                    path=str(self.path),
                    code=ErrorCode.STORAGE_READ_FAILED,
                    original_error=e,
                ) from e

            try:
                data = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise StorageFormatError(
                    f"Notes file is not valid UTF-8: {e}",
                    operation="load",
                    path=str(self.path),
                    original_error=e,
                ) from e

            try:
                collection = NoteCollection.model_validate_json(data)
            except PydanticValidationError as e:
                raise StorageFormatError(
                    f"Notes file is not a valid notes document ({e.error_count()} errors)",
                    operation="load",
                    path=str(self.path),
                    original_error=e,
                ) from e
            op["note_count"] = len(collection)

        logger.info(f"Loaded {len(collection)} notes from {self.path}")
        return collection

    def save(self, collection: NoteCollection) -> None:
        """Sort the collection by recency and write it to the notes file.

        Args:
            collection: The collection to persist. It is reordered in place.

        Raises:
            StorageError: If the file cannot be created or written.
            StorageFormatError: If the collection cannot be serialized.
        """
        with timed_operation("save", path=self.path.name) as op:
            collection.sort_by_recency_descending()

            try:
                data = collection.model_dump_json(indent=JSON_INDENT)
            except (ValueError, TypeError) as e:
                raise StorageFormatError(
                    f"Failed to serialize notes: {e}",
                    operation="save",
                    path=str(self.path),
                    original_error=e,
                ) from e

            self._write_atomic(data)
            op["note_count"] = len(collection)

        logger.debug(f"Saved {len(collection)} notes to {self.path}")

    def initialize(self) -> NoteCollection:
        """Create an empty notes file if none exists, then load it."""
        if not self.exists():
            logger.info(f"Notes file {self.path} not found, creating an empty one")
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._write_atomic(NoteCollection().model_dump_json(indent=JSON_INDENT))
        return self.load()

    def _write_atomic(self, data: str) -> None:
        """Write to a temporary sibling file, then move it over the target."""
        temp_path = self._temp_path
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self.path)
        except OSError as e:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                logger.warning(f"Could not remove temporary file {temp_path}")
            raise StorageError(
                f"Failed to write notes file: {e}",
                operation="save",
                path=str(self.path),
                code=ErrorCode.STORAGE_WRITE_FAILED,
                original_error=e,
            ) from e
