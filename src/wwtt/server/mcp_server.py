"""MCP server exposing the note store as tools."""

import logging
import uuid
from typing import Optional

from mcp.server.fastmcp import FastMCP

from wwtt.config import config
from wwtt.exceptions import NoteAlreadyExistsError, ValidationError, WwttError
from wwtt.models.schema import ALL_TAG
from wwtt.observability import metrics, timed_operation
from wwtt.services.search_service import SearchService
from wwtt.storage.note_store import NoteStore

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 500
MAX_CONTENT_LENGTH = 1_000_000  # 1 MB


def _validate_input_lengths(
    name: Optional[str] = None, content: Optional[str] = None
) -> None:
    """Validate input string lengths at the MCP boundary."""
    if name is not None and not name.strip():
        raise ValidationError("Note name cannot be empty", field="name")
    if name and len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            f"Name exceeds maximum length of {MAX_NAME_LENGTH} characters",
            field="name",
        )
    if content and len(content) > MAX_CONTENT_LENGTH:
        raise ValidationError(
            f"Content exceeds maximum length of {MAX_CONTENT_LENGTH} characters",
            field="content",
        )


def _format_names(title: str, names: list) -> str:
    if not names:
        return f"No {title.lower()} found."
    lines = [f"{title} ({len(names)}):"]
    lines.extend(f"- {name}" for name in names)
    return "\n".join(lines)


class WwttMcpServer:
    """MCP server for a wwtt notes file."""

    def __init__(self, store: NoteStore):
        """Initialize the MCP server.

        Args:
            store: Loaded note store. Every mutating tool saves it inline.
        """
        self.mcp = FastMCP(config.server_name)
        self.store = store
        self.search_service = SearchService(store)
        self._register_tools()

    def format_error_response(self, error: Exception) -> str:
        """Format an error response in a consistent way.

        Args:
            error: The exception that occurred

        Returns:
            Formatted error message with appropriate level of detail
        """
        error_id = str(uuid.uuid4())[:8]

        if isinstance(error, WwttError):
            logger.error(
                f"[{error.code.name}] [{error_id}]: {error.message}",
                extra={"error_details": error.details},
            )
            return f"Error: {error.message}"
        elif isinstance(error, ValueError):
            logger.error(f"Validation error [{error_id}]: {str(error)}")
            return f"Error: Invalid input (ref: {error_id})"
        elif isinstance(error, (IOError, OSError)):
            logger.error(f"File system error [{error_id}]: {str(error)}", exc_info=True)
            return f"Error: A file system error occurred (ref: {error_id})"
        else:
            logger.error(f"Unexpected error [{error_id}]: {str(error)}", exc_info=True)
            return f"Error: An unexpected error occurred (ref: {error_id})"

    def _register_tools(self) -> None:
        """Register MCP tools."""

        @self.mcp.tool(name="wwtt_list_tags")
        def wwtt_list_tags(query: str = "") -> str:
            """List tag names, "all" first, filtered by a substring query.
            Args:
                query: Case-insensitive substring to filter tags by (optional)
            """
            try:
                with timed_operation("wwtt_list_tags", query=query[:30]) as op:
                    result = self.search_service.search_tags(query)
                    op["result_count"] = len(result)
                    return _format_names("Tags", result.items)
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="wwtt_list_notes")
        def wwtt_list_notes(tag: str = ALL_TAG, query: str = "") -> str:
            """List note names under a tag, filtered by a substring query.
            Args:
                tag: Tag to browse; "all" lists every note
                query: Case-insensitive substring to filter note names by (optional)
            """
            try:
                with timed_operation("wwtt_list_notes", tag=tag, query=query[:30]) as op:
                    result = self.search_service.search_notes(tag, query)
                    op["result_count"] = len(result)
                    return _format_names("Notes", result.items)
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="wwtt_get_note")
        def wwtt_get_note(name: str) -> str:
            """Retrieve a note by its exact name.
            Args:
                name: The name of the note
            """
            try:
                with timed_operation("wwtt_get_note", name=name[:30]) as op:
                    note = self.store.find_note(name)
                    op["found"] = note is not None
                    if note is None:
                        return f"Note not found: {name}"
                    result = f"# {note.name}\n"
                    result += f"Tag: {note.tag.name}\n"
                    result += f"Updated: {note.updated_at.isoformat()}\n"
                    result += f"\n{note.content}\n"
                    return result
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="wwtt_create_note")
        def wwtt_create_note(name: str, tag: str) -> str:
            """Create an empty note under a tag.
            Args:
                name: Unique name of the new note
                tag: Tag of the new note
            """
            try:
                with timed_operation("wwtt_create_note", name=name[:30], tag=tag):
                    _validate_input_lengths(name=name)
                    if not tag.strip():
                        raise ValidationError("Tag cannot be empty", field="tag")
                    if self.store.find_note(name) is not None:
                        raise NoteAlreadyExistsError(name)
                    self.store.create_note(name, tag)
                    self.store.save()
                    return f"Note created successfully: {name} (tag {tag})"
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="wwtt_update_note")
        def wwtt_update_note(name: str, content: str) -> str:
            """Replace the content of a note.
            Args:
                name: The name of the note
                content: The new content (replaces the old one entirely)
            """
            try:
                with timed_operation("wwtt_update_note", name=name[:30]):
                    _validate_input_lengths(name=name, content=content)
                    self.store.update_content(name, content)
                    self.store.save()
                    return f"Note updated successfully: {name}"
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="wwtt_delete_note")
        def wwtt_delete_note(name: str, tag: str = ALL_TAG) -> str:
            """Delete a note.
            Args:
                name: The name of the note
                tag: Tag view the delete is issued from; the note must be visible in it
            """
            try:
                with timed_operation("wwtt_delete_note", name=name[:30], tag=tag) as op:
                    note = self.store.find_visible_note(name, tag)
                    if note is None:
                        op["deleted"] = False
                        return f"Note not found: {name}"
                    self.store.remove_note(note)
                    self.store.save()
                    op["deleted"] = True
                    return f"Note deleted successfully: {name}"
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="wwtt_status")
        def wwtt_status() -> str:
            """Show store statistics and operation metrics."""
            try:
                tags = self.store.list_tag_names()[1:]
                summary = metrics.get_summary()
                result = f"wwtt {config.server_version} status\n"
                result += f"Notes file: {self.store.path}\n"
                result += f"Notes: {len(self.store)}\n"
                result += f"Tags: {len(tags)}\n"
                result += f"Operations: {summary['total_operations']} "
                result += f"({summary['total_errors']} errors)\n"
                for op_name, m in sorted(metrics.get_metrics().items()):
                    result += (
                        f"- {op_name}: {m['count']} calls, "
                        f"avg {m['avg_duration_ms']}ms"
                    )
                    if m["last_error"]:
                        result += f", last error: {m['last_error']}"
                    result += "\n"
                return result
            except Exception as e:
                return self.format_error_response(e)

    def run(self) -> None:
        """Run the MCP server."""
        logger.info(f"Starting wwtt MCP server on {self.store.path}")
        self.mcp.run()
