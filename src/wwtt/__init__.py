"""
wwtt - a personal note and snippet manager.

Notes are grouped by a single tag, browsed and searched by incremental
substring matching, and persisted to one JSON file between sessions.
The package exposes the note store to collaborators through a small
Python API and an MCP server.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("wwtt")
except PackageNotFoundError:
    __version__ = "0.3.0"
