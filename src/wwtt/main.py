#!/usr/bin/env python
"""Main entry point for the wwtt MCP server."""
import argparse
import logging
import os
import sys
from pathlib import Path

from wwtt import __version__
from wwtt.config import config
from wwtt.exceptions import WwttError
from wwtt.observability import configure_logging
from wwtt.server.mcp_server import WwttMcpServer
from wwtt.storage.note_store import NoteStore


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="wwtt note store MCP server")
    parser.add_argument(
        "--storage-path",
        help="Notes file (JSON)",
        type=str,
        default=os.environ.get("WWTT_STORAGE_PATH")
    )
    parser.add_argument(
        "--log-level",
        help="Logging level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=os.environ.get("WWTT_LOG_LEVEL", "INFO").upper()
    )
    parser.add_argument(
        "--log-dir",
        help="Directory for rotating log files",
        type=str,
        default=os.environ.get("WWTT_LOG_DIR")
    )
    parser.add_argument(
        "--no-create",
        help="Fail instead of creating an empty notes file when it is missing",
        action="store_true",
    )
    parser.add_argument("--version", action="version", version=f"wwtt {__version__}")
    return parser.parse_args(argv)


def update_config(args):
    """Update the global config with command line arguments."""
    if args.storage_path:
        config.storage_path = Path(args.storage_path)
    if args.log_dir:
        config.log_dir = Path(args.log_dir)
    if args.log_level:
        config.log_level = args.log_level
    if args.no_create:
        config.create_if_missing = False


def load_store() -> NoteStore:
    """Open the configured notes file.

    Raises:
        WwttError: If the file cannot be read or parsed.
    """
    storage_path = config.get_storage_path()
    return NoteStore.open(storage_path, create_if_missing=config.create_if_missing)


def main(argv=None):
    """Run the wwtt MCP server."""
    args = parse_args(argv)
    update_config(args)

    log_level = config.get_log_level()
    try:
        log_dir = configure_logging(log_dir=config.get_log_dir(), level=log_level)
    except OSError as e:
        # Fall back to console logging if the log directory is unusable
        logging.basicConfig(level=log_level)
        logging.getLogger(__name__).warning(f"Failed to configure file logging: {e}")
        log_dir = None

    logger = logging.getLogger(__name__)
    if log_dir:
        logger.info(f"Persistent logging enabled: {log_dir}")

    # A notes file that cannot be loaded is fatal at startup
    try:
        store = load_store()
    except WwttError as e:
        logger.error(f"Failed to initialize storage: {e}")
        sys.exit(1)

    logger.info(f"Loaded {len(store)} notes from {store.path}")
    server = WwttMcpServer(store)
    server.run()


if __name__ == "__main__":
    main()
