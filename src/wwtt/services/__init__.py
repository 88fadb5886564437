"""Services built on top of the note store."""
