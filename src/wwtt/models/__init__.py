"""Data models for wwtt."""
