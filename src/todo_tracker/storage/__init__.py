"""Key-value persistence providers (SQLite-backed and in-memory)."""
