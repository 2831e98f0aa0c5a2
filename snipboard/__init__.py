"""Personal code-snippet manager backed by SQLite."""
