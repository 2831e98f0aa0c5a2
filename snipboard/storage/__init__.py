"""Storage module for the snippet database.

This module implements a single SQLite database (data/snipboard.db) holding
snippets, tags, and the links between them. Derived views such as untagged
snippets live in queries.py and are computed on demand.

Configuration data is managed separately via pydantic settings and YAML
(see snipboard/utils/config.py).
"""

from snipboard.storage.manager import StorageManager

__all__ = ["StorageManager"]
