"""Shared test fixtures for snipboard tests"""

import os
import random

import pytest
from faker import Faker

from snipboard.storage.factories import (
    SnippetFactory,
    SnippetTagLinkFactory,
    TagFactory,
)
from snipboard.storage.manager import StorageManager
from snipboard.storage.tag_seed import seed_tags


@pytest.fixture(scope="session", autouse=True)
def setup_factory_seed():
    """Configure factory_boy/Faker to use a deterministic seed for reproducibility.

    The seed can be set via FACTORY_SEED environment variable, or will be
    randomly generated. The seed is printed to stdout for reproducibility.
    """
    seed = os.environ.get("FACTORY_SEED")
    if seed:
        seed = int(seed)
    else:
        seed = random.randint(0, 2**32 - 1)

    print(f"\n{'=' * 70}")
    print(f"Factory seed: {seed}")
    print(f"To reproduce this test run, set: FACTORY_SEED={seed}")
    print(f"{'=' * 70}\n")

    Faker.seed(seed)
    random.seed(seed)

    return seed


@pytest.fixture
def storage_manager(tmp_path):
    """Create an open StorageManager with a temporary database."""
    with StorageManager(tmp_path / "snipboard.db") as manager:
        yield manager


@pytest.fixture
def storage_session(storage_manager):
    """Create a session backed by StorageManager and bind the factories to it."""
    with storage_manager.get_session() as session:
        TagFactory._meta.sqlalchemy_session = session  # type: ignore[misc]
        SnippetFactory._meta.sqlalchemy_session = session  # type: ignore[misc]
        SnippetTagLinkFactory._meta.sqlalchemy_session = session  # type: ignore[misc]
        yield session


@pytest.fixture
def tags(storage_manager):
    """Seed three tags, inserted out of name order."""
    records = seed_tags(storage_manager, ["python", "algorithms", "javascript"])
    return {tag.name: tag.id for tag in records}
