"""Tests for the derived snippet views."""

import pytest
from sqlalchemy import text

from snipboard.storage import queries
from snipboard.storage.errors import QueryFailed, StorageUnavailable, ValidationError
from snipboard.storage.factories import (
    SnippetFactory,
    SnippetTagLinkFactory,
    TagFactory,
)
from snipboard.storage.manager import StorageManager
from snipboard.storage.tag_seed import seed_tags


def test_list_tags_sorted_regardless_of_insert_order(storage_manager, tags):
    assert [tag.name for tag in storage_manager.list_tags()] == [
        "algorithms",
        "javascript",
        "python",
    ]


def test_snippets_with_tags_sorted_at_both_levels(storage_manager, tags):
    storage_manager.save_snippet(
        "Zip Lists", "", "py", "zip(a, b)", [tags["python"], tags["algorithms"]]
    )
    storage_manager.save_snippet("Array Map", "", "js", "a.map(f)", [tags["javascript"]])
    storage_manager.save_snippet("Bare", "", "py", "pass", [])

    result = queries.get_snippets_with_tags(storage_manager)

    assert [s.name for s in result] == ["Array Map", "Bare", "Zip Lists"]
    assert [t.name for t in result[0].tags] == ["javascript"]
    assert result[1].tags == []
    assert [t.name for t in result[2].tags] == ["algorithms", "python"]


def test_snippets_with_tags_is_idempotent(storage_manager, tags):
    storage_manager.save_snippet("One", "", "py", "1", [tags["python"]])
    storage_manager.save_snippet("Two", "", "py", "2", [])

    assert storage_manager.get_snippets_with_tags() == storage_manager.get_snippets_with_tags()


def test_snippets_by_tag_sorted_by_name(storage_manager, tags):
    storage_manager.save_snippet("Quick Sort", "", "py", "...", [tags["algorithms"]])
    storage_manager.save_snippet("Bubble Sort", "", "py", "...", [tags["algorithms"]])
    storage_manager.save_snippet("Fetch", "", "js", "...", [tags["javascript"]])

    result = queries.get_snippets_by_tag(storage_manager, tags["algorithms"])

    assert [s.name for s in result] == ["Bubble Sort", "Quick Sort"]


def test_snippets_by_unknown_tag_is_empty(storage_manager):
    assert queries.get_snippets_by_tag(storage_manager, 404) == []


def test_untagged_snippets_exact_set(storage_manager, tags):
    storage_manager.save_snippet("Tagged", "", "py", "...", [tags["python"]])
    storage_manager.save_snippet("Loose B", "", "py", "...", [])
    storage_manager.save_snippet("Loose A", "", "py", "...", [])

    result = queries.get_untagged_snippets(storage_manager)

    assert [s.name for s in result] == ["Loose A", "Loose B"]


def test_untagged_with_factory_rows(storage_manager, storage_session):
    tag = TagFactory()
    linked = SnippetFactory(name="b-linked")
    loose = SnippetFactory(name="a-loose")
    SnippetTagLinkFactory(snippet_id=linked.id, tag_id=tag.id)

    assert [s.id for s in storage_manager.get_untagged_snippets()] == [loose.id]
    assert [s.id for s in storage_manager.get_snippets_by_tag(tag.id)] == [linked.id]


def test_queries_on_closed_storage_fail(tmp_path):
    manager = StorageManager(tmp_path / "snipboard.db")
    manager.open()
    manager.close()

    with pytest.raises(StorageUnavailable, match="not open"):
        queries.get_untagged_snippets(manager)


def test_broken_table_raises_query_failed(storage_manager):
    with storage_manager.get_session() as session:
        session.execute(text("DROP TABLE SnippetTagLink"))
        session.commit()

    with pytest.raises(QueryFailed):
        queries.get_untagged_snippets(storage_manager)


class TestSeedTags:
    def test_seed_skips_existing_names(self, storage_manager):
        first = seed_tags(storage_manager, ["python", "sql"])
        second = seed_tags(storage_manager, [" sql ", "rust"])

        assert second[0].id == first[1].id
        assert [tag.name for tag in storage_manager.list_tags()] == [
            "python",
            "rust",
            "sql",
        ]

    def test_seed_rejects_blank_name(self, storage_manager):
        with pytest.raises(ValidationError):
            seed_tags(storage_manager, ["ok", "  "])
        assert storage_manager.list_tags() == []

    def test_seed_empty_list(self, storage_manager):
        assert seed_tags(storage_manager, []) == []
