"""Snipboard command line interface.

Typer commands that stand in for the editor integration:
- Seeding tags and listing them
- Saving snippets from a file or stdin
- Searching, showing and copying snippets
- Printing the tag/snippet tree
"""

import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

import typer

from snipboard.browse import build_tree
from snipboard.storage.errors import StorageError
from snipboard.storage.manager import StorageManager
from snipboard.storage.tag_seed import seed_tags
from snipboard.utils.config import StorageSettings, load_seed_tags
from snipboard.utils.filename_utils import DEFAULT_LANGUAGE, language_from_filename
from snipboard.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

app = typer.Typer(help="Save, tag and search code snippets.")

StorageOption = typer.Option(
    None,
    "--storage",
    "-s",
    help="Storage directory (contains snipboard.db). If not specified, uses SNIPBOARD_STORAGE_PATH or data/.",
)


@app.callback()
def main():
    setup_logging()


def _open_storage(storage_path: Optional[Path]) -> StorageManager:
    settings = StorageSettings()
    database_path = (
        storage_path / settings.database_name if storage_path else settings.database_path
    )
    storage = StorageManager(database_path)
    storage.open()
    return storage


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


@app.command()
def init(storage_path: Path = StorageOption):
    """
    Create the snippet database and seed tags from the configured YAML file.
    """
    settings = StorageSettings()
    try:
        names = load_seed_tags(settings.tags_file)
        with _open_storage(storage_path) as storage:
            tags = seed_tags(storage, names)
            typer.echo(f"✓ Database ready at: {storage.database_path}")
    except (StorageError, ValueError) as exc:
        _fail(str(exc))
    typer.echo(f"✓ {len(tags)} tag(s) available")


@app.command("add-tags")
def add_tags(
    names: List[str] = typer.Argument(..., help="Tag names to create"),
    storage_path: Path = StorageOption,
):
    """
    Create tags that do not exist yet.
    """
    try:
        with _open_storage(storage_path) as storage:
            tags = seed_tags(storage, names)
    except StorageError as exc:
        _fail(str(exc))
    for tag in tags:
        typer.echo(f"{tag.id}\t{tag.name}")


@app.command()
def tags(storage_path: Path = StorageOption):
    """
    List all tags by name.
    """
    try:
        with _open_storage(storage_path) as storage:
            all_tags = storage.list_tags()
    except StorageError as exc:
        _fail(str(exc))
    for tag in all_tags:
        typer.echo(f"{tag.id}\t{tag.name}")


@app.command()
def save(
    name: str = typer.Argument(..., help="Snippet name"),
    description: str = typer.Option("", "--description", "-d"),
    language: Optional[str] = typer.Option(
        None,
        "--language",
        "-l",
        help="Language tag. Defaults to the --file extension, or txt.",
    ),
    source_file: Optional[Path] = typer.Option(
        None,
        "--file",
        "-f",
        exists=True,
        dir_okay=False,
        readable=True,
        help="Read contents from this file instead of stdin.",
    ),
    tag_names: List[str] = typer.Option([], "--tag", "-t", help="Tag name (repeatable)"),
    storage_path: Path = StorageOption,
):
    """
    Save a snippet read from a file or stdin.
    """
    if source_file is not None:
        contents = source_file.read_text(encoding="utf-8")
        language = language or language_from_filename(source_file.name)
    else:
        contents = sys.stdin.read()
        language = language or DEFAULT_LANGUAGE

    try:
        with _open_storage(storage_path) as storage:
            tags_by_name = {tag.name: tag.id for tag in storage.list_tags()}
            unknown = [tag for tag in tag_names if tag not in tags_by_name]
            if unknown:
                _fail(f"Unknown tag(s): {', '.join(unknown)}")
            snippet_id = storage.save_snippet(
                name,
                description,
                language,
                contents,
                [tags_by_name[tag] for tag in tag_names],
            )
    except StorageError as exc:
        _fail(f"Failed to save snippet: {exc}")
    typer.echo(f'✓ Snippet "{name}" saved with ID: {snippet_id}')


@app.command()
def search(
    query: str = typer.Argument(..., help="Text to find in name or description"),
    language: str = typer.Option(DEFAULT_LANGUAGE, "--language", "-l"),
    storage_path: Path = StorageOption,
):
    """
    Search snippets of one language by name or description.
    """
    try:
        with _open_storage(storage_path) as storage:
            snippets = storage.search_snippets(query, language)
    except StorageError as exc:
        _fail(f"Search failed: {exc}")
    if not snippets:
        typer.echo("No snippets found.")
    for snippet in snippets:
        typer.echo(f"{snippet.id}\t{snippet.name}\t{snippet.description}\t{snippet.detail}")


@app.command()
def show(
    snippet_id: int = typer.Argument(...),
    storage_path: Path = StorageOption,
):
    """
    Print a snippet's metadata and contents.
    """
    try:
        with _open_storage(storage_path) as storage:
            snippet = storage.get_snippet_by_id(snippet_id)
    except StorageError as exc:
        _fail(str(exc))
    if snippet is None:
        _fail(f"No snippet with ID {snippet_id}")
    typer.echo(f"# {snippet.name} ({snippet.detail})")
    if snippet.description:
        typer.echo(f"# {snippet.description}")
    typer.echo(snippet.contents)


@app.command()
def copy(
    snippet_id: int = typer.Argument(...),
    storage_path: Path = StorageOption,
):
    """
    Write a snippet's contents to stdout and count the copy.
    """
    try:
        with _open_storage(storage_path) as storage:
            snippet = storage.get_snippet_by_id(snippet_id)
            if snippet is None:
                _fail(f"No snippet with ID {snippet_id}")
            typer.echo(snippet.contents, nl=False)
            storage.increment_times_copied(snippet.id)
    except StorageError as exc:
        _fail(str(exc))


@app.command()
def tree(storage_path: Path = StorageOption):
    """
    Print tags with their snippets, followed by untagged snippets.
    """
    try:
        with _open_storage(storage_path) as storage:
            browse_tree = build_tree(storage)
    except StorageError as exc:
        _fail(str(exc))
    for root in browse_tree.roots:
        typer.echo(f"{root.name} ({root.count})")
        for child in root.children:
            typer.echo(f"  {child.id}\t{child.name}")


if __name__ == "__main__":
    app()
