"""factory_boy factories for snippet database models.

Tests bind each factory to a live session by setting
``Factory._meta.sqlalchemy_session`` (see snipboard/conftest.py).
"""

import factory
from factory.alchemy import SQLAlchemyModelFactory

from snipboard.storage.models import Snippet, SnippetTagLink, Tag


class TagFactory(SQLAlchemyModelFactory):
    class Meta:
        model = Tag
        sqlalchemy_session_persistence = "commit"

    name = factory.Sequence(lambda n: f"tag-{n:03d}")


class SnippetFactory(SQLAlchemyModelFactory):
    class Meta:
        model = Snippet
        sqlalchemy_session_persistence = "commit"

    name = factory.Faker("sentence", nb_words=3)
    description = factory.Faker("sentence")
    language = factory.Iterator(["py", "js", "ts", "sql"])
    contents = factory.Faker("text", max_nb_chars=200)
    folder = None
    favorite = 0
    times_copied = 0


class SnippetTagLinkFactory(SQLAlchemyModelFactory):
    class Meta:
        model = SnippetTagLink
        sqlalchemy_session_persistence = "commit"
