"""Value objects handed out by the storage engine.

Callers never see live ORM rows; every query result is copied into one of
these models before the session closes.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, field_validator


class TagRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str


class SnippetRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str
    description: str = ""
    language: str = ""
    contents: str = ""
    folder: Optional[str] = None
    favorite: bool = False
    times_copied: int = 0

    @field_validator("description", "language", "contents", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        # Older databases allow NULL in these columns
        return "" if value is None else value

    @property
    def detail(self) -> str:
        """Short summary line used by search results."""
        return f"{self.language} • Copied {self.times_copied} times"


class SnippetWithTags(SnippetRecord):
    tags: List[TagRecord] = []
