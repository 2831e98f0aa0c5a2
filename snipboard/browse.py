"""Two-level tag/snippet hierarchy for browsing.

The root level holds one node per tag, plus a synthetic "Untagged" node when
any snippet has no tags. The second level holds the snippets themselves.
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel

from snipboard.data_models.snippets import SnippetRecord
from snipboard.storage.manager import StorageManager

UNTAGGED_LABEL = "Untagged"


class NodeType(str, Enum):
    tag = "tag"
    untagged = "untagged"
    snippet = "snippet"


class SnippetNode(BaseModel):
    id: int
    name: str
    type: NodeType = NodeType.snippet
    parent_tag_id: Optional[int] = None
    snippet: SnippetRecord


class TagNode(BaseModel):
    id: int
    name: str
    type: NodeType = NodeType.tag
    children: List[SnippetNode] = []

    @property
    def count(self) -> int:
        return len(self.children)


class BrowseTree(BaseModel):
    roots: List[TagNode] = []


def _snippet_nodes(
    snippets: List[SnippetRecord], parent_tag_id: Optional[int]
) -> List[SnippetNode]:
    return [
        SnippetNode(
            id=snippet.id,
            name=snippet.name,
            parent_tag_id=parent_tag_id,
            snippet=snippet,
        )
        for snippet in snippets
    ]


def build_tree(storage: StorageManager) -> BrowseTree:
    roots = [
        TagNode(
            id=tag.id,
            name=tag.name,
            children=_snippet_nodes(storage.get_snippets_by_tag(tag.id), tag.id),
        )
        for tag in storage.list_tags()
    ]

    untagged = storage.get_untagged_snippets()
    if untagged:
        roots.append(
            TagNode(
                id=-1,
                name=UNTAGGED_LABEL,
                type=NodeType.untagged,
                children=_snippet_nodes(untagged, None),
            )
        )

    return BrowseTree(roots=roots)
