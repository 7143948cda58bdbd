"""
Search index over the current node set.

Maps lower-cased node ids to nodes. The index holds references only and is
rebuilt from scratch whenever the node set changes, so it never carries
stale keys.
"""

from typing import Dict, Iterator, List, Optional, Sequence

from ..core.types import GraphNode


class SearchIndex:
    """
    Id lookup with exact-then-substring matching.

    Keys keep build order, which decides which substring match wins.
    """

    def __init__(self):
        self._entries: Dict[str, GraphNode] = {}

    @classmethod
    def build(cls, nodes: Sequence[GraphNode]) -> "SearchIndex":
        """Index nodes by lower-cased id. On collision the first node wins."""
        index = cls()
        for node in nodes:
            index._entries.setdefault(node.id.lower(), node)
        return index

    def lookup(self, term: str) -> Optional[GraphNode]:
        """
        Resolve a search term to a node.

        An exact (case-insensitive) match always beats substring matches;
        otherwise the first key containing the term is returned. An empty
        term never matches.
        """
        if not term:
            return None
        needle = term.lower()

        exact = self._entries.get(needle)
        if exact is not None:
            return exact

        for key, node in self._entries.items():
            if needle in key:
                return node
        return None

    def find_all(self, term: str) -> List[GraphNode]:
        """All substring matches in build order."""
        if not term:
            return []
        needle = term.lower()
        return [node for key, node in self._entries.items() if needle in key]

    def keys(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, key: str) -> bool:
        return key.lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)


def build_index(nodes: Sequence[GraphNode]) -> SearchIndex:
    return SearchIndex.build(nodes)


def lookup(index: SearchIndex, term: str) -> Optional[GraphNode]:
    return index.lookup(term)
