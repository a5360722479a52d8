# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Build an adjacency relation from ``(source, target)`` reference pairs."""

import logging
from typing import Any, Dict, Hashable, Iterable, Iterator, List, NamedTuple, Tuple

LOGGER = logging.getLogger(__name__)

Node = Hashable


class InvalidReferenceError(ValueError):
    """Raised when a reference pair cannot be admitted into a graph."""

    def __init__(self, index: int, message: str):
        self.index = index
        super().__init__(f"reference #{index}: {message}")


class ReferencePair(NamedTuple):
    """``source`` references ``target``."""

    source: Node
    target: Node


class ReferenceGraph:
    """Read-only adjacency relation.

    Each source maps to the duplicate-free tuple of targets it references, in
    first-insertion order. Nodes that only ever appear as a target have no
    entry of their own and are treated as leaves.
    """

    def __init__(self, adjacency: Dict[Node, Tuple[Node, ...]]):
        self._adjacency = adjacency

    def nodes(self) -> List[Node]:
        """Return the vertex set (every node seen as a source), in first-seen order."""
        return list(self._adjacency)

    def neighbors(self, node: Node) -> Tuple[Node, ...]:
        return self._adjacency.get(node, ())

    def has_edge(self, source: Node, target: Node) -> bool:
        return target in self.neighbors(source)

    def edges(self) -> Iterator[ReferencePair]:
        for source, targets in self._adjacency.items():
            for target in targets:
                yield ReferencePair(source, target)

    def __len__(self) -> int:
        return len(self._adjacency)

    def __contains__(self, node: Any) -> bool:
        return node in self._adjacency

    def __iter__(self) -> Iterator[Node]:
        return iter(self._adjacency)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ReferenceGraph):
            return NotImplemented
        return self._adjacency == other._adjacency

    def __repr__(self) -> str:
        return f"ReferenceGraph({self._adjacency!r})"


def _as_pair(index: int, item: Any) -> ReferencePair:
    # strings, sets and dicts unpack too, but not as an ordered pair
    if not isinstance(item, (tuple, list)):
        raise InvalidReferenceError(index, f"expected a (source, target) pair, got {item!r}")
    try:
        source, target = item
    except (TypeError, ValueError):
        raise InvalidReferenceError(index, f"expected a (source, target) pair, got {item!r}")
    if source is None or target is None:
        raise InvalidReferenceError(index, f"node identifiers must not be None, got {item!r}")
    try:
        hash(source), hash(target)
    except TypeError:
        raise InvalidReferenceError(index, f"node identifiers must be hashable, got {item!r}")
    return ReferencePair(source, target)


def build_graph(pairs: Iterable[Any]) -> ReferenceGraph:
    """Return the :class:`ReferenceGraph` described by *pairs*.

    Duplicate pairs collapse. The input is only iterated, never modified.

    Raises
    ------
    InvalidReferenceError
        If an element is not a two-item pair or carries a ``None`` identifier.
        Nothing is returned in that case.
    """
    # dicts keep first-insertion order, which fixes the traversal order later on
    targets_by_source: Dict[Node, Dict[Node, None]] = {}
    count = 0
    for index, item in enumerate(pairs):
        pair = _as_pair(index, item)
        targets_by_source.setdefault(pair.source, {})[pair.target] = None
        count += 1

    LOGGER.debug("Built reference graph: %d pairs, %d vertices", count, len(targets_by_source))
    return ReferenceGraph({src: tuple(dsts) for src, dsts in targets_by_source.items()})
