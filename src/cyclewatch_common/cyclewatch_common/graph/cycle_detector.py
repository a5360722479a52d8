# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Cycle detection and enumeration over a :class:`ReferenceGraph`.

Every public function runs the same depth-first traversal. Vertices move
through three states: unvisited, on the active path, and done. An edge into
a node on the active path is a back-edge and closes a cycle.

The traversal keeps an explicit stack of neighbor iterators instead of
recursing, so very deep reference chains are bounded by memory rather than
by the interpreter recursion limit.
"""

import logging
import time
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Union

from ..metrics import record_traversal
from .builder import Node, ReferenceGraph, build_graph

LOGGER = logging.getLogger(__name__)

References = Union[ReferenceGraph, Iterable[Any]]


def _as_graph(references: References) -> ReferenceGraph:
    if isinstance(references, ReferenceGraph):
        return references
    return build_graph(references)


def _back_edges(graph: ReferenceGraph) -> Iterator[List[Node]]:
    """Yield one cycle per back-edge, in discovery order.

    Entry points are tried in ``graph.nodes()`` order and neighbors in
    ``graph.neighbors()`` order. Scanning resumes after each yield, so a node
    can close several cycles before it is done.
    """
    visited: Set[Node] = set()
    for root in graph.nodes():
        if root in visited:
            continue

        visited.add(root)
        path: List[Node] = [root]
        # on-path node -> its index in path
        on_stack: Dict[Node, int] = {root: 0}
        frames = [iter(graph.neighbors(root))]

        while frames:
            for neighbor in frames[-1]:
                if neighbor in on_stack:
                    yield path[on_stack[neighbor]:] + [neighbor]
                elif neighbor not in visited:
                    visited.add(neighbor)
                    on_stack[neighbor] = len(path)
                    path.append(neighbor)
                    frames.append(iter(graph.neighbors(neighbor)))
                    break
            else:
                frames.pop()
                del on_stack[path.pop()]


def iter_cycles(references: References) -> Iterator[List[Node]]:
    """Lazily yield the cycles :func:`find_cycles` would return, in the same order."""
    return _back_edges(_as_graph(references))


def has_cycle(references: References) -> bool:
    """Return True if the reference graph contains at least one cycle.

    Stops at the first back-edge.
    """
    graph = _as_graph(references)
    start = time.perf_counter()
    found = next(_back_edges(graph), None) is not None
    record_traversal("has_cycle", time.perf_counter() - start, int(found))
    LOGGER.debug("has_cycle over %d vertices: %s", len(graph), found)
    return found


def find_cycles(references: References) -> List[List[Node]]:
    """Return every cycle closed by a back-edge during the traversal.

    Each cycle starts and ends with the same node, e.g. ``["A", "B", "C", "A"]``;
    a self-loop is ``["A", "A"]``. Cycles are listed in the order their closing
    back-edge is found. Overlapping cycles are reported separately and rotations
    of one cycle are not merged.
    """
    graph = _as_graph(references)
    start = time.perf_counter()
    cycles = list(_back_edges(graph))
    record_traversal("find_cycles", time.perf_counter() - start, len(cycles))
    LOGGER.debug("find_cycles over %d vertices: %d cycle(s)", len(graph), len(cycles))
    return cycles


def detect_cycle(references: References) -> Optional[List[Node]]:
    """Return the first cycle :func:`find_cycles` would report, or ``None``."""
    graph = _as_graph(references)
    start = time.perf_counter()
    cycle = next(_back_edges(graph), None)
    record_traversal("detect_cycle", time.perf_counter() - start, int(cycle is not None))
    return cycle
