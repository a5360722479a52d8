# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Reference graphs and cycle detection.

Public API
----------
build_graph             Build a ReferenceGraph from (source, target) pairs.
ReferenceGraph          Read-only adjacency relation.
ReferencePair           A single "source references target" pair.
InvalidReferenceError   Raised for malformed pairs or None identifiers.
has_cycle               True if any cycle exists.
find_cycles             Every cycle closed by a back-edge, in discovery order.
iter_cycles             Lazy form of find_cycles.
detect_cycle            The first cycle, or None.
"""

from .builder import InvalidReferenceError, Node, ReferenceGraph, ReferencePair, build_graph
from .cycle_detector import detect_cycle, find_cycles, has_cycle, iter_cycles

__all__ = [
    "InvalidReferenceError",
    "Node",
    "ReferenceGraph",
    "ReferencePair",
    "build_graph",
    "detect_cycle",
    "find_cycles",
    "has_cycle",
    "iter_cycles",
]
