# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

from .graph import (
    InvalidReferenceError,
    ReferenceGraph,
    ReferencePair,
    build_graph,
    detect_cycle,
    find_cycles,
    has_cycle,
    iter_cycles,
)

__all__ = [
    "InvalidReferenceError",
    "ReferenceGraph",
    "ReferencePair",
    "build_graph",
    "detect_cycle",
    "find_cycles",
    "has_cycle",
    "iter_cycles",
]
