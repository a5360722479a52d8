# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Load reference pairs from a YAML file.

Expected layout::

    references:
      - source: A
        target: B
      - [B, C]
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from cyclewatch_common.graph import Node, ReferencePair
from cyclewatch_common.line_tracker import extract_line_map, line_for

LOGGER = logging.getLogger(__name__)

REFERENCES_KEY = "references"


class ReferenceFileError(ValueError):
    """The reference file is missing, unparsable, or not shaped as expected."""

    def __init__(self, path: str, message: str, line: Optional[int] = None):
        self.path = path
        self.line = line
        loc = f"{path}:{line}" if line is not None else path
        super().__init__(f"{loc}: {message}")


@dataclass
class ReferenceFile:
    path: str
    pairs: List[ReferencePair] = field(default_factory=list)
    line_map: Dict[str, int] = field(default_factory=dict)

    def line_of(self, index: int) -> Optional[int]:
        """1-based line of the *index*-th reference, if known."""
        return line_for(self.line_map, f"{REFERENCES_KEY}[{index}]")

    def line_of_edge(self, source: Node, target: Node) -> Optional[int]:
        """Line of the first reference ``source -> target``."""
        for i, pair in enumerate(self.pairs):
            if pair == (source, target):
                return self.line_of(i)
        return None


def _parse_item(path: str, index: int, item: Any, line: Optional[int]) -> ReferencePair:
    if isinstance(item, dict):
        missing = [k for k in ("source", "target") if k not in item]
        if missing:
            raise ReferenceFileError(
                path, f"reference #{index} is missing {', '.join(missing)}", line
            )
        pair = ReferencePair(item["source"], item["target"])
    elif isinstance(item, list) and len(item) == 2:
        pair = ReferencePair(item[0], item[1])
    else:
        raise ReferenceFileError(
            path,
            f"reference #{index} must be a {{source, target}} mapping or a two-item list, "
            f"got {item!r}",
            line,
        )
    # true == 1 in Python, so a boolean would silently merge with node 1
    if any(isinstance(node, bool) for node in pair):
        raise ReferenceFileError(
            path,
            f"reference #{index} uses a boolean node identifier {item!r}; quote it, e.g. 'yes'",
            line,
        )
    return pair


def load_references(path: str) -> ReferenceFile:
    """Read *path* and return its reference pairs with their source lines.

    Raises ``ReferenceFileError`` for any problem with the file itself. Null
    identifiers are left for ``build_graph`` to reject.
    """
    try:
        with open(path) as fh:
            content = fh.read()
    except OSError as exc:
        raise ReferenceFileError(path, f"cannot read file: {exc.strerror or exc}") from exc

    try:
        doc = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        line = mark.line + 1 if mark is not None else None
        raise ReferenceFileError(path, f"invalid YAML: {exc}", line) from exc

    if not isinstance(doc, dict) or REFERENCES_KEY not in doc:
        raise ReferenceFileError(path, f"missing top-level '{REFERENCES_KEY}' key")

    items = doc[REFERENCES_KEY]
    if items is None:
        items = []
    line_map = extract_line_map(content)
    if not isinstance(items, list):
        raise ReferenceFileError(
            path, f"'{REFERENCES_KEY}' must be a list", line_for(line_map, REFERENCES_KEY)
        )

    ref_file = ReferenceFile(path=path, line_map=line_map)
    for i, item in enumerate(items):
        ref_file.pairs.append(_parse_item(path, i, item, ref_file.line_of(i)))

    LOGGER.info("Loaded %d references from %s", len(ref_file.pairs), path)
    return ref_file
