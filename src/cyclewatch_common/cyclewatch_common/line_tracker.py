# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Map YAML key-paths to 1-based line numbers using PyYAML's AST."""

from typing import Dict, List, Optional, Tuple

import yaml


def extract_line_map(content: str) -> Dict[str, int]:
    """Parse *content* as YAML and return a dict mapping key-paths to line numbers.

    Mapping keys join with a dot (``"references"``, ``"references[0].source"``)
    and sequence items are indexed (``"references[3]"``).

    Returns an empty dict if the YAML cannot be parsed.
    """
    try:
        root = yaml.compose(content)
    except yaml.YAMLError:
        return {}

    result: Dict[str, int] = {}
    pending: List[Tuple[str, Optional[yaml.Node]]] = [("", root)]
    while pending:
        prefix, node = pending.pop()
        if isinstance(node, yaml.MappingNode):
            for key_node, value_node in node.value:
                path = f"{prefix}.{key_node.value}" if prefix else str(key_node.value)
                result[path] = key_node.start_mark.line + 1
                pending.append((path, value_node))
        elif isinstance(node, yaml.SequenceNode):
            for i, item in enumerate(node.value):
                path = f"{prefix}[{i}]"
                result[path] = item.start_mark.line + 1
                pending.append((path, item))
    return result


def line_for(line_map: Dict[str, int], *keys: str) -> Optional[int]:
    """Return the line of the first key present in *line_map*, or None."""
    return next((line_map[k] for k in keys if k in line_map), None)
