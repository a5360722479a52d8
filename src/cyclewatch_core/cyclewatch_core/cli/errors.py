# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Error panels with an actionable hint for the most common failures."""

import re
from typing import Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)

ERROR_PATTERNS = {
    "missing": {
        "pattern": r"(no such file|cannot read file.*not found)",
        "message": "Reference file not found",
        "action": "Check the path, or pass a file relative to the current directory",
    },
    "permission": {
        "pattern": r"(permission denied|access denied)",
        "message": "Permission denied",
        "action": "Check the file permissions",
    },
    "yaml": {
        "pattern": r"invalid yaml",
        "message": "The file is not valid YAML",
        "action": "Fix the syntax error at the reported line",
    },
    "layout": {
        "pattern": r"(missing top-level 'references'|'references' must be a list|"
        r"boolean node identifier|"
        r"must be a \{source, target\} mapping|is missing (source|target))",
        "message": "Unexpected reference file layout",
        "action": "Use a top-level 'references' list of {source, target} mappings or [source, target] pairs",
    },
    "null": {
        "pattern": r"must not be none",
        "message": "A reference has an empty node identifier",
        "action": "Give every source and target a value; YAML '~' and 'null' are empty",
    },
    "limit": {
        "pattern": r"exceeds the limit of \d+ references",
        "message": "Reference file is too large",
        "action": "Raise CYCLEWATCH_MAX_REFERENCES or pass --max-references",
    },
    "config": {
        "pattern": r"validation error.*cyclewatchconfig",
        "message": "Invalid configuration",
        "action": "Fix the CYCLEWATCH_* environment variable named above",
    },
}


def detect_error_pattern(output: str) -> Optional[Tuple[str, str]]:
    for pattern_info in ERROR_PATTERNS.values():
        if re.search(pattern_info["pattern"], output, re.IGNORECASE | re.DOTALL):
            return (pattern_info["message"], pattern_info["action"])
    return None


def show_error(title: str, output: str):
    """Display a formatted error with a hint when the cause is recognised."""
    console.print()
    detected = detect_error_pattern(output)
    if detected:
        message, action = detected
        error_text = Text()
        error_text.append(f"✗ {title}\n\n", style="bold red")
        error_text.append(f"{message}\n\n", style="red")
        error_text.append("→ Fix: ", style="bold yellow")
        error_text.append(f"{action}\n", style="yellow")
        console.print(Panel(error_text, border_style="red", expand=False))
    else:
        console.print(Panel(Text(f"✗ {title}", style="bold red"), border_style="red", expand=False))

    for line in output.strip().split("\n"):
        console.print(f"  [dim]│[/dim] {escape(line)}", highlight=False)
    console.print()


def show_success(message: str):
    console.print(f"[green]✓[/green] {message}", style="green")
