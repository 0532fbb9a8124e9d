"""
Cycle report output formats.

The text format is the tool's stable output: one ``Cycle detected:`` header
per cycle followed by the tab-indented chain, and nothing at all when no
cycle was found. JSON carries the same chains for machine consumption.
"""

import json
from typing import Iterable, List

from .detector import CHAIN_SEPARATOR


def generate_text_output(cycles: Iterable[str]) -> str:
    """Generate the text report for the given chains."""
    output: List[str] = []
    for cycle in cycles:
        output.append("Cycle detected:")
        output.append(f"\t{cycle}")
    return "\n".join(output)


def generate_json_output(cycles: Iterable[str]) -> str:
    """Generate a JSON report with each chain and its method names."""
    data = {"cycles": []}
    for cycle in cycles:
        data["cycles"].append({"chain": cycle, "methods": cycle.split(CHAIN_SEPARATOR)})
    data["count"] = len(data["cycles"])
    return json.dumps(data, indent=2)


FORMAT_GENERATORS = {
    "text": generate_text_output,
    "json": generate_json_output,
}
