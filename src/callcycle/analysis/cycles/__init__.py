"""
Call-cycle analysis.

The analysis runs in two phases:
- builder: collect declarations from a front-end and build the call graph,
  applying the namespace filter and ignore list to callers
- detector: depth-first search for cycles, reported as arrow-joined chains
  of qualified method names

Output formats live in the formats module.
"""

from .filters import IgnorePolicy, is_ignored
from .builder import build_call_graph, build_call_graph_with_policy, collect_declarations
from .detector import CycleDetector, detect_cycle, detect_cycles
from .formats import FORMAT_GENERATORS, generate_json_output, generate_text_output

__all__ = [
    "IgnorePolicy",
    "is_ignored",
    "build_call_graph",
    "build_call_graph_with_policy",
    "collect_declarations",
    "CycleDetector",
    "detect_cycle",
    "detect_cycles",
    "FORMAT_GENERATORS",
    "generate_text_output",
    "generate_json_output",
]
