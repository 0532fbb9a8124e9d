"""
End-to-end call-cycle analysis.

Runs the phases in order: the front-end opens and indexes the solution, the
graph builder consumes every declaration, and only then does cycle detection
start.
"""

import logging
from typing import List, Optional

from .analysis.cycles.builder import build_call_graph_with_policy, collect_declarations
from .analysis.cycles.detector import detect_cycles
from .config import AnalysisConfig
from .frontend.base import Frontend
from .frontend.python_frontend import PythonFrontend

LOG = logging.getLogger(__name__)


def analyze_solution(config: AnalysisConfig, frontend: Optional[Frontend] = None) -> List[str]:
    """Return the distinct cycle chains of a solution.

    Args:
        config: Solution path, namespace filter and ignore list.
        frontend: Front-end to read the solution with; a PythonFrontend by
            default.

    Raises:
        SolutionLoadError: If the solution cannot be opened.
    """
    if frontend is None:
        frontend = PythonFrontend()

    policy = config.policy()
    LOG.info("analysing %s (namespace filter %r)", config.solution_path, config.namespace_filter)

    # list() forces the whole graph to be built before detection begins
    declarations = list(collect_declarations(frontend, config.solution_path))
    graph = build_call_graph_with_policy(declarations, policy)
    return detect_cycles(graph, policy)
