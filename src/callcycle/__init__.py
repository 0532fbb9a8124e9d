"""callcycle - cyclic call chain detection for Python code bases.
"""

__version__ = "0.1.0"

from .analysis.cycles import IgnorePolicy, build_call_graph, detect_cycles
from .config import AnalysisConfig
from .pipeline import analyze_solution

__all__ = [
    "AnalysisConfig",
    "IgnorePolicy",
    "analyze_solution",
    "build_call_graph",
    "detect_cycles",
    "__version__",
]
