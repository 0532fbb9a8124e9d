"""
Error types for callcycle.

All failures other than missing command-line arguments are fatal: they
propagate out of the analysis and terminate the run without partial output.
"""


class CallCycleError(Exception):
    """Base class for every error raised by callcycle."""


class SolutionLoadError(CallCycleError):
    """
    Raised when the solution path cannot be opened.

    This covers a path that does not exist and a path that holds no Python
    sources at all.
    """


class CallGraphError(CallCycleError):
    """Raised on misuse of a call graph, such as mutating a frozen graph."""


class InternalError(CallCycleError):
    """
    Raised when an internal invariant of the analysis is broken.

    This indicates a bug in callcycle rather than a problem with the
    analysed code.
    """
