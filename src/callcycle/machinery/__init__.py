"""
Core data structures shared by the front-end and the cycle analysis.

Symbols are interned handles handed out by a SymbolTable; the call graph maps
caller symbols to their ordered callees.
"""

from .symbols import MethodSymbol, SymbolTable
from .callgraph import CallGraph
from ..errors import CallGraphError

__all__ = ["MethodSymbol", "SymbolTable", "CallGraph", "CallGraphError"]
