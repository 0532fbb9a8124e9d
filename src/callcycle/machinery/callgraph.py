"""
In-memory call graph over method symbols.

Nodes are MethodSymbol handles. Edges capture caller -> callee invocations in
source order, duplicates included. A graph is populated once by the graph
builder and then frozen; after that it only answers queries.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Tuple

from ..errors import CallGraphError
from .symbols import MethodSymbol

_NO_CALLEES: Tuple[MethodSymbol, ...] = ()


class CallGraph:
    """
    Directed call graph keyed by caller.

    Only callers are keys. A callee that never qualified as a caller is not a
    key, and querying it yields no callees, so it behaves as a leaf.
    """

    def __init__(self) -> None:
        self._graph: Dict[MethodSymbol, List[MethodSymbol]] = {}
        self._frozen = False

    # ------------------------------------------------------------------ build
    def add_node(self, caller: MethodSymbol) -> None:
        """
        Ensure `caller` is a key, keeping any callees already recorded.

        Raises
        ------
        CallGraphError
            If the graph has been frozen.
        """
        self._check_mutable()
        self._graph.setdefault(caller, [])

    def add_edge(self, caller: MethodSymbol, callee: MethodSymbol) -> None:
        """
        Append an invocation from `caller` to `callee`.

        The caller is created on demand; the callee is not made a key.
        """
        self._check_mutable()
        self._graph.setdefault(caller, []).append(callee)

    def freeze(self) -> "CallGraph":
        """Disallow further mutation and return the graph."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise CallGraphError("call graph is frozen")

    # ---------------------------------------------------------------- queries
    def callees(self, caller: MethodSymbol) -> Tuple[MethodSymbol, ...]:
        """Return the callees of `caller` in source order (empty if absent)."""
        callees = self._graph.get(caller)
        if callees is None:
            return _NO_CALLEES
        return tuple(callees)

    def get(self) -> Dict[MethodSymbol, Tuple[MethodSymbol, ...]]:
        """Return a plain dictionary snapshot of the graph."""
        return {caller: tuple(callees) for caller, callees in self._graph.items()}

    def nodes(self) -> Iterable[MethodSymbol]:
        """Iterate over callers in insertion order."""
        return self._graph.keys()

    def edges(self) -> Iterator[Tuple[MethodSymbol, MethodSymbol]]:
        """Iterate over edges as (caller, callee) tuples."""
        for caller, callees in self._graph.items():
            for callee in callees:
                yield caller, callee

    def edge_count(self) -> int:
        return sum(len(callees) for callees in self._graph.values())

    def __contains__(self, caller: object) -> bool:
        return caller in self._graph

    def __len__(self) -> int:
        return len(self._graph)
