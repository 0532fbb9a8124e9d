"""
Cycle detection over a call graph.

Classic white/gray/black depth-first search: the visited set holds black
nodes, the recursion stack holds gray nodes, and anything in neither is
white. Reaching a gray node again closes a cycle; the chain from that node's
position on the stack to the top is rendered as ``"A.f -> B.g -> A.f"``.

The search is iterative. Each frame on the explicit frame stack holds an
iterator over the callees of the matching recursion stack entry, so graph
depth is not bounded by the interpreter recursion limit.

Behaviour of note:

- A method only closes a cycle if it is not ignored. Ignored and
  out-of-filter callees are never graph keys, so they are entered as leaves
  and become visited, but they can never be reported.
- Finding a cycle stops the scan of the current path: every frame up to the
  root is popped without looking at its remaining callees. Those callees may
  still be reached later from another root.
- Visited nodes stay visited for the whole run, across roots.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Set

from ...errors import InternalError
from ...machinery.callgraph import CallGraph
from ...machinery.symbols import MethodSymbol
from .filters import IgnorePolicy

LOG = logging.getLogger(__name__)

CHAIN_SEPARATOR = " -> "


def render_method(method: MethodSymbol) -> str:
    return method.qualified_name


def render_chain(methods) -> str:
    return CHAIN_SEPARATOR.join(render_method(m) for m in methods)


class RecursionStack:
    """The current DFS path, root first, with O(1) membership tests."""

    __slots__ = ("_path", "_on_path")

    def __init__(self) -> None:
        self._path: List[MethodSymbol] = []
        self._on_path: Set[MethodSymbol] = set()

    def push(self, method: MethodSymbol) -> None:
        self._path.append(method)
        self._on_path.add(method)

    def pop(self) -> MethodSymbol:
        method = self._path.pop()
        self._on_path.discard(method)
        return method

    def cycle_through(self, method: MethodSymbol) -> List[MethodSymbol]:
        """Return the path from `method` to the top, closed by `method` again."""
        start = self._path.index(method)
        return self._path[start:] + [method]

    def __contains__(self, method: object) -> bool:
        return method in self._on_path

    def __len__(self) -> int:
        return len(self._path)

    def __iter__(self) -> Iterator[MethodSymbol]:
        return iter(self._path)


class CycleSet:
    """Distinct cycle chains in the order they were found."""

    __slots__ = ("_chains",)

    def __init__(self) -> None:
        self._chains: Dict[str, None] = {}

    def add(self, chain: str) -> bool:
        """Record `chain`; return True if it was not seen before."""
        if chain in self._chains:
            return False
        self._chains[chain] = None
        return True

    def __contains__(self, chain: object) -> bool:
        return chain in self._chains

    def __iter__(self) -> Iterator[str]:
        return iter(self._chains)

    def __len__(self) -> int:
        return len(self._chains)


_ENTERED = None


def _enter(
    method: MethodSymbol,
    visited: Set[MethodSymbol],
    stack: RecursionStack,
    cycles: CycleSet,
    policy: IgnorePolicy,
) -> Optional[bool]:
    """Handle arrival at `method`.

    Returns:
        True if a cycle closes at `method`, False if `method` is already
        black, or None once `method` has been marked visited and pushed.
    """
    if not policy.is_ignored(method) and method in stack:
        chain = render_chain(stack.cycle_through(method))
        if cycles.add(chain):
            LOG.debug("cycle found: %s", chain)
        return True

    if method in visited:
        return False

    visited.add(method)
    stack.push(method)
    return _ENTERED


def detect_cycle(
    method: MethodSymbol,
    graph: CallGraph,
    visited: Set[MethodSymbol],
    stack: RecursionStack,
    cycles: CycleSet,
    policy: IgnorePolicy,
) -> bool:
    """Search for a cycle reachable from `method`.

    Args:
        method: Node to start from.
        graph: Call graph to walk.
        visited: Black nodes, shared across calls within a run.
        stack: Gray nodes; left exactly as it was found when this returns.
        cycles: Receives every chain closed during the search.
        policy: Decides which nodes may close a cycle.

    Returns:
        bool: True if a cycle was closed during this search.
    """
    outcome = _enter(method, visited, stack, cycles, policy)
    if outcome is not _ENTERED:
        return outcome

    frames: List[Iterator[MethodSymbol]] = [iter(graph.callees(method))]
    while frames:
        callee = next(frames[-1], None)
        if callee is None:
            # all callees scanned without a cycle
            frames.pop()
            stack.pop()
            continue

        outcome = _enter(callee, visited, stack, cycles, policy)
        if outcome is _ENTERED:
            frames.append(iter(graph.callees(callee)))
        elif outcome:
            while frames:
                frames.pop()
                stack.pop()
            return True

    return False


class CycleDetector:
    """Runs cycle detection over every node of a call graph.

    Attributes:
        graph: The call graph to search.
        policy: Namespace filter and ignore list used to accept closing nodes.
        visited: Nodes fully explored so far.
        stack: The recursion stack; empty between roots.
        cycles: Chains found so far.
    """

    def __init__(self, graph: CallGraph, policy: IgnorePolicy) -> None:
        self.graph = graph
        self.policy = policy
        self.visited: Set[MethodSymbol] = set()
        self.stack = RecursionStack()
        self.cycles = CycleSet()

    def run(self) -> List[str]:
        """Search from every graph key and return the distinct chains."""
        for method in self.graph.nodes():
            if method in self.visited:
                continue
            detect_cycle(method, self.graph, self.visited, self.stack, self.cycles, self.policy)
            if len(self.stack):
                raise InternalError(
                    "recursion stack not empty after searching from %s" % method
                )

        LOG.info("%d distinct cycle(s) found", len(self.cycles))
        return list(self.cycles)


def detect_cycles(graph: CallGraph, policy: Optional[IgnorePolicy] = None) -> List[str]:
    """Return every distinct cycle chain in `graph`, in discovery order."""
    return CycleDetector(graph, policy or IgnorePolicy()).run()
