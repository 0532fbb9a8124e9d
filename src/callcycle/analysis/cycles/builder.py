"""
Call graph construction.

`collect_declarations` walks a front-end (projects, documents, method
declarations, invocations) and yields each declared method with its resolved
call targets. `build_call_graph` turns those pairs into a frozen CallGraph,
keeping only callers that pass the namespace filter and are not ignored.
Callees are recorded as-is; whether they can take part in a cycle is decided
later, during detection.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Iterable, Iterator, List, Optional, Sequence, Tuple

from ...machinery.callgraph import CallGraph
from ...machinery.symbols import MethodSymbol
from .filters import IgnorePolicy

LOG = logging.getLogger(__name__)

Declaration = Tuple[MethodSymbol, Sequence[Optional[MethodSymbol]]]


def collect_declarations(frontend, solution_path) -> Iterator[Declaration]:
    """Yield ``(symbol, callees)`` for every method declared in a solution.

    Args:
        frontend: A `callcycle.frontend.base.Frontend` implementation.
        solution_path: Path handed to `frontend.list_projects`.

    Yields:
        tuple: The declared symbol and the resolved targets of its
        invocations in source order; unresolved targets are None.
    """
    for project in frontend.list_projects(solution_path):
        for document in frontend.list_documents(project):
            for declaration in frontend.get_method_declarations(document):
                symbol = frontend.resolve_declared_symbol(declaration)
                callees: List[Optional[MethodSymbol]] = []
                for invocation in frontend.get_invocations(declaration):
                    target = frontend.resolve_call_target(invocation)
                    if target is None:
                        LOG.debug("unresolved call in %s: %s", symbol, invocation)
                    callees.append(target)
                yield symbol, callees


def build_call_graph(
    declarations: Iterable[Declaration],
    namespace_filter: str = "",
    ignore_list: AbstractSet[str] = frozenset(),
) -> CallGraph:
    """Build the call graph used for cycle detection.

    Args:
        declarations: ``(symbol, callees)`` pairs, e.g. from
            `collect_declarations`.
        namespace_filter: Namespace prefix a caller must have to be a node.
        ignore_list: Qualified names of callers to leave out.

    Returns:
        CallGraph: The frozen graph.
    """
    return build_call_graph_with_policy(
        declarations, IgnorePolicy.create(namespace_filter, ignore_list)
    )


def build_call_graph_with_policy(declarations: Iterable[Declaration], policy: IgnorePolicy) -> CallGraph:
    graph = CallGraph()
    skipped = 0

    for symbol, callees in declarations:
        if policy.is_ignored(symbol):
            LOG.debug("skipping caller %s", symbol)
            skipped += 1
            continue

        graph.add_node(symbol)
        for callee in callees:
            if callee is not None:
                graph.add_edge(symbol, callee)

    LOG.info(
        "call graph built: %d callers, %d edges (%d declarations filtered)",
        len(graph),
        graph.edge_count(),
        skipped,
    )
    return graph.freeze()
