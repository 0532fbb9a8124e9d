"""
Namespace filter and ignore list.

The same predicate decides which declarations become graph nodes and which
nodes may close a cycle during detection, so both phases go through
`is_ignored`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import AbstractSet, FrozenSet, Iterable, Optional

from ...machinery.symbols import MethodSymbol


def is_ignored(
    method: Optional[MethodSymbol],
    namespace_filter: str,
    ignore_list: AbstractSet[str],
) -> bool:
    """Return True if `method` is excluded from the analysis.

    Args:
        method: Symbol to test; None stands for an unresolved call target.
        namespace_filter: Plain string prefix the method's namespace must
            start with. The match is not segment aware, so ``"Foo.Bar"``
            matches ``"Foo.B"``.
        ignore_list: Exact ``"ContainingType.Name"`` strings to exclude.

    Returns:
        bool: True for None, for methods outside the filter and for methods
        on the ignore list.
    """
    if method is None:
        return True
    if not method.namespace.startswith(namespace_filter):
        return True
    if method.qualified_name in ignore_list:
        return True
    return False


@dataclass(frozen=True)
class IgnorePolicy:
    """Namespace filter and ignore list for one run."""

    namespace_filter: str = ""
    ignore_list: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def create(cls, namespace_filter: str, ignore_list: Iterable[str] = ()) -> "IgnorePolicy":
        return cls(namespace_filter, frozenset(ignore_list))

    def is_ignored(self, method: Optional[MethodSymbol]) -> bool:
        return is_ignored(method, self.namespace_filter, self.ignore_list)
