"""
Interned method symbols.

A MethodSymbol is a lightweight handle into a SymbolTable. The table is the
only place symbols are created, and it hands out exactly one handle per
declared method, so equality and hashing only need to compare arena indices.
The call graph is cyclic, but symbols never reference each other or the
graph.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Tuple


class MethodSymbol:
    """
    Handle for a declared method.

    Attributes
    ----------
    index:
        Position of the symbol in its SymbolTable; this is its identity.
    namespace:
        Dotted module path containing the declaration, e.g. ``pkg.mod``.
    containing_type:
        Fully-qualified containing type, e.g. ``pkg.mod.Service``. For
        module-level functions this is the module path itself.
    name:
        Bare method name.
    qualified_name:
        ``"{containing_type}.{name}"``, computed once.
    """

    __slots__ = ("index", "namespace", "containing_type", "name", "qualified_name")

    def __init__(self, index: int, namespace: str, containing_type: str, name: str) -> None:
        self.index = index
        self.namespace = namespace
        self.containing_type = containing_type
        self.name = name
        self.qualified_name = f"{containing_type}.{name}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MethodSymbol):
            return NotImplemented
        return self.index == other.index

    def __hash__(self) -> int:
        return hash(self.index)

    def __str__(self) -> str:
        return self.qualified_name

    def __repr__(self) -> str:
        return f"MethodSymbol({self.index}, {self.qualified_name!r})"


class SymbolTable:
    """Arena of MethodSymbol handles for a single analysis run."""

    def __init__(self) -> None:
        self._symbols: List[MethodSymbol] = []
        self._by_key: Dict[Tuple[str, str, str], MethodSymbol] = {}

    def intern(self, namespace: str, containing_type: str, name: str) -> MethodSymbol:
        """
        Return the unique symbol for a declaration, creating it on first use.

        Parameters
        ----------
        namespace:
            Dotted module path of the declaration.
        containing_type:
            Fully-qualified name of the class (or module) holding it.
        name:
            Method name.
        """
        key = (namespace, containing_type, name)
        symbol = self._by_key.get(key)
        if symbol is None:
            symbol = MethodSymbol(len(self._symbols), namespace, containing_type, name)
            self._symbols.append(symbol)
            self._by_key[key] = symbol
        return symbol

    def lookup(self, namespace: str, containing_type: str, name: str):
        """Return the symbol for a declaration if it was interned, else None."""
        return self._by_key.get((namespace, containing_type, name))

    def __getitem__(self, index: int) -> MethodSymbol:
        return self._symbols[index]

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[MethodSymbol]:
        return iter(self._symbols)
