"""
Best-effort name resolution for call expressions.

A SemanticModel answers two questions for one module: which symbol a method
declaration defines, and which declared method a call expression invokes.
Resolution is static and purely syntactic. It understands:

- calls to module-level functions, local or imported (``f()``)
- constructor calls, mapped to ``__init__`` (``C()``)
- calls through the first parameter of a method (``self.m()``, ``cls.m()``)
- ``super().m()``
- dotted access through imported modules and classes (``mod.C.m()``)

Anything else, such as calls on arbitrary objects, builtins or code outside
the solution, resolves to None.
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Set, Union

from ..machinery.symbols import MethodSymbol, SymbolTable
from .base import Invocation, MethodDeclaration
from .index import ClassInfo, ModuleInfo, SolutionIndex

LOG = logging.getLogger(__name__)

# Guards chains of re-exports (``from a import x`` where ``a`` imports ``x``)
MAX_IMPORT_DEPTH = 16

CONSTRUCTOR = "__init__"


@dataclass(frozen=True)
class ModuleRef:
    name: str


@dataclass(frozen=True)
class FunctionRef:
    module: str
    name: str


@dataclass(frozen=True, eq=False)
class ClassRef:
    info: ClassInfo


Entity = Union[ModuleRef, FunctionRef, ClassRef]


def iter_invocations(node: ast.AST) -> Iterator[ast.Call]:
    """Yield call expressions under `node` in source order.

    Nested functions and lambdas are searched; nested class bodies are not.
    """
    pending: List[ast.AST] = list(reversed(list(ast.iter_child_nodes(node))))
    while pending:
        child = pending.pop()
        if isinstance(child, ast.ClassDef):
            continue
        if isinstance(child, ast.Call):
            yield child
        pending.extend(reversed(list(ast.iter_child_nodes(child))))


def _is_staticmethod(node) -> bool:
    for decorator in node.decorator_list:
        if isinstance(decorator, ast.Name) and decorator.id == "staticmethod":
            return True
    return False


def _receiver_name(declaration: MethodDeclaration) -> Optional[str]:
    """Name of the ``self``/``cls`` parameter of a method, if it has one."""
    if declaration.class_info is None or _is_staticmethod(declaration.node):
        return None
    arguments = declaration.node.args
    positional = list(getattr(arguments, "posonlyargs", [])) + list(arguments.args)
    if not positional:
        return None
    return positional[0].arg


def _is_super_call(node: ast.AST) -> bool:
    return (
        isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id == "super"
    )


class SemanticModel:
    """Resolves declarations and calls of one module against a SolutionIndex."""

    def __init__(self, index: SolutionIndex, module: ModuleInfo, symbols: SymbolTable) -> None:
        self.index = index
        self.module = module
        self.symbols = symbols

    # ------------------------------------------------------------ declarations
    def get_declared_symbol(self, declaration: MethodDeclaration) -> MethodSymbol:
        return self.symbols.intern(
            declaration.document.module_name,
            declaration.containing_type,
            declaration.name,
        )

    # ------------------------------------------------------------------ calls
    def get_call_target(self, invocation: Invocation) -> Optional[MethodSymbol]:
        """Return the method invoked by a call expression, or None."""
        declaration = invocation.declaration
        func = invocation.node.func

        if isinstance(func, ast.Attribute):
            receiver = func.value
            if declaration.class_info is not None:
                if _is_super_call(receiver):
                    return self._method_symbol(declaration.class_info, func.attr, skip_self=True)
                if isinstance(receiver, ast.Name) and receiver.id == _receiver_name(declaration):
                    return self._method_symbol(declaration.class_info, func.attr)
            owner = self.resolve_expression(self.module, receiver)
            return self._member_call(owner, func.attr)

        if isinstance(func, ast.Name):
            return self._entity_call(self.resolve_expression(self.module, func))

        return None

    def _member_call(self, owner: Optional[Entity], attr: str) -> Optional[MethodSymbol]:
        if isinstance(owner, ClassRef):
            nested = owner.info.nested.get(attr)
            if nested is not None:
                return self._entity_call(ClassRef(nested))
            return self._method_symbol(owner.info, attr)
        if isinstance(owner, ModuleRef):
            return self._entity_call(self._module_member(owner.name, attr, 0))
        return None

    def _entity_call(self, entity: Optional[Entity]) -> Optional[MethodSymbol]:
        if isinstance(entity, FunctionRef):
            return self.symbols.intern(entity.module, entity.module, entity.name)
        if isinstance(entity, ClassRef):
            return self._method_symbol(entity.info, CONSTRUCTOR)
        return None

    def _method_symbol(self, class_info: ClassInfo, name: str, skip_self: bool = False) -> Optional[MethodSymbol]:
        owner = self.find_method(class_info, name, skip_self)
        if owner is None:
            return None
        return self.symbols.intern(owner.module, owner.qualname, name)

    # -------------------------------------------------------------- lookups
    def find_method(self, class_info: ClassInfo, name: str, skip_self: bool = False) -> Optional[ClassInfo]:
        """Return the class that defines `name` for `class_info`, searching
        its bases left to right, depth first."""
        for candidate in self.linearize(class_info):
            if skip_self and candidate is class_info:
                continue
            if name in candidate.methods:
                return candidate
        return None

    def linearize(self, class_info: ClassInfo) -> List[ClassInfo]:
        """Return `class_info` followed by its in-solution bases."""
        order: List[ClassInfo] = []
        seen: Set[int] = set()
        pending = [class_info]
        while pending:
            current = pending.pop()
            if id(current) in seen:
                continue
            seen.add(id(current))
            order.append(current)

            owner_module = self.index.get_module(current.module)
            bases = []
            for base in current.bases:
                entity = self.resolve_expression(owner_module, base) if owner_module else None
                if isinstance(entity, ClassRef):
                    bases.append(entity.info)
            pending.extend(reversed(bases))
        return order

    def resolve_expression(self, module: ModuleInfo, node: ast.AST, depth: int = 0) -> Optional[Entity]:
        """Resolve a name or dotted attribute chain in module scope."""
        if isinstance(node, ast.Name):
            return self._module_scope_name(module, node.id, depth)
        if isinstance(node, ast.Attribute):
            owner = self.resolve_expression(module, node.value, depth)
            if isinstance(owner, ModuleRef):
                return self._module_member(owner.name, node.attr, depth)
            if isinstance(owner, ClassRef):
                nested = owner.info.nested.get(node.attr)
                if nested is not None:
                    return ClassRef(nested)
        return None

    def _module_scope_name(self, module: ModuleInfo, name: str, depth: int) -> Optional[Entity]:
        if name in module.classes:
            return ClassRef(module.classes[name])
        if name in module.functions:
            return FunctionRef(module.name, name)
        binding = module.imports.get(name)
        if binding is None:
            return None
        if binding.name is None:
            return ModuleRef(binding.module)
        return self._module_member(binding.module, binding.name, depth + 1)

    def _module_member(self, module_name: str, attr: str, depth: int) -> Optional[Entity]:
        if depth > MAX_IMPORT_DEPTH:
            LOG.debug("import chain too deep resolving %s.%s", module_name, attr)
            return None

        submodule = "%s.%s" % (module_name, attr)
        target = self.index.get_module(module_name)
        if target is not None:
            entity = self._module_scope_name(target, attr, depth)
            if entity is not None:
                return entity
        if self.index.is_module(submodule):
            return ModuleRef(submodule)
        return None
