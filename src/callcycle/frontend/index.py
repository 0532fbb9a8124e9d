"""
Declaration index for a parsed solution.

The index records, for every module of a solution, the functions, classes and
import bindings visible at module scope, plus the method declarations of each
document in source order. Name resolution in `semantic` works entirely from
this index; no analysed code is ever imported or executed.
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from .base import Document, MethodDeclaration

LOG = logging.getLogger(__name__)

FUNCTION_NODES = (ast.FunctionDef, ast.AsyncFunctionDef)

# Compound statements whose bodies still belong to the enclosing scope
_BLOCK_FIELDS = ("body", "orelse", "finalbody", "handlers", "cases")
_BLOCK_NODES = (ast.If, ast.Try, ast.With, ast.AsyncWith, ast.For, ast.AsyncFor, ast.While)
if hasattr(ast, "TryStar"):
    _BLOCK_NODES += (ast.TryStar,)
if hasattr(ast, "Match"):
    _BLOCK_NODES += (ast.Match,)


@dataclass(frozen=True)
class ImportBinding:
    """A name bound by an import statement.

    ``import a.b as c`` binds ``c`` to module ``a.b`` (``name`` is None);
    ``from a import b as c`` binds ``c`` to member ``b`` of module ``a``.
    """

    module: str
    name: Optional[str] = None


@dataclass(eq=False)
class ClassInfo:
    """A class declared at module scope or nested in another class body."""

    module: str
    name: str
    node: ast.ClassDef
    methods: Dict[str, ast.AST] = field(default_factory=dict)
    nested: Dict[str, "ClassInfo"] = field(default_factory=dict)

    @property
    def qualname(self) -> str:
        return "%s.%s" % (self.module, self.name)

    @property
    def bases(self) -> List[ast.expr]:
        return list(self.node.bases)

    def __repr__(self) -> str:
        return "ClassInfo(%s)" % self.qualname


@dataclass(eq=False)
class ModuleInfo:
    """Module-scope bindings of one document."""

    document: Document
    functions: Dict[str, ast.AST] = field(default_factory=dict)
    classes: Dict[str, ClassInfo] = field(default_factory=dict)
    imports: Dict[str, ImportBinding] = field(default_factory=dict)
    declarations: List[MethodDeclaration] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.document.module_name


def iter_scope_statements(body: Iterable[ast.stmt]) -> Iterator[ast.stmt]:
    """Yield the statements of a scope, descending into if/try/with/loop/match blocks."""
    for statement in body:
        if isinstance(statement, _BLOCK_NODES):
            for field_name in _BLOCK_FIELDS:
                children = getattr(statement, field_name, None) or []
                if field_name in ("handlers", "cases"):
                    for clause in children:
                        yield from iter_scope_statements(clause.body)
                else:
                    yield from iter_scope_statements(children)
        else:
            yield statement


def resolve_relative_module(document: Document, module: Optional[str], level: int) -> Optional[str]:
    """
    Turn a relative import into an absolute module name.

    Returns None when the import climbs above the top-level package.
    """
    if level == 0:
        return module

    package = document.package.split(".") if document.package else []
    if level - 1 > len(package):
        return None
    if level > 1:
        package = package[: len(package) - (level - 1)]

    parts = package + ([module] if module else [])
    if not parts:
        return None
    return ".".join(parts)


class _ModuleCollector:
    """Fills a ModuleInfo from a parsed document."""

    def __init__(self, info: ModuleInfo) -> None:
        self.info = info

    def collect(self) -> ModuleInfo:
        tree = self.info.document.syntax_tree
        for statement in iter_scope_statements(tree.body):
            if isinstance(statement, FUNCTION_NODES):
                self.info.functions[statement.name] = statement
                self._declare(statement, None)
            elif isinstance(statement, ast.ClassDef):
                class_info = self._collect_class(statement, statement.name)
                self.info.classes[statement.name] = class_info
            elif isinstance(statement, ast.Import):
                self._collect_import(statement)
            elif isinstance(statement, ast.ImportFrom):
                self._collect_import_from(statement)
        return self.info

    def _declare(self, node, class_info) -> None:
        self.info.declarations.append(MethodDeclaration(self.info.document, node, class_info))

    def _collect_class(self, node: ast.ClassDef, name: str) -> ClassInfo:
        class_info = ClassInfo(module=self.info.name, name=name, node=node)
        for statement in iter_scope_statements(node.body):
            if isinstance(statement, FUNCTION_NODES):
                class_info.methods[statement.name] = statement
                self._declare(statement, class_info)
            elif isinstance(statement, ast.ClassDef):
                nested = self._collect_class(statement, "%s.%s" % (name, statement.name))
                class_info.nested[statement.name] = nested
        return class_info

    def _collect_import(self, node: ast.Import) -> None:
        for alias in node.names:
            if alias.asname:
                self.info.imports[alias.asname] = ImportBinding(alias.name)
            else:
                # ``import a.b`` binds ``a``
                top = alias.name.split(".")[0]
                self.info.imports[top] = ImportBinding(top)

    def _collect_import_from(self, node: ast.ImportFrom) -> None:
        module = resolve_relative_module(self.info.document, node.module, node.level or 0)
        if module is None:
            LOG.debug("cannot resolve relative import in %s", self.info.name)
            return
        for alias in node.names:
            if alias.name == "*":
                continue
            self.info.imports[alias.asname or alias.name] = ImportBinding(module, alias.name)


class SolutionIndex:
    """Module-scope bindings for every parsed document of a solution."""

    def __init__(self) -> None:
        self.modules: Dict[str, ModuleInfo] = {}
        self._by_document: Dict[Document, ModuleInfo] = {}

    def add_document(self, document: Document) -> Optional[ModuleInfo]:
        """Index a parsed document; documents without a tree are ignored."""
        if document.syntax_tree is None:
            return None
        info = _ModuleCollector(ModuleInfo(document)).collect()
        if info.name in self.modules:
            LOG.warning(
                "module %s defined by both %s and %s; using the latter",
                info.name,
                self.modules[info.name].document.path,
                document.path,
            )
        self.modules[info.name] = info
        self._by_document[document] = info
        return info

    def module_for(self, document: Document) -> Optional[ModuleInfo]:
        return self._by_document.get(document)

    def get_module(self, name: str) -> Optional[ModuleInfo]:
        return self.modules.get(name)

    def is_module(self, name: str) -> bool:
        """True for indexed modules and for packages that only prefix them."""
        if name in self.modules:
            return True
        prefix = name + "."
        return any(module.startswith(prefix) for module in self.modules)
