"""Front-end interface for call-cycle analysis.

A front-end turns a solution on disk into method symbols and resolved call
targets. The analysis only talks to it through the abstract `Frontend`
interface defined here, so the cycle detection does not depend on how
source code is parsed or how names are resolved.
"""

from __future__ import annotations

import ast
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, TYPE_CHECKING

from ..machinery.symbols import MethodSymbol

if TYPE_CHECKING:
    from .index import ClassInfo


@dataclass(eq=False)
class Document:
    """A single Python source file.

    Attributes:
        path: Location of the file.
        module_name: Dotted module name, e.g. ``pkg.mod``.
        is_package: True for ``__init__.py`` files.
        syntax_tree: Parsed module, or None if the file could not be parsed.
    """

    path: Path
    module_name: str
    is_package: bool = False
    syntax_tree: Optional[ast.Module] = field(default=None, repr=False)

    @property
    def package(self) -> str:
        """Package that relative imports in this document start from."""
        if self.is_package:
            return self.module_name
        return self.module_name.rpartition(".")[0]


@dataclass(eq=False)
class Project:
    """A source root inside a solution."""

    name: str
    root: Path
    source_root: Path
    documents: List[Document] = field(default_factory=list)


@dataclass(frozen=True, eq=False)
class MethodDeclaration:
    """A ``def`` statement declared at module level or in a class body.

    Attributes:
        document: Document holding the declaration.
        node: The function definition node.
        class_info: Enclosing class, or None for module-level functions.
    """

    document: Document
    node: ast.AST
    class_info: Optional["ClassInfo"] = None

    @property
    def name(self) -> str:
        return self.node.name

    @property
    def containing_type(self) -> str:
        if self.class_info is None:
            return self.document.module_name
        return self.class_info.qualname


@dataclass(frozen=True, eq=False)
class Invocation:
    """A call expression inside a method declaration."""

    declaration: MethodDeclaration
    node: ast.Call

    def __str__(self) -> str:
        return "%s:%d" % (self.declaration.document.path, getattr(self.node, "lineno", 0))


class Frontend(ABC):
    """Abstract source-to-symbol front-end.

    Implementations parse a solution, enumerate its projects, documents and
    method declarations, and resolve declarations and call expressions to
    interned MethodSymbol handles.
    """

    @abstractmethod
    def list_projects(self, solution_path) -> Sequence[Project]:
        """Open a solution and return its projects.

        Raises:
            SolutionLoadError: If the solution cannot be opened.
        """

    @abstractmethod
    def list_documents(self, project: Project) -> Sequence[Document]:
        """Return the documents of a project."""

    @abstractmethod
    def get_method_declarations(self, document: Document) -> Sequence[MethodDeclaration]:
        """Return method declarations in source order; empty if unparsable."""

    @abstractmethod
    def resolve_declared_symbol(self, declaration: MethodDeclaration) -> MethodSymbol:
        """Return the symbol of a declaration. Never None."""

    @abstractmethod
    def get_invocations(self, declaration: MethodDeclaration) -> Sequence[Invocation]:
        """Return the call expressions in a declaration's body, in source order."""

    @abstractmethod
    def resolve_call_target(self, invocation: Invocation) -> Optional[MethodSymbol]:
        """Return the called method, or None if it cannot be determined."""
