"""
Python source front-end.

PythonFrontend implements the Frontend interface on top of the standard
library ``ast`` module. Opening a solution parses every document once and
indexes its module-scope bindings, so calls can be resolved across modules
and projects before any method is examined.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from ..machinery.symbols import MethodSymbol, SymbolTable
from .base import Document, Frontend, Invocation, MethodDeclaration, Project
from .index import SolutionIndex
from .semantic import SemanticModel, iter_invocations
from .workspace import open_solution, parse_document

LOG = logging.getLogger(__name__)


class PythonFrontend(Frontend):
    """Front-end for Python solutions.

    Attributes:
        symbols: Symbol arena shared by every resolution of this front-end.
        index: Declarations of every parsed document, filled by
            `list_projects`.
    """

    def __init__(self, symbols: Optional[SymbolTable] = None) -> None:
        self.symbols = symbols if symbols is not None else SymbolTable()
        self.index = SolutionIndex()
        self._models: Dict[Document, SemanticModel] = {}

    def list_projects(self, solution_path) -> List[Project]:
        projects = open_solution(solution_path)
        parsed = skipped = 0
        for project in projects:
            for document in project.documents:
                if parse_document(document):
                    self.index.add_document(document)
                    parsed += 1
                else:
                    skipped += 1
        LOG.info("parsed %d document(s), skipped %d", parsed, skipped)
        return projects

    def list_documents(self, project: Project) -> Sequence[Document]:
        return list(project.documents)

    def get_method_declarations(self, document: Document) -> Sequence[MethodDeclaration]:
        module = self.index.module_for(document)
        if module is None:
            # no syntax tree; parse_document already logged why
            return []
        return list(module.declarations)

    def resolve_declared_symbol(self, declaration: MethodDeclaration) -> MethodSymbol:
        return self.semantic_model(declaration.document).get_declared_symbol(declaration)

    def get_invocations(self, declaration: MethodDeclaration) -> Sequence[Invocation]:
        return [Invocation(declaration, call) for call in iter_invocations(declaration.node)]

    def resolve_call_target(self, invocation: Invocation) -> Optional[MethodSymbol]:
        return self.semantic_model(invocation.declaration.document).get_call_target(invocation)

    def semantic_model(self, document: Document) -> SemanticModel:
        """Return the cached SemanticModel of an indexed document."""
        model = self._models.get(document)
        if model is None:
            module = self.index.module_for(document)
            if module is None:
                raise KeyError("document %s has not been indexed" % document.path)
            model = SemanticModel(self.index, module, self.symbols)
            self._models[document] = model
        return model
