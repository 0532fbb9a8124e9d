"""Source front-ends for callcycle.

A front-end opens a solution and exposes its projects, documents, method
declarations and call expressions, resolved to MethodSymbol handles. The
analysis depends only on the abstract `Frontend` interface; `PythonFrontend`
is the implementation for Python source trees.
"""

from .base import Document, Frontend, Invocation, MethodDeclaration, Project
from .python_frontend import PythonFrontend
from .workspace import open_solution

__all__ = [
    "Document",
    "Frontend",
    "Invocation",
    "MethodDeclaration",
    "Project",
    "PythonFrontend",
    "open_solution",
]
