"""Solution discovery for Python sources.

This module finds the projects and documents that make up a solution:
- Solution layout: a single file, a single project directory, or a directory
  whose subdirectories are projects
- Module discovery: recursively finding Python files in a project
- Module naming: generating dotted module names from file paths
- Parsing: reading each document into a syntax tree

Key functions:
- open_solution: Discover every project and document under a path
- get_modules: Recursively discover modules under a source root
- parse_document: Attach a syntax tree to a document
"""

import ast
import fnmatch
import logging
import os
from pathlib import Path
from typing import List, Tuple

from ..errors import SolutionLoadError
from .base import Document, Project

LOG = logging.getLogger(__name__)

# Directories never searched for sources
EXCLUDED_DIRECTORIES = (
    ".svn",
    "CVS",
    ".bzr",
    ".hg",
    ".git",
    "__pycache__",
    ".tox",
    ".nox",
    ".eggs",
    "*.egg",
    "*.egg-info",
    ".venv",
    "venv",
    "build",
    "dist",
    "node_modules",
)

# Files marking a directory as a project of its own
PROJECT_MARKERS = ("pyproject.toml", "setup.py", "setup.cfg")


def _is_python_file(path):
    return os.path.splitext(path)[1] == ".py"


def _is_excluded(name):
    return any(fnmatch.fnmatch(name, pattern) for pattern in EXCLUDED_DIRECTORIES)


def _is_project_dir(path: Path) -> bool:
    return any((path / marker).is_file() for marker in PROJECT_MARKERS)


def get_modules(source_root) -> List[Tuple[str, Path, bool]]:
    """Recursively discover all Python modules under a source root.

    Args:
        source_root: Directory that module names are relative to.

    Returns:
        list: ``(module_name, file_path, is_package)`` tuples sorted by
            module name. Example: ``('pkg.utils', Path('src/pkg/utils.py'),
            False)``; ``pkg/__init__.py`` yields ``('pkg', ..., True)``.
    """
    source_root = Path(source_root)
    modules = []
    for root, directories, filenames in os.walk(source_root):
        directories[:] = sorted(d for d in directories if not _is_excluded(d))
        relative = Path(root).relative_to(source_root)
        package_parts = [part for part in relative.parts if part != "."]

        for filename in sorted(filenames):
            if not _is_python_file(filename):
                continue
            if filename == "__init__.py":
                if not package_parts:
                    # an __init__.py at the source root has no module name
                    continue
                modules.append((".".join(package_parts), Path(root) / filename, True))
            else:
                stem = os.path.splitext(filename)[0]
                modules.append((".".join(package_parts + [stem]), Path(root) / filename, False))

    modules.sort(key=lambda module: module[0])
    return modules


def _source_root(project_root: Path) -> Path:
    src = project_root / "src"
    if src.is_dir():
        return src
    return project_root


def _load_project(root: Path) -> Project:
    source_root = _source_root(root)
    project = Project(name=root.name, root=root, source_root=source_root)
    for module_name, path, is_package in get_modules(source_root):
        project.documents.append(Document(path=path, module_name=module_name, is_package=is_package))
    LOG.info("project %s: %d document(s) under %s", project.name, len(project.documents), source_root)
    return project


def open_solution(solution_path) -> List[Project]:
    """Discover the projects of a solution.

    Args:
        solution_path: A ``.py`` file, a project directory, or a directory
            whose subdirectories carry project markers (``pyproject.toml``,
            ``setup.py`` or ``setup.cfg``).

    Returns:
        list: Projects with their documents, not yet parsed.

    Raises:
        SolutionLoadError: If the path does not exist, is not a Python file
            or directory, or holds no Python sources.
    """
    path = Path(solution_path)
    if not path.exists():
        raise SolutionLoadError("solution path '%s' not found" % solution_path)

    if path.is_file():
        if not _is_python_file(path.name):
            raise SolutionLoadError("'%s' is not a Python file" % solution_path)
        project = Project(name=path.stem, root=path.parent, source_root=path.parent)
        project.documents.append(Document(path=path, module_name=path.stem))
        return [project]

    if _is_project_dir(path):
        # nested markers (examples, fixtures) belong to the root project
        subprojects = []
    else:
        subprojects = sorted(
            child for child in path.iterdir()
            if child.is_dir() and not _is_excluded(child.name) and _is_project_dir(child)
        )
    if subprojects:
        projects = [_load_project(child) for child in subprojects]
    else:
        projects = [_load_project(path)]

    if not any(project.documents for project in projects):
        raise SolutionLoadError("no Python sources found under '%s'" % solution_path)
    return projects


def parse_document(document: Document) -> bool:
    """Parse a document and attach its syntax tree.

    Documents that cannot be decoded or parsed are left without a tree and a
    warning is logged; the analysis continues without them.

    Returns:
        bool: True if the document now has a syntax tree.

    Raises:
        SolutionLoadError: If the file cannot be read at all.
    """
    try:
        source = document.path.read_bytes()
    except OSError as e:
        raise SolutionLoadError("cannot read '%s': %s" % (document.path, e)) from e

    try:
        document.syntax_tree = ast.parse(source, filename=str(document.path))
    except (SyntaxError, ValueError, UnicodeDecodeError) as e:
        LOG.warning("skipping %s: %s", document.path, e)
        document.syntax_tree = None
        return False
    return True
