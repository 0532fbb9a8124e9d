from __future__ import annotations

from pathlib import Path
import textwrap
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import pytest

from callcycle.frontend import PythonFrontend
from callcycle.analysis.cycles import collect_declarations
from callcycle.machinery import MethodSymbol, SymbolTable


def _normalize_code(code: str) -> str:
    # Allow indented triple-quoted snippets in tests.
    code = textwrap.dedent(code)
    code = code.lstrip("\n")
    if code and not code.endswith("\n"):
        code += "\n"
    return code


@pytest.fixture()
def symbols() -> SymbolTable:
    return SymbolTable()


@pytest.fixture()
def method(symbols):
    """
    Intern a symbol from ``"Type.name"``; the namespace defaults to ``app``.
    """

    def _method(qualified: str, namespace: str = "app") -> MethodSymbol:
        type_name, _, name = qualified.rpartition(".")
        return symbols.intern(namespace, type_name, name)

    return _method


@pytest.fixture()
def declare(method):
    """
    Turn ``{"A.f": ["B.g", None]}`` into builder input, keeping key order.
    Callers named ``"ns:Type.name"`` live in namespace ``ns``.
    """

    def _symbol(name):
        if name is None:
            return None
        if ":" in name:
            namespace, _, qualified = name.partition(":")
            return method(qualified, namespace)
        return method(name)

    def _declare(edges: Mapping[str, Sequence[Optional[str]]]) -> List[Tuple[MethodSymbol, List]]:
        return [(_symbol(caller), [_symbol(c) for c in callees]) for caller, callees in edges.items()]

    return _declare


@pytest.fixture()
def write_tree(tmp_path: Path):
    """Write ``{relative_path: source}`` under a directory and return it."""

    def _write(files: Mapping[str, str], root: Optional[Path] = None) -> Path:
        base = root or tmp_path
        for rel_name, code in files.items():
            p = base / rel_name
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(_normalize_code(code), encoding="utf-8")
        return base

    return _write


@pytest.fixture()
def resolved_calls():
    """
    Open a solution with a fresh PythonFrontend and map every declared
    method's qualified name to the qualified names of its call targets
    (None where unresolved).
    """

    def _resolve(solution_path) -> Dict[str, List[Optional[str]]]:
        frontend = PythonFrontend()
        out: Dict[str, List[Optional[str]]] = {}
        for symbol, callees in collect_declarations(frontend, solution_path):
            out.setdefault(symbol.qualified_name, []).extend(
                c.qualified_name if c is not None else None for c in callees
            )
        return out

    return _resolve


SAMPLE_PROJECT = {
    "app/__init__.py": "",
    "app/service.py": """
        from app.repo import Repository
        from . import helpers


        class Service:
            def __init__(self):
                self.repo = Repository()

            def run(self):
                return self.step()

            def step(self):
                helpers.assist(self)
                return self.run()
        """,
    "app/helpers.py": """
        def assist(service):
            return service.step()


        def ping():
            return pong()


        def pong():
            return ping()
        """,
    "app/repo.py": """
        class Base:
            def save(self):
                return self.validate()

            def validate(self):
                return True


        class Repository(Base):
            def __init__(self):
                super().__init__()

            def validate(self):
                return super().validate()
        """,
}


@pytest.fixture()
def sample_project(write_tree) -> Path:
    return write_tree(SAMPLE_PROJECT)
