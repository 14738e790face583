"""
Docstrings across the package stay in English.
"""
import ast
import re
from pathlib import Path

import pytest

PACKAGE = Path(__file__).parent / "reps_bot"
CYRILLIC = re.compile("[\u0400-\u04ff]")
DOCUMENTED = (ast.Module, ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)


@pytest.mark.parametrize("path", sorted(PACKAGE.rglob("*.py")), ids=lambda p: str(p.relative_to(PACKAGE)))
def test_docstrings_are_english(path):
    tree = ast.parse(path.read_text(encoding="utf-8"))
    offenders = [
        getattr(node, "name", "<module>")
        for node in ast.walk(tree)
        if isinstance(node, DOCUMENTED) and CYRILLIC.search(ast.get_docstring(node) or "")
    ]
    assert offenders == []
