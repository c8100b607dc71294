from __future__ import annotations

"""
Source Key Scanner.

Extracts translation keys from Python sources by walking their AST and
recording the first string-literal argument of every call to a marker
function (e.g. t("greeting")). Extraction is purely syntactic: scanned
files are never imported or executed.
"""

import ast
import logging
import os
from typing import Iterable, List, Optional, Tuple, Union

from tkeys.domain.errors import ParseError

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = (".py", ".pyw")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def is_target_file(path: str) -> bool:
    """Check whether a file carries one of the scanned source extensions."""
    _, ext = os.path.splitext(path)
    return ext in SOURCE_EXTENSIONS


def extract_keys(source: Union[str, bytes], fn_names: Iterable[str], filename: str = "<unknown>") -> List[str]:
    """
    Collect marker-call keys from a source string, in document order.

    Args:
        source: Python source (bytes honour PEP 263 encoding cookies).
        fn_names: Identifiers recognised as marker functions.
        filename: Name used in diagnostics.

    Returns:
        List[str]: Keys in depth-first traversal order, duplicates included.

    Raises:
        ParseError: If the source is not valid Python.
    """
    try:
        tree = ast.parse(source, filename=filename)
    except SyntaxError as e:
        raise ParseError(filename, f"{e.msg} (line {e.lineno})") from e
    except ValueError as e:
        raise ParseError(filename, str(e)) from e

    collector = _MarkerCallCollector(fn_names)
    collector.visit(tree)
    return collector.keys


def scan_file(file_path: str, fn_names: Iterable[str]) -> List[str]:
    """
    Read a source file and extract its keys.

    Args:
        file_path: Path of the file to scan.
        fn_names: Identifiers recognised as marker functions.

    Returns:
        List[str]: Keys in document order.
    """
    with open(file_path, "rb") as f:
        source = f.read()
    keys = extract_keys(source, fn_names, filename=file_path)
    logger.debug(f"Scanned {file_path}: {len(keys)} key(s)")
    return keys


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

class _MarkerCallCollector(ast.NodeVisitor):
    """
    Depth-first visitor recording the literal first argument of marker calls.

    The call itself is recorded before its children are visited, so
    t("a", t("b")) yields ["a", "b"]. Nodes whose AST field order differs
    from their source order (decorated definitions, parameter lists, dict
    displays, conditional expressions) are walked in source order.
    """

    def __init__(self, fn_names: Iterable[str]):
        self.fn_names = frozenset(fn_names)
        self.keys: List[str] = []

    def visit_Call(self, node: ast.Call) -> None:
        if isinstance(node.func, ast.Name) and node.func.id in self.fn_names and node.args:
            first = node.args[0]
            if isinstance(first, ast.Constant) and isinstance(first.value, str):
                self.keys.append(first.value)
        self.generic_visit(node)

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        self._visit_fields(node, ("decorator_list", "type_params", "bases", "keywords", "body"))

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        self._visit_fields(node, ("decorator_list", "type_params", "args", "returns", "body"))

    visit_AsyncFunctionDef = visit_FunctionDef

    def visit_arguments(self, node: ast.arguments) -> None:
        # Defaults align with the last positional parameters
        positional = list(node.posonlyargs) + list(node.args)
        defaults: List[Optional[ast.expr]] = [None] * (len(positional) - len(node.defaults))
        defaults.extend(node.defaults)

        for arg, default in zip(positional, defaults):
            self._visit_pair(arg, default)
        if node.vararg is not None:
            self.visit(node.vararg)
        for arg, default in zip(node.kwonlyargs, node.kw_defaults):
            self._visit_pair(arg, default)
        if node.kwarg is not None:
            self.visit(node.kwarg)

    def visit_Dict(self, node: ast.Dict) -> None:
        for key, value in zip(node.keys, node.values):
            self._visit_pair(key, value)

    def visit_IfExp(self, node: ast.IfExp) -> None:
        self._visit_fields(node, ("body", "test", "orelse"))

    def _visit_pair(self, first: Optional[ast.AST], second: Optional[ast.AST]) -> None:
        for item in (first, second):
            if item is not None:
                self.visit(item)

    def _visit_fields(self, node: ast.AST, fields: Tuple[str, ...]) -> None:
        for name in fields:
            value = getattr(node, name, None)
            if isinstance(value, list):
                for item in value:
                    if isinstance(item, ast.AST):
                        self.visit(item)
            elif isinstance(value, ast.AST):
                self.visit(value)
