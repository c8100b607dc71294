from __future__ import annotations

"""
Static Configuration Evaluator.

Turns a Python configuration module into a plain structured value without
executing it. The module is parsed into an AST, its top-level bindings are
indexed, and the expression bound to '__default__' is folded through a
closed whitelist of literal shapes. Anything else is rejected.
"""

import ast
import logging
import os
from typing import Any, Dict, List, Optional, Union

from tkeys.domain.config import Config, config_from_value
from tkeys.domain.errors import ConfigError, ParseError, UnsupportedExpressionError

logger = logging.getLogger(__name__)

# Name whose top-level assignment plays the role of a default export
DEFAULT_EXPORT_NAME = "__default__"

# Pass-through wrappers and the positional index of their inner expression
_TYPE_ASSERTION_WRAPPERS: Dict[str, int] = {
    "cast": 1,
    "assert_type": 0,
}


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def load_config(path: str) -> Config:
    """
    Read, evaluate and decode a configuration file.

    Args:
        path: Path to the configuration module.

    Returns:
        Config: The validated configuration.

    Raises:
        ConfigError: If the file is missing or its content is not a valid configuration.
        ParseError: If the file is not valid Python.
    """
    if not os.path.isfile(path):
        raise ConfigError(f"Config file not found: {path}")

    with open(path, "rb") as f:
        source = f.read()

    logger.debug(f"Evaluating configuration module: {path}")
    value = evaluate_config_source(source, filename=path)
    return config_from_value(value)


def evaluate_config_source(source: Union[str, bytes], filename: str = "<config>") -> Any:
    """
    Extract the default-exported literal value of a configuration module.

    Args:
        source: Module source text (bytes honour PEP 263 encoding cookies).
        filename: Name used in diagnostics.

    Returns:
        Any: Nested dicts, lists and strings.

    Raises:
        ParseError: If the module does not parse.
        ConfigError: If no default export exists or its identifier is unbound.
        UnsupportedExpressionError: If a non-literal expression is reached.
    """
    try:
        module = ast.parse(source, filename=filename)
    except (SyntaxError, ValueError) as e:
        raise ParseError(filename, _syntax_message(e)) from e

    # The export follows the same last-binding-wins rule as every other name
    bindings = collect_bindings(module)
    exported = bindings.get(DEFAULT_EXPORT_NAME)
    if exported is None:
        raise ConfigError(
            f"No default export found in '{filename}'. "
            f"Assign the configuration to '{DEFAULT_EXPORT_NAME}'."
        )

    if isinstance(exported, ast.Name):
        target = bindings.get(exported.id)
        if target is None:
            raise ConfigError(f"Identifier '{exported.id}' not found in variable map")
        exported = target

    return expr_to_value(exported)


def collect_bindings(module: ast.Module) -> Dict[str, ast.expr]:
    """
    Index top-level 'name = expr' and 'name: T = expr' statements.

    Only one level is recorded: a binding whose value is itself a name is
    stored as that name, never followed.

    Args:
        module: Parsed module.

    Returns:
        Dict[str, ast.expr]: Identifier to initializer expression.
    """
    bindings: Dict[str, ast.expr] = {}
    for stmt in module.body:
        if isinstance(stmt, ast.Assign):
            for target in stmt.targets:
                if isinstance(target, ast.Name):
                    bindings[target.id] = stmt.value
        elif isinstance(stmt, ast.AnnAssign) and stmt.value is not None:
            if isinstance(stmt.target, ast.Name):
                bindings[stmt.target.id] = stmt.value
    return bindings


def expr_to_value(node: ast.expr) -> Any:
    """
    Fold a whitelisted literal expression into a plain Python value.

    Supported shapes:
    - dict displays with string keys, and dict(...) calls with keyword arguments;
    - list and tuple displays ('None' elements are holes and are dropped);
    - string constants;
    - cast(T, expr) and assert_type(expr, T), which evaluate to their inner expression.

    Args:
        node: Expression node to evaluate.

    Returns:
        Any: The evaluated value.

    Raises:
        ConfigError: On a non-string dict key.
        UnsupportedExpressionError: On any other expression shape.
    """
    inner = _unwrap_type_assertion(node)
    if inner is not None:
        return expr_to_value(inner)

    if isinstance(node, ast.Dict):
        obj: Dict[str, Any] = {}
        for key, value in zip(node.keys, node.values):
            # '**spread' entries carry no key
            if key is None:
                continue
            if not (isinstance(key, ast.Constant) and isinstance(key.value, str)):
                raise ConfigError(f"Invalid key: {ast.dump(key)} (line {key.lineno})")
            obj[key.value] = expr_to_value(value)
        return obj

    if _is_dict_call(node):
        obj = {}
        for kw in node.keywords:
            if kw.arg is None:
                continue
            obj[kw.arg] = expr_to_value(kw.value)
        return obj

    if isinstance(node, (ast.List, ast.Tuple)):
        items: List[Any] = []
        for elt in node.elts:
            if isinstance(elt, ast.Constant) and elt.value is None:
                continue
            items.append(expr_to_value(elt))
        return items

    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value

    raise UnsupportedExpressionError(
        f"Unsupported expression type: {type(node).__name__} (line {getattr(node, 'lineno', '?')})"
    )


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _callee_name(func: ast.expr) -> Optional[str]:
    """Name of a plain or attribute callee ('cast', 'typing.cast')."""
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute):
        return func.attr
    return None


def _unwrap_type_assertion(node: ast.expr) -> Optional[ast.expr]:
    if not isinstance(node, ast.Call) or node.keywords:
        return None
    index = _TYPE_ASSERTION_WRAPPERS.get(_callee_name(node.func) or "")
    if index is None or len(node.args) != 2:
        return None
    return node.args[index]


def _is_dict_call(node: ast.expr) -> bool:
    return (
        isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id == "dict"
        and not node.args
    )


def _syntax_message(e: Exception) -> str:
    if isinstance(e, SyntaxError):
        return f"{e.msg} (line {e.lineno})"
    return str(e)
