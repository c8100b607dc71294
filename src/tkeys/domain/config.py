from __future__ import annotations

"""
Configuration Domain Models.

Defines the immutable configuration model (language tree and scanning
targets), the TypedDict shapes that configuration files annotate themselves
with, and the strict decoder that turns an evaluated configuration value
into the typed model.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple, TypedDict

from tkeys.domain.errors import ConfigError

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# CONSTANTS & DEFAULTS
# -----------------------------------------------------------------------------

DEFAULT_CONFIG_FILE = "t_config.py"
DEFAULT_OUTPUT = "_t"
DEFAULT_FN_NAMES: Tuple[str, ...] = ("t",)
DEFAULT_INCLUDES: Tuple[str, ...] = ("src",)
DEFAULT_EXCLUDES: Tuple[str, ...] = ("__pycache__", "venv", ".*")

_KNOWN_ROOT_FIELDS = {"languages", "targets"}
_KNOWN_LANGUAGE_FIELDS = {"name", "children"}
_KNOWN_TARGET_FIELDS = {"includes", "excludes", "output", "fn_names"}


# -----------------------------------------------------------------------------
# TYPED SHAPES (for annotating configuration files)
# -----------------------------------------------------------------------------

class _TLanguageBase(TypedDict):
    name: str


class TLanguage(_TLanguageBase, total=False):
    children: List["TLanguage"]


class _TTargetBase(TypedDict):
    includes: List[str]
    excludes: List[str]


class TTarget(_TTargetBase, total=False):
    output: str
    fn_names: List[str]


class _TConfigBase(TypedDict):
    languages: TLanguage


class TConfig(_TConfigBase, total=False):
    targets: List[TTarget]


# -----------------------------------------------------------------------------
# CONFIGURATION MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LanguageNode:
    """
    A node of the language inheritance tree.

    Attributes:
        name: Language code, unique across the whole tree.
        children: Languages that fall back to this one.
    """
    name: str
    children: Tuple[LanguageNode, ...] = ()

    def walk(self, parent: Optional[str] = None) -> List[Tuple[str, Optional[str]]]:
        """
        Pre-order traversal of the tree.

        Args:
            parent: Name of this node's parent, None for the root.

        Returns:
            List[Tuple[str, Optional[str]]]: (language, parent_language) pairs
                                             in inheritance order.
        """
        order: List[Tuple[str, Optional[str]]] = [(self.name, parent)]
        for child in self.children:
            order.extend(child.walk(self.name))
        return order

    def all_languages(self) -> List[str]:
        """Language names in pre-order."""
        return [name for name, _ in self.walk()]


@dataclass(frozen=True)
class Target:
    """
    One scanning policy.

    Attributes:
        includes: Directories (relative to the project root) to resolve workspaces from.
        excludes: Gitignore-style globs pruning directories from resolution.
        output: Subdirectory created inside every workspace for its key files.
        fn_names: Call identifiers recognised as translation markers.
    """
    includes: Tuple[str, ...]
    excludes: Tuple[str, ...]
    output: str = DEFAULT_OUTPUT
    fn_names: Tuple[str, ...] = DEFAULT_FN_NAMES


@dataclass(frozen=True)
class Config:
    """Complete, validated configuration for one run."""
    languages: LanguageNode
    targets: Tuple[Target, ...] = field(default_factory=lambda: default_targets())

    @property
    def default_language(self) -> str:
        return self.languages.name


def default_targets() -> Tuple[Target, ...]:
    """Single conventional target used when a configuration declares none."""
    return (Target(includes=DEFAULT_INCLUDES, excludes=DEFAULT_EXCLUDES),)


# -----------------------------------------------------------------------------
# DECODING
# -----------------------------------------------------------------------------

def config_from_value(value: Any) -> Config:
    """
    Decode an evaluated configuration value into the typed model.

    Args:
        value: Structured value produced by the configuration evaluator.

    Returns:
        Config: The validated configuration.

    Raises:
        ConfigError: On any shape mismatch, missing required field, or
                     duplicated language name.
    """
    root = _as_mapping(value, "config")
    _warn_unknown(root, _KNOWN_ROOT_FIELDS, "config")

    if "languages" not in root:
        raise ConfigError("Missing required field 'languages'.")
    languages = _decode_language(root["languages"], "languages")
    _ensure_unique_languages(languages)

    if "targets" in root:
        raw_targets = _as_list(root["targets"], "targets")
        targets = tuple(
            _decode_target(item, f"targets[{i}]") for i, item in enumerate(raw_targets)
        )
    else:
        targets = default_targets()

    return Config(languages=languages, targets=targets)


def _decode_language(value: Any, where: str) -> LanguageNode:
    data = _as_mapping(value, where)
    _warn_unknown(data, _KNOWN_LANGUAGE_FIELDS, where)

    if "name" not in data:
        raise ConfigError(f"Missing required field '{where}.name'.")
    name = _as_str(data["name"], f"{where}.name")

    children: List[LanguageNode] = []
    if "children" in data:
        for i, child in enumerate(_as_list(data["children"], f"{where}.children")):
            children.append(_decode_language(child, f"{where}.children[{i}]"))

    return LanguageNode(name=name, children=tuple(children))


def _decode_target(value: Any, where: str) -> Target:
    data = _as_mapping(value, where)
    _warn_unknown(data, _KNOWN_TARGET_FIELDS, where)

    for required in ("includes", "excludes"):
        if required not in data:
            raise ConfigError(f"Missing required field '{where}.{required}'.")

    includes = _as_list_str(data["includes"], f"{where}.includes")
    excludes = _as_list_str(data["excludes"], f"{where}.excludes")

    output = DEFAULT_OUTPUT
    if "output" in data:
        output = _as_str(data["output"], f"{where}.output")

    fn_names = DEFAULT_FN_NAMES
    if "fn_names" in data:
        fn_names = _as_list_str(data["fn_names"], f"{where}.fn_names")

    return Target(includes=includes, excludes=excludes, output=output, fn_names=fn_names)


def _ensure_unique_languages(root: LanguageNode) -> None:
    """Reject trees in which a language code appears more than once."""
    seen: Set[str] = set()
    for name in root.all_languages():
        if name in seen:
            raise ConfigError(f"Duplicate language '{name}' in language tree.")
        seen.add(name)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE CHECKS
# -----------------------------------------------------------------------------

def _as_mapping(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"Invalid field '{where}': expected object, received {type(value).__name__}.")
    return value


def _as_list(value: Any, where: str) -> List[Any]:
    if not isinstance(value, list):
        raise ConfigError(f"Invalid field '{where}': expected array, received {type(value).__name__}.")
    return value


def _as_str(value: Any, where: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Invalid field '{where}': expected non-empty string.")
    return value.strip()


def _as_list_str(value: Any, where: str) -> Tuple[str, ...]:
    items = _as_list(value, where)
    out: List[str] = []
    for i, item in enumerate(items):
        if not isinstance(item, str):
            raise ConfigError(f"Invalid item in '{where}[{i}]': expected str.")
        out.append(item)
    return tuple(out)


def _warn_unknown(data: Dict[str, Any], known: Set[str], where: str) -> None:
    for key in data:
        if key not in known:
            logger.debug(f"Ignoring unknown config field '{where}.{key}'.")
