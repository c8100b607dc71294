from __future__ import annotations

"""
Domain Error Hierarchy.

Every failure the engine reports on purpose derives from TKeysError so that
the interface layer can map it to an exit code. Raw I/O failures are left
as OSError and propagate untouched.
"""

from typing import Optional


class TKeysError(Exception):
    """Base class for all tkeys failures."""


# -----------------------------------------------------------------------------
# CONFIGURATION ERRORS
# -----------------------------------------------------------------------------

class ConfigError(TKeysError):
    """Invalid, unresolvable or undecodable configuration."""


class UnsupportedExpressionError(ConfigError):
    """A configuration expression outside the literal whitelist."""


# -----------------------------------------------------------------------------
# FILE-BOUND ERRORS
# -----------------------------------------------------------------------------

class ParseError(TKeysError):
    """
    A source or configuration file could not be parsed.

    Attributes:
        path: File that failed to parse.
        message: Parser diagnostic.
    """

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"Failed to parse '{path}': {message}")


class TranslationFileError(TKeysError):
    """
    A per-language key file is not valid JSON or not a flat key map.

    Attributes:
        path: Offending key file.
        message: Decoder or shape diagnostic.
    """

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"Invalid translation file '{path}': {message}")


class PatternError(TKeysError):
    """An exclude pattern could not be compiled."""

    def __init__(self, pattern: str, message: Optional[str] = None):
        self.pattern = pattern
        super().__init__(f"Failed to compile pattern '{pattern}': {message or 'invalid syntax'}")


class OutputEncodingError(TKeysError):
    """
    Generated content cannot be written as UTF-8 (e.g. a key with a lone surrogate).

    Attributes:
        path: File that was being written.
        message: Encoder diagnostic.
    """

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"Cannot write '{path}': {message}")
