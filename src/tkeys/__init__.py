"""
tkeys: translation key collector and dictionary generator.

Scans Python sources for marker calls such as t("greeting"), keeps the
per-language JSON key files in sync, and compiles them into a typed,
inheritance-aware dictionary module.
"""

from tkeys.domain.config import TConfig, TLanguage, TTarget

__version__ = "0.1.0"

__all__ = ["TConfig", "TLanguage", "TTarget", "__version__"]
