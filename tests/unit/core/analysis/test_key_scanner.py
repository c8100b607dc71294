from __future__ import annotations

"""
Unit tests for the Source Key Scanner.

Verifies depth-first document ordering, nested marker detection, and the
silent skipping of dynamic keys.
"""

import sys
from pathlib import Path

import pytest

from tkeys.core.analysis.key_scanner import extract_keys, is_target_file, scan_file
from tkeys.domain.errors import ParseError


def test_keys_are_returned_in_document_order() -> None:
    source = """
print(t("greeting"))
t("farewell")
t("greeting")
"""
    assert extract_keys(source, ["t"]) == ["greeting", "farewell", "greeting"]


def test_nested_marker_calls_are_found_outer_first() -> None:
    assert extract_keys('t("outer", t("inner"))', ["t"]) == ["outer", "inner"]


def test_keys_at_arbitrary_depth() -> None:
    """Decorators, class bodies, lambdas, comprehensions and f-string fields are all visited."""
    source = '''
@route(t("deco.key"))
class View:
    title: str = t("class.attr")

    def render(self, items):
        label = lambda: t("lambda.key")
        rows = [t("comp.key") for _ in items]
        return f"{t('fstring.field')}"
'''
    assert extract_keys(source, ["t"]) == [
        "deco.key",
        "class.attr",
        "lambda.key",
        "comp.key",
        "fstring.field",
    ]


def test_source_order_for_decorators_and_conditionals() -> None:
    source = '''
@register(t("first"))
def handler(x=t("second")) -> t("third"):
    return t("fourth") if t("fifth") else t("sixth")
'''
    assert extract_keys(source, ["t"]) == ["first", "second", "third", "fourth", "fifth", "sixth"]


def test_parameter_defaults_follow_source_order() -> None:
    source = '''
def f(p=t("pos"), /, a=t("first"), *args, b=t("second"), **kw):
    pass

g = lambda x=t("lambda.first"), *, y=t("lambda.second"): x
'''
    assert extract_keys(source, ["t"]) == ["pos", "first", "second", "lambda.first", "lambda.second"]


def test_dict_display_interleaves_keys_and_values() -> None:
    source = '{t("k1"): t("v1"), **extra(t("spread")), t("k2"): t("v2")}'
    assert extract_keys(source, ["t"]) == ["k1", "v1", "spread", "k2", "v2"]


@pytest.mark.skipif(sys.version_info < (3, 12), reason="type parameter syntax needs Python 3.12")
def test_type_parameters_precede_signature() -> None:
    source = '''
class Box[T: t("class.bound")](Base, meta=t("class.kw")):
    pass

def f[U: t("bound")](x=t("default")) -> t("returns"):
    pass
'''
    assert extract_keys(source, ["t"]) == ["class.bound", "class.kw", "bound", "default", "returns"]


def test_dynamic_keys_are_ignored() -> None:
    source = """
t(name)
t(f"user.{role}")
t()
t(key="kw")
t(*args)
t(42)
t("ok")
"""
    assert extract_keys(source, ["t"]) == ["ok"]


def test_only_bare_identifier_callees_are_markers() -> None:
    source = """
i18n.t("attribute.call")
translate("other.fn")
t("bare")
"""
    assert extract_keys(source, ["t"]) == ["bare"]


def test_custom_marker_names() -> None:
    source = '_("underscore")\ngettext_lazy("lazy")\nt("ignored")'
    assert extract_keys(source, ["_", "gettext_lazy"]) == ["underscore", "lazy"]


def test_type_annotations_and_decorators_parse() -> None:
    source = """
from typing import Annotated

@dataclass(frozen=True)
class Item:
    name: Annotated[str, "meta"]

def label(x: int, /, *, y: "Item") -> str:
    return t("annotated")
"""
    assert extract_keys(source, ["t"]) == ["annotated"]


def test_syntax_error_raises_parse_error_naming_file() -> None:
    with pytest.raises(ParseError) as exc_info:
        extract_keys('t("unterminated', ["t"], filename="src/broken.py")

    assert exc_info.value.path == "src/broken.py"
    assert "src/broken.py" in str(exc_info.value)


def test_scan_file_honours_encoding_cookie(tmp_path: Path) -> None:
    f = tmp_path / "legacy.py"
    f.write_bytes(b'# -*- coding: latin-1 -*-\nt("caf\xe9")\n')

    assert scan_file(str(f), ["t"]) == ["café"]


def test_scan_file_empty(tmp_path: Path) -> None:
    f = tmp_path / "empty.py"
    f.write_text("", encoding="utf-8")
    assert scan_file(str(f), ["t"]) == []


def test_is_target_file_extensions() -> None:
    assert is_target_file("app.py") is True
    assert is_target_file("gui.pyw") is True
    assert is_target_file("stub.pyi") is False
    assert is_target_file("data.json") is False
    assert is_target_file("Makefile") is False
