"""Tests for global and element-scoped substitution."""
import pytest

from rewrite.errors import InvalidPatternError
from rewrite.substitution import (
    compile_substitution,
    element_pattern,
    global_substitute,
    scoped_substitute,
)

# Test literal compilation
def test_literal_substitution_ignores_metacharacters():
    substitution = compile_substitution("a.b*(c)", "x", False)
    assert substitution.is_regex is False
    assert substitution.apply("a.b*(c) aXbbb(c)") == "x aXbbb(c)"

def test_literal_replacement_is_not_a_template():
    substitution = compile_substitution("foo", r"$1 \1 \g<0>", False)
    assert substitution.apply("foo") == r"$1 \1 \g<0>"

def test_empty_pattern_is_noop():
    substitution = compile_substitution("", "x", False)
    assert substitution.is_noop
    assert substitution.apply("abc") == "abc"
    assert compile_substitution("", "x", True).apply("abc") == "abc"

# Test regex compilation
def test_regex_substitution():
    substitution = compile_substitution(r"\d+", "NUM", True)
    assert substitution.apply("Order 123 has 456 items") == "Order NUM has NUM items"

def test_invalid_regex_raises():
    with pytest.raises(InvalidPatternError) as exc_info:
        compile_substitution("[invalid(", "x", True)
    assert exc_info.value.pattern == "[invalid("

@pytest.mark.parametrize("template,expected", [
    (r"\2-\1", "b-a"),
    (r"\g<second>:\g<first>", "b:a"),
    ("$2-$1", "b-a"),
    ("$<second>", "b"),
    ("[$&]", "[ab]"),
    ("$$1", "$1"),
    ("$10", "a0"),
])
def test_replacement_templates(template, expected):
    substitution = compile_substitution(r"(?P<first>a)(?P<second>b)", template, True)
    assert substitution.apply("ab") == expected

def test_bad_group_reference_raises_on_compile():
    with pytest.raises(InvalidPatternError):
        compile_substitution(r"(a)", r"\5", True)
    with pytest.raises(InvalidPatternError):
        compile_substitution(r"(a)", "$7", True)

# Test global substitution
def test_global_substitute_touches_markup():
    substitution = compile_substitution("Name", "Label", False)
    body = '<Name attr="Name">Name</Name>'
    assert global_substitute(body, substitution) == '<Label attr="Label">Label</Label>'

# Test element pattern
def test_element_pattern_matches_prefixed_and_attributed_elements():
    pattern = element_pattern("Name")
    assert pattern.fullmatch("<Name>x</Name>")
    assert pattern.fullmatch("<m:Name>x</m:Name>")
    assert pattern.fullmatch('<m:Name lang="en">x</m:Name>')
    assert pattern.fullmatch("<Name>x</Name >")
    assert not pattern.search("<FirstName>x</FirstName>")
    assert not pattern.search("<name>x</name>")
    assert not pattern.search("<Name/>")
    assert not pattern.search('<Name nil="true" />')

# Test scoped substitution
def test_scoped_substitute_rewrites_inner_text_only(soap_response):
    substitution = compile_substitution("John", "Jane", False)
    result = scoped_substitute(soap_response, "Name", substitution)

    assert "<m:Name>Jane</m:Name>" in result
    assert '<m:Name lang="en">Jane Smith</m:Name>' in result
    # Other elements and attributes keep their text
    assert '<m:Email type="John">john@example.com</m:Email>' in result
    assert result.count("John") == 1

def test_scoped_substitute_never_touches_tags():
    substitution = compile_substitution("Name", "X", False)
    body = '<Name id="Name">a Name</Name>'
    assert scoped_substitute(body, "Name", substitution) == '<Name id="Name">a X</Name>'

def test_scoped_substitute_regex_on_content():
    substitution = compile_substitution(r"^\s+|\s+$", "", True)
    body = "<Id>  42  </Id><Other>  1  </Other>"
    assert scoped_substitute(body, "Id", substitution) == "<Id>42</Id><Other>  1  </Other>"

def test_scoped_substitute_multiline_content():
    substitution = compile_substitution("old", "new", False)
    body = "<Note>\n  old\n  old\n</Note>"
    assert scoped_substitute(body, "Note", substitution) == "<Note>\n  new\n  new\n</Note>"

def test_scoped_substitute_without_match_returns_body():
    substitution = compile_substitution("John", "Jane", False)
    body = "<Other>John</Other>"
    assert scoped_substitute(body, "Name", substitution) == body

def test_scoped_substitute_leaves_self_closing_elements():
    substitution = compile_substitution("x", "y", False)
    body = "<Name/><Name>x</Name>"
    assert scoped_substitute(body, "Name", substitution) == "<Name/><Name>y</Name>"

def test_scoped_substitute_nested_same_name_limitation():
    # Matching stops at the nearest closing tag, so the outer element's
    # trailing text is outside the first match and is left alone.
    substitution = compile_substitution("v", "V", False)
    body = "<Item>v<Item>v</Item>v</Item>"
    assert scoped_substitute(body, "Item", substitution) == "<Item>V<Item>V</Item>v</Item>"
