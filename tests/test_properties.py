"""Property-based tests for the parser, combinator and full pipeline."""

from hypothesis import given, settings
from hypothesis import strategies as st

from fastjade import Environment, TemplateCompileError
from fastjade.compiler.parts import PartKind, PartsCombinator
from fastjade.environment.diagnostics import DiagnosticCollector
from fastjade.parser import parse

from .strategies import arbitrary_template_source, part_values, plain_text


def _silent_env():
    return Environment(diagnostics=lambda d: None)


@given(text=plain_text)
@settings(max_examples=200)
def test_piped_text_renders_verbatim(text):
    assert _silent_env().from_string("| " + text).render() == text + "\n"


@given(source=arbitrary_template_source)
@settings(max_examples=300)
def test_parser_never_crashes(source):
    collector = DiagnosticCollector("fuzz.jade", sink=lambda d: None)
    tree = parse(source, diagnostics=collector)
    assert all(child.lineno >= 1 for child in tree.children)


@given(source=arbitrary_template_source)
@settings(max_examples=300)
def test_compile_fails_only_with_compile_errors(source):
    try:
        _silent_env().from_string(source)
    except TemplateCompileError as exc:
        assert exc.lineno is None or exc.lineno >= 1


@given(values=part_values)
def test_combinator_merges_text(values):
    parts = PartsCombinator()
    for kind, value in values:
        parts.add(kind, value, 1)
    result = list(parts)
    for part in result:
        assert not (part.kind is PartKind.TEXT and part.value == "")
    for first, second in zip(result, result[1:]):
        assert not (first.kind is PartKind.TEXT and second.kind is PartKind.TEXT)


@given(values=part_values)
def test_combinator_preserves_text(values):
    parts = PartsCombinator()
    for kind, value in values:
        parts.add(kind, value, 1)
    expected = "".join(value for kind, value in values if kind is PartKind.TEXT)
    actual = "".join(part.value for part in parts if part.kind is PartKind.TEXT)
    assert actual == expected


@given(value=st.text(max_size=50))
@settings(max_examples=100)
def test_expression_output_is_escaped(value):
    html = _silent_env().from_string("p= value").render(value=value)
    assert "<" not in html[3:-5]
    assert html.startswith("<p>") and html.endswith("</p>\n")
