"""Tests for the indentation-sensitive line parser."""

import pytest

from fastjade.environment.diagnostics import DiagnosticCollector
from fastjade.environment.exceptions import ErrorCode, TemplateSyntaxError
from fastjade.nodes import (
    Element,
    Extends,
    HtmlComment,
    Include,
    LiteralAttribute,
    Output,
    Statement,
    SuppressedComment,
    Template,
    Text,
)
from fastjade.parser import Parser, parse


def _collector():
    return DiagnosticCollector("test.jade", sink=lambda d: None)


class TestNesting:
    """Indentation builds the tree."""

    def test_empty_source(self):
        tree = parse("")
        assert isinstance(tree, Template)
        assert tree.children == []

    def test_siblings_and_children(self):
        tree = Parser("ul\n  li one\n  li two\np after").parse()
        ul, p = tree.children
        assert [li.tag for li in ul.children] == ["li", "li"]
        assert ul.children[0].children[0].value == "one"
        assert p.tag == "p"

    def test_dedent_pops_to_matching_parent(self):
        tree = parse("div\n  section\n    p deep\n  aside")
        div = tree.children[0]
        assert [child.tag for child in div.children] == ["section", "aside"]

    def test_uneven_indentation(self):
        tree = parse("div\n      p a\n  p b")
        div = tree.children[0]
        assert [child.children[0].value for child in div.children] == ["a", "b"]

    def test_blank_lines_are_ignored(self):
        tree = parse("p a\n\n   \np b")
        assert len(tree.children) == 2

    def test_line_numbers(self):
        tree = parse("div\n\n  p hi")
        assert tree.children[0].lineno == 1
        assert tree.children[0].children[0].lineno == 3

    def test_crlf_source(self):
        tree = parse("ul\r\n  li a\r\n")
        assert tree.children[0].children[0].tag == "li"


class TestLineKinds:
    """Classification by leading characters."""

    def test_pipe_text(self):
        node = parse("| Hello #{name}").children[0]
        assert isinstance(node, Text)
        assert node.value == "Hello #{name}"
        assert node.is_text

    def test_output_lines(self):
        escaped, raw = parse("= a + 1\n!= b").children
        assert isinstance(escaped, Output) and escaped.escape and escaped.expr == "a + 1"
        assert isinstance(raw, Output) and not raw.escape and raw.expr == "b"

    def test_statement(self):
        node = parse("- for x in items\n  li= x").children[0]
        assert isinstance(node, Statement)
        assert node.code == "for x in items"
        assert isinstance(node.children[0], Element)

    def test_comments(self):
        shown, hidden = parse("// visible\n//- hidden\n  still hidden").children
        assert isinstance(shown, HtmlComment)
        assert shown.text == "visible"
        assert isinstance(hidden, SuppressedComment)
        assert hidden.children == []

    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("doctype", "<!DOCTYPE html>"),
            ("doctype html", "<!DOCTYPE html>"),
            ("doctype 5", "<!DOCTYPE html>"),
            ("DOCTYPE xml", '<?xml version="1.0" encoding="utf-8" ?>'),
            ("doctype custom", "<!DOCTYPE custom>"),
        ],
    )
    def test_doctype(self, line, expected):
        node = parse(line).children[0]
        assert isinstance(node, Text)
        assert node.value == expected
        assert not node.interpolate

    def test_element_with_expression_content(self):
        node = parse("p= user.name").children[0]
        assert node.tag == "p"
        assert node.children == [Output(1, "user.name")]

    def test_line_without_header_is_text(self):
        node = parse("Hello, world").children[0]
        assert isinstance(node, Text)
        assert node.value == "Hello, world"


class TestTextBlocks:
    """Nodes that absorb their nested lines as literal text."""

    def test_dot_block(self):
        p = parse("p.\n  one\n    two\n  three").children[0]
        assert [child.value for child in p.children] == ["one", "  two", "three"]

    def test_dot_block_keeps_inner_blank_lines(self):
        p = parse("p.\n  a\n\n  b\n\n").children[0]
        assert [child.value for child in p.children] == ["a", "", "b"]

    def test_script_absorbs_markup_like_lines(self):
        script = parse("script\n  if (a < b) { go(); }\n  p not an element").children[0]
        assert all(isinstance(child, Text) for child in script.children)
        assert script.children[1].value == "p not an element"

    def test_pipe_text_continuation(self):
        text = parse("| first\n  second").children[0]
        assert text.value == "first"
        assert [child.value for child in text.children] == ["second"]

    def test_block_ends_on_dedent(self):
        tree = parse("p.\n  text\np next")
        assert len(tree.children) == 2
        assert tree.children[1].children[0].value == "next"


class TestFilters:
    """``:name`` content filters."""

    def test_javascript_filter(self):
        script = parse(":javascript\n  var x = 1;\n  go(x);").children[0]
        assert isinstance(script, Element)
        assert script.tag == "script"
        assert script.attributes == (LiteralAttribute("type", "text/javascript"),)
        assert [child.value for child in script.children] == ["var x = 1;", "go(x);"]

    def test_inline_filter_text(self):
        script = parse(":javascript go();").children[0]
        assert [child.value for child in script.children] == ["go();"]

    def test_unknown_filter_is_discarded_with_warning(self):
        collector = _collector()
        node = parse(":markdown\n  # Title", diagnostics=collector).children[0]
        assert isinstance(node, SuppressedComment)
        assert collector.warnings[0].code is ErrorCode.UNKNOWN_FILTER

    def test_custom_filter(self):
        def shout(lines, lineno):
            return Text(lineno, " ".join(lines).upper(), interpolate=False)

        node = parse(":shout\n  hey\n  you", filters={"shout": shout}).children[0]
        assert node.value == "HEY YOU"


class TestRecovery:
    """Bad lines degrade to placeholders and produce warnings."""

    def test_bad_attribute_list(self):
        collector = _collector()
        tree = parse("a(href='x) link\n  nested\np ok", diagnostics=collector)
        assert isinstance(tree.children[0], SuppressedComment)
        assert tree.children[1].tag == "p"
        (warning,) = collector.warnings
        assert warning.code is ErrorCode.ATTRIBUTE_SYNTAX
        assert warning.lineno == 1

    @pytest.mark.parametrize(("keyword", "node_type"), [("include", Include), ("extends", Extends)])
    def test_include_and_extends(self, keyword, node_type):
        collector = _collector()
        node = parse(f"{keyword} layout", diagnostics=collector).children[0]
        assert isinstance(node, node_type)
        assert node.target == "layout"
        assert collector.warnings[0].code is ErrorCode.UNSUPPORTED_INCLUDE

    def test_void_element_content_warns(self):
        collector = _collector()
        parse("br text\nimg\n  p nested", diagnostics=collector)
        codes = [w.code for w in collector.warnings]
        assert codes == [ErrorCode.VOID_ELEMENT_CONTENT, ErrorCode.VOID_ELEMENT_CONTENT]

    def test_warnings_as_errors(self):
        collector = DiagnosticCollector("t", sink=lambda d: None, warnings_as_errors=True)
        with pytest.raises(TemplateSyntaxError) as exc_info:
            parse("include header", diagnostics=collector)
        assert exc_info.value.code is ErrorCode.UNSUPPORTED_INCLUDE
        assert exc_info.value.lineno == 1
