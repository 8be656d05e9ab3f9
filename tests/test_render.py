"""End-to-end rendering tests: source in, HTML out."""

import pytest

import fastjade
from fastjade import Markup, TemplateCompileError, TemplateRuntimeError
from fastjade.environment.exceptions import ErrorCode

from .conftest import render


class TestElements:
    def test_text_content(self, env):
        assert render(env, "p Hello") == "<p>Hello</p>\n"

    def test_plain_text_is_not_escaped(self, env):
        assert render(env, "p a < b") == "<p>a < b</p>\n"

    def test_nested(self, env):
        source = "ul\n  li one\n  li two"
        assert render(env, source) == "<ul>\n<li>one</li>\n<li>two</li>\n</ul>\n"

    def test_selectors(self, env):
        assert render(env, 'div#main.a.b(class="c") x') == '<div id="main" class="a b c">x</div>\n'
        assert render(env, ".note hi") == '<div class="note">hi</div>\n'

    def test_void_elements(self, env):
        assert render(env, "br") == "<br/>\n"
        assert render(env, 'img(src="a.png")') == '<img src="a.png"/>\n'

    def test_text_block(self, env):
        assert render(env, "p.\n  line one\n  line two") == "<p>\nline one\nline two\n</p>\n"

    def test_pipe_text(self, env):
        assert render(env, "| first\n  second") == "first\nsecond\n"

    def test_script_content_is_raw(self, env):
        source = "script\n  if (a < b) { go(); }"
        assert render(env, source) == "<script>if (a < b) { go(); }</script>\n"

    def test_javascript_filter(self, env):
        expected = '<script type="text/javascript">var x = 1;</script>\n'
        assert render(env, ":javascript\n  var x = 1;") == expected

    def test_doctype(self, env):
        assert render(env, "doctype html\nhtml") == "<!DOCTYPE html>\n<html></html>\n"

    def test_comments(self, env):
        assert render(env, "// note\n//- hidden\np x") == "<!-- note -->\n<p>x</p>\n"

    def test_tags_are_lowercased(self, env):
        assert render(env, "DIV hi") == "<div>hi</div>\n"
        assert render(env, "Br") == "<br/>\n"

    def test_void_element_drops_nested_lines(self, env):
        assert render(env, "img\n  p child") == "<img/>\n"

    def test_elements_under_output_line(self, env):
        assert render(env, "= x\n  p a\n  p b", x=1) == "1<p>a</p>\n<p>b</p>\n\n"


class TestExpressions:
    def test_escaped_output(self, env):
        assert render(env, "p= name", name="<b>") == "<p>&lt;b&gt;</p>\n"

    def test_raw_output(self, env):
        assert render(env, "p!= name", name="<b>") == "<p><b></p>\n"

    def test_markup_is_not_escaped(self, env):
        assert render(env, "p= m", m=Markup("<i>x</i>")) == "<p><i>x</i></p>\n"

    def test_interpolation(self, env):
        source = "p Hi #{user['name']}, !{badge}"
        assert render(env, source, user={"name": "<Ada>"}, badge="<em>1</em>") == (
            "<p>Hi &lt;Ada&gt;, <em>1</em></p>\n"
        )

    def test_undefined_names_render_marker(self, env):
        assert render(env, "p= missing") == "<p>undefined</p>\n"
        assert render(env, "p Hi #{missing}") == "<p>Hi undefined</p>\n"

    def test_builtins_available(self, env):
        assert render(env, "p= len(items)", items=[1, 2, 3]) == "<p>3</p>\n"

    def test_css_helper(self, env):
        assert render(env, "p= css({'marginTop': '1px'})") == "<p>margin-top:1px</p>\n"


class TestAttributes:
    def test_expression_attribute(self, env):
        assert render(env, "a(href=url) Home", url="/x?a=1&b=2") == (
            '<a href="/x?a=1&amp;b=2">Home</a>\n'
        )

    @pytest.mark.parametrize(
        ("context", "expected"),
        [
            ({"flag": True}, '<input type="checkbox" checked/>\n'),
            ({"flag": False}, '<input type="checkbox"/>\n'),
            ({"flag": None}, '<input type="checkbox"/>\n'),
            ({}, '<input type="checkbox"/>\n'),
        ],
    )
    def test_boolean_values(self, env, context, expected):
        source = 'input(type="checkbox", checked=flag)'
        assert env.from_string(source).render(context) == expected

    def test_interpolated_literal(self, env):
        assert render(env, 'a(href="/u/#{uid}") x', uid=5) == '<a href="/u/5">x</a>\n'

    def test_style_and_class(self, env):
        source = "span(style=s, class=cls)"
        assert render(env, source, s={"fontSize": "2em"}, cls=["a", "b"]) == (
            '<span style="font-size:2em" class="a b"></span>\n'
        )


class TestControlFlow:
    def test_if_else(self, env):
        template = env.from_string("- if user\n  p= user\n- else\n  p Anonymous")
        assert template.render(user="Ada") == "<p>Ada</p>\n"
        assert template.render(user=None) == "<p>Anonymous</p>\n"

    def test_elif(self, env):
        template = env.from_string(
            "- if n > 0\n  | positive\n- elif n < 0\n  | negative\n- else\n  | zero"
        )
        assert [template.render(n=n) for n in (5, -5, 0)] == [
            "positive\n",
            "negative\n",
            "zero\n",
        ]

    def test_for_loop(self, env):
        template = env.from_string("ul\n  - for item in items\n    li= item")
        assert template.render(items=["a", "<b>"]) == (
            "<ul>\n<li>a</li>\n<li>&lt;b&gt;</li>\n</ul>\n"
        )

    def test_for_else(self, env):
        template = env.from_string("- for x in items\n  li= x\n- else\n  li empty")
        assert template.render(items=[]) == "<li>empty</li>\n"

    def test_try_except(self, env):
        template = env.from_string(
            "- try\n  p= 1 // d\n- except ZeroDivisionError\n  p oops"
        )
        assert template.render(d=1) == "<p>1</p>\n"
        assert template.render(d=0) == "<p>oops</p>\n"

    def test_def(self, env):
        source = "- def greet(who)\n  p Hello #{who}\n- greet('Ada')\n- greet('Bob')"
        assert render(env, source) == "<p>Hello Ada</p>\n<p>Hello Bob</p>\n"

    def test_assignment(self, env):
        assert render(env, "- total = price * 2\np= total", price=3) == "<p>6</p>\n"

    def test_trailing_colons_are_accepted(self, env):
        assert render(env, "- if True:\n  p yes\n- else:\n  p no") == "<p>yes</p>\n"

    def test_statement_inside_element(self, env):
        source = "ul\n  - for i in range(2)\n    li= i\n  li last"
        assert render(env, source) == "<ul>\n<li>0</li>\n<li>1</li>\n<li>last</li>\n</ul>\n"


class TestContext:
    def test_kwargs_override_mapping(self, env):
        assert env.from_string("p= x").render({"x": 1}, x=2) == "<p>2</p>\n"

    def test_call_renders(self, env):
        assert env.from_string("p= x")({"x": 1}) == "<p>1</p>\n"

    def test_context_cannot_shadow_helpers(self, env):
        assert render(env, "p= x", x="<", _e=str) == "<p>&lt;</p>\n"

    def test_renders_are_independent(self, env):
        template = env.from_string("- y = x + 1\np= y")
        assert template.render(x=1) == "<p>2</p>\n"
        assert template.render(x=10) == "<p>11</p>\n"

    def test_context_variable(self, env):
        assert render(env, "p= context['a']", a=7) == "<p>7</p>\n"

    def test_context_key_named_context(self, env):
        assert render(env, "p= context", context="hello") == "<p>hello</p>\n"

    def test_statement_updates_context_value(self, env):
        template = env.from_string("- total = total + 1\np= total")
        assert template.render({"total": 1}) == "<p>2</p>\n"

    def test_default_when_missing(self, env):
        template = env.from_string("- if count is None\n  - count = 0\np= count")
        assert template.render(count=5) == "<p>5</p>\n"
        assert template.render(count=None) == "<p>0</p>\n"

    def test_assigned_name_read_before_assignment(self, env):
        assert render(env, "p= x\n- x = 1") == "<p>undefined</p>\n"

    def test_loop_variable_starts_from_context(self, env):
        source = "p= item\n- for item in items\n  p= item"
        assert render(env, source, item="ctx", items=[1, 2]) == (
            "<p>ctx</p>\n<p>1</p>\n<p>2</p>\n"
        )


class TestErrors:
    def test_runtime_error_carries_line(self, env):
        template = env.from_string("div\n  p= user.name", name="profile.jade")
        with pytest.raises(TemplateRuntimeError) as exc_info:
            template.render(user=None)
        error = exc_info.value
        assert error.lineno == 2
        assert error.line == "  p= user.name"
        assert error.template_name == "profile.jade"
        assert "AttributeError" in error.message
        assert isinstance(error.__cause__, AttributeError)

    def test_runtime_error_in_attribute(self, env):
        template = env.from_string("p\n  a(href=1/zero) x")
        with pytest.raises(TemplateRuntimeError) as exc_info:
            template.render(zero=0)
        assert exc_info.value.lineno == 2

    def test_compile_error(self, env, seen):
        with pytest.raises(TemplateCompileError) as exc_info:
            env.from_string("p ok\np= user.", name="bad.jade")
        assert exc_info.value.lineno == 2
        assert "p= user." in str(exc_info.value)
        assert seen[-1].code is ErrorCode.INVALID_EXPRESSION

    def test_orphan_else(self, env):
        with pytest.raises(TemplateCompileError) as exc_info:
            env.from_string("p x\n- else\n  p y")
        assert exc_info.value.code is ErrorCode.ORPHAN_CLAUSE
        assert exc_info.value.lineno == 2


class TestModuleLevel:
    def test_compile_and_render(self):
        template = fastjade.compile("p= x")
        assert template.render(x=1) == "<p>1</p>\n"
        assert fastjade.render(template, {"x": 2}) == "<p>2</p>\n"

    def test_render_source(self):
        assert fastjade.render("p= x", x=3) == "<p>3</p>\n"

    def test_python_source(self):
        template = fastjade.compile("p= x")
        assert "def render(_context):" in template.python_source
