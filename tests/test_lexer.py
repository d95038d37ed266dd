import pytest

from mdr.markdoc.lexer import (
    CLOSE, FUNCTION, OPEN, SELF_CLOSING, TagSyntaxError, lex_annotation,
)


def test_open_tag_with_attributes():
    tok = lex_annotation('{% li cl="install" id="first" %}')
    assert tok.kind == OPEN
    assert tok.name == "li"
    assert tok.attributes == {"cl": "install", "id": "first"}


def test_closing_tag():
    tok = lex_annotation("{% /ol %}")
    assert tok.kind == CLOSE
    assert tok.name == "ol"
    assert tok.attributes == {}


def test_self_closing_tag():
    tok = lex_annotation('{% partial file="parts/a.p.mdoc" /%}')
    assert tok.kind == SELF_CLOSING
    assert tok.name == "partial"
    assert tok.attributes == {"file": "parts/a.p.mdoc"}


def test_function_call_keeps_spaces_inside_string_argument():
    tok = lex_annotation('{% ref("#steps .configure") %}')
    assert tok.kind == FUNCTION
    assert tok.name == "ref"
    assert tok.args == ("#steps .configure",)


def test_literal_types():
    tok = lex_annotation('{% x a=1 b=2.5 c=true d=false e=null f="q\\"s" %}')
    assert tok.attributes == {"a": 1, "b": 2.5, "c": True, "d": False, "e": None, "f": 'q"s'}


def test_function_without_args_and_with_several_args():
    assert lex_annotation("{% now() %}").args == ()
    assert lex_annotation('{% f("a", 2, true) %}').args == ("a", 2, True)


def test_positions_are_offset_by_start_pos():
    src = "{% /li %}"
    tok = lex_annotation(src, start_pos=10)
    assert (tok.start_pos, tok.end_pos) == (10, 10 + len(src))
    assert tok.full_match == src


@pytest.mark.parametrize("bad", [
    "{% li cl=install %}",      # unquoted value
    "{% /%}",
    "{% 1abc %}",
    "{% li cl= %}",
    "not an annotation",
])
def test_malformed_annotations_raise(bad):
    with pytest.raises(TagSyntaxError):
        lex_annotation(bad)
