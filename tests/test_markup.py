import pytest

from jiraboard.jira.markup import (
    adf_text,
    inline_wiki,
    raw_description,
    raw_string,
    wiki_markup_to_html,
)

UL_OPEN = '<ul style="list-style-type:disc;padding-left:1.5em;margin:0.3em 0">'
UL2_OPEN = '<ul style="list-style-type:circle;padding-left:1.25em;margin:0.1em 0">'
OL_OPEN = '<ol style="list-style-type:decimal;padding-left:1.5em;margin:0.3em 0">'
LI = '<li style="margin:0.15em 0">'


def test_empty_input():
    assert wiki_markup_to_html("") == ""


def test_horizontal_rule():
    assert wiki_markup_to_html("----") == "<hr>"


def test_blank_line():
    assert wiki_markup_to_html("   ") == "<br>"


def test_carriage_returns_normalized():
    assert wiki_markup_to_html("a\r\nb\rc") == wiki_markup_to_html("a\nb\nc")


def test_paragraph():
    out = wiki_markup_to_html("hello")
    assert out.startswith("<p>")
    assert out.endswith("</p>")
    assert "hello" in out


def test_bullet_list():
    out = wiki_markup_to_html("* one\n* two")
    assert out.startswith(UL_OPEN)
    assert out.count(LI) == 2
    assert out.endswith("</ul>")
    assert out.count(UL_OPEN) == 1


def test_nested_list_closed_before_outer_item():
    out = wiki_markup_to_html("* a\n** b\n* c")
    assert UL2_OPEN in out
    assert out.count("</ul>") == 2
    assert out.index(UL2_OPEN) < out.index("</ul>") < out.rindex(LI)


def test_ordered_then_bullet_switches_lists():
    out = wiki_markup_to_html("# a\n* b")
    assert out.startswith(OL_OPEN)
    assert out.index("</ol>") < out.index(UL_OPEN)
    assert out.endswith("</ul>")


def test_list_closed_by_paragraph():
    out = wiki_markup_to_html("* a\ntext")
    assert out.index("</ul>") < out.index("<p>")


def test_heading():
    out = wiki_markup_to_html("h2. Title")
    assert out.startswith('<h2 style="font-weight:bold;font-size:1.25em;')
    assert out.endswith("</h2>")
    assert "Title" in out


def test_empty_heading_takes_next_line():
    out = wiki_markup_to_html("h1. \nNext\nafter")
    assert out == wiki_markup_to_html("h1. Next") + wiki_markup_to_html("after")


def test_inline_bold():
    out = inline_wiki("*bold*")
    assert out.startswith('<strong style="font-weight:bold">')
    assert out.endswith("</strong>")
    assert "*" not in out


def test_inline_italic_and_mono():
    assert inline_wiki("_it_").startswith("<em>")
    assert inline_wiki("{{code}}").startswith("<code>")
    assert inline_wiki("{{code}}").endswith("</code>")


def test_inline_link():
    assert (
        inline_wiki("[Docs|https://example.com/docs]")
        == '<a href="https://example.com/docs" target="_blank" rel="noopener">Docs</a>'
    )


def test_inline_escapes_html():
    assert inline_wiki("<b>") == "&lt;b&gt;"
    assert inline_wiki("\"'") == "&#34;&#39;"


def test_adf_text_paragraph():
    doc = {
        "type": "doc",
        "content": [{"type": "paragraph", "content": [{"type": "text", "text": "Hello world"}]}],
    }
    assert adf_text(doc).endswith("\n")
    assert raw_description(doc) == "Hello world"


def test_adf_text_lists_add_line_breaks():
    doc = {
        "type": "doc",
        "content": [
            {
                "type": "bulletList",
                "content": [
                    {"type": "listItem", "content": [{"type": "text", "text": "a"}]},
                    {"type": "listItem", "content": [{"type": "text", "text": "b"}]},
                ],
            }
        ],
    }
    text = adf_text(doc)
    assert text.count("\n") == 3
    assert text.replace("\n", "") == "ab"


def test_adf_ignores_non_dict_children():
    doc = {"type": "paragraph", "content": ["junk", {"type": "text", "text": "ok"}]}
    assert adf_text(doc).strip() == "ok"


@pytest.mark.parametrize("value,expected", [("x", "x"), (5, ""), (None, ""), ({"a": 1}, "")])
def test_raw_string(value, expected):
    assert raw_string(value) == expected


def test_raw_description_variants():
    assert raw_description(None) == ""
    assert raw_description([1]) == ""
    assert raw_description("----") == "<hr>"