import pytest

from utils.markdown_render import (
    BLOCKQUOTE_CLASS,
    H1_CLASS,
    H2_CLASS,
    H3_CLASS,
    HR_CLASS,
    IMG_CLASS,
    INLINE_CODE_CLASS,
    LINK_CLASS,
    OL_ITEM_CLASS,
    P_CLASS,
    PRE_CLASS,
    PRE_CODE_CLASS,
    UL_CLASS,
    UL_ITEM_CLASS,
    escape_html,
    render_markdown,
)


def _p(text: str) -> str:
    return f'<p class="{P_CLASS}">{text}</p>'


@pytest.mark.parametrize("value", ["", None])
def test_empty_input_renders_empty_string(value):
    assert render_markdown(value) == ""


def test_script_tags_are_escaped():
    html = render_markdown("<script>alert(1)</script>")
    assert "<script" not in html
    assert html == _p("&lt;script&gt;alert(1)&lt;/script&gt;")


def test_escape_order_avoids_double_escaping():
    assert escape_html("<a & b>") == "&lt;a &amp; b&gt;"
    assert render_markdown("fish & chips") == _p("fish &amp; chips")


def test_literal_backslash_n_becomes_newline():
    assert render_markdown("one\\ntwo") == _p("one") + "\n" + _p("two")


@pytest.mark.parametrize(
    "source, expected",
    [
        ("# Title", f'<h1 class="{H1_CLASS}">Title</h1>'),
        ("## Section", f'<h2 class="{H2_CLASS}">Section</h2>'),
        ("### Detail", f'<h3 class="{H3_CLASS}">Detail</h3>'),
    ],
)
def test_headers(source, expected):
    assert render_markdown(source) == expected


def test_header_marker_must_start_the_line():
    assert render_markdown("not # a header") == _p("not # a header")


def test_horizontal_rule():
    assert render_markdown("---") == f'<hr class="{HR_CLASS}" />'


def test_emphasis_variants():
    assert render_markdown("**bold**") == '<strong class="text-white">bold</strong>'
    assert render_markdown("*italic*") == "<em>italic</em>"
    assert render_markdown("***both***") == '<strong class="text-white"><em>both</em></strong>'


def test_unmatched_emphasis_is_left_literal():
    assert render_markdown("a ** b") == _p("a ** b")


def test_inline_code():
    assert render_markdown("run `npm install` now") == _p(
        f'run <code class="{INLINE_CODE_CLASS}">npm install</code> now'
    )


def test_fenced_code_block_is_trimmed():
    assert render_markdown("```\ncode\n```") == (
        f'<pre class="{PRE_CLASS}"><code class="{PRE_CODE_CLASS}">code</code></pre>'
    )


def test_fenced_code_block_skips_inline_rules():
    html = render_markdown("```python\n*not em* & <b>\n# not a header\n```")
    assert "<em>" not in html
    assert "<h1" not in html
    assert "*not em* &amp; &lt;b&gt;\n# not a header" in html


def test_fenced_code_block_keeps_blank_lines():
    html = render_markdown("```\na\n\n\n\nb\n```")
    assert "a\n\n\n\nb</code></pre>" in html
    assert P_CLASS not in html


def test_blockquote_matches_escaped_marker():
    assert render_markdown("> quoted") == f'<blockquote class="{BLOCKQUOTE_CLASS}">quoted</blockquote>'


def test_image():
    html = render_markdown("![alt](http://x/y.png)")
    assert html == f'<img src="http://x/y.png" alt="alt" class="{IMG_CLASS}" loading="lazy" />'
    assert "<a " not in html


def test_link_opens_in_new_tab():
    assert render_markdown("see [site](https://example.com)") == _p(
        f'see <a href="https://example.com" class="{LINK_CLASS}" target="_blank" '
        'rel="noopener noreferrer">site</a>'
    )


def test_unordered_list_is_wrapped_once():
    html = render_markdown("- a\n- b")
    assert html == (
        f'<ul class="{UL_CLASS}"><li class="{UL_ITEM_CLASS}">a</li>\n'
        f'<li class="{UL_ITEM_CLASS}">b</li></ul>'
    )
    assert html.count("<ul") == 1


def test_star_bullets_are_list_items():
    assert render_markdown("* one\n* two").count("<li") == 2


def test_ordered_list_items_are_not_wrapped():
    html = render_markdown("1. one\n2. two")
    assert html == f'<li class="{OL_ITEM_CLASS}">one</li>\n<li class="{OL_ITEM_CLASS}">two</li>'
    assert "<ol" not in html
    assert "<ul" not in html


def test_blank_line_runs_collapse():
    html = render_markdown("a\n\n\n\n\nb")
    assert html == _p("a") + "\n\n" + _p("b")
    assert "\n\n\n" not in html


def test_blank_lines_are_not_wrapped():
    assert render_markdown("a\n\nb") == _p("a") + "\n\n" + _p("b")


def test_rendering_is_deterministic():
    source = "# T\n\n- a\n- b\n\n> q\n\n```\nx\n```"
    assert render_markdown(source) == render_markdown(source)


def test_rendering_is_not_idempotent_under_reapplication():
    once = render_markdown("# Title")
    twice = render_markdown(once)
    assert twice != once
    assert "&lt;h1" in twice


def test_mixed_document():
    source = "# Post\\n\\nIntro with **bold**.\\n\\n- one\\n- two\\n\\n> note"
    html = render_markdown(source)
    assert html.startswith(f'<h1 class="{H1_CLASS}">Post</h1>')
    assert _p('Intro with <strong class="text-white">bold</strong>.') in html
    assert html.count("<ul") == 1
    assert html.endswith(f'<blockquote class="{BLOCKQUOTE_CLASS}">note</blockquote>')


def test_image_attributes_cannot_be_broken_out_of():
    html = render_markdown('![x" onerror="alert(1)](http://a/b.png)')
    assert html == (
        f'<img src="http://a/b.png" alt="x&quot; onerror=&quot;alert(1)" class="{IMG_CLASS}" loading="lazy" />'
    )
    assert 'onerror="' not in html


def test_link_href_quotes_are_escaped():
    html = render_markdown('[site](http://a/" onclick="x)')
    assert 'href="http://a/&quot; onclick=&quot;x"' in html
    assert 'onclick="' not in html


def test_link_text_is_not_requoted():
    assert '>say "hi"</a>' in render_markdown('[say "hi"](http://a)')


def test_crlf_line_endings_keep_carriage_return_outside_markup():
    html = render_markdown("# Title\r\n**bold**\r\nplain")
    assert html == (
        f'<h1 class="{H1_CLASS}">Title</h1>\r\n'
        '<strong class="text-white">bold</strong>\r\n'
        + _p("plain")
    )
