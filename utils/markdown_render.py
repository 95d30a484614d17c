"""Lightweight Markdown-to-HTML rendering for blog content.

The renderer is an ordered pipeline of regex substitutions. Later passes
match markup emitted by earlier ones (blockquotes match the escaped ``&gt;``
marker, emphasis runs longest delimiter first), so the order of ``_PIPELINE``
must not change.

Entity escaping is the only XSS boundary. Every pass after it emits tags and
attributes from the fixed set below and never copies user text into a tag or
attribute name.
"""

from __future__ import annotations

import re
from typing import Callable, List, Optional, Tuple, Union

PRE_CLASS = "bg-neutral-900 border border-neutral-800 rounded-lg p-4 overflow-x-auto my-6"
PRE_CODE_CLASS = "text-sm text-gray-300 font-mono"
INLINE_CODE_CLASS = "bg-neutral-800 text-red-400 px-1.5 py-0.5 rounded text-sm font-mono"
IMG_CLASS = "rounded-lg my-6 w-full"
LINK_CLASS = "text-red-dot hover:underline"
H1_CLASS = "text-3xl font-display font-bold text-white mt-10 mb-4"
H2_CLASS = "text-2xl font-display font-bold text-white mt-10 mb-4"
H3_CLASS = "text-xl font-display font-semibold text-white mt-8 mb-3"
HR_CLASS = "border-neutral-800 my-8"
STRONG_CLASS = "text-white"
BLOCKQUOTE_CLASS = "border-l-2 border-red-dot pl-4 my-4 text-gray-400 italic"
UL_CLASS = "my-4 space-y-1"
UL_ITEM_CLASS = "text-gray-300 ml-4 list-disc"
OL_ITEM_CLASS = "text-gray-300 ml-4 list-decimal"
P_CLASS = "text-gray-400 leading-relaxed mb-4"

# Raw "<" never survives escaping, so a comment token cannot collide with input.
_CODE_TOKEN = "<!--code:{}-->"
_CODE_TOKEN_RE = re.compile(r"<!--code:(\d+)-->")

# JavaScript's "." and "$" treat \r as a line terminator; these keep CRLF input in step.
_CHAR = r"[^\r\n]"
_EOL = r"(?=\r?$)"

_FENCE_RE = re.compile(r"```([A-Za-z0-9_]*)\n(.*?)```", re.S)
_INLINE_CODE_RE = re.compile(r"`([^`]+)`")
_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_H3_RE = re.compile(rf"^### ({_CHAR}+){_EOL}", re.M)
_H2_RE = re.compile(rf"^## ({_CHAR}+){_EOL}", re.M)
_H1_RE = re.compile(rf"^# ({_CHAR}+){_EOL}", re.M)
_HR_RE = re.compile(rf"^---{_EOL}", re.M)
_BOLD_ITALIC_RE = re.compile(rf"\*\*\*({_CHAR}+?)\*\*\*")
_BOLD_RE = re.compile(rf"\*\*({_CHAR}+?)\*\*")
_ITALIC_RE = re.compile(rf"\*({_CHAR}+?)\*")
_BLOCKQUOTE_RE = re.compile(rf"^&gt; ({_CHAR}+){_EOL}", re.M)
_UL_ITEM_RE = re.compile(rf"^[-*] ({_CHAR}+){_EOL}", re.M)
_LI_RUN_RE = re.compile(rf"(?:<li[^>]*>{_CHAR}*</li>\n?)+")
_OL_ITEM_RE = re.compile(rf"^[0-9]+\. ({_CHAR}+){_EOL}", re.M)
_PARAGRAPH_RE = re.compile(rf"^(?!<[a-zA-Z])((?!^\s*$){_CHAR}+){_EOL}", re.M)
_BLANK_RUN_RE = re.compile(r"\n{3,}")

Replacement = Union[str, Callable[[re.Match], str]]


def _attr(value: str) -> str:
    # Input is already entity-escaped; only the quote can still end the value.
    return value.replace('"', "&quot;")


def _image(match: re.Match) -> str:
    alt, src = _attr(match.group(1)), _attr(match.group(2))
    return f'<img src="{src}" alt="{alt}" class="{IMG_CLASS}" loading="lazy" />'


def _link(match: re.Match) -> str:
    text, href = match.group(1), _attr(match.group(2))
    return f'<a href="{href}" class="{LINK_CLASS}" target="_blank" rel="noopener noreferrer">{text}</a>'


_PIPELINE: List[Tuple[re.Pattern, Replacement]] = [
    (_INLINE_CODE_RE, rf'<code class="{INLINE_CODE_CLASS}">\1</code>'),
    (_IMAGE_RE, _image),
    (_LINK_RE, _link),
    (_H3_RE, rf'<h3 class="{H3_CLASS}">\1</h3>'),
    (_H2_RE, rf'<h2 class="{H2_CLASS}">\1</h2>'),
    (_H1_RE, rf'<h1 class="{H1_CLASS}">\1</h1>'),
    (_HR_RE, f'<hr class="{HR_CLASS}" />'),
    (_BOLD_ITALIC_RE, rf'<strong class="{STRONG_CLASS}"><em>\1</em></strong>'),
    (_BOLD_RE, rf'<strong class="{STRONG_CLASS}">\1</strong>'),
    (_ITALIC_RE, r"<em>\1</em>"),
    (_BLOCKQUOTE_RE, rf'<blockquote class="{BLOCKQUOTE_CLASS}">\1</blockquote>'),
    (_UL_ITEM_RE, rf'<li class="{UL_ITEM_CLASS}">\1</li>'),
    (_LI_RUN_RE, lambda m: f'<ul class="{UL_CLASS}">{m.group(0)}</ul>'),
    # Ordered items are emitted after the <ul> wrap and never get an <ol>.
    (_OL_ITEM_RE, rf'<li class="{OL_ITEM_CLASS}">\1</li>'),
    (_PARAGRAPH_RE, rf'<p class="{P_CLASS}">\1</p>'),
    (_BLANK_RUN_RE, "\n\n"),
]


def escape_html(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _hold_code_blocks(html: str) -> Tuple[str, List[str]]:
    """Swap fenced blocks for tokens so later passes leave their bodies alone."""
    bodies: List[str] = []

    def _fence(match: re.Match) -> str:
        _lang, code = match.group(1), match.group(2)
        bodies.append(code.strip())
        token = _CODE_TOKEN.format(len(bodies) - 1)
        return f'<pre class="{PRE_CLASS}"><code class="{PRE_CODE_CLASS}">{token}</code></pre>'

    return _FENCE_RE.sub(_fence, html), bodies


def _restore_code_blocks(html: str, bodies: List[str]) -> str:
    if not bodies:
        return html
    return _CODE_TOKEN_RE.sub(lambda m: bodies[int(m.group(1))], html)


def render_markdown(text: Optional[str]) -> str:
    """Convert markdown text to an HTML fragment safe to inject into a page."""
    if not text:
        return ""

    html = text.replace("\\n", "\n")
    html = escape_html(html)
    html, code_bodies = _hold_code_blocks(html)
    for pattern, replacement in _PIPELINE:
        html = pattern.sub(replacement, html)
    return _restore_code_blocks(html, code_bodies)
