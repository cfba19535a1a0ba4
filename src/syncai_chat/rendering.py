"""Safe markdown rendering for untrusted model output.

Text is turned into rich renderables only. Raw HTML tags in prose are
escaped so they are displayed literally; code spans and fenced blocks are
passed through untouched because markdown already shows them verbatim.
"""

from __future__ import annotations

import re

from rich.markdown import Markdown

CODE_THEME = "monokai"

_FENCE_RE = re.compile(
    r"(?P<fence>```|~~~)(?P<lang>[^\n`~]*)\n(?P<code>.*?)(?P=fence)",
    re.DOTALL,
)
_INLINE_CODE_RE = re.compile(r"(`+)(.+?)\1", re.DOTALL)
_TAG_OPEN_RE = re.compile(r"<(?=[A-Za-z/!?])")
_INDENTED_CODE_RE = re.compile(r"^(?: {4}|\t)")


def split_message(text: str) -> list[tuple[str, str | None]]:
    """Split *text* into alternating prose and code-block segments.

    Returns a list of ``(content, lang)`` tuples where ``lang`` is ``None``
    for prose segments and the fence language string (possibly empty) for
    code blocks.
    """
    segments: list[tuple[str, str | None]] = []
    cursor = 0
    for match in _FENCE_RE.finditer(text):
        start, end = match.span()
        if start > cursor:
            prose = text[cursor:start]
            if prose.strip():
                segments.append((prose, None))
        segments.append((match.group("code"), match.group("lang").strip()))
        cursor = end
    tail = text[cursor:]
    if tail.strip():
        segments.append((tail, None))
    return segments


def _escape_inline(text: str) -> str:
    parts: list[str] = []
    cursor = 0
    for match in _INLINE_CODE_RE.finditer(text):
        parts.append(_TAG_OPEN_RE.sub(r"\\<", text[cursor : match.start()]))
        parts.append(match.group(0))
        cursor = match.end()
    parts.append(_TAG_OPEN_RE.sub(r"\\<", text[cursor:]))
    return "".join(parts)


def escape_html(prose: str) -> str:
    """Backslash-escape tag openers outside code spans and indented code.

    An indented code block starts with a line indented by four spaces (or a
    tab) after a blank line and runs until the next non-blank line that is
    not indented.
    """
    out: list[str] = []
    pending: list[str] = []
    previous_blank = True
    in_code = False
    for line in prose.splitlines(keepends=True):
        if not line.strip():
            (out if in_code else pending).append(line)
            previous_blank = True
            continue
        if _INDENTED_CODE_RE.match(line) and (previous_blank or in_code):
            if pending:
                out.append(_escape_inline("".join(pending)))
                pending = []
            in_code = True
            out.append(line)
        else:
            in_code = False
            pending.append(line)
        previous_blank = False
    if pending:
        out.append(_escape_inline("".join(pending)))
    return "".join(out)


def sanitize_markdown(text: str) -> str:
    """Return *text* with HTML neutralised in prose and code left verbatim."""
    out: list[str] = []
    cursor = 0
    for match in _FENCE_RE.finditer(text):
        out.append(escape_html(text[cursor : match.start()]))
        out.append(match.group(0))
        cursor = match.end()
    out.append(escape_html(text[cursor:]))
    return "".join(out)


def render_markdown(text: str) -> Markdown:
    """Render GFM-style markdown (emphasis, code, tables) as a rich renderable."""
    return Markdown(sanitize_markdown(text.rstrip()), code_theme=CODE_THEME)
