"""Link markers: build, detect and rewrite ``[[name]]`` in note text.

Detection is a raw substring match by default. It does not parse the host's
link syntax, so ``[[B]]`` inside a code block or inside ``[[[B]]]`` counts as
a link. ``strict=True`` skips those: the marker must not be part of a longer
bracket run and must sit outside inline code and fenced code blocks.
"""

from __future__ import annotations

import re

_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})[^\n]*\n.*?(?:^ {0,3}\1[^\n]*$|\Z)", re.MULTILINE | re.DOTALL)
_INLINE_CODE_RE = re.compile(r"`[^`\n]+`")


def marker(name: str) -> str:
    return f"[[{name}]]"


def _code_spans(content: str) -> list[tuple[int, int]]:
    spans = [m.span() for m in _FENCE_RE.finditer(content)]
    spans.extend(m.span() for m in _INLINE_CODE_RE.finditer(content))
    return spans


def find_link(content: str, name: str, *, strict: bool = False) -> tuple[int, int] | None:
    """Return (start, end) of the first marker for name, or None."""
    token = marker(name)
    if not strict:
        start = content.find(token)
        return None if start < 0 else (start, start + len(token))

    spans = _code_spans(content)
    for m in re.finditer(rf"(?<!\[){re.escape(token)}(?!\])", content):
        if not any(lo <= m.start() < hi for lo, hi in spans):
            return m.span()
    return None


def has_link(content: str, name: str, *, strict: bool = False) -> bool:
    return find_link(content, name, strict=strict) is not None


def prepend(content: str, name: str) -> str:
    """Put a marker for name on top of content, followed by a blank line."""
    return f"{marker(name)}\n\n{content}"


def replace_link(content: str, old_name: str, new_name: str, *, strict: bool = False) -> str:
    """Rewrite the first marker for old_name to point at new_name. No-op if absent."""
    span = find_link(content, old_name, strict=strict)
    if span is None:
        return content
    start, end = span
    return content[:start] + marker(new_name) + content[end:]
