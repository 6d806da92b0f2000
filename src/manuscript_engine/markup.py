from __future__ import annotations

import re
from dataclasses import dataclass
from html.parser import HTMLParser
from typing import List

WHITESPACE_RE = re.compile(r"\s+")
MARKUP_HINTS = ("<p>", "<p ", "<div", "<h1")


@dataclass(frozen=True, slots=True)
class TextBlock:
    """Plain text of one block element and the offset of its opening tag."""

    text: str
    position: int


class _MarkupExtractor(HTMLParser):
    BLOCK_TAGS = {"p", "div", "li", "td", "th", "h1", "h2", "h3", "h4", "h5", "h6"}
    BREAK_TAGS = BLOCK_TAGS | {"br", "ul", "ol", "section", "article", "tr", "table"}
    SKIP_TAGS = {"script", "style"}

    def __init__(self, source: str) -> None:
        super().__init__(convert_charrefs=True)
        self._line_starts = [0] + [m.end() for m in re.finditer(r"\n", source)]
        self._chunks: list[str] = []
        self._last_was_break = False
        self._open: list[tuple[str, int, list[str]]] = []
        self._skip_depth = 0
        self.blocks: List[TextBlock] = []

    def _offset(self) -> int:
        line, column = self.getpos()
        return self._line_starts[line - 1] + column

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in self.SKIP_TAGS:
            self._skip_depth += 1
            return
        if tag in self.BREAK_TAGS:
            self._append_break()
        if tag in self.BLOCK_TAGS:
            self._open.append((tag, self._offset(), []))

    def handle_endtag(self, tag: str) -> None:
        if tag in self.SKIP_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
            return
        if tag in self.BREAK_TAGS:
            self._append_break()
        if tag not in self.BLOCK_TAGS:
            return
        for idx in range(len(self._open) - 1, -1, -1):
            open_tag, position, parts = self._open[idx]
            if open_tag == tag:
                del self._open[idx]
                text = WHITESPACE_RE.sub(" ", " ".join(parts)).strip()
                if text:
                    self.blocks.append(TextBlock(text=text, position=position))
                break

    def handle_data(self, data: str) -> None:
        if self._skip_depth:
            return
        text = data.strip()
        if not text:
            return
        if self._chunks and not self._chunks[-1].endswith((" ", "\n")):
            self._chunks.append(" ")
        self._chunks.append(text)
        self._last_was_break = False
        for _, _, parts in self._open:
            parts.append(text)

    def _append_break(self) -> None:
        if not self._chunks or self._last_was_break:
            return
        self._chunks.append("\n")
        self._last_was_break = True

    def get_text(self) -> str:
        raw = "".join(self._chunks)
        lines = [line.strip() for line in raw.splitlines()]
        return "\n\n".join(line for line in lines if line).strip()


def _parse(markup: str) -> _MarkupExtractor:
    parser = _MarkupExtractor(markup)
    parser.feed(markup)
    parser.close()
    return parser


def looks_like_markup(text: str) -> bool:
    return any(hint in text for hint in MARKUP_HINTS)


def markup_to_text(markup: str) -> str:
    """Convert rendered markup to plain text with one paragraph per block element."""
    return _parse(markup).get_text()


def extract_blocks(markup: str) -> List[TextBlock]:
    """Closed block elements with their text, ordered by opening-tag position."""
    blocks = _parse(markup).blocks
    return sorted(blocks, key=lambda block: block.position)
