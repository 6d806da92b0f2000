from __future__ import annotations

import re
from typing import List

from .models import Document, Paragraph, Sentence, Token

WORD_PATTERN = re.compile(r"\S+")
SENTENCE_PATTERN = re.compile(r"[^.!?]+")
PARAGRAPH_BREAK_PATTERN = re.compile(r"\r?\n[ \t]*(?:\r?\n[ \t]*)+")


def tokenize_words(text: str) -> List[Token]:
    """Tokenize text into whitespace-delimited words with character offsets."""
    tokens: List[Token] = []
    for match in WORD_PATTERN.finditer(text):
        tokens.append(
            Token(text=match.group(), start_char=match.start(), end_char=match.end())
        )
    return tokens


def words(text: str) -> List[str]:
    """Split on whitespace and drop empty strings. No stemming is applied."""
    return text.split()


def split_sentences(text: str) -> List[Sentence]:
    """
    Split text on runs of ``.``, ``!`` and ``?``.

    Abbreviations, decimals and quoted punctuation are not special-cased;
    readability calibration depends on this exact behaviour.
    """
    result: List[Sentence] = []
    for match in SENTENCE_PATTERN.finditer(text):
        piece = match.group()
        stripped = piece.strip()
        if not stripped:
            continue
        start = match.start() + (len(piece) - len(piece.lstrip()))
        result.append(
            Sentence(
                text=stripped,
                start_char=start,
                end_char=start + len(stripped),
                word_count=len(stripped.split()),
            )
        )
    return result


def sentences(text: str) -> List[str]:
    return [sentence.text for sentence in split_sentences(text)]


def split_paragraphs(text: str) -> List[Paragraph]:
    """Split on blank-line boundaries, recording offsets and word counts."""
    result: List[Paragraph] = []
    cursor = 0
    boundaries = [(m.start(), m.end()) for m in PARAGRAPH_BREAK_PATTERN.finditer(text)]
    boundaries.append((len(text), len(text)))
    for break_start, break_end in boundaries:
        raw = text[cursor:break_start]
        stripped = raw.strip()
        if stripped:
            start = cursor + (len(raw) - len(raw.lstrip()))
            result.append(
                Paragraph(
                    index=len(result),
                    text=stripped,
                    start_char=start,
                    end_char=start + len(stripped),
                    word_count=len(stripped.split()),
                )
            )
        cursor = break_end
    return result


def paragraphs(text: str) -> List[Paragraph]:
    return split_paragraphs(text)


def build_document(text: str) -> Document:
    """Segment raw text once into an immutable Document."""
    return Document(
        text=text,
        words=tuple(tokenize_words(text)),
        sentences=tuple(split_sentences(text)),
        paragraphs=tuple(split_paragraphs(text)),
    )
