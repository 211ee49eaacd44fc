"""
Plain-text splitter for page text

Splits the text of one PDF page into short passages of at most max_chars
characters, preferring paragraph, then sentence, then word boundaries.
Small neighbouring paragraphs are packed together so passages stay close to
the target size.

Design:
- Regex-based sentence boundaries (.!? followed by whitespace and an
  uppercase letter, digit, quote or bracket)
- Common abbreviations protected from false splits
- Words longer than max_chars are cut hard; no passage exceeds max_chars

Usage:
    from ingestion.text_splitter import split_paragraphs

    passages = split_paragraphs(page_text, max_chars=200)
"""

import re

_DOT_PLACEHOLDER = "\x00"

_ABBREVIATIONS = {
    "e.g", "i.e", "etc", "vs", "cf", "approx", "fig", "no", "vol",
    "dr", "mr", "mrs", "ms", "prof", "inc", "ltd", "jr", "sr", "st",
}

_ABBREV_PATTERN = re.compile(
    r"(?<!\w)(?:" + "|".join(re.escape(a) for a in sorted(_ABBREVIATIONS)) + r")\.(?=\s)",
    re.IGNORECASE,
)

_SENTENCE_BOUNDARY = re.compile(r'(?<=[.!?])\s+(?=[A-Z0-9"\'(\[“])')

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def _split_sentences(paragraph: str) -> list[str]:
    protected = _ABBREV_PATTERN.sub(
        lambda m: m.group().replace(".", _DOT_PLACEHOLDER), paragraph
    )
    parts = _SENTENCE_BOUNDARY.split(protected)
    return [p.replace(_DOT_PLACEHOLDER, ".").strip() for p in parts if p.strip()]


def _split_long(sentence: str, max_chars: int) -> list[str]:
    """Break an over-long sentence at word boundaries, cutting words if needed."""
    pieces: list[str] = []
    current = ""
    for word in sentence.split():
        while len(word) > max_chars:
            if current:
                pieces.append(current)
                current = ""
            pieces.append(word[:max_chars])
            word = word[max_chars:]
        if not word:
            continue
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= max_chars:
            current = candidate
        else:
            pieces.append(current)
            current = word
    if current:
        pieces.append(current)
    return pieces


def _paragraph_units(paragraph: str, max_chars: int) -> list[str]:
    if len(paragraph) <= max_chars:
        return [paragraph]
    units: list[str] = []
    for sentence in _split_sentences(paragraph):
        if len(sentence) <= max_chars:
            units.append(sentence)
        else:
            units.extend(_split_long(sentence, max_chars))
    return units


def split_paragraphs(text: str, max_chars: int = 200) -> list[str]:
    """
    Split text into passages of at most max_chars characters.

    Args:
        text: Page text; blank lines separate paragraphs.
        max_chars: Upper bound on passage length.

    Returns:
        Passages in reading order. Empty/whitespace input returns an empty list.
    """
    if max_chars < 1:
        raise ValueError("max_chars must be positive")
    if not text or not text.strip():
        return []

    passages: list[str] = []
    current = ""
    for raw_paragraph in _PARAGRAPH_BREAK.split(text.strip()):
        paragraph = " ".join(raw_paragraph.split())
        if not paragraph:
            continue
        separator = "\n"
        for unit in _paragraph_units(paragraph, max_chars):
            candidate = f"{current}{separator}{unit}" if current else unit
            if len(candidate) <= max_chars:
                current = candidate
            else:
                passages.append(current)
                current = unit
            separator = " "
    if current:
        passages.append(current)
    return passages
