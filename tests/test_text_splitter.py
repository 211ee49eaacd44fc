"""Tests for ingestion.text_splitter."""

import pytest

from ingestion.text_splitter import split_paragraphs


class TestSplitParagraphs:
    def test_empty(self):
        assert split_paragraphs("") == []
        assert split_paragraphs("   \n\n ") == []

    def test_short_text_single_passage(self):
        assert split_paragraphs("A short page.") == ["A short page."]

    def test_small_paragraphs_packed(self):
        text = "First paragraph.\n\nSecond paragraph."
        assert split_paragraphs(text, max_chars=200) == ["First paragraph.\nSecond paragraph."]

    def test_paragraph_boundary_when_full(self):
        text = "First paragraph here.\n\nSecond paragraph here."
        assert split_paragraphs(text, max_chars=25) == [
            "First paragraph here.",
            "Second paragraph here.",
        ]

    def test_long_paragraph_split_at_sentences(self):
        sentences = [f"Sentence number {i} is here." for i in range(20)]
        passages = split_paragraphs(" ".join(sentences), max_chars=60)
        assert all(len(p) <= 60 for p in passages)
        assert all(p.endswith(".") for p in passages)
        assert " ".join(passages) == " ".join(sentences)

    def test_abbreviations_not_split(self):
        text = ("Ask Dr. Smith about the rule today. " * 6).strip()
        passages = split_paragraphs(text, max_chars=60)
        assert passages
        assert all(p.startswith("Ask Dr. Smith") for p in passages)
        assert all(not p.endswith("Dr.") for p in passages)

    def test_long_words_cut(self):
        passages = split_paragraphs("x" * 450, max_chars=200)
        assert [len(p) for p in passages] == [200, 200, 50]

    def test_whitespace_collapsed(self):
        assert split_paragraphs("a   b\nc") == ["a b c"]

    def test_bound_always_holds(self):
        text = "\n\n".join(
            "word " * n + "end. Another sentence follows here." for n in range(1, 80, 7)
        )
        assert all(0 < len(p) <= 120 for p in split_paragraphs(text, max_chars=120))

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            split_paragraphs("text", max_chars=0)
