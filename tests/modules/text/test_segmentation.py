"""Unit tests for the text segmentation policies."""

import pytest

from batchgen.errors import InvalidConfiguration
from batchgen.text import segmentation as seg
from batchgen.text.normalization import normalize_whitespace

SCENARIO_TEXT = "Hello world. This is a test! Is this working? Yes it is."

SAMPLE_TEXTS = [
    SCENARIO_TEXT,
    "The quick brown fox jumps over the lazy dog.  It was not amused!\n\nThe dog slept on.",
    "supercalifragilisticexpialidocious is a long word, surely; but it fits: sometimes.",
    "One sentence without a terminator and with plenty of words to wrap around",
    "Line one.\nLine two is longer, and it keeps going for a while.\n\n\nLine three?",
]


def _without_whitespace(value: str) -> str:
    return "".join(value.split())


class TestWordBoundary:
    """Tests for split_words / WordBoundary."""

    def test_breaks_at_last_space(self):
        assert seg.split_words("The quick brown fox jumps", 10) == ["The quick", "brown fox", "jumps"]

    def test_space_right_after_window_fills_chunk(self):
        assert seg.split_words("abcd efgh", 4) == ["abcd", "efgh"]

    def test_force_cuts_without_spaces(self):
        assert seg.split_words("abcdefghij", 4) == ["abcd", "efgh", "ij"]

    def test_normalizes_whitespace(self):
        assert seg.split_words("  one\n\ttwo   three ", 100) == ["one two three"]

    def test_empty_input(self):
        assert seg.split_words("", 10) == []
        assert seg.split_words(" \n\t ", 10) == []

    def test_rejects_non_positive_cap(self):
        with pytest.raises(InvalidConfiguration):
            seg.split_words("text", 0)
        with pytest.raises(InvalidConfiguration):
            seg.WordBoundary(0)

    @pytest.mark.parametrize("max_chars", [1, 5, 13, 40])
    def test_bound_and_coverage(self, max_chars):
        for text in SAMPLE_TEXTS:
            chunks = seg.split_words(text, max_chars)
            assert all(1 <= len(chunk) <= max_chars for chunk in chunks)
            assert _without_whitespace("".join(chunks)) == _without_whitespace(text)


class TestSentenceSplitting:
    """Tests for split_sentences."""

    def test_scenario_sentences(self):
        assert seg.split_sentences(SCENARIO_TEXT) == [
            "Hello world.",
            "This is a test!",
            "Is this working?",
            "Yes it is.",
        ]

    def test_closing_quote_stays_with_sentence(self):
        assert seg.split_sentences('He said "Stop!" Then he left.') == [
            'He said "Stop!"',
            "Then he left.",
        ]

    def test_decimal_numbers_do_not_split(self):
        assert seg.split_sentences("Pi is 3.14 roughly. Done.") == ["Pi is 3.14 roughly.", "Done."]

    def test_ellipsis_is_one_terminator(self):
        assert seg.split_sentences("Wait... what?") == ["Wait...", "what?"]

    def test_abbreviations_are_split(self):
        # Known limitation of the terminator heuristic.
        assert seg.split_sentences("Mr. Smith arrived.") == ["Mr.", "Smith arrived."]

    def test_trailing_text_without_terminator(self):
        assert seg.split_sentences("First. Then no end") == ["First.", "Then no end"]


class TestSentenceBoundary:
    """Tests for pack_sentences / SentenceBoundary."""

    def test_scenario_produces_four_segments(self):
        segments = seg.segment(SCENARIO_TEXT, seg.SentenceBoundary(20))
        assert [item.text for item in segments] == [
            "Hello world.",
            "This is a test!",
            "Is this working?",
            "Yes it is.",
        ]

    def test_packs_sentences_greedily(self):
        segments = seg.segment(SCENARIO_TEXT, seg.SentenceBoundary(40))
        assert [item.text for item in segments] == [
            "Hello world. This is a test!",
            "Is this working? Yes it is.",
        ]

    def test_long_sentence_prefers_secondary_punctuation(self):
        sentence = "Alpha beta gamma, delta epsilon zeta eta theta."
        assert seg.pack_sentences([sentence], 20) == [
            "Alpha beta gamma,",
            "delta epsilon zeta",
            "eta theta.",
        ]

    def test_early_punctuation_falls_back_to_space(self):
        sentence = "Hi, abcdefghij klmnopqrstu vwxyz."
        assert seg.pack_sentences([sentence], 20) == ["Hi, abcdefghij", "klmnopqrstu vwxyz."]

    def test_long_word_is_force_cut(self):
        assert seg.pack_sentences(["abcdefghijkl"], 5) == ["abcde", "fghij", "kl"]

    @pytest.mark.parametrize("max_chars", [1, 5, 13, 40])
    def test_bound_and_coverage(self, max_chars):
        for text in SAMPLE_TEXTS:
            chunks = seg.split_text(text, seg.SentenceBoundary(max_chars))
            assert all(1 <= len(chunk) <= max_chars for chunk in chunks)
            assert _without_whitespace("".join(chunks)) == _without_whitespace(text)

    def test_whitespace_only_input(self):
        assert seg.segment("   \n  ", seg.SentenceBoundary(10)) == []


class TestProportionalParts:
    """Tests for split_proportional / ProportionalParts."""

    PARAGRAPHS = ["aaaaaaaaaa", "bbbbbbbbbb", "cccccccccc", "dddddddddd"]

    def test_balances_equal_paragraphs(self):
        text = "\n\n".join(self.PARAGRAPHS)
        assert seg.split_proportional(text, 2) == [
            "aaaaaaaaaa\n\nbbbbbbbbbb",
            "cccccccccc\n\ndddddddddd",
        ]

    @pytest.mark.parametrize("parts", [1, 2, 3, 4])
    def test_exactly_n_parts(self, parts):
        text = "\n\n".join(self.PARAGRAPHS)
        assert len(seg.split_proportional(text, parts)) == parts

    def test_exactly_n_parts_with_skewed_sizes(self):
        text = "a\n\nb\n\n" + "c" * 100
        assert seg.split_proportional(text, 3) == ["a", "b", "c" * 100]

    def test_target_counts_the_whole_text(self):
        # Surrounding whitespace still counts towards the per-part target.
        text = "aaaa\n\nbbbb\n\ncccc"
        assert seg.split_proportional(text, 2) == ["aaaa", "bbbb\n\ncccc"]
        assert seg.split_proportional(text + " " * 10, 2) == ["aaaa\n\nbbbb", "cccc"]

    def test_fewer_paragraphs_than_parts(self):
        assert seg.split_proportional("first\n\nsecond", 5) == ["first", "second"]

    def test_single_part_keeps_everything(self):
        text = "one\n\n\n  two  \n\nthree"
        assert seg.split_proportional(text, 1) == ["one\n\ntwo\n\nthree"]

    def test_preserves_order_and_content(self):
        text = "\n\n".join(f"Paragraph {idx} " + "x" * (idx * 7 + 1) for idx in range(9))
        parts = seg.split_proportional(text, 4)
        assert len(parts) == 4
        assert "\n\n".join(parts) == text

    def test_rejects_zero_parts(self):
        with pytest.raises(InvalidConfiguration):
            seg.ProportionalParts(0)

    def test_empty_text(self):
        assert seg.split_proportional("  \n\n ", 3) == []


class TestLineBoundary:
    """Tests for split_lines / LineBoundary."""

    def test_one_segment_per_non_blank_line(self):
        text = "first line\n\n  second line  \nthird"
        assert seg.split_lines(text) == ["first line", "second line", "third"]

    def test_long_lines_kept_without_auto_split(self):
        line = "x" * 50
        assert seg.split_lines(line) == [line]

    def test_auto_split_preserves_order(self):
        text = "short\none two three four five\nlast"
        assert seg.segment(text, seg.LineBoundary(auto_split_max_chars=9)) == [
            seg.Segment(index=0, text="short"),
            seg.Segment(index=1, text="one two"),
            seg.Segment(index=2, text="three"),
            seg.Segment(index=3, text="four five"),
            seg.Segment(index=4, text="last"),
        ]

    def test_rejects_invalid_auto_split(self):
        with pytest.raises(InvalidConfiguration):
            seg.LineBoundary(auto_split_max_chars=0)


class TestSegment:
    """Tests for the segment() entry point."""

    def test_indexes_and_char_counts(self):
        segments = seg.segment(SCENARIO_TEXT, seg.SentenceBoundary(20))
        assert [item.index for item in segments] == [0, 1, 2, 3]
        assert all(item.char_count == len(item.text) for item in segments)

    @pytest.mark.parametrize(
        "policy",
        [
            seg.WordBoundary(12),
            seg.SentenceBoundary(30),
            seg.ProportionalParts(2),
            seg.LineBoundary(auto_split_max_chars=15),
        ],
    )
    def test_idempotent(self, policy):
        for text in SAMPLE_TEXTS:
            assert seg.segment(text, policy) == seg.segment(text, policy)

    def test_word_segments_rejoin_to_normalized_text(self):
        text = SAMPLE_TEXTS[1]
        segments = seg.segment(text, seg.WordBoundary(15))
        assert " ".join(item.text for item in segments) == normalize_whitespace(text)

    def test_unknown_policy(self):
        with pytest.raises(InvalidConfiguration):
            seg.segment("text", object())  # type: ignore[arg-type]
