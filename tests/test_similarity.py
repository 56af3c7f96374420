"""
Unit tests for the edit-distance kernel and the similarity scorer.
"""

import pytest

from answer_grader.grading import SimilarityScorer, levenshtein_distance


class TestLevenshteinDistance:
    """Tests for levenshtein_distance."""

    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [
            ("kitten", "sitting", 3),
            ("flaw", "lawn", 2),
            ("", "abc", 3),
            ("abc", "", 3),
            ("", "", 0),
            ("jupiter", "jupitor", 1),
            ("ocean", "sea", 3),
        ],
    )
    def test_known_distances(self, a: str, b: str, expected: int) -> None:
        """Test distances for well-known pairs."""
        assert levenshtein_distance(a, b) == expected

    @pytest.mark.parametrize("text", ["", "a", "paris", "the water cycle"])
    def test_identity(self, text: str) -> None:
        """Test a string is at distance zero from itself."""
        assert levenshtein_distance(text, text) == 0

    @pytest.mark.parametrize(
        ("a", "b"),
        [("kitten", "sitting"), ("sunday", "saturday"), ("", "xyz"), ("red", "blue")],
    )
    def test_symmetry(self, a: str, b: str) -> None:
        """Test distance does not depend on argument order."""
        assert levenshtein_distance(a, b) == levenshtein_distance(b, a)

    def test_triangle_inequality(self) -> None:
        """Test d(a, c) <= d(a, b) + d(b, c)."""
        a, b, c = "paris", "parts", "party"
        assert levenshtein_distance(a, c) <= levenshtein_distance(a, b) + levenshtein_distance(b, c)


class TestSimilarityScorer:
    """Tests for SimilarityScorer."""

    def test_both_empty(self) -> None:
        """Test two empty answers are identical."""
        assert SimilarityScorer().score("", "") == 100

    @pytest.mark.parametrize(("expected", "student"), [("", "nonempty"), ("nonempty", "")])
    def test_one_empty(self, expected: str, student: str) -> None:
        """Test an empty side scores zero."""
        assert SimilarityScorer().score(expected, student) == 0

    @pytest.mark.parametrize(
        "text",
        ["paris", "a", "a b c", "water evaporates from oceans, forms clouds, and falls as rain"],
    )
    def test_identical_scores_full(self, text: str) -> None:
        """Test identical answers score 100 regardless of length or token size."""
        assert SimilarityScorer().score(text, text) == 100

    def test_single_typo(self) -> None:
        """Test a one-letter typo in a short answer scores in the top band."""
        # word 1.0, length 1.0, char 6/7
        assert SimilarityScorer().score("jupiter", "jupitor") == 97

    def test_paraphrase(self) -> None:
        """Test a long paraphrase relies on word and length similarity only."""
        score = SimilarityScorer().score(
            "plants convert sunlight into energy",
            "plants use sunlight to make energy",
        )
        # word 3/5, length 34/35, char 0 (too long)
        assert score == 59

    def test_partial_answer(self) -> None:
        """Test a partial list answer."""
        score = SimilarityScorer().score("red, blue, yellow", "red, blue")
        # word 2/3, length 9/17, char 9/17
        assert score == 60

    def test_score_bounds(self) -> None:
        """Test scores stay within [0, 100] for unrelated answers."""
        score = SimilarityScorer().score("mitochondria", "x")
        assert 0 <= score <= 100

    def test_word_similarity_substring(self) -> None:
        """Test a long word contained in a student word counts as matched."""
        assert SimilarityScorer().word_similarity("energy", "energy-rich") == 1.0

    def test_word_similarity_short_substring_ignored(self) -> None:
        """Test containment of a word of three letters or fewer does not count."""
        assert SimilarityScorer().word_similarity("cat", "concatenate") == 0.0

    def test_word_similarity_ignores_single_characters(self) -> None:
        """Test single-character tokens are dropped from both sides."""
        assert SimilarityScorer().word_similarity("a b", "a b") == 0.0
        assert SimilarityScorer().word_similarity("a red ball", "red ball") == 1.0

    def test_length_similarity(self) -> None:
        """Test length similarity is one minus relative difference."""
        assert SimilarityScorer().length_similarity("abcd", "ab") == pytest.approx(0.5)

    def test_char_similarity_long_answers(self) -> None:
        """Test character similarity is skipped for answers over 20 characters."""
        long_answer = "a" * 21
        assert SimilarityScorer().char_similarity(long_answer, "a") == 0.0

    def test_char_similarity_short_answers(self) -> None:
        """Test character similarity for short answers."""
        assert SimilarityScorer().char_similarity("abcd", "abcf") == pytest.approx(0.75)
