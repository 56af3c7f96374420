"""
Lexical similarity scorer for fallback grading.

Blends three signals into a 0-100 score:
- Word overlap between expected and student answers (dominant)
- Length proximity of the two answers
- Character edit similarity, for short answers only

Inputs are expected to be lower-cased and trimmed by the caller.
"""

from typing import ClassVar

from answer_grader.grading.distance import levenshtein_distance
from answer_grader.rounding import clamp, round_half_up


class SimilarityScorer:
    """
    Scores how closely a student answer matches the expected answer.

    The weights and thresholds are empirically chosen and kept as class
    constants so they can be tuned without touching the algorithm.
    """

    WORD_WEIGHT: ClassVar[float] = 0.5
    LENGTH_WEIGHT: ClassVar[float] = 0.3
    CHAR_WEIGHT: ClassVar[float] = 0.2

    # Tokens shorter than this are ignored when matching words
    MIN_WORD_LENGTH: ClassVar[int] = 2

    # Substring matches only count when the contained word is longer than this
    SUBSTRING_MIN_LENGTH: ClassVar[int] = 3

    # Words within this edit distance count as the same word (typos)
    MAX_WORD_DISTANCE: ClassVar[int] = 1

    # Character similarity is only computed when both answers are this short
    CHAR_SIMILARITY_MAX_LENGTH: ClassVar[int] = 20

    def score(self, expected: str, student: str) -> int:
        """
        Score the similarity of two normalized answers.

        Args:
            expected: Normalized expected answer.
            student: Normalized student answer.

        Returns:
            Integer similarity in [0, 100].
        """
        if not expected and not student:
            return 100
        if not expected or not student:
            return 0
        if expected == student:
            return 100

        final = (
            self.word_similarity(expected, student) * self.WORD_WEIGHT
            + self.length_similarity(expected, student) * self.LENGTH_WEIGHT
            + self.char_similarity(expected, student) * self.CHAR_WEIGHT
        )
        return clamp(round_half_up(final * 100), 0, 100)

    def word_similarity(self, expected: str, student: str) -> float:
        """Fraction of expected words that have a match among the student's words."""
        expected_words = self._tokenize(expected)
        student_words = self._tokenize(student)

        if not expected_words:
            return 0.0

        matched = sum(
            1
            for word in expected_words
            if any(self._words_match(word, candidate) for candidate in student_words)
        )
        return matched / len(expected_words)

    def length_similarity(self, expected: str, student: str) -> float:
        """One minus the relative length difference."""
        longest = max(len(expected), len(student))
        if longest == 0:
            return 1.0
        return 1.0 - abs(len(expected) - len(student)) / longest

    def char_similarity(self, expected: str, student: str) -> float:
        """Edit similarity of the whole answers; 0 when either is long."""
        if (
            len(expected) > self.CHAR_SIMILARITY_MAX_LENGTH
            or len(student) > self.CHAR_SIMILARITY_MAX_LENGTH
        ):
            return 0.0

        longest = max(len(expected), len(student))
        if longest == 0:
            return 1.0
        return 1.0 - levenshtein_distance(expected, student) / longest

    def _tokenize(self, text: str) -> list[str]:
        return [word for word in text.split() if len(word) >= self.MIN_WORD_LENGTH]

    def _words_match(self, expected_word: str, student_word: str) -> bool:
        if expected_word == student_word:
            return True
        if len(expected_word) > self.SUBSTRING_MIN_LENGTH and expected_word in student_word:
            return True
        if len(student_word) > self.SUBSTRING_MIN_LENGTH and student_word in expected_word:
            return True
        return levenshtein_distance(expected_word, student_word) <= self.MAX_WORD_DISTANCE
