"""
Deterministic fallback grader.

Maps a similarity score to a tiered mark award used whenever the
model path is disabled or unusable.
"""

from decimal import Decimal
from typing import NamedTuple

from answer_grader.grading.similarity import SimilarityScorer
from answer_grader.models import GradingMethod, GradingResult
from answer_grader.rounding import clamp, round_half_up

EXACT_MATCH_FEEDBACK = "Exact match - Full marks"


class ScoreBand(NamedTuple):
    """A contiguous similarity range and the award it earns."""

    min_score: int
    fraction: Decimal
    is_correct: bool
    feedback: str


class Award(NamedTuple):
    """Marks and verdict for a similarity score."""

    marks: int
    is_correct: bool
    feedback: str


class FallbackGrader:
    """
    Grades an answer by lexical similarity to the expected answer.

    Bands are checked from the highest threshold down; the first band
    whose min_score the similarity reaches wins.
    """

    BANDS: tuple[ScoreBand, ...] = (
        ScoreBand(95, Decimal("1.00"), True, "Excellent match - Full marks"),
        ScoreBand(85, Decimal("0.90"), True, "Very good match - High marks"),
        ScoreBand(70, Decimal("0.75"), False, "Good match - Partial credit"),
        ScoreBand(50, Decimal("0.50"), False, "Partial match - Some credit"),
        ScoreBand(25, Decimal("0.25"), False, "Minimal match - Limited credit"),
        ScoreBand(0, Decimal("0.00"), False, "Answer does not match expected response"),
    )

    def __init__(self, scorer: SimilarityScorer | None = None):
        """
        Initialize the fallback grader.

        Args:
            scorer: Similarity scorer. A default SimilarityScorer if not provided.
        """
        self._scorer = scorer or SimilarityScorer()

    def grade(self, expected_answer: str, student_answer: str, total_marks: int) -> GradingResult:
        """
        Grade a student answer against the expected answer.

        Args:
            expected_answer: Reference answer text.
            student_answer: Student's answer text.
            total_marks: Marks allocated to the question.

        Returns:
            GradingResult produced by the fallback path.
        """
        expected = self.normalize(expected_answer)
        student = self.normalize(student_answer)

        if student == expected:
            return GradingResult(
                marks_earned=total_marks,
                accuracy_percent=100,
                feedback=EXACT_MATCH_FEEDBACK,
                is_correct=True,
                grading_method=GradingMethod.FALLBACK,
            )

        similarity = self._scorer.score(expected, student)
        award = self.award(similarity, total_marks)

        return GradingResult(
            marks_earned=award.marks,
            accuracy_percent=clamp(similarity, 0, 100),
            feedback=award.feedback,
            is_correct=award.is_correct,
            grading_method=GradingMethod.FALLBACK,
        )

    def award(self, similarity: int, total_marks: int) -> Award:
        """
        Look up the band for a similarity score.

        Args:
            similarity: Similarity score in [0, 100].
            total_marks: Marks allocated to the question.

        Returns:
            Award with marks rounded half-up from the band's fraction.
        """
        band = self.BANDS[-1]
        for candidate in self.BANDS:
            if similarity >= candidate.min_score:
                band = candidate
                break

        marks = round_half_up(Decimal(total_marks) * band.fraction)
        return Award(
            marks=clamp(marks, 0, total_marks),
            is_correct=band.is_correct,
            feedback=band.feedback,
        )

    @staticmethod
    def normalize(text: str) -> str:
        """Lower-case and trim an answer before comparison."""
        return text.lower().strip()
