"""
Pydantic models for the Answer Grader system.

These models define the strict schemas for:
- A single grading request and its result
- The questions of an exam submission and their aggregate score

All models are frozen: a result is produced once and never mutated.
"""

from enum import Enum

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)

from answer_grader.rounding import round_half_up

FEEDBACK_MAX_LENGTH = 500


# ==============================================================================
# Grading Models
# ==============================================================================


class GradingMethod(str, Enum):
    """Which path of the engine produced a result."""

    AI = "ai"
    FALLBACK = "fallback"
    REJECTED = "rejected"  # Input failed validation, nothing was graded
    UNAVAILABLE = "unavailable"  # Model failed and fallback is disabled


class GradingRequest(BaseModel):
    """
    One question to grade.

    Built by the engine after input validation, so every instance
    carries non-blank texts and a positive mark allocation.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    question: str = Field(
        ...,
        min_length=1,
        description="The question put to the student",
    )

    expected_answer: str = Field(
        ...,
        min_length=1,
        description="The reference answer from the marking scheme",
    )

    student_answer: str = Field(
        ...,
        min_length=1,
        description="The student's extracted answer text",
    )

    total_marks: int = Field(
        ...,
        gt=0,
        description="Marks allocated to this question",
    )


class GradingResult(BaseModel):
    """
    The outcome of grading one answer.

    marks_earned is bounded by the request's total_marks; the producers
    (fallback grader, response parser, engine) clamp before constructing.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    marks_earned: int = Field(
        ...,
        ge=0,
        description="Marks awarded to the answer",
    )

    accuracy_percent: int = Field(
        ...,
        ge=0,
        le=100,
        description="How closely the answer matches, as a percentage",
    )

    feedback: str = Field(
        ...,
        min_length=1,
        max_length=FEEDBACK_MAX_LENGTH,
        description="Short explanation of the grading decision",
    )

    is_correct: bool = Field(
        ...,
        description="Whether the answer is considered correct",
    )

    grading_method: GradingMethod = Field(
        default=GradingMethod.FALLBACK,
        description="Path of the engine that produced this result",
    )

    @classmethod
    def zero(cls, feedback: str, method: GradingMethod) -> "GradingResult":
        """Build a zero-mark result carrying an explanatory feedback string."""
        return cls(
            marks_earned=0,
            accuracy_percent=0,
            feedback=feedback,
            is_correct=False,
            grading_method=method,
        )


# ==============================================================================
# Submission Models
# ==============================================================================


class QuestionSubmission(BaseModel):
    """A question of an exam together with the student's answer to it."""

    model_config = ConfigDict(frozen=True, strict=True)

    question_id: str = Field(..., min_length=1)
    question: str = Field(...)
    expected_answer: str = Field(...)
    student_answer: str = Field(default="")
    total_marks: int = Field(..., gt=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_answered(self) -> bool:
        """Check if the student wrote anything for this question."""
        return len(self.student_answer.strip()) > 0


class QuestionResult(BaseModel):
    """Grading outcome of one question within a submission."""

    model_config = ConfigDict(frozen=True, strict=True)

    question_id: str
    student_answer: str
    expected_answer: str
    marks_obtained: int = Field(..., ge=0)
    total_marks: int = Field(..., gt=0)
    accuracy_percent: int = Field(..., ge=0, le=100)
    feedback: str = Field(..., min_length=1)
    is_correct: bool
    grading_method: GradingMethod

    @model_validator(mode="after")
    def validate_marks_range(self) -> "QuestionResult":
        """Ensure obtained marks don't exceed the allocation."""
        if self.marks_obtained > self.total_marks:
            raise ValueError(
                f"Obtained marks ({self.marks_obtained}) cannot exceed "
                f"total marks ({self.total_marks})"
            )
        return self


# Lower bound of each letter grade, checked top-down
LETTER_GRADES: tuple[tuple[int, str, str], ...] = (
    (90, "A+", "Excellent"),
    (80, "A", "Very Good"),
    (70, "B", "Good"),
    (60, "C", "Satisfactory"),
    (50, "D", "Pass"),
    (0, "F", "Fail"),
)


class SubmissionResult(BaseModel):
    """
    Aggregate result of a graded exam submission.

    Question results keep the order of the submitted questions.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    question_results: tuple[QuestionResult, ...] = Field(
        ...,
        description="Results for each question, in submission order",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_marks(self) -> int:
        """Sum of the mark allocations."""
        return sum(r.total_marks for r in self.question_results)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def obtained_marks(self) -> int:
        """Sum of the marks awarded."""
        return sum(r.marks_obtained for r in self.question_results)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def score_percent(self) -> int:
        """Overall percentage score, rounded half-up."""
        if self.total_marks == 0:
            return 0
        return round_half_up(self.obtained_marks * 100 / self.total_marks)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def letter_grade(self) -> str:
        """Letter grade for the overall score."""
        return self._grade_band()[1]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> str:
        """Human-readable standing for the overall score."""
        return self._grade_band()[2]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def unanswered(self) -> int:
        """Number of questions left blank."""
        return sum(1 for r in self.question_results if not r.student_answer.strip())

    @computed_field  # type: ignore[prop-decorator]
    @property
    def correct_answers(self) -> int:
        """Number of answered questions graded correct."""
        return sum(1 for r in self.question_results if r.is_correct)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def wrong_answers(self) -> int:
        """Number of answered questions graded incorrect."""
        return len(self.question_results) - self.correct_answers - self.unanswered

    def _grade_band(self) -> tuple[int, str, str]:
        score = self.score_percent
        for band in LETTER_GRADES:
            if score >= band[0]:
                return band
        return LETTER_GRADES[-1]
