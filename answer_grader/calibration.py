"""
Calibration battery for the grading engine.

A fixed set of question/expected/student cases, each with the range of
marks a sensible grader should award. Ranges rather than exact values
are checked because the model path is not deterministic.
"""

import logging
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from answer_grader.grading import GradingEngine

logger = logging.getLogger(__name__)


class BatteryCase(BaseModel):
    """One calibration case and its accepted marks range."""

    model_config = ConfigDict(frozen=True, strict=True)

    name: str = Field(..., min_length=1)
    question: str
    expected_answer: str
    student_answer: str
    total_marks: int = Field(..., gt=0)
    min_marks: int = Field(..., ge=0)
    max_marks: int = Field(..., ge=0)

    @model_validator(mode="after")
    def validate_range(self) -> "BatteryCase":
        """Ensure the accepted range is ordered and within the allocation."""
        if self.min_marks > self.max_marks or self.max_marks > self.total_marks:
            raise ValueError(
                f"Invalid marks range [{self.min_marks}, {self.max_marks}] "
                f"for total {self.total_marks}"
            )
        return self


class BatteryCaseResult(BaseModel):
    """How the engine did on one calibration case."""

    model_config = ConfigDict(frozen=True, strict=True)

    case: BatteryCase
    marks_earned: int
    accuracy_percent: int
    feedback: str
    passed: bool


class BatteryReport(BaseModel):
    """Summary of a battery run."""

    model_config = ConfigDict(frozen=True, strict=True)

    results: tuple[BatteryCaseResult, ...]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        """Number of cases run."""
        return len(self.results)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def passed(self) -> int:
        """Number of cases within their accepted range."""
        return sum(1 for r in self.results if r.passed)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def failed(self) -> int:
        """Number of cases outside their accepted range."""
        return self.total - self.passed

    @computed_field  # type: ignore[prop-decorator]
    @property
    def success_rate(self) -> float:
        """Percentage of cases passed."""
        if self.total == 0:
            return 0.0
        return self.passed / self.total * 100


DEFAULT_CASES: tuple[BatteryCase, ...] = (
    BatteryCase(
        name="Exact Match",
        question="What is the capital of France?",
        expected_answer="Paris",
        student_answer="Paris",
        total_marks=10,
        min_marks=10,
        max_marks=10,
    ),
    BatteryCase(
        name="Case Insensitive",
        question="What is the capital of France?",
        expected_answer="Paris",
        student_answer="paris",
        total_marks=10,
        min_marks=9,
        max_marks=10,
    ),
    BatteryCase(
        name="Synonyms",
        question="What is a large body of water?",
        expected_answer="Ocean",
        student_answer="Sea",
        total_marks=10,
        min_marks=7,
        max_marks=10,
    ),
    BatteryCase(
        name="Paraphrasing",
        question="Explain photosynthesis",
        expected_answer="Plants convert sunlight into energy",
        student_answer="Plants use sunlight to make energy",
        total_marks=10,
        min_marks=7,
        max_marks=10,
    ),
    BatteryCase(
        name="Partial Answer",
        question="List three primary colors",
        expected_answer="Red, Blue, Yellow",
        student_answer="Red, Blue",
        total_marks=10,
        min_marks=5,
        max_marks=8,
    ),
    BatteryCase(
        name="Minor Spelling Error",
        question="What is the largest planet?",
        expected_answer="Jupiter",
        student_answer="Jupitor",
        total_marks=10,
        min_marks=7,
        max_marks=10,
    ),
    BatteryCase(
        name="Math Expression",
        question="What is 2 + 2?",
        expected_answer="4",
        student_answer="Four",
        total_marks=5,
        min_marks=4,
        max_marks=5,
    ),
    BatteryCase(
        name="Wrong Answer",
        question="What is the capital of France?",
        expected_answer="Paris",
        student_answer="London",
        total_marks=10,
        min_marks=0,
        max_marks=2,
    ),
    BatteryCase(
        name="Empty Answer",
        question="What is the capital of France?",
        expected_answer="Paris",
        student_answer="",
        total_marks=10,
        min_marks=0,
        max_marks=0,
    ),
    BatteryCase(
        name="Complex Answer",
        question="Explain the water cycle",
        expected_answer="Water evaporates from oceans, forms clouds, and falls as rain",
        student_answer="Water goes up from the sea, makes clouds, then comes down as precipitation",
        total_marks=15,
        min_marks=10,
        max_marks=15,
    ),
)


def run_battery(
    engine: GradingEngine,
    cases: Sequence[BatteryCase] = DEFAULT_CASES,
) -> BatteryReport:
    """
    Grade every calibration case and check the results.

    A case passes when its marks fall in the accepted range, accuracy is
    within [0, 100], and feedback is non-blank.

    Args:
        engine: Engine under calibration.
        cases: Cases to run. Defaults to the built-in battery.

    Returns:
        BatteryReport with per-case outcomes.
    """
    logger.info(f"Starting grading battery with {len(cases)} cases")
    results: list[BatteryCaseResult] = []

    for case in cases:
        result = engine.grade_answer(
            case.question,
            case.expected_answer,
            case.student_answer,
            case.total_marks,
        )

        marks_ok = case.min_marks <= result.marks_earned <= case.max_marks
        accuracy_ok = 0 <= result.accuracy_percent <= 100
        feedback_ok = bool(result.feedback.strip())
        passed = marks_ok and accuracy_ok and feedback_ok

        logger.info(
            f"Case '{case.name}': {'PASSED' if passed else 'FAILED'} - "
            f"Marks: {result.marks_earned}/{case.total_marks}, "
            f"Accuracy: {result.accuracy_percent}%"
        )
        results.append(
            BatteryCaseResult(
                case=case,
                marks_earned=result.marks_earned,
                accuracy_percent=result.accuracy_percent,
                feedback=result.feedback,
                passed=passed,
            )
        )

    report = BatteryReport(results=tuple(results))
    logger.info(f"Battery completed: {report.passed}/{report.total} passed")
    return report
