"""
Exam submission grading.

Grades every question of a submission concurrently and aggregates the
results into an overall score and letter grade.
"""

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from answer_grader.grading import GradingEngine
from answer_grader.models import (
    GradingMethod,
    QuestionResult,
    QuestionSubmission,
    SubmissionResult,
)

logger = logging.getLogger(__name__)

UNANSWERED_FEEDBACK = "No answer provided"


class SubmissionGrader:
    """
    Grades the questions of one exam submission in parallel.

    Questions are independent: each is graded on its own worker, and a
    slow or failed model call on one never holds up or aborts another
    beyond its own time budget.
    """

    def __init__(self, engine: GradingEngine, max_workers: int = 8):
        """
        Initialize the submission grader.

        Args:
            engine: Engine used for every question.
            max_workers: Upper bound on concurrently graded questions.
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._engine = engine
        self._max_workers = max_workers

    def grade_submission(self, questions: Sequence[QuestionSubmission]) -> SubmissionResult:
        """
        Grade all questions and aggregate the score.

        Args:
            questions: The submission's questions with the student's answers.

        Returns:
            SubmissionResult with per-question results in input order.
        """
        if not questions:
            return SubmissionResult(question_results=())

        workers = min(self._max_workers, len(questions))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="grade") as executor:
            results = tuple(executor.map(self.grade_question, questions))

        submission = SubmissionResult(question_results=results)
        logger.info(
            f"Submission graded: {submission.obtained_marks}/{submission.total_marks} "
            f"({submission.score_percent}%), grade={submission.letter_grade}"
        )
        return submission

    def grade_question(self, question: QuestionSubmission) -> QuestionResult:
        """Grade one question; blank answers are not sent to the engine."""
        if not question.is_answered:
            return QuestionResult(
                question_id=question.question_id,
                student_answer="",
                expected_answer=question.expected_answer,
                marks_obtained=0,
                total_marks=question.total_marks,
                accuracy_percent=0,
                feedback=UNANSWERED_FEEDBACK,
                is_correct=False,
                grading_method=GradingMethod.REJECTED,
            )

        result = self._engine.grade_answer(
            question.question,
            question.expected_answer,
            question.student_answer,
            question.total_marks,
        )
        logger.debug(
            f"Graded question {question.question_id}: {result.marks_earned}/"
            f"{question.total_marks} marks ({result.accuracy_percent}%)"
        )

        return QuestionResult(
            question_id=question.question_id,
            student_answer=question.student_answer,
            expected_answer=question.expected_answer,
            marks_obtained=min(result.marks_earned, question.total_marks),
            total_marks=question.total_marks,
            accuracy_percent=result.accuracy_percent,
            feedback=result.feedback,
            is_correct=result.is_correct,
            grading_method=result.grading_method,
        )
