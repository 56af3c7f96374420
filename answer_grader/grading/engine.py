"""
Grading engine - the core orchestrator.

Validates the request, tries the model under a time budget, and falls
back to similarity grading on any model failure. Every call returns a
GradingResult; failures become zero-mark results with feedback.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import NamedTuple

from answer_grader.config import GradingConfig, Settings, get_settings
from answer_grader.grading.errors import (
    GradingError,
    InvalidInputError,
    ModelUnavailableError,
    ResponseParseError,
)
from answer_grader.grading.fallback import FallbackGrader
from answer_grader.grading.llm_client import LLMClient, ModelClient
from answer_grader.grading.prompt_builder import PromptBuilder
from answer_grader.grading.scorer import ResponseParser
from answer_grader.models import GradingMethod, GradingRequest, GradingResult

logger = logging.getLogger(__name__)

SERVICE_UNAVAILABLE_FEEDBACK = "Grading service unavailable"


class ModelAttempt(NamedTuple):
    """Outcome of the model tier: a parsed result or the reason it failed."""

    result: GradingResult | None
    failure: GradingError | None
    elapsed_ms: float

    @property
    def succeeded(self) -> bool:
        """Check if the model produced a usable result."""
        return self.result is not None


class GradingEngine:
    """
    Main grading engine with model-first, similarity-fallback grading.

    Holds no mutable state between calls, so one engine can grade
    many questions concurrently.
    """

    def __init__(
        self,
        config: GradingConfig | None = None,
        model_client: ModelClient | None = None,
        fallback_grader: FallbackGrader | None = None,
    ):
        """
        Initialize the grading engine.

        Args:
            config: Grading switches. Defaults to GradingConfig().
            model_client: Model capability. Required when AI grading is enabled.
            fallback_grader: Similarity grader. A default FallbackGrader if not provided.

        Raises:
            ValueError: If AI grading is enabled without a model client.
        """
        self._config = config or GradingConfig()
        if self._config.ai_grading_enabled and model_client is None:
            raise ValueError("A model client is required when AI grading is enabled")

        self._model_client = model_client
        self._fallback_grader = fallback_grader or FallbackGrader()
        self._response_parser = ResponseParser()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "GradingEngine":
        """
        Build an engine from application settings.

        Creates the OpenAI-compatible client only when AI grading is enabled.
        """
        settings = settings or get_settings()
        config = settings.grading_config()
        client = LLMClient(settings) if config.ai_grading_enabled else None
        return cls(config, model_client=client)

    @property
    def config(self) -> GradingConfig:
        """The engine's immutable configuration."""
        return self._config

    def grade_answer(
        self,
        question: str | None,
        expected_answer: str | None,
        student_answer: str | None,
        total_marks: int,
    ) -> GradingResult:
        """
        Grade a student answer. Never raises.

        Args:
            question: The question put to the student.
            expected_answer: The reference answer.
            student_answer: The student's answer text.
            total_marks: Marks allocated to the question.

        Returns:
            GradingResult; zero marks with explanatory feedback when the
            input is invalid or no grading path is available.
        """
        try:
            request = self.validate(question, expected_answer, student_answer, total_marks)
        except InvalidInputError as e:
            return GradingResult.zero(e.feedback, GradingMethod.REJECTED)

        return self.grade(request)

    def grade(self, request: GradingRequest) -> GradingResult:
        """
        Grade an already-validated request.

        Args:
            request: The grading request.

        Returns:
            GradingResult from the model, the fallback, or a zero-mark
            "unavailable" result.
        """
        if self._config.ai_grading_enabled:
            attempt = self.attempt_model_grading(request)
            if attempt.result is not None:
                logger.info(
                    f"AI grading successful: {attempt.result.accuracy_percent}% accuracy, "
                    f"{attempt.result.marks_earned} marks in {attempt.elapsed_ms:.0f}ms"
                )
                return attempt.result

            logger.warning(f"AI grading failed: {attempt.failure}")
            if not self._config.fallback_enabled:
                return GradingResult.zero(SERVICE_UNAVAILABLE_FEEDBACK, GradingMethod.UNAVAILABLE)

        logger.info("Using fallback grading system")
        return self._fallback_grader.grade(
            request.expected_answer,
            request.student_answer,
            request.total_marks,
        )

    @staticmethod
    def validate(
        question: str | None,
        expected_answer: str | None,
        student_answer: str | None,
        total_marks: int,
    ) -> GradingRequest:
        """
        Check that there is something to grade.

        Returns:
            The validated GradingRequest.

        Raises:
            InvalidInputError: With the feedback to show for the rejection.
        """
        if question is None or not question.strip():
            logger.warning("Question is null or empty")
            raise InvalidInputError("Invalid question")

        if expected_answer is None or not expected_answer.strip():
            logger.warning("Expected answer is null or empty")
            raise InvalidInputError("No expected answer provided")

        if student_answer is None or not student_answer.strip():
            raise InvalidInputError("No answer provided")

        if isinstance(total_marks, bool) or not isinstance(total_marks, int) or total_marks <= 0:
            logger.warning(f"Invalid total marks: {total_marks}")
            raise InvalidInputError("Invalid marking scheme")

        return GradingRequest(
            question=question,
            expected_answer=expected_answer,
            student_answer=student_answer,
            total_marks=total_marks,
        )

    def attempt_model_grading(self, request: GradingRequest) -> ModelAttempt:
        """
        Make the single model attempt for a request.

        Timeout, transport failure and unparseable replies all come back
        as a failed ModelAttempt; nothing is raised.

        Args:
            request: The grading request.

        Returns:
            ModelAttempt carrying either the parsed result or the failure.
        """
        if self._model_client is None:
            return ModelAttempt(None, ModelUnavailableError("No model client configured"), 0.0)

        logger.debug(f"Attempting AI grading for question: {request.question[:50]}")
        prompt = PromptBuilder.build_grading_prompt(
            request.question,
            request.expected_answer,
            request.student_answer,
            request.total_marks,
        )

        start = time.monotonic()
        try:
            reply = self._invoke_with_timeout(prompt)
            elapsed_ms = (time.monotonic() - start) * 1000
            if elapsed_ms > self._config.timeout_ms:
                raise ModelUnavailableError(
                    f"Model call exceeded {self._config.timeout_ms}ms budget",
                    elapsed_ms=elapsed_ms,
                )
            result = self._response_parser.parse(reply, request.total_marks)
        except ResponseParseError as e:
            logger.debug(f"Unparseable model reply: {e.raw_response!r}")
            return ModelAttempt(None, e, (time.monotonic() - start) * 1000)
        except ModelUnavailableError as e:
            elapsed_ms = (time.monotonic() - start) * 1000
            if e.elapsed_ms is None:
                e.elapsed_ms = elapsed_ms
            logger.error(f"AI grading failed after {elapsed_ms:.0f}ms: {e}")
            return ModelAttempt(None, e, elapsed_ms)

        return ModelAttempt(result, None, (time.monotonic() - start) * 1000)

    def _invoke_with_timeout(self, prompt: str) -> str:
        """
        Run the model call on a worker thread bounded by the time budget.

        On expiry the worker is abandoned; its late reply is discarded.
        """
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="model-call")
        try:
            future = executor.submit(self._model_client.invoke, prompt)  # type: ignore[union-attr]
            try:
                return future.result(timeout=self._config.timeout_seconds)
            except FuturesTimeoutError as e:
                future.cancel()
                raise ModelUnavailableError(
                    f"Model call timed out after {self._config.timeout_ms}ms", cause=e
                ) from e
            except ModelUnavailableError:
                raise
            except Exception as e:
                raise ModelUnavailableError(f"Model call failed: {e}", cause=e) from e
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
