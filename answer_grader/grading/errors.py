"""
Failure taxonomy of the grading engine.

None of these reach a caller of GradingEngine.grade_answer; the engine
turns each into a zero-mark result or a fallback grade. They stay
visible to tests through GradingEngine.attempt_model_grading.
"""


class GradingError(Exception):
    """Base class for grading failures."""


class InvalidInputError(GradingError):
    """
    Raised when a request has nothing to grade.

    The feedback string is what the caller sees on the zero-mark result.
    """

    def __init__(self, feedback: str):
        self.feedback = feedback
        super().__init__(feedback)


class ModelUnavailableError(GradingError):
    """Raised when the model call fails in transport or exceeds its time budget."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        elapsed_ms: float | None = None,
    ):
        self.cause = cause
        self.elapsed_ms = elapsed_ms
        super().__init__(message)


class ResponseParseError(GradingError):
    """Raised when the model replied but no usable JSON payload could be read."""

    def __init__(self, message: str, raw_response: str | None = None):
        self.raw_response = raw_response
        super().__init__(message)
