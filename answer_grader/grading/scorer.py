"""
Response parser for model grading output.

Locates the JSON object in the model's reply and reads it into a
GradingResult. Out-of-range or malformed field values are clamped or
defaulted rather than rejected; only a reply with no readable JSON
object is an error.
"""

import json
import math
from typing import Any

from answer_grader.grading.errors import ResponseParseError
from answer_grader.models import FEEDBACK_MAX_LENGTH, GradingMethod, GradingResult
from answer_grader.rounding import clamp

DEFAULT_FEEDBACK = "AI grading completed"
ELLIPSIS = "..."


class ResponseParser:
    """
    Parses model grading replies.

    Ensures:
    1. A JSON object is present somewhere in the reply
    2. Marks stay within [0, total_marks]
    3. Accuracy stays within [0, 100]
    4. Feedback is non-empty and at most 500 characters
    """

    def parse(self, response: str, total_marks: int) -> GradingResult:
        """
        Parse a model reply into a GradingResult.

        Args:
            response: Raw model reply; may carry prose around the JSON.
            total_marks: Marks allocated to the question.

        Returns:
            GradingResult produced by the AI path.

        Raises:
            ResponseParseError: If no valid JSON object can be read.
        """
        json_str = self._extract_json(response)

        try:
            data = json.loads(json_str)
        except (ValueError, RecursionError) as e:
            raise ResponseParseError(
                f"Invalid JSON in response: {e}",
                raw_response=response,
            ) from e

        if not isinstance(data, dict):
            raise ResponseParseError("Response JSON is not an object", raw_response=response)

        return self._convert(data, total_marks)

    def _extract_json(self, response: str) -> str:
        """
        Take the span from the first '{' to the last '}'.

        Args:
            response: Raw response text.

        Returns:
            Candidate JSON string.
        """
        if not isinstance(response, str) or not response.strip():
            raise ResponseParseError("Empty response", raw_response=response)

        start = response.find("{")
        end = response.rfind("}")
        if start == -1 or end <= start:
            raise ResponseParseError("No JSON object found in response", raw_response=response)

        return response[start : end + 1]

    def _convert(self, data: dict[str, Any], total_marks: int) -> GradingResult:
        marks = self._as_int(data.get("marksEarned"))
        accuracy_value = data.get("accuracy", data.get("accuracyPercent"))
        accuracy = self._as_int(accuracy_value)

        return GradingResult(
            marks_earned=clamp(marks, 0, total_marks),
            accuracy_percent=clamp(accuracy, 0, 100),
            feedback=self._feedback(data.get("feedback")),
            is_correct=self._as_bool(data.get("isCorrect")),
            grading_method=GradingMethod.AI,
        )

    def _as_int(self, value: Any, default: int = 0) -> int:
        """
        Read a numeric field leniently.

        Fractions are truncated toward zero; numeric strings are accepted.
        Anything else yields the default.
        """
        if isinstance(value, bool) or value is None:
            return default
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            text = value.strip()
            try:
                return int(text)
            except ValueError:
                try:
                    value = float(text)
                except ValueError:
                    return default
        if isinstance(value, float):
            if not math.isfinite(value):
                return default
            return int(value)
        return default

    def _as_bool(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() == "true"
        if isinstance(value, (int, float)):
            return value != 0
        return False

    def _feedback(self, value: Any) -> str:
        if value is None:
            return DEFAULT_FEEDBACK

        feedback = value if isinstance(value, str) else str(value)
        if not feedback.strip():
            return DEFAULT_FEEDBACK

        if len(feedback) > FEEDBACK_MAX_LENGTH:
            feedback = feedback[: FEEDBACK_MAX_LENGTH - len(ELLIPSIS)] + ELLIPSIS
        return feedback
