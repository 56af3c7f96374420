"""
Grading Engine Module.

Model-first grading with a deterministic similarity fallback.
"""

from answer_grader.grading.distance import levenshtein_distance
from answer_grader.grading.engine import GradingEngine, ModelAttempt
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
from answer_grader.grading.similarity import SimilarityScorer

__all__ = [
    "FallbackGrader",
    "GradingEngine",
    "GradingError",
    "InvalidInputError",
    "LLMClient",
    "ModelAttempt",
    "ModelClient",
    "ModelUnavailableError",
    "PromptBuilder",
    "ResponseParseError",
    "ResponseParser",
    "SimilarityScorer",
    "levenshtein_distance",
]
