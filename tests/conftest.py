"""
Pytest configuration and fixtures.

Provides common test fixtures for all test modules.
"""

import json
from typing import Generator
from unittest.mock import MagicMock

import pytest

from answer_grader.config import GradingConfig, Settings, get_settings
from answer_grader.grading import GradingEngine
from answer_grader.models import QuestionSubmission


# ==============================================================================
# Settings Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep host environment variables and cached settings out of tests."""
    for name in (
        "LLM_API_KEY",
        "LLM_BASE_URL",
        "LLM_MODEL",
        "AI_GRADING_ENABLED",
        "AI_GRADING_FALLBACK_ENABLED",
        "AI_GRADING_TIMEOUT_MS",
        "BATCH_MAX_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with mocked values."""
    return Settings(
        _env_file=None,
        llm_api_key="test-api-key-for-testing",
        llm_base_url="https://test.api.local/",
        llm_model="test-model",
        llm_temperature=0.1,
        ai_grading_enabled=True,
        ai_grading_fallback_enabled=True,
        ai_grading_timeout_ms=2000,
    )


@pytest.fixture
def ai_config() -> GradingConfig:
    """Config with both tiers enabled and a short budget."""
    return GradingConfig(ai_grading_enabled=True, fallback_enabled=True, timeout_ms=2000)


@pytest.fixture
def fallback_config() -> GradingConfig:
    """Config with the model tier switched off."""
    return GradingConfig(ai_grading_enabled=False, fallback_enabled=True, timeout_ms=2000)


# ==============================================================================
# Model Response Fixtures
# ==============================================================================


@pytest.fixture
def sample_model_response() -> str:
    """Sample model reply with prose around the JSON object."""
    payload = json.dumps(
        {
            "marksEarned": 8,
            "accuracy": 85,
            "feedback": "Correct concept, minor omission of detail.",
            "isCorrect": True,
        }
    )
    return f"Here is my evaluation:\n{payload}\nLet me know if you need more detail."


# ==============================================================================
# Mock Fixtures
# ==============================================================================


@pytest.fixture
def mock_model_client(sample_model_response: str) -> MagicMock:
    """Stand-in model client returning the sample reply."""
    client = MagicMock()
    client.invoke.return_value = sample_model_response
    return client


@pytest.fixture
def ai_engine(ai_config: GradingConfig, mock_model_client: MagicMock) -> GradingEngine:
    """Engine wired to the mock model client."""
    return GradingEngine(ai_config, model_client=mock_model_client)


@pytest.fixture
def fallback_engine(fallback_config: GradingConfig) -> GradingEngine:
    """Engine that only uses similarity grading."""
    return GradingEngine(fallback_config)


# ==============================================================================
# Submission Fixtures
# ==============================================================================


@pytest.fixture
def sample_questions() -> list[QuestionSubmission]:
    """Three questions: exact, unanswered, misspelt."""
    return [
        QuestionSubmission(
            question_id="q1",
            question="What is the capital of France?",
            expected_answer="Paris",
            student_answer="Paris",
            total_marks=10,
        ),
        QuestionSubmission(
            question_id="q2",
            question="What is 2 + 2?",
            expected_answer="4",
            student_answer="   ",
            total_marks=5,
        ),
        QuestionSubmission(
            question_id="q3",
            question="What is the largest planet?",
            expected_answer="Jupiter",
            student_answer="Jupitor",
            total_marks=5,
        ),
    ]
