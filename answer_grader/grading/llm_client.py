"""
Model capability for the grading engine.

Defines the narrow interface the engine depends on (prompt in, reply
out) and an implementation over the OpenAI SDK that works with any
OpenAI-compatible endpoint.
"""

import logging
from typing import Protocol, runtime_checkable

from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAI, RateLimitError

from answer_grader.config import Settings, get_settings
from answer_grader.grading.errors import ModelUnavailableError
from answer_grader.grading.prompt_builder import PromptBuilder

logger = logging.getLogger(__name__)


@runtime_checkable
class ModelClient(Protocol):
    """Anything that turns a grading prompt into the model's reply text."""

    def invoke(self, prompt: str) -> str:
        """
        Send a prompt and return the reply.

        Raises:
            ModelUnavailableError: On transport or availability failure.
        """
        ...


class LLMClient:
    """
    Client for an OpenAI-compatible chat completions API.

    Makes exactly one attempt per call. The SDK's own retries are
    switched off and its timeout is set to the grading budget, so a
    failed or slow call goes straight to the engine's fallback.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize the LLM client.

        Args:
            settings: Configuration settings. Uses global settings if not provided.
        """
        self._settings = settings or get_settings()
        self._client = OpenAI(
            api_key=self._settings.llm_api_key,
            base_url=self._settings.llm_base_url,
            timeout=self._settings.ai_grading_timeout_ms / 1000,
            max_retries=0,
        )

    def invoke(self, prompt: str) -> str:
        """
        Send a grading prompt with the evaluator system prompt.

        Args:
            prompt: User prompt built by PromptBuilder.

        Returns:
            The model's reply text.

        Raises:
            ModelUnavailableError: If the call fails or the reply is empty.
        """
        messages: list[dict[str, str]] = [
            {"role": "system", "content": PromptBuilder.get_system_prompt()},
            {"role": "user", "content": prompt},
        ]

        try:
            response = self._client.chat.completions.create(
                model=self._settings.llm_model,
                messages=messages,  # type: ignore[arg-type]
                temperature=self._settings.llm_temperature,
                max_tokens=self._settings.llm_max_tokens,
            )
        except APITimeoutError as e:
            raise ModelUnavailableError("Model request timed out", cause=e) from e
        except RateLimitError as e:
            raise ModelUnavailableError("Model rate limit exceeded", cause=e) from e
        except APIConnectionError as e:
            raise ModelUnavailableError("Connection to model API failed", cause=e) from e
        except APIStatusError as e:
            raise ModelUnavailableError(
                f"Model API error ({e.status_code}): {e.message}", cause=e
            ) from e
        except Exception as e:
            raise ModelUnavailableError(f"Unexpected error: {e}", cause=e) from e

        if response.choices and response.choices[0].message.content:
            return response.choices[0].message.content

        raise ModelUnavailableError("Empty response from model")

    def health_check(self) -> bool:
        """
        Check if the API is reachable.

        Returns:
            True if API is healthy, False otherwise.
        """
        try:
            response = self._client.chat.completions.create(
                model=self._settings.llm_model,
                messages=[{"role": "user", "content": "ping"}],
                max_tokens=5,
            )
            return bool(response.choices)
        except Exception as e:
            logger.warning(f"Model health check failed: {e}")
            return False
