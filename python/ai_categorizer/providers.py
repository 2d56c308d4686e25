"""
AI Providers

Interchangeable LLM vendors behind one capability set: is_available() and
categorize(batch, vocabulary). Providers differ only in request and response
shape; response validation is shared.
"""

import json
import logging
import re
from abc import ABC, abstractmethod

import anthropic
import openai

from statement_parser.errors import ProviderCallFailed, ProviderUnavailable

from .prompts import BatchItem, build_system_prompt, build_user_prompt
from .vocabulary import CategoryVocabulary

logger = logging.getLogger(__name__)


class AIProvider(ABC):
    """Base class for AI categorization providers."""

    name: str = "unknown"

    @abstractmethod
    def is_available(self) -> bool:
        """Whether a client is configured."""

    @abstractmethod
    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        """Send one request and return the raw response text.

        Raises:
            ProviderCallFailed: On transport errors or an empty response
        """

    def categorize(
        self,
        batch: list[BatchItem],
        vocabulary: CategoryVocabulary,
    ) -> dict[str, str]:
        """Categorize one batch.

        Args:
            batch: Transactions with call-local ids
            vocabulary: Allowed categories per direction

        Returns:
            Mapping of str(id) to a category valid for the item's direction

        Raises:
            ProviderUnavailable: If no client is configured
            ProviderCallFailed: If the call or response parsing fails
        """
        if not self.is_available():
            raise ProviderUnavailable(f"{self.name} client not configured")

        if not batch:
            return {}

        response_text = self._complete(
            build_system_prompt(vocabulary),
            build_user_prompt(batch),
        )
        result = self.parse_response(response_text, batch, vocabulary)

        logger.debug(f"Categorized {len(batch)} transactions via {self.name}")
        return result

    @staticmethod
    def parse_response(
        response_text: str,
        batch: list[BatchItem],
        vocabulary: CategoryVocabulary,
    ) -> dict[str, str]:
        """Parse the JSON answer and replace invalid categories with defaults."""
        cleaned = response_text.strip()
        cleaned = re.sub(r'^```(?:json)?\s*', '', cleaned)
        cleaned = re.sub(r'\s*```$', '', cleaned)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as e:
            raise ProviderCallFailed(f"Response is not valid JSON: {e}") from e

        if not isinstance(parsed, dict):
            raise ProviderCallFailed("Response is not a JSON object")

        result = {}
        for item in batch:
            key = str(item.id)
            category = parsed.get(key)
            if isinstance(category, str) and vocabulary.is_valid(category.strip(), item.direction):
                result[key] = category.strip()
            else:
                result[key] = vocabulary.default(item.direction)

        return result


class AnthropicProvider(AIProvider):
    """Claude via the Anthropic Messages API."""

    name = "anthropic"
    DEFAULT_MODEL = "claude-3-haiku-20240307"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ):
        """Initialize the provider.

        Args:
            api_key: Anthropic API key; the provider is unavailable without one
            model: Claude model to use
            timeout: Request timeout in seconds, SDK default when None
        """
        self.model = model or self.DEFAULT_MODEL

        if api_key:
            kwargs = {"api_key": api_key}
            if timeout:
                kwargs["timeout"] = timeout
            self.client = anthropic.Anthropic(**kwargs)
            logger.info("Anthropic provider initialized")
        else:
            self.client = None
            logger.warning("ANTHROPIC_API_KEY not configured")

    def is_available(self) -> bool:
        return self.client is not None

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        try:
            message = self.client.messages.create(
                model=self.model,
                max_tokens=4096,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APIError as e:
            logger.error(f"Anthropic categorization failed: {e}")
            raise ProviderCallFailed(f"Anthropic request failed: {e}") from e

        if not message.content:
            raise ProviderCallFailed("Empty response from Anthropic")

        text = getattr(message.content[0], "text", None)
        if not isinstance(text, str):
            raise ProviderCallFailed("Unexpected response type from Anthropic")

        return text


class OpenAIProvider(AIProvider):
    """GPT via the OpenAI Chat Completions API in JSON mode."""

    name = "openai"
    DEFAULT_MODEL = "gpt-4o-mini"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ):
        self.model = model or self.DEFAULT_MODEL

        if api_key:
            kwargs = {"api_key": api_key}
            if timeout:
                kwargs["timeout"] = timeout
            self.client = openai.OpenAI(**kwargs)
            logger.info("OpenAI provider initialized")
        else:
            self.client = None
            logger.warning("OPENAI_API_KEY not configured")

    def is_available(self) -> bool:
        return self.client is not None

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=0.1,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            logger.error(f"OpenAI categorization failed: {e}")
            raise ProviderCallFailed(f"OpenAI request failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ProviderCallFailed("Empty response from OpenAI")

        return content
