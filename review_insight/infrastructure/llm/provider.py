"""
Text Generation Provider - LLM Access over HTTP
================================================

ARCHITECTURAL DECISION:
- Uses the OpenRouter chat-completions API (OpenAI-compatible)
- The provider only turns a prompt into raw text; prompts and parsing
  live in ReviewAnalyzer
- Non-success responses raise UpstreamError; nothing is retried here

EXTENSIBILITY:
- To use a different model: set OPENROUTER_MODEL
- To use another vendor: subclass TextGenerationProvider
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import requests

from ..config import get_settings
from ...domain.errors import UpstreamError

logger = logging.getLogger(__name__)


class TextGenerationProvider(ABC):
    """Black-box text generation: prompt in, raw text out."""

    @abstractmethod
    def generate(self, prompt: str, temperature: float, max_output_tokens: int) -> str:
        """
        Generate a completion for ``prompt``.

        Raises:
            UpstreamError: the service returned a non-success response.
        """
        ...


class OpenRouterProvider(TextGenerationProvider):
    """
    OpenRouter chat-completions client.

    USAGE:
        provider = OpenRouterProvider()
        text = provider.generate("Say hi", temperature=0.2, max_output_tokens=16)
    """

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 session: Optional[requests.Session] = None):
        settings = get_settings()
        self._api_key = api_key if api_key is not None else settings.llm.api_key
        self._api_url = settings.llm.api_url
        self._model = model or settings.llm.model
        self._timeout = settings.llm.timeout_seconds
        self._session = session or requests.Session()

        if not self._api_key:
            logger.warning("No OPENROUTER_API_KEY set. Review analysis will fail upstream.")

    def generate(self, prompt: str, temperature: float, max_output_tokens: int) -> str:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": "https://github.com/review-insight",  # Required by OpenRouter
            "X-Title": "Review Insight",
        }

        payload = {
            "model": self._model,
            "messages": [
                {"role": "user", "content": prompt}
            ],
            "temperature": temperature,
            "max_tokens": max_output_tokens,
        }

        try:
            response = self._session.post(
                self._api_url,
                headers=headers,
                json=payload,
                timeout=self._timeout
            )
            response.raise_for_status()
            data = response.json()

        except requests.Timeout as e:
            logger.warning("LLM API timeout")
            raise UpstreamError(f"LLM API timeout: {e}", status="TIMEOUT") from e

        except requests.HTTPError as e:
            status = str(e.response.status_code) if e.response is not None else "HTTP_ERROR"
            logger.warning(f"LLM API error: {e}")
            raise UpstreamError(f"LLM API error: {e}", status=status) from e

        except requests.RequestException as e:
            logger.warning(f"LLM API error: {e}")
            raise UpstreamError(f"LLM API error: {e}", status="HTTP_ERROR") from e

        content = self._extract_response_content(data)
        if not content:
            logger.warning(f"LLM API returned no content: {str(data)[:200]}")
            raise UpstreamError("LLM API returned an empty completion", status="EMPTY")

        logger.debug(f"LLM returned {len(content)} characters")
        return content

    def _extract_response_content(self, data: dict) -> str:
        """Extract text content from API response."""
        try:
            choices = data.get("choices", [])
            if choices:
                message = choices[0].get("message", {})
                return (message.get("content") or "").strip()
        except (AttributeError, IndexError, TypeError):
            pass
        return ""
