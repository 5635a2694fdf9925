"""Text-generation providers that write one article per call."""
import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional, Type

import aiohttp

from generator.prompts import build_article_prompt
from shared.config import Settings, settings as default_settings
from shared.errors import ProviderError

logger = logging.getLogger(__name__)


class ProviderName(str, Enum):
    """Supported provider selectors."""
    GEMINI = "gemini"
    GROQ = "groq"


class ArticleProvider(ABC):
    """
    Base class for a remote article generator.

    Subclasses only shape the HTTP request and read the response; the
    transport and the mapping of every failure to ProviderError live here.
    No retries are made.
    """

    name: str = ""
    label: str = ""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self.timeout = self.settings.provider_timeout

    async def generate(self, keyword: str, url: str, api_key: str) -> str:
        """Generate the raw text of one article for a keyword/URL pair."""
        prompt = build_article_prompt(
            keyword,
            url,
            min_words=self.settings.article_min_words,
            max_words=self.settings.article_max_words
        )

        logger.info(f"Requesting article from {self.label} for keyword '{keyword}'")
        data = await self._post_json(self._endpoint(), self._headers(api_key), self._payload(prompt))

        try:
            text = self._extract_text(data)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise ProviderError(
                f"{self.label} API error: Malformed response ({e!r})",
                provider_name=self.name
            ) from e

        if not text or not text.strip():
            raise ProviderError(f"{self.label} API error: Empty response", provider_name=self.name)

        return text

    @abstractmethod
    def _endpoint(self) -> str:
        """URL the generation request is posted to."""

    @abstractmethod
    def _headers(self, api_key: str) -> Dict[str, str]:
        """Request headers, including authentication."""

    @abstractmethod
    def _payload(self, prompt: str) -> Dict[str, Any]:
        """JSON request body for a prompt."""

    @abstractmethod
    def _extract_text(self, data: Dict[str, Any]) -> str:
        """Pull the generated text out of a decoded response."""

    async def _post_json(self, url: str, headers: Dict[str, str], payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST a JSON payload and decode the JSON response."""
        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers=headers
            ) as session:
                async with session.post(url, json=payload) as response:
                    if response.status >= 400:
                        detail = await self._error_detail(response)
                        raise ProviderError(
                            f"{self.label} API error: {self._status_message(response.status)}{detail}",
                            provider_name=self.name
                        )

                    return await response.json(content_type=None)

        except asyncio.TimeoutError as e:
            raise ProviderError(
                f"{self.label} API error: Timeout after {self.timeout} seconds",
                provider_name=self.name
            ) from e
        except aiohttp.ClientError as e:
            raise ProviderError(f"{self.label} API error: Network error: {str(e)}", provider_name=self.name) from e
        except ValueError as e:
            raise ProviderError(f"{self.label} API error: Invalid JSON response", provider_name=self.name) from e

    @staticmethod
    def _status_message(status: int) -> str:
        if status in (401, 403):
            return f"Authentication failed (HTTP {status})"
        if status == 429:
            return "Quota or rate limit exceeded (HTTP 429)"
        return f"HTTP Error {status}"

    @staticmethod
    async def _error_detail(response: aiohttp.ClientResponse) -> str:
        """Best-effort error message from a failed response body."""
        try:
            body = await response.json(content_type=None)
            message = body["error"]["message"]
        except (ValueError, KeyError, TypeError, aiohttp.ClientError):
            return ""
        return f" - {message}" if message else ""


class GeminiProvider(ArticleProvider):
    """Google Gemini generateContent API."""

    name = ProviderName.GEMINI.value
    label = "Gemini"

    def _endpoint(self) -> str:
        base_url = self.settings.gemini_base_url.rstrip("/")
        return f"{base_url}/models/{self.settings.gemini_model}:generateContent"

    def _headers(self, api_key: str) -> Dict[str, str]:
        # Header rather than ?key= so the credential never appears in a logged URL
        return {"x-goog-api-key": api_key}

    def _payload(self, prompt: str) -> Dict[str, Any]:
        return {"contents": [{"parts": [{"text": prompt}]}]}

    def _extract_text(self, data: Dict[str, Any]) -> str:
        candidates = data.get("candidates")
        if not candidates:
            reason = (data.get("promptFeedback") or {}).get("blockReason")
            raise ProviderError(
                f"Gemini API error: No candidates returned{f' (blocked: {reason})' if reason else ''}",
                provider_name=self.name
            )
        parts = candidates[0]["content"]["parts"]
        return "".join(part.get("text", "") for part in parts)


class GroqProvider(ArticleProvider):
    """Groq OpenAI-compatible chat completions API."""

    name = ProviderName.GROQ.value
    label = "Groq"

    def _endpoint(self) -> str:
        return f"{self.settings.groq_base_url.rstrip('/')}/chat/completions"

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {api_key}"}

    def _payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "messages": [{"role": "user", "content": prompt}],
            "model": self.settings.groq_model,
            "temperature": self.settings.groq_temperature,
            "max_tokens": self.settings.groq_max_tokens
        }

    def _extract_text(self, data: Dict[str, Any]) -> str:
        return data["choices"][0]["message"]["content"] or ""


PROVIDERS: Dict[ProviderName, Type[ArticleProvider]] = {
    ProviderName.GEMINI: GeminiProvider,
    ProviderName.GROQ: GroqProvider,
}


def get_provider(name: str, settings: Optional[Settings] = None) -> ArticleProvider:
    """Instantiate the provider registered under a selector."""
    try:
        provider_cls = PROVIDERS[ProviderName(name)]
    except (ValueError, KeyError):
        raise ValueError(f"Unknown provider: {name}")
    return provider_cls(settings)
