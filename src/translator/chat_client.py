"""HTTP client for the /api/chat translation proxy."""

from typing import Any, Optional

import httpx

from config.logging_config import get_logger
from config.settings import ChatDefaults, settings
from models.models import TranslationRequest
from translator.languages import language_name
from translator.prompt import build_system_prompt

logger = get_logger(__name__)


class TranslationError(Exception):
    """Raised when the proxy rejects a request or returns an unexpected body."""


class ChatProxyClient:
    """httpx-based client that sends translation prompts through the proxy."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        defaults: Optional[ChatDefaults] = None,
    ):
        self.base_url = (base_url or settings.proxy_url).rstrip("/")
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=None)
        self.defaults = defaults or ChatDefaults.from_settings(settings)

    def build_payload(self, request: TranslationRequest) -> dict:
        """Build the ChatPayload for a translation request."""
        source_name = request.source_language_name or language_name(
            request.source_language
        )
        target_name = request.target_language_name or language_name(
            request.target_language
        )
        prompt = build_system_prompt(source_name, target_name)
        return {
            "model": self.defaults.model,
            "messages": [m.model_dump() for m in request.chat_messages(prompt)],
            "temperature": self.defaults.temperature,
            "top_p": self.defaults.top_p,
            "max_tokens": self.defaults.max_tokens,
        }

    async def translate(self, request: TranslationRequest) -> str:
        """Translate one request and return the trimmed model output."""
        response = await self.http_client.post(
            f"{self.base_url}/api/chat", json=self.build_payload(request)
        )
        if not response.is_success:
            error = _error_message(response)
            logger.error(f"Translation API error: {response.status_code} {error}")
            raise TranslationError(f"API error: {error}")

        data = response.json()
        content = _first_message_content(data)
        if content is None:
            logger.error(f"Unexpected API response format: {data}")
            raise TranslationError("Invalid response format from translation service")
        return content.strip()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return response.reason_phrase


def _first_message_content(data: Any) -> Optional[str]:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) and content else None
