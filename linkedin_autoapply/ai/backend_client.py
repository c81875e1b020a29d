"""
HTTP client for the text-generation backend.

The backend receives {token, messages, model, temperature} and answers
{content, usage, model, finish_reason}. Only `content` is consumed.
"""

import logging
import os
from dataclasses import dataclass

import httpx

from linkedin_autoapply.ai.contract import AnswerResponse
from linkedin_autoapply.ai.prompts import USE_DEFAULT, build_messages, temperature_for
from linkedin_autoapply.errors import InsufficientCreditsError, TextGenerationError

log = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TIMEOUT = 120.0


@dataclass(frozen=True)
class BackendConfig:
    url: str
    token: str
    model: str = DEFAULT_MODEL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, env=None):
        """Read AUTOAPPLY_API_URL / AUTOAPPLY_API_TOKEN / AUTOAPPLY_MODEL at call time"""
        env = env if env is not None else os.environ
        url = (env.get("AUTOAPPLY_API_URL") or "").strip()
        token = (env.get("AUTOAPPLY_API_TOKEN") or "").strip()
        if not url or not token:
            raise RuntimeError("Text generation backend not configured. Set AUTOAPPLY_API_URL and AUTOAPPLY_API_TOKEN.")
        return cls(url=url, token=token, model=(env.get("AUTOAPPLY_MODEL") or DEFAULT_MODEL).strip())


class BackendTextGenerator:
    """TextGenerator backed by the HTTP chat-completion endpoint"""

    def __init__(self, config, client=None):
        self.config = config
        self._client = client or httpx.AsyncClient(timeout=config.timeout)
        self._owns_client = client is None

    async def generate(self, request):
        payload = {
            "token": self.config.token,
            "messages": build_messages(request),
            "model": self.config.model,
            "temperature": temperature_for(request),
        }
        log.debug("Backend request (%s): %s", request.kind, request.question[:80])

        try:
            response = await self._client.post(self.config.url, json=payload)
        except httpx.HTTPError as e:
            raise TextGenerationError(f"Backend request failed: {e}") from e

        if response.status_code == 402:
            raise InsufficientCreditsError("Text generation backend reports insufficient credits")
        if response.is_error:
            raise TextGenerationError(f"Backend API error: {response.status_code} {response.text[:200]}")

        try:
            data = response.json()
        except ValueError as e:
            raise TextGenerationError("Backend returned invalid JSON") from e

        if not isinstance(data, dict) or "content" not in data:
            raise TextGenerationError("Invalid response: missing content field")

        content = (data.get("content") or "").strip()
        if not content or content == USE_DEFAULT:
            return AnswerResponse.default()
        return AnswerResponse(text=content, metadata={"usage": data.get("usage"), "model": data.get("model")})

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()
