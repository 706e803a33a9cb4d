import json
import logging

from openai import AsyncOpenAI

from courtside.config import Settings
from courtside.errors import TranslationFailure

logger = logging.getLogger(__name__)


class LLMClient:
    """Thin async wrapper over the chat-completions API.

    Constructed once per application and passed to the services that need it.
    """

    def __init__(self, client: AsyncOpenAI, model: str = "gpt-4o-mini"):
        self._client = client
        self.model = model

    @classmethod
    def from_settings(cls, settings: Settings) -> "LLMClient":
        client = AsyncOpenAI(
            api_key=settings.OPENAI_API_KEY,
            timeout=settings.LLM_TIMEOUT,
            max_retries=settings.LLM_MAX_RETRIES,
        )
        return cls(client, model=settings.OPENAI_MODEL)

    async def close(self) -> None:
        await self._client.close()

    async def chat_completion(
        self,
        messages: list[dict],
        model: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 2048,
        response_format: dict | None = None,
    ) -> str:
        kwargs = {}
        if response_format is not None:
            kwargs["response_format"] = response_format
        resp = await self._client.chat.completions.create(
            model=model or self.model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )
        if not resp.choices:
            return ""
        return resp.choices[0].message.content or ""

    async def json_completion(
        self,
        messages: list[dict],
        schema: dict,
        name: str = "nba_query",
        temperature: float = 0.1,
    ) -> dict:
        """Request JSON constrained by ``schema`` and decode it.

        Raises ``TranslationFailure`` on an empty or undecodable response.
        """
        content = await self.chat_completion(
            messages=messages,
            temperature=temperature,
            response_format={
                "type": "json_schema",
                "json_schema": {"name": name, "strict": False, "schema": schema},
            },
        )
        if not content.strip():
            raise TranslationFailure("No content returned by the model")
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as exc:
            raise TranslationFailure(f"Model returned invalid JSON: {exc}") from exc
        if not isinstance(parsed, dict):
            raise TranslationFailure("Model returned a non-object JSON value")
        return parsed
