import asyncio
import logging
from dataclasses import dataclass

from anthropic import AnthropicError, AsyncAnthropic
from openai import AsyncOpenAI, OpenAIError

from vetnotes.config import (
    ANTHROPIC_API_KEY,
    LLM_MAX_CONCURRENCY,
    LLM_MAX_TOKENS,
    LLM_MODEL,
    LLM_PROVIDER,
    LLM_TIMEOUT_SECONDS,
    OPENAI_API_KEY,
)
from vetnotes.errors import EmptyResponse, ProviderError

logger = logging.getLogger(__name__)

_DEFAULT_MODELS = {
    "anthropic": "claude-3-5-sonnet-20240620",
    "openai": "gpt-4.1",
}


@dataclass(frozen=True)
class GenerationConfig:
    model: str
    temperature: float
    max_tokens: int = LLM_MAX_TOKENS


class LLMClient:
    """Single-model text generation gateway.

    Every call is bounded by ``timeout`` seconds (including the wait for a
    concurrency slot) and at most ``max_concurrency`` calls run at once per
    process. All provider failures surface as ``ProviderError``; a blank
    answer surfaces as ``EmptyResponse``.
    """

    def __init__(
        self,
        provider: str | None = None,
        *,
        timeout: float = LLM_TIMEOUT_SECONDS,
        max_concurrency: int = LLM_MAX_CONCURRENCY,
    ) -> None:
        provider = (provider or LLM_PROVIDER or "auto").lower()
        if provider == "auto":
            if ANTHROPIC_API_KEY:
                provider = "anthropic"
            elif OPENAI_API_KEY:
                provider = "openai"
            else:
                provider = "dummy"
        self.provider = provider
        self.timeout = timeout

        self._anthropic = AsyncAnthropic(api_key=ANTHROPIC_API_KEY) if ANTHROPIC_API_KEY else None
        self._openai = AsyncOpenAI(api_key=OPENAI_API_KEY) if OPENAI_API_KEY else None
        self._semaphore = asyncio.Semaphore(max(1, max_concurrency))

    def available(self) -> bool:
        if self.provider == "anthropic":
            return self._anthropic is not None
        if self.provider == "openai":
            return self._openai is not None
        return False

    @property
    def model(self) -> str:
        if LLM_MODEL:
            return LLM_MODEL
        return _DEFAULT_MODELS.get(self.provider, "")

    def config(self, temperature: float, max_tokens: int | None = None) -> GenerationConfig:
        return GenerationConfig(
            model=self.model,
            temperature=temperature,
            max_tokens=max_tokens or LLM_MAX_TOKENS,
        )

    async def _complete(self, system: str, user: str, config: GenerationConfig) -> str:
        if self.provider == "anthropic":
            message = await self._anthropic.messages.create(
                model=config.model,
                max_tokens=config.max_tokens,
                temperature=config.temperature,
                system=system,
                messages=[{"role": "user", "content": user}],
            )
            raw = ""
            for block in message.content:
                if hasattr(block, "text"):
                    raw += block.text
            return raw

        response = await self._openai.chat.completions.create(
            model=config.model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def _bounded(self, system: str, user: str, config: GenerationConfig) -> str:
        async with self._semaphore:
            return await self._complete(system, user, config)

    async def generate_text(self, system: str, user: str, config: GenerationConfig) -> str:
        if not self.available():
            raise ProviderError("LLM provider unavailable")

        try:
            raw = await asyncio.wait_for(self._bounded(system, user, config), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise ProviderError(f"{self.provider} call timed out after {self.timeout:g}s") from None
        except (AnthropicError, OpenAIError) as exc:
            raise ProviderError(f"{self.provider} call failed: {exc}") from exc

        text = raw.strip()
        if not text:
            raise EmptyResponse(f"{self.provider} returned no text")
        return text


_client: LLMClient | None = None


def get_llm_client() -> LLMClient:
    global _client
    if _client is None:
        _client = LLMClient()
    return _client
