from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional, Protocol

from openai import AsyncOpenAI

from lib.errors import ProviderError
from schemas.settings import LLMSettings


logger = logging.getLogger(__name__)

DEFAULT_MODEL = os.getenv("OPENAI_MODEL", "gpt-5.2")
DEFAULT_TEMPERATURE = float(os.getenv("OPENAI_TEMPERATURE", "0.2"))
DEFAULT_SEED = int(os.getenv("OPENAI_SEED", "1337"))


class GenerativeTextModel(Protocol):
    """The single capability the content generators depend on."""

    async def generate(self, prompt: str) -> str:
        ...


class LLMClient:
    """
    Thin async wrapper around OpenAI text generation (Responses API).

    Compatibility handling:
      - Some SDK versions don't accept seed=.
      - Some models/endpoints don't accept temperature=.
    We try with optional params first, then drop the unsupported ones.
    Any other failure surfaces as ProviderError.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        *,
        temperature: Optional[float] = DEFAULT_TEMPERATURE,
        seed: Optional[int] = DEFAULT_SEED,
        max_output_tokens: Optional[int] = None,
        reasoning_effort: str = "low",
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self.client = client or AsyncOpenAI()
        self.model = model
        self.temperature = temperature
        self.seed = seed
        self.max_output_tokens = max_output_tokens
        self.reasoning_effort = reasoning_effort

    @classmethod
    def from_settings(cls, settings: LLMSettings) -> "LLMClient":
        return cls(
            settings.model,
            temperature=settings.temperature,
            seed=settings.seed,
            max_output_tokens=settings.max_output_tokens,
            reasoning_effort=settings.reasoning_effort,
        )

    async def generate(self, prompt: str) -> str:
        try:
            return await self.generate_text(messages=[{"role": "user", "content": prompt}])
        except ProviderError:
            raise
        except Exception as e:
            logger.error("LLM call failed (model=%s): %s", self.model, e)
            raise ProviderError(f"AI generation failed: {e}") from e

    async def generate_text(self, *, messages: List[Dict[str, str]]) -> str:
        base_kwargs: dict = {
            "model": self.model,
            "input": messages,
            "reasoning": {"effort": self.reasoning_effort},
        }
        if self.max_output_tokens is not None:
            base_kwargs["max_output_tokens"] = int(self.max_output_tokens)

        attempt_kwargs = dict(base_kwargs)
        if self.temperature is not None:
            attempt_kwargs["temperature"] = float(self.temperature)

        if self.seed is not None:
            try:
                resp = await self.client.responses.create(**attempt_kwargs, seed=int(self.seed))
                return (resp.output_text or "").strip()
            except TypeError as e:
                # seed not accepted by this SDK version
                msg = str(e).lower()
                if "unexpected keyword argument" not in msg or "seed" not in msg:
                    raise

        try:
            resp = await self.client.responses.create(**attempt_kwargs)
            return (resp.output_text or "").strip()
        except Exception as e:
            msg = str(e).lower()
            if "unsupported parameter" in msg and "temperature" in msg:
                attempt_kwargs.pop("temperature", None)
                resp = await self.client.responses.create(**attempt_kwargs)
                return (resp.output_text or "").strip()
            raise
