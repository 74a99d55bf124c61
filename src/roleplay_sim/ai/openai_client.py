"""Cliente OpenAI para o homeowner simulado e o coaching.

Fornece abstração sobre a API OpenAI, com suporte a:
- Geração da resposta do homeowner (JSON estruturado)
- Dicas de coaching (texto livre)

Timeout e retries são configurados no cliente; erros de API viram
GenerationServiceError. Nenhum fallback: o orquestrador decide.
"""

from __future__ import annotations

import logging
from typing import Any

from openai import APITimeoutError, AsyncOpenAI, OpenAIError

from roleplay_sim.ai import prompts
from roleplay_sim.ai.contracts.generation import GenerationContext, GenerationServiceError
from roleplay_sim.config.settings import Settings
from roleplay_sim.domain.enums import SimStage
from roleplay_sim.domain.models import SimFlags
from roleplay_sim.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


class OpenAIGenerationClient:
    """Gerenciador do cliente OpenAI com timeout e retries configuráveis.

    O AsyncOpenAI é criado sob demanda: a aplicação sobe sem chave em
    desenvolvimento e a falha aparece só na primeira chamada.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        coach_temperature: float = 0.4,
        timeout: float = 30.0,
        max_retries: int = 0,
        client: Any | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._temperature = temperature
        self._coach_temperature = coach_temperature
        self._timeout = timeout
        self._max_retries = max_retries
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> OpenAIGenerationClient:
        return cls(
            settings.openai_api_key,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            coach_temperature=settings.coach_temperature,
            timeout=settings.generation_timeout_seconds,
            max_retries=settings.generation_max_retries,
        )

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                timeout=self._timeout,
                max_retries=self._max_retries,
            )
        return self._client

    async def _complete(
        self,
        operation: str,
        messages: list[dict[str, str]],
        temperature: float,
        **kwargs: Any,
    ) -> str:
        try:
            response = await self._get_client().chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=temperature,
                timeout=self._timeout,
                **kwargs,
            )
        except APITimeoutError as e:
            logger.warning(
                f"{operation}_timeout",
                extra={"timeout_seconds": self._timeout, "error_type": type(e).__name__},
            )
            raise GenerationServiceError(f"{operation} timeout") from e
        except OpenAIError as e:
            logger.warning(
                f"{operation}_error",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            raise GenerationServiceError(f"{operation} failed: {type(e).__name__}") from e

        return response.choices[0].message.content or ""

    async def generate(self, context: GenerationContext) -> str:
        """Gera a resposta bruta (JSON) do homeowner."""
        return await self._complete(
            "homeowner_generation",
            [
                {"role": "system", "content": prompts.get_homeowner_system_prompt(context)},
                {"role": "user", "content": prompts.format_homeowner_input(context)},
            ],
            self._temperature,
            response_format={"type": "json_object"},
        )

    async def coach(self, stage: SimStage, flags: SimFlags, transcript: str) -> str:
        """Gera dica de coaching em texto livre."""
        return await self._complete(
            "coach_generation",
            [
                {"role": "system", "content": prompts.COACH_SYSTEM_PROMPT},
                {"role": "user", "content": prompts.format_coach_input(stage, flags, transcript)},
            ],
            self._coach_temperature,
        )
