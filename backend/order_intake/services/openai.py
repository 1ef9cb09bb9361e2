"""Cliente centralizado para el endpoint compatible con OpenAI (Groq)."""

from __future__ import annotations

from functools import lru_cache

from openai import AsyncOpenAI

from order_intake.services.prompts import render_transcript_message


@lru_cache(maxsize=4)
def get_openai_client(api_key: str | None, base_url: str) -> AsyncOpenAI:
    """Crea un cliente asíncrono reutilizable por credencial y endpoint."""
    if not api_key:
        msg = "Extraction API key is not configured"
        raise RuntimeError(msg)
    return AsyncOpenAI(api_key=api_key, base_url=base_url)


class OpenAICompletionCapability:
    """Invoca `chat.completions` exigiendo un objeto JSON como respuesta."""

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str,
        model: str,
        temperature: float = 0.2,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._model = model
        self._temperature = temperature

    async def complete(self, *, instruction: str, transcript: str) -> str | None:
        """Envía instrucción y transcripción; retorna el contenido crudo del modelo."""
        client = get_openai_client(self._api_key, self._base_url)
        response = await client.chat.completions.create(
            model=self._model,
            temperature=self._temperature,
            messages=[
                {"role": "system", "content": instruction},
                {"role": "user", "content": render_transcript_message(transcript)},
            ],
            response_format={"type": "json_object"},
        )
        return response.choices[0].message.content
