from __future__ import annotations

import logging
import os
from typing import Optional

from openai import OpenAI, OpenAIError

from app.ai.types import ModelError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You produce strictly valid JSON for apps to consume."


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 45.0,
        max_retries: int = 1,
        temperature: float = 0.4,
        max_output_tokens: int = 2000,
    ):
        self._model = model
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        self._response_format = (os.getenv("OPENAI_RESPONSE_FORMAT") or "json").strip().lower()
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        self._client = OpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            timeout=float(os.getenv("OPENAI_TIMEOUT_S", str(timeout_s))),
            max_retries=int(os.getenv("OPENAI_MAX_RETRIES", str(max_retries))),
        )

    @property
    def model_name(self) -> str:
        return self._model

    def complete(self, prompt: str) -> str:
        create_kwargs = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "max_completion_tokens": self._max_output_tokens,
        }
        # gpt-5 models only accept the default temperature.
        if not self._model.startswith("gpt-5"):
            create_kwargs["temperature"] = self._temperature
        if self._response_format == "json":
            create_kwargs["response_format"] = {"type": "json_object"}

        try:
            response = self._client.chat.completions.create(**create_kwargs)
        except OpenAIError as exc:
            logger.warning("openai_completion_failed model=%s prompt_len=%s: %s", self._model, len(prompt), exc)
            raise ModelError(str(exc), code=type(exc).__name__) from exc

        content = response.choices[0].message.content if response.choices else ""
        return content or ""
