import os
from dataclasses import dataclass

DEFAULT_MODELS = ("gpt-4o", "gpt-4o-mini")


@dataclass(frozen=True)
class AIConfig:
    provider: str
    models: tuple[str, ...]
    timeout_s: float
    max_retries: int
    temperature: float


def _load_models() -> tuple[str, ...]:
    # AI_MODELS is an ordered cascade; AI_MODEL pins a single model.
    raw = os.getenv("AI_MODELS") or os.getenv("AI_MODEL") or ""
    models = [item.strip() for item in raw.split(",") if item.strip()]
    return tuple(dict.fromkeys(models)) or DEFAULT_MODELS


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "openai").strip().lower()
    return AIConfig(
        provider=provider,
        models=_load_models(),
        timeout_s=float(os.getenv("OPENAI_TIMEOUT_S", "45")),
        max_retries=int(os.getenv("OPENAI_MAX_RETRIES", "1")),
        temperature=float(os.getenv("AI_TEMPERATURE", "0.4")),
    )
