from app.ai.config import AIConfig, load_ai_config
from app.ai.types import ModelClient

from app.ai.providers.openai_provider import OpenAIProvider


def _build_client(cfg: AIConfig, model: str) -> ModelClient:
    if cfg.provider == "openai":
        return OpenAIProvider(
            model=model,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.max_retries,
            temperature=cfg.temperature,
        )

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")


def get_model_clients() -> list[ModelClient]:
    """One client per configured model, in cascade order."""
    cfg = load_ai_config()
    return [_build_client(cfg, model) for model in cfg.models]
