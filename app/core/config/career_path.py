from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

_CAREER_PATH_CONFIG_CACHE: dict[str, Any] | None = None
_CAREER_PATH_CONFIG_PATH = Path(__file__).resolve().parents[3] / "config" / "career_path.yaml"


@dataclass(frozen=True)
class GuardConfig:
    version: int
    action_verbs: frozenset[str]
    trusted_certification_domains: tuple[str, ...]
    salary_range_multiplier: float
    min_years_experience: float
    target_similarity_threshold: float


@dataclass(frozen=True)
class QualityConfig:
    version: int
    min_stages: int
    min_description_length: int
    keyword_reduction_factor: float
    min_unique_feeders: int
    max_modifier_variants: int


@dataclass(frozen=True)
class DomainProfile:
    domain: str
    display_name: str
    keywords: tuple[str, ...]
    quality_keywords: tuple[str, ...]
    min_keyword_matches: int
    prompt_examples: tuple[str, ...]
    skill_recommendations: tuple[str, ...]

    @property
    def relevance_keywords(self) -> tuple[str, ...]:
        return self.quality_keywords or self.keywords


def get_career_path_config() -> dict[str, Any]:
    """Load career path tunables from repo-level config/career_path.yaml and cache them."""
    global _CAREER_PATH_CONFIG_CACHE

    if _CAREER_PATH_CONFIG_CACHE is not None:
        return _CAREER_PATH_CONFIG_CACHE

    if not _CAREER_PATH_CONFIG_PATH.exists():
        raise RuntimeError(
            f"Career path config not found at '{_CAREER_PATH_CONFIG_PATH}'. "
            "Expected file: config/career_path.yaml"
        )

    try:
        import yaml  # type: ignore[import-not-found]
    except Exception as exc:
        raise RuntimeError(
            "Unable to parse career path config because PyYAML is unavailable. "
            "Install dependency: PyYAML."
        ) from exc

    try:
        raw = _CAREER_PATH_CONFIG_PATH.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(
            f"Failed to read career path config '{_CAREER_PATH_CONFIG_PATH}': {exc}"
        ) from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:  # type: ignore[attr-defined]
        raise RuntimeError(
            f"Invalid YAML in career path config '{_CAREER_PATH_CONFIG_PATH}': {exc}"
        ) from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(
            f"Invalid career path config '{_CAREER_PATH_CONFIG_PATH}': expected a top-level mapping."
        )

    _CAREER_PATH_CONFIG_CACHE = parsed
    return _CAREER_PATH_CONFIG_CACHE


def get_config_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'guards.salary_range_multiplier'."""
    if not path:
        return default

    current: Any = get_career_path_config()
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current


def _config_version() -> int:
    return int(get_config_value("version", 1))


def load_guard_config() -> GuardConfig:
    return GuardConfig(
        version=_config_version(),
        action_verbs=frozenset(
            str(verb).strip().lower() for verb in get_config_value("guards.action_verbs", []) or []
        ),
        trusted_certification_domains=tuple(
            str(domain).strip().lower()
            for domain in get_config_value("guards.trusted_certification_domains", []) or []
        ),
        salary_range_multiplier=float(get_config_value("guards.salary_range_multiplier", 1.3)),
        min_years_experience=float(get_config_value("guards.min_years_experience", 0.25)),
        target_similarity_threshold=float(get_config_value("guards.target_similarity_threshold", 0.6)),
    )


def load_quality_config() -> QualityConfig:
    return QualityConfig(
        version=_config_version(),
        min_stages=int(get_config_value("quality.min_stages", 4)),
        min_description_length=int(get_config_value("quality.min_description_length", 15)),
        keyword_reduction_factor=float(get_config_value("quality.keyword_reduction_factor", 0.7)),
        min_unique_feeders=int(get_config_value("quality.min_unique_feeders", 2)),
        max_modifier_variants=int(get_config_value("quality.max_modifier_variants", 2)),
    )


def _domain_from_mapping(raw: dict[str, Any]) -> DomainProfile:
    def _strings(key: str) -> tuple[str, ...]:
        return tuple(str(item).strip() for item in raw.get(key) or [] if str(item).strip())

    return DomainProfile(
        domain=str(raw.get("domain") or "general"),
        display_name=str(raw.get("display_name") or "Career"),
        keywords=tuple(item.lower() for item in _strings("keywords")),
        quality_keywords=tuple(item.lower() for item in _strings("quality_keywords")),
        min_keyword_matches=int(raw.get("min_keyword_matches") or 0),
        prompt_examples=_strings("prompt_examples"),
        skill_recommendations=_strings("skill_recommendations"),
    )


def load_domain_profiles() -> tuple[DomainProfile, ...]:
    raw_domains = get_config_value("domains", []) or []
    return tuple(_domain_from_mapping(item) for item in raw_domains if isinstance(item, dict))


def load_general_domain() -> DomainProfile:
    raw = get_config_value("general_domain", {}) or {}
    return _domain_from_mapping(raw if isinstance(raw, dict) else {})
