from __future__ import annotations

import math
import re
from typing import Sequence

from app.career_path.domains import keyword_in_text, select_domain, strip_level_qualifiers
from app.core.config.career_path import DomainProfile, QualityConfig, load_quality_config
from app.schemas.career_path import CareerPathNode, QualityVerdict

_TOKEN_RE = re.compile(r"[a-z0-9&+]+")
_ROLE_STOPWORDS = {
    "and", "the", "for", "of", "senior", "junior", "lead", "principal", "staff",
    "associate", "head", "chief", "director", "manager", "specialist", "officer",
}
_MODIFIER_PREFIX_RE = re.compile(r"^(junior|jr\.?|mid|mid-level|senior|sr\.?|lead|ii|iii|iv)\b", re.IGNORECASE)


def normalize_title(title: str) -> str:
    return " ".join(title.lower().split())


def minimum_keyword_matches(domain: DomainProfile, config: QualityConfig) -> int:
    if domain.min_keyword_matches <= 0:
        return 0
    return max(1, math.floor(domain.min_keyword_matches * config.keyword_reduction_factor))


def relevance_keywords(domain: DomainProfile, target_role: str) -> tuple[str, ...]:
    if domain.relevance_keywords:
        return domain.relevance_keywords
    tokens = _TOKEN_RE.findall(target_role.lower())
    return tuple(dict.fromkeys(token for token in tokens if len(token) > 2 and token not in _ROLE_STOPWORDS))


def _failure(reason: str, details: str) -> QualityVerdict:
    return QualityVerdict(passed=False, reason=reason, details=details)


def evaluate(
    nodes: Sequence[CareerPathNode],
    target_role: str,
    config: QualityConfig | None = None,
    domain: DomainProfile | None = None,
) -> QualityVerdict:
    cfg = config or load_quality_config()

    if len(nodes) < cfg.min_stages:
        return _failure(
            "insufficient_stages",
            f"Only {len(nodes)} stages provided, need at least {cfg.min_stages}",
        )

    seen: dict[str, int] = {}
    for index, node in enumerate(nodes, start=1):
        key = normalize_title(node.title)
        if key in seen:
            return _failure(
                "titles_not_distinct",
                f"Nodes {seen[key]} and {index} share the title '{node.title}'",
            )
        seen[key] = index

    # The final node is the target itself; only the feeder roles before it count.
    target = strip_level_qualifiers(target_role).lower()
    feeders = nodes[:-1]
    distinct_feeders = sum(1 for node in feeders if strip_level_qualifiers(node.title).lower() != target)
    if distinct_feeders < cfg.min_unique_feeders:
        return _failure(
            "insufficient_unique_feeder_roles",
            f"Only {distinct_feeders} feeder roles differ from the target (need {cfg.min_unique_feeders})",
        )

    modifier_titles = sum(
        1
        for node in feeders
        if strip_level_qualifiers(node.title).lower() == target and _MODIFIER_PREFIX_RE.match(node.title.strip())
    )
    if modifier_titles >= cfg.max_modifier_variants:
        return _failure(
            "too_many_modifier_based_titles",
            f"{modifier_titles} feeder roles reuse the target title with a level modifier "
            f"(limit {cfg.max_modifier_variants})",
        )

    for index, node in enumerate(nodes, start=1):
        if len(node.description.strip()) < cfg.min_description_length:
            return _failure(
                "description_too_short",
                f"Description at node {index} is shorter than {cfg.min_description_length} characters",
            )

    profile = domain or select_domain(target_role)
    required = minimum_keyword_matches(profile, cfg)
    keywords = relevance_keywords(profile, target_role)
    if required > 0 and keywords:
        combined = " ".join(node.description for node in nodes)
        found = [keyword for keyword in keywords if keyword_in_text(keyword, combined)]
        if len(found) < required:
            return _failure(
                "missing_keywords",
                f"Only {len(found)} {profile.domain} keywords found in descriptions (need {required})",
            )

    return QualityVerdict(passed=True)
