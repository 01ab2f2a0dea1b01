"""
Guard rules that turn a schema-valid model path into trusted career nodes.

Mapping is all-or-nothing: the first hard guard that fails rejects the whole
path and the caller receives a ``MapperRejection`` value describing why.
Certification filtering and salary parsing never reject.

Mapping a list of already-trusted ``CareerPathNode`` objects yields the same
list, so the mapper can be re-applied to stored results.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Literal, Sequence, Union
from urllib.parse import urlparse

from app.career_path.normalizers import parse_salary, parse_years_experience
from app.core.config.career_path import GuardConfig, load_guard_config
from app.schemas.career_path import (
    GROWTH_LEVELS,
    STAGE_LEVELS,
    CareerPathNode,
    MapperFailureReason,
    RawCareerNode,
    RawCareerPath,
    RawCertification,
    RawSkill,
)

_URL_RE = re.compile(r"https?://[^\s)\]]+", re.IGNORECASE)
_DOMAIN_RE = re.compile(r"\b((?:[a-z0-9-]+\.)+[a-z]{2,})\b", re.IGNORECASE)
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class MapperSuccess:
    data: list[CareerPathNode]
    rejected: Literal[False] = False


@dataclass(frozen=True)
class MapperRejection:
    reason: MapperFailureReason
    details: str
    field: str | None = None
    value: Any = None
    rejected: Literal[True] = True


MapperResult = Union[MapperSuccess, MapperRejection]
NodeInput = Union[RawCareerNode, CareerPathNode]


def levenshtein(first: str, second: str) -> int:
    if len(first) < len(second):
        first, second = second, first
    previous = list(range(len(second) + 1))
    for i, left in enumerate(first, start=1):
        current = [i]
        for j, right in enumerate(second, start=1):
            cost = 0 if left == right else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def title_similarity(first: str, second: str) -> float:
    """Edit-distance similarity in [0, 1] on lowercase alphanumerics only."""
    left = _NON_ALNUM_RE.sub("", first.lower())
    right = _NON_ALNUM_RE.sub("", second.lower())
    longest = max(len(left), len(right))
    if longest == 0:
        return 1.0
    return (longest - levenshtein(left, right)) / longest


def _clean_text(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value or "").strip()


def _first_token(title: str) -> str:
    tokens = title.split(" ", 1)
    return re.sub(r"[^a-z]", "", tokens[0].lower()) if tokens else ""


def _hostnames(text: str) -> list[str]:
    urls = _URL_RE.findall(text)
    if not urls:
        return [match.lower() for match in _DOMAIN_RE.findall(text)]
    hosts: list[str] = []
    for url in urls:
        try:
            host = (urlparse(url).hostname or "").lower()
        except ValueError:
            # Malformed netloc such as "https://[broken"; the host is unknown.
            continue
        if host:
            hosts.append(host)
    return hosts


def _is_trusted_host(host: str, trusted: Sequence[str]) -> bool:
    if host.startswith("www."):
        host = host[4:]
    return any(host == domain or host.endswith("." + domain) for domain in trusted)


def filter_certifications(
    certifications: Sequence[Union[str, RawCertification]],
    trusted_domains: Sequence[str],
) -> list[str]:
    kept: list[str] = []
    for certification in certifications:
        if isinstance(certification, RawCertification):
            name = _clean_text(certification.name)
            url = (certification.url or "").strip()
            if not name or not url:
                continue
            label = f"{name} ({url})"
        else:
            label = _clean_text(certification)
        hosts = _hostnames(label)
        if hosts and any(_is_trusted_host(host, trusted_domains) for host in hosts):
            if label not in kept:
                kept.append(label)
    return kept


def _skill_names(skills: Sequence[Union[str, RawSkill]]) -> list[str]:
    names: list[str] = []
    for skill in skills:
        name = _clean_text(skill.name if isinstance(skill, RawSkill) else skill)
        if name and name not in names:
            names.append(name)
    return names


def _map_node(node: NodeInput, position: int, config: GuardConfig) -> CareerPathNode | MapperRejection:
    title = _clean_text(node.title)
    if not title:
        return MapperRejection(
            reason="action_verb_title",
            details=f"Missing role title at node {position}",
            field="title",
            value=node.title,
        )
    if _first_token(title) in config.action_verbs:
        return MapperRejection(
            reason="action_verb_title",
            details=f"Role title '{title}' starts with an action verb at node {position}",
            field="title",
            value=title,
        )

    level = node.level.strip().lower()
    if level not in STAGE_LEVELS:
        return MapperRejection(
            reason="invalid_level",
            details=f"Invalid level '{node.level}' at node {position}",
            field="level",
            value=node.level,
        )

    skills = _skill_names(node.skills)
    if not skills:
        return MapperRejection(
            reason="missing_skills",
            details=f"No skills provided at node {position}",
            field="skills",
        )

    years = parse_years_experience(node.years_experience, floor=config.min_years_experience)
    if years is None:
        return MapperRejection(
            reason="invalid_experience",
            details=f"Invalid experience unit or value '{node.years_experience}' at node {position}",
            field="yearsExperience",
            value=node.years_experience,
        )

    if isinstance(node, CareerPathNode):
        salary_low, salary_high = node.salary_low, node.salary_high
    else:
        salary = parse_salary(node.salary_range, multiplier=config.salary_range_multiplier)
        salary_low = salary.low if salary else None
        salary_high = salary.high if salary else None

    growth = node.growth_potential.strip().lower()

    return CareerPathNode(
        title=title,
        level=level,
        salary_low=salary_low,
        salary_high=salary_high,
        years_experience=years,
        skills=skills,
        certifications=filter_certifications(node.certifications, config.trusted_certification_domains),
        growth_potential=growth if growth in GROWTH_LEVELS else "medium",
        description=_clean_text(node.description),
    )


def map_career_path(
    path: Union[RawCareerPath, Sequence[NodeInput]],
    target_role: str,
    config: GuardConfig | None = None,
) -> MapperResult:
    cfg = config or load_guard_config()
    raw_nodes: Sequence[NodeInput] = path.nodes if isinstance(path, RawCareerPath) else path
    if not raw_nodes:
        return MapperRejection(reason="empty_path", details="Path contains no nodes", field="nodes")

    mapped: list[CareerPathNode] = []
    for index, raw_node in enumerate(raw_nodes, start=1):
        result = _map_node(raw_node, index, cfg)
        if isinstance(result, MapperRejection):
            return result
        mapped.append(result)

    for index in range(1, len(mapped)):
        previous, current = mapped[index - 1], mapped[index]
        if current.years_experience < previous.years_experience:
            return MapperRejection(
                reason="non_monotonic_experience",
                details=(
                    f"Experience drops from {previous.years_experience:g} to "
                    f"{current.years_experience:g} years at node {index + 1}"
                ),
                field="yearsExperience",
                value=current.years_experience,
            )

    final_title = mapped[-1].title
    similarity = title_similarity(final_title, target_role)
    if similarity < cfg.target_similarity_threshold:
        return MapperRejection(
            reason="target_mismatch",
            details=(
                f"Final role '{final_title}' does not match target '{target_role}' "
                f"(similarity {similarity:.2f} < {cfg.target_similarity_threshold:.2f})"
            ),
            field="finalNode.title",
            value=final_title,
        )

    return MapperSuccess(data=mapped)
