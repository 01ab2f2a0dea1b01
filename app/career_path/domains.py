from __future__ import annotations

import re
from functools import lru_cache

from app.core.config.career_path import DomainProfile, load_domain_profiles, load_general_domain

_LEVEL_PREFIX_RE = re.compile(
    r"^(senior|sr\.?|junior|jr\.?|lead|principal|staff|associate|assistant|apprentice|"
    r"mid-level|midlevel|mid level|entry-level|entry level)\s+",
    re.IGNORECASE,
)
_ROMAN_SUFFIX_RE = re.compile(r"\b(i{1,3}|iv|v)\s*$", re.IGNORECASE)
_LOWERCASE_WORDS = {"of", "at", "by", "in", "on", "to", "up", "and", "but", "or", "for", "nor", "yet", "so", "the", "a", "an"}


@lru_cache(maxsize=1)
def domain_profiles() -> tuple[DomainProfile, ...]:
    return load_domain_profiles()


@lru_cache(maxsize=1)
def general_domain() -> DomainProfile:
    return load_general_domain()


@lru_cache(maxsize=512)
def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![a-z0-9]){re.escape(keyword.lower())}(?![a-z0-9])")


def keyword_in_text(keyword: str, text: str) -> bool:
    if not keyword:
        return False
    return bool(_keyword_pattern(keyword).search(text.lower()))


def select_domain(target_role: str) -> DomainProfile:
    for profile in domain_profiles():
        if any(keyword_in_text(keyword, target_role) for keyword in profile.keywords):
            return profile
    return general_domain()


def strip_level_qualifiers(title: str) -> str:
    result = title.strip()
    while _LEVEL_PREFIX_RE.match(result):
        result = _LEVEL_PREFIX_RE.sub("", result, count=1)
    result = _ROMAN_SUFFIX_RE.sub("", result).strip()
    return result or title.strip()


def to_title_case(value: str) -> str:
    words = value.strip().split()
    cased: list[str] = []
    for index, word in enumerate(words):
        clean = re.sub(r"[^a-z0-9/+-]", "", word, flags=re.IGNORECASE)
        lower = clean.lower()
        if index == 0:
            cased.append(word[:1].upper() + word[1:].lower())
        elif lower in _LOWERCASE_WORDS:
            cased.append(lower)
        elif 0 < len(clean) <= 3 and clean.isalpha():
            cased.append(clean.upper())
        else:
            cased.append(word[:1].upper() + word[1:].lower())
    return " ".join(cased)
