from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from app.career_path.domains import select_domain, strip_level_qualifiers, to_title_case
from app.core.config.career_path import DomainProfile
from app.schemas.career_path import GenerationRequest

OUTPUT_CONTRACT = """Return strictly valid JSON matching:
{
  "paths": [
    {
      "id": string,
      "name": string,
      "nodes": Array<{
        "title": string,
        "level": "entry" | "mid" | "senior" | "lead" | "executive",
        "salaryRange": string,
        "yearsExperience": string,
        "skills": Array<{ "name": string, "level": "basic" | "intermediate" | "advanced" }>,
        "certifications": Array<{ "name": string, "issuer": string, "url": string }>,
        "growthPotential": "low" | "medium" | "high",
        "description": string
      }>
    }
  ]
}"""

STAGE_FIELDS = """Each stage must include:
- title (distinct, industry-recognizable job title; never a task such as "Update your resume")
- level (entry | mid | senior | lead | executive)
- salaryRange (USD range string such as "$70,000 - $90,000")
- yearsExperience (total years in the career, such as "3-5 years"; never months, weeks or hours)
- skills (2-3 skill objects with { name, level })
- certifications (0-2 objects from recognized issuers, with the issuer's official URL)
- description (1-2 sentences on why this stage matters on the journey)
- growthPotential ("low" | "medium" | "high")"""


@dataclass(frozen=True)
class PromptVariant:
    name: str
    build: Callable[[GenerationRequest], str]


def _target_title(request: GenerationRequest) -> str:
    return to_title_case(request.target_role)


def _region_hint(request: GenerationRequest) -> str:
    if not request.region:
        return "Use United States market norms for salaries."
    return f"Use {request.region} market norms for salaries, converted to USD."


def _domain_hint(domain: DomainProfile) -> str:
    if domain.domain == "general":
        return "Focus on broadly applicable business roles when domain nuances are unclear."
    return (
        f"The target role lives within the {domain.display_name} discipline; "
        "use industry-standard roles from that space."
    )


def _build_targeted(request: GenerationRequest) -> str:
    target = _target_title(request)
    domain = select_domain(request.target_role)
    examples = ""
    if domain.prompt_examples:
        examples = (
            f"Example progression for context: {' > '.join(domain.prompt_examples)}. "
            "Use this only as inspiration and craft your own realistic sequence."
        )
    return f"""You are a career path analyst who designs realistic, data-backed progressions that people actually follow in industry.
Target role: "{target}"
Base role (without level qualifiers): "{strip_level_qualifiers(target)}"
{_domain_hint(domain)}
{examples}
{_region_hint(request)}

Generate five ordered stages that show how a professional typically grows into this target role.
{STAGE_FIELDS}

Quality rules:
- The first stages must be distinct feeder roles that prepare for the target scope. None of them may simply be the target title with modifiers like "Junior", "Mid", "Senior", "Lead", or numerals.
- Years of experience must never decrease from one stage to the next.
- Mention {domain.display_name.lower()} responsibilities explicitly in every description.
- Keep stages ordered from earliest to latest, ending with the exact target role "{target}".

{OUTPUT_CONTRACT}"""


def _build_base(request: GenerationRequest) -> str:
    target = _target_title(request)
    return f"""You are a career path analyst.
Target role: "{target}"
{_region_hint(request)}

Generate four to five ordered stages showing how a professional grows into this role.
{STAGE_FIELDS}

Quality rules:
- Provide at least four stages, the last one being exactly "{target}".
- Every stage title must be different.
- Years of experience must increase or stay equal from stage to stage.

{OUTPUT_CONTRACT}"""


def _build_minimal(request: GenerationRequest) -> str:
    target = _target_title(request)
    return f"""List a realistic four-stage career ladder ending in the job title "{target}".
Use distinct job titles, yearsExperience in years, and descriptions of at least one sentence.

{OUTPUT_CONTRACT}"""


PROMPT_VARIANTS: tuple[PromptVariant, ...] = (
    PromptVariant(name="targeted", build=_build_targeted),
    PromptVariant(name="base", build=_build_base),
    PromptVariant(name="minimal", build=_build_minimal),
)
