from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)
from pydantic.alias_generators import to_camel

StageLevel = Literal["entry", "mid", "senior", "lead", "executive"]
GrowthPotential = Literal["low", "medium", "high"]
TaskPriority = Literal["high", "medium", "low"]
TelemetryEventType = Literal["success", "quality_failure", "fallback", "error"]

MapperFailureReason = Literal[
    "empty_path",
    "action_verb_title",
    "invalid_level",
    "missing_skills",
    "invalid_experience",
    "non_monotonic_experience",
    "target_mismatch",
]
QualityFailureReason = Literal[
    "insufficient_stages",
    "titles_not_distinct",
    "insufficient_unique_feeder_roles",
    "too_many_modifier_based_titles",
    "description_too_short",
    "missing_keywords",
]
AttemptErrorReason = Literal[
    "model_error",
    "empty_response",
    "parse_error",
    "schema_invalid",
]
FailureReason = Literal[MapperFailureReason, QualityFailureReason, AttemptErrorReason]

STAGE_LEVELS: tuple[str, ...] = ("entry", "mid", "senior", "lead", "executive")
GROWTH_LEVELS: tuple[str, ...] = ("low", "medium", "high")

NumericText = Union[StrictStr, StrictInt, StrictFloat]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Inbound
# ---------------------------------------------------------------------------


class WorkHistoryItem(CamelModel):
    title: str = Field(default="", max_length=200)
    company: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=4000)


class UserProfileSnapshot(CamelModel):
    skills: list[str] = Field(default_factory=list, max_length=200)
    work_history: list[WorkHistoryItem] = Field(default_factory=list, max_length=50)
    summary: str | None = Field(default=None, max_length=4000)
    career_goal: str | None = Field(default=None, max_length=2000)
    industry: str | None = Field(default=None, max_length=200)


class GenerateCareerPathBody(CamelModel):
    target_role: str = Field(max_length=200)
    region: str | None = Field(default=None, max_length=100)
    profile: UserProfileSnapshot | None = None

    @field_validator("target_role")
    @classmethod
    def _validate_target_role(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("targetRole must not be empty")
        return stripped

    @field_validator("region")
    @classmethod
    def _normalize_region(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class GenerationRequest(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    target_role: str = Field(min_length=1)
    region: str | None = None


# ---------------------------------------------------------------------------
# Raw model output (structural contract only)
# ---------------------------------------------------------------------------


class RawSkill(CamelModel):
    name: StrictStr
    level: StrictStr | None = None


class RawCertification(CamelModel):
    name: StrictStr
    issuer: StrictStr | None = None
    url: StrictStr | None = None


class RawCareerNode(CamelModel):
    title: StrictStr
    level: StrictStr
    salary_range: NumericText | None
    years_experience: NumericText
    skills: list[Union[StrictStr, RawSkill]]
    certifications: list[Union[StrictStr, RawCertification]]
    growth_potential: StrictStr
    description: StrictStr


class RawCareerPath(CamelModel):
    id: StrictStr | StrictInt | None = None
    name: StrictStr | None = None
    nodes: list[RawCareerNode]


class ValidatedModelOutput(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    paths: list[RawCareerPath] = Field(min_length=1)


# ---------------------------------------------------------------------------
# Trusted results
# ---------------------------------------------------------------------------


class CareerPathNode(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    title: str
    level: StageLevel
    salary_low: int | None = None
    salary_high: int | None = None
    years_experience: float = Field(ge=0.25)
    skills: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    growth_potential: GrowthPotential = "medium"
    description: str


class CareerPathResult(CamelModel):
    kind: Literal["career_path"] = "career_path"
    target_role: str
    nodes: list[CareerPathNode] = Field(min_length=4)
    used_model: str
    prompt_variant: str


class ProfileTask(CamelModel):
    category: str
    title: str
    description: str
    priority: TaskPriority
    estimated_duration_minutes: int = Field(ge=1, le=240)
    action_url: str | None = None


class GuidanceResult(CamelModel):
    kind: Literal["profile_guidance"] = "profile_guidance"
    target_role: str
    message: str
    tasks: list[ProfileTask]


CareerPathResponse = Annotated[
    Union[CareerPathResult, GuidanceResult],
    Field(discriminator="kind"),
]


class QualityVerdict(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    passed: bool
    reason: FailureReason | None = None
    details: str | None = None


class TelemetryEvent(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    type: TelemetryEventType
    user_id: str
    target_role: str
    model: str
    prompt_variant: str | None = None
    reason: FailureReason | None = None
    details: str | None = None
    timestamp_ms: int


class StoredCareerPath(CamelModel):
    kind: Literal["career_path", "profile_guidance"]
    owner_id: str
    target_role: str
    created_at: str
    record: dict[str, Any]
