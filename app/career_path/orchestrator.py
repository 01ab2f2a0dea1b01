"""
Career path generation orchestrator.

Each prompt variant is tried against each configured model, in order and
strictly sequentially (variant outer, model inner):

    Idle -> Attempting(variant, model) -> Validated | Rejected | Failed

``Failed`` covers transport errors, empty content, undecodable JSON and schema
violations. ``Rejected`` covers guard-rule and quality-gate verdicts. Both move
on to the next model, then the next variant; ``Validated`` ends the loop.
When every combination is exhausted the caller receives a ``GuidanceResult`` instead of an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal, Protocol, Sequence, Union

from app.ai.types import ModelClient, ModelError
from app.career_path.domains import select_domain
from app.career_path.errors import ParseError, ValidationError
from app.career_path.fallback import build_guidance, detect_profile_gaps
from app.career_path.mapper import MapperRejection, map_career_path
from app.career_path.prompts import PROMPT_VARIANTS, PromptVariant
from app.career_path.quality_gate import evaluate
from app.career_path.telemetry import TelemetryEmitter, now_ms
from app.career_path.validator import parse_model_json, validate_body, validate_model_output
from app.core.config.career_path import (
    DomainProfile,
    GuardConfig,
    QualityConfig,
    load_guard_config,
    load_quality_config,
)
from app.schemas.career_path import (
    CareerPathResult,
    FailureReason,
    GenerationRequest,
    GuidanceResult,
    TelemetryEvent,
    TelemetryEventType,
    UserProfileSnapshot,
)

logger = logging.getLogger("app.career_path")

FALLBACK_MODEL = "profile-guidance"

GenerationResult = Union[CareerPathResult, GuidanceResult]


class CareerPathStore(Protocol):
    def store(self, record: GenerationResult, owner_id: str) -> None: ...


@dataclass(frozen=True)
class AttemptOutcome:
    state: Literal["validated", "rejected", "failed"]
    result: CareerPathResult | None = None
    reason: FailureReason | None = None
    details: str | None = None


class CareerPathGenerator:
    def __init__(
        self,
        clients: ModelClient | Sequence[ModelClient] | None,
        *,
        telemetry: TelemetryEmitter | None = None,
        store: CareerPathStore | None = None,
        variants: Sequence[PromptVariant] = PROMPT_VARIANTS,
        guard_config: GuardConfig | None = None,
        quality_config: QualityConfig | None = None,
    ):
        if clients is None:
            self._clients: tuple[ModelClient, ...] = ()
        elif isinstance(clients, (list, tuple)):
            self._clients = tuple(clients)
        else:
            self._clients = (clients,)
        self._telemetry = telemetry or TelemetryEmitter()
        self._store = store
        self._variants = tuple(variants)
        self._guard_config = guard_config or load_guard_config()
        self._quality_config = quality_config or load_quality_config()

    def generate(
        self,
        body: Any,
        *,
        user_id: str = "anonymous",
        profile: UserProfileSnapshot | None = None,
    ) -> GenerationResult:
        request, body_profile = validate_body(body)
        domain = select_domain(request.target_role)

        result = self._run_variants(request, domain, user_id, profile or body_profile)
        self._persist(result, user_id)
        return result

    def _run_variants(
        self,
        request: GenerationRequest,
        domain: DomainProfile,
        user_id: str,
        profile: UserProfileSnapshot | None,
    ) -> GenerationResult:
        last_failure: AttemptOutcome | None = None
        last_error: AttemptOutcome | None = None

        if not self._clients:
            logger.warning("career_path_model_unavailable role=%r", request.target_role)
        else:
            for variant in self._variants:
                for client in self._clients:
                    outcome = self._attempt(client, variant, request, domain, user_id)
                    if outcome.state == "validated" and outcome.result is not None:
                        return outcome.result
                    if outcome.state == "rejected":
                        last_failure = outcome
                    else:
                        last_error = outcome

        cause = last_failure or last_error
        if cause is not None:
            reason, details = cause.reason, cause.details
        elif not self._clients:
            reason, details = None, "Model client not configured"
        else:
            reason, details = None, "No prompt variants configured"

        guidance = build_guidance(request.target_role, detect_profile_gaps(profile, domain), domain)
        self._emit("fallback", request, user_id, model=FALLBACK_MODEL, reason=reason, details=details)
        return guidance

    def _attempt(
        self,
        client: ModelClient,
        variant: PromptVariant,
        request: GenerationRequest,
        domain: DomainProfile,
        user_id: str,
    ) -> AttemptOutcome:
        model = _model_name(client)
        logger.debug("career_path_attempt variant=%s model=%s role=%r", variant.name, model, request.target_role)

        try:
            content = client.complete(variant.build(request))
        except ModelError as exc:
            return self._failed(variant, model, request, user_id, "model_error", f"{exc.code}: {exc}")
        except Exception as exc:  # noqa: BLE001 - any client failure only skips this attempt
            logger.warning("career_path_client_failed variant=%s model=%s: %s", variant.name, model, exc)
            return self._failed(variant, model, request, user_id, "model_error", f"{type(exc).__name__}: {exc}")
        if not content or not content.strip():
            return self._failed(variant, model, request, user_id, "empty_response", "Model returned empty content")

        try:
            parsed = parse_model_json(content)
        except ParseError as exc:
            return self._failed(variant, model, request, user_id, "parse_error", str(exc))

        try:
            output = validate_model_output(parsed)
        except ValidationError as exc:
            first = exc.errors[0] if exc.errors else {}
            location = ".".join(str(part) for part in first.get("loc", []))
            details = f"{exc}: {location} {first.get('msg', '')}".strip()
            return self._failed(variant, model, request, user_id, "schema_invalid", details)

        mapped = map_career_path(output.paths[0], request.target_role, self._guard_config)
        if isinstance(mapped, MapperRejection):
            return self._rejected(variant, model, request, user_id, mapped.reason, mapped.details)

        verdict = evaluate(mapped.data, request.target_role, self._quality_config, domain)
        if not verdict.passed:
            return self._rejected(variant, model, request, user_id, verdict.reason, verdict.details)

        result = CareerPathResult(
            target_role=request.target_role,
            nodes=mapped.data,
            used_model=model,
            prompt_variant=variant.name,
        )
        self._emit("success", request, user_id, model=model, prompt_variant=variant.name)
        return AttemptOutcome(state="validated", result=result)

    def _failed(
        self,
        variant: PromptVariant,
        model: str,
        request: GenerationRequest,
        user_id: str,
        reason: FailureReason,
        details: str,
    ) -> AttemptOutcome:
        self._emit(
            "error", request, user_id, model=model, prompt_variant=variant.name, reason=reason, details=details
        )
        return AttemptOutcome(state="failed", reason=reason, details=details)

    def _rejected(
        self,
        variant: PromptVariant,
        model: str,
        request: GenerationRequest,
        user_id: str,
        reason: FailureReason | None,
        details: str | None,
    ) -> AttemptOutcome:
        self._emit(
            "quality_failure",
            request,
            user_id,
            model=model,
            prompt_variant=variant.name,
            reason=reason,
            details=details,
        )
        return AttemptOutcome(state="rejected", reason=reason, details=details)

    def _emit(
        self,
        event_type: TelemetryEventType,
        request: GenerationRequest,
        user_id: str,
        *,
        model: str,
        prompt_variant: str | None = None,
        reason: FailureReason | None = None,
        details: str | None = None,
    ) -> None:
        self._telemetry.emit(
            TelemetryEvent(
                type=event_type,
                user_id=user_id,
                target_role=request.target_role,
                model=model,
                prompt_variant=prompt_variant,
                reason=reason,
                details=details,
                timestamp_ms=now_ms(),
            )
        )

    def _persist(self, result: GenerationResult, owner_id: str) -> None:
        if self._store is None:
            return
        try:
            self._store.store(result, owner_id)
        except Exception as exc:  # noqa: BLE001 - persistence is best effort
            logger.exception("career_path_persist_failed kind=%s owner=%s: %s", result.kind, owner_id, exc)


def _model_name(client: ModelClient) -> str:
    return getattr(client, "model_name", "unknown")
