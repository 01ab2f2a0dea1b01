from __future__ import annotations

import json
import re
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from app.career_path.errors import ParseError, ValidationError
from app.schemas.career_path import (
    GenerateCareerPathBody,
    GenerationRequest,
    UserProfileSnapshot,
    ValidatedModelOutput,
)

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?|\n?```\s*$", re.IGNORECASE)


def _error_list(exc: PydanticValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]


def validate_body(body: Any) -> tuple[GenerationRequest, UserProfileSnapshot | None]:
    if isinstance(body, GenerateCareerPathBody):
        parsed = body
    else:
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object.")
        try:
            parsed = GenerateCareerPathBody.model_validate(body)
        except PydanticValidationError as exc:
            raise ValidationError("Invalid input", errors=_error_list(exc)) from exc

    request = GenerationRequest(target_role=parsed.target_role, region=parsed.region)
    return request, parsed.profile


def validate_input(body: Any) -> GenerationRequest:
    request, _ = validate_body(body)
    return request


def parse_model_json(content: str) -> Any:
    cleaned = (content or "").strip()
    if cleaned.startswith("```"):
        cleaned = _CODE_FENCE_RE.sub("", cleaned).strip()
    if not cleaned:
        raise ParseError("Model returned no JSON content.")
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Model content is not valid JSON: {exc.msg} at position {exc.pos}") from exc


def validate_model_output(data: Any) -> ValidatedModelOutput:
    if not isinstance(data, dict):
        raise ValidationError("Model output must be a JSON object.")
    try:
        return ValidatedModelOutput.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError("Model output failed schema validation", errors=_error_list(exc)) from exc
