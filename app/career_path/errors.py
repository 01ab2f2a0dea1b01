from __future__ import annotations

from typing import Any

from app.ai.types import ModelError


class CareerPathError(RuntimeError):
    def __init__(self, message: str, *, code: str = "career_path_error"):
        super().__init__(message)
        self.code = code


class ValidationError(CareerPathError):
    """Caller input or model output failed its structural contract."""

    def __init__(self, message: str, *, errors: list[dict[str, Any]] | None = None):
        super().__init__(message, code="validation_error")
        self.errors = errors or []


class ParseError(CareerPathError):
    """Model content was not decodable JSON."""

    def __init__(self, message: str):
        super().__init__(message, code="parse_error")


__all__ = ["CareerPathError", "ModelError", "ParseError", "ValidationError"]
