from .errors import CareerPathError, ModelError, ParseError, ValidationError
from .fallback import ProfileGaps, build_guidance, detect_profile_gaps
from .mapper import MapperRejection, MapperResult, MapperSuccess, map_career_path
from .normalizers import SALARY_RANGE_MULTIPLIER, SalaryRange, parse_salary, parse_years_experience
from .orchestrator import CareerPathGenerator, CareerPathStore, GenerationResult
from .prompts import PROMPT_VARIANTS, PromptVariant
from .quality_gate import evaluate
from .telemetry import InMemoryTelemetrySink, TelemetryEmitter, TelemetrySink
from .validator import parse_model_json, validate_input, validate_model_output

__all__ = [
    "CareerPathError",
    "ModelError",
    "ParseError",
    "ValidationError",
    "ProfileGaps",
    "build_guidance",
    "detect_profile_gaps",
    "MapperRejection",
    "MapperResult",
    "MapperSuccess",
    "map_career_path",
    "SALARY_RANGE_MULTIPLIER",
    "SalaryRange",
    "parse_salary",
    "parse_years_experience",
    "CareerPathGenerator",
    "CareerPathStore",
    "GenerationResult",
    "PROMPT_VARIANTS",
    "PromptVariant",
    "evaluate",
    "InMemoryTelemetrySink",
    "TelemetryEmitter",
    "TelemetrySink",
    "parse_model_json",
    "validate_input",
    "validate_model_output",
]
