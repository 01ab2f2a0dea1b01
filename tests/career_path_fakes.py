"""Canned model payloads and fake collaborators shared by the career path tests."""

from __future__ import annotations

import json
from typing import Any, Sequence


def stage(
    title: str,
    level: str,
    years: Any,
    description: str,
    *,
    salary: Any = "$70,000 - $90,000",
    skills: Sequence[Any] = ("Stakeholder Management", "Communication"),
    certifications: Sequence[Any] = (),
    growth: str = "high",
) -> dict[str, Any]:
    return {
        "title": title,
        "level": level,
        "salaryRange": salary,
        "yearsExperience": years,
        "skills": list(skills),
        "certifications": list(certifications),
        "growthPotential": growth,
        "description": description,
    }


def product_manager_nodes() -> list[dict[str, Any]]:
    return [
        stage(
            "Product Research Assistant",
            "entry",
            "1 year",
            "Supports product discovery interviews and synthesizes customer research.",
            salary="$50,000 - $60,000",
            skills=[{"name": "User Research", "level": "basic"}, "Survey Design"],
        ),
        stage(
            "Business Analyst",
            "entry",
            "2 years",
            "Translates stakeholder needs into product requirements and tracks the roadmap backlog.",
            salary="$60,000 - $75,000",
        ),
        stage(
            "Associate Product Manager",
            "mid",
            "3-4 years",
            "Owns small product features end to end and maintains the team roadmap.",
            certifications=[
                {
                    "name": "Professional Scrum Product Owner",
                    "issuer": "Scrum.org",
                    "url": "https://www.scrum.org/assessments/professional-scrum-product-owner-certification",
                },
                {"name": "Made Up Credential", "issuer": "Nobody", "url": "https://certs.example.net/pm"},
            ],
        ),
        stage(
            "Product Manager",
            "mid",
            "5 years",
            "Drives the product roadmap for a feature area together with engineering partners.",
            salary="$110k - $140k",
        ),
        stage(
            "Senior Product Manager",
            "senior",
            "7+ years",
            "Leads product strategy across teams and aligns the roadmap with company goals.",
            salary="$150,000 - $185,000",
        ),
    ]


def model_payload(nodes: list[dict[str, Any]], *, path_id: str = "path-1") -> str:
    return json.dumps({"paths": [{"id": path_id, "name": "Primary path", "nodes": nodes}]})


class FakeModelClient:
    """Returns queued responses in order; the last one repeats. Exceptions are raised."""

    def __init__(self, responses: Sequence[Any], *, model_name: str = "fake-model"):
        self._responses = list(responses)
        self._model_name = model_name
        self.prompts: list[str] = []

    @property
    def model_name(self) -> str:
        return self._model_name

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        index = min(len(self.prompts) - 1, len(self._responses) - 1)
        response = self._responses[index]
        if isinstance(response, BaseException):
            raise response
        return response


class RecordingStore:
    def __init__(self, *, fail: bool = False):
        self.records: list[tuple[Any, str]] = []
        self._fail = fail

    def store(self, record: Any, owner_id: str) -> None:
        if self._fail:
            raise OSError("disk full")
        self.records.append((record, owner_id))
