from __future__ import annotations

from dataclasses import dataclass

from app.career_path.domains import keyword_in_text, select_domain, to_title_case
from app.core.config.career_path import DomainProfile
from app.schemas.career_path import GuidanceResult, ProfileTask, UserProfileSnapshot

_PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}
_MIN_GAP_TASKS = 3
_MIN_SKILLS = 5


@dataclass(frozen=True)
class ProfileGaps:
    missing_work_history: bool = True
    missing_domain_skills: bool = True
    missing_skills: bool = True
    missing_career_goal: bool = True
    missing_summary: bool = True
    missing_industry: bool = True

    def missing_elements(self) -> list[str]:
        labels = [
            (self.missing_work_history, "domain-relevant work history"),
            (self.missing_domain_skills, "domain-specific skills"),
            (self.missing_career_goal, "career goal"),
            (self.missing_summary, "profile summary"),
            (self.missing_industry, "industry"),
        ]
        return [label for missing, label in labels if missing]


def _mentions_domain(text: str | None, keywords: tuple[str, ...]) -> bool:
    if not text:
        return False
    return any(keyword_in_text(keyword, text) for keyword in keywords)


def detect_profile_gaps(profile: UserProfileSnapshot | None, domain: DomainProfile) -> ProfileGaps:
    if profile is None:
        return ProfileGaps()

    keywords = domain.relevance_keywords
    skills = [skill.strip() for skill in profile.skills if skill.strip()]
    if keywords:
        has_domain_history = any(
            _mentions_domain(item.title, keywords) or _mentions_domain(item.description, keywords)
            for item in profile.work_history
        )
        has_domain_skills = any(_mentions_domain(skill, keywords) for skill in skills)
    else:
        has_domain_history = any(item.title.strip() for item in profile.work_history)
        has_domain_skills = bool(skills)

    return ProfileGaps(
        missing_work_history=not has_domain_history,
        missing_domain_skills=not has_domain_skills,
        missing_skills=not has_domain_skills or len(skills) < _MIN_SKILLS,
        missing_career_goal=not (profile.career_goal or "").strip(),
        missing_summary=not (profile.summary or "").strip(),
        missing_industry=not (profile.industry or "").strip(),
    )


def _gap_tasks(target: str, gaps: ProfileGaps, domain: DomainProfile) -> list[ProfileTask]:
    display = domain.display_name
    tasks: list[ProfileTask] = []
    if gaps.missing_work_history:
        tasks.append(
            ProfileTask(
                category="Work History",
                title=f"Showcase {display} Experience",
                description=(
                    "Open Career Profile > Work History and add accomplishment-driven bullets that "
                    f"highlight {display.lower()} impact aligned with {target}."
                ),
                priority="high",
                estimated_duration_minutes=20,
                action_url="/career-profile",
            )
        )
    if gaps.missing_skills:
        recommended = ", ".join(domain.skill_recommendations[:2]) or "core role skills"
        tasks.append(
            ProfileTask(
                category="Skills",
                title=f"Expand {display} Skill Highlights",
                description=(
                    f"Update Career Profile > Skills with the capabilities expected for {target} "
                    f"(e.g., {recommended})."
                ),
                priority="high",
                estimated_duration_minutes=10,
                action_url="/career-profile",
            )
        )
    if gaps.missing_career_goal:
        tasks.append(
            ProfileTask(
                category="Career Goals",
                title="Set a Targeted Career Goal",
                description=f"Add a goal describing why you are pursuing {target} and by when.",
                priority="high",
                estimated_duration_minutes=15,
                action_url="/goals",
            )
        )
    if gaps.missing_summary:
        tasks.append(
            ProfileTask(
                category="Profile Summary",
                title="Write a Profile Summary",
                description=(
                    "Add a concise summary that signals the scope of teams, budgets and results you have owned."
                ),
                priority="medium",
                estimated_duration_minutes=15,
                action_url="/career-profile",
            )
        )
    if gaps.missing_industry:
        tasks.append(
            ProfileTask(
                category="Profile Basics",
                title="Specify Industry Focus",
                description="Set your primary industry so recommendations match sector-appropriate transitions.",
                priority="low",
                estimated_duration_minutes=2,
                action_url="/career-profile",
            )
        )
    return sorted(tasks, key=lambda task: _PRIORITY_ORDER[task.priority])


def _filler_tasks(count: int, domain: DomainProfile) -> list[ProfileTask]:
    titles = [
        f"Highlight {domain.display_name} Metrics",
        "Add Strategic Initiatives",
        "Link Cross-Functional Wins",
    ]
    return [
        ProfileTask(
            category="Profile Enhancement",
            title=titles[index % len(titles)],
            description=(
                "Document measurable outcomes (revenue, retention, efficiency) and the stakeholders you influenced."
            ),
            priority="medium",
            estimated_duration_minutes=10,
            action_url="/career-profile",
        )
        for index in range(count)
    ]


def build_guidance(
    target_role: str,
    gaps: ProfileGaps | None = None,
    domain: DomainProfile | None = None,
) -> GuidanceResult:
    profile_gaps = gaps or ProfileGaps()
    profile_domain = domain or select_domain(target_role)
    target = to_title_case(target_role)

    tasks = _gap_tasks(target, profile_gaps, profile_domain)
    if len(tasks) < _MIN_GAP_TASKS:
        tasks.extend(_filler_tasks(_MIN_GAP_TASKS - len(tasks), profile_domain))
    tasks.append(
        ProfileTask(
            category="Next Steps",
            title=f"Regenerate the {target} Path",
            description=(
                "Once your profile reflects these updates, rerun the career path generator "
                "to unlock role-by-role recommendations."
            ),
            priority="high",
            estimated_duration_minutes=5,
            action_url="/career-path",
        )
    )

    missing = profile_gaps.missing_elements()
    if missing:
        message = (
            f'We couldn\'t generate a career path for "{target}" because your profile is missing: '
            f"{', '.join(missing)}. Complete the tasks below, then regenerate the path."
        )
    else:
        message = (
            f'We couldn\'t generate a detailed career path for "{target}" at this time. '
            "Complete the profile improvements below and try again."
        )

    return GuidanceResult(target_role=target_role, message=message, tasks=tasks)
