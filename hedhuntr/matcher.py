"""Score how well a job fits a candidate profile."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class CandidateProfile:
    id: int = 0
    name: str = ""
    skills: list[str] = field(default_factory=list)
    preferred_titles: list[str] = field(default_factory=list)
    preferred_locations: list[str] = field(default_factory=list)
    remote_preference: str = ""
    min_salary: int | None = None


@dataclass
class Job:
    id: int = 0
    title: str = ""
    location: str = ""
    skills: list[str] = field(default_factory=list)
    salary_min: int | None = None
    salary_max: int | None = None
    remote_policy: str = ""
    employment_type: str = ""


@dataclass
class MatchResult:
    score: int
    matched_skills: list[str]
    missing_skills: list[str]
    notes: list[str]


def _normalize(value: str) -> str:
    return value.strip().lower()


def _match_skills(candidate_skills: list[str], job_skills: list[str]) -> tuple[list[str], list[str]]:
    candidate = {_normalize(skill): skill for skill in candidate_skills}
    matched: list[str] = []
    missing: list[str] = []
    seen: set[str] = set()
    for skill in job_skills:
        key = _normalize(skill)
        if not key or key in seen:
            continue
        seen.add(key)
        if key in candidate:
            matched.append(candidate[key])
        else:
            missing.append(skill)
    return matched, missing


def _title_matches(preferred: list[str], title: str) -> bool:
    title = _normalize(title)
    if not title:
        return False
    return any((value := _normalize(v)) and value in title for v in preferred)


def _location_matches(preferred: list[str], location: str) -> bool:
    location = _normalize(location)
    return any((value := _normalize(v)) and value in location for v in preferred)


def _remote_matches(preference: str, policy: str) -> bool:
    preference = _normalize(preference)
    policy = _normalize(policy)
    if not preference or not policy:
        return False
    return preference == policy or (preference == "remote" and policy == "hybrid")


def _salary_matches(min_salary: int | None, job_min: int | None, job_max: int | None) -> bool:
    if min_salary is None:
        return False
    if job_max is not None:
        return job_max >= min_salary
    if job_min is not None:
        return job_min >= min_salary
    return False


def score(profile: CandidateProfile, job: Job) -> MatchResult:
    """Score a job against a candidate profile on a 0-100 scale."""
    total = 0
    notes: list[str] = []

    matched, missing = _match_skills(profile.skills, job.skills)
    if not job.skills:
        total += 35
        notes.append("No parsed job skills were available; skill score is neutral.")
    else:
        total += int(len(matched) / len(job.skills) * 55)

    if _title_matches(profile.preferred_titles, job.title):
        total += 15
        notes.append("Job title matches candidate preferences.")
    if _location_matches(profile.preferred_locations, job.location):
        total += 10
        notes.append("Job location matches candidate preferences.")
    if _remote_matches(profile.remote_preference, job.remote_policy):
        total += 10
        notes.append("Remote policy matches candidate preference.")
    if _salary_matches(profile.min_salary, job.salary_min, job.salary_max):
        total += 10
        notes.append("Salary range appears compatible.")

    return MatchResult(
        score=min(total, 100),
        matched_skills=sorted(matched),
        missing_skills=sorted(missing),
        notes=notes,
    )