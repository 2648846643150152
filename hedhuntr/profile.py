"""Candidate profiles, their validation and a completeness assessment."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar


class ProfileError(ValueError):
    """Raised when a candidate profile is invalid."""


def _is_empty(value: Any) -> bool:
    return value in ("", 0, False, None) or (isinstance(value, list) and not value)


class _Record:
    """Plain JSON mapping for profile sub-records."""

    _REQUIRED: ClassVar[tuple[str, ...]] = ()

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for item in fields(self):  # type: ignore[arg-type]
            value = getattr(self, item.name)
            if item.name not in self._REQUIRED and _is_empty(value):
                continue
            out[item.name] = list(value) if isinstance(value, list) else value
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        kwargs = {
            item.name: data[item.name]
            for item in fields(cls)  # type: ignore[arg-type]
            if data.get(item.name) is not None
        }
        return cls(**kwargs)


@dataclass
class WorkHistory(_Record):
    _REQUIRED: ClassVar[tuple[str, ...]] = ("company", "title")

    company: str = ""
    title: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    summary: str = ""
    highlights: list[str] = field(default_factory=list)
    technologies: list[str] = field(default_factory=list)


@dataclass
class Project(_Record):
    _REQUIRED: ClassVar[tuple[str, ...]] = ("name",)

    name: str = ""
    role: str = ""
    url: str = ""
    summary: str = ""
    highlights: list[str] = field(default_factory=list)
    technologies: list[str] = field(default_factory=list)


@dataclass
class Education(_Record):
    _REQUIRED: ClassVar[tuple[str, ...]] = ("institution",)

    institution: str = ""
    degree: str = ""
    field: str = ""
    start_date: str = ""
    end_date: str = ""
    summary: str = ""


@dataclass
class Certification(_Record):
    _REQUIRED: ClassVar[tuple[str, ...]] = ("name",)

    name: str = ""
    issuer: str = ""
    issued_at: str = ""
    expires_at: str = ""
    url: str = ""


@dataclass
class Link(_Record):
    _REQUIRED: ClassVar[tuple[str, ...]] = ("label", "url")

    label: str = ""
    url: str = ""


@dataclass
class Profile:
    """A stored candidate profile."""

    id: int = 0
    name: str = ""
    headline: str = ""
    skills: list[str] = field(default_factory=list)
    preferred_titles: list[str] = field(default_factory=list)
    preferred_locations: list[str] = field(default_factory=list)
    remote_preference: str = ""
    min_salary: int | None = None
    work_history: list[WorkHistory] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    education: list[Education] = field(default_factory=list)
    certifications: list[Certification] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)

    _NESTED: ClassVar[dict[str, type]] = {
        "work_history": WorkHistory,
        "projects": Project,
        "education": Education,
        "certifications": Certification,
        "links": Link,
    }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        if not isinstance(data, dict):
            raise ProfileError("profile must be a JSON object")
        kwargs: dict[str, Any] = {}
        for item in fields(cls):
            value = data.get(item.name)
            if value is None:
                continue
            nested = cls._NESTED.get(item.name)
            if nested is not None:
                value = [nested.from_dict(entry) for entry in value]
            elif isinstance(value, list):
                value = list(value)
            kwargs[item.name] = value
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.id:
            out["id"] = self.id
        out["name"] = self.name
        if self.headline:
            out["headline"] = self.headline
        out["skills"] = list(self.skills)
        out["preferred_titles"] = list(self.preferred_titles)
        out["preferred_locations"] = list(self.preferred_locations)
        if self.remote_preference:
            out["remote_preference"] = self.remote_preference
        if self.min_salary is not None:
            out["min_salary"] = self.min_salary
        for key in self._NESTED:
            out[key] = [entry.to_dict() for entry in getattr(self, key)]
        return out


def _blank(value: str) -> bool:
    return not value.strip()


def validate(profile: Profile) -> None:
    """Raise ProfileError when the profile lacks required data."""
    if _blank(profile.name):
        raise ProfileError("name is required")
    if not profile.skills:
        raise ProfileError("at least one skill is required")
    if profile.min_salary is not None and profile.min_salary < 0:
        raise ProfileError("min_salary cannot be negative")
    if profile.remote_preference and profile.remote_preference not in ("remote", "hybrid", "onsite"):
        raise ProfileError("remote_preference must be one of remote, hybrid, onsite")
    for i, work in enumerate(profile.work_history):
        if _blank(work.company):
            raise ProfileError(f"work_history[{i}].company is required")
        if _blank(work.title):
            raise ProfileError(f"work_history[{i}].title is required")
    for i, project in enumerate(profile.projects):
        if _blank(project.name):
            raise ProfileError(f"projects[{i}].name is required")
    for i, education in enumerate(profile.education):
        if _blank(education.institution):
            raise ProfileError(f"education[{i}].institution is required")
    for i, cert in enumerate(profile.certifications):
        if _blank(cert.name):
            raise ProfileError(f"certifications[{i}].name is required")
    for i, link in enumerate(profile.links):
        if _blank(link.label):
            raise ProfileError(f"links[{i}].label is required")
        if _blank(link.url):
            raise ProfileError(f"links[{i}].url is required")


@dataclass
class QualityCheck:
    id: str
    label: str
    status: str
    message: str
    weight: int


@dataclass
class QualityReport:
    score: int
    status: str
    checks: list[QualityCheck]


def _check(check_id: str, label: str, weight: int, passed: bool,
           complete_message: str, missing_message: str) -> QualityCheck:
    if passed:
        return QualityCheck(check_id, label, "complete", complete_message, weight)
    return QualityCheck(check_id, label, "missing", missing_message, weight)


def _non_blank(values: list[str]) -> list[str]:
    return [value for value in values if value.strip()]


def _has_usable_work_history(items: list[WorkHistory]) -> bool:
    return any(
        not _blank(item.company) and not _blank(item.title)
        and (not _blank(item.summary) or _non_blank(item.highlights))
        for item in items
    )


def _count_work_highlights(items: list[WorkHistory]) -> int:
    return sum(len(_non_blank(item.highlights)) for item in items)


def _has_usable_project(items: list[Project]) -> bool:
    return any(
        not _blank(item.name)
        and (not _blank(item.summary) or _non_blank(item.highlights) or _non_blank(item.technologies))
        for item in items
    )


def assess_quality(profile: Profile) -> QualityReport:
    """Score how complete a profile is for matching and resume tuning."""
    p = profile
    checks = [
        _check("name", "Name", 5, not _blank(p.name),
               "Profile has a candidate name.", "Add the candidate name."),
        _check("headline", "Headline", 10, not _blank(p.headline),
               "Headline is ready for resume summaries.", "Add a concise candidate headline."),
        _check("skills", "Skills", 15, len(_non_blank(p.skills)) >= 5,
               "Skills list has enough signal for matching.", "Add at least five skills."),
        _check("preferred_titles", "Preferred Titles", 8, bool(_non_blank(p.preferred_titles)),
               "Preferred titles are set.", "Add at least one preferred job title."),
        _check("preferred_locations", "Preferred Locations", 7,
               bool(_non_blank(p.preferred_locations)) or not _blank(p.remote_preference),
               "Location or remote preference is set.", "Add preferred locations or a remote preference."),
        _check("salary", "Salary Floor", 5, p.min_salary is not None and p.min_salary > 0,
               "Salary floor is set.", "Add a minimum salary."),
        _check("work_history", "Work History", 20, _has_usable_work_history(p.work_history),
               "Work history has role, company, and detail.",
               "Add at least one role with company, title, and summary or highlights."),
        _check("work_highlights", "Work Highlights", 10, _count_work_highlights(p.work_history) >= 3,
               "Work highlights can feed resume tuning.", "Add at least three work highlights."),
        _check("projects", "Projects", 10, _has_usable_project(p.projects),
               "Projects can support tailored resumes.",
               "Add at least one project with summary, highlights, or technologies."),
        _check("links", "Links", 5, bool(p.links),
               "Profile has at least one supporting link.",
               "Add a portfolio, GitHub, LinkedIn, or similar link."),
        _check("education_or_certs", "Education or Certifications", 5,
               bool(p.education) or bool(p.certifications),
               "Education or certification history is present.",
               "Add education or certifications when relevant."),
    ]
    total = sum(item.weight for item in checks if item.status == "complete")
    if total >= 85:
        status = "ready"
    elif total >= 65:
        status = "usable"
    else:
        status = "incomplete"
    return QualityReport(score=total, status=status, checks=checks)