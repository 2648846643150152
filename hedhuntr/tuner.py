"""Deterministic resume, cover letter and application answer drafts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from hedhuntr.profile import Certification, Profile, Project, WorkHistory

_DEFAULT_MAX_HIGHLIGHTS = 6
_EXAMPLE_LIMIT = 3


@dataclass
class ApplicationReadyContext:
    """Job, match and application facts for an application ready to apply."""

    application_id: int = 0
    job_id: int = 0
    candidate_profile_id: int = 0
    match_score: int = 0
    job_title: str = ""
    company: str = ""
    location: str = ""
    application_url: str = ""
    source_url: str = ""
    description: str = ""
    skills: list[str] = field(default_factory=list)
    requirements: list[str] = field(default_factory=list)
    responsibilities: list[str] = field(default_factory=list)
    matched_skills: list[str] = field(default_factory=list)
    missing_skills: list[str] = field(default_factory=list)


@dataclass
class TuneInput:
    profile: Profile
    application: ApplicationReadyContext
    base_resume_name: str = ""
    base_resume_content: bytes = b""
    max_highlights: int = 0


@dataclass
class TuneOutput:
    resume_markdown: str
    cover_letter_markdown: str
    answers_markdown: str
    notes: list[str]


def _ordered_unique(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        value = value.strip()
        if not value:
            continue
        key = value.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(value)
    return out


def _non_empty(*values: str) -> list[str]:
    return [value for value in values if value.strip()]


def _joined(separator: str, *values: str) -> str:
    return separator.join(_non_empty(*values)).strip()


def _score_text(value: str, skills: list[str]) -> int:
    lower = value.lower()
    return sum(1 for skill in skills if skill.lower() in lower)


def _prioritize_skills(job_skills: list[str], matched: set[str]) -> list[str]:
    first = [skill for skill in job_skills if skill.lower() in matched]
    rest = [skill for skill in job_skills if skill.lower() not in matched]
    return _ordered_unique(first + rest)


def _select_highlights(profile: Profile, priority: list[str], limit: int) -> list[str]:
    candidates = [h for item in profile.work_history for h in item.highlights]
    candidates += [h for item in profile.projects for h in item.highlights]
    candidates.sort(key=lambda text: _score_text(text, priority), reverse=True)
    return _ordered_unique(candidates)[:limit]


def _work_history_text(item: WorkHistory) -> str:
    return " ".join([item.company, item.title, item.location, item.summary,
                     *item.highlights, *item.technologies])


def _project_text(item: Project) -> str:
    return " ".join([item.name, item.role, item.url, item.summary,
                     *item.highlights, *item.technologies])


def _certification_text(item: Certification) -> str:
    return " ".join([item.name, item.issuer, item.url])


def _ranked(items, text_of, priority: list[str]) -> list:
    # sorted() is stable, so equally scored items keep their stored order.
    return sorted(items, key=lambda item: _score_text(text_of(item), priority), reverse=True)


def _sentence_list(values: list[str], fallback: str) -> str:
    if not values:
        return fallback
    if len(values) == 1:
        return values[0]
    if len(values) == 2:
        return f"{values[0]} and {values[1]}"
    return ", ".join(values[:-1]) + ", and " + values[-1]


def _finish(lines: list[str]) -> str:
    return "\n".join(lines).strip() + "\n"


def _resume(p: Profile, app: ApplicationReadyContext, base_name: str,
            priority: list[str], highlights: list[str]) -> str:
    lines = [f"# {p.name}"]
    if p.headline:
        lines += ["", p.headline]
    if p.links:
        lines += ["", " | ".join(f"[{link.label}]({link.url})" for link in p.links)]

    lines += ["", "## Target Role", "", f"- {app.job_title} at {app.company}"]
    if app.location:
        lines.append(f"- Location: {app.location}")
    lines.append(f"- Match score: {app.match_score}%")

    lines += ["", "## Relevant Skills", ""]
    lines += [f"- {skill}" for skill in (priority or p.skills)]

    lines += ["", "## Selected Highlights", ""]
    if highlights:
        lines += [f"- {item}" for item in highlights]
    else:
        lines.append("- Review the base resume and add role-specific truthful highlights before applying.")

    lines += ["", "## Experience"]
    for work in _ranked(p.work_history, _work_history_text, priority):
        lines += ["", f"### {work.title}, {work.company}"]
        end_date = work.end_date or ("Present" if work.current else "")
        dates = _joined(" - ", work.start_date, end_date)
        meta = _joined(" | ", work.location, dates)
        if meta:
            lines.append(f"_{meta}_")
        if work.technologies:
            lines += ["", f"_Technologies: {', '.join(_ordered_unique(work.technologies))}_"]
        if work.summary:
            lines += ["", work.summary]
        lines += [f"- {h}" for h in work.highlights]

    projects = _ranked(p.projects, _project_text, priority)
    if projects:
        lines += ["", "## Projects"]
        for project in projects:
            lines += ["", f"### {project.name}"]
            meta = " | ".join(_non_empty(project.role, project.url))
            if meta:
                lines.append(f"_{meta}_")
            if project.technologies:
                lines += ["", f"_Technologies: {', '.join(_ordered_unique(project.technologies))}_"]
            if project.summary:
                lines += ["", project.summary]
            lines += [f"- {h}" for h in project.highlights]

    if p.education:
        lines += ["", "## Education"]
        for edu in p.education:
            lines += ["", f"### {edu.institution}"]
            detail = _joined(", ", edu.degree, edu.field)
            dates = _joined(" - ", edu.start_date, edu.end_date)
            meta = _joined(" | ", detail, dates)
            if meta:
                lines.append(f"_{meta}_")
            if edu.summary:
                lines += ["", edu.summary]

    if p.certifications:
        lines += ["", "## Certifications"]
        for cert in _ranked(p.certifications, _certification_text, priority):
            dates = _joined(" - ", cert.issued_at, cert.expires_at)
            meta = _joined(" | ", cert.issuer, dates)
            line = cert.name
            if meta:
                line = f"{line} ({meta})"
            if cert.url:
                line = f"[{line}]({cert.url})"
            lines.append(f"- {line}")

    lines += [
        "",
        "## Review Notes",
        "",
        f"- Draft generated from stored candidate profile and base resume `{base_name}`.",
        "- Verify all ordering and emphasis before sending. Do not add unverified claims.",
    ]
    return _finish(lines)


def _cover_letter(p: Profile, app: ApplicationReadyContext,
                  priority: list[str], highlights: list[str]) -> str:
    skills = _sentence_list(priority, "the stored skills in my candidate profile")
    lines = [
        "# Cover Letter Draft",
        "",
        f"Dear {app.company} hiring team,",
        "",
        f"I am interested in the {app.job_title} role at {app.company}. "
        f"My background aligns with the role through {skills}.",
    ]
    if highlights:
        lines += ["", "Relevant examples from my stored profile include:"]
        lines += [f"- {item}" for item in highlights[:_EXAMPLE_LIMIT]]
    lines += [
        "",
        "I would welcome the chance to discuss how this experience maps to your needs for the role.",
        "",
        "Sincerely,",
        p.name,
        "",
        "## Review Notes",
        "",
        "- This is a draft for human review. Confirm company details, tone, and any role-specific claims before use.",
    ]
    return _finish(lines)


def _answers(p: Profile, app: ApplicationReadyContext,
             priority: list[str], highlights: list[str]) -> str:
    skills = _sentence_list(priority, "the areas represented in my candidate profile")
    lines = [
        "# Application Answers Draft",
        "",
        "## Why are you interested in this role?",
        "",
        f"I am interested in the {app.job_title} role at {app.company} "
        f"because it aligns with my stored background in {skills}.",
        "",
        "## What relevant experience do you bring?",
        "",
    ]
    if highlights:
        lines += [f"- {item}" for item in highlights[:_EXAMPLE_LIMIT]]
    else:
        lines.append("- Review the candidate profile and add a truthful, role-specific example before submitting.")
    lines += ["", "## What skills match this job?", ""]
    if priority:
        lines += [f"- {skill}" for skill in priority]
    else:
        lines.append("- Review stored skills before answering.")
    lines += [
        "",
        "## Work authorization",
        "",
        "Review and fill this answer manually. The stored candidate profile does not "
        "currently include work authorization facts.",
        "",
        "## Salary expectations",
        "",
    ]
    if p.min_salary is not None:
        lines.append(f"Minimum salary from stored profile: {p.min_salary}.")
    else:
        lines.append("Review and fill this answer manually. The stored candidate profile does not "
                     "currently include a salary floor.")
    lines += [
        "",
        "## Review Notes",
        "",
        "- These answers are drafts for human review.",
        "- Do not submit work authorization, sponsorship, clearance, demographic, or legal answers "
        "without direct confirmation.",
        "- Do not add claims that are not present in the stored candidate profile or approved resume source.",
    ]
    return _finish(lines)


def tune(tune_input: TuneInput) -> TuneOutput:
    """Draft application materials using only stored candidate data."""
    limit = tune_input.max_highlights if tune_input.max_highlights > 0 else _DEFAULT_MAX_HIGHLIGHTS
    profile = tune_input.profile
    app = tune_input.application

    matched = {value.strip().lower() for value in app.matched_skills}
    priority = _prioritize_skills(_ordered_unique(app.skills), matched)
    highlights = _select_highlights(profile, priority, limit)

    return TuneOutput(
        resume_markdown=_resume(profile, app, tune_input.base_resume_name, priority, highlights),
        cover_letter_markdown=_cover_letter(profile, app, priority, highlights),
        answers_markdown=_answers(profile, app, priority, highlights),
        notes=[
            "Generated deterministic drafts from stored candidate data.",
            "Human approval is required before application submission.",
        ],
    )