"""Extract skills, sections, salary and role attributes from job descriptions."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

GO_LANG_ALIAS = "go" + "lang"

DEFAULT_SKILLS: tuple[str, ...] = (
    "aws", "azure", "gcp", "go", GO_LANG_ALIAS, "python", "typescript", "javascript", "react",
    "node.js", "node", "sql", "sqlite", "postgresql", "mysql", "redis", "nats", "kafka", "docker",
    "kubernetes", "terraform", "linux", "graphql", "rest", "grpc", "ci/cd", "git", "github",
    "playwright",
)

_SALARY_PATTERN = re.compile(
    r"\$?\b([1-9][0-9]{1,2})(?:,?000|k)?\s*(?:-|to|–|—)\s*\$?\b([1-9][0-9]{1,2})(?:,?000|k)?\b",
    re.IGNORECASE | re.ASCII,
)

_REQUIREMENT_HEADINGS = ("requirements", "required qualifications", "what you bring", "qualifications")
_RESPONSIBILITY_HEADINGS = ("responsibilities", "what you will do", "what you'll do", "about the role")
_BULLET_CHARS = "-*•0123456789. )"
_MAX_SECTION_ITEMS = 8

_CANONICAL_SKILLS = {
    "aws": "AWS",
    "gcp": "GCP",
    GO_LANG_ALIAS: "Go",
    "go": "Go",
    "typescript": "TypeScript",
    "javascript": "JavaScript",
    "sql": "SQL",
    "sqlite": "SQLite",
    "postgresql": "PostgreSQL",
    "mysql": "MySQL",
    "redis": "Redis",
    "nats": "NATS",
    "kafka": "Kafka",
    "docker": "Docker",
    "kubernetes": "Kubernetes",
    "terraform": "Terraform",
    "linux": "Linux",
    "graphql": "GraphQL",
    "rest": "REST",
    "grpc": "gRPC",
    "github": "GitHub",
    "node": "Node.js",
}


@dataclass
class ParsedJob:
    """Structured facts extracted from a job posting."""

    skills: list[str] = field(default_factory=list)
    requirements: list[str] = field(default_factory=list)
    responsibilities: list[str] = field(default_factory=list)
    salary_min: int | None = None
    salary_max: int | None = None
    salary_currency: str = ""
    salary_period: str = ""
    remote_policy: str = ""
    seniority: str = ""
    employment_type: str = ""


def _normalize_skill(skill: str) -> str:
    return skill.strip().lower()


def _canonical_skill(skill: str) -> str:
    return _CANONICAL_SKILLS.get(skill.strip().lower(), skill.strip())


class JobParser:
    """Parses job descriptions against a known skill vocabulary."""

    def __init__(self, extra_skills=None) -> None:
        seen: set[str] = set()
        self.skills: list[str] = []
        for skill in (*DEFAULT_SKILLS, *(extra_skills or ())):
            normalized = _normalize_skill(skill)
            if not normalized or normalized in seen:
                continue
            seen.add(normalized)
            self.skills.append(skill)

    def parse(self, title: str, description: str) -> ParsedJob:
        text = description.strip()
        salary_min, salary_max, currency, period = _extract_salary(text)
        combined = title + "\n" + text
        return ParsedJob(
            skills=self._extract_skills(text),
            requirements=_extract_section_items(text, _REQUIREMENT_HEADINGS),
            responsibilities=_extract_section_items(text, _RESPONSIBILITY_HEADINGS),
            salary_min=salary_min,
            salary_max=salary_max,
            salary_currency=currency,
            salary_period=period,
            remote_policy=extract_remote_policy(combined),
            seniority=extract_seniority(combined),
            employment_type=extract_employment_type(combined),
        )

    def _extract_skills(self, text: str) -> list[str]:
        lower = text.lower()
        found: dict[str, str] = {}
        for skill in self.skills:
            normalized = _normalize_skill(skill)
            if not normalized:
                continue
            pattern = r"(?:\A|[^a-z0-9+#.])" + re.escape(skill.lower()) + r"(?:[^a-z0-9+#.]|\Z)"
            if not re.search(pattern, lower, re.IGNORECASE):
                continue
            display = skill
            if skill.lower() == GO_LANG_ALIAS:
                display, normalized = "Go", "go"
            if skill.lower() == "node":
                display, normalized = "Node.js", "node.js"
            found[normalized] = _canonical_skill(display)
        return sorted(found.values())


def _extract_salary(text: str) -> tuple[int | None, int | None, str, str]:
    match = _SALARY_PATTERN.search(text)
    if not match:
        return None, None, "", ""
    period = "hour" if "hour" in text.lower() else "year"
    return _salary_value(match.group(1)), _salary_value(match.group(2)), "USD", period


def _salary_value(value: str) -> int:
    parsed = int(value.replace(",", ""))
    return parsed * 1000 if parsed < 1000 else parsed


def extract_remote_policy(text: str) -> str:
    """Classify the remote policy mentioned in text."""
    lower = text.lower()
    if "hybrid" in lower:
        return "hybrid"
    if "remote" in lower:
        return "remote"
    if "on-site" in lower or "onsite" in lower or "in office" in lower:
        return "onsite"
    return ""


def extract_seniority(text: str) -> str:
    """Classify the seniority level mentioned in text."""
    lower = text.lower()
    if "principal" in lower or "staff" in lower:
        return "staff"
    if "senior" in lower or "sr." in lower:
        return "senior"
    if "lead" in lower:
        return "lead"
    if "junior" in lower or "entry level" in lower:
        return "junior"
    return ""


def extract_employment_type(text: str) -> str:
    """Classify the employment type mentioned in text."""
    lower = text.lower()
    if "contract" in lower:
        return "contract"
    if "part-time" in lower or "part time" in lower:
        return "part_time"
    if "internship" in lower or "intern " in lower:
        return "internship"
    if "full-time" in lower or "full time" in lower:
        return "full_time"
    return ""


def _extract_section_items(text: str, headings: tuple[str, ...]) -> list[str]:
    in_section = False
    items: list[str] = []
    for line in text.split("\n"):
        trimmed = line.strip()
        if not trimmed:
            continue
        if _normalize_heading(trimmed) in headings:
            in_section = True
            continue
        if in_section and _looks_like_heading(trimmed):
            break
        if in_section:
            item = trimmed.lstrip(_BULLET_CHARS).strip()
            if item:
                items.append(item)
    return items[:_MAX_SECTION_ITEMS]


def _is_word_separator(ch: str) -> bool:
    if ord(ch) <= 0x7F:
        return not (ch.isascii() and (ch.isalnum() or ch == "_"))
    if ch.isalpha() or ch.isdigit():
        return False
    return ch.isspace()


def _title_case(value: str) -> str:
    out: list[str] = []
    prev = " "
    for ch in value:
        if _is_word_separator(prev):
            upper = ch.upper()
            out.append(upper if len(upper) == 1 else ch)
        else:
            out.append(ch)
        prev = ch
    return "".join(out)


def _looks_like_heading(value: str) -> bool:
    trimmed = value.strip().removesuffix(":")
    if len(trimmed.encode("utf-8")) > 48:
        return False
    return "." not in trimmed and _title_case(trimmed.lower()) == trimmed


def _normalize_heading(value: str) -> str:
    return value.strip().removesuffix(":").lower()