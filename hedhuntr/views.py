"""Dashboard view models and their formatting rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

PIPELINE_ORDER: tuple[tuple[str, str], ...] = (
    ("discovered", "Discovered"),
    ("description_fetched", "Fetched"),
    ("parsed", "Parsed"),
    ("matched", "Matched"),
    ("ready_to_apply", "Ready"),
    ("applied", "Applied"),
    ("interview", "Interview"),
)

STATUS_IDLE = "idle"
STATUS_RUNNING = "running"


@dataclass
class APIJob:
    id: int = 0
    title: str = ""
    company: str = ""
    location: str = ""
    status: str = ""
    match_score: int = 0
    salary: str = ""
    skills: list[str] = field(default_factory=list)
    source: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "status": self.status,
            "matchScore": self.match_score,
            "salary": self.salary,
            "skills": list(self.skills),
            "source": self.source,
            "updatedAt": self.updated_at,
        }


@dataclass
class APIPipelineStage:
    status: str
    label: str
    count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "label": self.label, "count": self.count}


@dataclass
class APIWorkerState:
    name: str
    subject: str
    status: str
    processed: int = 0
    failed: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "subject": self.subject,
            "status": self.status,
            "processed": self.processed,
            "failed": self.failed,
        }


@dataclass
class APINotificationDelivery:
    channel: str = ""
    type: str = ""
    status: str = ""
    subject: str = ""
    time: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "channel": self.channel,
            "type": self.type,
            "status": self.status,
            "subject": self.subject,
            "time": self.time,
        }


def _thousands(value: int) -> int:
    # Truncate toward zero, as integer division of salaries does.
    return value // 1000 if value >= 0 else -((-value) // 1000)


def format_salary(min_value: int, max_value: int, currency: str) -> str:
    """Render a salary range compactly in thousands."""
    if min_value == 0 and max_value == 0:
        return "Not listed"
    prefix = "$"
    if currency and currency != "USD":
        prefix = currency + " "
    if min_value > 0 and max_value > 0:
        return f"{prefix}{_thousands(min_value)}k-{prefix}{_thousands(max_value)}k"
    if max_value > 0:
        return f"Up to {prefix}{_thousands(max_value)}k"
    return f"From {prefix}{_thousands(min_value)}k"


def status_from_count(count: int) -> str:
    """Report a worker as idle until it has processed at least one row."""
    if count == 0:
        return STATUS_IDLE
    return STATUS_RUNNING


def pipeline_stages(counts: Mapping[str, int]) -> list[APIPipelineStage]:
    """Lay out job counts by status in pipeline order."""
    return [
        APIPipelineStage(status=status, label=label, count=counts.get(status, 0))
        for status, label in PIPELINE_ORDER
    ]


def worker_states(source_runs: int, job_events: int, notifications: int,
                  materials: int) -> list[APIWorkerState]:
    """Summarise worker activity from processed row counts."""
    rows = (
        ("Scheduler", "source runs", source_runs),
        ("Dispatcher", "jobs.discovered", job_events),
        ("Notifications", "jobs.matched/applications.ready", notifications),
        ("Resume Tuning", "applications.ready", materials),
    )
    return [
        APIWorkerState(name=name, subject=subject, status=status_from_count(count), processed=count)
        for name, subject, count in rows
    ]