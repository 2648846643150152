"""Event envelopes, payloads and idempotency helpers for the job pipeline."""

from __future__ import annotations

import hashlib
import json
import re
from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta, timezone
from typing import Any, Generic, TypeVar

SUBJECT_JOBS_DISCOVERED = "jobs.discovered"
SUBJECT_JOBS_SAVED = "jobs.saved"
SUBJECT_JOBS_DESCRIPTION_FETCH_REQUESTED = "jobs.description.fetch.requested"
SUBJECT_JOBS_DESCRIPTION_FETCHED = "jobs.description.fetched"
SUBJECT_JOBS_PARSED = "jobs.parsed"
SUBJECT_JOBS_MATCHED = "jobs.matched"
SUBJECT_APPLICATIONS_READY = "applications.ready"
SUBJECT_APPLICATIONS_MATERIALS_DRAFTED = "applications.materials.drafted"
SUBJECT_APPLICATIONS_AUTOMATION_APPROVED = "applications.automation.approved"
SUBJECT_AUTOMATION_RUN_REQUESTED = "automation.run.requested"
SUBJECT_AUTOMATION_RUN_STARTED = "automation.run.started"
SUBJECT_AUTOMATION_RUN_REVIEW_REQUIRED = "automation.run.review_required"
SUBJECT_AUTOMATION_RUN_FAILED = "automation.run.failed"

EVENT_JOB_DISCOVERED = "JobDiscovered"
EVENT_JOB_SAVED = "JobSaved"
EVENT_JOB_DESCRIPTION_FETCH_REQUESTED = "JobDescriptionFetchRequested"
EVENT_JOB_DESCRIPTION_FETCHED = "JobDescriptionFetched"
EVENT_JOB_PARSED = "JobParsed"
EVENT_JOB_MATCHED = "JobMatched"
EVENT_APPLICATION_READY = "ApplicationReady"
EVENT_APPLICATION_MATERIALS_DRAFTED = "ApplicationMaterialsDrafted"
EVENT_APPLICATION_AUTOMATION_APPROVED = "ApplicationAutomationApproved"
EVENT_AUTOMATION_RUN_REQUESTED = "AutomationRunRequested"
EVENT_AUTOMATION_RUN_STARTED = "AutomationRunStarted"
EVENT_AUTOMATION_RUN_REVIEW_REQUIRED = "AutomationRunReviewRequired"
EVENT_AUTOMATION_RUN_FAILED = "AutomationRunFailed"

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_TIME_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))$"
)


def format_time(value: datetime) -> str:
    """Format a datetime as RFC 3339 with trimmed fractional seconds."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    offset = value.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return text + "Z"
    total = int(offset.total_seconds())
    sign = "+" if total >= 0 else "-"
    total = abs(total)
    return f"{text}{sign}{total // 3600:02d}:{(total % 3600) // 60:02d}"


def parse_time(text: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware datetime."""
    match = _TIME_PATTERN.match(text)
    if not match:
        raise ValueError(f"invalid timestamp {text!r}")
    year, month, day, hour, minute, second, fraction, zulu, sign, oh, om = match.groups()
    micro = int((fraction or "0")[:6].ljust(6, "0"))
    if zulu:
        tz = timezone.utc
    else:
        delta = timedelta(hours=int(oh), minutes=int(om))
        tz = timezone(delta if sign == "+" else -delta)
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second), micro, tzinfo=tz
    )


def _spec(default: Any = None, *, factory: Any = None, json_name: str | None = None,
          omitempty: bool = False, is_time: bool = False) -> Any:
    metadata = {"json": json_name, "omitempty": omitempty, "time": is_time}
    if factory is not None:
        return field(default_factory=factory, metadata=metadata)
    return field(default=default, metadata=metadata)


def _is_empty(value: Any) -> bool:
    return value is None or value is False or value == 0 and not isinstance(value, datetime) \
        or (isinstance(value, (str, list, dict)) and len(value) == 0)


class _Payload:
    """JSON mapping shared by all payload dataclasses."""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for item in fields(self):  # type: ignore[arg-type]
            value = getattr(self, item.name)
            if item.metadata.get("omitempty") and _is_empty(value):
                continue
            if isinstance(value, datetime):
                value = format_time(value)
            elif isinstance(value, list):
                value = list(value)
            out[item.metadata.get("json") or item.name] = value
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        if not isinstance(data, dict):
            raise ValueError("payload must be a JSON object")
        kwargs: dict[str, Any] = {}
        for item in fields(cls):  # type: ignore[arg-type]
            key = item.metadata.get("json") or item.name
            if key not in data:
                continue
            value = data[key]
            if item.metadata.get("time") and value is not None:
                value = parse_time(value)
            kwargs[item.name] = value
        return cls(**kwargs)


@dataclass
class JobDiscoveredPayload(_Payload):
    source: str = _spec("")
    external_id: str = _spec("")
    title: str = _spec("")
    company: str = _spec("")
    location: str = _spec("", omitempty=True)
    remote_policy: str = _spec("", omitempty=True)
    employment_type: str = _spec("", omitempty=True)
    source_url: str = _spec("")
    application_url: str = _spec("", omitempty=True)
    description: str = _spec("", omitempty=True)
    detected_skills: list[str] = _spec(factory=list, omitempty=True)
    published_at: datetime | None = _spec(None, omitempty=True, is_time=True)
    discovered_at: datetime = _spec(ZERO_TIME, is_time=True)
    raw: Any = _spec(None, omitempty=True)


@dataclass
class JobSavedPayload(_Payload):
    job_id: int = _spec(0)
    source: str = _spec("")
    external_id: str = _spec("", omitempty=True)
    title: str = _spec("")
    company: str = _spec("")
    source_url: str = _spec("")
    application_url: str = _spec("", omitempty=True)
    created: bool = _spec(False)
    saved_at: datetime = _spec(ZERO_TIME, is_time=True)


@dataclass
class JobDescriptionFetchRequestedPayload(_Payload):
    job_id: int = _spec(0)
    source: str = _spec("")
    source_url: str = _spec("")
    application_url: str = _spec("", omitempty=True)
    requested_at: datetime = _spec(ZERO_TIME, is_time=True)


@dataclass
class JobDescriptionFetchedPayload(_Payload):
    job_id: int = _spec(0)
    source: str = _spec("")
    source_url: str = _spec("")
    application_url: str = _spec("", omitempty=True)
    fetched_url: str = _spec("")
    raw_text: str = _spec("")
    raw_html: str = _spec("", omitempty=True)
    fetched_at: datetime = _spec(ZERO_TIME, is_time=True)


@dataclass
class JobParsedPayload(_Payload):
    job_id: int = _spec(0)
    source: str = _spec("")
    skills: list[str] = _spec(factory=list)
    requirements: list[str] = _spec(factory=list)
    responsibilities: list[str] = _spec(factory=list)
    salary_min: int | None = _spec(None, omitempty=True)
    salary_max: int | None = _spec(None, omitempty=True)
    salary_currency: str = _spec("", omitempty=True)
    salary_period: str = _spec("", omitempty=True)
    remote_policy: str = _spec("", omitempty=True)
    seniority: str = _spec("", omitempty=True)
    employment_type: str = _spec("", omitempty=True)
    parsed_at: datetime = _spec(ZERO_TIME, is_time=True)

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        # Optional numbers are omitted only when absent, not when zero.
        for key in ("salary_min", "salary_max"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out


@dataclass
class JobMatchedPayload(_Payload):
    job_id: int = _spec(0)
    candidate_profile_id: int = _spec(0)
    score: int = _spec(0)
    matched_skills: list[str] = _spec(factory=list)
    missing_skills: list[str] = _spec(factory=list)
    notes: list[str] = _spec(factory=list)
    matched_at: datetime = _spec(ZERO_TIME, is_time=True)


@dataclass
class ApplicationReadyPayload(_Payload):
    job_id: int = _spec(0)
    candidate_profile_id: int = _spec(0)
    match_score: int = _spec(0)
    ready_at: datetime = _spec(ZERO_TIME, is_time=True)


@dataclass
class ApplicationMaterialsDraftedPayload(_Payload):
    job_id: int = _spec(0)
    application_id: int = _spec(0)
    candidate_profile_id: int = _spec(0)
    resume_source_id: int = _spec(0)
    resume_version_id: int = _spec(0)
    resume_document_id: int = _spec(0)
    cover_letter_id: int = _spec(0)
    cover_letter_doc_id: int = _spec(0, json_name="cover_letter_document_id")
    status: str = _spec("")
    drafted_at: datetime = _spec(ZERO_TIME, is_time=True)


@dataclass
class ApplicationAutomationApprovedPayload(_Payload):
    application_id: int = _spec(0)
    job_id: int = _spec(0)
    candidate_profile_id: int = _spec(0)
    automation_run_id: int = _spec(0)
    resume_material_id: int = _spec(0)
    cover_letter_material_id: int | None = _spec(None)
    approved_at: datetime = _spec(ZERO_TIME, is_time=True)

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        if self.cover_letter_material_id is None:
            out.pop("cover_letter_material_id", None)
        return out


@dataclass
class AutomationRunRequestedPayload(_Payload):
    automation_run_id: int = _spec(0)
    application_id: int = _spec(0)
    job_id: int = _spec(0)
    candidate_profile_id: int = _spec(0)
    resume_material_id: int = _spec(0)
    cover_letter_material_id: int | None = _spec(None)
    requested_at: datetime = _spec(ZERO_TIME, is_time=True)

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        if self.cover_letter_material_id is None:
            out.pop("cover_letter_material_id", None)
        return out


@dataclass
class AutomationRunStatusPayload(_Payload):
    automation_run_id: int = _spec(0)
    application_id: int = _spec(0)
    job_id: int = _spec(0)
    status: str = _spec("")
    message: str = _spec("", omitempty=True)
    occurred_at: datetime = _spec(ZERO_TIME, is_time=True)


P = TypeVar("P", bound=_Payload)


@dataclass
class Envelope(Generic[P]):
    """A versioned event wrapping a typed payload."""

    event_id: str
    event_type: str
    event_version: int
    occurred_at: datetime
    source: str
    correlation_id: str
    idempotency_key: str
    payload: P

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "event_version": self.event_version,
            "occurred_at": format_time(self.occurred_at),
            "source": self.source,
            "correlation_id": self.correlation_id,
            "idempotency_key": self.idempotency_key,
            "payload": self.payload.to_dict(),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, text: str | bytes, payload_type: type[P]) -> "Envelope[P]":
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("envelope must be a JSON object")
        occurred = data.get("occurred_at")
        return cls(
            event_id=data.get("event_id", ""),
            event_type=data.get("event_type", ""),
            event_version=data.get("event_version", 0),
            occurred_at=parse_time(occurred) if occurred else ZERO_TIME,
            source=data.get("source", ""),
            correlation_id=data.get("correlation_id", ""),
            idempotency_key=data.get("idempotency_key", ""),
            payload=payload_type.from_dict(data.get("payload") or {}),
        )


def stable_id(*parts: str) -> str:
    """Hash the lower-cased, trimmed parts into a hex SHA-256 identifier."""
    digest = hashlib.sha256()
    for part in parts:
        digest.update(part.lower().strip().encode("utf-8"))
        digest.update(b"\0")
    return digest.hexdigest()


def _normalize(value: str) -> str:
    return value.strip().lower()


def job_idempotency_key(job: JobDiscoveredPayload) -> str:
    """Derive the deduplication key of a discovered job."""
    if job.external_id:
        return f"{_normalize(job.source)}:{_normalize(job.external_id)}"
    if job.application_url:
        return f"{_normalize(job.source)}:{_normalize(job.application_url)}"
    fallback = stable_id("job-fallback", job.company, job.title, job.location, job.source_url)
    return f"{_normalize(job.source)}:{fallback}"


def _build(event_type: str, source_name: str, correlation_id: str,
           idempotency_key: str, payload: P, event_id_parts: tuple[str, ...]) -> Envelope[P]:
    now = datetime.now(timezone.utc)
    return Envelope(
        event_id=stable_id(*event_id_parts, idempotency_key, format_time(now)),
        event_type=event_type,
        event_version=1,
        occurred_at=now,
        source=source_name,
        correlation_id=correlation_id,
        idempotency_key=idempotency_key,
        payload=payload,
    )


def _typed(event_type: str, source_name: str, correlation_id: str,
           idempotency_key: str, payload: P) -> Envelope[P]:
    return _build(event_type, source_name, correlation_id, idempotency_key, payload,
                  ("event", event_type, source_name))


def new_job_discovered(source_name: str, payload: JobDiscoveredPayload) -> Envelope[JobDiscoveredPayload]:
    key = job_idempotency_key(payload)
    return _build(EVENT_JOB_DISCOVERED, source_name, stable_id("correlation", source_name, key),
                  key, payload, ("event", source_name))


def new_job_saved(source_name: str, correlation_id: str, payload: JobSavedPayload) -> Envelope[JobSavedPayload]:
    created = "true" if payload.created else "false"
    key = stable_id("job-saved", source_name, str(payload.job_id), created)
    return _typed(EVENT_JOB_SAVED, source_name, correlation_id, key, payload)


def new_job_description_fetch_requested(
    source_name: str, correlation_id: str, payload: JobDescriptionFetchRequestedPayload
) -> Envelope[JobDescriptionFetchRequestedPayload]:
    key = stable_id("description-fetch-requested", source_name, str(payload.job_id))
    return _typed(EVENT_JOB_DESCRIPTION_FETCH_REQUESTED, source_name, correlation_id, key, payload)


def new_job_description_fetched(
    source_name: str, correlation_id: str, payload: JobDescriptionFetchedPayload
) -> Envelope[JobDescriptionFetchedPayload]:
    key = stable_id("description-fetched", source_name, str(payload.job_id), payload.fetched_url)
    return _typed(EVENT_JOB_DESCRIPTION_FETCHED, source_name, correlation_id, key, payload)


def new_job_parsed(source_name: str, correlation_id: str, payload: JobParsedPayload) -> Envelope[JobParsedPayload]:
    key = stable_id("job-parsed", source_name, str(payload.job_id))
    return _typed(EVENT_JOB_PARSED, source_name, correlation_id, key, payload)


def new_job_matched(source_name: str, correlation_id: str, payload: JobMatchedPayload) -> Envelope[JobMatchedPayload]:
    key = stable_id("job-matched", source_name, str(payload.job_id), str(payload.candidate_profile_id))
    return _typed(EVENT_JOB_MATCHED, source_name, correlation_id, key, payload)


def new_application_ready(
    source_name: str, correlation_id: str, payload: ApplicationReadyPayload
) -> Envelope[ApplicationReadyPayload]:
    key = stable_id("application-ready", source_name, str(payload.job_id), str(payload.candidate_profile_id))
    return _typed(EVENT_APPLICATION_READY, source_name, correlation_id, key, payload)


def new_application_materials_drafted(
    source_name: str, correlation_id: str, payload: ApplicationMaterialsDraftedPayload
) -> Envelope[ApplicationMaterialsDraftedPayload]:
    key = stable_id(
        "application-materials-drafted",
        source_name,
        str(payload.job_id),
        str(payload.candidate_profile_id),
        str(payload.resume_source_id),
    )
    return _typed(EVENT_APPLICATION_MATERIALS_DRAFTED, source_name, correlation_id, key, payload)


def new_application_automation_approved(
    source_name: str, correlation_id: str, payload: ApplicationAutomationApprovedPayload
) -> Envelope[ApplicationAutomationApprovedPayload]:
    key = stable_id(
        "application-automation-approved",
        source_name,
        str(payload.application_id),
        str(payload.automation_run_id),
    )
    return _typed(EVENT_APPLICATION_AUTOMATION_APPROVED, source_name, correlation_id, key, payload)


def new_automation_run_requested(
    source_name: str, correlation_id: str, payload: AutomationRunRequestedPayload
) -> Envelope[AutomationRunRequestedPayload]:
    key = stable_id("automation-run-requested", source_name, str(payload.automation_run_id))
    return _typed(EVENT_AUTOMATION_RUN_REQUESTED, source_name, correlation_id, key, payload)


def new_automation_run_status(
    event_type: str, source_name: str, correlation_id: str, payload: AutomationRunStatusPayload
) -> Envelope[AutomationRunStatusPayload]:
    key = stable_id(
        "automation-run-status", event_type, source_name, str(payload.automation_run_id), payload.status
    )
    return _typed(event_type, source_name, correlation_id, key, payload)