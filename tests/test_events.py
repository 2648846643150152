import json
from datetime import datetime, timezone

import pytest

from hedhuntr import events
from hedhuntr.events import (
    ApplicationAutomationApprovedPayload,
    ApplicationMaterialsDraftedPayload,
    ApplicationReadyPayload,
    AutomationRunRequestedPayload,
    AutomationRunStatusPayload,
    Envelope,
    JobDescriptionFetchedPayload,
    JobDescriptionFetchRequestedPayload,
    JobDiscoveredPayload,
    JobMatchedPayload,
    JobParsedPayload,
    JobSavedPayload,
    job_idempotency_key,
    stable_id,
)


def envelope_time():
    return datetime(2026, 4, 28, 12, 0, 0, tzinfo=timezone.utc)


def test_job_idempotency_key_prefers_external_id():
    job = JobDiscoveredPayload(
        source="Greenhouse", external_id=" 123 ", application_url="https://example.com/apply"
    )
    assert job_idempotency_key(job) == "greenhouse:123"


def test_job_idempotency_key_uses_application_url_when_external_id_missing():
    job = JobDiscoveredPayload(source="Lever", application_url=" https://example.com/apply ")
    assert job_idempotency_key(job) == "lever:https://example.com/apply"


def test_job_idempotency_key_fallback_hash():
    job = JobDiscoveredPayload(
        source=" Static ", title="Engineer", company="Acme", source_url="https://example.com/1"
    )
    key = job_idempotency_key(job)
    prefix, digest = key.split(":", 1)
    assert prefix == "static"
    assert digest == stable_id("job-fallback", "Acme", "Engineer", "", "https://example.com/1")
    assert len(digest) == 64


def test_new_job_description_fetched():
    envelope = events.new_job_description_fetched(
        "source",
        "correlation",
        JobDescriptionFetchedPayload(
            job_id=42,
            source="source",
            source_url="https://example.com/jobs/42",
            fetched_url="https://example.com/jobs/42",
            raw_text="Job description",
            fetched_at=envelope_time(),
        ),
    )
    assert envelope.event_type == events.EVENT_JOB_DESCRIPTION_FETCHED
    assert envelope.idempotency_key != ""
    assert envelope.payload.job_id == 42


def test_new_job_parsed():
    envelope = events.new_job_parsed(
        "source",
        "correlation",
        JobParsedPayload(
            job_id=42, source="source", skills=["Go"], remote_policy="remote", parsed_at=envelope_time()
        ),
    )
    assert envelope.event_type == events.EVENT_JOB_PARSED
    assert len(envelope.idempotency_key) == 64
    assert envelope.payload.skills[0] == "Go"


def test_new_job_matched():
    envelope = events.new_job_matched(
        "source",
        "correlation",
        JobMatchedPayload(
            job_id=42, candidate_profile_id=7, score=82, matched_skills=["Go"], matched_at=envelope_time()
        ),
    )
    assert envelope.event_type == events.EVENT_JOB_MATCHED
    assert len(envelope.idempotency_key) == 64
    assert envelope.correlation_id == "correlation"


def test_new_application_ready():
    envelope = events.new_application_ready(
        "source",
        "correlation",
        ApplicationReadyPayload(job_id=42, candidate_profile_id=7, match_score=82, ready_at=envelope_time()),
    )
    assert envelope.event_type == events.EVENT_APPLICATION_READY
    assert envelope.payload.match_score == 82


def test_stable_id_ignores_case_and_surrounding_space():
    assert stable_id(" Foo ", "BAR") == stable_id("foo", "bar")
    assert stable_id("a", "b") != stable_id("ab")
    assert len(stable_id("x")) == 64


def test_new_job_discovered_keys():
    payload = JobDiscoveredPayload(source="Static", external_id="Job-1", title="t", company="c")
    envelope = events.new_job_discovered("static", payload)
    assert envelope.event_type == events.EVENT_JOB_DISCOVERED
    assert envelope.idempotency_key == "static:job-1"
    assert envelope.correlation_id == stable_id("correlation", "static", "static:job-1")
    assert envelope.event_version == 1


def test_idempotency_keys_are_deterministic():
    payload = JobSavedPayload(job_id=42, created=True)
    first = events.new_job_saved("src", "corr", payload)
    second = events.new_job_saved("src", "corr", payload)
    assert first.idempotency_key == second.idempotency_key
    assert first.idempotency_key == stable_id("job-saved", "src", "42", "true")
    other = events.new_job_saved("src", "corr", JobSavedPayload(job_id=42, created=False))
    assert other.idempotency_key != first.idempotency_key


def test_other_constructors_set_event_types():
    assert events.new_job_description_fetch_requested(
        "s", "c", JobDescriptionFetchRequestedPayload(job_id=1)
    ).event_type == "JobDescriptionFetchRequested"
    assert events.new_application_materials_drafted(
        "s", "c", ApplicationMaterialsDraftedPayload(job_id=1)
    ).event_type == "ApplicationMaterialsDrafted"
    assert events.new_application_automation_approved(
        "s", "c", ApplicationAutomationApprovedPayload(application_id=1)
    ).event_type == "ApplicationAutomationApproved"
    assert events.new_automation_run_requested(
        "s", "c", AutomationRunRequestedPayload(automation_run_id=1)
    ).event_type == "AutomationRunRequested"
    status = events.new_automation_run_status(
        events.EVENT_AUTOMATION_RUN_FAILED, "s", "c", AutomationRunStatusPayload(status="failed")
    )
    assert status.event_type == "AutomationRunFailed"


def test_envelope_to_dict_formats_time_and_omits_empty():
    envelope = Envelope(
        event_id="e",
        event_type=events.EVENT_JOB_DISCOVERED,
        event_version=1,
        occurred_at=datetime(2026, 4, 28, 12, 0, 0, 500000, tzinfo=timezone.utc),
        source="s",
        correlation_id="c",
        idempotency_key="k",
        payload=JobDiscoveredPayload(source="s", title="t", discovered_at=envelope_time()),
    )
    data = envelope.to_dict()
    assert data["occurred_at"] == "2026-04-28T12:00:00.5Z"
    assert data["payload"]["discovered_at"] == "2026-04-28T12:00:00Z"
    assert "location" not in data["payload"]
    assert "published_at" not in data["payload"]
    assert data["payload"]["external_id"] == ""


def test_drafted_payload_uses_document_key():
    data = ApplicationMaterialsDraftedPayload(cover_letter_doc_id=9).to_dict()
    assert data["cover_letter_document_id"] == 9
    assert "cover_letter_doc_id" not in data


def test_parsed_payload_keeps_zero_salary_pointer():
    data = JobParsedPayload(salary_min=0).to_dict()
    assert data["salary_min"] == 0
    assert "salary_max" not in data


def test_envelope_json_round_trip():
    original = events.new_job_matched(
        "source",
        "corr",
        JobMatchedPayload(
            job_id=5, candidate_profile_id=2, score=77, matched_skills=["Go"],
            missing_skills=["Docker"], notes=["n"], matched_at=envelope_time(),
        ),
    )
    decoded = Envelope.from_json(original.to_json(), JobMatchedPayload)
    assert decoded == original


def test_from_json_rejects_non_object():
    with pytest.raises(ValueError):
        Envelope.from_json(json.dumps([1, 2]), JobMatchedPayload)
    with pytest.raises(ValueError):
        Envelope.from_json("{not json", JobMatchedPayload)