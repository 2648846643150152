# hedhuntr

Building blocks for a personal job-hunting pipeline. Jobs are discovered from
configured sources, their descriptions are parsed for skills, salary and
policy details, they are scored against a candidate profile, and drafts of
tailored application materials are produced for a human to review.

The package uses only the standard library.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `hedhuntr.events`: typed payload dataclasses (`JobDiscoveredPayload`,
  `JobParsedPayload`, `JobMatchedPayload`, `ApplicationReadyPayload` and
  others) and the `Envelope` that wraps them. `Envelope.to_json()` and
  `Envelope.from_json(text, payload_type)` convert to and from JSON. Factory
  functions such as `new_job_discovered`, `new_job_parsed`,
  `new_job_matched` and `new_application_ready` fill in the event type,
  timestamp, event id and idempotency key. `stable_id(*parts)` is a hex
  SHA-256 of the lower-cased, trimmed parts; `job_idempotency_key(job)` uses
  the external id, then the application URL, then a hash of company, title,
  location and source URL.
- `hedhuntr.sources`: `StaticSource` (a fixed list of jobs from settings)
  and `GreenhouseSource` (jobs from a Greenhouse board over HTTP), each with
  `from_config(SourceConfig)` and `fetch()`. `build_sources(configs)` builds
  every enabled source and raises `SourceError` for unknown types or when none
  is enabled. `text_from_html` and `parse_greenhouse_time` are the helpers
  used for Greenhouse content.
- `hedhuntr.parser`: `JobParser(extra_skills).parse(title, description)`
  returns a `ParsedJob` with skills, requirement and responsibility items (at
  most eight each), a salary range in USD, remote policy, seniority and
  employment type. `extract_remote_policy`, `extract_seniority` and
  `extract_employment_type` are also usable on their own.
- `hedhuntr.matcher`: `score(profile, job)` rates a `Job` against a
  `CandidateProfile` from 0 to 100 and returns a `MatchResult` with matched
  and missing skills and notes.
- `hedhuntr.profile`: the candidate `Profile` with its work history,
  projects, education, certifications and links; `Profile.from_dict` and
  `Profile.to_dict`; `validate(profile)`, which raises `ProfileError`; and
  `assess_quality(profile)`, which returns a `QualityReport` whose status is
  `ready`, `usable` or `incomplete`.
- `hedhuntr.tuner`: `tune(TuneInput(...))` drafts a resume, a cover letter
  and application answers in Markdown from the stored `Profile` and an
  `ApplicationReadyContext`, and returns them in a `TuneOutput`.
- `hedhuntr.notification`: `should_notify`, `format_job_matched` and
  `format_application_ready` decide on and word a notification;
  `channels_from_config` normalises configured channels; `Sender(timeout)`
  posts a message to a Discord or Slack webhook and returns a
  `DeliveryResult` instead of raising.
- `hedhuntr.scheduler`: `due_sources(sources, now)` picks the enabled
  `JobSource` entries that never ran or whose interval has passed.
- `hedhuntr.views`: dashboard records (`APIJob`, `APIPipelineStage`,
  `APIWorkerState`, `APINotificationDelivery`) with `to_dict`, plus
  `format_salary`, `status_from_count`, `pipeline_stages` and
  `worker_states`.

## Example

```python
from hedhuntr.parser import JobParser
from hedhuntr.matcher import CandidateProfile, Job, score

parsed = JobParser(["Svelte"]).parse(
    "Senior Backend Engineer",
    "Requirements:\n- Go and SQLite\n- Remote friendly\nSalary: $140k - $180k",
)

result = score(
    CandidateProfile(id=1, name="Alex Example", skills=["Go", "SQLite"], remote_preference="remote"),
    Job(id=1, title="Senior Backend Engineer", skills=parsed.skills,
        salary_min=parsed.salary_min, salary_max=parsed.salary_max,
        remote_policy=parsed.remote_policy),
)
print(result.score, result.matched_skills, result.missing_skills)
```

## What it does not do

- It keeps nothing: there is no database. Jobs, matches, profiles, source
  run times and notification deliveries must be stored by the caller, and an
  `ApplicationReadyContext` or `JobSource` must be filled in from that store.
- It connects to no message broker. Envelopes are built and serialised to
  JSON, but publishing and consuming them is left to the caller.
- It has no command-line program, long-running workers or web server; the
  view records in `hedhuntr.views` are only the data such a dashboard would
  show.
- It does not fetch job description pages; the parser works on text it is
  given.

Every generated draft is meant for human review. Nothing is added that is not
already in the stored candidate profile.