"""Job sources that discover postings: static lists and Greenhouse boards."""

from __future__ import annotations

import html
import json
import re
import urllib.error
import urllib.parse
import urllib.request
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, ClassVar, Iterable

from hedhuntr.events import JobDiscoveredPayload, parse_time

GREENHOUSE_BASE_URL = "https://boards-api.greenhouse.io/v1/boards"
_USER_AGENT = "hedhuntr-source-producer/0.1"
_GREENHOUSE_TIMEOUT = 20.0
_MAX_ERROR_BODY = 4096

_HTML_TAG_PATTERN = re.compile(r"<[^>]*>")

_STATIC_JOB_FIELDS = (
    "external_id",
    "title",
    "company",
    "location",
    "remote_policy",
    "employment_type",
    "source_url",
    "application_url",
    "description",
)


class SourceError(Exception):
    """Raised when a source is misconfigured or cannot be fetched."""


@dataclass
class SourceConfig:
    """Configuration of one job source; settings may be a dict or JSON text."""

    name: str = ""
    type: str = ""
    enabled: bool = False
    settings: Any = None


def _decode_settings(config: SourceConfig) -> dict[str, Any]:
    settings = config.settings
    if settings is None or (isinstance(settings, (str, bytes)) and len(settings) == 0):
        raise SourceError(f'source "{config.name}" settings are required')
    if isinstance(settings, (str, bytes)):
        try:
            settings = json.loads(settings)
        except ValueError as exc:
            raise SourceError(f'decode settings for source "{config.name}": {exc}') from exc
    if settings is None:
        return {}
    if not isinstance(settings, dict):
        raise SourceError(f'decode settings for source "{config.name}": settings must be an object')
    return settings


def _typed(value: Any, kind: type, default: Any, source_name: str, key: str) -> Any:
    if value is None:
        return default
    if not isinstance(value, kind):
        raise SourceError(
            f'decode settings for source "{source_name}": {key} must be {kind.__name__}'
        )
    return value


class Source(ABC):
    """A place that job postings are discovered from."""

    type: ClassVar[str] = ""

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def fetch(self) -> list[JobDiscoveredPayload]:
        """Return the jobs currently listed by this source."""


class StaticSource(Source):
    """A fixed list of jobs taken from configuration."""

    type: ClassVar[str] = "static"

    def __init__(self, name: str, jobs: list[dict[str, Any]]) -> None:
        super().__init__(name)
        self.jobs = jobs

    @classmethod
    def from_config(cls, config: SourceConfig) -> "StaticSource":
        settings = _decode_settings(config)
        raw_jobs = _typed(settings.get("jobs"), list, [], config.name, "jobs")
        if not raw_jobs:
            raise SourceError(f'source "{config.name}" requires at least one static job')

        jobs: list[dict[str, Any]] = []
        for i, entry in enumerate(raw_jobs):
            entry = _typed(entry, dict, {}, config.name, f"jobs[{i}]")
            job = {
                key: _typed(entry.get(key), str, "", config.name, f"jobs[{i}].{key}")
                for key in _STATIC_JOB_FIELDS
            }
            skills = _typed(entry.get("detected_skills"), list, None, config.name,
                            f"jobs[{i}].detected_skills")
            job["detected_skills"] = None if skills is None else [
                _typed(skill, str, "", config.name, f"jobs[{i}].detected_skills") for skill in skills
            ]
            for key in ("title", "company", "source_url"):
                if not job[key].strip():
                    raise SourceError(f'source "{config.name}" jobs[{i}].{key} is required')
            jobs.append(job)
        return cls(config.name, jobs)

    def fetch(self) -> list[JobDiscoveredPayload]:
        now = datetime.now(timezone.utc)
        return [
            JobDiscoveredPayload(
                source=self.name,
                external_id=job["external_id"].strip(),
                title=job["title"].strip(),
                company=job["company"].strip(),
                location=job["location"].strip(),
                remote_policy=job["remote_policy"].strip(),
                employment_type=job["employment_type"].strip(),
                source_url=job["source_url"].strip(),
                application_url=job["application_url"].strip(),
                description=job["description"].strip(),
                detected_skills=list(job["detected_skills"] or []),
                discovered_at=now,
                raw=dict(job),
            )
            for job in self.jobs
        ]


def _names(values: Any) -> list[dict[str, Any]] | None:
    if values is None:
        return None
    return [{"name": (item or {}).get("name", "")} for item in values]


class GreenhouseSource(Source):
    """Jobs published on a Greenhouse job board."""

    type: ClassVar[str] = "greenhouse"

    def __init__(self, name: str, board_token: str, company: str = "",
                 include_content: bool = False, base_url: str = GREENHOUSE_BASE_URL,
                 timeout: float = _GREENHOUSE_TIMEOUT) -> None:
        super().__init__(name)
        self.board_token = board_token
        self.company = company or board_token
        self.include_content = include_content
        self.base_url = base_url
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: SourceConfig) -> "GreenhouseSource":
        settings = _decode_settings(config)
        board = _typed(settings.get("board_token"), str, "", config.name, "board_token")
        company = _typed(settings.get("company"), str, "", config.name, "company")
        include_content = _typed(settings.get("include_content"), bool, False, config.name,
                                 "include_content")
        if not board:
            raise SourceError(f'source "{config.name}" requires settings.board_token')
        return cls(config.name, board, company, include_content)

    def _url(self) -> str:
        board_path = urllib.parse.quote(self.board_token.strip("/"), safe="/")
        url = f"{self.base_url.rstrip('/')}/{board_path}/jobs"
        if self.include_content:
            url += "?" + urllib.parse.urlencode({"content": "true"})
        return url

    def fetch(self) -> list[JobDiscoveredPayload]:
        request = urllib.request.Request(
            self._url(),
            method="GET",
            headers={"Accept": "application/json", "User-Agent": _USER_AGENT},
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                body = response.read()
        except urllib.error.HTTPError as exc:
            try:
                detail = exc.read(_MAX_ERROR_BODY).decode("utf-8", errors="replace").strip()
            finally:
                exc.close()
            raise SourceError(f"greenhouse returned status {exc.code}: {detail}") from exc
        except (urllib.error.URLError, OSError) as exc:
            raise SourceError(str(exc)) from exc

        try:
            parsed = json.loads(body)
            if not isinstance(parsed, dict):
                raise ValueError("response must be a JSON object")
            listed = parsed.get("jobs") or []
            if not isinstance(listed, list):
                raise ValueError("jobs must be a list")
        except ValueError as exc:
            raise SourceError(f"decode greenhouse response: {exc}") from exc

        now = datetime.now(timezone.utc)
        return [self._payload(job or {}, now) for job in listed]

    def _payload(self, job: dict[str, Any], now: datetime) -> JobDiscoveredPayload:
        location = job.get("location") or {}
        url = (job.get("absolute_url") or "").strip()
        raw = {
            "id": int(job.get("id") or 0),
            "title": job.get("title") or "",
            "absolute_url": job.get("absolute_url") or "",
            "updated_at": job.get("updated_at") or "",
            "content": job.get("content") or "",
            "location": {"name": location.get("name") or ""},
            "metadata": None if job.get("metadata") is None else [
                {"name": (item or {}).get("name", ""), "value": (item or {}).get("value")}
                for item in job["metadata"]
            ],
            "departments": _names(job.get("departments")),
            "offices": _names(job.get("offices")),
        }
        return JobDiscoveredPayload(
            source=self.name,
            external_id=str(raw["id"]),
            title=raw["title"].strip(),
            company=self.company,
            location=raw["location"]["name"].strip(),
            source_url=url,
            application_url=url,
            description=text_from_html(raw["content"]),
            published_at=parse_greenhouse_time(raw["updated_at"]),
            discovered_at=now,
            raw=raw,
        )


_BUILDERS: dict[str, type[StaticSource] | type[GreenhouseSource]] = {
    "greenhouse": GreenhouseSource,
    "static": StaticSource,
}


def build_sources(configs: Iterable[SourceConfig]) -> list[Source]:
    """Build every enabled source; at least one must be enabled."""
    built: list[Source] = []
    for config in configs:
        if not config.enabled:
            continue
        builder = _BUILDERS.get(config.type)
        if builder is None:
            raise SourceError(
                f'unsupported source type "{config.type}" for source "{config.name}"'
            )
        built.append(builder.from_config(config))
    if not built:
        raise SourceError("no enabled sources configured")
    return built


def text_from_html(value: str) -> str:
    """Strip tags and entities from HTML and collapse whitespace."""
    if not value:
        return ""
    unescaped = html.unescape(_HTML_TAG_PATTERN.sub(" ", value))
    return " ".join(unescaped.split())


def parse_greenhouse_time(value: str) -> datetime | None:
    """Parse a Greenhouse timestamp into UTC, or None when absent or invalid."""
    if not value:
        return None
    try:
        return parse_time(value).astimezone(timezone.utc)
    except ValueError:
        return None