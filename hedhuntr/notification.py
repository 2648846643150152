"""Notification rules, message formatting and webhook delivery."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from dataclasses import dataclass, field

from hedhuntr.events import (
    SUBJECT_APPLICATIONS_READY,
    SUBJECT_JOBS_MATCHED,
    ApplicationReadyPayload,
    JobMatchedPayload,
)

_USER_AGENT = "hedhuntr-notification-worker/0.1"
_MAX_RESPONSE_BYTES = 4096
_DEFAULT_TIMEOUT = 10.0


@dataclass
class ChannelConfig:
    name: str = ""
    type: str = ""
    enabled: bool = False
    webhook_url: str = ""


@dataclass
class NotificationConfig:
    min_score: int = 0
    notify_jobs_matched: bool = False
    notify_applications_ready: bool = False
    channels: list[ChannelConfig] = field(default_factory=list)


@dataclass
class Channel:
    name: str = ""
    type: str = ""
    enabled: bool = False
    webhook_url: str = ""


@dataclass
class DeliveryResult:
    status_code: int = 0
    response_body: str = ""
    error: str = ""


def _encode_json(body: dict[str, str]) -> bytes:
    text = json.dumps(body, ensure_ascii=False, separators=(",", ":"))
    for raw, escaped in (("<", "\\u003c"), (">", "\\u003e"), ("&", "\\u0026"),
                         ("\u2028", "\\u2028"), ("\u2029", "\\u2029")):
        text = text.replace(raw, escaped)
    return text.encode("utf-8")


class Sender:
    """Posts messages to Discord or Slack webhooks."""

    def __init__(self, timeout: float = 0) -> None:
        self.timeout = timeout if timeout > 0 else _DEFAULT_TIMEOUT

    def send(self, channel: Channel, message: str) -> DeliveryResult:
        if not channel.enabled:
            return DeliveryResult(error="channel disabled")
        if not channel.webhook_url:
            return DeliveryResult(error="missing webhook_url")
        if channel.type == "discord":
            body = _encode_json({"content": message})
        elif channel.type == "slack":
            body = _encode_json({"text": message})
        else:
            return DeliveryResult(error=f'unsupported channel type "{channel.type}"')

        try:
            request = urllib.request.Request(
                channel.webhook_url,
                data=body,
                method="POST",
                headers={"Content-Type": "application/json", "User-Agent": _USER_AGENT},
            )
        except ValueError as exc:
            return DeliveryResult(error=str(exc))

        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                status = response.status
                raw = response.read(_MAX_RESPONSE_BYTES)
        except urllib.error.HTTPError as exc:
            status = exc.code
            try:
                raw = exc.read(_MAX_RESPONSE_BYTES)
            finally:
                exc.close()
        except (urllib.error.URLError, OSError, ValueError) as exc:
            return DeliveryResult(error=str(exc))

        result = DeliveryResult(
            status_code=status,
            response_body=raw.decode("utf-8", errors="replace").strip(),
        )
        if not 200 <= status <= 299:
            result.error = f"webhook returned status {status}"
        return result


def channels_from_config(channels: list[ChannelConfig]) -> list[Channel]:
    """Normalize configured channels."""
    return [
        Channel(
            name=channel.name,
            type=channel.type.strip().lower(),
            enabled=channel.enabled,
            webhook_url=channel.webhook_url.strip(),
        )
        for channel in channels
    ]


def should_notify(subject: str, score: int, config: NotificationConfig) -> bool:
    """Decide whether an event on subject warrants a notification."""
    if subject == SUBJECT_JOBS_MATCHED:
        return config.notify_jobs_matched and score >= config.min_score
    if subject == SUBJECT_APPLICATIONS_READY:
        return config.notify_applications_ready
    return False


def _join_or_none(values: list[str]) -> str:
    return ", ".join(values) if values else "none"


def format_job_matched(payload: JobMatchedPayload) -> str:
    return (
        f"Job match: job #{payload.job_id} scored {payload.score} for candidate "
        f"#{payload.candidate_profile_id}\n"
        f"Matched skills: {_join_or_none(payload.matched_skills)}\n"
        f"Missing skills: {_join_or_none(payload.missing_skills)}"
    )


def format_application_ready(payload: ApplicationReadyPayload) -> str:
    return (
        f"Application ready: job #{payload.job_id} is ready to apply for candidate "
        f"#{payload.candidate_profile_id} with match score {payload.match_score}."
    )