import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from hedhuntr.events import (
    SUBJECT_APPLICATIONS_READY,
    SUBJECT_JOBS_MATCHED,
    ApplicationReadyPayload,
    JobMatchedPayload,
)
from hedhuntr.notification import (
    Channel,
    ChannelConfig,
    NotificationConfig,
    Sender,
    channels_from_config,
    format_application_ready,
    format_job_matched,
    should_notify,
)


@pytest.fixture
def webhook_server():
    servers = []

    def start(status, reply=b""):
        received = {}

        class Handler(BaseHTTPRequestHandler):
            def do_POST(self):
                length = int(self.headers.get("Content-Length", 0))
                received["method"] = self.command
                received["content_type"] = self.headers.get("Content-Type")
                received["body"] = json.loads(self.rfile.read(length))
                self.send_response(status)
                payload = b"" if status == 204 else reply
                self.send_header("Content-Length", str(len(payload)))
                self.end_headers()
                if payload:
                    self.wfile.write(payload)

            def log_message(self, *args):
                pass

        server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        servers.append(server)
        return f"http://127.0.0.1:{server.server_address[1]}/hook", received

    yield start
    for server in servers:
        server.shutdown()
        server.server_close()


def test_format_job_matched():
    message = format_job_matched(
        JobMatchedPayload(job_id=42, candidate_profile_id=7, score=83,
                          matched_skills=["Go", "NATS"], missing_skills=["Docker"])
    )
    for want in ["job #42", "scored 83", "Go, NATS", "Docker"]:
        assert want in message


def test_format_job_matched_without_skills():
    message = format_job_matched(JobMatchedPayload(job_id=1, candidate_profile_id=2, score=50))
    assert message == (
        "Job match: job #1 scored 50 for candidate #2\n"
        "Matched skills: none\nMissing skills: none"
    )


def test_format_application_ready():
    message = format_application_ready(
        ApplicationReadyPayload(job_id=42, candidate_profile_id=7, match_score=82)
    )
    assert message == "Application ready: job #42 is ready to apply for candidate #7 with match score 82."


def test_should_notify():
    cfg = NotificationConfig(min_score=70, notify_jobs_matched=True, notify_applications_ready=True)
    assert should_notify(SUBJECT_JOBS_MATCHED, 69, cfg) is False
    assert should_notify(SUBJECT_JOBS_MATCHED, 70, cfg) is True
    assert should_notify(SUBJECT_APPLICATIONS_READY, 0, cfg) is True
    assert should_notify("jobs.parsed", 100, cfg) is False


def test_should_notify_respects_disabled_rules():
    cfg = NotificationConfig(min_score=0)
    assert should_notify(SUBJECT_JOBS_MATCHED, 100, cfg) is False
    assert should_notify(SUBJECT_APPLICATIONS_READY, 100, cfg) is False


def test_channels_from_config_normalizes():
    channels = channels_from_config(
        [ChannelConfig(name="team", type=" Slack ", enabled=True, webhook_url=" https://example.com/hook ")]
    )
    assert channels == [Channel(name="team", type="slack", enabled=True, webhook_url="https://example.com/hook")]


def test_sender_sends_discord_webhook(webhook_server):
    url, received = webhook_server(204)
    result = Sender(0).send(Channel(name="discord", type="discord", enabled=True, webhook_url=url), "hello")
    assert result.error == ""
    assert result.status_code == 204
    assert received["method"] == "POST"
    assert received["content_type"] == "application/json"
    assert received["body"]["content"] == "hello"


def test_sender_sends_slack_webhook(webhook_server):
    url, received = webhook_server(200, b" ok ")
    result = Sender(0).send(Channel(name="slack", type="slack", enabled=True, webhook_url=url), "hello")
    assert result.error == ""
    assert result.response_body == "ok"
    assert received["body"]["text"] == "hello"


def test_sender_reports_error_status(webhook_server):
    url, _ = webhook_server(500, b"boom")
    result = Sender(5).send(Channel(name="slack", type="slack", enabled=True, webhook_url=url), "hello")
    assert result.status_code == 500
    assert result.response_body == "boom"
    assert result.error == "webhook returned status 500"


def test_sender_rejects_disabled_channel():
    result = Sender().send(Channel(name="x", type="slack", enabled=False, webhook_url="http://localhost"), "m")
    assert result.error == "channel disabled"


def test_sender_requires_webhook_url():
    result = Sender().send(Channel(name="x", type="slack", enabled=True), "m")
    assert result.error == "missing webhook_url"


def test_sender_rejects_unsupported_type():
    result = Sender().send(Channel(name="x", type="email", enabled=True, webhook_url="http://localhost"), "m")
    assert result.error == 'unsupported channel type "email"'