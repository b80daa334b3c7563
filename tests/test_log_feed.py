import pytest
import requests

from tsmwa_admin.services.log_feed import LogFeed, LogRecord


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    def __init__(self, responses):
        self.responses = responses
        self.urls = []
        self.closed = False

    def get(self, url, timeout=None):
        self.urls.append((url, timeout))
        return self.responses[url]

    def close(self):
        self.closed = True


SOURCES = {"backend": "/api/logs?type=combined", "notify": "/api/notify/logs"}


def _feed(responses):
    session = FakeSession(responses)
    return LogFeed("http://logs.local/", SOURCES, timeout=2.0, session=session), session


def test_unconfigured_feed_is_empty():
    feed = LogFeed("", SOURCES, session=FakeSession({}))
    assert not feed.configured
    assert feed.fetch_all() == []


def test_fetch_all_normalizes_and_sorts():
    feed, session = _feed(
        {
            "http://logs.local/api/logs?type=combined": FakeResponse(
                {"logs": [{"timestamp": "2025-01-01T10:00:00", "level": "INFO", "message": "started", "pid": 4}]}
            ),
            "http://logs.local/api/notify/logs": FakeResponse(
                [
                    '{"time": "2025-01-02T08:00:00", "level": "error", "msg": "smtp down"}',
                    "plain text line",
                ]
            ),
        }
    )
    records = feed.fetch_all()
    assert [r.message for r in records] == ["smtp down", "started", "plain text line"]
    assert records[0] == LogRecord(source="notify", timestamp="2025-01-02T08:00:00", level="error", message="smtp down", extra={})
    assert records[1].level == "info"
    assert records[1].extra == {"pid": 4}
    assert session.urls[0] == ("http://logs.local/api/logs?type=combined", 2.0)


def test_failed_source_becomes_error_row():
    feed, _ = _feed(
        {
            "http://logs.local/api/logs?type=combined": FakeResponse({"logs": [{"timestamp": "2025-01-01T10:00:00", "message": "started"}]}),
            "http://logs.local/api/notify/logs": FakeResponse({}, status=503),
        }
    )
    records = feed.fetch_all()
    assert [(r.source, r.failed) for r in records] == [("notify", True), ("backend", False)]
    assert records[0].level == "error"
    assert "503" in records[0].message
    assert records[1].message == "started"


def test_every_source_failing_raises():
    feed, _ = _feed(
        {
            "http://logs.local/api/logs?type=combined": FakeResponse({}, status=503),
            "http://logs.local/api/notify/logs": FakeResponse(ValueError("not json")),
        }
    )
    with pytest.raises(ValueError):
        feed.fetch_all()


def test_bad_json_propagates():
    feed, _ = _feed({"http://logs.local/api/logs?type=combined": FakeResponse(ValueError("not json"))})
    with pytest.raises(ValueError):
        feed.fetch("backend")


def test_from_config_and_close():
    feed = LogFeed.from_config({"LOG_API_URL": "http://x", "LOG_SOURCES": SOURCES, "LOG_API_TIMEOUT": "3"})
    assert feed.timeout == 3.0
    assert feed.url_for("notify") == "http://x/api/notify/logs"
    feed.close()
