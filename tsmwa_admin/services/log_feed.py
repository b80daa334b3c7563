"""Remote system log feed.

The backend and notification services expose their logs over HTTP as JSON.
This module fetches those feeds and normalizes entries for the logs page.

`fetch` lets `requests` exceptions and malformed JSON propagate. `fetch_all`
turns a failing source into an error row and raises only when no source
answered, so the data-access layer reports a single failure type.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

import requests

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogRecord:
    source: str
    timestamp: str = ""
    level: str = ""
    message: str = ""
    extra: Mapping[str, Any] = field(default_factory=dict)
    # True for the placeholder row of a source that could not be fetched.
    failed: bool = False


def _normalize_entry(source: str, raw: Any) -> LogRecord:
    """Accept dict entries or raw JSON/text lines (winston-style files)."""
    if isinstance(raw, str):
        line = raw.strip()
        try:
            raw = json.loads(line)
        except ValueError:
            return LogRecord(source=source, message=line)
        if not isinstance(raw, dict):
            return LogRecord(source=source, message=line)

    if not isinstance(raw, dict):
        return LogRecord(source=source, message=str(raw))

    known = {"timestamp", "time", "level", "message", "msg"}
    return LogRecord(
        source=source,
        timestamp=str(raw.get("timestamp") or raw.get("time") or ""),
        level=str(raw.get("level") or "").lower(),
        message=str(raw.get("message") or raw.get("msg") or ""),
        extra={k: v for k, v in raw.items() if k not in known},
    )


def _entries(payload: Any) -> Iterable[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("logs", "data", "entries"):
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return []


class LogFeed:
    def __init__(
        self,
        base_url: str,
        sources: Mapping[str, str],
        *,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.sources: Dict[str, str] = dict(sources or {})
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "LogFeed":
        return cls(
            config.get("LOG_API_URL", ""),
            config.get("LOG_SOURCES", {}),
            timeout=float(config.get("LOG_API_TIMEOUT", 5.0)),
        )

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.sources)

    def url_for(self, source: str) -> str:
        return f"{self.base_url}{self.sources[source]}"

    def fetch(self, source: str) -> List[LogRecord]:
        url = self.url_for(source)
        r = self.session.get(url, timeout=self.timeout)
        r.raise_for_status()
        records = [_normalize_entry(source, raw) for raw in _entries(r.json())]
        logger.debug("Fetched %d log entries from %s", len(records), source)
        return records

    def fetch_all(self) -> List[LogRecord]:
        """Every configured source, newest first. Empty when unconfigured.

        Each source is fetched on its own. A source that fails becomes one
        `failed` record at the top of the list; the last error is re-raised
        only when every source failed.
        """
        if not self.configured:
            return []
        records: List[LogRecord] = []
        failures: List[LogRecord] = []
        error: Optional[Exception] = None
        for source in self.sources:
            try:
                records.extend(self.fetch(source))
            except (requests.RequestException, ValueError) as exc:
                logger.warning("Log source %s failed: %s", source, exc)
                failures.append(
                    LogRecord(source=source, level="error", message=f"Could not load {source} logs: {exc}", failed=True)
                )
                error = exc
        if error is not None and len(failures) == len(self.sources):
            raise error
        records.sort(key=lambda rec: rec.timestamp, reverse=True)
        return failures + records

    def close(self) -> None:
        self.session.close()
