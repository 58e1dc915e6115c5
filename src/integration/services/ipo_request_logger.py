"""Best-effort, redacting logger for IP Office request/response exchanges.

Only mutating calls (POST/PUT) are persisted, one JSON line per exchange in a
day-partitioned file. Writes are detached from the caller: scheduling a log
entry never blocks the request and never raises.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

import aiofiles
import aiofiles.os

if TYPE_CHECKING:
    from neuroglia.hosting.web import WebApplicationBuilder

log = logging.getLogger(__name__)

REDACTED = "***REDACTED***"
MAX_RESPONSE_TEXT_LENGTH = 2000
PERSISTED_METHODS = frozenset({"POST", "PUT"})

# Compared against the key lowercased with separators removed
_SENSITIVE_KEY_MARKERS = ("password", "passwd", "logincode", "voicemailcode")
_SENSITIVE_KEYS = frozenset({"pwd", "pass", "pin"})


def is_sensitive_key(key: Any) -> bool:
    """Check whether a field name looks like a password/login code/voicemail code."""
    folded = str(key).lower().replace("_", "").replace("-", "").replace(" ", "")
    if folded in _SENSITIVE_KEYS or folded.endswith("pwd"):
        return True
    return any(marker in folded for marker in _SENSITIVE_KEY_MARKERS)


def redact_payload(obj: Any) -> Any:
    """Recursively replace sensitive field values, preserving structure otherwise."""
    if isinstance(obj, dict):
        return {k: REDACTED if is_sensitive_key(k) else redact_payload(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [redact_payload(v) for v in obj]
    if isinstance(obj, tuple):
        return tuple(redact_payload(v) for v in obj)
    return obj


def format_response_text(text: str | None) -> str:
    """Redact a JSON body and re-serialize it compactly, or truncate anything else."""
    if not text:
        return ""
    trimmed = text.strip()
    try:
        parsed = json.loads(trimmed)
    except ValueError:
        if len(trimmed) > MAX_RESPONSE_TEXT_LENGTH:
            return f"{trimmed[:MAX_RESPONSE_TEXT_LENGTH]}…"
        return trimmed
    return json.dumps(redact_payload(parsed), separators=(",", ":"), ensure_ascii=False)


@dataclass
class IpoRequestLogEntry:
    """One request/response exchange with the appliance."""

    method: str
    url: str
    ok: bool
    status_code: int | None = None
    error: str | None = None
    request_body: Any = None
    response_text: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_record(self) -> dict[str, Any]:
        """Serialize the entry with sensitive fields masked."""
        record: dict[str, Any] = {
            "ts": self.timestamp.isoformat(),
            "method": self.method.upper(),
            "url": self.url,
            "ok": self.ok,
            "status": self.status_code,
        }
        if self.error:
            record["error"] = self.error
        if self.request_body is not None:
            record["requestBody"] = redact_payload(self.request_body)
        if self.response_text is not None:
            record["responseText"] = format_response_text(self.response_text)
        return record


class IpoRequestLogger:
    """Persists mutating appliance exchanges to ``{log_dir}/{YYYY-MM-DD}.log``."""

    def __init__(self, log_dir: str | Path, enabled: bool = True):
        """Initialize the request logger.

        Args:
            log_dir: Directory receiving the day-partitioned log files
            enabled: When False, entries are dropped without being scheduled
        """
        self.log_dir = Path(log_dir)
        self.enabled = enabled
        self._pending: set[asyncio.Task] = set()

    def log(self, entry: IpoRequestLogEntry) -> None:
        """Schedule an entry for persistence and return immediately.

        GET/DELETE exchanges are not persisted. Never raises.
        """
        if not self.enabled or entry.method.upper() not in PERSISTED_METHODS:
            return
        try:
            loop = asyncio.get_running_loop()
            task = loop.create_task(self.write_async(entry))
        except RuntimeError as e:
            log.debug(f"Dropping IP Office request log entry (no running loop): {e}")
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def write_async(self, entry: IpoRequestLogEntry) -> None:
        """Append one JSON line for the entry; failures are swallowed."""
        try:
            await aiofiles.os.makedirs(self.log_dir, exist_ok=True)
            log_file = self.log_dir / f"{entry.timestamp.strftime('%Y-%m-%d')}.log"
            line = json.dumps(entry.to_record(), ensure_ascii=False, default=str)
            async with aiofiles.open(log_file, mode="a", encoding="utf-8") as f:
                await f.write(f"{line}\n")
        except Exception as e:
            log.debug(f"Failed to write IP Office request log to {self.log_dir}: {e}")

    async def drain(self) -> None:
        """Wait for all scheduled writes to complete."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @staticmethod
    def configure(builder: "WebApplicationBuilder") -> "IpoRequestLogger":
        """Register the request logger as a singleton in the DI container.

        Returns:
            The registered instance, so other clients can be wired to it
        """
        from application.settings import app_settings

        request_logger = IpoRequestLogger(
            log_dir=app_settings.ipo_request_log_dir,
            enabled=app_settings.ipo_request_log_enabled,
        )
        builder.services.add_singleton(IpoRequestLogger, singleton=request_logger)
        log.info("✅ IP Office request logger registered in DI container")
        return request_logger
