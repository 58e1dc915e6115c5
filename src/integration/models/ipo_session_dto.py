"""Transport-level models exchanged with the IP Office management API."""

from dataclasses import dataclass
from urllib.parse import urlsplit


@dataclass(frozen=True)
class IpoCredentials:
    """Connection credentials for one appliance, supplied per call and never persisted."""

    host: str  # Bare hostname/IP or full URL; scheme, port and path are discarded
    username: str
    password: str  # May be empty for codeless accounts
    allow_insecure_tls: bool = False  # Skip certificate validation (self-signed appliances)

    def __post_init__(self) -> None:
        if not self.host or not self.host.strip():
            raise ValueError("IP Office host must not be empty")
        candidate = self.host.strip()
        if not urlsplit(candidate if "://" in candidate else f"https://{candidate}").hostname:
            raise ValueError(f"Cannot derive an IP Office hostname from {self.host!r}")
        if not self.username or not self.username.strip():
            raise ValueError("IP Office username must not be empty")

    def __repr__(self) -> str:
        return (
            f"IpoCredentials(host={self.host!r}, username={self.username!r}, "
            f"allow_insecure_tls={self.allow_insecure_tls!r})"
        )


@dataclass(frozen=True)
class IpoSession:
    """Session credential returned by a successful authentication."""

    cookie_header: str  # "JSESSIONID=...; SDK-Token=...; ..."

    def __repr__(self) -> str:
        return "IpoSession(cookie_header=***)"


@dataclass(frozen=True)
class IpoRawResponse:
    """Raw outcome of a resource call, handed to the envelope parser."""

    status_code: int
    text: str
    content_type: str | None


@dataclass(frozen=True)
class IpoDeauthResult:
    """Outcome of a best-effort logout, kept for diagnostics only."""

    ok: bool
    status_code: int | None = None
    text: str = ""
    url: str | None = None
