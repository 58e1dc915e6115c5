"""Value Objects describing a stored IP Office connection."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class EncryptedSecret:
    """Authenticated-encryption envelope of a stored password (base64 fields)."""

    cipher: str
    iv: str
    tag: str

    def __repr__(self) -> str:
        return "EncryptedSecret(***)"


@dataclass(frozen=True)
class IpoServerConfig:
    """Connection config owned by one console operator."""

    id: str
    owner_id: str  # Stable identity of the operator (oid / upn / email)
    host: str
    username: str
    password_secret: EncryptedSecret
    name: str | None = None
    allow_insecure_tls: bool = False  # Per-appliance opt-out for self-signed certificates


@dataclass(frozen=True)
class UserStatsBaseline:
    """Last user statistics synced from an appliance."""

    server_config_id: str
    owner_id: str
    total_users: int
    licensed_count: int
    stats: dict[str, Any] = field(default_factory=dict)
    last_synced_at: datetime | None = None
