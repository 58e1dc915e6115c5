from enum import Enum


class IpoAppStatus(str, Enum):
    """Application-level status embedded in the appliance response envelope."""
    SUCCESS = "1"
    FAILURE = "0"
    UNKNOWN = "unknown"  # Envelope could not be classified


class IpoEnvelopeFormat(str, Enum):
    JSON = "json"
    XML = "xml"
    UNKNOWN = "unknown"


class IpoRecordKind(str, Enum):
    """Appliance entities exposed by the management API.

    The value is the key the appliance wraps each entity under inside
    ``response.data.ws_object``.
    """
    USERS = "User"
    EXTENSIONS = "Extension"
    LICENSES = "License"
    SYSTEMS = "System"

    @property
    def record_key(self) -> str:
        return self.value

    @property
    def resource_path(self) -> str:
        return f"/admin/v1/{self.name.lower()}"
