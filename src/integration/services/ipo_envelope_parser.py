"""Normalization of IP Office response envelopes.

The appliance answers with::

    {"response": {"@status": "1", "data": {"ws_object": <object> | [<object>, ...]}}}

where every ``ws_object`` entry wraps one entity under its type name
(``User``, ``Extension``, ``License``, ``System``). The embedded ``@status``
is independent of the HTTP status: ``"1"`` carries data, ``"0"`` means the
appliance returned nothing or rejected the operation.

Parsing is pure and never raises; unparseable bodies degrade to an empty
result tagged ``unknown``.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any
from xml.sax.saxutils import unescape

from integration.enums import IpoAppStatus, IpoEnvelopeFormat

NormalizedRecord = dict[str, str]
"""Flat string mapping of one entity: promoted camel-case keys plus every original field."""

GENERIC_ERROR_DESCRIPTION = "IP Office returned an error."

GUID_FIELDS = ("@GUID", "GUID", "guid")

# Well-known fields copied to canonical keys, per record key
PROMOTED_FIELDS: dict[str, dict[str, tuple[str, ...]]] = {
    "User": {
        "name": ("Name",),
        "fullName": ("FullName",),
        "extension": ("Extension",),
        "assignedPackage": ("AssignedPackage",),
    },
    "Extension": {
        "id": ("Id",),
        "extension": ("Extension",),
        "typeInfo": ("TypeInfo",),
        "callerDisplayType": ("CallerDisplayType",),
        "module": ("Module",),
        "port": ("Port",),
        "location": ("Location",),
    },
    "License": {
        "licenseKey": ("LicenseKey",),
        "source": ("Source",),
        "type": ("Type",),
        "status": ("Status",),
        "quantity": ("Quantity",),
        "freeInstances": ("FreeInstances",),
        "expiryDate": ("ExpiryDate",),
        "mode": ("Mode",),
        "displayName": ("DisplayName",),
    },
    "System": {
        "name": ("Name", "DisplayName", "SystemName"),
    },
}

# Hardware descriptors the console never edits
OMITTED_FIELDS: dict[str, frozenset[str]] = {
    "User": frozenset({"ExpansionType", "PhoneType", "SpecificBstType"}),
}

# Record keys that still come back as XML on older firmware
XML_FALLBACK_KEYS = frozenset({"User"})

_XML_USER_BLOCK = re.compile(r"<User\b[\s\S]*?</User>")
_XML_GUID_ATTRIBUTE = re.compile(r'\bGUID="([^"]+)"')


@dataclass(frozen=True)
class ParsedEnvelope:
    """Records extracted from one response body."""

    records: list[NormalizedRecord] = field(default_factory=list)
    format: IpoEnvelopeFormat = IpoEnvelopeFormat.UNKNOWN
    status: IpoAppStatus = IpoAppStatus.UNKNOWN


def to_field_string(value: Any) -> str:
    """Stringify a field value the way the appliance renders it."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def _as_mapping(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, list):
        return value
    return [value] if value else []


def _first_present(entity: dict[str, Any], *names: str) -> str:
    for name in names:
        value = entity.get(name)
        if value is not None:
            return to_field_string(value)
    return ""


def _load_response(text: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(text)
    except (ValueError, TypeError):
        return None
    root = _as_mapping(parsed)
    return _as_mapping(root.get("response")) if root else None


def read_app_status(response: dict[str, Any]) -> IpoAppStatus:
    """Classify the application-level status of a ``response`` envelope."""
    raw = response.get("@status")
    if raw is None:
        raw = response.get("status")
    status = to_field_string(raw).strip()
    if status == IpoAppStatus.SUCCESS.value:
        return IpoAppStatus.SUCCESS
    if status == IpoAppStatus.FAILURE.value:
        return IpoAppStatus.FAILURE
    return IpoAppStatus.UNKNOWN


def _ws_objects(response: dict[str, Any]) -> list[Any]:
    data = _as_mapping(response.get("data")) or {}
    return _as_list(data.get("ws_object"))


def _system_details(entity: dict[str, Any]) -> dict[str, str]:
    major = _first_present(entity, "MajorVersion")
    version = ""
    if major:
        minor = _first_present(entity, "MinorVersion") or "0"
        maint = _first_present(entity, "SystemVersionMaint") or "0"
        special = _first_present(entity, "SystemVersionSpecialRel") or "0"
        feature_pack = _first_present(entity, "SystemVersionFeaturePack") or "0"
        build = _first_present(entity, "BuildVersion") or "0"
        version = f"{major}.{minor}.{maint}.{special}.{feature_pack} build {build}"

    lans = _as_mapping(entity.get("LANS")) or {}
    lan_entries = [lan for lan in _as_list(lans.get("LAN") or lans.get("Lan")) if isinstance(lan, dict)]

    def lan_ip(lan_id: str) -> str:
        match = next((lan for lan in lan_entries if to_field_string(lan.get("@id")).upper() == lan_id), None)
        if match is None:
            return ""
        return _first_present(match, "IPAddress", "IpAddress", "LANIPAddress", "LANIpAddress")

    voicemail = _as_mapping(entity.get("Voicemail")) or {}

    return {
        "version": version,
        "lan1IpAddress": lan_ip("LAN1"),
        "lan2IpAddress": lan_ip("LAN2"),
        "voicemailType": _first_present(voicemail, "Type", "type"),
    }


def normalize_record(entity: dict[str, Any], record_key: str) -> NormalizedRecord:
    """Flatten one entity into a string mapping with promoted convenience keys.

    Promoted keys come first and win over an original field of the same name;
    every other original field is kept with its original casing.
    """
    omitted = OMITTED_FIELDS.get(record_key, frozenset())

    record: NormalizedRecord = {"guid": _first_present(entity, *GUID_FIELDS)}
    for canonical, sources in PROMOTED_FIELDS.get(record_key, {}).items():
        record[canonical] = _first_present(entity, *sources)
    if record_key == "System":
        record.update(_system_details(entity))

    for key, value in entity.items():
        if key in omitted:
            continue
        record.setdefault(key, to_field_string(value))
    return record


def _xml_element_text(block: str, tag: str) -> str:
    match = re.search(rf"<{tag}>([\s\S]*?)</{tag}>", block)
    return unescape(match.group(1)).strip() if match else ""


def parse_users_xml(text: str) -> list[NormalizedRecord]:
    """Best-effort extraction of ``<User>`` blocks from a legacy XML body.

    Only the identifier and the four promoted user fields are recovered.
    """
    users: list[NormalizedRecord] = []
    for block in _XML_USER_BLOCK.findall(text):
        guid_match = _XML_GUID_ATTRIBUTE.search(block)
        guid = guid_match.group(1).strip() if guid_match else ""
        name = _xml_element_text(block, "Name")
        if not (guid or name):
            continue
        users.append(
            {
                "guid": guid,
                "name": name,
                "fullName": _xml_element_text(block, "FullName"),
                "extension": _xml_element_text(block, "Extension"),
                "assignedPackage": _xml_element_text(block, "AssignedPackage"),
            }
        )
    return users


def parse_envelope(text: str, record_key: str) -> ParsedEnvelope:
    """Parse a response body into normalized records.

    Args:
        text: Raw response body
        record_key: Key wrapping each entity (``User``, ``Extension`` ...)

    Returns:
        ParsedEnvelope; an application-level failure yields no records with
        format ``json``, an unrecognized body yields no records with format
        ``unknown``
    """
    response = _load_response(text)
    if response is not None:
        status = read_app_status(response)

        if status is IpoAppStatus.SUCCESS:
            records = []
            for item in _ws_objects(response):
                entity = _as_mapping((_as_mapping(item) or {}).get(record_key))
                if entity is not None:
                    records.append(normalize_record(entity, record_key))
            return ParsedEnvelope(records=records, format=IpoEnvelopeFormat.JSON, status=status)

        if status is IpoAppStatus.FAILURE:
            return ParsedEnvelope(format=IpoEnvelopeFormat.JSON, status=status)

    if isinstance(text, str) and text.lstrip().startswith("<") and record_key in XML_FALLBACK_KEYS:
        return ParsedEnvelope(records=parse_users_xml(text), format=IpoEnvelopeFormat.XML)

    return ParsedEnvelope()


def parse_error_description(text: str) -> str | None:
    """Extract the appliance's own error message from a failure envelope.

    Returns:
        ``SMAError.error.error_desc`` (or a generic message) when the embedded
        status is the failure code, otherwise None
    """
    response = _load_response(text)
    if response is None or read_app_status(response) is not IpoAppStatus.FAILURE:
        return None

    for item in _ws_objects(response):
        sma_error = _as_mapping((_as_mapping(item) or {}).get("SMAError"))
        error = _as_mapping((sma_error or {}).get("error"))
        description = to_field_string((error or {}).get("error_desc")).strip()
        if description:
            return description
    return GENERIC_ERROR_DESCRIPTION
