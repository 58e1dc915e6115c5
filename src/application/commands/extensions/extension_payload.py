"""Extension envelope construction shared by the extension commands."""

from typing import Any

from integration.services.ipo_envelope_parser import to_field_string

# Editable extension fields: request key -> appliance key
EXTENSION_FIELDS = {
    "extension": "Extension",
    "typeInfo": "TypeInfo",
    "callerDisplayType": "CallerDisplayType",
    "module": "Module",
    "port": "Port",
    "location": "Location",
}


def build_extension_payload(fields: dict[str, Any], guid: str | None = None) -> dict[str, Any]:
    """Build an ``Extension`` envelope holding only the non-empty fields.

    Raises:
        ValueError: On an unknown field
    """
    unknown = sorted(set(fields) - set(EXTENSION_FIELDS) - {"guid"})
    if unknown:
        raise ValueError(f"Unknown extension field(s): {', '.join(unknown)}")

    extension: dict[str, str] = {}
    if guid:
        extension["@GUID"] = guid
    for key, appliance_key in EXTENSION_FIELDS.items():
        value = to_field_string(fields.get(key))
        if value:
            extension[appliance_key] = value

    return {"data": {"ws_object": {"Extension": extension}}}
