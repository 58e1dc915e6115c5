"""Mapping of appliance responses to the dicts returned by handlers."""

from typing import Any

from integration.models.ipo_session_dto import IpoRawResponse
from integration.services.ipo_envelope_parser import ParsedEnvelope


def _response_meta(response: IpoRawResponse) -> dict[str, Any]:
    return {
        "upstream_status": response.status_code,
        "upstream_content_type": response.content_type,
    }


def to_records_result(
    response: IpoRawResponse,
    parsed: ParsedEnvelope,
    include_raw: bool = False,
) -> dict[str, Any]:
    """Build the read result: records, optional raw body and upstream metadata."""
    result: dict[str, Any] = {
        "records": parsed.records,
        "meta": {**_response_meta(response), "parsed_as": parsed.format.value},
    }
    if include_raw:
        result["raw"] = response.text
    return result


def to_mutation_result(response: IpoRawResponse, include_raw: bool = False) -> dict[str, Any]:
    """Build the result of an accepted create/update/delete."""
    result: dict[str, Any] = {"ok": True, "meta": _response_meta(response)}
    if include_raw:
        result["raw"] = response.text
    return result
