"""Update IP Office user command with handler."""

import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from neuroglia.core import OperationResult
from neuroglia.mediation import Command, CommandHandler
from opentelemetry import trace

from application.services.ipo_credentials_provider import IpoCredentialsProvider
from application.settings import Settings
from integration.enums import IpoRecordKind
from integration.services.ipo_api_client import IpoApiClient

from ..ipo_command_handler_base import IpoCommandHandlerBase

log = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

# Editable user fields: request key -> appliance key
USER_TEXT_FIELDS = {
    "name": "Name",
    "fullName": "FullName",
    "extension": "Extension",
    "assignedPackage": "AssignedPackage",
    "dndExceptions": "DNDExceptions",
    "expansionType": "ExpansionType",
    "loginCode": "LoginCode",
    "outOfHoursUserRights": "OutOfHoursUserRights",
    "userRightsTimeProfile": "UserRightsTimeProfile",
    "phoneType": "PhoneType",
    "priority": "Priority",
    "sipContact": "SIPContact",
    "sipName": "SIPName",
    "specificBstType": "SpecificBstType",
    "twinningType": "TwinningType",
    "userRights": "UserRights",
    "voicemailCode": "VoicemailCode",
    "voicemailEmail": "VoicemailEmail",
}

USER_BOOLEAN_FIELDS = {
    "canIntrude": "CanIntrude",
    "cannotBeIntruded": "CannotBeIntruded",
    "doNotDisturb": "DoNotDisturb",
    "flareEnabled": "FlareEnabled",
    "flare": "Flare",
    "forceAccountCode": "ForceAccountCode",
    "idleLinePreference": "IdleLinePreference",
    "mobilityFeatures": "MobilityFeatures",
    "oneXClient": "OneXClient",
    "oneXTelecommuter": "OneXTelecommuter",
    "outgoingCallBar": "OutgoingCallBar",
    "receptionist": "Receptionist",
    "remoteWorker": "RemoteWorker",
    "umsWebServices": "UMSWebServices",
    "voicemailOn": "VoicemailOn",
    "webCollaboration": "WebCollaboration",
    "xDirectory": "XDirectory",
}

PASSWORD_FIELD = "password"


def normalize_boolean(name: str, value: Any) -> str:
    """Normalize true/false/yes/no (any case) to the appliance's "true"/"false".

    None and "" stay empty.

    Raises:
        ValueError: For any other value
    """
    if value is None or value == "":
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        folded = value.strip().lower()
        if folded in ("true", "yes"):
            return "true"
        if folded in ("false", "no"):
            return "false"
    raise ValueError(f"Invalid boolean value for {name}")


def build_user_payload(guid: str, fields: dict[str, Any]) -> dict[str, Any]:
    """Build the full ``User`` update envelope.

    Every editable field is sent; fields missing from ``fields`` are sent
    empty. The password is only sent when it is not blank.

    Raises:
        ValueError: On an unknown field or an invalid boolean value
    """
    known = set(USER_TEXT_FIELDS) | set(USER_BOOLEAN_FIELDS) | {PASSWORD_FIELD, "guid"}
    unknown = sorted(set(fields) - known)
    if unknown:
        raise ValueError(f"Unknown user field(s): {', '.join(unknown)}")

    user: dict[str, str] = {"@GUID": guid}
    for key, appliance_key in USER_TEXT_FIELDS.items():
        value = fields.get(key)
        user[appliance_key] = "" if value is None else str(value)
    for key, appliance_key in USER_BOOLEAN_FIELDS.items():
        user[appliance_key] = normalize_boolean(key, fields.get(key))

    password = fields.get(PASSWORD_FIELD)
    if isinstance(password, str) and password.strip():
        user["Password"] = password

    return {"response": {"@status": "1", "data": {"ws_object": {"User": user}}}}


@dataclass
class UpdateIpoUserCommand(Command[OperationResult[dict[str, Any]]]):
    """Command to replace the editable fields of one appliance user.

    Args:
        config_id: Stored connection config
        owner_id: Operator owning the config
        guid: Appliance identifier of the user
        fields: Camel-case field values (name, fullName, canIntrude, password ...)
        include_raw: Return the raw appliance body with the result
    """

    config_id: str
    owner_id: str
    guid: str
    fields: dict[str, Any] = field(default_factory=dict)
    include_raw: bool = False


class UpdateIpoUserCommandHandler(
    IpoCommandHandlerBase,
    CommandHandler[UpdateIpoUserCommand, OperationResult[dict[str, Any]]],
):
    """Handle updating an appliance user."""

    def __init__(
        self,
        credentials_provider: IpoCredentialsProvider,
        ipo_api_client: IpoApiClient,
        settings: Settings,
    ):
        super().__init__(credentials_provider, ipo_api_client, settings)

    @tracer.start_as_current_span("update_ipo_user_command_handler")
    async def handle_async(self, request: UpdateIpoUserCommand) -> OperationResult[dict[str, Any]]:
        guid = (request.guid or "").strip()
        if not guid:
            return self.bad_request("guid is required")

        try:
            payload = build_user_payload(guid, request.fields)
        except ValueError as e:
            return self.bad_request(str(e))

        log.info(f"Updating IP Office user {guid} (config {request.config_id})")
        return await self.execute_mutation_async(
            request.config_id,
            request.owner_id,
            f"{IpoRecordKind.USERS.resource_path}?guid={quote(guid, safe='')}",
            "PUT",
            body=payload,
            include_raw=request.include_raw,
        )
