"""Update IP Office extension command with handler."""

import logging
from dataclasses import dataclass, field
from typing import Any

from neuroglia.core import OperationResult
from neuroglia.mediation import Command, CommandHandler
from opentelemetry import trace

from application.services.ipo_credentials_provider import IpoCredentialsProvider
from application.settings import Settings
from integration.enums import IpoRecordKind
from integration.services.ipo_api_client import IpoApiClient

from ..ipo_command_handler_base import IpoCommandHandlerBase
from .extension_payload import build_extension_payload

log = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass
class UpdateIpoExtensionCommand(Command[OperationResult[dict[str, Any]]]):
    """Command to update an extension; empty fields are left unchanged on the appliance."""

    config_id: str
    owner_id: str
    guid: str
    fields: dict[str, Any] = field(default_factory=dict)
    include_raw: bool = False


class UpdateIpoExtensionCommandHandler(
    IpoCommandHandlerBase,
    CommandHandler[UpdateIpoExtensionCommand, OperationResult[dict[str, Any]]],
):
    """Handle updating an appliance extension."""

    def __init__(
        self,
        credentials_provider: IpoCredentialsProvider,
        ipo_api_client: IpoApiClient,
        settings: Settings,
    ):
        super().__init__(credentials_provider, ipo_api_client, settings)

    @tracer.start_as_current_span("update_ipo_extension_command_handler")
    async def handle_async(self, request: UpdateIpoExtensionCommand) -> OperationResult[dict[str, Any]]:
        guid = (request.guid or "").strip()
        if not guid:
            return self.bad_request("guid is required")

        try:
            payload = build_extension_payload(request.fields, guid=guid)
        except ValueError as e:
            return self.bad_request(str(e))

        log.info(f"Updating IP Office extension {guid} (config {request.config_id})")
        return await self.execute_mutation_async(
            request.config_id,
            request.owner_id,
            IpoRecordKind.EXTENSIONS.resource_path,
            "PUT",
            body=payload,
            include_raw=request.include_raw,
        )
