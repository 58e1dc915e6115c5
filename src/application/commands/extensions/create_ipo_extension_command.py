"""Create IP Office extension command with handler."""

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
class CreateIpoExtensionCommand(Command[OperationResult[dict[str, Any]]]):
    """Command to create an extension; ``fields["extension"]`` (the number) is required."""

    config_id: str
    owner_id: str
    fields: dict[str, Any] = field(default_factory=dict)
    include_raw: bool = False


class CreateIpoExtensionCommandHandler(
    IpoCommandHandlerBase,
    CommandHandler[CreateIpoExtensionCommand, OperationResult[dict[str, Any]]],
):
    """Handle creating an appliance extension."""

    def __init__(
        self,
        credentials_provider: IpoCredentialsProvider,
        ipo_api_client: IpoApiClient,
        settings: Settings,
    ):
        super().__init__(credentials_provider, ipo_api_client, settings)

    @tracer.start_as_current_span("create_ipo_extension_command_handler")
    async def handle_async(self, request: CreateIpoExtensionCommand) -> OperationResult[dict[str, Any]]:
        number = request.fields.get("extension")
        number = number.strip() if isinstance(number, str) else ""
        if not number:
            return self.bad_request("extension is required for create")

        try:
            payload = build_extension_payload({**request.fields, "extension": number})
        except ValueError as e:
            return self.bad_request(str(e))

        log.info(f"Creating IP Office extension {number} (config {request.config_id})")
        return await self.execute_mutation_async(
            request.config_id,
            request.owner_id,
            IpoRecordKind.EXTENSIONS.resource_path,
            "POST",
            body=payload,
            include_raw=request.include_raw,
        )
