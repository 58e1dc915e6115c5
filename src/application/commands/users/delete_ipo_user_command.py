"""Delete IP Office user command with handler."""

import logging
from dataclasses import dataclass
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


@dataclass
class DeleteIpoUserCommand(Command[OperationResult[dict[str, Any]]]):
    """Command to delete one appliance user.

    ``name`` is the user's display name when known; deleting the NoUser
    account is always refused.
    """

    config_id: str
    owner_id: str
    guid: str
    name: str | None = None
    include_raw: bool = False


class DeleteIpoUserCommandHandler(
    IpoCommandHandlerBase,
    CommandHandler[DeleteIpoUserCommand, OperationResult[dict[str, Any]]],
):
    """Handle deleting an appliance user."""

    def __init__(
        self,
        credentials_provider: IpoCredentialsProvider,
        ipo_api_client: IpoApiClient,
        settings: Settings,
    ):
        super().__init__(credentials_provider, ipo_api_client, settings)

    @tracer.start_as_current_span("delete_ipo_user_command_handler")
    async def handle_async(self, request: DeleteIpoUserCommand) -> OperationResult[dict[str, Any]]:
        guid = (request.guid or "").strip()
        if not guid:
            return self.bad_request("guid is required")

        log.info(f"Deleting IP Office user {guid} (config {request.config_id})")
        return await self.execute_mutation_async(
            request.config_id,
            request.owner_id,
            f"{IpoRecordKind.USERS.resource_path}?guid={quote(guid, safe='')}",
            "DELETE",
            target_name=request.name,
            include_raw=request.include_raw,
        )
