"""Get IP Office records query with handler."""

import logging
from dataclasses import dataclass
from typing import Any

from neuroglia.core import OperationResult
from neuroglia.mediation import Query, QueryHandler
from opentelemetry import trace

from application.mappers import to_records_result
from application.services.ipo_credentials_provider import IpoCredentialsProvider
from application.settings import Settings
from domain.value_object.ipo_server_config import IpoServerConfig
from integration.enums import IpoRecordKind
from integration.exceptions import IpoException
from integration.services.ipo_api_client import IpoApiClient
from integration.services.ipo_envelope_parser import parse_envelope

log = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass
class GetIpoRecordsQuery(Query[OperationResult[dict[str, Any]]]):
    """Query to list one kind of record (users, extensions, licenses, systems) from an appliance."""

    config_id: str
    owner_id: str
    kind: IpoRecordKind
    include_raw: bool = False


class GetIpoRecordsQueryHandler(QueryHandler[GetIpoRecordsQuery, OperationResult[dict[str, Any]]]):
    """Handle listing appliance records within a single session."""

    def __init__(
        self,
        credentials_provider: IpoCredentialsProvider,
        ipo_api_client: IpoApiClient,
        settings: Settings,
    ):
        super().__init__()
        self.credentials_provider = credentials_provider
        self.ipo_api_client = ipo_api_client
        self.settings = settings

    async def handle_async(self, request: GetIpoRecordsQuery) -> OperationResult[dict[str, Any]]:
        """Handle get IP Office records query."""
        kind = IpoRecordKind(request.kind)

        with tracer.start_as_current_span("get_ipo_records_query_handler") as span:
            span.set_attribute("ipo.record_kind", kind.record_key)
            span.set_attribute("ipo.path", kind.resource_path)

            try:
                credentials = await self.credentials_provider.resolve_async(request.config_id, request.owner_id)
            except ValueError as e:
                log.error(f"Cannot load credentials for IP Office config {request.config_id}: {e}")
                return self.bad_request(f"Cannot load credentials: {e}")

            if credentials is None:
                return self.not_found(IpoServerConfig, request.config_id)

            span.set_attribute("ipo.host", credentials.host)

            try:
                response = await self.ipo_api_client.with_session(
                    credentials,
                    lambda session: self.ipo_api_client.request(credentials, session, kind.resource_path),
                )
            except IpoException as e:
                log.error(f"Failed to list {kind.name.lower()} from IP Office {credentials.host}: {e}")
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                return self.bad_request(str(e))

            parsed = parse_envelope(response.text, kind.record_key)
            log.debug(
                f"Parsed {len(parsed.records)} {kind.record_key} record(s) from {credentials.host} "
                f"(format={parsed.format.value}, status={parsed.status.value})"
            )

            include_raw = request.include_raw or self.settings.ipo_debug_return_raw
            return self.ok(to_records_result(response, parsed, include_raw=include_raw))
