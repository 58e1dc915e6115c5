"""Shared flow for commands that change appliance configuration."""

import logging
from typing import Any

from neuroglia.core import OperationResult
from opentelemetry import trace

from application.mappers import to_mutation_result
from application.services.ipo_credentials_provider import IpoCredentialsProvider
from application.settings import Settings
from domain.value_object.ipo_server_config import IpoServerConfig
from integration.exceptions import IpoException
from integration.services.ipo_api_client import IpoApiClient
from integration.services.ipo_envelope_parser import parse_error_description

log = logging.getLogger(__name__)


class IpoCommandHandlerBase:
    """Base for command handlers issuing one mutating call in its own session.

    Concrete handlers also derive from neuroglia's CommandHandler, which
    provides the ``ok``/``bad_request``/``not_found`` result helpers.
    """

    def __init__(
        self,
        credentials_provider: IpoCredentialsProvider,
        ipo_api_client: IpoApiClient,
        settings: Settings,
    ):
        self.credentials_provider = credentials_provider
        self.ipo_api_client = ipo_api_client
        self.settings = settings

    async def execute_mutation_async(
        self,
        config_id: str,
        owner_id: str,
        path: str,
        method: str,
        body: Any = None,
        target_name: str | None = None,
        include_raw: bool = False,
    ) -> OperationResult[dict[str, Any]]:
        """Resolve credentials, run the call inside a session and map the outcome.

        An HTTP-successful response whose envelope reports failure is turned
        into a bad request carrying the appliance's error description.
        """
        span = trace.get_current_span()
        span.set_attribute("ipo.path", path)
        span.set_attribute("ipo.method", method)

        try:
            credentials = await self.credentials_provider.resolve_async(config_id, owner_id)
        except ValueError as e:
            log.error(f"Cannot load credentials for IP Office config {config_id}: {e}")
            return self.bad_request(f"Cannot load credentials: {e}")  # type: ignore[attr-defined]

        if credentials is None:
            return self.not_found(IpoServerConfig, config_id)  # type: ignore[attr-defined]

        span.set_attribute("ipo.host", credentials.host)

        try:
            response = await self.ipo_api_client.with_session(
                credentials,
                lambda session: self.ipo_api_client.request(
                    credentials,
                    session,
                    path,
                    method=method,
                    body=body,
                    target_name=target_name,
                ),
            )
        except IpoException as e:
            log.error(f"IP Office {method} {path} failed on {credentials.host}: {e}")
            span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
            return self.bad_request(str(e))  # type: ignore[attr-defined]

        error_description = parse_error_description(response.text)
        if error_description:
            log.warning(f"IP Office rejected {method} {path} on {credentials.host}: {error_description}")
            span.set_status(trace.Status(trace.StatusCode.ERROR, error_description))
            return self.bad_request(error_description)  # type: ignore[attr-defined]

        include_raw = include_raw or self.settings.ipo_debug_return_raw
        return self.ok(to_mutation_result(response, include_raw=include_raw))  # type: ignore[attr-defined]
