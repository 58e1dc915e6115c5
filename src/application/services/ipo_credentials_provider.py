"""Builds per-call appliance credentials from stored connection configs."""

import logging
from typing import TYPE_CHECKING

from application.services.secret_resolver import SecretResolver
from application.settings import Settings
from domain.repositories.ipo_server_config_repository import IpoServerConfigRepository
from integration.models.ipo_session_dto import IpoCredentials

if TYPE_CHECKING:
    from neuroglia.hosting.web import WebApplicationBuilder

log = logging.getLogger(__name__)


class IpoCredentialsProvider:
    """Resolves the owner's config and decrypts its password.

    The resulting IpoCredentials are handed to a single ``with_session`` call
    and never stored.
    """

    def __init__(
        self,
        server_config_repository: IpoServerConfigRepository,
        secret_resolver: SecretResolver,
        settings: Settings,
    ):
        self.server_config_repository = server_config_repository
        self.secret_resolver = secret_resolver
        self.settings = settings

    async def resolve_async(self, config_id: str, owner_id: str) -> IpoCredentials | None:
        """Load credentials for a config owned by ``owner_id``.

        Returns:
            IpoCredentials, or None when the config does not exist or belongs
            to another owner

        Raises:
            ValueError: When the stored password cannot be decrypted or the
                stored host does not name an appliance
        """
        config = await self.server_config_repository.get_for_owner_async(config_id, owner_id)
        if config is None:
            log.info(f"IP Office config {config_id} not found for owner")
            return None

        password = self.secret_resolver.decrypt(config.password_secret)
        return IpoCredentials(
            host=config.host,
            username=config.username,
            password=password,
            allow_insecure_tls=config.allow_insecure_tls or self.settings.ipo_allow_insecure_tls,
        )

    @staticmethod
    def configure(builder: "WebApplicationBuilder") -> None:
        """Register the provider; repository and resolver come from the container."""
        builder.services.add_singleton(IpoCredentialsProvider)
        log.info("✅ IP Office credentials provider registered in DI container")
