"""Main application entry point."""

import logging
import os

from fastapi import FastAPI
from neuroglia.hosting.web import WebApplicationBuilder
from neuroglia.mediation import Mediator

from application.services.ipo_credentials_provider import IpoCredentialsProvider
from application.services.secret_resolver import SecretResolver
from application.settings import Settings, app_settings, configure_logging
from domain.repositories.ipo_server_config_repository import IpoServerConfigRepository
from domain.services.user_stats_service import UserStatsService
from integration.services.ipo_api_client import IpoApiClient
from integration.services.ipo_reachability_probe import IpoReachabilityProbe
from integration.services.ipo_request_logger import IpoRequestLogger

configure_logging(log_level=app_settings.log_level)
log = logging.getLogger(__name__)


def _mask_env_value(key: str, value: str) -> str:
    """Mask sensitive environment variable values.

    Any key containing common secret indicators will be masked to avoid leaking credentials.
    """
    sensitive_markers = ["SECRET", "PASSWORD", "PWD", "TOKEN", "KEY"]
    upper_key = key.upper()
    if any(marker in upper_key for marker in sensitive_markers):
        return f"***MASKED(len={len(value)})***" if value else "***MASKED***"
    return value


def debug_log_environment(prefix_only: tuple[str, ...] = ("IPO_",)) -> None:
    """Dump environment variables at DEBUG level for diagnostic purposes (sensitive values masked)."""
    if not log.isEnabledFor(logging.DEBUG):
        return
    try:
        log.debug("🔍 Dumping environment variables for startup diagnostics (masked)")
        for k, v in sorted(os.environ.items()):
            if prefix_only and not any(k.startswith(p) for p in prefix_only):
                continue
            log.debug("ENV %s=%s", k, _mask_env_value(k, v))
        log.debug(
            "🧪 Resolved IP Office settings: insecure_tls=%s request_log=%s (%s) debug_raw=%s",
            app_settings.ipo_allow_insecure_tls,
            app_settings.ipo_request_log_enabled,
            app_settings.ipo_request_log_dir,
            app_settings.ipo_debug_return_raw,
        )
    except Exception as ex:
        log.warning("Failed to dump environment variables: %s", ex)


def configure_services(
    builder: WebApplicationBuilder,
    server_config_repository: IpoServerConfigRepository | None = None,
    secret_resolver: SecretResolver | None = None,
) -> WebApplicationBuilder:
    """Register the IP Office services and the mediator handlers.

    The config repository and secret resolver belong to the hosting
    application; when they are given here they are registered as singletons.
    """
    builder.services.add_singleton(Settings, singleton=app_settings)

    Mediator.configure(
        builder,
        [
            "application.commands",
            "application.queries",
        ],
    )

    request_logger = IpoRequestLogger.configure(builder)
    IpoApiClient.configure(builder, request_logger=request_logger)
    IpoReachabilityProbe.configure(builder)
    UserStatsService.configure(builder)
    IpoCredentialsProvider.configure(builder)

    if server_config_repository is not None:
        builder.services.add_singleton(IpoServerConfigRepository, singleton=server_config_repository)
    if secret_resolver is not None:
        builder.services.add_singleton(SecretResolver, singleton=secret_resolver)

    return builder


def create_app(
    server_config_repository: IpoServerConfigRepository | None = None,
    secret_resolver: SecretResolver | None = None,
) -> FastAPI:
    """Create and configure the application.

    Returns:
        Configured FastAPI application exposing the mediator in its service provider
    """
    log.debug("🚀 Creating IP Office admin console backend...")

    debug_log_environment()

    builder = WebApplicationBuilder(app_settings=app_settings)
    configure_services(builder, server_config_repository, secret_resolver)

    app = builder.build_app_with_lifespan(
        title=app_settings.app_name,
        description="IP Office management API backend",
        version=app_settings.app_version,
        debug=app_settings.debug,
    )

    log.info("✅ Application created successfully!")
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:create_app",
        factory=True,
        host=app_settings.app_host,
        port=app_settings.app_port,
        reload=app_settings.debug,
    )
