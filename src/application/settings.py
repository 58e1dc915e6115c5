"""Application settings configuration."""

import logging
import sys
from typing import Any

from neuroglia.hosting.abstractions import ApplicationSettings


class Settings(ApplicationSettings):
    """Application settings for the IP Office admin console backend."""

    # Debugging Configuration
    debug: bool = False
    environment: str = "development"  # development, production
    log_level: str = "INFO"

    # Application Configuration
    app_name: str = "IP Office Admin Console"
    app_version: str = "1.0.0"
    app_host: str = "127.0.0.1"  # Uvicorn bind address (override in production as needed)
    app_port: int = 8080  # Uvicorn port

    # IP Office Management API transport
    ipo_connect_timeout: float = 10.0  # Seconds to establish the TLS connection
    ipo_read_timeout: float = 30.0  # Seconds to wait for headers/body
    ipo_write_timeout: float = 30.0
    ipo_pool_timeout: float = 10.0
    ipo_allow_insecure_tls: bool = False  # Global opt-out of certificate validation; prefer the per-config flag

    # IP Office request log (mutating calls only, secrets redacted)
    ipo_request_log_enabled: bool = True
    ipo_request_log_dir: str = "/tmp/ipo-requests"

    # Echo the raw appliance body back to callers (diagnostics only)
    ipo_debug_return_raw: bool = False

    # Package code assigned to users holding no license
    ipo_unlicensed_package: str = "8"

    # Reachability probe
    ipo_reachability_timeout: float = 2.5

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore extra environment variables

    def __init__(self, **kwargs: Any) -> None:
        """Initialize settings."""
        super().__init__(**kwargs)
        self.log_level = self.log_level.upper()


# Instantiate application settings
app_settings = Settings()


def configure_logging(log_level: str = "INFO") -> None:
    """Configure root logging: stdout always, a file when ``LOG_FILE`` is set or ``logs/`` exists.

    HTTP client and event loop loggers are capped at WARNING so that
    appliance traffic (cookies, URLs with GUIDs) is not echoed at DEBUG.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    import os

    log_level = log_level.upper()

    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    log_file = os.getenv("LOG_FILE", "logs/debug.log")
    if os.path.exists("logs") or os.getenv("LOG_FILE"):
        try:
            os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError:
            # Read-only filesystem in containers
            pass

    for logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error", "httpx", "httpcore", "asyncio"):
        logging.getLogger(logger_name).setLevel(logging.WARNING)
