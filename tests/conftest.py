"""Shared fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from application.services.ipo_credentials_provider import IpoCredentialsProvider
from domain.repositories.ipo_server_config_repository import IpoServerConfigRepository
from domain.value_object.ipo_server_config import EncryptedSecret, IpoServerConfig
from integration.models.ipo_session_dto import IpoCredentials


@pytest.fixture
def credentials() -> IpoCredentials:
    return IpoCredentials(host="10.0.0.10", username="Administrator", password="s3cret", allow_insecure_tls=True)


@pytest.fixture
def server_config() -> IpoServerConfig:
    return IpoServerConfig(
        id="cfg-1",
        owner_id="owner@example.com",
        host="10.0.0.10",
        username="Administrator",
        password_secret=EncryptedSecret(cipher="Y2lwaGVy", iv="aXY=", tag="dGFn"),
        name="Head office",
    )


@pytest.fixture
def mock_repository() -> AsyncMock:
    """Create a mock IP Office config repository."""
    return AsyncMock(spec=IpoServerConfigRepository)


@pytest.fixture
def mock_credentials_provider(credentials: IpoCredentials) -> AsyncMock:
    provider = AsyncMock(spec=IpoCredentialsProvider)
    provider.resolve_async.return_value = credentials
    return provider


@pytest.fixture
def mock_settings() -> MagicMock:
    settings = MagicMock()
    settings.ipo_debug_return_raw = False
    settings.ipo_allow_insecure_tls = False
    return settings
