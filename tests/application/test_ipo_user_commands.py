"""Tests for the IP Office user commands."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from application.commands.users.delete_ipo_user_command import DeleteIpoUserCommand, DeleteIpoUserCommandHandler
from application.commands.users.update_ipo_user_command import (
    USER_BOOLEAN_FIELDS,
    USER_TEXT_FIELDS,
    UpdateIpoUserCommand,
    UpdateIpoUserCommandHandler,
    build_user_payload,
    normalize_boolean,
)
from integration.exceptions import IpoProtectedIdentityException
from integration.models.ipo_session_dto import IpoRawResponse
from integration.services.ipo_api_client import IpoApiClient
from tests.fixtures.ipo_payloads import failure_envelope
from tests.fixtures.mixins import BaseTestCase

ACCEPTED = IpoRawResponse(status_code=200, text='{"response":{"@status":"1"}}', content_type="application/json")


@pytest.fixture
def session() -> MagicMock:
    return MagicMock()


@pytest.fixture
def mock_api_client(session) -> MagicMock:
    """Create an API client mock that runs the session work against a mocked request."""
    client = MagicMock(spec=IpoApiClient)
    client.request = AsyncMock(return_value=ACCEPTED)

    async def run_work(credentials, work):
        return await work(session)

    client.with_session = AsyncMock(side_effect=run_work)
    return client


class TestBuildUserPayload:
    @pytest.mark.parametrize(
        "value,expected",
        [(True, "true"), (False, "false"), ("Yes", "true"), (" no ", "false"), ("TRUE", "true"), ("", ""), (None, "")],
    )
    def test_normalize_boolean(self, value, expected):
        assert normalize_boolean("canIntrude", value) == expected

    @pytest.mark.parametrize("value", ["maybe", 1, "on"])
    def test_invalid_boolean(self, value):
        with pytest.raises(ValueError, match="Invalid boolean value for voicemailOn"):
            build_user_payload("g1", {"voicemailOn": value})

    def test_full_envelope_with_defaults(self):
        payload = build_user_payload("g1", {"name": "Alice", "canIntrude": "yes", "sipContact": "alice"})

        assert payload["response"]["@status"] == "1"
        user = payload["response"]["data"]["ws_object"]["User"]
        assert user["@GUID"] == "g1"
        assert user["Name"] == "Alice"
        assert user["CanIntrude"] == "true"
        assert user["SIPContact"] == "alice"
        assert user["FullName"] == ""
        assert user["XDirectory"] == ""
        assert set(user) == {"@GUID", *USER_TEXT_FIELDS.values(), *USER_BOOLEAN_FIELDS.values()}

    def test_blank_password_is_not_sent(self):
        user = build_user_payload("g1", {"password": "   "})["response"]["data"]["ws_object"]["User"]

        assert "Password" not in user

    def test_password_is_sent_when_set(self):
        user = build_user_payload("g1", {"password": "n3w"})["response"]["data"]["ws_object"]["User"]

        assert user["Password"] == "n3w"

    def test_unknown_field(self):
        with pytest.raises(ValueError, match="favouriteColour"):
            build_user_payload("g1", {"favouriteColour": "blue"})


class TestUpdateIpoUserCommand(BaseTestCase):
    @pytest.fixture
    def handler(self, mock_credentials_provider, mock_api_client, mock_settings) -> UpdateIpoUserCommandHandler:
        return UpdateIpoUserCommandHandler(mock_credentials_provider, mock_api_client, mock_settings)

    @pytest.mark.asyncio
    async def test_update_puts_user_envelope(self, handler, mock_api_client, credentials, session) -> None:
        # Arrange
        command = UpdateIpoUserCommand(
            config_id="cfg-1",
            owner_id="o",
            guid=" a/1 ",
            fields={"fullName": "Alice Liddell", "doNotDisturb": False},
        )

        # Act
        result = await handler.handle_async(command)

        # Assert
        assert result.is_success
        assert result.data["ok"] is True
        assert result.data["meta"]["upstream_status"] == 200
        call = mock_api_client.request.call_args
        assert call.args == (credentials, session, "/admin/v1/users?guid=a%2F1")
        assert call.kwargs["method"] == "PUT"
        user = call.kwargs["body"]["response"]["data"]["ws_object"]["User"]
        assert user["@GUID"] == "a/1"
        assert user["FullName"] == "Alice Liddell"
        assert user["DoNotDisturb"] == "false"

    @pytest.mark.asyncio
    async def test_missing_guid(self, handler, mock_credentials_provider) -> None:
        result = await handler.handle_async(UpdateIpoUserCommand(config_id="cfg-1", owner_id="o", guid="  "))

        assert not result.is_success
        assert result.detail == "guid is required"
        mock_credentials_provider.resolve_async.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_boolean_is_a_bad_request(self, handler, mock_api_client) -> None:
        result = await handler.handle_async(
            UpdateIpoUserCommand(config_id="cfg-1", owner_id="o", guid="g1", fields={"receptionist": "sometimes"})
        )

        assert not result.is_success
        assert result.detail == "Invalid boolean value for receptionist"
        mock_api_client.with_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_appliance_rejection(self, handler, mock_api_client) -> None:
        mock_api_client.request.return_value = IpoRawResponse(
            status_code=200, text=failure_envelope("Extension 201 is in use"), content_type="application/json"
        )

        result = await handler.handle_async(UpdateIpoUserCommand(config_id="cfg-1", owner_id="o", guid="g1"))

        assert not result.is_success
        assert result.detail == "Extension 201 is in use"

    @pytest.mark.asyncio
    async def test_unknown_config(self, handler, mock_credentials_provider, mock_api_client) -> None:
        mock_credentials_provider.resolve_async.return_value = None

        result = await handler.handle_async(UpdateIpoUserCommand(config_id="nope", owner_id="o", guid="g1"))

        assert not result.is_success
        mock_api_client.with_session.assert_not_called()


class TestDeleteIpoUserCommand(BaseTestCase):
    @pytest.fixture
    def handler(self, mock_credentials_provider, mock_api_client, mock_settings) -> DeleteIpoUserCommandHandler:
        return DeleteIpoUserCommandHandler(mock_credentials_provider, mock_api_client, mock_settings)

    @pytest.mark.asyncio
    async def test_delete_passes_target_name(self, handler, mock_api_client) -> None:
        result = await handler.handle_async(
            DeleteIpoUserCommand(config_id="cfg-1", owner_id="o", guid="g1", name="Alice")
        )

        assert result.is_success
        call = mock_api_client.request.call_args
        assert call.args[2] == "/admin/v1/users?guid=g1"
        assert call.kwargs["method"] == "DELETE"
        assert call.kwargs["target_name"] == "Alice"
        assert call.kwargs["body"] is None

    @pytest.mark.asyncio
    async def test_protected_identity_is_refused(self, handler, mock_api_client) -> None:
        mock_api_client.request.side_effect = IpoProtectedIdentityException(
            "The NoUser account is protected and cannot be deleted"
        )

        result = await handler.handle_async(
            DeleteIpoUserCommand(config_id="cfg-1", owner_id="o", guid="g0", name="NoUser")
        )

        assert not result.is_success
        assert "NoUser" in result.detail

    @pytest.mark.asyncio
    async def test_missing_guid(self, handler, mock_api_client) -> None:
        result = await handler.handle_async(DeleteIpoUserCommand(config_id="cfg-1", owner_id="o", guid=""))

        assert not result.is_success
        mock_api_client.with_session.assert_not_called()
