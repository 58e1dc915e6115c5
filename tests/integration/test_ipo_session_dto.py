"""Tests for IP Office transport models."""

import pytest

from integration.enums import IpoRecordKind
from integration.models.ipo_session_dto import IpoCredentials, IpoSession


def test_credentials_repr_hides_password():
    credentials = IpoCredentials(host="10.0.0.10", username="Administrator", password="s3cret")

    assert "s3cret" not in repr(credentials)
    assert "Administrator" in repr(credentials)


def test_session_repr_hides_cookies():
    assert "abc" not in repr(IpoSession(cookie_header="JSESSIONID=abc"))


@pytest.mark.parametrize("host,username", [("", "admin"), ("  ", "admin"), ("https://", "admin"), ("10.0.0.10", "")])
def test_credentials_require_host_and_username(host, username):
    with pytest.raises(ValueError):
        IpoCredentials(host=host, username=username, password="")


def test_empty_password_is_allowed():
    assert IpoCredentials(host="10.0.0.10", username="admin", password="").password == ""


@pytest.mark.parametrize(
    "kind,path,key",
    [
        (IpoRecordKind.USERS, "/admin/v1/users", "User"),
        (IpoRecordKind.EXTENSIONS, "/admin/v1/extensions", "Extension"),
        (IpoRecordKind.LICENSES, "/admin/v1/licenses", "License"),
        (IpoRecordKind.SYSTEMS, "/admin/v1/systems", "System"),
    ],
)
def test_record_kind_paths(kind, path, key):
    assert kind.resource_path == path
    assert kind.record_key == key
