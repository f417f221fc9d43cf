"""Tests for account lookup and login."""
from __future__ import annotations

from pathlib import Path

import pytest

from accounts.directory import AccountDirectory, AuthError
from common.config_loader import load_yaml

ACCOUNTS_YAML = Path(__file__).resolve().parents[1] / "config" / "accounts.yaml"


@pytest.fixture
def directory() -> AccountDirectory:
    return AccountDirectory.from_config(load_yaml(ACCOUNTS_YAML))


class TestAuthenticate:
    """Tests for email/password login."""

    def test_valid_login(self, directory):
        account = directory.authenticate("demo@robinhood.com", "demo123")

        assert account.id == "user1"
        assert account.balance == pytest.approx(12500.75)

    def test_email_is_case_insensitive(self, directory):
        assert directory.authenticate("Trader@Demo.com", "trader123").id == "user3"

    def test_wrong_password(self, directory):
        with pytest.raises(AuthError, match="Invalid email or password") as exc:
            directory.authenticate("demo@robinhood.com", "nope")
        assert exc.value.status_code == 401

    def test_unknown_email(self, directory):
        with pytest.raises(AuthError, match="Invalid email or password"):
            directory.authenticate("who@example.com", "demo123")

    @pytest.mark.parametrize("email,password", [("", "demo123"), ("demo@robinhood.com", None)])
    def test_missing_credentials(self, directory, email, password):
        with pytest.raises(AuthError, match="required") as exc:
            directory.authenticate(email, password)
        assert exc.value.status_code == 400


class TestSessions:
    """Tests for session resolution."""

    def test_resolves_account_id(self, directory):
        assert directory.resolve_session("user2").first_name == "Jane"

    def test_missing_session(self, directory):
        with pytest.raises(AuthError, match="Not authenticated"):
            directory.resolve_session(None)

    def test_unknown_session(self, directory):
        with pytest.raises(AuthError, match="Invalid session"):
            directory.resolve_session("user99")


def test_public_dict_hides_password(directory):
    d = directory.get("user1").public_dict()

    assert d == {
        "id": "user1",
        "email": "demo@robinhood.com",
        "firstName": "John",
        "lastName": "Doe",
        "balance": 12500.75,
    }


def test_duplicate_ids_rejected():
    raw = {"accounts": [
        {"id": "a", "email": "a@x.com", "password": "p"},
        {"id": "a", "email": "b@x.com", "password": "p"},
    ]}
    with pytest.raises(ValueError, match="Duplicate"):
        AccountDirectory.from_config(raw)
