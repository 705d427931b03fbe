"""
Unit tests for Credentials and CredentialStore.

Run with: pytest tests/unit/test_credentials.py -v
"""

import json
import os
import stat
from datetime import datetime, timedelta, timezone

import pytest

from hawkop.core.credentials import (
    CredentialStore,
    Credentials,
    Token,
    token_is_expired,
)
from hawkop.core.errors import ConfigurationError, PersistError


NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestToken:
    """Test suite for token expiry"""

    def test_future_token_is_valid(self):
        """Test a token expiring later is not expired"""
        token = Token(token="t", expires_at=NOW + timedelta(minutes=5))

        assert not token.is_expired(NOW)
        assert token.is_valid(NOW)

    def test_expiry_boundary_counts_as_expired(self):
        """Test now == expires_at is expired"""
        token = Token(token="t", expires_at=NOW)

        assert token.is_expired(NOW)

    def test_empty_token_is_not_valid(self):
        """Test an empty token string is never usable"""
        token = Token(token="", expires_at=NOW + timedelta(hours=1))

        assert not token.is_valid(NOW)

    def test_naive_expiry_is_treated_as_utc(self):
        """Test naive datetimes are normalized to UTC"""
        token = Token(token="t", expires_at=datetime(2025, 1, 1, 13, 0))

        assert token.expires_at.tzinfo is not None
        assert not token.is_expired(NOW)

    def test_missing_token_is_expired(self):
        """Test None counts as expired"""
        assert token_is_expired(None, NOW)


class TestCredentials:
    """Test suite for Credentials model"""

    def test_empty_credentials(self):
        """Test defaults"""
        credentials = Credentials()

        assert not credentials.has_api_key()
        assert not credentials.has_valid_token(NOW)
        assert credentials.to_file_dict() == {}

    def test_set_api_key_clears_token(self):
        """Test changing the key drops the cached token"""
        credentials = Credentials(api_key="old")
        credentials.set_token("jwt", NOW + timedelta(minutes=30))

        credentials.set_api_key("new")

        assert credentials.api_key == "new"
        assert credentials.token is None

    def test_assigning_api_key_clears_token(self):
        """Test direct assignment of a new key drops the cached token"""
        credentials = Credentials(api_key="old")
        credentials.set_token("jwt", NOW + timedelta(minutes=30))

        credentials.api_key = "new"

        assert credentials.api_key == "new"
        assert credentials.token is None

    def test_assigning_same_api_key_keeps_token(self):
        """Test re-assigning the unchanged key is not a key change"""
        credentials = Credentials(api_key="key")
        credentials.set_token("jwt", NOW + timedelta(minutes=30))

        credentials.api_key = "key"

        assert credentials.token.token == "jwt"

    def test_set_org_id_keeps_token(self):
        """Test the default org is independent of the token"""
        credentials = Credentials(api_key="key")
        credentials.set_token("jwt", NOW + timedelta(minutes=30))

        credentials.set_org_id("org-1")

        assert credentials.org_id == "org-1"
        assert credentials.has_valid_token(NOW)

    def test_file_dict_uses_jwt_key(self):
        """Test the token is written under "jwt" """
        credentials = Credentials(api_key="key", org_id="org")
        credentials.set_token("abc", NOW)

        data = credentials.to_file_dict()

        assert data["api_key"] == "key"
        assert data["org_id"] == "org"
        assert data["jwt"]["token"] == "abc"
        assert "expires_at" in data["jwt"]


class TestCredentialStore:
    """Test suite for CredentialStore persistence"""

    def test_missing_file_gives_empty_credentials(self, tmp_path):
        """Test load() without a file"""
        store = CredentialStore(tmp_path / "config.json")

        credentials = store.load()

        assert credentials == Credentials()

    def test_save_and_load(self, tmp_path):
        """Test saved credentials load back unchanged"""
        store = CredentialStore(tmp_path / "hawkop" / "config.json")
        credentials = Credentials(api_key="key", org_id="org")
        credentials.set_token("abc", NOW + timedelta(minutes=30))

        store.save(credentials)
        loaded = store.load()

        assert loaded.api_key == "key"
        assert loaded.org_id == "org"
        assert loaded.token.token == "abc"
        assert loaded.token.expires_at == NOW + timedelta(minutes=30)

    def test_file_is_owner_only(self, tmp_path):
        """Test the config file mode is 0600"""
        path = tmp_path / "config.json"
        store = CredentialStore(path)

        store.save(Credentials(api_key="secret"))

        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600

    def test_save_leaves_no_temp_files(self, tmp_path):
        """Test the atomic write cleans up after itself"""
        store = CredentialStore(tmp_path / "config.json")

        store.save(Credentials(api_key="a"))
        store.save(Credentials(api_key="b"))

        assert [p.name for p in tmp_path.iterdir()] == ["config.json"]

    def test_reads_file_written_by_other_tools(self, tmp_path):
        """Test the documented on-disk layout"""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "api_key": "key",
            "org_id": "org",
            "jwt": {"token": "abc", "expires_at": "2025-01-01T12:30:00Z"},
        }))

        credentials = CredentialStore(path).load()

        assert credentials.token.token == "abc"
        assert credentials.has_valid_token(NOW)

    def test_corrupt_file_raises(self, tmp_path):
        """Test unparseable JSON is a configuration error"""
        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError):
            CredentialStore(path).load()

    def test_wrong_shape_raises(self, tmp_path):
        """Test a well-formed file with bad field types"""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"jwt": {"token": "abc"}}))

        with pytest.raises(ConfigurationError):
            CredentialStore(path).load()

    def test_unwritable_location_raises_persist_error(self, tmp_path):
        """Test a blocked directory surfaces as PersistError"""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = CredentialStore(blocker / "config.json")

        with pytest.raises(PersistError):
            store.save(Credentials(api_key="key"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
