"""Unit tests for the persisted credential store."""

import json
import os
import stat
from unittest.mock import patch

from bloodlink.auth.credential_store import (
    CredentialStore,
    load_validated_credentials,
    save_credentials,
)
from tests.models import DoctorProfile, create_test_credentials


class TestLoadValidatedCredentials:
    """Test cases for load_validated_credentials."""

    def test_missing_file(self, tmp_path):
        assert load_validated_credentials(tmp_path / "auth-store.json") is None

    def test_empty_file(self, tmp_path):
        path = tmp_path / "auth-store.json"
        path.write_text("   ")

        assert load_validated_credentials(path) is None

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "auth-store.json"
        path.write_text("{not json")

        assert load_validated_credentials(path) is None

    def test_unknown_user_type_is_rejected(self, tmp_path):
        path = tmp_path / "auth-store.json"
        path.write_text(json.dumps({"user": {"user_type": "admin"}}))

        assert load_validated_credentials(path) is None


class TestSaveCredentials:
    """Test cases for save_credentials."""

    def test_creates_directory_and_sets_permissions(self, tmp_path):
        path = tmp_path / "nested" / "auth-store.json"

        with patch("time.time", return_value=1234567890.0):
            save_credentials(path, create_test_credentials())

        assert path.exists()
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600
        saved = json.loads(path.read_text())
        assert saved["timestamp"] == 1234567890.0
        assert saved["user"]["groupe_sanguin"] == "O-"


class TestCredentialStore:
    """Test cases for CredentialStore."""

    def test_load_from_missing_file_is_empty(self, tmp_path):
        store = CredentialStore.load(tmp_path / "auth-store.json")

        assert store.access_token is None
        assert store.get_access_token() is None
        assert store.is_authenticated is False

    def test_session_survives_reload(self, tmp_path):
        path = tmp_path / "auth-store.json"
        store = CredentialStore(path)
        store.set_session(
            "access-1",
            "refresh-1",
            DoctorProfile(id=3, email="doc@x.com", banque_de_sang=1),
        )

        restored = CredentialStore.load(path)

        assert restored.access_token == "access-1"
        assert restored.refresh_token == "refresh-1"
        assert restored.is_authenticated is True
        assert isinstance(restored.user, DoctorProfile)
        assert restored.user.banque_de_sang == 1

    def test_update_access_token_keeps_refresh_token(self, tmp_path):
        store = CredentialStore(tmp_path / "auth-store.json")
        store.set_session("old", "refresh-1", DoctorProfile(id=3))

        store.update_access_token("new")

        assert store.get_access_token() == "new"
        assert store.refresh_token == "refresh-1"
        assert CredentialStore.load(store.path).access_token == "new"

    def test_update_access_token_with_rotation(self, tmp_path):
        store = CredentialStore(tmp_path / "auth-store.json")
        store.set_session("old", "refresh-1", DoctorProfile(id=3))

        store.update_access_token("new", "refresh-2")

        assert store.refresh_token == "refresh-2"

    def test_clear_resets_all_fields(self, tmp_path):
        store = CredentialStore(
            tmp_path / "auth-store.json", create_test_credentials()
        )

        store.clear()

        assert store.access_token is None
        assert store.refresh_token is None
        assert store.user is None
        assert store.is_authenticated is False
        saved = json.loads(store.path.read_text())
        assert saved["is_authenticated"] is False
