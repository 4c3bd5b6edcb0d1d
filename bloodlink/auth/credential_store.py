"""Persisted credential store for the BloodLink client."""

import json
import os
import time
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from bloodlink.auth.models import CredentialsModel, UserProfile
from bloodlink.logger import get_logger

logger = get_logger()


def load_validated_credentials(path: Path) -> Optional[CredentialsModel]:
    """
    Load and validate the persisted credential record.

    Args:
        path: Location of the credential file

    Returns:
        Validated CredentialsModel instance or None if not available or invalid
    """
    if not path.exists():
        return None

    try:
        with open(path, "r") as f:
            content = f.read().strip()
            if not content:
                return None
            raw_credentials = json.loads(content)

        return CredentialsModel.model_validate(raw_credentials)
    except (OSError, ValueError, ValidationError) as e:
        logger.debug(f"Ignoring unreadable credentials at {path}: {e}")
        return None


def save_credentials(path: Path, credentials: CredentialsModel) -> None:
    """
    Write the credential record with owner-only permissions.

    Args:
        path: Location of the credential file
        credentials: Record to persist
    """
    data = credentials.model_copy(update={"timestamp": time.time()})

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        json.dump(data.model_dump(mode="json", by_alias=True), f, indent=2)

    os.chmod(path, 0o600)


class CredentialStore:
    """
    Owner of the access token, refresh token and last known user profile.

    Every mutation is persisted immediately, so the session survives process
    restarts. The HTTP client only reads the access token through
    ``get_access_token``.
    """

    def __init__(self, path: Path, credentials: Optional[CredentialsModel] = None):
        self.path = path
        self._credentials = credentials or CredentialsModel()

    @classmethod
    def load(cls, path: Path) -> "CredentialStore":
        """Restore the store from disk, empty when nothing valid is persisted."""
        credentials = load_validated_credentials(path)
        if credentials and credentials.is_authenticated:
            logger.debug(f"Restored session from {path}")
        return cls(path, credentials)

    @property
    def access_token(self) -> Optional[str]:
        return self._credentials.access_token

    @property
    def refresh_token(self) -> Optional[str]:
        return self._credentials.refresh_token

    @property
    def user(self) -> Optional[UserProfile]:
        return self._credentials.user

    @property
    def is_authenticated(self) -> bool:
        return self._credentials.is_authenticated

    def get_access_token(self) -> Optional[str]:
        return self._credentials.access_token

    def set_session(
        self, access_token: str, refresh_token: str, user: UserProfile
    ) -> None:
        self._credentials = CredentialsModel(
            access_token=access_token,
            refresh_token=refresh_token,
            user=user,
            is_authenticated=True,
        )
        self._persist()

    def update_access_token(
        self, access_token: str, refresh_token: Optional[str] = None
    ) -> None:
        """Replace the access token, and the refresh token when the server rotated it."""
        update = {"access_token": access_token}
        if refresh_token:
            update["refresh_token"] = refresh_token
        self._credentials = self._credentials.model_copy(update=update)
        self._persist()

    def clear(self) -> None:
        self._credentials = CredentialsModel()
        self._persist()
        logger.info("Stored credentials cleared")

    def _persist(self) -> None:
        save_credentials(self.path, self._credentials)
        logger.debug(f"Saved credentials to {self.path}")
