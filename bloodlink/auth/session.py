"""
Authenticated session: the credential store and the HTTP client, wired together.

The client receives the store's token accessor and this session's ``refresh``
at construction; nothing is shared through module state.
"""

from typing import Optional

import httpx
from pydantic import ValidationError

from bloodlink.api.bank import BankApi
from bloodlink.api.doctor import DoctorApi
from bloodlink.api.donor import DonorApi
from bloodlink.api.exceptions import ApiError
from bloodlink.api.http_client import AuthenticatedHttpClient
from bloodlink.api.users import AuthApi, BanksApi
from bloodlink.auth.credential_store import CredentialStore
from bloodlink.auth.models import Registration, UserProfile
from bloodlink.config.config import Settings, get_settings
from bloodlink.logger import get_logger

logger = get_logger()


class AuthSession:
    def __init__(
        self,
        settings: Settings,
        store: CredentialStore,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.store = store
        self.client = AuthenticatedHttpClient(
            base_url=settings.api_url,
            access_token_provider=store.get_access_token,
            refresh_operation=self.refresh,
            timeout=settings.request_timeout,
            refresh_timeout=settings.refresh_timeout,
            transport=transport,
        )
        self.auth = AuthApi(self.client)
        self.banks = BanksApi(self.client)
        self.doctor = DoctorApi(self.client)
        self.bank = BankApi(self.client)
        self.donor = DonorApi(self.client)

    @property
    def user(self) -> Optional[UserProfile]:
        return self.store.user

    @property
    def is_authenticated(self) -> bool:
        return self.store.is_authenticated

    async def login(self, email: str, password: str) -> UserProfile:
        """
        Log in and persist the returned tokens and user profile.

        Raises:
            ApiError: Rejected credentials or server error
            httpx.TransportError: API unreachable
        """
        data = await self.auth.login(email, password)
        self.store.set_session(data.access, data.refresh, data.user)
        logger.info(f"Logged in as {data.user.user_type} ({email})")
        return data.user

    async def register(self, registration: Registration) -> UserProfile:
        data = await self.auth.register(registration)
        self.store.set_session(data.access, data.refresh, data.user)
        logger.info(f"Registered {registration.user_type} account {registration.email}")
        return data.user

    def logout(self) -> None:
        self.store.clear()
        logger.info("Logged out")

    async def refresh(self) -> bool:
        """
        Mint a new access token from the stored refresh token.

        On success the store holds the new access token. On any failure the
        store is cleared, which logs the user out.

        Returns:
            True if a new access token was stored, False otherwise
        """
        refresh_token = self.store.refresh_token
        if not refresh_token:
            logger.debug("No refresh token available")
            self.store.clear()
            return False

        try:
            data = await self.auth.refresh(refresh_token)
        except (ApiError, httpx.HTTPError, ValidationError) as e:
            logger.warning(f"Token refresh failed, clearing session: {e}")
            self.store.clear()
            return False

        self.store.update_access_token(data.access, data.refresh)
        logger.info("Token refreshed successfully")
        return True

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


def create_session(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AuthSession:
    """
    Restore the persisted credentials and build a session around them.

    Args:
        settings: Settings to use, defaults to the current settings
        transport: Optional httpx transport, used by tests

    Returns:
        AuthSession ready to issue requests
    """
    settings = settings or get_settings()
    store = CredentialStore.load(settings.credentials_path)
    return AuthSession(settings, store, transport=transport)
