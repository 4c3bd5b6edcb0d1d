from typing import List

from pydantic import TypeAdapter

from bloodlink.api.http_client import AuthenticatedHttpClient
from bloodlink.api.models import Bank
from bloodlink.auth.models import (
    LoginRequest,
    RefreshTokenRequest,
    RefreshTokenResponse,
    Registration,
    TokenResponse,
)

LOGIN_PATH = "/users/login/"
REGISTER_PATH = "/users/register/"
REFRESH_PATH = "/users/token/refresh/"
BANKS_PATH = "/banques/"

_banks_adapter = TypeAdapter(List[Bank])


class AuthApi:
    """Authentication endpoints. None of them go through the refresh-and-retry path."""

    def __init__(self, client: AuthenticatedHttpClient):
        self.client = client

    async def login(self, email: str, password: str) -> TokenResponse:
        payload = LoginRequest(email=email, password=password)
        response = await self.client.post(
            LOGIN_PATH, json=payload.model_dump(), skip_auth_refresh=True
        )
        return TokenResponse.model_validate(response.json())

    async def register(self, registration: Registration) -> TokenResponse:
        response = await self.client.post(
            REGISTER_PATH, json=registration.to_payload(), skip_auth_refresh=True
        )
        return TokenResponse.model_validate(response.json())

    async def refresh(self, refresh_token: str) -> RefreshTokenResponse:
        payload = RefreshTokenRequest(refresh=refresh_token)
        response = await self.client.post(
            REFRESH_PATH, json=payload.model_dump(), skip_auth_refresh=True
        )
        return RefreshTokenResponse.model_validate(response.json())


class BanksApi:
    def __init__(self, client: AuthenticatedHttpClient):
        self.client = client

    async def list(self) -> List[Bank]:
        response = await self.client.get(BANKS_PATH)
        return _banks_adapter.validate_python(response.json())
