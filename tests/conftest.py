"""
Shared test fixtures: settings pointed at a temporary credentials directory
and an in-process fake of the BloodLink API served through httpx.MockTransport.
"""

import asyncio
import json

import httpx
import pytest
import pytest_asyncio

from bloodlink.auth.credential_store import CredentialStore
from bloodlink.auth.session import AuthSession
from bloodlink.config.config import Settings, _settings_ctx

API_BASE_URL = "https://bloodlink.test"

DONOR_USER = {
    "id": 7,
    "email": "a@x.com",
    "user_type": "donneur",
    "nom": "Diallo",
    "prenom": "Awa",
    "groupe_sanguin": "O-",
    "is_active": True,
}

DOCTOR_USER = {
    "id": 3,
    "email": "doc@x.com",
    "user_type": "docteur",
    "nom": "Kane",
    "prenom": "Moussa",
    "code_inscription": "DOC-42",
    "est_verifie": True,
    "BanqueDeSang": 1,
}

BANK_USER = {
    "id": 1,
    "email": "bank@x.com",
    "user_type": "banque",
    "nom": "CNTS Dakar",
    "localisation": "Dakar",
    "code_inscription": "BANK-1",
}


class FakeBloodLinkServer:
    """
    Minimal fake of the BloodLink REST API.

    Resource endpoints accept only ``Bearer <current_access>``. The refresh
    endpoint mints the next token from ``next_access`` unless
    ``refresh_status`` says otherwise, optionally waiting on ``refresh_gate``.
    """

    def __init__(self):
        self.users = {"a@x.com": ("p", DONOR_USER)}
        self.current_access = "t1"
        self.current_refresh = "r1"
        self.next_access = "t2"
        self.rotated_refresh = None
        self.refresh_status = 200
        self.refresh_gate: asyncio.Event | None = None
        self.refresh_bodies = []
        self.calls = []
        self.routes = {}

    def route(self, method: str, path: str, payload, status: int = 200):
        self.routes[(method, path)] = (status, payload)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api")
        self.calls.append(
            {
                "method": request.method,
                "path": path,
                "params": dict(request.url.params),
                "authorization": request.headers.get("Authorization"),
                "body": json.loads(request.content) if request.content else None,
            }
        )

        if path == "/users/login/":
            body = json.loads(request.content)
            password, user = self.users.get(body["email"], (None, None))
            if user is None or password != body["password"]:
                return httpx.Response(401, json={"detail": "Invalid credentials"})
            return httpx.Response(
                200,
                json={
                    "access": self.current_access,
                    "refresh": self.current_refresh,
                    "user": user,
                },
            )

        if path == "/users/register/":
            body = json.loads(request.content)
            user = {k: v for k, v in body.items() if k != "password"}
            user["id"] = 99
            return httpx.Response(
                201,
                json={"access": "reg-access", "refresh": "reg-refresh", "user": user},
            )

        if path == "/users/token/refresh/":
            body = json.loads(request.content)
            self.refresh_bodies.append(body)
            if self.refresh_gate is not None:
                await self.refresh_gate.wait()
            if self.refresh_status != 200 or body["refresh"] != self.current_refresh:
                return httpx.Response(401, json={"detail": "Token is invalid or expired"})
            self.current_access = self.next_access
            payload = {"access": self.current_access}
            if self.rotated_refresh:
                self.current_refresh = self.rotated_refresh
                payload["refresh"] = self.rotated_refresh
            return httpx.Response(200, json=payload)

        if request.headers.get("Authorization") != f"Bearer {self.current_access}":
            return httpx.Response(401, json={"detail": "Given token not valid"})

        status, payload = self.routes.get((request.method, path), (404, {"detail": "Not found"}))
        return httpx.Response(status, json=payload)

    @property
    def refresh_calls(self) -> int:
        return len(self.refresh_bodies)

    def calls_to(self, path: str):
        return [call for call in self.calls if call["path"] == path]


@pytest.fixture
def fake_server():
    return FakeBloodLinkServer()


@pytest.fixture
def transport(fake_server):
    return httpx.MockTransport(fake_server.handler)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        api_base_url=API_BASE_URL,
        credentials_dir=tmp_path,
        request_timeout=5.0,
        refresh_timeout=5.0,
    )


@pytest.fixture
def store(settings):
    return CredentialStore.load(settings.credentials_path)


@pytest_asyncio.fixture
async def session(settings, store, transport):
    session = AuthSession(settings, store, transport=transport)
    yield session
    await session.aclose()


@pytest.fixture(autouse=True)
def reset_settings_context():
    """Reset the settings context variable so tests never share settings."""
    _settings_ctx.set(None)
    yield
    _settings_ctx.set(None)
