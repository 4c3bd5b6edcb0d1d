"""Unit tests for AuthSession: login, register, logout and token refresh."""

import asyncio
import json
from unittest.mock import AsyncMock

import httpx
import pytest

from bloodlink.api.exceptions import UnauthorizedError
from bloodlink.auth.credential_store import CredentialStore
from bloodlink.auth.models import BankRegistration, DoctorRegistration, DonorRegistration
from bloodlink.auth.session import create_session
from tests.models import BankProfile, BloodGroup, DoctorProfile, DonorProfile


class TestLogin:
    """Test cases for AuthSession.login."""

    @pytest.mark.asyncio
    async def test_login_stores_tokens_and_user(self, session, fake_server, settings):
        user = await session.login("a@x.com", "p")

        assert isinstance(user, DonorProfile)
        assert user.groupe_sanguin == BloodGroup.O_NEG
        assert session.store.access_token == "t1"
        assert session.store.refresh_token == "r1"
        assert session.is_authenticated is True
        assert fake_server.calls_to("/users/login/")[0]["body"] == {
            "email": "a@x.com",
            "password": "p",
        }

        saved = json.loads(settings.credentials_path.read_text())
        assert saved["access_token"] == "t1"
        assert saved["refresh_token"] == "r1"
        assert saved["user"]["user_type"] == "donneur"

    @pytest.mark.asyncio
    async def test_login_wrong_password_does_not_refresh(self, session, fake_server):
        with pytest.raises(UnauthorizedError):
            await session.login("a@x.com", "wrong")

        assert fake_server.refresh_calls == 0
        assert session.is_authenticated is False


class TestRefreshFlow:
    """Test cases for refresh-and-retry through a real session."""

    @pytest.mark.asyncio
    async def test_expired_token_is_refreshed_and_request_replayed(
        self, session, fake_server, settings
    ):
        fake_server.route("GET", "/requetes/", [])
        await session.login("a@x.com", "p")
        fake_server.current_access = "server-side-rotated"  # t1 is now expired

        requetes = await session.doctor.list_requetes()

        assert requetes == []
        assert fake_server.refresh_bodies == [{"refresh": "r1"}]
        attempts = fake_server.calls_to("/requetes/")
        assert [call["authorization"] for call in attempts] == [
            "Bearer t1",
            "Bearer t2",
        ]
        assert session.store.access_token == "t2"
        assert session.store.refresh_token == "r1"
        reloaded = CredentialStore.load(settings.credentials_path)
        assert reloaded.access_token == "t2"

    @pytest.mark.asyncio
    async def test_rotated_refresh_token_is_stored(self, session, fake_server):
        fake_server.route("GET", "/requetes/", [])
        fake_server.rotated_refresh = "r2"
        await session.login("a@x.com", "p")
        fake_server.current_access = "expired"

        await session.doctor.list_requetes()

        assert session.store.refresh_token == "r2"

    @pytest.mark.asyncio
    async def test_failed_refresh_rejects_all_and_clears_store(
        self, session, fake_server, settings
    ):
        for path in ("/requetes/", "/banques/", "/alertes/banque/"):
            fake_server.route("GET", path, [])
        await session.login("a@x.com", "p")
        fake_server.current_access = "expired"
        fake_server.refresh_status = 401
        fake_server.refresh_gate = asyncio.Event()

        tasks = [
            asyncio.create_task(session.doctor.list_requetes()),
            asyncio.create_task(session.banks.list()),
            asyncio.create_task(session.bank.list_alertes_envoyees(1)),
        ]
        while session.client.pending_count < 3:
            await asyncio.sleep(0)
        fake_server.refresh_gate.set()
        errors = await asyncio.gather(*tasks, return_exceptions=True)

        assert all(isinstance(e, UnauthorizedError) for e in errors)
        assert [e.path for e in errors] == ["/requetes/", "/banques/", "/alertes/banque/"]
        assert fake_server.refresh_calls == 1
        assert session.store.access_token is None
        assert session.store.refresh_token is None
        assert session.store.user is None
        assert session.is_authenticated is False

        saved = json.loads(settings.credentials_path.read_text())
        assert saved["access_token"] is None
        assert saved["refresh_token"] is None
        assert saved["user"] is None

    @pytest.mark.asyncio
    async def test_refresh_without_refresh_token_fails(self, session, fake_server):
        result = await session.refresh()

        assert result is False
        assert fake_server.refresh_calls == 0

    @pytest.mark.asyncio
    async def test_refresh_network_error_clears_store(self, session):
        await session.login("a@x.com", "p")
        session.auth.refresh = AsyncMock(side_effect=httpx.ConnectError("down"))

        result = await session.refresh()

        assert result is False
        assert session.store.access_token is None
        assert session.is_authenticated is False


class TestRegisterAndLogout:
    """Test cases for registration and logout."""

    @pytest.mark.asyncio
    async def test_register_donor_sends_role_payload(self, session, fake_server):
        user = await session.register(
            DonorRegistration(
                email="d@x.com",
                password="pw",
                nom="Ba",
                prenom="Fatou",
                groupe_sanguin=BloodGroup.AB_POS,
            )
        )

        body = fake_server.calls_to("/users/register/")[0]["body"]
        assert body == {
            "email": "d@x.com",
            "password": "pw",
            "user_type": "donneur",
            "nom": "Ba",
            "prenom": "Fatou",
            "groupe_sanguin": "AB+",
        }
        assert isinstance(user, DonorProfile)
        assert session.store.access_token == "reg-access"

    @pytest.mark.asyncio
    async def test_register_doctor_uses_bank_alias(self, session, fake_server):
        user = await session.register(
            DoctorRegistration(
                email="doc@x.com",
                password="pw",
                nom="Kane",
                prenom="Moussa",
                code_inscription="DOC-42",
                banque_de_sang=1,
            )
        )

        body = fake_server.calls_to("/users/register/")[0]["body"]
        assert body["BanqueDeSang"] == 1
        assert body["user_type"] == "docteur"
        assert isinstance(user, DoctorProfile)
        assert user.banque_de_sang == 1

    @pytest.mark.asyncio
    async def test_register_bank(self, session, fake_server):
        user = await session.register(
            BankRegistration(
                email="bank@x.com",
                password="pw",
                nom="CNTS",
                localisation="Dakar",
                code_inscription="BANK-1",
            )
        )

        assert isinstance(user, BankProfile)
        assert user.localisation == "Dakar"

    @pytest.mark.asyncio
    async def test_logout_clears_everything(self, session, settings):
        await session.login("a@x.com", "p")

        session.logout()

        reloaded = CredentialStore.load(settings.credentials_path)
        assert reloaded.access_token is None
        assert reloaded.refresh_token is None
        assert reloaded.user is None
        assert reloaded.is_authenticated is False


class TestCreateSession:
    """Test cases for create_session."""

    @pytest.mark.asyncio
    async def test_restores_persisted_session(self, settings, transport, fake_server):
        fake_server.route("GET", "/banques/", [{"id": 1, "nom": "CNTS"}])
        store = CredentialStore(settings.credentials_path)
        store.set_session("t1", "r1", DonorProfile(id=7, email="a@x.com"))

        async with create_session(settings, transport=transport) as session:
            assert session.is_authenticated is True
            assert session.store.access_token == "t1"
            banks = await session.banks.list()

        assert banks[0].nom == "CNTS"
        assert fake_server.calls_to("/banques/")[0]["authorization"] == "Bearer t1"
