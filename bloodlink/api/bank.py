from typing import List

from pydantic import TypeAdapter

from bloodlink.api.http_client import AuthenticatedHttpClient
from bloodlink.api.models import (
    Alerte,
    AlerteCreate,
    BloodGroup,
    Requete,
    Status,
    StatusUpdate,
)
from bloodlink.logger import get_logger

logger = get_logger()

ALERTES_PATH = "/alertes/"

_requetes_adapter = TypeAdapter(List[Requete])
_alertes_adapter = TypeAdapter(List[Alerte])


class BankApi:
    """Requests received by a blood bank and the alerts it sends to donors."""

    def __init__(self, client: AuthenticatedHttpClient):
        self.client = client

    async def list_requetes(self, banque_id: int) -> List[Requete]:
        response = await self.client.get(f"/requetes/par-banque/{banque_id}/")
        return _requetes_adapter.validate_python(response.json())

    async def creer_alerte(self, requete_id: int, groupe_sanguin: BloodGroup) -> None:
        """Alert the donors of ``groupe_sanguin`` about a request."""
        payload = AlerteCreate(requete=requete_id, groupe_sanguin=groupe_sanguin)
        await self.client.post(ALERTES_PATH, json=payload.model_dump(mode="json"))
        logger.info(f"Alert sent for request {requete_id} ({groupe_sanguin.value})")

    async def valider_requete(self, alerte_id: int) -> None:
        """Mark an alert as accepted once donors have answered."""
        payload = StatusUpdate(statut=Status.ACCEPTEE)
        await self.client.patch(
            f"{ALERTES_PATH}{alerte_id}/mettre-a-jour-statut/",
            json=payload.model_dump(mode="json"),
        )

    async def list_alertes_envoyees(self, banque_id: int) -> List[Alerte]:
        response = await self.client.get(
            f"{ALERTES_PATH}banque/", params={"banque_id": banque_id}
        )
        return _alertes_adapter.validate_python(response.json())
