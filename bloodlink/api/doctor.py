from typing import List

from pydantic import TypeAdapter

from bloodlink.api.http_client import AuthenticatedHttpClient
from bloodlink.api.models import BloodGroup, Requete, RequeteCreate, Status, StatusUpdate

REQUETES_PATH = "/requetes/"

_requetes_adapter = TypeAdapter(List[Requete])


class DoctorApi:
    """Blood requests, as seen by the doctor who files them."""

    def __init__(self, client: AuthenticatedHttpClient):
        self.client = client

    async def list_requetes(self) -> List[Requete]:
        """List the requests of the logged-in doctor."""
        response = await self.client.get(REQUETES_PATH)
        return _requetes_adapter.validate_python(response.json())

    async def create_requete(self, groupe_sanguin: BloodGroup, quantite: int) -> Requete:
        payload = RequeteCreate(groupe_sanguin=groupe_sanguin, quantite=quantite)
        response = await self.client.post(
            REQUETES_PATH, json=payload.model_dump(mode="json")
        )
        return Requete.model_validate(response.json())

    async def update_statut(self, requete_id: int, statut: Status) -> Requete:
        payload = StatusUpdate(statut=statut)
        response = await self.client.patch(
            f"{REQUETES_PATH}{requete_id}/mettre-a-jour-statut/",
            json=payload.model_dump(mode="json"),
        )
        return Requete.model_validate(response.json())

    async def list_par_banque(self, banque_id: int) -> List[Requete]:
        response = await self.client.get(f"{REQUETES_PATH}par-banque/{banque_id}/")
        return _requetes_adapter.validate_python(response.json())
