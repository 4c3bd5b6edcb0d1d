from typing import List

from pydantic import TypeAdapter

from bloodlink.api.http_client import AuthenticatedHttpClient
from bloodlink.api.models import Alerte, BloodGroup, Status, StatusUpdate

ALERTES_PATH = "/alertes/"

_alertes_adapter = TypeAdapter(List[Alerte])


class DonorApi:
    def __init__(self, client: AuthenticatedHttpClient):
        self.client = client

    async def list_alertes(self, groupe_sanguin: BloodGroup) -> List[Alerte]:
        """List the alerts sent to donors of a blood group."""
        response = await self.client.get(
            f"{ALERTES_PATH}par-groupe/",
            params={"groupe_sanguin": groupe_sanguin.value},
        )
        return _alertes_adapter.validate_python(response.json())

    async def update_statut(self, alerte_id: int, statut: Status) -> Alerte:
        payload = StatusUpdate(statut=statut)
        response = await self.client.patch(
            f"{ALERTES_PATH}{alerte_id}/mettre-a-jour-statut/",
            json=payload.model_dump(mode="json"),
        )
        return Alerte.model_validate(response.json())
