"""Pydantic models for the BloodLink resource endpoints."""

import unicodedata
from collections import Counter
from enum import Enum
from typing import Dict, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BloodGroup(str, Enum):
    A_POS = "A+"
    A_NEG = "A-"
    B_POS = "B+"
    B_NEG = "B-"
    AB_POS = "AB+"
    AB_NEG = "AB-"
    O_POS = "O+"
    O_NEG = "O-"


class Status(str, Enum):
    """Canonical status of a request or an alert."""

    EN_ATTENTE = "en_attente"
    ENVOYEE = "envoyee"
    ACCEPTEE = "acceptee"
    COMPLETED = "completed"

    @classmethod
    def normalize(cls, value) -> "Status":
        """
        Map any spelling the API has used for a status onto the canonical value.

        Accents, case, surrounding whitespace and space/underscore variants are
        ignored, so "en attente", "Envoyée" and "validée" all resolve.

        Raises:
            ValueError: If the value matches no known status
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid status: {value!r}")

        key = unicodedata.normalize("NFKD", value.strip().lower())
        key = "".join(c for c in key if not unicodedata.combining(c))
        key = key.replace(" ", "_").replace("-", "_")

        status = _STATUS_ALIASES.get(key)
        if status is None:
            raise ValueError(f"Unknown status: {value!r}")
        return status

    @property
    def is_completed(self) -> bool:
        return self is Status.COMPLETED


_STATUS_ALIASES: Dict[str, Status] = {
    "en_attente": Status.EN_ATTENTE,
    "envoyee": Status.ENVOYEE,
    "acceptee": Status.ACCEPTEE,
    "valide": Status.ACCEPTEE,
    "validee": Status.ACCEPTEE,
    "completed": Status.COMPLETED,
}


class _Resource(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Bank(_Resource):
    id: int
    nom: str
    localisation: Optional[str] = None


class BankRef(_Resource):
    """Bank embedded in a request or alert, where any field may be missing."""

    id: Optional[int] = None
    nom: Optional[str] = None
    localisation: Optional[str] = None


class Doctor(_Resource):
    nom: Optional[str] = None
    prenom: Optional[str] = None
    code_inscription: Optional[str] = None
    est_verifie: Optional[bool] = None
    banque: Optional[BankRef] = None
    banque_id: Optional[int] = Field(None, alias="BanqueDeSang_id")
    banque_nom: Optional[str] = Field(None, alias="BanqueDeSang_nom")

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.prenom, self.nom) if p)


class _StatusResource(_Resource):
    statut: Status

    @field_validator("statut", mode="before")
    @classmethod
    def normalize_statut(cls, v):
        return Status.normalize(v)


class Requete(_StatusResource):
    """A doctor-originated blood request."""

    id: int
    date_requete: Optional[str] = None
    groupe_sanguin: BloodGroup
    quantite: int
    docteur: Optional[Doctor] = None


class RequeteCreate(BaseModel):
    groupe_sanguin: BloodGroup
    quantite: int


class AlerteDoctor(_Resource):
    nom: Optional[str] = None
    prenom: Optional[str] = None
    banque: Optional[BankRef] = Field(None, alias="BanqueDeSang")


class AlerteRequete(_Resource):
    id: int
    groupe_sanguin: Optional[BloodGroup] = None
    quantite: Optional[int] = None
    docteur: Optional[AlerteDoctor] = None


class Alerte(_StatusResource):
    """A bank-originated notification to donors of a blood group."""

    id: int
    date_envoi: Optional[str] = None
    groupe_sanguin: Optional[BloodGroup] = None
    titre: Optional[str] = None
    message: Optional[str] = None
    requete: Optional[AlerteRequete] = None


class AlerteCreate(BaseModel):
    requete: int
    groupe_sanguin: BloodGroup


class StatusUpdate(BaseModel):
    statut: Status


def summarize_statuses(items: Iterable[_StatusResource]) -> Dict[Status, int]:
    """
    Count records per status.

    Args:
        items: Requests or alerts

    Returns:
        A count for every canonical status, zero when absent
    """
    counts = Counter(item.statut for item in items)
    return {status: counts.get(status, 0) for status in Status}
