from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from bloodlink.api.models import BloodGroup


class UserType(str, Enum):
    DONOR = "donneur"
    DOCTOR = "docteur"
    BANK = "banque"


# Pydantic models for the authentication endpoints
class LoginRequest(BaseModel):
    """Model for the login request body."""

    email: str = Field(..., min_length=1, description="Account email")
    password: str = Field(..., min_length=1, description="Account password")


class RefreshTokenRequest(BaseModel):
    """Model for the token refresh request body."""

    refresh: str = Field(..., description="Refresh token")


class RefreshTokenResponse(BaseModel):
    """Model for the token refresh response."""

    access: str = Field(..., description="New access token")
    refresh: Optional[str] = Field(
        None, description="Rotated refresh token, when the server rotates them"
    )

    model_config = ConfigDict(extra="allow")


# Role-specific user profiles, tagged by user_type
class _UserProfileBase(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[int] = Field(None, description="User id")
    email: Optional[str] = Field(None, description="Account email")
    is_active: Optional[bool] = Field(None, description="Whether the account is active")


class DonorProfile(_UserProfileBase):
    user_type: Literal["donneur"] = "donneur"
    nom: Optional[str] = None
    prenom: Optional[str] = None
    groupe_sanguin: Optional[BloodGroup] = None

    @model_validator(mode="before")
    @classmethod
    def lift_nested_donor_fields(cls, data):
        """Some payloads nest the donor fields under a ``donneur`` key."""
        if isinstance(data, dict) and isinstance(data.get("donneur"), dict):
            nested = data["donneur"]
            data = {**data}
            for key in ("nom", "prenom", "groupe_sanguin"):
                if data.get(key) is None and nested.get(key) is not None:
                    data[key] = nested[key]
        return data

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.prenom, self.nom) if p) or "Donneur"


class DoctorProfile(_UserProfileBase):
    user_type: Literal["docteur"] = "docteur"
    nom: Optional[str] = None
    prenom: Optional[str] = None
    code_inscription: Optional[str] = None
    est_verifie: Optional[bool] = None
    banque_de_sang: Optional[int] = Field(None, alias="BanqueDeSang")

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.prenom, self.nom) if p) or "Docteur"


class BankProfile(_UserProfileBase):
    user_type: Literal["banque"] = "banque"
    nom: Optional[str] = None
    localisation: Optional[str] = None
    code_inscription: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.nom or "Banque"


UserProfile = Annotated[
    Union[DonorProfile, DoctorProfile, BankProfile],
    Field(discriminator="user_type"),
]

_user_profile_adapter = TypeAdapter(UserProfile)


def parse_user_profile(data) -> Union[DonorProfile, DoctorProfile, BankProfile]:
    """Decode a role-dependent user payload into its profile model."""
    return _user_profile_adapter.validate_python(data)


class TokenResponse(BaseModel):
    """Model for the login and register responses."""

    access: str = Field(..., description="Access token")
    refresh: str = Field(..., description="Refresh token")
    user: UserProfile = Field(..., description="Role-specific user profile")


# Registration payloads, one per role
class _RegistrationBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DonorRegistration(_RegistrationBase):
    user_type: Literal["donneur"] = "donneur"
    nom: str = Field(..., min_length=1)
    prenom: str = Field(..., min_length=1)
    groupe_sanguin: BloodGroup


class DoctorRegistration(_RegistrationBase):
    user_type: Literal["docteur"] = "docteur"
    nom: str = Field(..., min_length=1)
    prenom: str = Field(..., min_length=1)
    code_inscription: str = Field(..., min_length=1)
    banque_de_sang: int = Field(..., alias="BanqueDeSang")


class BankRegistration(_RegistrationBase):
    user_type: Literal["banque"] = "banque"
    nom: str = Field(..., min_length=1)
    localisation: str = Field(..., min_length=1)
    code_inscription: str = Field(..., min_length=1)


Registration = Union[DonorRegistration, DoctorRegistration, BankRegistration]


# Pydantic model for the persisted credential record
class CredentialsModel(BaseModel):
    """Model for the persisted authentication state."""

    access_token: Optional[str] = Field(None, description="Current access token")
    refresh_token: Optional[str] = Field(None, description="Current refresh token")
    user: Optional[UserProfile] = Field(None, description="Last known user profile")
    is_authenticated: bool = Field(False, description="Whether a session is active")
    timestamp: Optional[float] = Field(
        None, description="Timestamp when credentials were saved"
    )
