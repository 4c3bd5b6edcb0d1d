"""Pydantic models for BloodLink authentication and credentials."""

from .models import (
    BankProfile,
    BankRegistration,
    CredentialsModel,
    DoctorProfile,
    DoctorRegistration,
    DonorProfile,
    DonorRegistration,
    LoginRequest,
    RefreshTokenRequest,
    RefreshTokenResponse,
    Registration,
    TokenResponse,
    UserProfile,
    UserType,
    parse_user_profile,
)

__all__ = [
    "BankProfile",
    "BankRegistration",
    "CredentialsModel",
    "DoctorProfile",
    "DoctorRegistration",
    "DonorProfile",
    "DonorRegistration",
    "LoginRequest",
    "RefreshTokenRequest",
    "RefreshTokenResponse",
    "Registration",
    "TokenResponse",
    "UserProfile",
    "UserType",
    "parse_user_profile",
]
