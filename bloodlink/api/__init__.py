from .exceptions import ApiError, UnauthorizedError
from .http_client import AuthenticatedHttpClient
from .types import ApiRequest

__all__ = [
    "ApiError",
    "ApiRequest",
    "AuthenticatedHttpClient",
    "UnauthorizedError",
]
