import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from bloodlink.api.exceptions import UnauthorizedError


@dataclass
class ApiRequest:
    """Descriptor for one call against the BloodLink API.

    ``retried`` is set by the client the first time the request meets a 401,
    so it is replayed at most once. ``skip_auth_refresh`` disables the
    refresh-and-retry path entirely; the auth endpoints use it.
    """

    method: str
    path: str
    params: Optional[Dict[str, Any]] = None
    json: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    skip_auth_refresh: bool = False
    retried: bool = False

    def __post_init__(self):
        self.method = self.method.upper()


@dataclass
class PendingRequest:
    """A request suspended until the in-flight token refresh settles."""

    request: ApiRequest
    error: UnauthorizedError
    future: asyncio.Future
