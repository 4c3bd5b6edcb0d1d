"""Errors raised by the BloodLink HTTP client."""

from typing import Any

import httpx


class ApiError(Exception):
    """A response from the API with a 4xx or 5xx status."""

    def __init__(
        self,
        status_code: int,
        detail: Any = None,
        method: str | None = None,
        path: str | None = None,
    ):
        self.status_code = status_code
        self.detail = detail
        self.method = method
        self.path = path
        super().__init__(self._format())

    def _format(self) -> str:
        target = f"{self.method} {self.path}: " if self.method and self.path else ""
        if self.detail in (None, ""):
            return f"{target}HTTP {self.status_code}"
        return f"{target}HTTP {self.status_code} - {self.detail}"

    @classmethod
    def from_response(cls, response: httpx.Response, method: str, path: str):
        """Build the error from a response, keeping its decoded JSON body when it has one."""
        try:
            detail = response.json()
        except ValueError:
            detail = response.text
        return cls(response.status_code, detail=detail, method=method, path=path)


class UnauthorizedError(ApiError):
    """A 401 response: missing, expired or rejected access token."""
