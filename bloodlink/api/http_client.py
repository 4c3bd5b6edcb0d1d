"""
Authenticated async HTTP client for the BloodLink API.

Every request carries the current access token. A 401 triggers a single
shared token refresh; requests that hit a 401 while it runs are queued and
released in FIFO order once it settles, replayed on success or rejected with
their own 401 on failure.
"""

import asyncio
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Dict, Optional

import httpx

from bloodlink.api.exceptions import ApiError, UnauthorizedError
from bloodlink.api.types import ApiRequest, PendingRequest
from bloodlink.logger import get_logger

logger = get_logger()

DEFAULT_TIMEOUT = 30.0
DEFAULT_REFRESH_TIMEOUT = 30.0

AccessTokenProvider = Callable[[], Optional[str]]
RefreshOperation = Callable[[], Awaitable[bool]]


class AuthenticatedHttpClient:
    """HTTP client that recovers from access token expiry transparently."""

    def __init__(
        self,
        base_url: str,
        access_token_provider: AccessTokenProvider,
        refresh_operation: RefreshOperation,
        timeout: float = DEFAULT_TIMEOUT,
        refresh_timeout: float = DEFAULT_REFRESH_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self._access_token_provider = access_token_provider
        self._refresh_operation = refresh_operation
        self._refresh_timeout = refresh_timeout
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json", **(headers or {})},
        )
        # Shared outcome of the in-flight refresh, None when no refresh is active
        self._refresh: Optional[asyncio.Task] = None
        self._pending: Deque[PendingRequest] = deque()

    @property
    def is_refreshing(self) -> bool:
        return self._refresh is not None

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def send(self, request: ApiRequest) -> httpx.Response:
        """
        Send a request, refreshing the access token once on a 401.

        Args:
            request: Request descriptor

        Returns:
            The successful response, or the replayed response after a refresh

        Raises:
            UnauthorizedError: 401 after a retry, or the original 401 when the refresh failed
            ApiError: Any other 4xx or 5xx response
            httpx.TransportError: Network-level failures, never retried
        """
        try:
            return await self._dispatch(request)
        except UnauthorizedError as error:
            if request.retried or request.skip_auth_refresh:
                raise
            pending = self._enqueue(request, error)

        # Raises the original 401 when the refresh fails
        await pending.future
        logger.debug(f"Replaying {request.method} {request.path} after token refresh")
        return await self.send(request)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
        skip_auth_refresh: bool = False,
    ) -> httpx.Response:
        return await self.send(
            ApiRequest(
                method=method,
                path=path,
                params=params,
                json=json,
                headers=dict(headers or {}),
                skip_auth_refresh=skip_auth_refresh,
            )
        )

    async def get(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("DELETE", path, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def _dispatch(self, request: ApiRequest) -> httpx.Response:
        headers = dict(request.headers)
        token = self._access_token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        http_request = self._client.build_request(
            request.method,
            request.path,
            params=request.params,
            json=request.json,
            headers=headers,
        )
        logger.debug(f"{request.method} {request.path}")
        response = await self._client.send(http_request)
        logger.debug(f"{request.method} {request.path} -> {response.status_code}")

        if response.status_code == 401:
            raise UnauthorizedError.from_response(
                response, request.method, request.path
            )
        if response.is_error:
            raise ApiError.from_response(response, request.method, request.path)
        return response

    def _enqueue(self, request: ApiRequest, error: UnauthorizedError) -> PendingRequest:
        request.retried = True
        pending = PendingRequest(
            request=request,
            error=error,
            future=asyncio.get_running_loop().create_future(),
        )
        self._pending.append(pending)

        if self._refresh is None:
            logger.debug("Access token rejected, starting token refresh")
            self._refresh = asyncio.ensure_future(self._run_refresh())
        else:
            logger.debug(
                f"Refresh already in flight, queueing {request.method} {request.path}"
            )
        return pending

    async def _run_refresh(self) -> bool:
        succeeded = False
        try:
            succeeded = bool(
                await asyncio.wait_for(
                    self._refresh_operation(), timeout=self._refresh_timeout
                )
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Token refresh did not complete within {self._refresh_timeout}s"
            )
        except Exception as e:
            logger.error(f"Token refresh raised an error: {e}")
        finally:
            self._refresh = None
            self._drain(succeeded)

        if succeeded:
            logger.debug("Token refresh succeeded")
        else:
            logger.warning("Token refresh failed, rejecting queued requests")
        return succeeded

    def _drain(self, succeeded: bool) -> None:
        released = 0
        while self._pending:
            pending = self._pending.popleft()
            # Caller was cancelled while waiting
            if pending.future.done():
                continue
            if succeeded:
                pending.future.set_result(True)
            else:
                pending.future.set_exception(pending.error)
            released += 1
        logger.debug(f"Released {released} queued request(s)")
