"""REST-backed resource store with retries and timeout handling."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Iterable, Optional

import aiohttp
import structlog
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from storeguard.config import get_settings
from storeguard.exceptions import FetchFailed
from storeguard.store import MemoryStore, TypeDescriptor


logger = structlog.get_logger(__name__)


class RestResourceStore(MemoryStore):
    """Loads whole collections with ``GET {base_url}/{type path}``.

    The response body is either a JSON list of records or an object carrying
    the list under the type's path, e.g. ``{"widgets": [...]}``.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout_seconds: int | None = None,
        max_attempts: int | None = None,
        api_token: str | None = None,
        wait: wait_base | None = None,
    ) -> None:
        super().__init__()
        settings = get_settings().rest
        self._base_url = (base_url or settings.base_url).rstrip("/")
        self._timeout = timeout_seconds or settings.timeout_seconds
        self._max_attempts = max_attempts or settings.max_attempts
        self._api_token = api_token if api_token is not None else settings.api_token
        self._wait = wait or wait_exponential(multiplier=1, min=1, max=10)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def base_url(self) -> str:
        return self._base_url

    @asynccontextmanager
    async def session(self) -> AsyncIterator[aiohttp.ClientSession]:
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=self._timeout)
            connector = aiohttp.TCPConnector(limit=10)
            self._session = aiohttp.ClientSession(timeout=timeout, connector=connector)
        try:
            yield self._session
        finally:
            # caller is responsible for closing via close()
            ...

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    async def _get_with_retry(self, url: str) -> Any:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=self._wait,
            retry=retry_if_exception_type((aiohttp.ClientError, asyncio.TimeoutError)),
            reraise=True,
        ):
            with attempt:
                async with self.session() as session:
                    logger.debug("rest.request", url=url, attempt=attempt.retry_state.attempt_number)
                    async with session.get(url, headers=self._headers()) as response:
                        response.raise_for_status()
                        return await response.json()

    async def _load(self, descriptor: TypeDescriptor) -> Iterable[Any]:
        url = f"{self._base_url}/{descriptor.path}"
        try:
            payload = await self._get_with_retry(url)
        except Exception as exc:
            raise FetchFailed(f"GET {url} failed: {exc}", cause=exc) from exc
        return self._extract(descriptor, payload)

    @staticmethod
    def _extract(descriptor: TypeDescriptor, payload: Any) -> list[Any]:
        if isinstance(payload, list):
            return payload
        if isinstance(payload, dict):
            for key in (descriptor.path, descriptor.name):
                records = payload.get(key)
                if isinstance(records, list):
                    return records
        raise FetchFailed(f"Unexpected payload for {descriptor.name!r}: expected a list of records")


__all__ = ["RestResourceStore"]
