"""HTTP resource client — implements the RemoteResourceClient interface.

Talks to the admin backend's REST endpoints (``GET/POST /<endpoint>``,
``PUT/DELETE /<endpoint>/<id>``) using httpx. Every failure mode — transport
error, timeout, non-2xx status, malformed body — is raised as RemoteFailure.
"""

import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from admin_sync.application.interfaces import RemoteResourceClient
from admin_sync.application.schemas import RecordPayload
from admin_sync.domain.entities import Record, ResourceType
from admin_sync.domain.exceptions import RemoteFailure

logger = logging.getLogger(__name__)


class HttpResourceClient(RemoteResourceClient):
    """Infrastructure adapter — one backend collection over HTTP.

    Uses the injected ``httpx.AsyncClient`` (connection pooling, tests with
    ``MockTransport``) or opens a short-lived client per call.
    """

    def __init__(
        self,
        resource_type: ResourceType,
        base_url: str = "http://localhost:4000/api",
        *,
        timeout: float = 15.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._resource_type = resource_type
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http_client = http_client

    @property
    def resource_type(self) -> ResourceType:
        return self._resource_type

    def _collection_url(self) -> str:
        return f"{self._base_url}/{self._resource_type.endpoint.strip('/')}"

    def _item_url(self, record_id: str) -> str:
        return f"{self._collection_url()}/{record_id}"

    @staticmethod
    def _get_headers() -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _send(
        self,
        operation: str,
        method: str,
        url: str,
        payload: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Issue one request bounded by the client timeout; map failures to RemoteFailure."""
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await asyncio.wait_for(
                client.request(method, url, headers=self._get_headers(), json=payload),
                timeout=self._timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("%s %s timed out after %.1fs", method, url, self._timeout)
            raise RemoteFailure(
                operation, f"timed out after {self._timeout:.1f}s", timed_out=True
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise RemoteFailure(operation, f"{type(exc).__name__}: {exc}") from exc
        finally:
            if should_close:
                await client.aclose()

        if not response.is_success:
            self._raise_remote_failure(operation, response)

        logger.debug("%s %s → %d", method, url, response.status_code)
        return response

    def _parse_record(self, operation: str, data: Any) -> Record:
        try:
            return RecordPayload.model_validate(data).to_record(self._resource_type)
        except ValidationError as exc:
            raise RemoteFailure(operation, f"malformed record: {exc.errors()[0]['msg']}") from exc

    @staticmethod
    def _json_body(operation: str, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteFailure(
                operation, "response body is not JSON", status_code=response.status_code
            ) from exc

    async def create(self, fields: dict[str, Any]) -> Record:
        operation = f"create {self._resource_type.key}"
        response = await self._send(operation, "POST", self._collection_url(), fields)
        return self._parse_record(operation, self._json_body(operation, response))

    async def update(self, record_id: str, fields: dict[str, Any]) -> Record:
        operation = f"update {self._resource_type.key}/{record_id}"
        response = await self._send(operation, "PUT", self._item_url(record_id), fields)
        return self._parse_record(operation, self._json_body(operation, response))

    async def delete(self, record_id: str) -> bool:
        operation = f"delete {self._resource_type.key}/{record_id}"
        await self._send(operation, "DELETE", self._item_url(record_id))
        return True

    async def list(self) -> list[Record]:
        operation = f"list {self._resource_type.key}"
        response = await self._send(operation, "GET", self._collection_url())
        data = self._json_body(operation, response)
        if not isinstance(data, list):
            raise RemoteFailure(
                operation,
                f"expected a JSON array, got {type(data).__name__}",
                status_code=response.status_code,
            )
        return [self._parse_record(operation, item) for item in data]

    @staticmethod
    def _raise_remote_failure(operation: str, response: httpx.Response) -> None:
        """Raise RemoteFailure from a non-2xx httpx Response."""
        try:
            data = response.json()
            message = data.get("error") or data.get("message") or response.text
            if isinstance(message, dict):
                message = message.get("message", response.text)
        except Exception:
            message = response.text

        raise RemoteFailure(
            operation,
            str(message) or response.reason_phrase,
            status_code=response.status_code,
        )
