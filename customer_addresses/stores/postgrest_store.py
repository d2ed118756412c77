"""
PostgREST-backed table store

Talks to a Supabase project's REST endpoint with httpx. Row-level security is
evaluated with the caller's access token, so the store is created per user
session.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import httpx

from customer_addresses.stores.base import (
    Condition,
    OrderBy,
    RemoteStoreError,
    RemoteTableStore,
    Row,
)
from customer_addresses.utils.logging import get_logger


logger = get_logger(__name__)


def _encode(value: Any) -> Any:
    """JSON-compatible representation of a row value"""
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _filter_literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(_encode(value))


class PostgRESTTableStore(RemoteTableStore):
    """
    Table store speaking the PostgREST query dialect

    Args:
        rest_url: PostgREST root, e.g. https://<project>.supabase.co/rest/v1
        api_key: project anon key, sent as the apikey header
        access_token: the user's JWT; falls back to the anon key
        timeout: request timeout in seconds
        client: preconfigured httpx.AsyncClient (tests pass a MockTransport)
    """

    def __init__(
        self,
        rest_url: str,
        api_key: str,
        access_token: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.rest_url = rest_url.rstrip("/")
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {access_token or api_key}",
            "Content-Type": "application/json",
        }
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "PostgRESTTableStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    @staticmethod
    def _params(
        filters: Sequence[Condition], order: Sequence[OrderBy] = ()
    ) -> List[tuple]:
        params = [
            (condition.column, f"{condition.operator.value}.{_filter_literal(condition.value)}")
            for condition in filters
        ]
        if order:
            params.append(
                (
                    "order",
                    ",".join(
                        f"{o.column}.{'desc' if o.descending else 'asc'}" for o in order
                    ),
                )
            )
        return params

    async def _request(
        self,
        operation: str,
        method: str,
        table: str,
        params: List[tuple],
        json_body: Optional[Dict[str, Any]] = None,
        prefer: Optional[str] = None,
    ) -> Any:
        headers = dict(self.headers)
        if prefer:
            headers["Prefer"] = prefer

        try:
            response = await self._client.request(
                method,
                f"{self.rest_url}/{table}",
                params=params,
                json=json_body,
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.warning(
                "PostgREST transport failure",
                extra={"operation": operation, "table": table, "error": str(e)},
            )
            raise RemoteStoreError(str(e) or type(e).__name__, operation=operation) from e

        if response.status_code >= 400:
            raise RemoteStoreError(self._error_message(response), operation=operation)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict) and body.get("message"):
            return body["message"]
        return f"HTTP {response.status_code}"

    async def select(
        self,
        table: str,
        filters: Sequence[Condition] = (),
        order: Sequence[OrderBy] = (),
    ) -> List[Row]:
        params = [("select", "*")] + self._params(filters, order)
        return await self._request("select", "GET", table, params) or []

    async def insert(self, table: str, row: Row) -> Row:
        body = {key: _encode(value) for key, value in row.items()}
        rows = await self._request(
            "insert",
            "POST",
            table,
            [("select", "*")],
            json_body=body,
            prefer="return=representation",
        )
        if not rows:
            raise RemoteStoreError("insert returned no row", operation="insert")
        return rows[0]

    async def update(
        self, table: str, patch: Row, filters: Sequence[Condition]
    ) -> List[Row]:
        body = {key: _encode(value) for key, value in patch.items()}
        rows = await self._request(
            "update",
            "PATCH",
            table,
            [("select", "*")] + self._params(filters),
            json_body=body,
            prefer="return=representation",
        )
        return rows or []

    async def delete(self, table: str, filters: Sequence[Condition]) -> None:
        await self._request(
            "delete", "DELETE", table, self._params(filters), prefer="return=minimal"
        )
