from typing import Any, Dict, List, Optional

import httpx

from storefront.core.config import get_config
from storefront.data.errors import ConflictError, StoreError
from storefront.utils.logger import get_logger

logger = get_logger("utils.supabase_client")

Params = Dict[str, Any]

UNIQUE_VIOLATION = "23505"


def _error_code(response: httpx.Response) -> Optional[str]:
    """Postgres SQLSTATE from a PostgREST error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    return body.get("code") if isinstance(body, dict) else None


class SupabaseClient:
    """
    Lightweight client for interacting with Supabase REST API.

    Every method raises StoreError on transport or HTTP failure; callers decide
    how to recover.
    """
    def __init__(
        self,
        url: Optional[str] = None,
        key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        config = get_config()
        self.url = url if url is not None else config.supabase_url
        self.key = key if key is not None else config.supabase_key

        if not self.url or not self.key:
            logger.warning("SUPABASE_URL or SUPABASE_KEY not set in environment.")

        self.headers = {
            "apikey": self.key or "",
            "Authorization": f"Bearer {self.key or ''}",
            "Content-Type": "application/json",
            "Prefer": "return=representation"
        }
        self.client = httpx.Client(
            base_url=self.url or "",
            headers=self.headers,
            timeout=timeout if timeout is not None else config.request_timeout,
            transport=transport,
        )

    def _request(
        self,
        method: str,
        table: str,
        params: Optional[Params] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        try:
            response = self.client.request(
                method, f"/rest/v1/{table}", params=params, json=json, headers=headers
            )
        except httpx.HTTPError as e:
            raise StoreError(f"{method} {table} failed: {e}") from e

        # PostgREST also answers 409 for foreign-key violations (23503);
        # only a unique-key clash is a conflict another writer caused.
        if response.status_code == 409 and _error_code(response) == UNIQUE_VIOLATION:
            raise ConflictError(f"{method} {table} conflict: {response.text}")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise StoreError(f"{method} {table} returned {response.status_code}: {response.text}") from e

        if not response.content:
            return []
        try:
            return response.json()
        except ValueError as e:
            raise StoreError(f"{method} {table} returned invalid JSON: {e}") from e

    def select(
        self,
        table: str,
        params: Optional[Params] = None,
        select: str = "*",
        order: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Query a Supabase table. ``params`` holds PostgREST filters such as
        ``{"price": ["gte.100", "lte.200"]}``.
        """
        query: Params = {"select": select}
        if params:
            query.update(params)
        if order:
            query["order"] = order
        rows = self._request("GET", table, params=query)
        return rows if isinstance(rows, list) else []

    def insert(self, table: str, row: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Insert one row; raises ConflictError on a unique-constraint clash."""
        return self._request("POST", table, json=row)

    def update(self, table: str, params: Params, values: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Patch matching rows and return the rows that were changed."""
        return self._request("PATCH", table, params=params, json=values)

    def delete(self, table: str, params: Params) -> List[Dict[str, Any]]:
        return self._request("DELETE", table, params=params)

    def close(self) -> None:
        self.client.close()


_client: Optional[SupabaseClient] = None


def get_supabase_client() -> SupabaseClient:
    """Return the shared client, created on first use."""
    global _client
    if _client is None:
        _client = SupabaseClient()
    return _client
