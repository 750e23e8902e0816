"""
Remote table repository for user records.
Talks to a Supabase/PostgREST ``users`` table keyed by a unique ``username`` column.
"""

from typing import Any, Dict, Optional

import httpx

from app.core.logging import get_logger, log_error, log_storage_failure
from app.domain.models.user import UserRecord
from app.domain.normalizer import normalize_record
from app.domain.repositories.user_repository import UserRepository

logger = get_logger(__name__)

KEY_COLUMN = "username"


class RemoteTableUserRepository(UserRepository):
    """
    Point lookups and full-row upserts against a remote row store.

    When the endpoint or key is missing every call reports unavailable
    (``None`` / ``False``) instead of raising. Network faults and timeouts
    are reported the same way.
    """

    name = "remote_table"

    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str],
        table: str = "users",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize remote table repository."""
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key or ""
        self.table = table
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.api_key)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self.base_url}/rest/v1",
                headers={
                    "apikey": self.api_key,
                    "Authorization": f"Bearer {self.api_key}",
                },
                timeout=self.timeout,
                transport=self._transport,
            )
            logger.info(f"Remote table client created for {self.base_url} (table={self.table})")
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Remote table client closed")

    async def get(self, username: str) -> Optional[UserRecord]:
        """
        Get a record by username.

        Args:
            username: Value of the key column

        Returns:
            Normalized record or None if not found, unconfigured or unreachable
        """
        if not self.configured:
            return None

        try:
            response = await self._get_client().get(
                f"/{self.table}",
                params={"select": "*", KEY_COLUMN: f"eq.{username}", "limit": "1"},
            )
            response.raise_for_status()
            rows = response.json()
        except httpx.HTTPStatusError as exc:
            log_storage_failure(
                self.name, "get", username=username, error=exc, status_code=exc.response.status_code
            )
            return None
        except httpx.HTTPError as exc:
            log_storage_failure(self.name, "get", username=username, error=exc)
            return None
        except Exception as exc:
            log_error(exc, {"backend": self.name, "operation": "get", "username": username})
            return None

        if not isinstance(rows, list) or not rows:
            return None
        row = rows[0]
        if not isinstance(row, dict):
            return None
        data = {key: value for key, value in row.items() if key != KEY_COLUMN}
        return normalize_record(username, data)

    async def upsert(self, username: str, record: UserRecord) -> bool:
        """
        Insert or fully replace the row keyed by username.

        Args:
            username: Value of the key column
            record: Normalized record

        Returns:
            True if the remote store confirmed the write
        """
        if not self.configured:
            return False

        row: Dict[str, Any] = {**record.to_wire(), KEY_COLUMN: username}
        try:
            response = await self._get_client().post(
                f"/{self.table}",
                params={"on_conflict": KEY_COLUMN},
                json=row,
                headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            log_storage_failure(
                self.name, "upsert", username=username, error=exc, status_code=exc.response.status_code
            )
            return False
        except httpx.HTTPError as exc:
            log_storage_failure(self.name, "upsert", username=username, error=exc)
            return False
        except Exception as exc:
            log_error(exc, {"backend": self.name, "operation": "upsert", "username": username})
            return False
        return True
