"""
Record Service.
Fetch-or-create and upsert of user records over the configured storage backend.
"""

from typing import Any

from app.core.config import Settings
from app.core.exceptions import MissingBodyError
from app.core.logging import get_logger, log_record_operation
from app.domain.identity import derive_user_key
from app.domain.models.user import UserRecord
from app.domain.normalizer import normalize_record
from app.domain.repositories.file_user_repository import FileUserRepository
from app.domain.repositories.remote_user_repository import RemoteTableUserRepository
from app.domain.repositories.user_repository import UserRepository

logger = get_logger(__name__)


class RecordService:
    """Service class for user record operations."""

    def __init__(self, repository: UserRepository):
        """Initialize record service with its storage backend."""
        self.repository = repository

    @property
    def backend_name(self) -> str:
        return self.repository.name

    async def fetch_or_create(self, handle: str) -> UserRecord:
        """
        Return the stored record, creating and persisting a default one if absent.

        Persisting the new default is best effort: the record is returned even
        when the backend could not store it.
        """
        username = derive_user_key(handle)
        stored = await self.repository.get(username)
        if stored is not None:
            log_record_operation("fetch", username, self.backend_name)
            return stored

        fresh = normalize_record(username)
        saved = await self.repository.upsert(username, fresh)
        if not saved:
            logger.warning(f"Default record for {username} was not persisted")
        log_record_operation("create", username, self.backend_name, persisted=saved)
        return fresh

    async def upsert(self, handle: str, payload: Any) -> bool:
        """
        Normalize an untrusted payload and store it.

        Fields missing from the payload keep their currently stored values,
        or the seeded defaults for a first write.

        Raises:
            MissingBodyError: If the payload is not a JSON object
        """
        if not isinstance(payload, dict):
            raise MissingBodyError()

        username = derive_user_key(handle)
        current = await self.repository.get(username)
        record = normalize_record(username, payload, baseline=current)
        return await self.save(username, record)

    async def save(self, username: str, record: UserRecord) -> bool:
        saved = await self.repository.upsert(username, record)
        log_record_operation("upsert", username, self.backend_name, persisted=saved)
        return saved

    async def close(self) -> None:
        await self.repository.close()


def build_repository(config: Settings) -> UserRepository:
    """Select the backend once: remote table when configured, file otherwise."""
    if config.remote_table_configured():
        logger.info(f"Using remote table backend ({config.SUPABASE_URL}, table={config.SUPABASE_TABLE})")
        return RemoteTableUserRepository(
            base_url=config.SUPABASE_URL,
            api_key=config.SUPABASE_KEY,
            table=config.SUPABASE_TABLE,
            timeout=config.SUPABASE_TIMEOUT,
        )
    logger.info(f"Using file backend at {config.FILE_DB_PATH}")
    return FileUserRepository(config.FILE_DB_PATH)


def build_record_service(config: Settings) -> RecordService:
    return RecordService(build_repository(config))
