"""
File Repository for user records.
Keeps every record in one JSON document: {"users": {"<username>": <record>}}.
"""

import json
import os
from pathlib import Path
from typing import Dict, Optional, Union

from app.core.logging import get_logger, log_storage_failure
from app.domain.models.user import UserRecord
from app.domain.normalizer import normalize_record
from app.domain.repositories.user_repository import UserRepository

logger = get_logger(__name__)


class FileUserRepository(UserRepository):
    """
    Whole-document read/modify/write store.

    Each write re-serializes every record into ``<path>.tmp`` and renames it
    over ``<path>``, so readers see either the old or the new complete file.
    Reads and writes do not await between loading and replacing the
    document, which keeps writes to different usernames from clobbering each
    other inside one event loop. File I/O and fsync are blocking calls made
    directly on the event loop thread.
    """

    name = "file"

    def __init__(self, path: Union[str, Path]):
        """Initialize file repository."""
        self.path = Path(path)
        self.tmp_path = self.path.with_name(self.path.name + ".tmp")

    def read_store(self) -> Dict[str, UserRecord]:
        """
        Load and normalize every stored record.

        Returns:
            Mapping of username to record; empty when the file is missing or corrupt
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as e:
            log_storage_failure(self.name, "read_store", error=e, path=str(self.path))
            return {}

        try:
            parsed = json.loads(raw or "{}")
        except (ValueError, RecursionError) as e:
            log_storage_failure(self.name, "read_store", error=e, path=str(self.path))
            return {}

        users = parsed.get("users") if isinstance(parsed, dict) else None
        if not isinstance(users, dict):
            return {}
        return {username: normalize_record(username, value) for username, value in users.items()}

    def write_store(self, users: Dict[str, UserRecord]) -> None:
        """
        Atomically replace the store document.

        Raises:
            OSError: If the staging file cannot be written or renamed
        """
        document = {"users": {username: record.to_wire() for username, record in users.items()}}
        serialized = json.dumps(document, indent=2) + "\n"

        if not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with self.tmp_path.open("w", encoding="utf-8") as fh:
                fh.write(serialized)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(self.tmp_path, self.path)
        finally:
            self.tmp_path.unlink(missing_ok=True)

    async def get(self, username: str) -> Optional[UserRecord]:
        """
        Get a record by username.

        Args:
            username: Record key

        Returns:
            Normalized record or None if not found
        """
        return self.read_store().get(username)

    async def upsert(self, username: str, record: UserRecord) -> bool:
        """
        Insert or replace a record.

        Args:
            username: Record key
            record: Normalized record

        Returns:
            True if the store file was replaced
        """
        users = self.read_store()
        users[username] = record
        try:
            self.write_store(users)
        except OSError as e:
            log_storage_failure(self.name, "upsert", username=username, error=e)
            return False
        logger.debug(f"Stored record for {username} ({len(users)} users in {self.path})")
        return True
