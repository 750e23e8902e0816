"""
Storage backend contract for user records.
"""

from abc import ABC, abstractmethod
from typing import Optional

from app.domain.models.user import UserRecord


class UserRepository(ABC):
    """
    Common contract for record storage backends.

    Backends never raise for I/O, parse, network or timeout faults: ``get``
    degrades to ``None`` and ``upsert`` to ``False``.
    """

    name: str = "abstract"

    @abstractmethod
    async def get(self, username: str) -> Optional[UserRecord]:
        """Fetch one normalized record, or None when absent or unreadable."""

    @abstractmethod
    async def upsert(self, username: str, record: UserRecord) -> bool:
        """Replace the stored record for ``username``. True when the write is confirmed."""

    async def close(self) -> None:
        """Release backend resources."""
