import os
import sys
import tempfile
from typing import Dict, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from asgi_lifespan import LifespanManager

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)
os.environ.setdefault("ANYIO_BACKEND", "asyncio")
os.environ["FILE_DB_PATH"] = os.path.join(tempfile.mkdtemp(prefix="vcard-tests-"), "server_db.json")
for _name in ("SUPABASE_URL", "SUPABASE_KEY", "NEXT_PUBLIC_SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_KEY"):
    os.environ.pop(_name, None)

from app.main import app  # noqa: E402
from app.api.deps.record_deps import get_record_service  # noqa: E402
from app.api.services.record_service import RecordService  # noqa: E402
from app.domain.models.user import UserRecord  # noqa: E402
from app.domain.repositories.user_repository import UserRepository  # noqa: E402


class InMemoryUserRepository(UserRepository):
    """Dict-backed backend with switchable write failures."""

    name = "memory"

    def __init__(self):
        self.rows: Dict[str, UserRecord] = {}
        self.fail_writes = False
        self.upsert_calls = 0

    async def get(self, username: str) -> Optional[UserRecord]:
        record = self.rows.get(username)
        return record.model_copy(deep=True) if record is not None else None

    async def upsert(self, username: str, record: UserRecord) -> bool:
        self.upsert_calls += 1
        if self.fail_writes:
            return False
        self.rows[username] = record.model_copy(deep=True)
        return True


@pytest.fixture
def anyio_backend() -> str:
    return os.environ["ANYIO_BACKEND"]


@pytest.fixture
def memory_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def record_service(memory_repository: InMemoryUserRepository) -> RecordService:
    return RecordService(memory_repository)


@pytest.fixture(autouse=True)
def override_record_service(record_service: RecordService):
    """
    Route every request to the in-memory backend so endpoint tests
    never touch the file system or a remote table.
    """
    app.dependency_overrides[get_record_service] = lambda: record_service
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client():
    """Shared HTTPX async client with FastAPI lifespan handling."""
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
