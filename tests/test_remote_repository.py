import json

import httpx
import pytest

from app.domain.normalizer import default_record, normalize_record
from app.domain.repositories.remote_user_repository import RemoteTableUserRepository

pytestmark = pytest.mark.anyio

NOW_MS = 1760000000000
BASE_URL = "https://project.supabase.test"


class FakeTable:
    """Minimal PostgREST stand-in for a table keyed by ``username``."""

    def __init__(self):
        self.rows = {}
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        assert request.headers["apikey"] == "service-key"
        assert request.headers["Authorization"] == "Bearer service-key"
        assert request.url.path == "/rest/v1/users"

        if request.method == "GET":
            key = request.url.params["username"].removeprefix("eq.")
            row = self.rows.get(key)
            return httpx.Response(200, json=[row] if row else [])

        if request.method == "POST":
            assert request.url.params["on_conflict"] == "username"
            assert "resolution=merge-duplicates" in request.headers["Prefer"]
            row = json.loads(request.content)
            self.rows[row["username"]] = row
            return httpx.Response(201)

        return httpx.Response(405)


@pytest.fixture
def table():
    return FakeTable()


@pytest.fixture
async def repository(table):
    repo = RemoteTableUserRepository(
        BASE_URL, "service-key", transport=httpx.MockTransport(table.handler)
    )
    yield repo
    await repo.close()


async def test_missing_row_is_not_found(repository):
    assert await repository.get("alice") is None


async def test_upsert_adds_username_column(repository, table):
    record = default_record("alice", now_ms=NOW_MS)

    assert await repository.upsert("alice", record) is True

    row = table.rows["alice"]
    assert row["username"] == "alice"
    assert row["createdAt"] == NOW_MS
    assert row["card"]["last4"] == record.card.last4


async def test_round_trip_strips_key_column(repository):
    record = normalize_record("bob", {"balance": 12.5, "onboarded": True}, now_ms=NOW_MS)
    await repository.upsert("bob", record)

    assert await repository.get("bob") == record


async def test_rows_are_normalized_on_read(repository, table):
    table.rows["eve"] = {"username": "eve", "balance": "lots", "txs": ["bad"], "gpay": True}

    record = await repository.get("eve")

    assert record.balance == 0
    assert record.txs == []
    assert record.gpay is True


async def test_unconfigured_backend_reports_unavailable():
    def fail(request):
        raise AssertionError("no request expected")

    repo = RemoteTableUserRepository(None, None, transport=httpx.MockTransport(fail))

    assert repo.configured is False
    assert await repo.get("alice") is None
    assert await repo.upsert("alice", default_record("alice", now_ms=NOW_MS)) is False


@pytest.mark.parametrize(
    "failure",
    [
        httpx.ConnectError("refused"),
        httpx.ReadTimeout("slow"),
    ],
)
async def test_network_faults_degrade(failure):
    def handler(request):
        raise failure

    repo = RemoteTableUserRepository(BASE_URL, "service-key", transport=httpx.MockTransport(handler))
    try:
        assert await repo.get("alice") is None
        assert await repo.upsert("alice", default_record("alice", now_ms=NOW_MS)) is False
    finally:
        await repo.close()


async def test_error_status_degrades():
    repo = RemoteTableUserRepository(
        BASE_URL,
        "service-key",
        transport=httpx.MockTransport(lambda request: httpx.Response(500, json={"message": "boom"})),
    )
    try:
        assert await repo.get("alice") is None
        assert await repo.upsert("alice", default_record("alice", now_ms=NOW_MS)) is False
    finally:
        await repo.close()


async def test_unparseable_response_is_not_found():
    repo = RemoteTableUserRepository(
        BASE_URL,
        "service-key",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, content=b"<html>")),
    )
    try:
        assert await repo.get("alice") is None
    finally:
        await repo.close()


async def test_unexpected_errors_are_logged_with_context(monkeypatch):
    logged = []
    monkeypatch.setattr(
        "app.domain.repositories.remote_user_repository.log_error",
        lambda error, context=None: logged.append((error, context)),
    )

    def handler(request):
        raise RuntimeError("transport exploded")

    repo = RemoteTableUserRepository(BASE_URL, "service-key", transport=httpx.MockTransport(handler))
    try:
        assert await repo.get("alice") is None
        assert await repo.upsert("alice", default_record("alice", now_ms=NOW_MS)) is False
    finally:
        await repo.close()

    assert [context["operation"] for _, context in logged] == ["get", "upsert"]
    assert all(isinstance(error, RuntimeError) for error, _ in logged)
    assert logged[0][1] == {"backend": "remote_table", "operation": "get", "username": "alice"}
