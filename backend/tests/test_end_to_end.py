from typing import AsyncIterator

import pytest
import pytest_asyncio
from guestlist.deps import get_session
from guestlist.main import app
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession


@pytest_asyncio.fixture
async def client(sessionmaker) -> AsyncIterator[AsyncClient]:
    async def override_get_session() -> AsyncIterator[AsyncSession]:
        async with sessionmaker() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def _seats(client: AsyncClient) -> int:
    res = await client.get("/seats_empty")
    assert res.status_code == 200
    return res.json()["seats_empty"]


@pytest.mark.asyncio
async def test_party_arrives_and_leaves(client: AsyncClient) -> None:
    table = await client.post("/tables", json={"capacity": 10, "allowed_extras": 2})
    assert table.status_code == 200
    table_id = table.json()["id"]

    res = await client.post("/guest_list/Alice", json={"table": table_id, "accompanying_guests": 5})
    assert res.json() == {"name": "Alice"}
    assert await _seats(client) == 7

    res = await client.put("/guests/Alice", json={"accompanying_guests": 5})
    assert res.status_code == 200
    assert await _seats(client) == 2

    res = await client.delete("/guests/Alice")
    assert res.status_code == 204
    assert await _seats(client) == 12

    res = await client.post("/guest_list/Mallory", json={"table": table_id, "accompanying_guests": 13})
    assert res.status_code == 409
    assert await _seats(client) == 12
    assert (await client.get("/guest_list")).json() == {"guests": []}


@pytest.mark.asyncio
async def test_rejected_arrival_keeps_stored_count(client: AsyncClient) -> None:
    table_id = (await client.post("/tables", json={"capacity": 4})).json()["id"]
    await client.post("/guest_list/Bob", json={"table": table_id, "accompanying_guests": 3})

    res = await client.put("/guests/Bob", json={"accompanying_guests": 2})
    assert res.status_code == 409

    guests = (await client.get("/guests")).json()["guests"]
    assert [(g["name"], g["accompanying_guests"]) for g in guests] == [("Bob", 3)]
