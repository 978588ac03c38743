"""Tests for the transaction endpoints."""

import asyncio
import pathlib
import sys

from httpx import AsyncClient, ASGITransport

# Allow importing the ledger package
sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

from ledger.main import app
from ledger.store import TransactionStore, get_store
from ledger.routes.transactions import get_response_delay

TX_ID = "123e4567-e89b-12d3-a456-426614174010"
OTHER_ID = "9b2f7c1e-4d3a-4f6b-8a1c-2e5d7f9a0b3c"


def _coffee(**overrides):
    data = {
        "id": TX_ID,
        "typeId": 1,
        "amount": 20.5,
        "createdAt": "2023-11-01T00:00:00Z",
        "for": "Coffee",
    }
    data.update(overrides)
    return data


def _setup_test_store(delay: float = 0.0) -> TransactionStore:
    store = TransactionStore()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_response_delay] = lambda: delay
    return store


def test_transaction_lifecycle():
    async def run():
        store = _setup_test_store()
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.get("/transactions")
            assert resp.status_code == 200
            assert resp.json() == []

            # Create
            resp = await client.post("/transactions", json=_coffee())
            assert resp.status_code == 201
            data = resp.json()
            assert data["id"] == TX_ID
            assert data["typeId"] == 1
            assert data["amount"] == 20.5
            assert data["for"] == "Coffee"
            assert data["createdAt"].startswith("2023-11-01T00:00:00")

            # Partial update leaves the other fields alone
            resp = await client.patch(f"/transactions/{TX_ID}", json={"amount": 25})
            assert resp.status_code == 200
            data = resp.json()
            assert data["amount"] == 25
            assert data["typeId"] == 1
            assert data["for"] == "Coffee"
            assert data["createdAt"].startswith("2023-11-01T00:00:00")

            resp = await client.get("/transactions")
            assert [tx["amount"] for tx in resp.json()] == [25]

            # Delete
            resp = await client.delete(f"/transactions/{TX_ID}")
            assert resp.status_code == 204
            assert resp.content == b""

            resp = await client.get("/transactions")
            assert resp.json() == []
        assert len(store) == 0
        app.dependency_overrides.clear()

    asyncio.run(run())


def test_listing_keeps_insertion_order():
    async def run():
        _setup_test_store()
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await client.post("/transactions", json=_coffee())
            await client.post(
                "/transactions", json=_coffee(id=OTHER_ID, amount=3, **{"for": "Bus"})
            )
            # Updating the first record must not move it
            await client.patch(f"/transactions/{TX_ID}", json={"for": "Tea"})
            resp = await client.get("/transactions")
            assert [tx["id"] for tx in resp.json()] == [TX_ID, OTHER_ID]
            assert resp.json()[0]["for"] == "Tea"
        app.dependency_overrides.clear()

    asyncio.run(run())


def test_create_validation_errors():
    async def run():
        store = _setup_test_store()
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            # Missing amount wins over the malformed id
            bad = _coffee(id="not-a-uuid")
            del bad["amount"]
            resp = await client.post("/transactions", json=bad)
            assert resp.status_code == 400
            assert resp.json() == {
                "error": "Missing required fields: id, typeId, amount, createdAt"
            }

            resp = await client.post("/transactions", json=_coffee(amount=0))
            assert resp.status_code == 400
            assert resp.json()["error"].startswith("Missing required fields")

            resp = await client.post("/transactions", json=_coffee(amount="20"))
            assert resp.status_code == 400
            assert resp.json()["error"].startswith("Invalid field types")

            resp = await client.post("/transactions", json=_coffee(id="not-a-uuid"))
            assert resp.status_code == 400
            assert resp.json() == {"error": "Invalid id: must be a valid UUID"}

            resp = await client.post("/transactions", json=_coffee(createdAt="yesterday"))
            assert resp.status_code == 400
            assert resp.json() == {
                "error": "Invalid createdAt: must be a valid date-time string"
            }

            resp = await client.post("/transactions", json=[_coffee()])
            assert resp.status_code == 400
            assert "error" in resp.json()

            resp = await client.get("/transactions")
            assert resp.json() == []

            # Duplicate ids are rejected
            resp = await client.post("/transactions", json=_coffee())
            assert resp.status_code == 201
            resp = await client.post("/transactions", json=_coffee(amount=99))
            assert resp.status_code == 400
            assert "already exists" in resp.json()["error"]
        assert len(store) == 1
        app.dependency_overrides.clear()

    asyncio.run(run())


def test_update_and_delete_errors():
    async def run():
        _setup_test_store()
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.patch(f"/transactions/{OTHER_ID}", json={"amount": 1})
            assert resp.status_code == 404
            assert resp.json() == {"error": f"Transaction {OTHER_ID} not found"}

            resp = await client.delete(f"/transactions/{OTHER_ID}")
            assert resp.status_code == 404

            await client.post("/transactions", json=_coffee())

            resp = await client.patch(f"/transactions/{TX_ID}", json={"amount": "lots"})
            assert resp.status_code == 400
            assert resp.json() == {"error": "amount must be a number"}

            resp = await client.patch(f"/transactions/{TX_ID}", json={"typeId": None})
            assert resp.status_code == 400
            assert resp.json() == {"error": "typeId must be a number"}

            resp = await client.patch(f"/transactions/{TX_ID}", json={"id": OTHER_ID})
            assert resp.status_code == 400
            assert resp.json() == {"error": "id cannot be modified"}

            resp = await client.get("/transactions")
            assert resp.json()[0]["amount"] == 20.5
            assert resp.json()[0]["id"] == TX_ID
        app.dependency_overrides.clear()

    asyncio.run(run())


def test_mutation_visible_before_response():
    async def run():
        _setup_test_store(delay=1.0)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            pending = asyncio.create_task(client.post("/transactions", json=_coffee()))
            seen = []
            for _ in range(50):
                await asyncio.sleep(0.01)
                resp = await client.get("/transactions")
                seen = resp.json()
                if seen:
                    break
            assert [tx["id"] for tx in seen] == [TX_ID]
            assert not pending.done()
            resp = await pending
            assert resp.status_code == 201
        app.dependency_overrides.clear()

    asyncio.run(run())
