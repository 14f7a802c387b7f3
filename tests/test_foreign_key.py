# ==============================================================================
# FOREIGN KEY ENDPOINT TESTS
# ==============================================================================
# One / Many / ToOne over /api/One, /api/Many, /api/ToOne
# ==============================================================================

import pytest
from httpx import AsyncClient

from improved_api.database.unit_of_work import ImprovedUnitOfWork
from foreign_key_example.database import ToOneRepository


async def create_one(client: AsyncClient, **values) -> dict:
    payload = {"one_property01": "Parent"}
    payload.update(values)
    response = await client.post("/api/One", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def create_many(client: AsyncClient, one_id: int, value: str = "Child") -> dict:
    response = await client.post(
        "/api/Many",
        json={"one_id": one_id, "many_property01": value},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def create_to_one(app, one_id: int, value: str = "Pointer") -> int:
    async with ImprovedUnitOfWork(app.state.context) as uow:
        to_one = await uow.repository(ToOneRepository).add(
            {"one_id": one_id, "to_one_property01": value}
        )
        await uow.commit()
        return to_one.to_one_id


class TestOneEndpoints:
    """Tests for /api/One."""

    @pytest.mark.asyncio
    async def test_create_one(self, client: AsyncClient, sample_one_data: dict):
        response = await client.post("/api/One", json=sample_one_data)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["one_property01"] == sample_one_data["one_property01"]
        assert data["one_property02"] == sample_one_data["one_property02"]

    @pytest.mark.asyncio
    async def test_optional_property_omitted(self, client: AsyncClient):
        """Test a null one_property02 is left out of the response."""
        one = await create_one(client)
        assert "one_property02" not in one

    @pytest.mark.asyncio
    async def test_update_one(self, client: AsyncClient):
        one = await create_one(client, one_property02=1)

        response = await client.put(
            f"/api/One/{one['one_id']}",
            json={"one_property02": 2},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["one_property01"] == "Parent"
        assert data["one_property02"] == 2

    @pytest.mark.asyncio
    async def test_update_one_null_required_property(self, client: AsyncClient):
        one = await create_one(client, one_property02=1)

        response = await client.put(
            f"/api/One/{one['one_id']}",
            json={"one_property01": None, "one_property02": None},
        )

        assert response.status_code == 422
        errors = response.json()["error"]["details"]["validation_errors"]
        assert errors == {"one_property01": "may not be null"}
        fetched = await client.get(f"/api/One/{one['one_id']}")
        assert fetched.json()["data"]["one_property02"] == 1


class TestManyEndpoints:
    """Tests for /api/Many."""

    @pytest.mark.asyncio
    async def test_create_many_custom_property(self, client: AsyncClient):
        """Test the response summarizes the Many and its One."""
        one = await create_one(client, one_property01="Alpha")

        many = await create_many(client, one["one_id"], "Beta")

        assert many["one_id"] == one["one_id"]
        assert many["custom_property"] == (
            f"ManyID: {many['many_id']}/OneID: {one['one_id']}/"
            f"ManyProperty01: Beta/OneProperty01: Alpha"
        )

    @pytest.mark.asyncio
    async def test_get_many_custom_property(self, client: AsyncClient):
        one = await create_one(client, one_property01="Alpha")
        many = await create_many(client, one["one_id"], "Beta")

        response = await client.get(f"/api/Many/{many['many_id']}")

        assert response.status_code == 200
        assert response.json()["data"]["custom_property"].endswith("OneProperty01: Alpha")

    @pytest.mark.asyncio
    async def test_create_many_missing_one(self, client: AsyncClient):
        """Test a Many pointing at a missing One is a conflict."""
        response = await client.post(
            "/api/Many",
            json={"one_id": 999, "many_property01": "Orphan"},
        )

        assert response.status_code == 409
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == "INTEGRITY_ERROR"

        listing = await client.get("/api/Many")
        assert listing.json()["data"]["total"] == 0

    @pytest.mark.asyncio
    async def test_move_many_to_other_one(self, client: AsyncClient):
        """Test updating one_id reloads the parent."""
        first = await create_one(client, one_property01="First")
        second = await create_one(client, one_property01="Second")
        many = await create_many(client, first["one_id"])

        response = await client.put(
            f"/api/Many/{many['many_id']}",
            json={"one_id": second["one_id"]},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["one_id"] == second["one_id"]
        assert data["custom_property"].endswith("OneProperty01: Second")

    @pytest.mark.asyncio
    async def test_move_many_to_missing_one(self, client: AsyncClient):
        one = await create_one(client)
        many = await create_many(client, one["one_id"])

        response = await client.put(f"/api/Many/{many['many_id']}", json={"one_id": 999})

        assert response.status_code == 409
        fetched = await client.get(f"/api/Many/{many['many_id']}")
        assert fetched.json()["data"]["one_id"] == one["one_id"]

    @pytest.mark.asyncio
    async def test_filter_many_by_one(self, client: AsyncClient):
        first = await create_one(client)
        second = await create_one(client)
        await create_many(client, first["one_id"], "a")
        await create_many(client, first["one_id"], "b")
        await create_many(client, second["one_id"], "c")

        response = await client.get("/api/Many", params={"one_id": first["one_id"]})

        page = response.json()["data"]
        assert page["total"] == 2
        assert {item["many_property01"] for item in page["items"]} == {"a", "b"}

    @pytest.mark.asyncio
    async def test_filter_many_invalid_value(self, client: AsyncClient):
        response = await client.get("/api/Many", params={"one_id": "abc"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "BAD_REQUEST"

    @pytest.mark.asyncio
    async def test_filter_many_value_out_of_range(self, client: AsyncClient):
        response = await client.get("/api/Many", params={"one_id": str(10**20)})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "BAD_REQUEST"

    @pytest.mark.asyncio
    async def test_unknown_query_parameters_ignored(self, client: AsyncClient):
        one = await create_one(client)
        await create_many(client, one["one_id"])

        response = await client.get("/api/Many", params={"many_property01": "nope"})

        assert response.json()["data"]["total"] == 1

    @pytest.mark.asyncio
    async def test_delete_many(self, client: AsyncClient):
        one = await create_one(client)
        many = await create_many(client, one["one_id"])

        response = await client.delete(f"/api/Many/{many['many_id']}")

        assert response.status_code == 200
        assert (await client.get(f"/api/Many/{many['many_id']}")).status_code == 404
        assert (await client.get(f"/api/One/{one['one_id']}")).status_code == 200


class TestCascadeDelete:
    """Deleting a One removes its children."""

    @pytest.mark.asyncio
    async def test_delete_one_cascades(self, app, client: AsyncClient):
        one = await create_one(client)
        other = await create_one(client)
        many = await create_many(client, one["one_id"])
        kept = await create_many(client, other["one_id"])
        to_one_id = await create_to_one(app, one["one_id"])

        response = await client.delete(f"/api/One/{one['one_id']}")

        assert response.status_code == 200
        assert (await client.get(f"/api/One/{one['one_id']}")).status_code == 404
        assert (await client.get(f"/api/Many/{many['many_id']}")).status_code == 404
        assert (await client.get(f"/api/ToOne/{to_one_id}")).status_code == 404
        assert (await client.get(f"/api/Many/{kept['many_id']}")).status_code == 200


class TestToOneEndpoints:
    """Tests for the read-only /api/ToOne."""

    @pytest.mark.asyncio
    async def test_get_to_one(self, app, client: AsyncClient):
        one = await create_one(client, one_property01="Target")
        to_one_id = await create_to_one(app, one["one_id"], "Pointer")

        response = await client.get(f"/api/ToOne/{to_one_id}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["to_one_property01"] == "Pointer"
        assert data["one_property01"] == "Target"

    @pytest.mark.asyncio
    async def test_list_to_one(self, app, client: AsyncClient):
        one = await create_one(client)
        await create_to_one(app, one["one_id"], "x")
        await create_to_one(app, one["one_id"], "y")

        response = await client.get("/api/ToOne", params={"one_id": one["one_id"]})

        assert response.status_code == 200
        assert response.json()["data"]["total"] == 2

    @pytest.mark.asyncio
    async def test_to_one_has_no_write_routes(self, client: AsyncClient):
        response = await client.post("/api/ToOne", json={"to_one_property01": "x"})
        assert response.status_code == 405

        response = await client.delete("/api/ToOne/1")
        assert response.status_code == 405
