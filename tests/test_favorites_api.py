"""
API tests for saved properties.
"""

import uuid
from httpx import AsyncClient

from app.models.property import Property
from app.models.user import User
from tests.conftest import PropertyFactory, auth_headers


class TestFavorites:
    """Test the /api/favorites routes."""

    async def test_new_user_has_no_favorites(self, async_client: AsyncClient, tenant: User):
        response = await async_client.get(f"/api/favorites/{tenant.id}", headers=auth_headers(tenant))

        assert response.status_code == 200
        body = response.json()
        assert body["favorites"] == []
        assert body["properties"] == []
        assert body["pagination"]["total"] == 0

    async def test_add_is_idempotent(self, async_client: AsyncClient, tenant: User, sample_property: Property):
        url = f"/api/favorites/{tenant.id}/add"
        body = {"propertyId": str(sample_property.id)}

        first = await async_client.post(url, json=body, headers=auth_headers(tenant))
        second = await async_client.post(url, json=body, headers=auth_headers(tenant))

        assert first.status_code == 200
        assert second.json()["favorites"] == [str(sample_property.id)]

    async def test_add_unknown_property(self, async_client: AsyncClient, tenant: User):
        response = await async_client.post(
            f"/api/favorites/{tenant.id}/add", json={"propertyId": str(uuid.uuid4())}, headers=auth_headers(tenant)
        )
        assert response.status_code == 404

    async def test_get_populates_properties(
        self, async_client: AsyncClient, tenant: User, sample_property: Property
    ):
        await async_client.post(
            f"/api/favorites/{tenant.id}/add", json={"propertyId": str(sample_property.id)}, headers=auth_headers(tenant)
        )

        response = await async_client.get(f"/api/favorites/{tenant.id}", headers=auth_headers(tenant))

        body = response.json()
        assert body["favorites"] == [str(sample_property.id)]
        assert body["properties"][0]["title"] == sample_property.title

    async def test_favorites_show_on_profile(
        self, async_client: AsyncClient, tenant: User, sample_property: Property
    ):
        await async_client.post(
            f"/api/favorites/{tenant.id}/add", json={"propertyId": str(sample_property.id)}, headers=auth_headers(tenant)
        )

        me = await async_client.get("/api/auth/getuser", headers=auth_headers(tenant))
        assert me.json()["data"]["favorites"] == [str(sample_property.id)]

    async def test_replace_dedupes_and_keeps_order(
        self, async_client: AsyncClient, property_service, landlord: User, tenant: User
    ):
        first = await PropertyFactory.create_property(property_service, landlord, title="First")
        second = await PropertyFactory.create_property(property_service, landlord, title="Second")
        ids = [str(second.id), str(first.id), str(second.id)]

        response = await async_client.put(
            f"/api/favorites/{tenant.id}", json={"favorites": ids}, headers=auth_headers(tenant)
        )

        assert response.status_code == 200
        assert response.json()["favorites"] == [str(second.id), str(first.id)]

    async def test_replace_with_unknown_property_keeps_old_list(
        self, async_client: AsyncClient, tenant: User, sample_property: Property
    ):
        await async_client.put(
            f"/api/favorites/{tenant.id}", json={"favorites": [str(sample_property.id)]}, headers=auth_headers(tenant)
        )

        response = await async_client.put(
            f"/api/favorites/{tenant.id}", json={"favorites": [str(uuid.uuid4())]}, headers=auth_headers(tenant)
        )
        assert response.status_code == 400

        current = await async_client.get(f"/api/favorites/{tenant.id}", headers=auth_headers(tenant))
        assert current.json()["favorites"] == [str(sample_property.id)]

    async def test_replace_with_empty_list_clears(
        self, async_client: AsyncClient, tenant: User, sample_property: Property
    ):
        await async_client.post(
            f"/api/favorites/{tenant.id}/add", json={"propertyId": str(sample_property.id)}, headers=auth_headers(tenant)
        )

        response = await async_client.put(f"/api/favorites/{tenant.id}", json={"favorites": []}, headers=auth_headers(tenant))
        assert response.json()["favorites"] == []

    async def test_remove(self, async_client: AsyncClient, tenant: User, sample_property: Property):
        await async_client.post(
            f"/api/favorites/{tenant.id}/add", json={"propertyId": str(sample_property.id)}, headers=auth_headers(tenant)
        )

        response = await async_client.delete(
            f"/api/favorites/{tenant.id}/remove/{sample_property.id}", headers=auth_headers(tenant)
        )
        assert response.json()["favorites"] == []

        again = await async_client.delete(
            f"/api/favorites/{tenant.id}/remove/{sample_property.id}", headers=auth_headers(tenant)
        )
        assert again.status_code == 200

    async def test_other_users_favorites_are_forbidden(
        self, async_client: AsyncClient, tenant: User, landlord: User, sample_property: Property
    ):
        headers = auth_headers(landlord)

        read = await async_client.get(f"/api/favorites/{tenant.id}", headers=headers)
        add = await async_client.post(
            f"/api/favorites/{tenant.id}/add", json={"propertyId": str(sample_property.id)}, headers=headers
        )

        assert read.status_code == 403
        assert read.json()["error"]["message"] == "Unauthorized"
        assert add.status_code == 403

    async def test_pagination(self, async_client: AsyncClient, property_service, landlord: User, tenant: User):
        created = [
            await PropertyFactory.create_property(property_service, landlord, title=f"Listing {i}") for i in range(3)
        ]
        await async_client.put(
            f"/api/favorites/{tenant.id}",
            json={"favorites": [str(p.id) for p in created]},
            headers=auth_headers(tenant)
        )

        response = await async_client.get(
            f"/api/favorites/{tenant.id}", params={"page": 2, "limit": 2}, headers=auth_headers(tenant)
        )

        body = response.json()
        assert len(body["favorites"]) == 3
        assert [p["title"] for p in body["properties"]] == ["Listing 2"]
        assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}
