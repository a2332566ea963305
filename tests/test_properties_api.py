"""
API tests for property listings: creation, search, ownership, availability and rooms.
"""

import pytest
import uuid
from httpx import AsyncClient
from sqlalchemy import select, func

from app.models.property import Property
from app.models.user import User
from tests.conftest import UserFactory, PropertyFactory, auth_headers


async def _property_count(session_factory) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count(Property.id)))).scalar_one()


class TestCreateProperty:
    """Test POST /api/property/create."""

    async def test_landlord_creates_listing(self, async_client: AsyncClient, landlord: User):
        payload = PropertyFactory.create_property_data()

        response = await async_client.post("/api/property/create", json=payload, headers=auth_headers(landlord))

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        data = body["data"]
        assert data["title"] == payload["title"]
        assert data["price"] == 15000
        assert data["location"] == payload["location"]
        assert data["propertyType"] == "apartment"
        assert data["guestType"] == "Family"
        assert data["landlordId"] == str(landlord.id)
        assert data["images"] == []
        assert data["availability"]["isAvailable"] is True
        assert [room["roomName"] for room in data["rooms"]] == ["Master", "Second"]
        assert all(room["status"] == "available" for room in data["rooms"])

    async def test_created_listing_reads_back_unchanged(self, async_client: AsyncClient, landlord: User):
        payload = PropertyFactory.create_property_data(amenities=["WiFi", "Gym"], bedrooms=3)
        created = await async_client.post("/api/property/create", json=payload, headers=auth_headers(landlord))
        property_id = created.json()["data"]["id"]

        response = await async_client.get(f"/api/property/{property_id}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == payload["title"]
        assert data["amenities"] == ["WiFi", "Gym"]
        assert data["bedrooms"] == 3
        assert data["rules"] == ["No smoking"]
        assert data["landlord"]["name"] == landlord.name
        assert data["landlord"]["email"] == landlord.email
        assert data["landlord"]["phoneNo"] == landlord.phone_no

    async def test_cents_price_reads_back_exactly(self, async_client: AsyncClient, landlord: User):
        payload = PropertyFactory.create_property_data(price=1234.56)
        created = await async_client.post("/api/property/create", json=payload, headers=auth_headers(landlord))

        response = await async_client.get(f"/api/property/{created.json()['data']['id']}")

        assert response.json()["data"]["price"] == 1234.56

    async def test_sub_cent_price_is_rejected(self, async_client: AsyncClient, landlord: User, session_factory):
        payload = PropertyFactory.create_property_data(price=1234.567)

        response = await async_client.post("/api/property/create", json=payload, headers=auth_headers(landlord))

        assert response.status_code == 400
        assert response.json()["error"]["details"][0]["field"] == "price"
        assert await _property_count(session_factory) == 0

    async def test_tenant_cannot_create(self, async_client: AsyncClient, tenant: User, session_factory):
        response = await async_client.post(
            "/api/property/create", json=PropertyFactory.create_property_data(), headers=auth_headers(tenant)
        )

        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Only landlords can create properties"
        assert await _property_count(session_factory) == 0

    async def test_requires_token(self, async_client: AsyncClient):
        response = await async_client.post("/api/property/create", json=PropertyFactory.create_property_data())
        assert response.status_code == 401

    async def test_missing_required_field_is_rejected(
        self, async_client: AsyncClient, landlord: User, session_factory
    ):
        payload = PropertyFactory.create_property_data()
        del payload["title"]

        response = await async_client.post("/api/property/create", json=payload, headers=auth_headers(landlord))

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert any(detail["field"] == "title" for detail in error["details"])
        assert await _property_count(session_factory) == 0

    @pytest.mark.parametrize("overrides", [
        {"price": -1},
        {"propertyType": "villa"},
        {"guestType": "Everyone"},
        {"maxGuests": 0},
        {"location": {"address": "1 Street", "city": "Pune", "state": "MH"}},
        {"availability": {"availableFrom": "2030-02-01T00:00:00Z", "availableTo": "2030-01-01T00:00:00Z"}},
        {"rooms": [{"roomName": "Solo", "rent": 100, "status": "reserved"}]},
        {"price": 1234.567},
    ])
    async def test_invalid_values_are_rejected(self, async_client: AsyncClient, landlord: User, overrides):
        payload = PropertyFactory.create_property_data(**overrides)

        response = await async_client.post("/api/property/create", json=payload, headers=auth_headers(landlord))

        assert response.status_code == 400
        assert response.json()["success"] is False

    async def test_nested_field_path_is_reported(self, async_client: AsyncClient, landlord: User):
        payload = PropertyFactory.create_property_data(
            location={"address": "1 Street", "city": "Pune", "state": "MH"}
        )

        response = await async_client.post("/api/property/create", json=payload, headers=auth_headers(landlord))

        fields = [detail["field"] for detail in response.json()["error"]["details"]]
        assert "location.zipCode" in fields


class TestListProperties:
    """Test GET /api/property/all."""

    async def test_lists_newest_first_without_auth(
        self, async_client: AsyncClient, property_service, landlord: User
    ):
        first = await PropertyFactory.create_property(property_service, landlord, title="First listing")
        second = await PropertyFactory.create_property(property_service, landlord, title="Second listing")

        response = await async_client.get("/api/property/all")

        assert response.status_code == 200
        body = response.json()
        assert [item["id"] for item in body["data"]] == [str(second.id), str(first.id)]
        assert body["pagination"] == {"page": 1, "limit": 20, "total": 2, "pages": 1}

    async def test_price_above_every_listing_returns_empty(
        self, async_client: AsyncClient, sample_property: Property
    ):
        response = await async_client.get("/api/property/all", params={"minPrice": 100000})

        assert response.status_code == 200
        assert response.json()["data"] == []
        assert response.json()["pagination"]["total"] == 0

    async def test_filters_combine(self, async_client: AsyncClient, property_service, landlord: User):
        await PropertyFactory.create_property(
            property_service, landlord,
            title="Studio in Pune",
            propertyType="studio",
            price=9000,
            bedrooms=1,
            guestType="Bachelors",
            location={"address": "4 FC Road", "city": "Pune", "state": "Maharashtra", "zipCode": "411004"}
        )
        await PropertyFactory.create_property(property_service, landlord, title="Family flat", price=25000)

        response = await async_client.get(
            "/api/property/all",
            params={"city": "pun", "propertyType": "studio", "maxPrice": 10000, "guestType": "Bachelors"}
        )

        titles = [item["title"] for item in response.json()["data"]]
        assert titles == ["Studio in Pune"]

    async def test_bedrooms_and_guests_are_minimums(
        self, async_client: AsyncClient, property_service, landlord: User
    ):
        await PropertyFactory.create_property(property_service, landlord, title="Small", bedrooms=1, maxGuests=2)
        await PropertyFactory.create_property(property_service, landlord, title="Large", bedrooms=4, maxGuests=8)

        response = await async_client.get("/api/property/all", params={"bedrooms": 2, "guests": 5})

        assert [item["title"] for item in response.json()["data"]] == ["Large"]

    async def test_address_search_is_case_insensitive(
        self, async_client: AsyncClient, sample_property: Property
    ):
        response = await async_client.get("/api/property/all", params={"address": "mg ROAD"})
        assert len(response.json()["data"]) == 1

    async def test_pagination(self, async_client: AsyncClient, property_service, landlord: User):
        for index in range(5):
            await PropertyFactory.create_property(property_service, landlord, title=f"Listing {index}")

        response = await async_client.get("/api/property/all", params={"page": 2, "limit": 2})

        body = response.json()
        assert len(body["data"]) == 2
        assert body["pagination"] == {"page": 2, "limit": 2, "total": 5, "pages": 3}

    async def test_min_price_above_max_price_is_rejected(self, async_client: AsyncClient):
        response = await async_client.get("/api/property/all", params={"minPrice": 500, "maxPrice": 100})
        assert response.status_code == 400

    async def test_limit_is_capped(self, async_client: AsyncClient):
        response = await async_client.get("/api/property/all", params={"limit": 1000})
        assert response.status_code == 400


class TestGetProperty:
    """Test single listing reads."""

    async def test_unknown_id(self, async_client: AsyncClient):
        response = await async_client.get(f"/api/property/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    async def test_malformed_id(self, async_client: AsyncClient):
        response = await async_client.get("/api/property/not-a-uuid")
        assert response.status_code == 400

    async def test_my_properties_only_lists_own(
        self, async_client: AsyncClient, property_service, landlord: User, other_landlord: User
    ):
        mine = await PropertyFactory.create_property(property_service, landlord)
        await PropertyFactory.create_property(property_service, other_landlord)

        response = await async_client.get("/api/property/myproperties", headers=auth_headers(landlord))

        assert response.status_code == 200
        assert [item["id"] for item in response.json()["data"]] == [str(mine.id)]


class TestUpdateProperty:
    """Test PUT /api/property/update/{id}."""

    async def test_owner_updates_fields(self, async_client: AsyncClient, landlord: User, sample_property: Property):
        response = await async_client.put(
            f"/api/property/update/{sample_property.id}",
            json={"title": "Renovated 2BHK", "price": 17500, "amenities": ["WiFi", "Lift"]},
            headers=auth_headers(landlord)
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Renovated 2BHK"
        assert data["price"] == 17500
        assert data["amenities"] == ["WiFi", "Lift"]
        assert data["description"] == sample_property.description

    async def test_update_location_and_availability(
        self, async_client: AsyncClient, landlord: User, sample_property: Property
    ):
        location = {"address": "7 Park Street", "city": "Kolkata", "state": "West Bengal", "zipCode": "700016"}

        response = await async_client.put(
            f"/api/property/update/{sample_property.id}",
            json={"location": location, "availability": {"isAvailable": False}},
            headers=auth_headers(landlord)
        )

        data = response.json()["data"]
        assert data["location"] == location
        assert data["availability"]["isAvailable"] is False

    async def test_partial_availability_cannot_invert_window(
        self, async_client: AsyncClient, landlord: User, sample_property: Property
    ):
        url = f"/api/property/update/{sample_property.id}"
        window = {"availableFrom": "2030-02-01T00:00:00Z", "availableTo": "2030-03-01T00:00:00Z"}
        first = await async_client.put(url, json={"availability": window}, headers=auth_headers(landlord))
        assert first.status_code == 200

        response = await async_client.put(
            url, json={"availability": {"availableTo": "2030-01-15T00:00:00Z"}}, headers=auth_headers(landlord)
        )

        assert response.status_code == 400
        assert response.json()["error"]["details"][0]["field"] == "availability"
        current = await async_client.get(f"/api/property/{sample_property.id}")
        assert current.json()["data"]["availability"]["availableTo"].startswith("2030-03-01")

    async def test_non_owner_is_forbidden_and_listing_unchanged(
        self, async_client: AsyncClient, other_landlord: User, sample_property: Property
    ):
        response = await async_client.put(
            f"/api/property/update/{sample_property.id}",
            json={"title": "Hijacked"},
            headers=auth_headers(other_landlord)
        )

        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Not authorized to modify this property"

        unchanged = await async_client.get(f"/api/property/{sample_property.id}")
        assert unchanged.json()["data"]["title"] == sample_property.title

    @pytest.mark.parametrize("body", [
        {"landlordId": str(uuid.uuid4())},
        {"images": []},
        {"title": None},
        {"price": "cheap"},
        {"price": 99.999},
        {"location": {"city": "Pune"}},
    ])
    async def test_rejects_unknown_null_and_malformed_fields(
        self, async_client: AsyncClient, landlord: User, sample_property: Property, body
    ):
        response = await async_client.put(
            f"/api/property/update/{sample_property.id}", json=body, headers=auth_headers(landlord)
        )
        assert response.status_code == 400

    async def test_unknown_property(self, async_client: AsyncClient, landlord: User):
        response = await async_client.put(
            f"/api/property/update/{uuid.uuid4()}", json={"title": "x"}, headers=auth_headers(landlord)
        )
        assert response.status_code == 404


class TestDeleteProperty:
    """Test DELETE /api/property/delete/{id}."""

    async def test_only_owner_can_delete(
        self, async_client: AsyncClient, landlord: User, other_landlord: User, sample_property: Property
    ):
        forbidden = await async_client.delete(
            f"/api/property/delete/{sample_property.id}", headers=auth_headers(other_landlord)
        )
        assert forbidden.status_code == 403

        deleted = await async_client.delete(
            f"/api/property/delete/{sample_property.id}", headers=auth_headers(landlord)
        )
        assert deleted.status_code == 200
        assert deleted.json()["success"] is True

        gone = await async_client.get(f"/api/property/{sample_property.id}")
        assert gone.status_code == 404

    async def test_delete_clears_favorites_and_messages(
        self, async_client: AsyncClient, landlord: User, tenant: User, sample_property: Property
    ):
        await async_client.post(
            f"/api/favorites/{tenant.id}/add", json={"propertyId": str(sample_property.id)}, headers=auth_headers(tenant)
        )
        await async_client.post(
            "/api/message/send",
            json={
                "propertyId": str(sample_property.id),
                "subject": "Visit",
                "message": "Can I visit this weekend?",
                "phone": "9876543210"
            },
            headers=auth_headers(tenant)
        )

        await async_client.delete(f"/api/property/delete/{sample_property.id}", headers=auth_headers(landlord))

        favorites = await async_client.get(f"/api/favorites/{tenant.id}", headers=auth_headers(tenant))
        assert favorites.json()["favorites"] == []
        messages = await async_client.get("/api/message/my-messages", headers=auth_headers(tenant))
        assert messages.json()["data"] == []


class TestToggleAvailability:
    """Test PUT /api/property/toggle-availability/{id}."""

    async def test_toggle_twice_restores_state(
        self, async_client: AsyncClient, landlord: User, sample_property: Property
    ):
        url = f"/api/property/toggle-availability/{sample_property.id}"

        first = await async_client.put(url, headers=auth_headers(landlord))
        assert first.json()["data"]["availability"]["isAvailable"] is False

        second = await async_client.put(url, headers=auth_headers(landlord))
        assert second.json()["data"]["availability"]["isAvailable"] is True

    async def test_available_only_filter_hides_toggled_listing(
        self, async_client: AsyncClient, landlord: User, sample_property: Property
    ):
        await async_client.put(
            f"/api/property/toggle-availability/{sample_property.id}", headers=auth_headers(landlord)
        )

        response = await async_client.get("/api/property/all", params={"availableOnly": "true"})
        assert response.json()["data"] == []

    async def test_non_owner_cannot_toggle(
        self, async_client: AsyncClient, tenant: User, sample_property: Property
    ):
        response = await async_client.put(
            f"/api/property/toggle-availability/{sample_property.id}", headers=auth_headers(tenant)
        )
        assert response.status_code == 403


class TestRoomStatus:
    """Test PUT /api/property/{id}/rooms/{index}/status."""

    async def test_mark_room_booked(self, async_client: AsyncClient, landlord: User, sample_property: Property):
        response = await async_client.put(
            f"/api/property/{sample_property.id}/rooms/1/status",
            json={"status": "booked"},
            headers=auth_headers(landlord)
        )

        assert response.status_code == 200
        rooms = response.json()["data"]["rooms"]
        assert [room["status"] for room in rooms] == ["available", "booked"]

    @pytest.mark.parametrize("index", [2, -1])
    async def test_index_out_of_range(
        self, async_client: AsyncClient, landlord: User, sample_property: Property, index
    ):
        response = await async_client.put(
            f"/api/property/{sample_property.id}/rooms/{index}/status",
            json={"status": "booked"},
            headers=auth_headers(landlord)
        )
        assert response.status_code == 404

    async def test_invalid_status(self, async_client: AsyncClient, landlord: User, sample_property: Property):
        response = await async_client.put(
            f"/api/property/{sample_property.id}/rooms/0/status",
            json={"status": "reserved"},
            headers=auth_headers(landlord)
        )
        assert response.status_code == 400


class TestSimilarProperties:
    """Test GET /api/property/{id}/similar."""

    async def test_ranks_same_city_close_price_first(
        self, async_client: AsyncClient, property_service, landlord: User, sample_property: Property
    ):
        elsewhere = {"address": "1 Anna Salai", "city": "Chennai", "state": "Tamil Nadu", "zipCode": "600002"}
        best = await PropertyFactory.create_property(property_service, landlord, title="Same city, close price")
        await PropertyFactory.create_property(
            property_service, landlord, title="Far away", location=elsewhere, price=16000
        )
        await PropertyFactory.create_property(
            property_service, landlord, title="Unrelated", location=elsewhere, price=90000, propertyType="studio"
        )

        response = await async_client.get(f"/api/property/{sample_property.id}/similar")

        assert response.status_code == 200
        titles = [item["title"] for item in response.json()["data"]]
        assert titles[0] == best.title
        assert "Unrelated" not in titles
        assert str(sample_property.id) not in [item["id"] for item in response.json()["data"]]

    async def test_unknown_property(self, async_client: AsyncClient):
        response = await async_client.get(f"/api/property/{uuid.uuid4()}/similar")
        assert response.status_code == 404
