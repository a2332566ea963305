"""
End-to-end tests driving the API through the async client package.
"""

import pytest
from httpx import ASGITransport

from app.client import RishStayClient, ApiError, Session
from app.main import app
from tests.conftest import PropertyFactory, make_image_bytes


@pytest.fixture
async def client(async_client):
    """Client bound to the app in-process; async_client installs the test overrides."""
    async with RishStayClient(base_url="http://test", transport=ASGITransport(app=app)) as api:
        yield api


async def _landlord(client: RishStayClient) -> Session:
    return await client.create_user("Meera Landlord", "meera@example.com", "9111111111", "secret123", "landlord")


async def _tenant(client: RishStayClient) -> Session:
    return await client.create_user("Kabir Tenant", "kabir@example.com", "9222222222", "secret123", "tenant")


class TestClientFlows:
    """Test the main user journeys end to end."""

    async def test_signup_login_and_profile(self, client: RishStayClient):
        created = await _tenant(client)
        session = await client.login("kabir@example.com", "secret123")

        assert session.user_id == created.user_id
        assert session.headers() == {"auth-token": session.token}

        updated = await client.update_user(session, phone_no="9333333333")
        assert updated.phone_no == "9333333333"
        assert session.with_user(updated).user.phone_no == "9333333333"

    async def test_errors_raise_api_error(self, client: RishStayClient):
        with pytest.raises(ApiError) as exc_info:
            await client.login("nobody@example.com", "secret123")

        assert exc_info.value.status_code == 401
        assert exc_info.value.code == "INVALID_CREDENTIALS"

    async def test_validation_details_reach_caller(self, client: RishStayClient):
        landlord = await _landlord(client)
        data = PropertyFactory.create_property_data()
        del data["price"]

        with pytest.raises(ApiError) as exc_info:
            await client.create_property(landlord, data)

        assert exc_info.value.status_code == 400
        assert any(detail["field"] == "price" for detail in exc_info.value.details)

    async def test_listing_lifecycle(self, client: RishStayClient):
        landlord = await _landlord(client)
        listing = await client.create_property(landlord, PropertyFactory.create_property_data())

        found, pagination = await client.list_properties(city="bengaluru", available_only=True)
        assert [p.id for p in found] == [listing.id]
        assert pagination.total == 1

        with_images = await client.replace_images(
            landlord, listing.id, [("front.png", make_image_bytes(), "image/png")]
        )
        public_id = with_images.images[0].public_id
        without = await client.delete_image(landlord, listing.id, public_id)
        assert without.images == []

        booked = await client.set_room_status(landlord, listing.id, 0, "booked")
        assert booked.rooms[0].status.value == "booked"

        hidden = await client.toggle_availability(landlord, listing.id)
        assert hidden.availability.is_available is False
        found, _ = await client.list_properties(available_only=True)
        assert found == []

        await client.delete_property(landlord, listing.id)
        with pytest.raises(ApiError) as exc_info:
            await client.get_property(listing.id)
        assert exc_info.value.status_code == 404

    async def test_inquiry_and_reply(self, client: RishStayClient):
        landlord = await _landlord(client)
        tenant = await _tenant(client)
        listing = await client.create_property(landlord, PropertyFactory.create_property_data())

        inquiry = await client.send_message(tenant, listing.id, "Visit", "Can I see it Sunday?", "viewing")
        reply = await client.reply(landlord, inquiry.id, "Sunday 10am works")

        assert reply.reply_to_id == inquiry.id
        thread = await client.property_messages(tenant, listing.id)
        assert {m.id for m in thread} == {inquiry.id, reply.id}
        statuses = {m.id: m.status.value for m in await client.my_messages(landlord)}
        assert statuses[inquiry.id] == "replied"

    async def test_favorites_and_reviews(self, client: RishStayClient):
        landlord = await _landlord(client)
        tenant = await _tenant(client)
        listing = await client.create_property(landlord, PropertyFactory.create_property_data())

        assert await client.add_favorite(tenant, listing.id) == [listing.id]
        ids, properties, pagination = await client.get_favorites(tenant)
        assert ids == [listing.id]
        assert properties[0].title == listing.title
        assert pagination.total == 1
        assert await client.remove_favorite(tenant, listing.id) == []

        review = await client.create_review(tenant, "Easy to find a place")
        assert [r.id for r in await client.list_reviews(limit=1)] == [review.id]
        await client.delete_review(tenant, review.id)
        assert await client.list_reviews() == []
