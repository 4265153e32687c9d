"""
API tests for property browsing, listing management and image upload.
"""

import pytest
from httpx import AsyncClient

from realty.models.user import User
from realty.models.property import Property, PropertyStatus
from tests.conftest import PropertyFactory, auth_headers, make_image_bytes, assert_error_envelope


class TestBrowseProperties:

    async def test_public_list_shows_only_published(
        self, async_client: AsyncClient, test_property: Property, pending_property: Property
    ):
        response = await async_client.get("/api/properties")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["properties"][0]["id"] == str(test_property.id)
        assert body["page"] == 1
        assert body["total_pages"] == 1
        assert body["has_next"] is False
        assert body["has_previous"] is False

    async def test_pagination_metadata(self, async_client: AsyncClient, property_repository, test_seller: User):
        for i in range(5):
            await PropertyFactory.create_property(property_repository, seller_id=test_seller.id, title=f"Home {i}")

        response = await async_client.get("/api/properties", params={"page": 2, "page_size": 2})

        body = response.json()
        assert body["total"] == 5
        assert len(body["properties"]) == 2
        assert body["total_pages"] == 3
        assert body["has_next"] is True
        assert body["has_previous"] is True

    async def test_filters(self, async_client: AsyncClient, property_repository, test_seller: User):
        await PropertyFactory.create_property(property_repository, seller_id=test_seller.id, city="Porto", rooms=4)
        await PropertyFactory.create_property(property_repository, seller_id=test_seller.id, city="Faro", rooms=1)

        response = await async_client.get("/api/properties", params={"city": "porto", "min_rooms": 2})

        body = response.json()
        assert body["total"] == 1
        assert body["properties"][0]["city"] == "Porto"

    async def test_status_filter_requires_admin(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.get(
            "/api/properties", params={"status": "pending"}, headers=auth_headers(test_seller)
        )
        assert response.status_code == 403
        assert_error_envelope(response.json(), "FORBIDDEN")

    async def test_admin_status_filter(
        self, async_client: AsyncClient, test_admin: User, pending_property: Property
    ):
        response = await async_client.get(
            "/api/properties", params={"status": "pending"}, headers=auth_headers(test_admin)
        )
        assert response.status_code == 200
        assert [p["id"] for p in response.json()["properties"]] == [str(pending_property.id)]

    async def test_invalid_page_size(self, async_client: AsyncClient):
        response = await async_client.get("/api/properties", params={"page_size": 1000})
        assert response.status_code == 422

    async def test_get_published_property_includes_seller(
        self, async_client: AsyncClient, test_property: Property, test_seller: User
    ):
        response = await async_client.get(f"/api/properties/{test_property.id}")

        assert response.status_code == 200
        body = response.json()
        assert body["ref_number"] == test_property.ref_number
        assert body["seller"]["email"] == test_seller.email

    async def test_pending_property_hidden_from_public(
        self, async_client: AsyncClient, pending_property: Property
    ):
        response = await async_client.get(f"/api/properties/{pending_property.id}")
        assert response.status_code == 404
        assert_error_envelope(response.json(), "NOT_FOUND")

    async def test_pending_property_visible_to_owner(
        self, async_client: AsyncClient, pending_property: Property, test_seller: User
    ):
        response = await async_client.get(
            f"/api/properties/{pending_property.id}", headers=auth_headers(test_seller)
        )
        assert response.status_code == 200
        assert response.json()["status"] == "pending"

    async def test_malformed_id(self, async_client: AsyncClient):
        response = await async_client.get("/api/properties/not-a-uuid")
        assert response.status_code == 422


class TestManageProperties:

    async def test_create_requires_auth(self, async_client: AsyncClient):
        response = await async_client.post("/api/properties", json={"title": "Anon"})
        assert response.status_code == 401
        assert_error_envelope(response.json(), "UNAUTHORIZED")

    async def test_seller_creates_pending_listing(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.post(
            "/api/properties",
            json={
                "title": "Riverside flat",
                "price": 210000,
                "city": "Porto",
                "amenities": "wifi, balcony",
                "status": "active",
            },
            headers=auth_headers(test_seller)
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["seller_id"] == str(test_seller.id)
        assert body["amenities"] == ["wifi", "balcony"]
        assert body["ref_number"].startswith("PROP-")

    async def test_inactive_seller_cannot_create(self, async_client: AsyncClient, inactive_seller: User):
        response = await async_client.post(
            "/api/properties", json={"title": "Blocked"}, headers=auth_headers(inactive_seller)
        )
        assert response.status_code == 403
        assert response.json()["message"] == "Seller is not activated"

    async def test_missing_title(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.post(
            "/api/properties", json={"price": 100}, headers=auth_headers(test_seller)
        )
        assert response.status_code == 422
        assert_error_envelope(response.json(), "VALIDATION_ERROR")

    async def test_admin_creates_active_listing(
        self, async_client: AsyncClient, test_admin: User, test_seller: User
    ):
        response = await async_client.post(
            "/api/properties",
            json={"title": "Admin pick", "seller_id": str(test_seller.id)},
            headers=auth_headers(test_admin)
        )
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "active"
        assert body["published_at"] is not None

    async def test_owner_updates_listing(
        self, async_client: AsyncClient, test_property: Property, test_seller: User
    ):
        response = await async_client.put(
            f"/api/properties/{test_property.id}",
            json={"title": "Updated title", "status": "archived"},
            headers=auth_headers(test_seller)
        )
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Updated title"
        assert body["status"] == "active"

    async def test_other_seller_cannot_update(
        self, async_client: AsyncClient, test_property: Property, other_seller: User
    ):
        response = await async_client.put(
            f"/api/properties/{test_property.id}",
            json={"title": "Hijack"},
            headers=auth_headers(other_seller)
        )
        assert response.status_code == 403

    async def test_owner_deletes_listing(
        self, async_client: AsyncClient, test_property: Property, test_seller: User
    ):
        response = await async_client.delete(
            f"/api/properties/{test_property.id}", headers=auth_headers(test_seller)
        )
        assert response.status_code == 204

        response = await async_client.get(f"/api/properties/{test_property.id}")
        assert response.status_code == 404


class TestPropertyImages:

    async def test_upload_images(
        self, async_client: AsyncClient, test_property: Property, test_seller: User, upload_dir
    ):
        files = [
            ("files", ("front.png", make_image_bytes(), "image/png")),
            ("files", ("garden.jpg", make_image_bytes("JPEG"), "image/jpeg")),
        ]
        response = await async_client.post(
            f"/api/properties/{test_property.id}/images", files=files, headers=auth_headers(test_seller)
        )

        assert response.status_code == 200
        images = response.json()["images"]
        assert len(images) == 2
        assert all(url.startswith(f"/uploads/properties/{test_property.id}/") for url in images)
        assert len(list((upload_dir / "properties" / str(test_property.id)).iterdir())) == 2

    async def test_upload_rejects_wrong_type(
        self, async_client: AsyncClient, test_property: Property, test_seller: User
    ):
        files = [("files", ("notes.txt", b"hello", "text/plain"))]
        response = await async_client.post(
            f"/api/properties/{test_property.id}/images", files=files, headers=auth_headers(test_seller)
        )
        assert response.status_code == 400
        assert_error_envelope(response.json(), "BAD_REQUEST")

    async def test_upload_by_stranger_forbidden(
        self, async_client: AsyncClient, test_property: Property, other_seller: User
    ):
        files = [("files", ("front.png", make_image_bytes(), "image/png"))]
        response = await async_client.post(
            f"/api/properties/{test_property.id}/images", files=files, headers=auth_headers(other_seller)
        )
        assert response.status_code == 403

    async def test_image_urls_are_not_writable(
        self, async_client: AsyncClient, test_property: Property, test_seller: User,
        other_seller: User, upload_dir
    ):
        files = [("files", ("front.png", make_image_bytes(), "image/png"))]
        response = await async_client.post(
            f"/api/properties/{test_property.id}/images", files=files, headers=auth_headers(test_seller)
        )
        own_url = response.json()["images"][0]
        own_path = upload_dir / own_url.removeprefix("/uploads/")

        response = await async_client.post(
            "/api/properties", json={"title": "Mine", "images": [own_url]}, headers=auth_headers(other_seller)
        )
        assert response.status_code == 201
        assert response.json()["images"] == []
        other_id = response.json()["id"]

        response = await async_client.put(
            f"/api/properties/{other_id}", json={"images": [own_url]}, headers=auth_headers(other_seller)
        )
        assert response.json()["images"] == []

        response = await async_client.delete(f"/api/properties/{other_id}", headers=auth_headers(other_seller))
        assert response.status_code == 204
        assert own_path.exists()
