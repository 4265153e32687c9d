"""
API tests for seller self-service, authentication and the admin console.
"""

import pytest
from httpx import AsyncClient

from realty.models.user import User
from realty.models.property import Property
from tests.conftest import UserFactory, auth_headers, assert_error_envelope


class TestSellerAccount:

    async def test_register_then_login_inactive(self, async_client: AsyncClient):
        response = await async_client.post("/api/sellers/register", json={
            "name": "Jane Seller",
            "email": "jane@example.com",
            "password": "secret1",
            "confirm_password": "secret1",
            "company": "Jane Homes",
        })
        assert response.status_code == 201

        response = await async_client.post(
            "/api/sellers/login", json={"email": "jane@example.com", "password": "secret1"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "seller"
        assert body["is_active"] is False
        assert body["access_token"] and body["refresh_token"]
        assert body["user"]["company"] == "Jane Homes"

    async def test_register_missing_fields(self, async_client: AsyncClient):
        response = await async_client.post("/api/sellers/register", json={"email": "jane@example.com"})
        assert response.status_code == 400
        assert response.json()["message"] == "Name, email, password and confirm password are required"

    async def test_register_password_mismatch(self, async_client: AsyncClient):
        response = await async_client.post("/api/sellers/register", json={
            "name": "Jane", "email": "jane@example.com", "password": "secret1", "confirm_password": "secret2"
        })
        assert response.status_code == 400
        assert response.json()["message"] == "Passwords do not match"

    async def test_login_wrong_password(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.post(
            "/api/sellers/login", json={"email": "seller@test.com", "password": "wrong-one"}
        )
        assert response.status_code == 401
        assert_error_envelope(response.json(), "UNAUTHORIZED")

    async def test_admin_cannot_use_seller_login(self, async_client: AsyncClient, test_admin: User):
        response = await async_client.post(
            "/api/sellers/login", json={"email": "admin@test.com", "password": "testpassword123"}
        )
        assert response.status_code == 401

    async def test_deleted_seller_login_forbidden(self, async_client: AsyncClient, user_repository):
        await UserFactory.create_user(user_repository, email="gone@test.com", is_deleted=True)
        response = await async_client.post(
            "/api/sellers/login", json={"email": "gone@test.com", "password": "testpassword123"}
        )
        assert response.status_code == 403
        assert response.json()["message"] == "Seller account deleted"

    async def test_profile_roundtrip(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.patch(
            "/api/sellers/me", json={"phone": "+351 900 000 000", "city": "Braga"},
            headers=auth_headers(test_seller)
        )
        assert response.status_code == 200

        response = await async_client.get("/api/sellers/me", headers=auth_headers(test_seller))
        body = response.json()
        assert body["phone"] == "+351 900 000 000"
        assert body["city"] == "Braga"
        assert "hashed_password" not in body

    async def test_admin_has_no_seller_profile(self, async_client: AsyncClient, test_admin: User):
        response = await async_client.get("/api/sellers/me", headers=auth_headers(test_admin))
        assert response.status_code == 403

    async def test_my_properties_includes_pending(
        self, async_client: AsyncClient, test_seller: User, test_property: Property, pending_property: Property
    ):
        response = await async_client.get("/api/sellers/me/properties", headers=auth_headers(test_seller))
        assert response.status_code == 200
        assert {p["id"] for p in response.json()} == {str(test_property.id), str(pending_property.id)}


class TestAuthEndpoints:

    async def test_me(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.get("/api/auth/me", headers=auth_headers(test_seller))
        assert response.status_code == 200
        assert response.json() == {
            "id": str(test_seller.id),
            "role": "seller",
            "name": "Test Seller",
            "email": "seller@test.com",
            "is_active": True,
        }

    async def test_me_without_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/auth/me")
        assert response.status_code == 401

    async def test_me_with_garbage_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401

    async def test_refresh(self, async_client: AsyncClient, test_seller: User):
        login = await async_client.post(
            "/api/sellers/login", json={"email": "seller@test.com", "password": "testpassword123"}
        )
        response = await async_client.post(
            "/api/auth/refresh", json={"refresh_token": login.json()["refresh_token"]}
        )
        assert response.status_code == 200
        token = response.json()["access_token"]

        me = await async_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["id"] == str(test_seller.id)


class TestAdminConsole:

    async def test_admin_login(self, async_client: AsyncClient, test_admin: User):
        response = await async_client.post(
            "/api/admin/login", json={"email": "admin@test.com", "password": "testpassword123"}
        )
        assert response.status_code == 200
        assert response.json()["role"] == "admin"

    async def test_seller_cannot_use_admin_routes(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.get("/api/admin/sellers", headers=auth_headers(test_seller))
        assert response.status_code == 403
        assert_error_envelope(response.json(), "FORBIDDEN")

    async def test_seller_lifecycle(self, async_client: AsyncClient, test_admin: User):
        headers = auth_headers(test_admin)

        response = await async_client.post("/api/admin/sellers", json={
            "name": "Made By Admin", "email": "made@test.com", "password": "secret1", "is_active": False
        }, headers=headers)
        assert response.status_code == 201
        seller_id = response.json()["id"]
        assert response.json()["is_active"] is False

        response = await async_client.put(
            f"/api/admin/sellers/{seller_id}/activate", json={"activate": True}, headers=headers
        )
        assert response.json()["is_active"] is True

        response = await async_client.put(
            f"/api/admin/sellers/{seller_id}", json={"company": "Made Ltd"}, headers=headers
        )
        assert response.json()["company"] == "Made Ltd"

        response = await async_client.get("/api/admin/sellers", headers=headers)
        assert [s["id"] for s in response.json()["users"]] == [seller_id]

    async def test_soft_delete_and_restore_seller(
        self, async_client: AsyncClient, test_admin: User, test_seller: User, test_property: Property
    ):
        headers = auth_headers(test_admin)

        response = await async_client.delete(f"/api/admin/sellers/{test_seller.id}", headers=headers)
        assert response.status_code == 200
        assert response.json() == {"success": True, "affected": 1}

        deleted = await async_client.get("/api/admin/sellers/deleted", headers=headers)
        assert [s["id"] for s in deleted.json()["users"]] == [str(test_seller.id)]

        public = await async_client.get(f"/api/properties/{test_property.id}")
        assert public.status_code == 404

        response = await async_client.put(f"/api/admin/sellers/{test_seller.id}/restore", headers=headers)
        assert response.status_code == 200
        assert response.json()["is_deleted"] is False

        public = await async_client.get(f"/api/properties/{test_property.id}")
        assert public.status_code == 200

    async def test_restore_live_seller(self, async_client: AsyncClient, test_admin: User, test_seller: User):
        response = await async_client.put(
            f"/api/admin/sellers/{test_seller.id}/restore", headers=auth_headers(test_admin)
        )
        assert response.status_code == 400

    async def test_hard_delete_seller(
        self, async_client: AsyncClient, test_admin: User, test_seller: User, test_property: Property
    ):
        headers = auth_headers(test_admin)
        response = await async_client.delete(
            f"/api/admin/sellers/{test_seller.id}", params={"hard": "true"}, headers=headers
        )
        assert response.json()["affected"] == 1

        response = await async_client.get(f"/api/admin/sellers/{test_seller.id}", headers=headers)
        assert response.status_code == 404

    async def test_bulk_listing_actions(
        self, async_client: AsyncClient, test_admin: User, test_seller: User,
        test_property: Property, pending_property: Property
    ):
        headers = auth_headers(test_admin)
        base = f"/api/admin/sellers/{test_seller.id}/properties"

        response = await async_client.put(f"{base}/soft-delete-all", headers=headers)
        assert response.json()["affected"] == 2

        listing = await async_client.get(base, headers=headers)
        assert all(p["owner_removed"] for p in listing.json())

        response = await async_client.put(f"{base}/restore-all", headers=headers)
        assert response.json()["affected"] == 2

        listing = await async_client.get(base, headers=headers)
        statuses = {p["id"]: p["status"] for p in listing.json()}
        assert statuses[str(test_property.id)] == "active"
        assert statuses[str(pending_property.id)] == "pending"

    async def test_moderation_queue(
        self, async_client: AsyncClient, test_admin: User, pending_property: Property
    ):
        headers = auth_headers(test_admin)

        queue = await async_client.get("/api/admin/properties/pending", headers=headers)
        assert [p["id"] for p in queue.json()] == [str(pending_property.id)]

        response = await async_client.put(
            f"/api/admin/properties/{pending_property.id}/approve", headers=headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "active"

        queue = await async_client.get("/api/admin/properties/pending", headers=headers)
        assert queue.json() == []

    async def test_reject_requires_reason(
        self, async_client: AsyncClient, test_admin: User, pending_property: Property
    ):
        headers = auth_headers(test_admin)
        url = f"/api/admin/properties/{pending_property.id}/reject"

        response = await async_client.put(url, json={"reason": ""}, headers=headers)
        assert response.status_code == 400

        response = await async_client.put(url, json={"reason": "Incomplete address"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["status"] == "rejected"
        assert response.json()["rejection_reason"] == "Incomplete address"

    async def test_single_listing_soft_delete_and_restore(
        self, async_client: AsyncClient, test_admin: User, test_property: Property
    ):
        headers = auth_headers(test_admin)

        response = await async_client.put(
            f"/api/admin/properties/{test_property.id}/soft-delete", headers=headers
        )
        assert response.json()["status"] == "inactive"

        response = await async_client.put(
            f"/api/admin/properties/{test_property.id}/restore", headers=headers
        )
        assert response.json()["status"] == "active"

    async def test_stats(
        self, async_client: AsyncClient, test_admin: User, test_property: Property, pending_property: Property
    ):
        response = await async_client.get("/api/admin/stats", headers=auth_headers(test_admin))
        assert response.status_code == 200
        body = response.json()
        assert body["total_properties"] == 2
        assert body["pending"] == 1
        assert body["total_sellers"] == 1
