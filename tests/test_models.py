"""
Tests for model behaviour: password handling, workflow transitions and serialization.
"""

import re
import uuid
import pytest
from datetime import datetime, timezone

from realty.models.user import User, UserRole
from realty.models.property import Property, PropertyStatus, generate_ref_number
from realty.models.enquiry import Enquiry, generate_enquiry_ref
from realty.models.blog import Blog
from realty.utils.text import slugify, split_amenities


class TestUserModel:

    def test_password_roundtrip(self):
        user = User(email="a@test.com", full_name="A", role=UserRole.SELLER)
        user.set_password("secret1")

        assert user.hashed_password != "secret1"
        assert user.verify_password("secret1")
        assert not user.verify_password("secret2")

    def test_short_password_rejected(self):
        with pytest.raises(ValueError, match="at least 6"):
            User.hash_password("12345")

    def test_email_is_normalized(self):
        assert User.validate_email_format("Jane@Example.COM") == "jane@example.com"

    def test_invalid_email_rejected(self):
        with pytest.raises(ValueError):
            User.validate_email_format("not-an-email")

    def test_listing_permission_requires_activation(self):
        seller = User(email="s@test.com", full_name="S", role=UserRole.SELLER, is_active=False, is_deleted=False)
        assert not seller.can_list_properties

        seller.is_active = True
        assert seller.can_list_properties

        seller.is_deleted = True
        assert not seller.can_list_properties

    def test_admin_can_manage_any_property(self):
        admin = User(id=uuid.uuid4(), email="a@test.com", full_name="A", role=UserRole.ADMIN)
        assert admin.can_manage_property(uuid.uuid4())
        assert admin.can_manage_property(None)

    def test_seller_manages_only_own_property(self):
        seller = User(id=uuid.uuid4(), email="s@test.com", full_name="S", role=UserRole.SELLER)
        assert seller.can_manage_property(seller.id)
        assert not seller.can_manage_property(uuid.uuid4())
        assert not seller.can_manage_property(None)

    def test_to_dict_hides_password(self):
        user = User(id=uuid.uuid4(), email="s@test.com", full_name="S", role=UserRole.SELLER, is_active=True)
        user.set_password("secret1")
        data = user.to_dict()

        assert "hashed_password" not in data
        assert data["role"] == "seller"


class TestPropertyWorkflow:

    def _property(self, **kwargs) -> Property:
        return Property(title="Flat", owner_removed=False, **kwargs)

    def test_ref_number_format(self):
        ref = generate_ref_number(datetime(2025, 3, 1, tzinfo=timezone.utc))
        assert re.fullmatch(r"PROP-2025-\d{6}", ref)

    def test_prepare_new_defaults_to_pending(self):
        prop = self._property()
        prop.prepare_new()

        assert prop.status == PropertyStatus.PENDING
        assert prop.submitted_at is not None
        assert prop.ref_number.startswith("PROP-")

    def test_approve_publishes(self):
        prop = self._property(status=PropertyStatus.PENDING, rejection_reason="old")
        prop.approve()

        assert prop.status == PropertyStatus.ACTIVE
        assert prop.published_at is not None
        assert prop.rejection_reason == ""
        assert prop.is_published

    def test_reject_requires_reason(self):
        prop = self._property(status=PropertyStatus.PENDING)
        with pytest.raises(ValueError):
            prop.reject("   ")
        assert prop.status == PropertyStatus.PENDING

    def test_reject_records_reason(self):
        prop = self._property(status=PropertyStatus.PENDING)
        prop.reject("  Missing photos ")

        assert prop.status == PropertyStatus.REJECTED
        assert prop.rejection_reason == "Missing photos"

    def test_soft_delete_hides_listing(self):
        prop = self._property(status=PropertyStatus.ACTIVE)
        prop.soft_delete()

        assert prop.status == PropertyStatus.INACTIVE
        assert prop.owner_removed is True
        assert prop.deleted_at is not None
        assert not prop.is_published

    def test_restore_published_listing_goes_active(self):
        prop = self._property(status=PropertyStatus.PENDING)
        prop.approve()
        prop.soft_delete()
        prop.restore()

        assert prop.status == PropertyStatus.ACTIVE
        assert prop.owner_removed is False
        assert prop.deleted_at is None

    def test_restore_unpublished_listing_goes_pending(self):
        prop = self._property(status=PropertyStatus.PENDING)
        prop.soft_delete()
        prop.restore()

        assert prop.status == PropertyStatus.PENDING

    def test_validate_all_rejects_negative_values(self):
        with pytest.raises(ValueError, match="price"):
            self._property(price=-1).validate_all()
        with pytest.raises(ValueError, match="rooms"):
            self._property(rooms=-2).validate_all()


class TestEnquiryAndBlog:

    def test_enquiry_ref_prefix(self):
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)
        assert re.fullmatch(r"PROP-2024-\d{4}", generate_enquiry_ref(True, now))
        assert re.fullmatch(r"GEN-2024-\d{4}", generate_enquiry_ref(False, now))

    def test_property_enquiry_flag(self):
        assert Enquiry(ref_number="PROP-2024-1234").is_property_enquiry
        assert not Enquiry(ref_number="GEN-2024-1234").is_property_enquiry

    def test_blog_title_sets_slug(self):
        blog = Blog()
        blog.set_title("Top 10 Homes in Porto!")

        assert blog.title == "Top 10 Homes in Porto!"
        assert blog.slug == "top-10-homes-in-porto"


class TestTextHelpers:

    @pytest.mark.parametrize("value,expected", [
        ("Hello World", "hello-world"),
        ("  Ça  va?  ", "a-va"),
        ("---", ""),
    ])
    def test_slugify(self, value, expected):
        assert slugify(value) == expected

    def test_split_amenities_from_string(self):
        assert split_amenities(" wifi, ,balcony ,lift") == ["wifi", "balcony", "lift"]

    def test_split_amenities_from_list(self):
        assert split_amenities(["wifi ", "", " gym"]) == ["wifi", "gym"]
        assert split_amenities(None) == []
