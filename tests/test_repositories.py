"""
Tests for repository classes against an in-memory database.
"""

import pytest
from datetime import timedelta
from decimal import Decimal
from sqlalchemy.exc import InvalidRequestError

from realty.database import utc_now
from realty.models.user import User, UserRole
from realty.models.property import PropertyStatus
from realty.models.blog import Blog
from realty.repositories.user import UserRepository
from realty.repositories.property import PropertyRepository, PropertySearchFilters
from realty.repositories.blog import BlogRepository
from tests.conftest import UserFactory, PropertyFactory


class TestUserRepository:

    async def test_create_user_hashes_password(self, user_repository: UserRepository):
        user = await UserFactory.create_user(user_repository, email="New@Example.com", password="secret99")

        assert user.id is not None
        assert user.email == "new@example.com"
        assert user.role == UserRole.SELLER
        assert user.verify_password("secret99")

    async def test_duplicate_email_rejected(self, user_repository: UserRepository, test_seller: User):
        with pytest.raises(ValueError, match="already exists"):
            await UserFactory.create_user(user_repository, email="SELLER@test.com")

    async def test_get_by_email_is_case_insensitive(self, user_repository: UserRepository, test_seller: User):
        found = await user_repository.get_by_email(" Seller@Test.com ")
        assert found is not None
        assert found.id == test_seller.id

    async def test_get_seller_ignores_admins(
        self, user_repository: UserRepository, test_admin: User, test_seller: User
    ):
        assert await user_repository.get_seller(test_admin.id) is None
        assert (await user_repository.get_seller(test_seller.id)).id == test_seller.id

    async def test_list_sellers_splits_deleted(self, user_repository: UserRepository, test_seller: User):
        deleted = await UserFactory.create_user(user_repository, email="gone@test.com", is_deleted=True)

        live = await user_repository.list_sellers()
        removed = await user_repository.list_sellers(deleted=True)

        assert [u.id for u in live] == [test_seller.id]
        assert [u.id for u in removed] == [deleted.id]

    async def test_count_sellers_since(self, user_repository: UserRepository, test_seller: User):
        assert await user_repository.count_sellers() == 1
        assert await user_repository.count_sellers(since=utc_now() - timedelta(days=7)) == 1
        assert await user_repository.count_sellers(since=utc_now() + timedelta(days=1)) == 0

    async def test_admin_exists(self, user_repository: UserRepository):
        assert not await user_repository.admin_exists()
        await UserFactory.create_user(user_repository, role=UserRole.ADMIN)
        assert await user_repository.admin_exists()

    async def test_seller_listings_never_lazy_load(
        self, user_repository: UserRepository, property_repository: PropertyRepository,
        db_session, test_seller: User, test_property
    ):
        seller = await user_repository.get_by_id(test_seller.id)
        with pytest.raises(InvalidRequestError):
            seller.properties

        await property_repository.delete_obj(test_property)
        await db_session.delete(seller)
        await db_session.commit()
        assert await user_repository.get_by_id(test_seller.id) is None


class TestPropertyRepository:

    async def test_create_property_assigns_reference(
        self, property_repository: PropertyRepository, test_seller: User
    ):
        prop = await PropertyFactory.create_property(
            property_repository, seller_id=test_seller.id, status=PropertyStatus.PENDING
        )

        assert prop.ref_number.startswith("PROP-")
        assert prop.status == PropertyStatus.PENDING
        assert prop.submitted_at is not None
        assert prop.published_at is None

    async def test_create_property_rejects_negative_price(
        self, property_repository: PropertyRepository, test_seller: User
    ):
        with pytest.raises(ValueError):
            await PropertyFactory.create_property(
                property_repository, seller_id=test_seller.id, price=Decimal("-5")
            )

    async def test_default_search_only_returns_published(
        self, property_repository: PropertyRepository, test_property, pending_property
    ):
        properties, total = await property_repository.search_properties(PropertySearchFilters())

        assert total == 1
        assert properties[0].id == test_property.id

    async def test_search_hides_removed_listings(
        self, property_repository: PropertyRepository, test_property
    ):
        test_property.soft_delete()
        test_property.status = PropertyStatus.ACTIVE
        await property_repository.save(test_property)

        _, total = await property_repository.search_properties(PropertySearchFilters())
        assert total == 0

    async def test_search_filters(self, property_repository: PropertyRepository, test_seller: User):
        await PropertyFactory.create_property(
            property_repository, seller_id=test_seller.id, title="Porto loft",
            city="Porto", price=Decimal("150000"), rooms=1, property_type="loft"
        )
        await PropertyFactory.create_property(
            property_repository, seller_id=test_seller.id, title="Porto villa with pool",
            city="Porto", price=Decimal("900000"), rooms=6, property_type="villa"
        )
        await PropertyFactory.create_property(
            property_repository, seller_id=test_seller.id, title="Lisbon flat",
            city="Lisbon", price=Decimal("300000"), rooms=2
        )

        _, total = await property_repository.search_properties(PropertySearchFilters(city="porto"))
        assert total == 2

        found, total = await property_repository.search_properties(
            PropertySearchFilters(city="Porto", min_rooms=3)
        )
        assert total == 1
        assert found[0].title == "Porto villa with pool"

        _, total = await property_repository.search_properties(
            PropertySearchFilters(min_price=Decimal("200000"), max_price=Decimal("400000"))
        )
        assert total == 1

        found, _ = await property_repository.search_properties(PropertySearchFilters(property_type="LOFT"))
        assert [p.title for p in found] == ["Porto loft"]

        found, _ = await property_repository.search_properties(PropertySearchFilters(search_text="pool"))
        assert [p.title for p in found] == ["Porto villa with pool"]

    async def test_search_pagination(self, property_repository: PropertyRepository, test_seller: User):
        for i in range(5):
            await PropertyFactory.create_property(property_repository, seller_id=test_seller.id, title=f"Home {i}")

        page, total = await property_repository.search_properties(PropertySearchFilters(), skip=2, limit=2)

        assert total == 5
        assert len(page) == 2

    async def test_get_by_seller_with_removal_flag(
        self, property_repository: PropertyRepository, test_property, pending_property, test_seller: User
    ):
        pending_property.soft_delete()
        await property_repository.save(pending_property)

        assert len(await property_repository.get_by_seller(test_seller.id)) == 2
        removed = await property_repository.get_by_seller(test_seller.id, owner_removed=True)
        assert [p.id for p in removed] == [pending_property.id]

    async def test_get_pending_skips_removed(
        self, property_repository: PropertyRepository, pending_property, test_seller: User
    ):
        removed = await PropertyFactory.create_property(
            property_repository, seller_id=test_seller.id, status=PropertyStatus.PENDING
        )
        removed.owner_removed = True
        await property_repository.save(removed)

        pending = await property_repository.get_pending()
        assert [p.id for p in pending] == [pending_property.id]

    async def test_count_by_status(
        self, property_repository: PropertyRepository, test_property, pending_property
    ):
        counts = await property_repository.count_by_status()
        assert counts[PropertyStatus.ACTIVE] == 1
        assert counts[PropertyStatus.PENDING] == 1

    async def test_find_location_candidates(self, property_repository: PropertyRepository, test_seller: User):
        await PropertyFactory.create_property(property_repository, seller_id=test_seller.id, city="Porto", zip="4000-001")
        await PropertyFactory.create_property(property_repository, seller_id=test_seller.id, city="Lisbon", zip="1100-001")

        candidates = await property_repository.find_location_candidates("port")
        assert candidates == [("Porto", "4000-001")]

        candidates = await property_repository.find_location_candidates("1100")
        assert candidates == [("Lisbon", "1100-001")]

    async def test_backfill_workflow_timestamps(
        self, property_repository: PropertyRepository, test_property, pending_property
    ):
        test_property.published_at = None
        pending_property.submitted_at = None
        await property_repository.save_all([test_property, pending_property])

        published, submitted = await property_repository.backfill_workflow_timestamps()

        assert (published, submitted) == (1, 1)
        assert test_property.published_at is not None
        assert pending_property.submitted_at is not None
        assert await property_repository.backfill_workflow_timestamps() == (0, 0)

    async def test_like_wildcards_match_literally(
        self, property_repository: PropertyRepository, test_seller: User
    ):
        await PropertyFactory.create_property(
            property_repository, seller_id=test_seller.id, title="100% renovated", city="Porto", zip="4000"
        )
        await PropertyFactory.create_property(
            property_repository, seller_id=test_seller.id, title="Plain house", city="Faro", zip="8000"
        )

        assert await property_repository.find_location_candidates("%") == []
        assert await property_repository.find_location_candidates("_") == []

        found, total = await property_repository.search_properties(PropertySearchFilters(search_text="100%"))
        assert total == 1
        assert found[0].title == "100% renovated"

        _, total = await property_repository.search_properties(PropertySearchFilters(search_text="%"))
        assert total == 1


class TestBlogRepository:

    async def test_list_posts_hides_drafts(self, db_session):
        repo = BlogRepository(db_session)
        for title, published in (("Live", True), ("Draft", False)):
            blog = Blog(published=published)
            blog.set_title(title)
            await repo.add(blog)

        assert [b.title for b in await repo.list_posts()] == ["Live"]
        assert len(await repo.list_posts(include_unpublished=True)) == 2
        assert len(await repo.list_posts(include_unpublished=True, limit=1)) == 1
