"""
Tests for AdminService.
Covers platform statistics and user moderation.
"""

import pytest
import uuid

from app.models.user import User, UserRole
from app.models.property import Property, PropertyType, PropertyStatus
from app.models.bid import Bid
from app.repositories.bid import BidRepository
from app.repositories.property import PropertyRepository
from app.repositories.user import UserRepository
from app.schemas.admin import StatisticsResponse
from app.schemas.user import UserFilters, UserUpdate
from app.services.admin import AdminService
from app.utils.exceptions import BadRequestError, UserNotFoundError
from tests.conftest import PropertyFactory, UserFactory


class TestStatistics:

    async def test_statistics(
        self,
        admin_service: AdminService,
        property_repository: PropertyRepository,
        test_admin: User,
        test_owner: User,
        test_seeker: User,
        test_property: Property,
        test_bid: Bid
    ):
        await PropertyFactory.create_property(
            property_repository, test_owner.id,
            title="Shop", property_type=PropertyType.COMMERCIAL, status=PropertyStatus.RENTED
        )

        stats = await admin_service.get_statistics()

        assert stats["overview"] == {"total_users": 3, "total_properties": 2, "total_bids": 1}
        assert stats["users_by_role"] == {"admin": 1, "property_owner": 1, "property_seeker": 1}
        assert stats["properties_by_type"]["house"] == 1
        assert stats["properties_by_type"]["commercial"] == 1
        assert stats["properties_by_type"]["land"] == 0
        assert stats["properties_by_status"] == {"available": 1, "pending": 0, "sold": 0, "rented": 1}
        assert len(stats["recent_users"]) == 3
        assert stats["recent_properties"][0]["title"] == "Shop"
        assert stats["recent_properties"][0]["owner"]["email"] == "owner@example.com"

        # The router serializes the same dictionary
        StatisticsResponse.model_validate(stats)

    async def test_statistics_empty(self, admin_service: AdminService):
        stats = await admin_service.get_statistics()
        assert stats["overview"] == {"total_users": 0, "total_properties": 0, "total_bids": 0}
        assert stats["recent_users"] == []
        assert stats["recent_properties"] == []

    async def test_recent_lists_are_capped(self, admin_service: AdminService, user_repository: UserRepository):
        for _ in range(7):
            await UserFactory.create_user(user_repository)

        stats = await admin_service.get_statistics()
        assert len(stats["recent_users"]) == 5


class TestUserManagement:

    async def test_list_users_filters(self, admin_service: AdminService, test_admin, test_owner, test_seeker):
        users, pagination = await admin_service.list_users(UserFilters(role=UserRole.PROPERTY_OWNER))
        assert [u.id for u in users] == [test_owner.id]
        assert pagination.total == 1

        users, pagination = await admin_service.list_users(UserFilters(search="example.com", limit=2))
        assert len(users) == 2
        assert pagination.total == 3
        assert pagination.pages == 2

    async def test_update_user_role_and_verification(self, admin_service: AdminService, test_seeker: User):
        updated = await admin_service.update_user(
            test_seeker.id,
            UserUpdate.model_validate({"role": "property_owner", "isVerified": False})
        )
        assert updated.role == UserRole.PROPERTY_OWNER
        assert updated.is_verified is False

    async def test_update_user_partial(self, admin_service: AdminService, test_seeker: User):
        updated = await admin_service.update_user(test_seeker.id, UserUpdate(is_verified=False))
        assert updated.role == UserRole.PROPERTY_SEEKER
        assert updated.is_verified is False

    async def test_update_unknown_user(self, admin_service: AdminService):
        with pytest.raises(UserNotFoundError):
            await admin_service.update_user(uuid.uuid4(), UserUpdate(role=UserRole.ADMIN))

    async def test_delete_user_cascades(
        self,
        admin_service: AdminService,
        user_repository: UserRepository,
        property_repository: PropertyRepository,
        bid_repository: BidRepository,
        test_admin: User,
        test_owner: User,
        test_property: Property,
        test_bid: Bid
    ):
        owner_id, property_id, bid_id = test_owner.id, test_property.id, test_bid.id

        await admin_service.delete_user(owner_id, test_admin)

        assert await user_repository.get_by_id(owner_id) is None
        assert await property_repository.get_by_id(property_id) is None
        assert await bid_repository.get_by_id(bid_id) is None

    async def test_admin_cannot_delete_self(self, admin_service: AdminService, test_admin: User):
        with pytest.raises(BadRequestError, match="cannot delete your own account"):
            await admin_service.delete_user(test_admin.id, test_admin)

    async def test_delete_unknown_user(self, admin_service: AdminService, test_admin: User):
        with pytest.raises(UserNotFoundError):
            await admin_service.delete_user(uuid.uuid4(), test_admin)
