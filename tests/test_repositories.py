"""
Tests for the repository layer.
Covers CRUD, search filters, visibility scoping and the transactional bid transitions.
"""

import pytest
import uuid
from decimal import Decimal
from sqlalchemy.exc import IntegrityError

from app.models.user import User, UserRole
from app.models.property import Property, PropertyType, PropertyStatus
from app.models.bid import Bid, BidStatus
from app.repositories.user import UserRepository
from app.repositories.property import PropertyRepository
from app.repositories.bid import BidRepository
from app.schemas.property import PropertySearchFilters
from tests.conftest import UserFactory, PropertyFactory, BidFactory


class TestUserRepository:
    """Test UserRepository functionality."""

    async def test_create_user_hashes_password(self, user_repository: UserRepository):
        user = await UserFactory.create_user(user_repository, email="Ama@Example.com", name="Ama")

        assert user.id is not None
        assert user.email == "ama@example.com"
        assert user.hashed_password != "testpassword123"
        assert user.role == UserRole.PROPERTY_SEEKER

    async def test_create_user_duplicate_email(self, user_repository: UserRepository, test_seeker: User):
        with pytest.raises(ValueError, match="already exists"):
            await UserFactory.create_user(user_repository, email="seeker@example.com")

    async def test_get_by_email(self, user_repository: UserRepository, test_owner: User):
        found = await user_repository.get_by_email("owner@example.com")
        assert found.id == test_owner.id
        assert await user_repository.get_by_email("missing@example.com") is None

    async def test_get_by_tokens(self, user_repository: UserRepository, test_seeker: User):
        test_seeker.verification_token = "verify-token"
        test_seeker.reset_password_token = "reset-token"
        await user_repository.save(test_seeker)

        assert (await user_repository.get_by_verification_token("verify-token")).id == test_seeker.id
        assert (await user_repository.get_by_reset_token("reset-token")).id == test_seeker.id
        assert await user_repository.get_by_reset_token("unknown") is None

    async def test_search_users(self, user_repository: UserRepository, test_owner, test_seeker, test_admin):
        owners, total = await user_repository.search_users(role=UserRole.PROPERTY_OWNER)
        assert total == 1
        assert owners[0].id == test_owner.id

        matches, total = await user_repository.search_users(search="SEEKER")
        assert total == 1
        assert matches[0].id == test_seeker.id

        page, total = await user_repository.search_users(skip=0, limit=2)
        assert total == 3
        assert len(page) == 2

    async def test_search_users_escapes_wildcards(self, user_repository: UserRepository, test_owner):
        _, total = await user_repository.search_users(search="%")
        assert total == 0

    async def test_count_by_role_reports_every_role(self, user_repository: UserRepository, test_owner, test_seeker):
        counts = await user_repository.count_by_role()
        assert counts == {"admin": 0, "property_owner": 1, "property_seeker": 1}

    async def test_delete_user_cascade(
        self,
        user_repository: UserRepository,
        property_repository: PropertyRepository,
        bid_repository: BidRepository,
        test_owner: User,
        test_seeker: User,
        other_seeker: User
    ):
        owner_id, seeker_id, other_id = test_owner.id, test_seeker.id, other_seeker.id
        owned = await PropertyFactory.create_property(property_repository, owner_id)
        seeker_listing = await PropertyFactory.create_property(property_repository, other_id)
        bid_on_owned = await BidFactory.create_bid(bid_repository, owned.id, seeker_id)
        bid_by_owner = await BidFactory.create_bid(bid_repository, seeker_listing.id, owner_id)
        unrelated_bid = await BidFactory.create_bid(bid_repository, seeker_listing.id, seeker_id)

        assert await user_repository.delete_user_cascade(owner_id) is True

        assert await user_repository.get_by_id(owner_id) is None
        assert await property_repository.get_by_id(owned.id) is None
        assert await bid_repository.get_by_id(bid_on_owned.id) is None
        assert await bid_repository.get_by_id(bid_by_owner.id) is None
        assert await bid_repository.get_by_id(unrelated_bid.id) is not None
        assert await property_repository.get_by_id(seeker_listing.id) is not None

    async def test_delete_user_cascade_not_found(self, user_repository: UserRepository):
        assert await user_repository.delete_user_cascade(uuid.uuid4()) is False


class TestPropertyRepository:
    """Test PropertyRepository functionality."""

    @pytest.fixture
    async def listings(self, property_repository: PropertyRepository, test_owner: User):
        house = await PropertyFactory.create_property(
            property_repository, test_owner.id,
            title="Family house", description="Garden and garage",
            property_type=PropertyType.HOUSE, price=Decimal("120000"), city="Accra"
        )
        flat = await PropertyFactory.create_property(
            property_repository, test_owner.id,
            title="City apartment", description="Close to the market",
            property_type=PropertyType.APARTMENT, price=Decimal("60000"), city="Kumasi", state="Ashanti"
        )
        car = await PropertyFactory.create_property(
            property_repository, test_owner.id,
            title="Saloon car", description="Low mileage, garage kept",
            property_type=PropertyType.CAR, status=PropertyStatus.SOLD, price=Decimal("15000"), city="Accra"
        )
        return house, flat, car

    async def test_create_sets_defaults(self, property_repository: PropertyRepository, test_owner: User):
        prop = await property_repository.create({
            "owner_id": test_owner.id,
            "title": "Plot",
            "description": "Half acre",
            "property_type": PropertyType.LAND,
            "price": Decimal("9000"),
            "address": "Beach Road",
            "city": "Cape Coast",
            "state": "Central",
            "zip_code": "00233",
        })

        assert prop.status == PropertyStatus.AVAILABLE
        assert prop.country == "Ghana"
        assert prop.images == []
        assert prop.features == {}
        assert prop.bids == []
        assert prop.owner.id == test_owner.id

    async def test_search_by_type_and_status(self, property_repository: PropertyRepository, listings):
        house, flat, car = listings

        results, total = await property_repository.search_properties(
            PropertySearchFilters(property_type=PropertyType.APARTMENT)
        )
        assert total == 1 and results[0].id == flat.id

        results, total = await property_repository.search_properties(
            PropertySearchFilters(status=PropertyStatus.SOLD)
        )
        assert total == 1 and results[0].id == car.id

    async def test_search_by_city_case_insensitive(self, property_repository: PropertyRepository, listings):
        _, total = await property_repository.search_properties(PropertySearchFilters(city="accra"))
        assert total == 2

        results, total = await property_repository.search_properties(PropertySearchFilters(state="ASHANTI"))
        assert total == 1

    async def test_search_by_price_range_inclusive(self, property_repository: PropertyRepository, listings):
        house, flat, car = listings
        results, total = await property_repository.search_properties(
            PropertySearchFilters(min_price=Decimal("15000"), max_price=Decimal("60000"))
        )
        assert total == 2
        assert {p.id for p in results} == {flat.id, car.id}

    async def test_search_text_matches_title_or_description(self, property_repository: PropertyRepository, listings):
        house, flat, car = listings
        results, total = await property_repository.search_properties(PropertySearchFilters(search="garage"))
        assert total == 2
        assert {p.id for p in results} == {house.id, car.id}

    async def test_search_pagination_newest_first(self, property_repository: PropertyRepository, listings):
        house, flat, car = listings
        page_one, total = await property_repository.search_properties(PropertySearchFilters(), skip=0, limit=2)
        page_two, _ = await property_repository.search_properties(PropertySearchFilters(), skip=2, limit=2)

        assert total == 3
        assert [p.id for p in page_one] == [car.id, flat.id]
        assert [p.id for p in page_two] == [house.id]

    async def test_get_by_owner(self, property_repository: PropertyRepository, listings, test_owner, test_seeker):
        assert len(await property_repository.get_by_owner(test_owner.id)) == 3
        assert await property_repository.get_by_owner(test_seeker.id) == []

    async def test_counts_report_every_value(self, property_repository: PropertyRepository, listings):
        by_type = await property_repository.count_by_type()
        by_status = await property_repository.count_by_status()

        assert by_type == {"house": 1, "apartment": 1, "land": 0, "commercial": 0, "car": 1, "other": 0}
        assert by_status == {"available": 2, "pending": 0, "sold": 1, "rented": 0}

    async def test_delete_property_cascade(
        self,
        property_repository: PropertyRepository,
        bid_repository: BidRepository,
        test_property: Property,
        test_bid: Bid
    ):
        property_id, bid_id = test_property.id, test_bid.id

        assert await property_repository.delete_property_cascade(property_id) is True
        assert await property_repository.get_by_id(property_id) is None
        assert await bid_repository.get_by_id(bid_id) is None

    async def test_delete_property_cascade_not_found(self, property_repository: PropertyRepository):
        assert await property_repository.delete_property_cascade(uuid.uuid4()) is False


class TestBidRepository:
    """Test BidRepository functionality."""

    async def test_find_pending(self, bid_repository: BidRepository, test_bid: Bid, test_owner: User):
        found = await bid_repository.find_pending(test_bid.property_id, test_bid.bidder_id)
        assert found.id == test_bid.id
        assert await bid_repository.find_pending(test_bid.property_id, test_owner.id) is None

    async def test_second_pending_bid_rejected_by_index(
        self,
        bid_repository: BidRepository,
        test_property: Property,
        test_seeker: User,
        test_bid: Bid
    ):
        property_id, seeker_id = test_property.id, test_seeker.id

        with pytest.raises(IntegrityError):
            await BidFactory.create_bid(bid_repository, property_id, seeker_id)

    async def test_rejected_bid_allows_new_pending_bid(
        self,
        bid_repository: BidRepository,
        test_property: Property,
        test_seeker: User,
        test_bid: Bid
    ):
        assert await bid_repository.reject_bid(test_bid.id) is True
        again = await BidFactory.create_bid(bid_repository, test_property.id, test_seeker.id)
        assert again.status == BidStatus.PENDING

    async def test_list_bids_visibility(
        self,
        bid_repository: BidRepository,
        property_repository: PropertyRepository,
        test_owner: User,
        test_seeker: User,
        other_seeker: User,
        test_property: Property,
        test_bid: Bid
    ):
        other_bid = await BidFactory.create_bid(bid_repository, test_property.id, other_seeker.id)

        everything = await bid_repository.list_bids()
        assert [b.id for b in everything] == [other_bid.id, test_bid.id]

        owner_view = await bid_repository.list_bids(visible_to=test_owner.id)
        assert len(owner_view) == 2

        seeker_view = await bid_repository.list_bids(visible_to=test_seeker.id)
        assert [b.id for b in seeker_view] == [test_bid.id]

        filtered = await bid_repository.list_bids(property_id=test_property.id, visible_to=other_seeker.id)
        assert [b.id for b in filtered] == [other_bid.id]

    async def test_reject_only_pending(self, bid_repository: BidRepository, test_bid: Bid):
        assert await bid_repository.reject_bid(test_bid.id) is True
        assert (await bid_repository.get_by_id(test_bid.id)).status == BidStatus.REJECTED
        assert await bid_repository.reject_bid(test_bid.id) is False

    async def test_accept_bid_transaction(
        self,
        bid_repository: BidRepository,
        property_repository: PropertyRepository,
        test_property: Property,
        test_bid: Bid,
        other_seeker: User
    ):
        competing = await BidFactory.create_bid(bid_repository, test_property.id, other_seeker.id)

        assert await bid_repository.accept_bid(test_bid.id, test_property.id) is True

        assert (await bid_repository.get_by_id(test_bid.id)).status == BidStatus.ACCEPTED
        assert (await bid_repository.get_by_id(competing.id)).status == BidStatus.REJECTED
        assert (await property_repository.get_by_id(test_property.id)).status == PropertyStatus.PENDING

    async def test_second_acceptance_changes_nothing(
        self,
        bid_repository: BidRepository,
        property_repository: PropertyRepository,
        test_property: Property,
        test_bid: Bid,
        other_seeker: User
    ):
        property_id, first_id = test_property.id, test_bid.id
        competing = await BidFactory.create_bid(bid_repository, property_id, other_seeker.id)
        competing_id = competing.id

        assert await bid_repository.accept_bid(first_id, property_id) is True
        assert await bid_repository.accept_bid(competing_id, property_id) is False

        assert (await bid_repository.get_by_id(first_id)).status == BidStatus.ACCEPTED
        assert (await bid_repository.get_by_id(competing_id)).status == BidStatus.REJECTED
        assert (await property_repository.get_by_id(property_id)).status == PropertyStatus.PENDING

    async def test_accept_on_unavailable_property_changes_nothing(
        self,
        bid_repository: BidRepository,
        property_repository: PropertyRepository,
        test_property: Property,
        test_bid: Bid
    ):
        property_id, bid_id = test_property.id, test_bid.id
        test_property.status = PropertyStatus.SOLD
        await property_repository.save(test_property)

        assert await bid_repository.accept_bid(bid_id, property_id) is False

        assert (await bid_repository.get_by_id(bid_id)).status == BidStatus.PENDING
        assert (await property_repository.get_by_id(property_id)).status == PropertyStatus.SOLD

    async def test_accept_non_pending_bid_rolls_back_property(
        self,
        bid_repository: BidRepository,
        property_repository: PropertyRepository,
        test_property: Property,
        test_bid: Bid
    ):
        property_id, bid_id = test_property.id, test_bid.id
        await bid_repository.reject_bid(bid_id)

        assert await bid_repository.accept_bid(bid_id, property_id) is False
        assert (await property_repository.get_by_id(property_id)).status == PropertyStatus.AVAILABLE
