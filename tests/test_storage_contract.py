"""
Repository behaviour shared by every storage backend.
Each test runs against MemoryStorage and DatabaseStorage.
"""
from decimal import Decimal

import pytest

from schemas.ad import AdCreate
from schemas.job import JobCreate
from schemas.product import ProductCreate
from schemas.restaurant import RestaurantCreate
from schemas.store import StoreCreate
from schemas.users import UserCreate
from storage import IntegrityViolation


class TestCreateAndGet:
    """Created records come back with id, timestamp and defaults."""

    def test_user_round_trip(self, storage):
        created = storage.create_user(
            UserCreate(username="amna", email="amna@example.com", password_hash="x", full_name="Amna Osman")
        )
        fetched = storage.get_user(created.id)
        assert fetched == created
        assert fetched.role == "customer"
        assert fetched.is_active is True
        assert fetched.created_at.tzinfo is None
        assert fetched.phone is None

    def test_product_defaults_and_money(self, storage, store):
        created = storage.create_product(
            ProductCreate(store_id=store.id, name="Incense", price="15", category="Incense")
        )
        fetched = storage.get_product(created.id)
        assert fetched.price == Decimal("15.00")
        assert str(fetched.price) == "15.00"
        assert fetched.stock == 0
        assert fetched.is_active is True
        assert fetched.tags is None

    def test_store_settings_blob_round_trip(self, storage, merchant):
        settings = {"category": "food", "shipping": {"zones": ["Khartoum", "Bahri"], "fee": "5.00"}}
        created = storage.create_store(StoreCreate(name="Zone Store", owner_id=merchant.id, settings=settings))
        assert storage.get_store(created.id).settings == settings

    def test_ad_images_default_to_empty_list(self, storage, merchant):
        ad = storage.create_ad(
            AdCreate(
                title="Car for sale",
                description="Clean, one owner",
                category="Cars",
                type="sale",
                contact_name="Omar",
                contact_phone="+249900000000",
                poster_id=merchant.id,
            )
        )
        assert storage.get_ad(ad.id).images == []
        assert ad.is_premium is False

    def test_get_missing_returns_none(self, storage):
        assert storage.get_user("missing") is None
        assert storage.get_store("missing") is None
        assert storage.get_product("missing") is None
        assert storage.get_order("missing") is None


class TestUpdate:
    """Partial updates."""

    def test_empty_update_is_noop(self, storage, product):
        assert storage.update_product(product.id, {}) == product
        assert storage.get_product(product.id) == product

    def test_update_missing_returns_none(self, storage):
        assert storage.update_product("missing", {"name": "Nothing"}) is None
        assert storage.update_user("missing", {"city": "Kassala"}) is None

    def test_update_changes_only_given_fields(self, storage, product):
        updated = storage.update_product(product.id, {"price": Decimal("9.5"), "stock": 3})
        assert updated.price == Decimal("9.50")
        assert updated.stock == 3
        assert updated.name == product.name
        assert storage.get_product(product.id) == updated

    def test_id_and_created_at_are_protected(self, storage, product):
        updated = storage.update_product(product.id, {"id": "other", "created_at": None})
        assert updated.id == product.id
        assert updated.created_at == product.created_at

    def test_returned_records_are_copies(self, storage, store):
        fetched = storage.get_store(store.id)
        fetched.settings["category"] = "tampered"
        assert storage.get_store(store.id).settings["category"] == "food"


class TestDelete:
    """Deletes report whether something was removed."""

    def test_delete_twice(self, storage, product):
        assert storage.delete_product(product.id) is True
        assert storage.delete_product(product.id) is False
        assert storage.get_product(product.id) is None

    def test_store_in_use_cannot_be_deleted(self, storage, store, product):
        with pytest.raises(IntegrityViolation):
            storage.delete_store(store.id)
        assert storage.get_store(store.id) is not None

    def test_user_owning_store_cannot_be_deleted(self, storage, merchant, store):
        with pytest.raises(IntegrityViolation):
            storage.delete_user(merchant.id)

    def test_unreferenced_user_is_deleted(self, storage, customer):
        assert storage.delete_user(customer.id) is True
        assert storage.get_user_by_username("customer") is None


class TestIntegrity:
    """Uniqueness and reference checks."""

    def test_duplicate_username(self, storage, customer):
        with pytest.raises(IntegrityViolation):
            storage.create_user(
                UserCreate(username="customer", email="other@example.com", password_hash="x", full_name="Other")
            )

    def test_duplicate_email(self, storage, customer):
        with pytest.raises(IntegrityViolation):
            storage.create_user(
                UserCreate(username="other", email="customer@example.com", password_hash="x", full_name="Other")
            )

    def test_update_to_taken_username(self, storage, customer, merchant):
        with pytest.raises(IntegrityViolation):
            storage.update_user(customer.id, {"username": "merchant"})

    def test_product_for_missing_store(self, storage):
        with pytest.raises(IntegrityViolation):
            storage.create_product(ProductCreate(store_id="missing", name="Ghost", price="1.00", category="X"))

    def test_store_for_inactive_owner(self, storage, make_user):
        owner = make_user("sleepy", role="merchant", is_active=False)
        with pytest.raises(IntegrityViolation):
            storage.create_store(StoreCreate(name="Closed", owner_id=owner.id))

    def test_duplicate_order_number(self, storage, customer, store, make_order):
        make_order(customer, store, "10.00", number="ORD-AAAA0000")
        with pytest.raises(IntegrityViolation):
            make_order(customer, store, "20.00", number="ORD-AAAA0000")

    def test_listing_for_missing_poster(self, storage):
        with pytest.raises(IntegrityViolation):
            storage.create_job(
                JobCreate(
                    title="Driver",
                    description="Deliveries",
                    company="Nile Express",
                    location="Khartoum",
                    job_type="part-time",
                    category="Transport",
                    poster_id="missing",
                )
            )


class TestQueries:
    """Filters and relationship lookups."""

    def test_all_stores_category_and_city_intersection(self, storage, make_user):
        khartoum = make_user("k_owner", role="merchant", city="Khartoum")
        kassala = make_user("s_owner", role="merchant", city="Kassala")
        wanted = storage.create_store(StoreCreate(name="A1", owner_id=khartoum.id, settings={"category": "A"}))
        storage.create_store(StoreCreate(name="B1", owner_id=khartoum.id, settings={"category": "B"}))
        storage.create_store(StoreCreate(name="A2", owner_id=kassala.id, settings={"category": "A"}))
        storage.create_store(
            StoreCreate(name="A3", owner_id=khartoum.id, settings={"category": "A"}, is_active=False)
        )

        result = storage.get_all_stores(category="A", city="khartoum")
        assert [s.id for s in result] == [wanted.id]

    def test_all_stores_search(self, storage, store):
        assert [s.id for s in storage.get_all_stores(search="SUDANESE")] == [store.id]
        assert storage.get_all_stores(search="pizza") == []

    def test_products_by_user_spans_stores(self, storage, merchant, store, product):
        second = storage.create_store(StoreCreate(name="Second", owner_id=merchant.id))
        other = storage.create_product(ProductCreate(store_id=second.id, name="Oud", price="30", category="Perfume"))
        assert [p.id for p in storage.get_products_by_user(merchant.id)] == [product.id, other.id]

    def test_orders_by_merchant(self, storage, customer, merchant, store, make_order, make_user):
        other_owner = make_user("rival", role="merchant")
        other_store = storage.create_store(StoreCreate(name="Rival", owner_id=other_owner.id))
        mine = make_order(customer, store, "10.00")
        make_order(customer, other_store, "99.00")
        assert [o.id for o in storage.get_orders_by_merchant(merchant.id)] == [mine.id]

    def test_list_users_by_role(self, storage, customer, merchant, admin):
        assert [u.username for u in storage.list_users("merchant")] == ["merchant"]
        assert len(storage.list_users()) == 3

    def test_restaurant_filters(self, storage, merchant):
        storage.create_restaurant(
            RestaurantCreate(name="Nile Grill", cuisine="Grills", address="Riyadh", owner_id=merchant.id)
        )
        storage.create_restaurant(
            RestaurantCreate(name="Kisra House", cuisine="Sudanese", address="Jeddah", owner_id=merchant.id)
        )
        storage.create_restaurant(
            RestaurantCreate(
                name="Closed Kitchen", cuisine="Sudanese", address="Riyadh", owner_id=merchant.id, is_active=False
            )
        )
        assert [r.name for r in storage.list_restaurants(cuisine="Sudanese")] == ["Kisra House"]
        assert [r.name for r in storage.list_restaurants(search="riyadh")] == ["Nile Grill"]
        assert len(storage.list_restaurants(active_only=False)) == 3

    def test_premium_ads_first(self, storage, merchant):
        def ad(title, premium):
            return storage.create_ad(
                AdCreate(
                    title=title,
                    description="desc",
                    category="Cars",
                    type="sale",
                    contact_name="Omar",
                    contact_phone="+249",
                    is_premium=premium,
                    poster_id=merchant.id,
                )
            )

        ad("Plain", False)
        ad("Featured", True)
        assert [a.title for a in storage.list_ads()] == ["Featured", "Plain"]


class TestAggregates:
    """Dashboard and platform statistics."""

    def test_revenue_excludes_cancelled(self, storage, customer, merchant, store, make_order):
        make_order(customer, store, "10.00", status="delivered")
        make_order(customer, store, "20.00", status="pending")
        make_order(customer, store, "1000.00", status="cancelled")

        assert storage.get_total_revenue(merchant.id) == Decimal("30.00")
        stats = storage.get_dashboard_stats(merchant.id)
        assert stats.total_orders == 3
        assert stats.orders_by_status["cancelled"] == 1
        assert stats.store_count == 1

    def test_dashboard_product_counts(self, storage, merchant, store, product):
        storage.create_product(
            ProductCreate(store_id=store.id, name="Hidden", price="1.00", category="X", is_active=False)
        )
        stats = storage.get_dashboard_stats(merchant.id)
        assert stats.total_products == 2
        assert stats.active_products == 1

    def test_dashboard_for_user_without_stores(self, storage, customer):
        stats = storage.get_dashboard_stats(customer.id)
        assert stats.store_count == 0
        assert stats.total_sales == Decimal("0.00")

    def test_platform_stats(self, storage, customer, merchant, admin, store, make_order):
        make_order(customer, store, "12.50", status="shipped")
        make_order(customer, store, "5.00", status="cancelled")
        stats = storage.get_platform_stats()
        assert stats.total_users == 3
        assert stats.users_by_role == {"customer": 1, "merchant": 1, "admin": 1}
        assert stats.active_stores == 1
        assert stats.total_orders == 2
        assert stats.total_revenue == Decimal("12.50")


class TestUserDeactivation:
    """Store owners keep the active flag while they have active stores."""

    def test_owner_of_active_store_cannot_be_deactivated(self, storage, merchant, store):
        with pytest.raises(IntegrityViolation):
            storage.update_user(merchant.id, {"is_active": False})
        assert storage.get_user(merchant.id).is_active is True
        assert [s.id for s in storage.get_all_stores()] == [store.id]

    def test_deactivation_allowed_once_stores_are_closed(self, storage, merchant, store):
        storage.update_store(store.id, {"is_active": False})
        assert storage.update_user(merchant.id, {"is_active": False}).is_active is False

    def test_user_without_stores_can_be_deactivated(self, storage, customer):
        assert storage.update_user(customer.id, {"is_active": False}).is_active is False


class TestListingOwnerLookups:
    """Listings by owner or poster."""

    def _restaurant(self, storage, owner, name):
        return storage.create_restaurant(
            RestaurantCreate(name=name, cuisine="Sudanese", address="Riyadh", owner_id=owner.id)
        )

    def _job(self, storage, poster, title):
        return storage.create_job(
            JobCreate(
                title=title,
                description="desc",
                company="Nile Express",
                location="Khartoum",
                job_type="contract",
                category="Transport",
                poster_id=poster.id,
            )
        )

    def _ad(self, storage, poster, title):
        return storage.create_ad(
            AdCreate(
                title=title,
                description="desc",
                category="Cars",
                type="wanted",
                contact_name="Omar",
                contact_phone="+249",
                poster_id=poster.id,
            )
        )

    def test_restaurants_by_owner(self, storage, merchant, customer):
        first = self._restaurant(storage, merchant, "First")
        self._restaurant(storage, customer, "Elsewhere")
        second = self._restaurant(storage, merchant, "Second")
        storage.update_restaurant(second.id, {"is_active": False})

        assert [r.id for r in storage.get_restaurants_by_owner(merchant.id)] == [first.id, second.id]
        assert storage.get_restaurants_by_owner("missing") == []

    def test_jobs_by_poster(self, storage, merchant, customer):
        first = self._job(storage, customer, "Driver")
        self._job(storage, merchant, "Cashier")
        second = self._job(storage, customer, "Courier")

        assert [j.id for j in storage.get_jobs_by_poster(customer.id)] == [first.id, second.id]
        assert storage.get_jobs_by_poster("missing") == []

    def test_ads_by_poster(self, storage, merchant, customer):
        first = self._ad(storage, merchant, "Wanted: generator")
        second = self._ad(storage, merchant, "Wanted: fridge")
        self._ad(storage, customer, "Wanted: bicycle")

        assert [a.id for a in storage.get_ads_by_poster(merchant.id)] == [first.id, second.id]
        assert storage.get_ads_by_poster(customer.id) != []
        assert storage.get_ads_by_poster("missing") == []
