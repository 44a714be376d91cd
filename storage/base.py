"""
Repository contract shared by every storage backend.

Backends implement a handful of record-level primitives (get, find, insert,
save, delete). Everything the application calls lives here so that the
in-memory and the SQL backend apply the same defaults, reference checks and
aggregates.
"""
from abc import ABC, abstractmethod
from contextlib import nullcontext
from decimal import Decimal
from typing import Any, ContextManager, Dict, Iterable, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel

from schemas.ad import AdCreate, AdOut
from schemas.common import CENTS
from schemas.dashboard import DashboardStats, PlatformStats
from schemas.job import JobCreate, JobOut
from schemas.order import ORDER_STATUSES, OrderCreate, OrderOut
from schemas.product import ProductCreate, ProductOut
from schemas.restaurant import RestaurantCreate, RestaurantOut
from schemas.store import StoreCreate, StoreOut
from schemas.users import UserCreate, UserRecord
from storage.errors import IntegrityViolation


R = TypeVar("R", bound=BaseModel)

# Never writable through an update
PROTECTED_FIELDS = frozenset({"id", "created_at"})


def ordered(records: Iterable[R]) -> List[R]:
    return sorted(records, key=lambda record: (record.created_at, record.id))


def order_revenue(orders: Iterable[OrderOut]) -> Decimal:
    total = sum((order.total_amount for order in orders if order.status != "cancelled"), Decimal("0"))
    return total.quantize(CENTS)


class Storage(ABC):
    # -- backend primitives ------------------------------------------------

    @abstractmethod
    def _get(self, record_type: Type[R], record_id: str) -> Optional[R]:
        ...

    @abstractmethod
    def _find(self, record_type: Type[R], **filters: Any) -> List[R]:
        """Records whose fields equal ``filters``, oldest first."""

    @abstractmethod
    def _insert(self, record_type: Type[R], data: BaseModel) -> R:
        """Persist ``data`` with a fresh id and creation timestamp."""

    @abstractmethod
    def _save(self, record: R, fields: Iterable[str]) -> Optional[R]:
        """Write ``fields`` of an already validated record."""

    @abstractmethod
    def _delete(self, record_type: Type[BaseModel], record_id: str) -> bool:
        ...

    def _atomic(self) -> ContextManager:
        return nullcontext()

    # -- shared helpers ----------------------------------------------------

    def _update(self, record_type: Type[R], record_id: str, updates: Mapping[str, Any]) -> Optional[R]:
        record = self._get(record_type, record_id)
        if record is None:
            return None
        changes = {
            key: value
            for key, value in updates.items()
            if key in record_type.model_fields and key not in PROTECTED_FIELDS
        }
        if not changes:
            return record
        merged = record_type.model_validate({**record.model_dump(), **changes})
        return self._save(merged, changes.keys())

    def _require_unused(self, what: str, references: Dict[Type[BaseModel], Dict[str, str]]) -> None:
        for record_type, filters in references.items():
            if self._find(record_type, **filters):
                raise IntegrityViolation(f"{what} is still referenced and cannot be deleted")

    # -- users -------------------------------------------------------------

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        return self._get(UserRecord, user_id)

    def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        matches = self._find(UserRecord, username=username)
        return matches[0] if matches else None

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        matches = self._find(UserRecord, email=email)
        return matches[0] if matches else None

    def list_users(self, role: Optional[str] = None) -> List[UserRecord]:
        if role:
            return self._find(UserRecord, role=role)
        return self._find(UserRecord)

    def _check_user_unique(self, username: Optional[str], email: Optional[str], user_id: Optional[str] = None) -> None:
        if username is not None:
            existing = self.get_user_by_username(username)
            if existing and existing.id != user_id:
                raise IntegrityViolation("Username already exists")
        if email is not None:
            existing = self.get_user_by_email(email)
            if existing and existing.id != user_id:
                raise IntegrityViolation("Email already registered")

    def create_user(self, data: UserCreate) -> UserRecord:
        with self._atomic():
            self._check_user_unique(data.username, data.email)
            return self._insert(UserRecord, data)

    def update_user(self, user_id: str, updates: Mapping[str, Any]) -> Optional[UserRecord]:
        with self._atomic():
            self._check_user_unique(updates.get("username"), updates.get("email"), user_id)
            # Store owners must stay active while any of their stores is
            if updates.get("is_active") is False and self._find(StoreOut, owner_id=user_id, is_active=True):
                raise IntegrityViolation("User owns active stores and cannot be deactivated")
            return self._update(UserRecord, user_id, updates)

    def delete_user(self, user_id: str) -> bool:
        with self._atomic():
            self._require_unused("User", {
                StoreOut: {"owner_id": user_id},
                OrderOut: {"customer_id": user_id},
                RestaurantOut: {"owner_id": user_id},
                JobOut: {"poster_id": user_id},
                AdOut: {"poster_id": user_id},
            })
            return self._delete(UserRecord, user_id)

    # -- stores ------------------------------------------------------------

    def get_store(self, store_id: str) -> Optional[StoreOut]:
        return self._get(StoreOut, store_id)

    def get_stores_by_owner(self, owner_id: str) -> List[StoreOut]:
        return self._find(StoreOut, owner_id=owner_id)

    def list_stores(self) -> List[StoreOut]:
        return self._find(StoreOut)

    def get_all_stores(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        city: Optional[str] = None,
    ) -> List[StoreOut]:
        """Active stores matching every given filter."""
        stores = self._find(StoreOut, is_active=True)
        if category:
            stores = [s for s in stores if (s.settings or {}).get("category") == category]
        if search:
            needle = search.casefold()
            stores = [
                s for s in stores
                if needle in s.name.casefold() or needle in (s.description or "").casefold()
            ]
        if city:
            wanted = city.casefold()
            owners: Dict[str, Optional[UserRecord]] = {}
            matched = []
            for store in stores:
                if store.owner_id not in owners:
                    owners[store.owner_id] = self.get_user(store.owner_id)
                owner = owners[store.owner_id]
                if owner and (owner.city or "").casefold() == wanted:
                    matched.append(store)
            stores = matched
        return stores

    def _check_store_owner(self, owner_id: str) -> None:
        owner = self.get_user(owner_id)
        if owner is None or not owner.is_active:
            raise IntegrityViolation("Store owner must be an existing active user")

    def create_store(self, data: StoreCreate) -> StoreOut:
        with self._atomic():
            self._check_store_owner(data.owner_id)
            return self._insert(StoreOut, data)

    def update_store(self, store_id: str, updates: Mapping[str, Any]) -> Optional[StoreOut]:
        with self._atomic():
            if "owner_id" in updates:
                self._check_store_owner(updates["owner_id"])
            return self._update(StoreOut, store_id, updates)

    def delete_store(self, store_id: str) -> bool:
        with self._atomic():
            self._require_unused("Store", {
                ProductOut: {"store_id": store_id},
                OrderOut: {"store_id": store_id},
            })
            return self._delete(StoreOut, store_id)

    # -- products ----------------------------------------------------------

    def get_product(self, product_id: str) -> Optional[ProductOut]:
        return self._get(ProductOut, product_id)

    def get_products_by_store(self, store_id: str) -> List[ProductOut]:
        return self._find(ProductOut, store_id=store_id)

    def get_products_by_user(self, user_id: str) -> List[ProductOut]:
        """Products of every store the user owns."""
        products: List[ProductOut] = []
        for store in self.get_stores_by_owner(user_id):
            products.extend(self.get_products_by_store(store.id))
        return ordered(products)

    def list_products(self) -> List[ProductOut]:
        return self._find(ProductOut)

    def _check_store_exists(self, store_id: str) -> None:
        if self.get_store(store_id) is None:
            raise IntegrityViolation("Store does not exist")

    def create_product(self, data: ProductCreate) -> ProductOut:
        with self._atomic():
            self._check_store_exists(data.store_id)
            return self._insert(ProductOut, data)

    def update_product(self, product_id: str, updates: Mapping[str, Any]) -> Optional[ProductOut]:
        with self._atomic():
            if "store_id" in updates:
                self._check_store_exists(updates["store_id"])
            return self._update(ProductOut, product_id, updates)

    def delete_product(self, product_id: str) -> bool:
        with self._atomic():
            return self._delete(ProductOut, product_id)

    # -- orders ------------------------------------------------------------

    def get_order(self, order_id: str) -> Optional[OrderOut]:
        return self._get(OrderOut, order_id)

    def get_order_by_number(self, order_number: str) -> Optional[OrderOut]:
        matches = self._find(OrderOut, order_number=order_number)
        return matches[0] if matches else None

    def get_orders_by_customer(self, customer_id: str) -> List[OrderOut]:
        return self._find(OrderOut, customer_id=customer_id)

    def get_orders_by_store(self, store_id: str) -> List[OrderOut]:
        return self._find(OrderOut, store_id=store_id)

    def get_orders_by_merchant(self, merchant_id: str) -> List[OrderOut]:
        """Orders placed with any store the merchant owns."""
        orders: List[OrderOut] = []
        for store in self.get_stores_by_owner(merchant_id):
            orders.extend(self.get_orders_by_store(store.id))
        return ordered(orders)

    def list_orders(self) -> List[OrderOut]:
        return self._find(OrderOut)

    def _check_order_refs(self, store_id: Optional[str], customer_id: Optional[str]) -> None:
        if store_id is not None:
            self._check_store_exists(store_id)
        if customer_id is not None and self.get_user(customer_id) is None:
            raise IntegrityViolation("Customer does not exist")

    def create_order(self, data: OrderCreate) -> OrderOut:
        with self._atomic():
            self._check_order_refs(data.store_id, data.customer_id)
            if self.get_order_by_number(data.order_number) is not None:
                raise IntegrityViolation("Order number already exists")
            return self._insert(OrderOut, data)

    def update_order(self, order_id: str, updates: Mapping[str, Any]) -> Optional[OrderOut]:
        """Generic partial update; status transitions are not checked here."""
        with self._atomic():
            self._check_order_refs(updates.get("store_id"), updates.get("customer_id"))
            number = updates.get("order_number")
            if number is not None:
                existing = self.get_order_by_number(number)
                if existing and existing.id != order_id:
                    raise IntegrityViolation("Order number already exists")
            return self._update(OrderOut, order_id, updates)

    def delete_order(self, order_id: str) -> bool:
        with self._atomic():
            return self._delete(OrderOut, order_id)

    # -- restaurants -------------------------------------------------------

    def _check_user_exists(self, user_id: str) -> None:
        if self.get_user(user_id) is None:
            raise IntegrityViolation("User does not exist")

    def get_restaurant(self, restaurant_id: str) -> Optional[RestaurantOut]:
        return self._get(RestaurantOut, restaurant_id)

    def get_restaurants_by_owner(self, owner_id: str) -> List[RestaurantOut]:
        return self._find(RestaurantOut, owner_id=owner_id)

    def list_restaurants(
        self,
        search: Optional[str] = None,
        cuisine: Optional[str] = None,
        active_only: bool = True,
    ) -> List[RestaurantOut]:
        restaurants = self._find(RestaurantOut, is_active=True) if active_only else self._find(RestaurantOut)
        if cuisine:
            restaurants = [r for r in restaurants if r.cuisine == cuisine]
        if search:
            needle = search.casefold()
            restaurants = [
                r for r in restaurants
                if any(needle in (text or "").casefold() for text in (r.name, r.description, r.address))
            ]
        return restaurants

    def create_restaurant(self, data: RestaurantCreate) -> RestaurantOut:
        with self._atomic():
            self._check_user_exists(data.owner_id)
            return self._insert(RestaurantOut, data)

    def update_restaurant(self, restaurant_id: str, updates: Mapping[str, Any]) -> Optional[RestaurantOut]:
        with self._atomic():
            if "owner_id" in updates:
                self._check_user_exists(updates["owner_id"])
            return self._update(RestaurantOut, restaurant_id, updates)

    def delete_restaurant(self, restaurant_id: str) -> bool:
        with self._atomic():
            return self._delete(RestaurantOut, restaurant_id)

    # -- jobs --------------------------------------------------------------

    def get_job(self, job_id: str) -> Optional[JobOut]:
        return self._get(JobOut, job_id)

    def get_jobs_by_poster(self, poster_id: str) -> List[JobOut]:
        return self._find(JobOut, poster_id=poster_id)

    def list_jobs(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        job_type: Optional[str] = None,
        active_only: bool = True,
    ) -> List[JobOut]:
        jobs = self._find(JobOut, is_active=True) if active_only else self._find(JobOut)
        if category:
            jobs = [j for j in jobs if j.category == category]
        if job_type:
            jobs = [j for j in jobs if j.job_type == job_type]
        if search:
            needle = search.casefold()
            jobs = [
                j for j in jobs
                if any(needle in text.casefold() for text in (j.title, j.description, j.company, j.location))
            ]
        return jobs

    def create_job(self, data: JobCreate) -> JobOut:
        with self._atomic():
            self._check_user_exists(data.poster_id)
            return self._insert(JobOut, data)

    def update_job(self, job_id: str, updates: Mapping[str, Any]) -> Optional[JobOut]:
        with self._atomic():
            if "poster_id" in updates:
                self._check_user_exists(updates["poster_id"])
            return self._update(JobOut, job_id, updates)

    def delete_job(self, job_id: str) -> bool:
        with self._atomic():
            return self._delete(JobOut, job_id)

    # -- ads ---------------------------------------------------------------

    def get_ad(self, ad_id: str) -> Optional[AdOut]:
        return self._get(AdOut, ad_id)

    def get_ads_by_poster(self, poster_id: str) -> List[AdOut]:
        return self._find(AdOut, poster_id=poster_id)

    def list_ads(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        ad_type: Optional[str] = None,
        active_only: bool = True,
    ) -> List[AdOut]:
        ads = self._find(AdOut, is_active=True) if active_only else self._find(AdOut)
        if category:
            ads = [a for a in ads if a.category == category]
        if ad_type:
            ads = [a for a in ads if a.type == ad_type]
        if search:
            needle = search.casefold()
            ads = [
                a for a in ads
                if any(
                    needle in (text or "").casefold()
                    for text in (a.title, a.description, a.location, a.contact_name)
                )
            ]
        # Premium ads are listed first
        return sorted(ads, key=lambda ad: not ad.is_premium)

    def create_ad(self, data: AdCreate) -> AdOut:
        with self._atomic():
            self._check_user_exists(data.poster_id)
            return self._insert(AdOut, data)

    def update_ad(self, ad_id: str, updates: Mapping[str, Any]) -> Optional[AdOut]:
        with self._atomic():
            if "poster_id" in updates:
                self._check_user_exists(updates["poster_id"])
            return self._update(AdOut, ad_id, updates)

    def delete_ad(self, ad_id: str) -> bool:
        with self._atomic():
            return self._delete(AdOut, ad_id)

    # -- aggregates --------------------------------------------------------

    def get_dashboard_stats(self, user_id: str) -> DashboardStats:
        """Totals over every store the user owns, recomputed on each call."""
        by_status = {status: 0 for status in ORDER_STATUSES}
        store_count = total_products = active_products = total_orders = 0
        total_sales = Decimal("0.00")

        for store in self.get_stores_by_owner(user_id):
            orders = self.get_orders_by_store(store.id)
            products = self.get_products_by_store(store.id)
            store_count += 1
            total_orders += len(orders)
            total_products += len(products)
            active_products += sum(1 for product in products if product.is_active)
            for order in orders:
                by_status[order.status] += 1
            total_sales += order_revenue(orders)

        return DashboardStats(
            store_count=store_count,
            total_products=total_products,
            active_products=active_products,
            total_orders=total_orders,
            orders_by_status=by_status,
            total_sales=total_sales.quantize(CENTS),
        )

    def get_total_revenue(self, user_id: str) -> Decimal:
        return self.get_dashboard_stats(user_id).total_sales

    def get_platform_stats(self) -> PlatformStats:
        users = self.list_users()
        stores = self.list_stores()
        orders = self.list_orders()

        users_by_role: Dict[str, int] = {"customer": 0, "merchant": 0, "admin": 0}
        for user in users:
            users_by_role[user.role] += 1
        by_status = {status: 0 for status in ORDER_STATUSES}
        for order in orders:
            by_status[order.status] += 1

        return PlatformStats(
            total_users=len(users),
            users_by_role=users_by_role,
            total_stores=len(stores),
            active_stores=sum(1 for store in stores if store.is_active),
            total_products=len(self.list_products()),
            total_orders=len(orders),
            orders_by_status=by_status,
            total_revenue=order_revenue(orders),
        )
