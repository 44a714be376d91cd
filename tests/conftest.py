"""
Shared fixtures.
Every storage-backed fixture runs once against the in-memory backend and once
against SQLAlchemy on an in-memory SQLite database.
"""
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

import models  # noqa: F401
from core.access import get_storage
from core.db import Base, create_db_engine, create_session_factory
from main import app
from schemas.order import OrderCreate, OrderItem
from schemas.product import ProductCreate
from schemas.store import StoreCreate, default_store_settings
from schemas.users import UserCreate
from security import jwt as jwt_utils
from security.password import hash_password
from storage.database import DatabaseStorage
from storage.memory import MemoryStorage


@pytest.fixture(params=["memory", "database"])
def storage(request):
    if request.param == "memory":
        yield MemoryStorage()
        return
    engine = create_db_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    yield DatabaseStorage(create_session_factory(engine))
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(storage):
    """Test client wired to the parameterized storage."""
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create_user(storage, username, role="customer", password="password123", **fields):
    data = {
        "username": username,
        "email": f"{username}@example.com",
        "password_hash": hash_password(password),
        "full_name": username.title(),
        "role": role,
        **fields,
    }
    return storage.create_user(UserCreate(**data))


def _create_order(storage, customer, store, total, status="pending", number=None, product=None):
    items = []
    if product is not None:
        items.append(OrderItem(product_id=product.id, quantity=1, price=total))
    return storage.create_order(
        OrderCreate(
            order_number=number or f"ORD-{len(storage.list_orders()) + 1:08d}",
            customer_id=customer.id,
            store_id=store.id,
            status=status,
            total_amount=Decimal(total),
            items=items,
        )
    )


def _auth_headers(user):
    return {"Authorization": f"Bearer {jwt_utils.create_access_token(user.id, user.role)}"}


@pytest.fixture
def customer(storage):
    return _create_user(storage, "customer", city="Omdurman")


@pytest.fixture
def merchant(storage):
    return _create_user(storage, "merchant", role="merchant", city="Khartoum")


@pytest.fixture
def admin(storage):
    return _create_user(storage, "admin", role="admin")


@pytest.fixture
def store(storage, merchant):
    settings = default_store_settings()
    settings["category"] = "food"
    return storage.create_store(
        StoreCreate(name="Nile Sweets", description="Sudanese sweets", owner_id=merchant.id, settings=settings)
    )


@pytest.fixture
def product(storage, store):
    return storage.create_product(
        ProductCreate(store_id=store.id, name="Aqlami", price=Decimal("8.00"), category="Sweets", stock=10)
    )


@pytest.fixture
def customer_headers(customer):
    return _auth_headers(customer)


@pytest.fixture
def merchant_headers(merchant):
    return _auth_headers(merchant)


@pytest.fixture
def admin_headers(admin):
    return _auth_headers(admin)


@pytest.fixture
def make_user(storage):
    """Factory for extra users: ``make_user("bob", role="merchant")``."""
    return lambda username, **kwargs: _create_user(storage, username, **kwargs)


@pytest.fixture
def make_order(storage):
    """Factory for orders inserted straight into storage, bypassing the lifecycle."""
    return lambda customer, store, total, **kwargs: _create_order(storage, customer, store, total, **kwargs)


@pytest.fixture
def headers_for():
    return _auth_headers
