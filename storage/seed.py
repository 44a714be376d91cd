"""Demo accounts and catalog used in development and by the seeding script."""
from datetime import timedelta
from decimal import Decimal

from core.db import utcnow
from core.logging import get_logger
from schemas.ad import AdCreate
from schemas.job import JobCreate
from schemas.order import OrderCreate, OrderItem
from schemas.product import ProductCreate
from schemas.restaurant import RestaurantCreate
from schemas.store import StoreCreate, default_store_settings
from schemas.users import UserCreate
from security.password import hash_password
from storage.base import Storage

logger = get_logger(__name__)

DEMO_ADMIN = ("admin", "admin123")
DEMO_MERCHANT = ("merchant", "merchant123")
DEMO_CUSTOMER = ("customer", "customer123")


def seed_demo_data(storage: Storage) -> bool:
    """Populate an empty storage. Returns ``False`` when already seeded."""
    if storage.get_user_by_username(DEMO_ADMIN[0]) is not None:
        logger.info("Demo data already present, skipping seed")
        return False

    admin = storage.create_user(UserCreate(
        username=DEMO_ADMIN[0],
        email="admin@bayt-sudani.com",
        password_hash=hash_password(DEMO_ADMIN[1]),
        full_name="System Administrator",
        phone="+966501234567",
        country="Saudi Arabia",
        city="Riyadh",
        role="admin",
    ))
    merchant = storage.create_user(UserCreate(
        username=DEMO_MERCHANT[0],
        email="merchant@bayt-sudani.com",
        password_hash=hash_password(DEMO_MERCHANT[1]),
        full_name="Ahmed Mohamed",
        phone="+966501234568",
        country="Sudan",
        city="Khartoum",
        role="merchant",
    ))
    customer = storage.create_user(UserCreate(
        username=DEMO_CUSTOMER[0],
        email="customer@bayt-sudani.com",
        password_hash=hash_password(DEMO_CUSTOMER[1]),
        full_name="Sara Ali",
        country="Sudan",
        city="Omdurman",
    ))

    settings = default_store_settings()
    settings["category"] = "food-fragrance"
    store = storage.create_store(StoreCreate(
        name="Aqlami Sweets",
        description="Authentic Sudanese products: sweets, perfumes and incense",
        owner_id=merchant.id,
        settings=settings,
    ))

    products = [
        storage.create_product(ProductCreate(
            store_id=store.id,
            name="Strawberry aqlami, medium",
            description="Fresh strawberry aqlami made the traditional Sudanese way",
            price=Decimal("8.00"),
            category="Sweets",
            stock=50,
        )),
        storage.create_product(ProductCreate(
            store_id=store.id,
            name="Sudanese sandalwood perfume",
            description="Pure sandalwood oil from Sudanese trees",
            price=Decimal("25.00"),
            category="Perfumes",
            stock=30,
        )),
        storage.create_product(ProductCreate(
            store_id=store.id,
            name="Dukhan incense",
            description="Traditional Sudanese incense blend",
            price=Decimal("15.00"),
            category="Incense",
            stock=20,
        )),
    ]

    statuses = ["pending", "confirmed", "shipped", "delivered", "delivered"]
    for number, status in enumerate(statuses, start=1):
        product = products[number % len(products)]
        quantity = number % 3 + 1
        storage.create_order(OrderCreate(
            order_number=f"ORD-{number:03d}",
            customer_id=customer.id,
            store_id=store.id,
            status=status,
            total_amount=product.price * quantity,
            items=[OrderItem(product_id=product.id, quantity=quantity, price=product.price)],
            shipping_address={"city": "Khartoum", "country": "Sudan"},
        ))

    storage.create_restaurant(RestaurantCreate(
        name="Al Sharqa Sudanese Restaurant",
        description="Traditional Sudanese dishes",
        cuisine="Sudanese",
        address="King Fahd Road, Riyadh",
        phone="+966501234567",
        email="sharqa@restaurants.com",
        rating=Decimal("4.5"),
        open_hours="12:00 - 23:00",
        delivery_price=Decimal("10.00"),
        min_order_amount=Decimal("30.00"),
        owner_id=merchant.id,
    ))
    storage.create_restaurant(RestaurantCreate(
        name="Blue Nile Grill",
        description="Fish and Sudanese grills",
        cuisine="Grills",
        address="Al Olaya, Riyadh",
        phone="+966501234568",
        email="bluenile@restaurants.com",
        rating=Decimal("4.2"),
        open_hours="14:00 - 00:00",
        delivery_price=Decimal("15.00"),
        min_order_amount=Decimal("50.00"),
        owner_id=admin.id,
    ))

    storage.create_job(JobCreate(
        title="Mobile application developer",
        description="Build React Native and Flutter apps for a growing technology company.",
        company="Advanced Technologies Co.",
        location="Riyadh, Saudi Arabia",
        job_type="full-time",
        category="Information technology",
        salary="8000 - 12000 SAR",
        requirements="Three years of mobile development, React Native or Flutter",
        benefits="Health insurance, paid leave",
        contact_email="jobs@techcompany.com",
        contact_phone="+966501234567",
        expires_at=utcnow() + timedelta(days=30),
        poster_id=admin.id,
    ))

    storage.create_ad(AdCreate(
        title="Furnished apartment for rent",
        description="Three bedrooms, two bathrooms, close to services and transport.",
        category="Real estate",
        type="rent",
        price=Decimal("2500.00"),
        location="Riyadh - Al Malqa",
        contact_name="Ahmed Al Saad",
        contact_phone="+966501234570",
        contact_email="ahmed.saad@email.com",
        is_premium=True,
        expires_at=utcnow() + timedelta(days=60),
        poster_id=merchant.id,
    ))

    logger.info("Seeded demo data: admin, merchant, customer and store %s", store.id)
    return True
