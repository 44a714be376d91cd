from typing import Any, Dict, Iterable, List, Optional, Type

from pydantic import BaseModel
from sqlalchemy import JSON, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from core.db import Base, SessionLocal, db_session
from core.logging import get_logger
from models.ad import Ad
from models.job import Job
from models.order import Order
from models.product import Product
from models.restaurant import Restaurant
from models.store import Store
from models.user import User
from schemas.ad import AdOut
from schemas.job import JobOut
from schemas.order import OrderOut
from schemas.product import ProductOut
from schemas.restaurant import RestaurantOut
from schemas.store import StoreOut
from schemas.users import UserRecord
from storage.base import R, Storage
from storage.errors import IntegrityViolation

logger = get_logger(__name__)

_MODELS: Dict[type, Type[Base]] = {
    UserRecord: User,
    StoreOut: Store,
    ProductOut: Product,
    OrderOut: Order,
    RestaurantOut: Restaurant,
    JobOut: Job,
    AdOut: Ad,
}


def _column_values(model: Type[Base], data: BaseModel, fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """Map schema fields onto table columns. JSON columns get JSON-safe values."""
    python_values = data.model_dump()
    json_values = data.model_dump(mode="json")
    wanted = set(fields) if fields is not None else None
    values = {}
    for column in model.__table__.columns:
        name = column.key
        if name not in python_values or (wanted is not None and name not in wanted):
            continue
        values[name] = json_values[name] if isinstance(column.type, JSON) else python_values[name]
    return values


class DatabaseStorage(Storage):
    """SQLAlchemy-backed storage. Every call runs in its own session."""

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self._session_factory = session_factory

    def _session(self):
        return db_session(self._session_factory)

    def _get(self, record_type: Type[R], record_id: str) -> Optional[R]:
        with self._session() as db:
            row = db.get(_MODELS[record_type], record_id)
            return record_type.model_validate(row) if row is not None else None

    def _find(self, record_type: Type[R], **filters: Any) -> List[R]:
        model = _MODELS[record_type]
        stmt = select(model).filter_by(**filters).order_by(model.created_at, model.id)
        with self._session() as db:
            return [record_type.model_validate(row) for row in db.scalars(stmt)]

    def _insert(self, record_type: Type[R], data: BaseModel) -> R:
        model = _MODELS[record_type]
        try:
            with self._session() as db:
                row = model(**_column_values(model, data))
                db.add(row)
                db.flush()
                return record_type.model_validate(row)
        except IntegrityError as exc:
            logger.warning("Rejected %s insert: %s", model.__tablename__, exc.orig)
            raise IntegrityViolation(f"Could not create {model.__tablename__} record") from exc

    def _save(self, record: R, fields: Iterable[str]) -> Optional[R]:
        record_type = type(record)
        model = _MODELS[record_type]
        try:
            with self._session() as db:
                row = db.get(model, record.id)
                if row is None:
                    return None
                for key, value in _column_values(model, record, fields).items():
                    setattr(row, key, value)
                db.flush()
                return record_type.model_validate(row)
        except IntegrityError as exc:
            logger.warning("Rejected %s update: %s", model.__tablename__, exc.orig)
            raise IntegrityViolation(f"Could not update {model.__tablename__} record") from exc

    def _delete(self, record_type: Type[BaseModel], record_id: str) -> bool:
        model = _MODELS[record_type]
        try:
            with self._session() as db:
                row = db.get(model, record_id)
                if row is None:
                    return False
                db.delete(row)
                return True
        except IntegrityError as exc:
            raise IntegrityViolation(f"Could not delete {model.__tablename__} record") from exc

    # Joins are cheaper in SQL than walking stores one by one

    def get_products_by_user(self, user_id: str) -> List[ProductOut]:
        stmt = (
            select(Product)
            .join(Store, Product.store_id == Store.id)
            .where(Store.owner_id == user_id)
            .order_by(Product.created_at, Product.id)
        )
        with self._session() as db:
            return [ProductOut.model_validate(row) for row in db.scalars(stmt)]

    def get_orders_by_merchant(self, merchant_id: str) -> List[OrderOut]:
        stmt = (
            select(Order)
            .join(Store, Order.store_id == Store.id)
            .where(Store.owner_id == merchant_id)
            .order_by(Order.created_at, Order.id)
        )
        with self._session() as db:
            return [OrderOut.model_validate(row) for row in db.scalars(stmt)]
