"""
order_store.py — Persistent Order Storage

Orders are stored write-once in a single SQLite table:

    orders(id TEXT PRIMARY KEY, payload TEXT NOT NULL, createdAt TEXT NOT NULL)

`payload` holds the complete order serialized as JSON, so a read returns
exactly what the create call returned. There is no update or delete.
"""

import json
import math
import numbers
import uuid
from datetime import datetime, timezone
from typing import Any, List

from pydantic import ValidationError
from sqlalchemy import Column, String, Text, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from .errors import OrderNotFoundError, OrderValidationError, StorageError
from .logging_config import get_logger
from .models import Order

log = get_logger(__name__)


class Base(DeclarativeBase):
    pass


# Defines the ORM model for an order row in the database.
class OrderRecord(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True)
    payload = Column(Text, nullable=False)  # JSON-serialized Order
    created_at = Column("createdAt", Text, nullable=False)


class OrderStore:
    """
    Creates and reads orders.

    Each call opens its own session; there is no transaction spanning calls.
    Database failures surface as `StorageError` and are not retried.
    """

    def __init__(self, db_url: str):
        self.engine = create_engine(db_url, connect_args={"check_same_thread": False})
        self.Session = sessionmaker(bind=self.engine, expire_on_commit=False)

    def init(self):
        """Creates the orders table if it does not exist yet."""
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            log.critical(f"Orders-Tabelle konnte nicht angelegt werden: {e}")
            raise StorageError("db error") from e

    def close(self):
        self.engine.dispose()

    @staticmethod
    def validate(order_items: Any, total_amount: Any):
        """
        Raises:
            OrderValidationError: If `order_items` is not a non-empty list or
                `total_amount` is not a finite number >= 0.
        """
        if not isinstance(order_items, list) or len(order_items) == 0:
            raise OrderValidationError("orderItems required")
        # bool is an int subclass but not an amount
        if isinstance(total_amount, bool) or not isinstance(total_amount, numbers.Real) or total_amount < 0:
            raise OrderValidationError("totalAmount must be >= 0")
        # JSON serializes inf/nan as null
        if isinstance(total_amount, float) and not math.isfinite(total_amount):
            raise OrderValidationError("totalAmount must be finite")

    def create(self, order_items: List[Any], total_amount: float) -> Order:
        """
        Validates and stores a new order with status "pending".

        Args:
            order_items (list): Line items, at least one.
            total_amount (float): Total order value, >= 0.

        Returns:
            Order: The stored order including its generated id and timestamp.

        Raises:
            OrderValidationError: On invalid input; nothing is written.
            StorageError: If the insert fails.
        """
        self.validate(order_items, total_amount)

        order = Order(
            id=str(uuid.uuid4()),
            orderItems=order_items,
            totalAmount=total_amount,
            status="pending",
            createdAt=datetime.now(timezone.utc).isoformat(),
        )
        record = OrderRecord(id=order.id, payload=order.model_dump_json(), created_at=order.createdAt)

        log_prefix = f"[Order: {order.id}]"
        try:
            with self.Session.begin() as session:
                session.add(record)
        except SQLAlchemyError as e:
            log.error(f"{log_prefix} DB-Fehler beim Speichern: {e}")
            raise StorageError("db error") from e

        log.info(f"{log_prefix} Bestellung angelegt ({len(order_items)} Position(en), Summe {total_amount}).")
        return order

    def get(self, order_id: str) -> Order:
        """
        Returns the stored order.

        Raises:
            OrderNotFoundError: If no order has this id.
            StorageError: If the read fails.
        """
        try:
            with self.Session() as session:
                record = session.get(OrderRecord, order_id)
        except SQLAlchemyError as e:
            log.error(f"[Order: {order_id}] DB-Fehler beim Lesen: {e}")
            raise StorageError("db error") from e

        if record is None:
            raise OrderNotFoundError(order_id)
        try:
            return Order.model_validate(json.loads(record.payload))
        except (ValueError, ValidationError) as e:
            log.error(f"[Order: {order_id}] Gespeicherte Bestellung ist beschädigt: {e}")
            raise StorageError("db error") from e
