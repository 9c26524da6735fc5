"""Cart management service."""
import logging
from typing import Dict
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.database import Database
from opentelemetry import trace

from config import CART_SIZE
from errors import InternalError
from models import USERS
from monitoring import cart_updates_counter

logger = logging.getLogger(__name__)


class CartService:
    """
    Service for per-user cart quantities.

    A cart is a fixed map of slot index to quantity stored on the user
    document. Slots are updated with single-document atomic operators, so
    concurrent requests for the same user do not overwrite each other.
    """

    def __init__(self, db: Database, cart_size: int = CART_SIZE):
        """
        Initialize cart service.

        Args:
            db: Database handle
            cart_size: Number of slots in a cart
        """
        self.users = db[USERS]
        self.cart_size = cart_size
        self.tracer = trace.get_tracer(__name__)

    def _user_filter(self, user_id: str) -> Dict[str, ObjectId]:
        try:
            return {"_id": ObjectId(user_id)}
        except (InvalidId, TypeError):
            logger.error("Token carries a malformed user id", extra={"user_id": user_id})
            raise InternalError()

    def _slot(self, item_id: int) -> str:
        if not 0 <= item_id < self.cart_size:
            raise ValueError(f"itemId must be between 0 and {self.cart_size - 1}")
        return f"cartData.{item_id}"

    def _user_missing(self, user_id: str) -> InternalError:
        logger.error("Cart owner not found", extra={"user_id": user_id})
        return InternalError()

    def add_item(self, user_id: str, item_id: int) -> None:
        """
        Increment a cart slot by one.

        Raises:
            ValueError: If item_id is outside the cart
            InternalError: If the user no longer exists
        """
        slot = self._slot(item_id)
        with self.tracer.start_as_current_span("db.query.increment_cart_slot") as db_span:
            db_span.set_attribute("db.operation", "UPDATE")
            db_span.set_attribute("db.collection", USERS)
            db_span.set_attribute("cart.item_id", item_id)

            result = self.users.update_one(self._user_filter(user_id), {"$inc": {slot: 1}})

        if result.matched_count == 0:
            raise self._user_missing(user_id)

        cart_updates_counter.add(1, {"operation": "add"})
        logger.info("Added item to cart", extra={"user_id": user_id, "item_id": item_id})

    def remove_item(self, user_id: str, item_id: int) -> None:
        """
        Decrement a cart slot by one, never below zero.

        Raises:
            ValueError: If item_id is outside the cart
            InternalError: If the user no longer exists
        """
        slot = self._slot(item_id)
        user_filter = self._user_filter(user_id)
        with self.tracer.start_as_current_span("db.query.decrement_cart_slot") as db_span:
            db_span.set_attribute("db.operation", "UPDATE")
            db_span.set_attribute("db.collection", USERS)
            db_span.set_attribute("cart.item_id", item_id)

            result = self.users.update_one(
                {**user_filter, slot: {"$gt": 0}},
                {"$inc": {slot: -1}}
            )
            db_span.set_attribute("db.rows_affected", result.modified_count)

        if result.matched_count == 0:
            # Either the slot was already zero or the user is gone
            if self.users.count_documents(user_filter, limit=1) == 0:
                raise self._user_missing(user_id)
            logger.debug("Cart slot already empty", extra={"user_id": user_id, "item_id": item_id})
            return

        cart_updates_counter.add(1, {"operation": "remove"})
        logger.info("Removed item from cart", extra={"user_id": user_id, "item_id": item_id})

    def get_cart(self, user_id: str) -> Dict[str, int]:
        """
        Get the user's full cart map.

        Raises:
            InternalError: If the user no longer exists
        """
        with self.tracer.start_as_current_span("db.query.get_cart") as db_span:
            db_span.set_attribute("db.operation", "SELECT")
            db_span.set_attribute("db.collection", USERS)

            user = self.users.find_one(self._user_filter(user_id), {"cartData": 1})

        if user is None:
            raise self._user_missing(user_id)
        return user.get("cartData", {})
