"""Product catalog service."""
import logging
from typing import List, Dict, Any
from pymongo import ReturnDocument
from pymongo.database import Database
from opentelemetry import trace

from config import NEW_COLLECTION_SIZE, POPULAR_CATEGORY, POPULAR_LIMIT
from models import Product, PRODUCTS, COUNTERS, PRODUCT_ID_COUNTER
from monitoring import product_additions_counter, product_removals_counter

logger = logging.getLogger(__name__)

# Mongo's _id is internal; callers address products by "id"
PUBLIC_FIELDS = {"_id": 0}


class CatalogService:
    """Service for managing the product catalog."""

    def __init__(self, db: Database):
        """
        Initialize catalog service.

        Args:
            db: Database handle
        """
        self.products = db[PRODUCTS]
        self.counters = db[COUNTERS]
        self.tracer = trace.get_tracer(__name__)

    def next_product_id(self) -> int:
        """
        Allocate the next product id.

        The counter is incremented atomically, so concurrent callers never
        receive the same id.
        """
        with self.tracer.start_as_current_span("db.query.next_product_id") as db_span:
            db_span.set_attribute("db.operation", "findAndModify")
            db_span.set_attribute("db.collection", COUNTERS)

            counter = self.counters.find_one_and_update(
                {"_id": PRODUCT_ID_COUNTER},
                {"$inc": {"seq": 1}},
                upsert=True,
                return_document=ReturnDocument.AFTER
            )
            return counter["seq"]

    def add_product(
        self,
        name: str,
        image: str,
        category: str,
        new_price: float,
        old_price: float
    ) -> Dict[str, Any]:
        """
        Add a product to the catalog.

        Args:
            name: Product name
            image: Image URL returned by the upload endpoint
            category: Product category
            new_price: Current price
            old_price: Previous price

        Returns:
            The stored product
        """
        product = Product(
            id=self.next_product_id(),
            name=name,
            image=image,
            category=category,
            new_price=new_price,
            old_price=old_price
        )
        document = product.model_dump()

        with self.tracer.start_as_current_span("db.query.insert_product") as db_span:
            db_span.set_attribute("db.operation", "INSERT")
            db_span.set_attribute("db.collection", PRODUCTS)
            db_span.set_attribute("product.id", product.id)

            # insert_one adds _id to the dict it is given
            self.products.insert_one(dict(document))

        product_additions_counter.add(1, {"category": category})
        logger.info("Product added", extra={
            "product_id": product.id,
            "product_name": name,
            "category": category
        })
        return document

    def remove_product(self, product_id: int) -> int:
        """
        Remove a product by id.

        Returns:
            Number of removed products, 0 when nothing matched
        """
        with self.tracer.start_as_current_span("db.query.delete_product") as db_span:
            db_span.set_attribute("db.operation", "DELETE")
            db_span.set_attribute("db.collection", PRODUCTS)
            db_span.set_attribute("product.id", product_id)

            result = self.products.delete_one({"id": product_id})
            db_span.set_attribute("db.rows_affected", result.deleted_count)

        product_removals_counter.add(1, {"found": str(bool(result.deleted_count)).lower()})
        logger.info("Product removed", extra={
            "product_id": product_id,
            "deleted": result.deleted_count
        })
        return result.deleted_count

    def list_all(self) -> List[Dict[str, Any]]:
        """Return every product in store order."""
        with self.tracer.start_as_current_span("db.query.get_products") as db_span:
            db_span.set_attribute("db.operation", "SELECT")
            db_span.set_attribute("db.collection", PRODUCTS)

            products = list(self.products.find({}, PUBLIC_FIELDS))
            db_span.set_attribute("db.rows_returned", len(products))

        return products

    def list_newest(self, n: int = NEW_COLLECTION_SIZE) -> List[Dict[str, Any]]:
        """
        Return the last ``n`` products in store order.

        The result is tail-sliced, not sorted by date.
        """
        products = self.list_all()
        return products[-n:] if n > 0 else []

    def list_popular(
        self,
        category: str = POPULAR_CATEGORY,
        limit: int = POPULAR_LIMIT
    ) -> List[Dict[str, Any]]:
        """Return the first ``limit`` products of a category in store order."""
        with self.tracer.start_as_current_span("db.query.get_popular_products") as db_span:
            db_span.set_attribute("db.operation", "SELECT")
            db_span.set_attribute("db.collection", PRODUCTS)
            db_span.set_attribute("product.category", category)

            products = list(self.products.find({"category": category}, PUBLIC_FIELDS).limit(limit))
            db_span.set_attribute("db.rows_returned", len(products))

        return products
