"""Database connection and collection setup."""
from fastapi import Request
from pymongo import MongoClient, ASCENDING
from pymongo.database import Database
from pymongo.errors import OperationFailure
from typing import List
import logging

from config import MONGO_URI, MONGO_DB_NAME
from models import PRODUCTS, USERS, COUNTERS, PRODUCT_ID_COUNTER

logger = logging.getLogger(__name__)


def create_client(uri: str = MONGO_URI) -> MongoClient:
    """
    Create a MongoDB client.

    The driver owns the connection pool; this only sets the pool limits.
    """
    return MongoClient(
        uri,
        maxPoolSize=20,
        serverSelectionTimeoutMS=5000,
        tz_aware=True
    )


def get_db(request: Request) -> Database:
    """
    Dependency for getting the database handle.

    Returns:
        Database attached to the application at startup
    """
    return request.app.state.db


def duplicate_product_ids(db: Database) -> List[int]:
    """Product ids stored on more than one document."""
    pipeline = [
        {"$group": {"_id": "$id", "count": {"$sum": 1}}},
        {"$match": {"count": {"$gt": 1}}},
    ]
    return sorted(row["_id"] for row in db[PRODUCTS].aggregate(pipeline))


def init_db(db: Database) -> None:
    """Create indexes and seed the product id counter."""
    db[USERS].create_index([("email", ASCENDING)], unique=True)
    try:
        db[PRODUCTS].create_index([("id", ASCENDING)], unique=True)
    except OperationFailure:
        # Catalogs written before the id counter may repeat ids; the counter
        # keeps new ids unique, so index without the constraint and carry on
        logger.warning("Duplicate product ids found, product id index is not unique", extra={
            "duplicate_ids": duplicate_product_ids(db)
        })
        db[PRODUCTS].create_index([("id", ASCENDING)])
    db[PRODUCTS].create_index([("category", ASCENDING)])

    # Counter never falls behind ids that already exist
    last = db[PRODUCTS].find_one({}, {"id": 1}, sort=[("id", -1)])
    max_id = last["id"] if last else 0
    db[COUNTERS].update_one(
        {"_id": PRODUCT_ID_COUNTER},
        {"$max": {"seq": max_id}},
        upsert=True
    )
    logger.info("Database initialized", extra={
        "database": db.name,
        "max_product_id": max_id
    })
