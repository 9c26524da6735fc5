"""Dependency injection for services."""
from typing import Any
from fastapi import Depends, Request
from pymongo.database import Database

from database import get_db
from services.account_service import AccountService
from services.cart_service import CartService
from services.catalog_service import CatalogService


def get_image_storage(request: Request) -> Any:
    """Get the configured image storage backend from app state."""
    return request.app.state.image_storage


def get_catalog_service(db: Database = Depends(get_db)) -> CatalogService:
    """Get catalog service instance."""
    return CatalogService(db)


def get_account_service(db: Database = Depends(get_db)) -> AccountService:
    """Get account service instance."""
    return AccountService(db)


def get_cart_service(db: Database = Depends(get_db)) -> CartService:
    """Get cart service instance."""
    return CartService(db)
