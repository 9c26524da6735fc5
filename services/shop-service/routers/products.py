"""Products API router."""
import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from typing import List

from dependencies import get_catalog_service
from schemas import ProductCreate, ProductRemove, ProductResponse, ProductChangeResponse
from services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["products"])


@router.post("/addproduct", response_model=ProductChangeResponse)
def add_product(
    request: ProductCreate,
    catalog: CatalogService = Depends(get_catalog_service)
):
    """Add a product; the id is assigned by the server."""
    catalog.add_product(
        name=request.name,
        image=request.image,
        category=request.category,
        new_price=request.new_price,
        old_price=request.old_price
    )
    return {"success": True, "name": request.name}


@router.post("/removeproduct", response_model=ProductChangeResponse)
def remove_product(
    request: ProductRemove,
    catalog: CatalogService = Depends(get_catalog_service)
):
    """
    Remove a product by id.

    Responds the same way whether or not a product matched.
    """
    catalog.remove_product(request.id)
    return {"success": True, "name": request.name}


@router.get("/allproducts", response_model=List[ProductResponse])
def all_products(catalog: CatalogService = Depends(get_catalog_service)):
    """List every product."""
    try:
        products = catalog.list_all()
    except PyMongoError:
        logger.exception("Error fetching all products")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    logger.info("All products fetched", extra={"count": len(products)})
    return products


@router.get("/newcollections", response_model=List[ProductResponse])
def new_collections(catalog: CatalogService = Depends(get_catalog_service)):
    """Last products added, in store order."""
    return catalog.list_newest()


@router.get("/popularproducts", response_model=List[ProductResponse])
def popular_products(catalog: CatalogService = Depends(get_catalog_service)):
    """First few products of the featured category."""
    return catalog.list_popular()
