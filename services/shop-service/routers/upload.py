"""Image upload API router."""
import logging
import httpx
from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from config import UPLOAD_FIELD
from dependencies import get_image_storage
from schemas import UploadResponse
from services.image_storage import ImageHostError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["upload"])


@router.post("/upload", response_model=UploadResponse)
async def upload_image(
    request: Request,
    product: UploadFile = File(...),
    storage=Depends(get_image_storage)
):
    """Store a product image and return the URL to put on the product."""
    try:
        image_url = await storage.save(product, UPLOAD_FIELD, str(request.base_url))
    except (httpx.HTTPError, ImageHostError) as e:
        logger.error("Image upload failed", extra={"error": str(e)})
        raise HTTPException(status_code=502, detail="Image upload failed")
    finally:
        await product.close()

    return {"success": 1, "image_url": image_url}
