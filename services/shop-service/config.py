"""Configuration settings for the shop service."""
import os
from typing import List


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "4000"))
ENVIRONMENT = os.getenv("ENVIRONMENT", os.getenv("NODE_ENV", "development"))

# Database Configuration
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "shop")

# CORS
ALLOWED_ORIGINS: List[str] = _split_csv(os.getenv("ALLOWED_ORIGINS", ""))

# Authentication
JWT_SECRET = os.getenv("JWT_SECRET", "secret_ecom")
JWT_PREVIOUS_SECRETS: List[str] = _split_csv(os.getenv("JWT_PREVIOUS_SECRETS", ""))
JWT_ALGORITHM = "HS256"
# 0 disables the exp claim
TOKEN_EXPIRE_MINUTES = int(os.getenv("TOKEN_EXPIRE_MINUTES", str(7 * 24 * 60)))

# Image uploads ("local" or "hosted")
IMAGE_STORAGE = os.getenv("IMAGE_STORAGE", "local")
IMAGE_STORAGE_BACKENDS = {"local", "hosted"}
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "upload/images")
UPLOAD_FIELD = "product"
IMAGE_HOST_UPLOAD_URL = os.getenv("IMAGE_HOST_UPLOAD_URL", "")
IMAGE_HOST_API_KEY = os.getenv("IMAGE_HOST_API_KEY", "")
IMAGE_HOST_UPLOAD_PRESET = os.getenv("IMAGE_HOST_UPLOAD_PRESET", "")
IMAGE_HOST_URL_FIELD = os.getenv("IMAGE_HOST_URL_FIELD", "secure_url")

# Catalog / cart
CART_SIZE = 300
NEW_COLLECTION_SIZE = 8
POPULAR_CATEGORY = "tea"
POPULAR_LIMIT = 4

# Observability
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
OTEL_ENABLED = os.getenv("OTEL_ENABLED", "false").lower() in ("1", "true", "yes")
OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317")

# Application Settings
SERVICE_NAME = "shop-service"
API_VERSION = "1.0.0"
