# products-management/backend/product_service/app/main.py

import logging
import sys
import time
from functools import lru_cache
from typing import List, Optional, Union

from fastapi import (
    Depends,
    FastAPI,
    File,
    Form,
    Request,
    UploadFile,
    status,
)
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import StorageSettings
from .db import Base, engine, get_db
from .exceptions import InvalidFileFormat, ProductNotFound, StorageNotConfigured
from .models import Product
from .repository import ProductRepository
from .schemas import MessageResponse, ProductRequest, ProductResponse
from .service import ImageUpload, ProductService
from .storage import BlobImageStorage, UnavailableImageStorage

# --- Standard Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Suppress noisy logs from third-party libraries for cleaner output
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.INFO)
logging.getLogger("azure.core.pipeline.policies.http_logging_policy").setLevel(
    logging.WARNING
)


# --- Storage wiring ---
@lru_cache
def get_storage_settings() -> StorageSettings:
    return StorageSettings.from_env()


@lru_cache
def _blob_storage() -> BlobImageStorage:
    return BlobImageStorage(get_storage_settings())


def get_storage() -> Union[BlobImageStorage, UnavailableImageStorage]:
    if not get_storage_settings().is_configured:
        return UnavailableImageStorage()
    return _blob_storage()


def get_product_service(
    db: Session = Depends(get_db),
    storage: Union[BlobImageStorage, UnavailableImageStorage] = Depends(get_storage),
) -> ProductService:
    return ProductService(ProductRepository(db), storage)


# --- FastAPI Application Setup ---
app = FastAPI(
    title="Product Service API",
    description="Manages products and their images, with Azure Storage integration.",
    version="1.0.0",
)

# Enable CORS (for frontend dev/testing)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Use specific origins in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Exception Handlers ---
@app.exception_handler(ProductNotFound)
async def product_not_found_handler(request: Request, exc: ProductNotFound):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND, content={"message": str(exc)}
    )


@app.exception_handler(InvalidFileFormat)
async def invalid_file_format_handler(request: Request, exc: InvalidFileFormat):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"message": str(exc)}
    )


@app.exception_handler(StorageNotConfigured)
async def storage_not_configured_handler(request: Request, exc: StorageNotConfigured):
    logger.error(f"Product Service: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"message": str(exc)}
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    message = ", ".join(error["msg"] for error in exc.errors())
    logger.info(f"Product Service: Rejected request to {request.url.path}: {message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"message": message}
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


# --- FastAPI Event Handlers ---
@app.on_event("startup")
async def startup_event():
    max_retries = 10
    retry_delay_seconds = 5
    for i in range(max_retries):
        try:
            logger.info(
                f"Product Service: Attempting to connect to the database and create tables (attempt {i+1}/{max_retries})..."
            )
            Base.metadata.create_all(bind=engine)
            logger.info(
                "Product Service: Successfully connected to the database and ensured tables exist."
            )
            break  # Exit loop if successful
        except OperationalError as e:
            logger.warning(f"Product Service: Failed to connect to the database: {e}")
            if i < max_retries - 1:
                logger.info(
                    f"Product Service: Retrying in {retry_delay_seconds} seconds..."
                )
                time.sleep(retry_delay_seconds)
            else:
                logger.critical(
                    f"Product Service: Failed to connect to the database after {max_retries} attempts. Exiting application."
                )
                sys.exit(1)

    if not get_storage_settings().is_configured:
        logger.warning(
            "Product Service: Azure Storage credentials not found. Image uploads and image reads will answer 503."
        )
        return

    try:
        get_storage().ensure_container()
    except Exception as e:
        logger.warning(
            f"Product Service: Could not create or verify Azure container '{get_storage_settings().container_name}'. Error: {e}"
        )


# --- Request helpers ---
def product_form(
    name: str = Form(""),
    price: int = Form(0),
    quantity: int = Form(0),
) -> ProductRequest:
    try:
        return ProductRequest(name=name, price=price, quantity=quantity)
    except ValidationError as e:
        raise RequestValidationError(e.errors())


def read_image(file: Optional[UploadFile]) -> Optional[ImageUpload]:
    """
    Reads the uploaded file, rejecting non-empty uploads whose declared
    content type is not an image. Returns None when nothing was uploaded.
    """
    if file is None:
        return None

    data = file.file.read()
    if not data:
        return None

    content_type = file.content_type or ""
    if not content_type.lower().startswith("image"):
        raise InvalidFileFormat(content_type)
    return ImageUpload(filename=file.filename or "", content_type=content_type, data=data)


def to_product(payload: ProductRequest) -> Product:
    return Product(name=payload.name, price=payload.price, quantity=payload.quantity)


# --- Root Endpoint ---
@app.get("/", status_code=status.HTTP_200_OK, summary="Root endpoint")
async def read_root():
    return {"message": "Welcome to the Product Service!"}


# --- Health Check Endpoint ---
@app.get("/health", status_code=status.HTTP_200_OK, summary="Health check endpoint")
async def health_check():
    return {"status": "ok", "service": "product-service"}


# --- CRUD Endpoints for Products ---
@app.post(
    "/products",
    response_model=ProductResponse,
    summary="Create a new product with an optional image",
)
def create_product(
    payload: ProductRequest = Depends(product_form),
    file: Optional[UploadFile] = File(None),
    service: ProductService = Depends(get_product_service),
):
    image = read_image(file)
    logger.info(f"Product Service: Creating product: {payload.name}")
    return service.create_product(to_product(payload), image)


@app.get(
    "/products/{product_id}",
    response_model=ProductResponse,
    summary="Retrieve a single product by ID",
)
def get_product(
    product_id: int, service: ProductService = Depends(get_product_service)
):
    logger.info(f"Product Service: Fetching product with ID: {product_id}")
    return service.get_product_detail(product_id)


@app.get(
    "/products",
    response_model=List[ProductResponse],
    summary="Retrieve a list of all products",
)
def list_products(service: ProductService = Depends(get_product_service)):
    products = service.get_products()
    logger.info(f"Product Service: Retrieved {len(products)} products.")
    return products


@app.put(
    "/products/{product_id}",
    response_model=ProductResponse,
    summary="Replace an existing product and its image",
)
def update_product(
    product_id: int,
    payload: ProductRequest = Depends(product_form),
    file: Optional[UploadFile] = File(None),
    service: ProductService = Depends(get_product_service),
):
    image = read_image(file)
    logger.info(f"Product Service: Updating product with ID: {product_id}")
    return service.update_product(product_id, to_product(payload), image)


@app.delete(
    "/products/{product_id}",
    response_model=MessageResponse,
    summary="Delete a product and its image",
)
def delete_product(
    product_id: int, service: ProductService = Depends(get_product_service)
):
    logger.info(f"Product Service: Attempting to delete product with ID: {product_id}")
    service.delete_product(product_id)
    return {"message": f"Delete product with id {product_id} success"}
