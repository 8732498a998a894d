# catalog_api/main.py
import logging
from typing import Optional

from fastapi import Depends, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from .auth import require_api_key
from .config import get_settings
from .core import list_products, product_stats, search_products
from .database import ProductStore, get_store
from .errors import not_found
from .logging import configure_logging
from .models import ProductIn
from .pipeline import log_request, register_error_handlers, success
from .validation import validated_product

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

app = FastAPI(title="catalog-api (in-memory products)", version=API_VERSION, redirect_slashes=False)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_request)
register_error_handlers(app)

# Stage order per route: logging (middleware) -> auth (route dependencies)
# -> validation (handler dependency) -> handler.


def _require(store: ProductStore, product_id: str) -> int:
    index = store.find_index_by_id(product_id)
    if index is None:
        raise not_found(f"Product with ID {product_id} not found")
    return index


@app.get("/")
async def root():
    return success(
        message="Hello World! Welcome to the Products API",
        version=API_VERSION,
        endpoints={
            "products": "/api/products",
            "search": "/api/products/search?q=query",
            "stats": "/api/products/stats",
        },
    )


# ---------------------------
# Read endpoints (no auth)
# ---------------------------
@app.get("/api/products")
async def get_products(
    category: Optional[str] = None,
    in_stock: Optional[str] = Query(None, alias="inStock"),
    page: Optional[str] = None,
    limit: Optional[str] = None,
    store: ProductStore = Depends(get_store),
):
    return success(**list_products(store.all(), category, in_stock, page, limit))


@app.get("/api/products/search")
async def search(q: Optional[str] = None, store: ProductStore = Depends(get_store)):
    return success(**search_products(store.all(), q))


@app.get("/api/products/stats")
async def stats(store: ProductStore = Depends(get_store)):
    return success(data=product_stats(store.all()))


@app.get("/api/products/{product_id}")
async def get_product(product_id: str, store: ProductStore = Depends(get_store)):
    product = store.find_by_id(product_id)
    if product is None:
        raise not_found(f"Product with ID {product_id} not found")
    return success(data=product.to_json())


# ---------------------------
# Mutating endpoints (auth required)
# ---------------------------
@app.post("/api/products", dependencies=[Depends(require_api_key)])
async def create_product(
    payload: ProductIn = Depends(validated_product),
    store: ProductStore = Depends(get_store),
):
    product = store.append(payload)
    logger.info("Created product %s", product.id)
    return success(201, message="Product created successfully", data=product.to_json())


@app.put("/api/products/{product_id}", dependencies=[Depends(require_api_key)])
async def update_product(
    product_id: str,
    payload: ProductIn = Depends(validated_product),
    store: ProductStore = Depends(get_store),
):
    index = _require(store, product_id)
    product = store.replace_at(index, payload)
    return success(message="Product updated successfully", data=product.to_json())


@app.delete("/api/products/{product_id}", dependencies=[Depends(require_api_key)])
async def delete_product(product_id: str, store: ProductStore = Depends(get_store)):
    index = _require(store, product_id)
    product = store.remove_at(index)
    logger.info("Deleted product %s", product.id)
    return success(message="Product deleted successfully", data=product.to_json())


def serve() -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Server is running on http://localhost:%d", settings.port)
    logger.info("Environment: %s", settings.environment)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    serve()
