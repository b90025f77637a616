"""FastAPI application for varebok."""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from varebok import __version__
from varebok.models import HealthResponse
from varebok.routers import products
from varebok.services.products import CatalogRetrievalError, ProductCatalog

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "catalog.yaml"
CATALOG_PATH = Path(os.environ.get("VAREBOK_CATALOG_PATH", DEFAULT_CATALOG_PATH))

catalog: ProductCatalog | None = None


def get_catalog() -> ProductCatalog:
    """Return the shared catalog, (re)creating it if ``CATALOG_PATH`` changed."""
    global catalog  # noqa: PLW0603
    if catalog is None or catalog.path != Path(CATALOG_PATH):
        catalog = ProductCatalog(Path(CATALOG_PATH))
    return catalog


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    """Load the catalog on startup so the first request is not slowed down."""
    try:
        get_catalog().products()
    except CatalogRetrievalError as e:
        logger.warning("Catalog not available at startup: %s", e)
    yield


app = FastAPI(
    title="varebok",
    description="Product catalog listing and lookup service",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(products.router, prefix="/products", tags=["products"])


@app.exception_handler(CatalogRetrievalError)
async def catalog_unavailable(request: Request, exc: CatalogRetrievalError) -> JSONResponse:
    """Report catalog read failures as 503."""
    logger.warning("Catalog retrieval failed for %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Product catalog unavailable"})


@app.get("/health", response_model=HealthResponse)
async def health():
    """Liveness check, with the number of products currently served."""
    try:
        count = get_catalog().product_count
    except CatalogRetrievalError:
        return HealthResponse(status="degraded", version=__version__)
    return HealthResponse(version=__version__, product_count=count)
