"""Product query service over a YAML catalog file.

The catalog file is written by an external ingestion process; this module
only reads it.  ``ProductCatalog`` picks up a rewritten file on the next
query by comparing the file's modification time and size.
"""

import logging
import threading
from pathlib import Path

import yaml
from pydantic import ValidationError

from varebok.models import Product, ProductFilter

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Base class for product catalog errors."""


class ProductNotFoundError(CatalogError):
    """No product with the requested identifier exists."""

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product '{product_id}' not found")
        self.product_id = product_id


class CatalogRetrievalError(CatalogError):
    """The catalog source could not be read."""


# ---------------------------------------------------------------------------
# Catalog source
# ---------------------------------------------------------------------------


def _parse_catalog(path: Path) -> list[Product]:
    """Read and validate a catalog file, preserving file order."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise CatalogRetrievalError(f"Cannot read catalog {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise CatalogRetrievalError(f"Catalog {path} is not valid UTF-8: {e}") from e
    except yaml.YAMLError as e:
        raise CatalogRetrievalError(f"Invalid YAML in catalog {path}: {e}") from e

    entries = data.get("products") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise CatalogRetrievalError(f"Catalog {path} has no 'products' list")

    products: list[Product] = []
    seen: set[str] = set()
    for index, entry in enumerate(entries):
        try:
            product = Product.model_validate(entry)
        except ValidationError as e:
            raise CatalogRetrievalError(f"Invalid product at index {index} in {path}: {e}") from e
        if product.id in seen:
            raise CatalogRetrievalError(f"Duplicate product id '{product.id}' in {path}")
        seen.add(product.id)
        products.append(product)
    return products


class ProductCatalog:
    """Read-only view of the products in a catalog file.

    Safe to share between worker threads.  Each call to :meth:`products`
    checks the file and reloads it if it changed since the last load.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._products: list[Product] = []
        self._by_id: dict[str, Product] = {}
        self._signature: tuple[int, int] | None = None

    def _file_signature(self) -> tuple[int, int]:
        try:
            stat = self.path.stat()
        except OSError as e:
            raise CatalogRetrievalError(f"Cannot stat catalog {self.path}: {e}") from e
        return stat.st_mtime_ns, stat.st_size

    def _refresh(self) -> None:
        with self._lock:
            signature = self._file_signature()
            if signature == self._signature:
                return
            products = _parse_catalog(self.path)
            self._products = products
            self._by_id = {p.id: p for p in products}
            self._signature = signature
            logger.info("Loaded %d products from %s", len(products), self.path)

    def products(self) -> list[Product]:
        """Return all products in catalog order."""
        self._refresh()
        return list(self._products)

    def get(self, product_id: str) -> Product | None:
        """Return the product with *product_id*, or ``None``."""
        self._refresh()
        return self._by_id.get(product_id)

    @property
    def product_count(self) -> int:
        """Number of products currently in the catalog."""
        self._refresh()
        return len(self._products)


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------


def _matches(product: Product, search: str | None, marketplace: str | None) -> bool:
    if marketplace and product.marketplace != marketplace:
        return False
    return not search or product.matches_text(search)


def list_products(catalog: ProductCatalog, product_filter: ProductFilter | None = None) -> list[Product]:
    """Return the products matching *product_filter*, in catalog order.

    Args:
        catalog:        The catalog to query.
        product_filter: ``search`` is a case-insensitive substring matched
                        against name and description; ``marketplace`` must
                        equal the product's marketplace tag exactly.  Unset
                        or empty fields apply no filtering.

    Returns:
        Matching products; an empty list when nothing matches.

    Raises:
        CatalogRetrievalError: the catalog file could not be read.
    """
    product_filter = product_filter or ProductFilter()
    search = product_filter.search.lower() if product_filter.search else None
    marketplace = product_filter.marketplace or None

    products = catalog.products()
    if search is None and marketplace is None:
        return products

    result = [p for p in products if _matches(p, search, marketplace)]
    logger.debug(
        "Filter search=%r marketplace=%r matched %d of %d products",
        product_filter.search,
        marketplace,
        len(result),
        len(products),
    )
    return result


def get_product(catalog: ProductCatalog, product_id: str) -> Product:
    """Return the product with *product_id*.

    Raises:
        ProductNotFoundError:  no product has that identifier.
        CatalogRetrievalError: the catalog file could not be read.
    """
    product = catalog.get(product_id) if product_id else None
    if product is None:
        raise ProductNotFoundError(product_id)
    return product
