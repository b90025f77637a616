"""Pydantic models for varebok API requests and responses."""

from pydantic import BaseModel, field_validator


class Product(BaseModel):
    """A catalog item as written by the ingestion process."""

    id: str
    name: str
    price: float | None = None
    marketplace: str
    description: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value: object) -> object:
        # YAML turns unquoted ids like ``1`` into ints
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("id")
    @classmethod
    def _id_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("product id must not be empty")
        return value

    def matches_text(self, term: str) -> bool:
        """Return True if *term* (lower-cased) occurs within the name or the description."""
        return any(term in field.lower() for field in (self.name, self.description) if field)


class ProductFilter(BaseModel):
    """Optional constraints for a product listing.

    A field left as ``None`` (or empty) applies no filtering.
    """

    search: str | None = None
    marketplace: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
    product_count: int | None = None
