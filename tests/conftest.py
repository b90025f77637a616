from pathlib import Path

import pytest
import yaml
from httpx import ASGITransport, AsyncClient

import varebok.app as app_module
from varebok.app import app

SAMPLE_PRODUCTS = [
    {"id": "1", "name": "Red Mug", "price": 9.5, "marketplace": "A"},
    {"id": "2", "name": "Blue Mug", "price": 9.5, "marketplace": "B"},
    {
        "id": "3",
        "name": "Camping Plate",
        "price": 14.0,
        "marketplace": "A",
        "description": "Enamel plate for outdoor use",
    },
]


def write_catalog(path: Path, products: list[dict]) -> Path:
    """Write a catalog file in the format produced by the ingestion process."""
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump({"products": products}, f, sort_keys=False)
    return path


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def catalog_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Provide a temporary catalog file, wired into the app."""
    path = write_catalog(tmp_path / "catalog.yaml", SAMPLE_PRODUCTS)
    monkeypatch.setattr(app_module, "CATALOG_PATH", path)
    return path


@pytest.fixture
async def client(catalog_path):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
