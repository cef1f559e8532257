"""Pytest configuration and fixtures for the shop assistant service."""

import asyncio

import pytest
import pytest_asyncio
from fakeredis import aioredis as fakeredis
from httpx import ASGITransport, AsyncClient

from src.models.product import Product
from src.services.catalog import CatalogProvider, get_catalog
from src.services.clients.decoder_client import get_decoder_client
from src.services.search.engine import SearchEngine, get_search_engine
from src.services.storage.redis_client import get_redis_client


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "asyncio: marks tests as async tests")


def _product(name, brand, category, price, sku, stock=5, article=""):
    return Product(
        sku=sku,
        name=name,
        brand=brand,
        category=category,
        article=article,
        price=price,
        stock=stock,
    )


PC_CATALOG = [
    _product("Intel Core i5-12400F", "Intel", "Процессоры", 60000, "CPU-001"),
    _product("AMD Ryzen 5 7600", "AMD", "Процессоры", 85000, "CPU-002"),
    _product("Intel Core i7-13700K", "Intel", "Процессоры", 105000, "CPU-003"),
    _product("AMD Ryzen 9 7950X", "AMD", "Процессоры", 200000, "CPU-004"),
    _product("Intel Celeron G6900", "Intel", "Процессоры", 20000, "CPU-005"),
    _product("ASUS PRIME B660M-A", "ASUS", "Материнские платы", 55000, "MB-001"),
    _product("Gigabyte B760 DS3H", "Gigabyte", "Материнские платы", 70000, "MB-002"),
    _product("MSI MAG B650 TOMAHAWK", "MSI", "Материнские платы", 80000, "MB-003"),
    _product(
        "Kingston FURY Beast 16GB DDR5", "Kingston", "Оперативная память", 35000, "RAM-001"
    ),
    _product(
        "Corsair Vengeance 32GB DDR5", "Corsair", "Оперативная память", 55000, "RAM-002"
    ),
    _product("ASUS Dual GeForce RTX 4060", "ASUS", "Видеокарты", 160000, "GPU-001"),
    _product("MSI GeForce RTX 4070 Ventus", "MSI", "Видеокарты", 200000, "GPU-002"),
    _product("Palit GeForce RTX 4090", "Palit", "Видеокарты", 900000, "GPU-003"),
    _product("Samsung 980 SSD 1TB", "Samsung", "Накопители", 40000, "SSD-001"),
    _product("be quiet! Pure Power 12 650W", "be quiet!", "Блоки питания", 38000, "PSU-001"),
    _product("Deepcool CC560", "Deepcool", "Корпуса", 30000, "CASE-001"),
    _product("iPhone 16 Pro 256GB Black", "Apple", "Смартфоны", 450000, "IPH-16P-256"),
    _product("iPhone 15 128GB Blue", "Apple", "Смартфоны", 380000, "IPH-15-128"),
    _product("Samsung Galaxy S24 Ultra", "Samsung", "Смартфоны", 520000, "SGS-24U"),
]


@pytest.fixture()
def make_product():
    """Factory for ad-hoc catalog records."""
    return _product


@pytest.fixture()
def catalog_products():
    return list(PC_CATALOG)


@pytest.fixture()
def pc_catalog():
    """Catalog snapshot covering every build slot plus a few phones."""
    return CatalogProvider(products=PC_CATALOG)


@pytest.fixture()
def engine(pc_catalog):
    return SearchEngine(pc_catalog)


@pytest.fixture(autouse=True)
def decoder_stub():
    """Provide a stub decoder so tests do not call external services."""
    from src.main import app

    class _StubDecoder:
        def __init__(self):
            self.calls = []

        async def decode(self, prompt, *, instructions=None, temperature=None):
            await asyncio.sleep(0)
            self.calls.append({"prompt": prompt, "instructions": instructions})
            return f"decoded::{prompt}"

    stub = _StubDecoder()
    app.dependency_overrides[get_decoder_client] = lambda: stub
    yield stub
    app.dependency_overrides.pop(get_decoder_client, None)


@pytest_asyncio.fixture()
async def redis_client():
    """Provide a fake Redis client for each test."""
    from src.main import app

    client = fakeredis.FakeRedis()
    app.dependency_overrides[get_redis_client] = lambda: client
    try:
        yield client
    finally:
        await client.flushdb()
        await client.aclose()
        app.dependency_overrides.pop(get_redis_client, None)


@pytest_asyncio.fixture()
async def client(redis_client, pc_catalog, engine):
    """Return an HTTPX async client pointing at the FastAPI app."""
    from src.main import app

    app.dependency_overrides[get_catalog] = lambda: pc_catalog
    app.dependency_overrides[get_search_engine] = lambda: engine
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_catalog, None)
    app.dependency_overrides.pop(get_search_engine, None)
