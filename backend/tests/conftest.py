"""Pytest fixtures: in-memory SQLite store and a mocked FakeStore API."""

import os

# Must be set before fakeshop modules build their engine and settings.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["FAKESTORE_API_URL"] = "https://fakestore.test"
os.environ["ENVIRONMENT"] = "test"

import random
from decimal import Decimal

import httpx
import pytest

from fakeshop.db.base import Base
from fakeshop.db.models.product import ProductRow
from fakeshop.db.product_store import LocalProductStore
from fakeshop.db.session import SessionLocal, engine
from fakeshop.external.fakestore import FakestoreClient

BASE_URL = "https://fakestore.test"


def external_item(product_id, title="Item", price=10.0, **overrides) -> dict:
    item = {
        "id": product_id,
        "title": title,
        "price": price,
        "description": f"{title} description",
        "category": "electronics",
        "image": f"https://fakestore.test/img/{product_id}.jpg",
        "rating": {"rate": 4.1, "count": 120},
    }
    item.update(overrides)
    return item


def local_row(product_id, title="Local", stock=5, **overrides) -> ProductRow:
    fields = {
        "id": product_id,
        "title": title,
        "price": Decimal("19.99"),
        "description": f"{title} description",
        "category": "local-goods",
        "image": f"https://shop.test/img/{product_id}.jpg",
        "stock": stock,
        "is_local": True,
    }
    fields.update(overrides)
    return ProductRow(**fields)


class FakeStoreAPI:
    """Programmable stand-in for the FakeStore REST API.

    ``down`` makes every request fail at the transport level; ``status``
    forces an HTTP status on every response.
    """

    def __init__(self, items: list[dict] | None = None) -> None:
        self.items = list(items or [])
        self.down = False
        self.status: int | None = None
        self.requests: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request.url.path)
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)
        if self.status is not None:
            return httpx.Response(self.status, json={"message": "forced"})

        parts = request.url.path.strip("/").split("/")
        if parts == ["products"]:
            return httpx.Response(200, json=self.items)
        if len(parts) == 2 and parts[0] == "products":
            for item in self.items:
                if str(item.get("id")) == parts[1]:
                    return httpx.Response(200, json=item)
            return httpx.Response(404, json={"message": "not found"})
        return httpx.Response(404)

    def client(self) -> FakestoreClient:
        return FakestoreClient(
            BASE_URL, timeout=2.0, transport=httpx.MockTransport(self.handler)
        )


class PinnedRandom(random.Random):
    """Random source whose ``randint`` always returns a fixed value (clamped)."""

    def __init__(self, value: int) -> None:
        super().__init__(0)
        self.value = value

    def randint(self, a: int, b: int) -> int:
        return min(max(self.value, a), b)


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db_session) -> LocalProductStore:
    return LocalProductStore(db_session)


@pytest.fixture
def seed_rows():
    """Persist rows through an independent session (as another request would)."""

    def _seed(*rows: ProductRow) -> None:
        session = SessionLocal()
        try:
            session.add_all(rows)
            session.commit()
        finally:
            session.close()

    return _seed


@pytest.fixture
def fakestore() -> FakeStoreAPI:
    return FakeStoreAPI(
        [
            external_item(1, "Backpack", 109.95),
            external_item(2, "T-Shirt", 22.3),
            external_item(3, "Jacket", 55.99),
        ]
    )
