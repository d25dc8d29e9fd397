"""Shared pytest fixtures."""

import asyncio
import copy
from datetime import date
from typing import Any
from uuid import UUID

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from aquacrm.core.modules.amc.models import AMC, ServiceVisit, VisitStatus
from aquacrm.core.modules.amc.service import AMCService
from aquacrm.core.modules.client.models import Address, Client, ClientInfo
from aquacrm.core.modules.client.service import ClientService
from aquacrm.core.modules.counter.service import CounterService
from aquacrm.core.modules.product.models import Product, ProductType
from aquacrm.core.modules.product.service import ProductService


class FakeCounterCollection:
    """In-memory stand-in for the counters collection.

    find_one_and_update holds a lock across read-increment-write, matching the
    single-document atomicity MongoDB guarantees.
    """

    def __init__(self, fail: bool = False) -> None:
        self.docs: dict[str, dict[str, Any]] = {}
        self.fail = fail
        self._lock = asyncio.Lock()

    async def find_one_and_update(self, query: dict[str, Any], update: dict[str, Any], **_: Any) -> dict[str, Any]:
        if self.fail:
            raise ServerSelectionTimeoutError("No servers available")
        async with self._lock:
            key = query["_id"]
            doc = self.docs.get(key, {"_id": key, "seq": 0})
            await asyncio.sleep(0)  # let other callers run between read and write
            doc = {**doc, "seq": doc["seq"] + update["$inc"]["seq"]}
            self.docs[key] = doc
            return dict(doc)

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        doc = self.docs.get(query["_id"])
        return dict(doc) if doc else None


class FakeCollection:
    """In-memory collection keyed by _id, supporting the calls services make for single records.

    $set accepts dotted paths with list indexes, e.g. "service_visits.2".
    """

    def __init__(self) -> None:
        self.docs: dict[Any, dict[str, Any]] = {}

    async def insert_one(self, doc: dict[str, Any]) -> None:
        self.docs[doc["_id"]] = copy.deepcopy(doc)

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        doc = self.docs.get(query["_id"])
        return copy.deepcopy(doc) if doc else None

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> None:
        doc = self.docs[query["_id"]]
        for key, value in update.get("$set", {}).items():
            *path, last = key.split(".")
            target: Any = doc
            for part in path:
                target = target[int(part)] if isinstance(target, list) else target[part]
            if isinstance(target, list):
                target[int(last)] = copy.deepcopy(value)
            else:
                target[last] = copy.deepcopy(value)


class FakeDatabase:
    def __init__(self, collection: FakeCounterCollection | FakeCollection) -> None:
        self.collection = collection

    def get_collection(self, name: str) -> FakeCounterCollection | FakeCollection:
        return self.collection


@pytest.fixture
def counter_collection():
    return FakeCounterCollection()


@pytest.fixture
def counter_service(counter_collection):
    """CounterService backed by the in-memory counters collection."""
    return CounterService(FakeDatabase(counter_collection))  # type: ignore[arg-type]


@pytest.fixture
def unavailable_counter_service():
    """CounterService whose store rejects every operation."""
    return CounterService(FakeDatabase(FakeCounterCollection(fail=True)))  # type: ignore[arg-type]


@pytest.fixture
def mock_client():
    """Create a mock client for testing."""
    return Client(
        id=UUID("12345678-1234-5678-1234-567812345678"),
        name="Ravi Kumar",
        phone="+91 98450 12345",
        email="ravi@example.com",
        addresses=[
            Address(tag="Billing", address="12 MG Road, Bengaluru"),
            Address(tag="Installation", address="Plot 7, Whitefield, Bengaluru"),
        ],
    )


@pytest.fixture
def make_amc(mock_client):
    """Factory for contracts with an explicit visit list."""

    def _make(start: date, end: date, frequency: int, visits: list[ServiceVisit] | None = None) -> AMC:
        return AMC(
            amc_id="AMC-20250101-001-TEST",
            client_id=mock_client.id,
            client_info=ClientInfo.from_client(mock_client),
            start_date=start,
            end_date=end,
            contract_amount=4500,
            frequency_per_year=frequency,
            service_visits=visits or [],
        )

    return _make


@pytest.fixture
def partly_serviced_amc(make_amc):
    """Quarterly contract with two completed and two scheduled visits."""
    visits = [
        ServiceVisit(scheduled_date=date(2025, 1, 1), status=VisitStatus.COMPLETED, completed_date=date(2025, 1, 2)),
        ServiceVisit(scheduled_date=date(2025, 5, 2), status=VisitStatus.COMPLETED, completed_date=date(2025, 5, 3)),
        ServiceVisit(scheduled_date=date(2025, 8, 31)),
        ServiceVisit(scheduled_date=date(2025, 12, 31)),
    ]
    return make_amc(date(2025, 1, 1), date(2025, 12, 31), 4, visits)


@pytest.fixture
def documents():
    return FakeCollection()


@pytest.fixture
def amc_service(documents):
    """AMCService over an in-memory amcs collection."""
    return AMCService(FakeDatabase(documents))  # type: ignore[arg-type]


@pytest.fixture
def stored_amc(documents, partly_serviced_amc):
    asyncio.run(documents.insert_one(partly_serviced_amc.to_mongo()))
    return partly_serviced_amc


@pytest.fixture
def client_service(documents, mock_client):
    """ClientService over an in-memory clients collection holding mock_client."""
    asyncio.run(documents.insert_one(mock_client.to_mongo()))
    return ClientService(FakeDatabase(documents))  # type: ignore[arg-type]


@pytest.fixture
def mock_product():
    return Product(name="RO Purifier 12L", sku="RO-12L", price=15000, type=ProductType.PRODUCT)


@pytest.fixture
def product_service(documents, mock_product):
    """ProductService over an in-memory products collection holding mock_product."""
    asyncio.run(documents.insert_one(mock_product.to_mongo()))
    return ProductService(FakeDatabase(documents))  # type: ignore[arg-type]
