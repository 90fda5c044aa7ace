"""
Assurance Test Fixtures
=======================

In-memory stand-in for the Motor collection API plus service and client
fixtures built on top of it.

Version: 0.1.0
"""

import copy
import operator
from collections.abc import AsyncGenerator, Callable, Mapping, Sequence
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from services.assurance.repositories import (
    AssessmentHistoryLedger,
    AssessmentRepository,
    DeliveryGroupHistoryLedger,
    DeliveryGroupRepository,
    DeliveryPartnerRepository,
    ProfessionHistoryLedger,
    ProfessionRepository,
    ProjectDeliveryPartnerRepository,
    ProjectHistoryLedger,
    ProjectRepository,
    ServiceStandardHistoryLedger,
    ServiceStandardRepository,
    ThemeRepository,
)
from services.assurance.services import (
    AssessmentService,
    DeliveryGroupService,
    DeliveryPartnerService,
    InsightsService,
    ProfessionService,
    ProjectDeliveryPartnerService,
    ProjectService,
    ServiceStandardService,
    StandardsSummaryAggregator,
    ThemeService,
)


# =============================================================================
# In-memory Motor stand-in
# =============================================================================


UNIQUE_KEYS: dict[str, tuple[str, ...]] = {
    "assessments": ("project_id", "standard_id", "profession_id"),
    "project_delivery_partners": ("project_id", "delivery_partner_id"),
}

_COMPARISONS: dict[str, Callable[[Any, Any], bool]] = {
    "$gt": operator.gt,
    "$gte": operator.ge,
    "$lt": operator.lt,
    "$lte": operator.le,
}


def _matches_operator(actual: Any, op: str, operand: Any) -> bool:
    if op in _COMPARISONS:
        return actual is not None and _COMPARISONS[op](actual, operand)
    if op == "$in":
        if isinstance(actual, list):
            return any(value in operand for value in actual)
        return actual in operand
    if op == "$ne":
        return actual != operand
    raise NotImplementedError(f"Unsupported operator {op}")


def _matches(doc: Mapping[str, Any], query: Mapping[str, Any]) -> bool:
    for field, expected in query.items():
        actual = doc.get(field)
        if isinstance(expected, dict) and expected and all(key.startswith("$") for key in expected):
            if not all(_matches_operator(actual, op, operand) for op, operand in expected.items()):
                return False
        elif isinstance(actual, list) and not isinstance(expected, list):
            if expected not in actual:
                return False
        elif actual != expected:
            return False
    return True


def _sorted(docs: Sequence[dict[str, Any]], spec: Sequence[tuple[str, int]]) -> list[dict[str, Any]]:
    result = list(docs)
    for field, direction in reversed(list(spec)):
        result.sort(key=lambda d: (d.get(field) is not None, d.get(field)), reverse=direction < 0)
    return result


class FakeCursor:
    """Cursor returned by `FakeCollection.find`."""

    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, key_or_list: Any, direction: int | None = None) -> "FakeCursor":
        spec = key_or_list if isinstance(key_or_list, list) else [(key_or_list, direction or 1)]
        self._docs = _sorted(self._docs, spec)
        return self

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        docs = self._docs if length is None else self._docs[:length]
        return [copy.deepcopy(doc) for doc in docs]


class FakeCollection:
    """
    Motor-like collection held in memory.

    Method names listed in `fail_on` raise PyMongoError, which lets tests
    simulate a storage outage for one operation.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.docs: dict[Any, dict[str, Any]] = {}
        self.fail_on: set[str] = set()
        self.unique = UNIQUE_KEYS.get(name)

    def _maybe_fail(self, method: str) -> None:
        if method in self.fail_on:
            raise PyMongoError(f"simulated {method} failure on {self.name}")

    def _check_unique(self, doc: Mapping[str, Any], ignore_id: Any = None) -> None:
        if doc["_id"] in self.docs and doc["_id"] != ignore_id:
            raise DuplicateKeyError(f"duplicate _id {doc['_id']}")
        if self.unique:
            key = tuple(doc.get(field) for field in self.unique)
            for other_id, other in self.docs.items():
                if other_id != ignore_id and tuple(other.get(f) for f in self.unique) == key:
                    raise DuplicateKeyError(f"duplicate key {key}")

    def _first(self, query: Mapping[str, Any]) -> dict[str, Any] | None:
        return next((doc for doc in self.docs.values() if _matches(doc, query)), None)

    def find(self, query: Mapping[str, Any] | None = None) -> FakeCursor:
        self._maybe_fail("find")
        return FakeCursor([doc for doc in self.docs.values() if _matches(doc, query or {})])

    async def find_one(self, query: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        self._maybe_fail("find_one")
        doc = self._first(query or {})
        return copy.deepcopy(doc) if doc is not None else None

    async def count_documents(self, query: Mapping[str, Any]) -> int:
        return sum(1 for doc in self.docs.values() if _matches(doc, query))

    async def insert_one(self, doc: Mapping[str, Any]) -> SimpleNamespace:
        self._maybe_fail("insert_one")
        stored = copy.deepcopy(dict(doc))
        self._check_unique(stored)
        self.docs[stored["_id"]] = stored
        return SimpleNamespace(inserted_id=stored["_id"], acknowledged=True)

    async def insert_many(self, docs: Sequence[Mapping[str, Any]]) -> SimpleNamespace:
        self._maybe_fail("insert_many")
        ids = []
        for doc in docs:
            result = await self.insert_one(doc)
            ids.append(result.inserted_id)
        return SimpleNamespace(inserted_ids=ids, acknowledged=True)

    async def replace_one(
        self,
        query: Mapping[str, Any],
        replacement: Mapping[str, Any],
        upsert: bool = False,
    ) -> SimpleNamespace:
        self._maybe_fail("replace_one")
        current = self._first(query)
        if current is None:
            if not upsert:
                return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)
            stored = {**copy.deepcopy(dict(query)), **copy.deepcopy(dict(replacement))}
            self._check_unique(stored)
            self.docs[stored["_id"]] = stored
            return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=stored["_id"])

        stored = {**copy.deepcopy(dict(replacement)), "_id": current["_id"]}
        self._check_unique(stored, ignore_id=current["_id"])
        modified = stored != current
        self.docs[current["_id"]] = stored
        return SimpleNamespace(matched_count=1, modified_count=int(modified), upserted_id=None)

    async def update_one(self, query: Mapping[str, Any], update: Mapping[str, Any]) -> SimpleNamespace:
        self._maybe_fail("update_one")
        current = self._first(query)
        if current is None:
            return SimpleNamespace(matched_count=0, modified_count=0)
        updated = {**current, **copy.deepcopy(dict(update.get("$set", {})))}
        modified = updated != current
        self.docs[current["_id"]] = updated
        return SimpleNamespace(matched_count=1, modified_count=int(modified))

    async def delete_one(self, query: Mapping[str, Any]) -> SimpleNamespace:
        self._maybe_fail("delete_one")
        current = self._first(query)
        if current is None:
            return SimpleNamespace(deleted_count=0)
        del self.docs[current["_id"]]
        return SimpleNamespace(deleted_count=1)

    async def delete_many(self, query: Mapping[str, Any]) -> SimpleNamespace:
        self._maybe_fail("delete_many")
        doomed = [doc_id for doc_id, doc in self.docs.items() if _matches(doc, query)]
        for doc_id in doomed:
            del self.docs[doc_id]
        return SimpleNamespace(deleted_count=len(doomed))

    async def create_index(self, keys: Any, **kwargs: Any) -> str:
        return str(keys)


class FakeDatabase:
    """Motor-like database; collections are created on first access."""

    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]

    def __getattr__(self, name: str) -> FakeCollection:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]


class FakeClock:
    """Controllable replacement for `utc_now`."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# =============================================================================
# Storage fixtures
# =============================================================================


@pytest.fixture
def fake_db() -> FakeDatabase:
    """Empty in-memory database."""
    return FakeDatabase()


@pytest.fixture
def clock() -> FakeClock:
    """Clock pinned to 10 March 2025, 12:00 UTC."""
    return FakeClock(datetime(2025, 3, 10, 12, 0, tzinfo=UTC))


@pytest.fixture
def project_repository(fake_db: FakeDatabase) -> ProjectRepository:
    return ProjectRepository(fake_db)


@pytest.fixture
def assessment_repository(fake_db: FakeDatabase) -> AssessmentRepository:
    return AssessmentRepository(fake_db)


@pytest.fixture
def project_ledger(fake_db: FakeDatabase) -> ProjectHistoryLedger:
    return ProjectHistoryLedger(fake_db)


@pytest.fixture
def assessment_ledger(fake_db: FakeDatabase) -> AssessmentHistoryLedger:
    return AssessmentHistoryLedger(fake_db)


# =============================================================================
# Service fixtures
# =============================================================================


@pytest.fixture
def project_service(
    project_repository: ProjectRepository,
    project_ledger: ProjectHistoryLedger,
    clock: FakeClock,
) -> ProjectService:
    return ProjectService(project_repository, project_ledger, clock=clock)


@pytest.fixture
def aggregator(
    project_repository: ProjectRepository,
    assessment_repository: AssessmentRepository,
) -> StandardsSummaryAggregator:
    return StandardsSummaryAggregator(project_repository, assessment_repository)


@pytest.fixture
def assessment_service(
    fake_db: FakeDatabase,
    project_repository: ProjectRepository,
    assessment_repository: AssessmentRepository,
    assessment_ledger: AssessmentHistoryLedger,
    aggregator: StandardsSummaryAggregator,
    clock: FakeClock,
) -> AssessmentService:
    return AssessmentService(
        assessments=assessment_repository,
        history=assessment_ledger,
        projects=project_repository,
        standards=ServiceStandardRepository(fake_db),
        professions=ProfessionRepository(fake_db),
        aggregator=aggregator,
        clock=clock,
    )


@pytest.fixture
def profession_service(fake_db: FakeDatabase, clock: FakeClock) -> ProfessionService:
    return ProfessionService(ProfessionRepository(fake_db), ProfessionHistoryLedger(fake_db), clock=clock)


@pytest.fixture
def standard_service(fake_db: FakeDatabase, clock: FakeClock) -> ServiceStandardService:
    return ServiceStandardService(
        ServiceStandardRepository(fake_db),
        ServiceStandardHistoryLedger(fake_db),
        clock=clock,
    )


@pytest.fixture
def delivery_group_service(
    fake_db: FakeDatabase,
    project_repository: ProjectRepository,
    clock: FakeClock,
) -> DeliveryGroupService:
    return DeliveryGroupService(
        DeliveryGroupRepository(fake_db),
        DeliveryGroupHistoryLedger(fake_db),
        project_repository,
        clock=clock,
    )


@pytest.fixture
def delivery_partner_service(fake_db: FakeDatabase, clock: FakeClock) -> DeliveryPartnerService:
    return DeliveryPartnerService(DeliveryPartnerRepository(fake_db), clock=clock)


@pytest.fixture
def theme_service(fake_db: FakeDatabase, clock: FakeClock) -> ThemeService:
    return ThemeService(ThemeRepository(fake_db), clock=clock)


@pytest.fixture
def project_delivery_partner_service(
    fake_db: FakeDatabase,
    project_repository: ProjectRepository,
    clock: FakeClock,
) -> ProjectDeliveryPartnerService:
    return ProjectDeliveryPartnerService(
        ProjectDeliveryPartnerRepository(fake_db),
        project_repository,
        DeliveryPartnerRepository(fake_db),
        clock=clock,
    )


@pytest.fixture
def insights_service(
    fake_db: FakeDatabase,
    project_repository: ProjectRepository,
    assessment_ledger: AssessmentHistoryLedger,
    clock: FakeClock,
) -> InsightsService:
    return InsightsService(project_repository, assessment_ledger, ServiceStandardRepository(fake_db), clock=clock)


@pytest_asyncio.fixture
async def reference_data(fake_db: FakeDatabase) -> FakeDatabase:
    """Active standards std-1/std-2 and professions, plus an inactive profession."""
    now = datetime(2025, 1, 1, tzinfo=UTC)
    for number in (1, 2):
        await fake_db.service_standards.insert_one({
            "_id": f"std-{number}",
            "number": number,
            "name": f"Standard {number}",
            "description": "Description",
            "guidance": "",
            "is_active": True,
            "created_at": now,
            "updated_at": now,
        })
    for profession_id, active in (
        ("delivery-management", True),
        ("user-research", True),
        ("retired-profession", False),
    ):
        await fake_db.professions.insert_one({
            "_id": profession_id,
            "name": profession_id.replace("-", " ").title(),
            "description": "Description",
            "is_active": active,
            "created_at": now,
            "updated_at": now,
        })
    return fake_db


# =============================================================================
# API client
# =============================================================================


@pytest_asyncio.fixture
async def assurance_client(fake_db: FakeDatabase) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Assurance Service backed by the in-memory database."""
    from shared.database.mongodb import get_mongodb
    from services.assurance.main import app

    app.dependency_overrides[get_mongodb] = lambda: fake_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()
