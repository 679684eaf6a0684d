"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- An in-memory fake of the forest management backend
- Sample records for every entity
- A FastAPI test client wired to the fake backend
"""
import itertools
from collections import defaultdict
from typing import Any, Dict, List, Optional

import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from forest_console.api.dependencies import (
    get_auth_service,
    get_gateway_factory,
)
from forest_console.api.limiter import limiter
from forest_console.domain.schema import EntitySchema
from forest_console.infrastructure.api_client import NotFoundError
from forest_console.infrastructure.gateway import AuthGateway
from forest_console.main import app
from forest_console.services.application.auth_service import AuthService
from forest_console.services.application.view_registry import ViewRegistry, get_view_registry


# ============================================================
# Fake Backend
# ============================================================

FILTER_FIELDS = {
    "conservation-status": "conservationStatus",
    "health-status": "healthStatus",
    "type": "resourceType",
    "date": "visitDate",
}


class FakeBackend:
    """
    In-memory stand-in for the REST backend.

    Assigns identifiers, filters the way the real server does (exact,
    case-sensitive matches) and can be told to fail the next call.
    """

    def __init__(self):
        self.tables: Dict[str, Dict[int, Dict[str, Any]]] = defaultdict(dict)
        self._ids = itertools.count(1)
        self.failures: Dict[str, Exception] = {}
        self.calls: List[tuple] = []
        self.tokens: List[Optional[str]] = []

    def seed(self, schema: EntitySchema, *records: Dict[str, Any]) -> List[int]:
        ids = []
        for record in records:
            record_id = next(self._ids)
            self.tables[schema.key][record_id] = {**record, schema.id_field: record_id}
            ids.append(record_id)
        return ids

    def rows(self, schema: EntitySchema) -> List[Dict[str, Any]]:
        return [dict(row) for row in self.tables[schema.key].values()]

    def fail_next(self, operation: str, error: Exception) -> None:
        self.failures[operation] = error

    def gateway(self, schema: EntitySchema, token: Optional[str] = None) -> "FakeGateway":
        self.tokens.append(token)
        return FakeGateway(self, schema)


class FakeGateway:
    """Implements the EntityGateway interface against a FakeBackend."""

    def __init__(self, backend: FakeBackend, schema: EntitySchema):
        self.backend = backend
        self.schema = schema

    @property
    def _table(self) -> Dict[int, Dict[str, Any]]:
        return self.backend.tables[self.schema.key]

    def _enter(self, operation: str, *args) -> None:
        self.backend.calls.append((self.schema.key, operation) + args)
        error = self.backend.failures.pop(operation, None)
        if error is not None:
            raise error

    def _missing(self, record_id: int) -> NotFoundError:
        return NotFoundError(404, "Not Found", f"No record with id {record_id}")

    async def list_all(self):
        self._enter("list_all")
        return [self.schema.parse(row) for row in self._table.values()]

    async def list_by_filter(self, filter_key: str, value: Any = None):
        self._enter("list_by_filter", filter_key, value)
        rows = list(self._table.values())
        if filter_key == "zone":
            rows = [row for row in rows if row.get(self.schema.zone_field) == value]
        elif filter_key == "active":
            rows = [row for row in rows if row.get("status") == "Active"]
        elif filter_key == "medicinal":
            rows = [row for row in rows if row.get("medicinalUse")]
        elif filter_key == "date-range":
            start, end = value
            rows = [row for row in rows if start <= (row.get("visitDate") or "") <= end]
        else:
            field = FILTER_FIELDS[filter_key]
            rows = [row for row in rows if row.get(field) == value]
        return [self.schema.parse(row) for row in rows]

    async def get_by_id(self, record_id: int):
        self._enter("get_by_id", record_id)
        if record_id not in self._table:
            raise self._missing(record_id)
        return self.schema.parse(self._table[record_id])

    async def create(self, draft):
        self._enter("create", dict(draft))
        record_id = next(self.backend._ids)
        row = {key: value for key, value in draft.items() if key != self.schema.id_field}
        row[self.schema.id_field] = record_id
        self._table[record_id] = row
        return self.schema.parse(row)

    async def update(self, record_id: int, record):
        self._enter("update", record_id, dict(record))
        if record_id not in self._table:
            raise self._missing(record_id)
        row = dict(record)
        row[self.schema.id_field] = record_id
        self._table[record_id] = row
        return self.schema.parse(row)

    async def delete(self, record_id: int):
        self._enter("delete", record_id)
        if record_id not in self._table:
            raise self._missing(record_id)
        del self._table[record_id]


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def sample_animals() -> List[Dict[str, Any]]:
    """Three animals with counts [10, 0, 25]."""
    return [
        {
            "name": "Bengal Tiger",
            "scientificName": "Panthera tigris tigris",
            "speciesType": "Mammal",
            "count": 10,
            "zone": "Zone A",
            "location": "North ridge",
            "conservationStatus": "Endangered",
            "lastSightingDate": "2025-01-10",
            "createdAt": "2024-06-01T08:00:00",
        },
        {
            "name": "Spotted Deer",
            "scientificName": "Axis axis",
            "speciesType": "Mammal",
            "count": 0,
            "zone": "Zone B",
            "location": "River bank",
            "conservationStatus": "Least Concern",
            "lastSightingDate": "2024-12-02",
        },
        {
            "name": "Great Indian Bustard",
            "scientificName": "Ardeotis nigriceps",
            "speciesType": "Bird",
            "count": 25,
            "zone": "zone a",
            "location": "Grassland",
            "conservationStatus": "Critically Endangered",
            "lastSightingDate": "2025-01-03",
        },
    ]


@pytest.fixture
def sample_officers() -> List[Dict[str, Any]]:
    return [
        {
            "firstName": "Asha",
            "lastName": "Rao",
            "employeeId": "FO-001",
            "designation": "Range Officer",
            "department": "Wildlife",
            "assignedZone": "Zone A",
            "contactNumber": "555-0101",
            "email": "asha@forest.test",
            "joiningDate": "2019-04-01",
            "status": "Active",
        },
        {
            "firstName": "Vikram",
            "lastName": "Singh",
            "employeeId": "FO-002",
            "designation": "Forest Guard",
            "department": "Patrol",
            "assignedZone": "Zone B",
            "contactNumber": "555-0102",
            "email": "vikram@forest.test",
            "joiningDate": "2021-09-15",
            "status": "On Leave",
        },
    ]


@pytest.fixture
def sample_visitors() -> List[Dict[str, Any]]:
    return [
        {"fullName": "Early Bird", "visitDate": "2024-12-31", "zoneVisited": "Zone A", "groupSize": 2},
        {"fullName": "New Year", "visitDate": "2025-01-01", "zoneVisited": "Zone A", "groupSize": 4},
        {"fullName": "Mid Month", "visitDate": "2025-01-15", "zoneVisited": "Zone B", "groupSize": 1},
        {"fullName": "Month End", "visitDate": "2025-01-31", "zoneVisited": "Zone C", "groupSize": 3},
        {"fullName": "February", "visitDate": "2025-02-01", "zoneVisited": "Zone A", "groupSize": 5},
    ]


@pytest.fixture
def sample_resources() -> List[Dict[str, Any]]:
    return [
        {
            "resourceName": "Patrol Jeep",
            "resourceType": "Vehicle",
            "quantity": 2,
            "unit": "units",
            "assignedZone": "Zone A",
            "conditionStatus": "Good",
            "cost": 42000.0,
            "assignedOfficer": {"officerId": 1, "firstName": "Asha", "lastName": "Rao"},
        },
        {
            "resourceName": "Radio Set",
            "resourceType": "Communication",
            "quantity": 12,
            "unit": "units",
            "assignedZone": "Zone B",
            "conditionStatus": "Needs Repair",
            "cost": 300.5,
            "assignedOfficer": None,
        },
    ]


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def auth_gateway() -> AsyncMock:
    gateway = AsyncMock(spec=AuthGateway)
    gateway.login.return_value = {"user": {"username": "ranger", "role": "ADMIN"}, "token": "secret-token"}
    gateway.signup.return_value = {"user": {"username": "newbie", "role": "ADMIN"}}
    return gateway


@pytest.fixture
def view_registry() -> ViewRegistry:
    return ViewRegistry()


@pytest.fixture
def test_client(fake_backend, auth_gateway, view_registry) -> TestClient:
    """Test client whose backend calls go to the in-memory fake."""
    app.dependency_overrides[get_gateway_factory] = lambda: fake_backend.gateway
    app.dependency_overrides[get_auth_service] = lambda: AuthService(auth_gateway)
    app.dependency_overrides[get_view_registry] = lambda: view_registry
    limiter.reset()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def signed_in_client(test_client) -> TestClient:
    response = test_client.post(
        "/auth/login",
        data={"username": "ranger", "password": "correct horse"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    return test_client

