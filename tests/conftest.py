"""
Pytest fixtures for the HR kernel test suite.

Provides:
- Deterministic clock and default configuration
- In-memory entity store and session resolver standing in for the
  low-code backend client
- Logging reset between tests
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any

import pytest

from hr_config.schema import ApprovalRoutingConfig, GOSIConfig, HRConfig
from hr_kernel.domain.approval import AccessLevel, Principal
from hr_kernel.domain.clock import DeterministicClock
from hr_kernel.logging_config import LogContext, reset_logging


# ---------------------------------------------------------------------------
# Collaborator fakes
# ---------------------------------------------------------------------------


class InMemoryCollection:
    """Dict-backed entity collection with equality filtering."""

    def __init__(self, entity_type: str):
        self.entity_type = entity_type
        self.records: dict[str, dict[str, Any]] = {}
        self.updates: list[tuple[str, dict[str, Any]]] = []
        self._next_id = 1

    def list(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        filters = filters or {}
        return [
            copy.deepcopy(r) for r in self.records.values()
            if all(r.get(k) == v for k, v in filters.items())
        ]

    def create(self, data: dict[str, Any]) -> dict[str, Any]:
        record = copy.deepcopy(data)
        record.setdefault("id", f"{self.entity_type.lower()}-{self._next_id}")
        self._next_id += 1
        self.records[record["id"]] = record
        return copy.deepcopy(record)

    def update(self, entity_id: str, data: dict[str, Any]) -> dict[str, Any]:
        if entity_id not in self.records:
            raise KeyError(entity_id)
        self.updates.append((entity_id, copy.deepcopy(data)))
        self.records[entity_id].update(copy.deepcopy(data))
        return copy.deepcopy(self.records[entity_id])

    def delete(self, entity_id: str) -> None:
        self.records.pop(entity_id, None)


class InMemoryEntityStore:
    def __init__(self):
        self._collections: dict[str, InMemoryCollection] = {}

    def collection(self, entity_type: str) -> InMemoryCollection:
        if entity_type not in self._collections:
            self._collections[entity_type] = InMemoryCollection(entity_type)
        return self._collections[entity_type]

    def seed(self, entity_type: str, *records: dict[str, Any]) -> None:
        for record in records:
            self.collection(entity_type).create(record)


class StaticSessionResolver:
    """Session whose principal the test sets directly."""

    def __init__(self, principal: Principal | None = None):
        self.principal = principal

    def current_principal(self) -> Principal | None:
        return self.principal


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(datetime(2025, 3, 15, 10, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def gosi_config() -> GOSIConfig:
    return GOSIConfig()


@pytest.fixture
def routing_config() -> ApprovalRoutingConfig:
    return ApprovalRoutingConfig()


@pytest.fixture
def hr_config() -> HRConfig:
    return HRConfig()


@pytest.fixture
def store() -> InMemoryEntityStore:
    return InMemoryEntityStore()


@pytest.fixture
def sessions() -> StaticSessionResolver:
    return StaticSessionResolver()


@pytest.fixture
def admin() -> Principal:
    return Principal(
        user_id="user-admin",
        access_level=AccessLevel.ADMIN,
        email="hr@company.sa",
        employee_id="emp-hr",
    )


@pytest.fixture
def manager() -> Principal:
    return Principal(
        user_id="user-mgr",
        access_level=AccessLevel.MANAGER,
        email="manager@company.sa",
        employee_id="emp-mgr",
    )


@pytest.fixture
def employee() -> Principal:
    return Principal(
        user_id="user-emp",
        access_level=AccessLevel.EMPLOYEE,
        email="staff@company.sa",
        employee_id="emp-1",
    )
