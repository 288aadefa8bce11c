from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from litscout.config import GovernanceConfig
from litscout.domain.audit_trail import AuditTrail
from litscout.domain.discovery import DiscoveryLog
from tests.helpers.factories import InMemoryAuditEntryStore, InMemoryDiscoveryEventStore, StepClock

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def isolated_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> Iterator[None]:
    data_dir = tmp_path_factory.mktemp("litscout-data")
    monkeypatch.setenv("LITSCOUT_DATA_DIR", str(data_dir))
    for name in (
        "LITSCOUT_DATABASE_URI",
        "LITSCOUT_GRAPH_FILE",
        "SEMANTIC_SCHOLAR_API_KEY",
        "OPENALEX_MAILTO",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def event_store() -> InMemoryDiscoveryEventStore:
    return InMemoryDiscoveryEventStore()


@pytest.fixture
def audit_store() -> InMemoryAuditEntryStore:
    return InMemoryAuditEntryStore()


@pytest.fixture
def discovery_log(event_store: InMemoryDiscoveryEventStore, clock: StepClock) -> DiscoveryLog:
    return DiscoveryLog(event_store, clock=clock)


@pytest.fixture
def audit_trail(audit_store: InMemoryAuditEntryStore, clock: StepClock) -> AuditTrail:
    return AuditTrail(audit_store, clock=clock)


@pytest.fixture
def governance() -> GovernanceConfig:
    return GovernanceConfig()
