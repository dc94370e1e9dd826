"""
Shared pytest fixtures and configuration for deelcli tests.

This module provides common fixtures used across unit and integration tests,
including a scripted page source for the paginator, a fake Deel API served
through httpx.MockTransport, and sample API records.
"""

from collections.abc import Callable, Iterator
from typing import Any

import pytest

from deelcli._logging import remove_cli_logging
from deelcli.client import DeelClient
from deelcli.pagination import Page
from tests.helpers.fake_api import FakeDeelAPI


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line("markers", "integration: End-to-end CLI tests against the fake API")


class ScriptedSource:
    """
    A fetch_page callable that replays a fixed sequence of pages (or exceptions)
    and records the (cursor, page_size) of every call.
    """

    def __init__(self, pages: list[Page[Any] | Exception]):
        self.pages = pages
        self.calls: list[tuple[str, int]] = []

    def __call__(self, cursor: str, page_size: int) -> Page[Any]:
        self.calls.append((cursor, page_size))
        step = self.pages[len(self.calls) - 1]
        if isinstance(step, Exception):
            raise step
        return step


@pytest.fixture
def scripted_source() -> Callable[[list[Page[Any] | Exception]], ScriptedSource]:
    """Factory for ScriptedSource instances."""
    return ScriptedSource


@pytest.fixture
def fake_api() -> FakeDeelAPI:
    """A fresh in-memory Deel API."""
    return FakeDeelAPI()


@pytest.fixture
def api_client(fake_api: FakeDeelAPI) -> Iterator[DeelClient]:
    """A DeelClient wired to fake_api, closed after the test."""
    client = fake_api.client()
    yield client
    client.close()


@pytest.fixture
def raw_contract() -> dict[str, Any]:
    """A contract as returned by GET /rest/v2/contracts."""
    return {
        "id": "c-1",
        "title": "Backend Engineer",
        "type": "ongoing_time_based",
        "status": "in_progress",
        "start_date": "2024-01-15",
        "termination_date": None,
        "client": {"legal_entity": {"id": "le-9", "name": "Acme GmbH"}},
        "worker": {"full_name": "Ada Lovelace", "email": "ada@example.com", "country": "DE"},
        "compensation_details": {"currency_code": "EUR", "amount": "8500.50"},
    }


@pytest.fixture
def sample_contracts(raw_contract) -> list[dict[str, Any]]:
    """Five contracts across two countries and two legal entities."""
    records = []
    for i in range(5):
        record = dict(raw_contract)
        record["id"] = f"c-{i + 1}"
        record["worker"] = {
            "full_name": f"Worker {i + 1}",
            "email": f"w{i + 1}@example.com",
            "country": "TW" if i % 2 else "DE",
        }
        record["client"] = {
            "legal_entity": {"id": f"le-{i % 2}", "name": f"Entity {i % 2}"}
        }
        records.append(record)
    return records


@pytest.fixture(autouse=True)
def reset_cli_logging() -> Iterator[None]:
    """Detach the --debug stream handler so it does not leak between tests."""
    yield
    remove_cli_logging()
