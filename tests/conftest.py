"""Shared pytest fixtures and test helpers for invoicectl tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy import insert

from invoicectl.config.settings import InvoiceSettings
from invoicectl.infrastructure.database.schema import customers
from invoicectl.infrastructure.store import InvoiceStore
from invoicectl.services.telemetry import disable_tracing

# Seeded customers, keyed by id.
CUSTOMERS: dict[str, dict[str, str]] = {
    "c1": {"name": "Evil Rabbit", "email": "evil@rabbit.com"},
    "c2": {"name": "Delba de Oliveira", "email": "delba@oliveira.com"},
}


@pytest.fixture(autouse=True)
def _reset_global_state() -> Generator[None]:
    """Undo logging and tracing changes made by CLI invocations."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    app_logger = logging.getLogger("invoicectl")
    app_level = app_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    app_logger.setLevel(app_level)
    disable_tracing()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary project directory. The database lands under ``.invoicectl/``."""
    return tmp_path


@pytest.fixture
def settings(project_root: Path) -> InvoiceSettings:
    return InvoiceSettings.from_cli(project_root=project_root)


@pytest.fixture
def store(settings: InvoiceSettings) -> Generator[InvoiceStore]:
    """Initialized store on a temp project, with no entry-point plugins."""
    s = InvoiceStore(settings, load_plugins=False)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def seeded_store(store: InvoiceStore) -> InvoiceStore:
    """Store with the :data:`CUSTOMERS` rows inserted."""
    seed_customers(store)
    return store


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp project root so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command test
    classes.
    """
    monkeypatch.chdir(project_root)
    monkeypatch.delenv("INVOICECTL_CONFIG", raising=False)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service and command test modules)
# ---------------------------------------------------------------------------


def seed_customers(store: InvoiceStore) -> None:
    """Insert the :data:`CUSTOMERS` rows."""
    with store.transaction() as conn:
        for customer_id, row in CUSTOMERS.items():
            conn.execute(insert(customers).values(id=customer_id, **row))


def form(customer_id: Any = "c1", amount: Any = "10.50", status: Any = "pending") -> dict[str, Any]:
    """A raw invoice form; pass None to leave a field missing."""
    return {"customerId": customer_id, "amount": amount, "status": status}


def create_invoice(store: InvoiceStore, **kwargs: Any) -> dict[str, Any]:
    """Create an invoice via InvoiceService, asserting success."""
    from invoicectl.services.invoice import InvoiceService

    result = InvoiceService(store).create_invoice(form(**kwargs))
    assert result.ok, result.error
    return result.data
