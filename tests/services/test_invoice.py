"""Tests for InvoiceService — create, update, delete, execute."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from sqlalchemy import select, text

from invoicectl.domain.commands import MutationCommand
from invoicectl.domain.types import MutationKind
from invoicectl.domain.validation import (
    CREATE_FAILED_MESSAGE,
    MSG_AMOUNT_GT_ZERO,
    MSG_AMOUNT_TOO_LARGE,
    MSG_SELECT_CUSTOMER,
    MSG_SELECT_STATUS,
    UPDATE_FAILED_MESSAGE,
)
from invoicectl.domain.money import MAX_AMOUNT_CENTS
from invoicectl.infrastructure.database.schema import invoices
from invoicectl.infrastructure.store import InvoiceStore
from invoicectl.services.invoice import (
    CREATE_DB_ERROR,
    UPDATE_DB_ERROR,
    InvoiceService,
)
from invoicectl.services.result import (
    DATABASE_ERROR,
    INVALID_COMMAND,
    VALIDATION_FAILED,
    ResultKind,
)
from tests.conftest import create_invoice, form

LISTING = "/dashboard/invoices"


def _rows(store: InvoiceStore) -> list[dict[str, object]]:
    with store.engine.connect() as conn:
        return [dict(r._mapping) for r in conn.execute(select(invoices))]


# ---------------------------------------------------------------------------
# create_invoice()
# ---------------------------------------------------------------------------


class TestCreateInvoice:
    def test_create_stores_cents_and_today(
        self, seeded_store: InvoiceStore, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("invoicectl.services.invoice.today_iso", lambda: "2026-03-14")
        result = InvoiceService(seeded_store).create_invoice(form(amount="10.50"))
        assert result.ok
        assert result.kind is ResultKind.SUCCESS
        assert result.data["amount"] == 1050
        assert result.data["date"] == "2026-03-14"

        rows = _rows(seeded_store)
        assert len(rows) == 1
        assert rows[0]["id"] == result.data["id"]
        assert rows[0]["customer_id"] == "c1"
        assert rows[0]["amount"] == 1050
        assert rows[0]["status"] == "pending"
        assert rows[0]["date"] == "2026-03-14"

    def test_create_redirects_and_revalidates(self, seeded_store: InvoiceStore) -> None:
        result = InvoiceService(seeded_store).create_invoice(form())
        assert result.redirect == LISTING
        assert result.revalidated == [LISTING]
        assert seeded_store.listing_cache.revalidations == [LISTING]
        assert result.to_form_state() == {"message": None}

    def test_create_generates_distinct_ids(self, seeded_store: InvoiceStore) -> None:
        first = create_invoice(seeded_store)
        second = create_invoice(seeded_store)
        assert first["id"] != second["id"]

    def test_float_amount_has_no_drift(self, seeded_store: InvoiceStore) -> None:
        data = create_invoice(seeded_store, amount=19.99)
        assert data["amount"] == 1999

    def test_client_supplied_id_and_date_ignored(self, seeded_store: InvoiceStore) -> None:
        raw = {**form(), "id": "forged", "date": "1999-01-01"}
        result = InvoiceService(seeded_store).create_invoice(raw)
        assert result.ok
        assert result.data["id"] != "forged"
        assert result.data["date"] != "1999-01-01"

    def test_largest_storable_amount(self, seeded_store: InvoiceStore) -> None:
        data = create_invoice(seeded_store, amount="92233720368547758.07")
        assert data["amount"] == MAX_AMOUNT_CENTS
        (row,) = _rows(seeded_store)
        assert row["amount"] == MAX_AMOUNT_CENTS

    @pytest.mark.parametrize("amount", ["92233720368547758.08", "1e20", "1e30"])
    def test_amount_past_maximum_is_validation_failure(
        self, seeded_store: InvoiceStore, amount: str
    ) -> None:
        result = InvoiceService(seeded_store).create_invoice(form(amount=amount))
        assert result.kind is ResultKind.VALIDATION_FAILURE
        assert result.field_errors == {"amount": [MSG_AMOUNT_TOO_LARGE]}
        assert _rows(seeded_store) == []

    def test_customer_id_whitespace_is_trimmed(self, seeded_store: InvoiceStore) -> None:
        result = InvoiceService(seeded_store).create_invoice(form(customer_id=" c1 "))
        assert result.ok
        assert result.data["customer_id"] == "c1"

    def test_missing_fields(self, seeded_store: InvoiceStore) -> None:
        result = InvoiceService(seeded_store).create_invoice({})
        assert not result.ok
        assert result.kind is ResultKind.VALIDATION_FAILURE
        assert result.error is not None
        assert result.error.code == VALIDATION_FAILED
        assert result.error.message == CREATE_FAILED_MESSAGE
        assert result.field_errors == {
            "customerId": [MSG_SELECT_CUSTOMER],
            "amount": [MSG_AMOUNT_GT_ZERO],
            "status": [MSG_SELECT_STATUS],
        }

    def test_validation_failure_has_no_side_effects(self, seeded_store: InvoiceStore) -> None:
        result = InvoiceService(seeded_store).create_invoice(form(amount="0"))
        assert not result.ok
        assert set(result.field_errors) == {"amount"}
        assert result.redirect is None
        assert result.revalidated == []
        assert seeded_store.listing_cache.revalidations == []
        assert _rows(seeded_store) == []

    def test_form_state_on_validation_failure(self, seeded_store: InvoiceStore) -> None:
        result = InvoiceService(seeded_store).create_invoice(form(status=None))
        assert result.to_form_state() == {
            "message": CREATE_FAILED_MESSAGE,
            "errors": {"status": [MSG_SELECT_STATUS]},
        }

    def test_datastore_failure(
        self, seeded_store: InvoiceStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        # Unknown customer violates the foreign key.
        with caplog.at_level(logging.ERROR, logger="invoicectl"):
            result = InvoiceService(seeded_store).create_invoice(form(customer_id="ghost"))
        assert not result.ok
        assert result.kind is ResultKind.DATASTORE_FAILURE
        assert result.error is not None
        assert result.error.code == DATABASE_ERROR
        assert result.error.message == CREATE_DB_ERROR
        assert result.error.detail == {}
        assert result.redirect is None
        assert result.revalidated == []
        assert result.to_form_state() == {"message": CREATE_DB_ERROR}
        assert seeded_store.listing_cache.revalidations == []
        assert _rows(seeded_store) == []
        assert "Failed to create invoice" in caplog.text


# ---------------------------------------------------------------------------
# update_invoice()
# ---------------------------------------------------------------------------


class TestUpdateInvoice:
    def test_update_overwrites_fields_and_keeps_date(self, seeded_store: InvoiceStore) -> None:
        data = create_invoice(seeded_store, amount="5")
        result = InvoiceService(seeded_store).update_invoice(
            data["id"], form(customer_id="c2", amount="99.99", status="paid")
        )
        assert result.ok
        assert result.redirect == LISTING
        assert result.revalidated == [LISTING]

        (row,) = _rows(seeded_store)
        assert row["customer_id"] == "c2"
        assert row["amount"] == 9999
        assert row["status"] == "paid"
        assert row["date"] == data["date"]

    def test_update_unknown_id_still_succeeds(self, seeded_store: InvoiceStore) -> None:
        result = InvoiceService(seeded_store).update_invoice("no-such-id", form())
        assert result.ok
        assert result.redirect == LISTING
        assert _rows(seeded_store) == []

    def test_update_at_and_past_maximum(self, seeded_store: InvoiceStore) -> None:
        data = create_invoice(seeded_store)
        svc = InvoiceService(seeded_store)

        at_max = svc.update_invoice(data["id"], form(amount="92233720368547758.07"))
        assert at_max.ok
        (row,) = _rows(seeded_store)
        assert row["amount"] == MAX_AMOUNT_CENTS

        past_max = svc.update_invoice(data["id"], form(amount="1e20"))
        assert past_max.kind is ResultKind.VALIDATION_FAILURE
        assert past_max.field_errors == {"amount": [MSG_AMOUNT_TOO_LARGE]}
        (row,) = _rows(seeded_store)
        assert row["amount"] == MAX_AMOUNT_CENTS

    def test_update_validation_failure(self, seeded_store: InvoiceStore) -> None:
        data = create_invoice(seeded_store)
        result = InvoiceService(seeded_store).update_invoice(data["id"], form(customer_id=""))
        assert result.kind is ResultKind.VALIDATION_FAILURE
        assert result.error is not None
        assert result.error.message == UPDATE_FAILED_MESSAGE
        assert result.field_errors == {"customerId": [MSG_SELECT_CUSTOMER]}
        (row,) = _rows(seeded_store)
        assert row["amount"] == 1050

    def test_update_datastore_failure(self, seeded_store: InvoiceStore) -> None:
        data = create_invoice(seeded_store)
        seeded_store.listing_cache.revalidations.clear()
        result = InvoiceService(seeded_store).update_invoice(
            data["id"], form(customer_id="ghost")
        )
        assert result.kind is ResultKind.DATASTORE_FAILURE
        assert result.error is not None
        assert result.error.message == UPDATE_DB_ERROR
        assert result.redirect is None
        assert seeded_store.listing_cache.revalidations == []
        (row,) = _rows(seeded_store)
        assert row["customer_id"] == "c1"


# ---------------------------------------------------------------------------
# delete_invoice()
# ---------------------------------------------------------------------------


class TestDeleteInvoice:
    def test_delete_removes_row(self, seeded_store: InvoiceStore) -> None:
        data = create_invoice(seeded_store)
        result = InvoiceService(seeded_store).delete_invoice(data["id"])
        assert result.ok
        assert result.data == {"id": data["id"]}
        assert result.redirect is None
        assert result.revalidated == [LISTING]
        assert _rows(seeded_store) == []

    def test_delete_twice_is_safe(self, seeded_store: InvoiceStore) -> None:
        data = create_invoice(seeded_store)
        svc = InvoiceService(seeded_store)
        assert svc.delete_invoice(data["id"]).ok
        assert svc.delete_invoice(data["id"]).ok
        assert seeded_store.listing_cache.revalidations[-2:] == [LISTING, LISTING]

    def test_delete_unknown_id_succeeds(self, seeded_store: InvoiceStore) -> None:
        create_invoice(seeded_store)
        result = InvoiceService(seeded_store).delete_invoice("no-such-id")
        assert result.ok
        assert len(_rows(seeded_store)) == 1

    def test_delete_coerces_id_to_string(self, seeded_store: InvoiceStore) -> None:
        result = InvoiceService(seeded_store).delete_invoice(42)
        assert result.ok
        assert result.data["id"] == "42"

    def test_delete_absorbs_datastore_failure(
        self, store: InvoiceStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        with store.transaction() as conn:
            conn.execute(text("DROP TABLE invoices"))

        with caplog.at_level(logging.ERROR, logger="invoicectl"):
            result = InvoiceService(store).delete_invoice("inv-1")

        assert result.ok
        assert result.error is None
        assert result.revalidated == [LISTING]
        assert store.listing_cache.revalidations == [LISTING]
        assert "Failed to Delete Invoice" in caplog.text


# ---------------------------------------------------------------------------
# execute()
# ---------------------------------------------------------------------------


class TestExecute:
    def test_invalid_command(self, seeded_store: InvoiceStore) -> None:
        result = InvoiceService(seeded_store).execute(MutationCommand(kind=MutationKind.UPDATE))
        assert not result.ok
        assert result.op == "update_invoice"
        assert result.error is not None
        assert result.error.code == INVALID_COMMAND
        assert result.kind is ResultKind.ERROR
        assert seeded_store.listing_cache.revalidations == []

    def test_prebuilt_delete(self, seeded_store: InvoiceStore) -> None:
        data = create_invoice(seeded_store)
        result = InvoiceService(seeded_store).execute(MutationCommand.delete(data["id"]))
        assert result.ok
        assert result.op == "delete_invoice"
        assert _rows(seeded_store) == []


class TestCustomListingPath:
    def test_redirect_follows_configured_path(
        self, project_root: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from invoicectl.config.settings import InvoiceSettings
        from tests.conftest import seed_customers

        monkeypatch.setenv("INVOICECTL_DASHBOARD__LISTING_PATH", "/billing")
        settings = InvoiceSettings.from_cli(project_root=project_root)
        store = InvoiceStore(settings, load_plugins=False)
        try:
            seed_customers(store)
            result = InvoiceService(store).create_invoice(form())
            assert result.redirect == "/billing"
            assert result.revalidated == ["/billing"]
        finally:
            store.close()
