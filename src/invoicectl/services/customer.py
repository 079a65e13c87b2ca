"""CustomerService — the customers invoices point at."""

from __future__ import annotations

import logging

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from invoicectl.domain.ids import generate_id
from invoicectl.infrastructure.database.schema import customers
from invoicectl.services.base import BaseService
from invoicectl.services.result import (
    DATABASE_ERROR,
    VALIDATION_FAILED,
    ServiceError,
    ServiceResult,
)
from invoicectl.services.telemetry import traced

logger = logging.getLogger(__name__)

ADD_FAILED_MESSAGE = "Missing fields. Failed to add customer."


class CustomerService(BaseService):
    """Add and list customers."""

    @traced
    def add_customer(
        self,
        name: str | None,
        email: str | None,
        *,
        image_url: str | None = None,
    ) -> ServiceResult:
        """Insert a customer. Email addresses are unique."""
        op = "add_customer"
        errors: dict[str, list[str]] = {}
        if not name or not name.strip():
            errors["name"] = ["Please enter a customer name."]
        if not email or "@" not in email:
            errors["email"] = ["Please enter a valid email address."]
        if errors:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code=VALIDATION_FAILED,
                    message=ADD_FAILED_MESSAGE,
                    detail={"errors": errors},
                ),
            )

        assert name is not None and email is not None
        customer_id = generate_id()
        try:
            with self._store.transaction() as conn:
                conn.execute(
                    insert(customers).values(
                        id=customer_id,
                        name=name.strip(),
                        email=email.strip(),
                        image_url=image_url,
                    )
                )
        except IntegrityError:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code=DATABASE_ERROR,
                    message=f"Database Error: Customer email already exists: {email.strip()}",
                ),
            )
        except SQLAlchemyError:
            logger.error("Failed to add customer", exc_info=True)
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code=DATABASE_ERROR, message="Database Error: Failed to Add Customer."
                ),
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={"id": customer_id, "name": name.strip(), "email": email.strip()},
        )

    @traced
    def list_customers(self) -> ServiceResult:
        """All customers, sorted by name."""
        stmt = select(customers).order_by(customers.c.name, customers.c.id)
        with self._store.engine.connect() as conn:
            items = [
                {
                    "id": row.id,
                    "name": row.name,
                    "email": row.email,
                    "image_url": row.image_url,
                }
                for row in conn.execute(stmt)
            ]
        return ServiceResult(
            ok=True, op="list_customers", data={"items": items, "count": len(items)}
        )
