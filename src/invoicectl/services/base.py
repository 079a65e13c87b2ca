"""BaseService — abstract foundation for all invoicectl services.

Every service receives an :class:`InvoiceStore` at construction time.
The store provides transactional database access and the plugin hook
relay. Services own their statement boundaries via
``self._store.transaction()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from invoicectl.infrastructure.store import InvoiceStore

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class InvoiceService(BaseService):
            def create_invoice(self, fields) -> ServiceResult:
                with self._store.transaction() as conn:
                    ...
    """

    def __init__(self, store: InvoiceStore) -> None:
        self._store = store

    def _revalidate(self, path: str, warnings: list[str]) -> None:
        """Signal every cache plugin that *path* is stale.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        try:
            self._store.plugins.hook.revalidate_path(path=path)
        except Exception:
            logger.warning("Cache revalidation failed for %s", path, exc_info=True)
            warnings.append(f"Cache revalidation failed for {path}")
