"""InvoiceStore — the datastore capability injected into every service.

The store owns the SQLAlchemy engine and the plugin manager. Its
lifecycle belongs to whoever constructs it (the CLI's ``AppContext``,
a test fixture): services borrow it and never open or close it.

- **DB**: :meth:`transaction` wraps ``engine.begin()`` — commit on
  success, rollback on exception.
- **Cache**: the built-in :class:`ListingCache` is registered as a
  plugin on construction; writes signal it through the
  ``revalidate_path`` hook.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from invoicectl.infrastructure.database.engine import init_database
from invoicectl.plugins.builtins.listing_cache import ListingCache
from invoicectl.plugins.manager import PluginManager

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from invoicectl.config.settings import InvoiceSettings

logger = logging.getLogger(__name__)


class InvoiceStore:
    """Repository handle over the invoices database and cache plugins.

    Constructed once per process from :class:`InvoiceSettings`. Services
    receive the store via their :class:`BaseService` constructor.
    """

    def __init__(self, settings: InvoiceSettings, *, load_plugins: bool = True) -> None:
        self._settings = settings
        self._engine: Engine = init_database(settings.database_url, echo=settings.database.echo)
        self._listing_cache = ListingCache()
        self._plugins = PluginManager()
        if load_plugins:
            self._plugins.load_entry_points()
        self._plugins.register_plugin(self._listing_cache, name="listing-cache")
        self._closed = False

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> InvoiceSettings:
        """The resolved settings for this store."""
        return self._settings

    @property
    def plugins(self) -> PluginManager:
        """The plugin manager carrying the ``revalidate_path`` hook."""
        return self._plugins

    @property
    def listing_cache(self) -> ListingCache:
        """The built-in listing cache plugin."""
        return self._listing_cache

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Yield a connection inside a transaction.

        Commits when the block exits normally and rolls back when it
        raises; the exception propagates to the caller.

        Usage::

            with store.transaction() as conn:
                conn.execute(insert(invoices).values(...))
        """
        with self._engine.begin() as conn:
            yield conn

    def close(self) -> None:
        """Dispose the engine's connection pool. Idempotent."""
        if self._closed:
            return
        self._engine.dispose()
        self._closed = True
        logger.debug("Store closed")
