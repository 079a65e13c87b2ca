"""Pluggy hook specifications for invoicectl.

``revalidate_path`` is the cache-invalidation signal: after a write the
invoice service tells every registered cache layer that the output
computed for a path is stale.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("invoicectl")
hookimpl = pluggy.HookimplMarker("invoicectl")


class InvoiceHookSpec:
    """Hook specifications for the invoicectl plugin system."""

    @hookspec
    def revalidate_path(self, path: str) -> None:
        """Called when the cached output for *path* must be recomputed."""
