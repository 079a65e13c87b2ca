"""Identifier generation for invoices and customers.

IDs are opaque UUID4 strings generated server-side. The caller never
supplies an ID for a new row.

INVARIANT: IDs are permanent. An update never rewrites ``id``.
"""

from __future__ import annotations

import uuid


def generate_id() -> str:
    """Return a fresh random identifier."""
    return str(uuid.uuid4())
