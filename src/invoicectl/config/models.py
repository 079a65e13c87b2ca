"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, invoicectl.toml only contains
overrides. A fresh project needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel

DEFAULT_LISTING_PATH = "/dashboard/invoices"


class DatabaseConfig(BaseModel):
    """[database] section.

    ``url`` is any SQLAlchemy URL. When unset, a SQLite file under
    ``{project_root}/.invoicectl/`` is used.
    """

    model_config = {"frozen": True}

    url: str | None = None
    echo: bool = False


class DashboardConfig(BaseModel):
    """[dashboard] section."""

    model_config = {"frozen": True}

    listing_path: str = DEFAULT_LISTING_PATH

