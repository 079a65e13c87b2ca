"""Locate ``invoicectl.toml``.

``INVOICECTL_CONFIG`` names the file outright. Otherwise the nearest
``invoicectl.toml`` at or above the starting directory is used.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "invoicectl.toml"
CONFIG_ENV_VAR = "INVOICECTL_CONFIG"


def _candidates(start: Path) -> Iterator[Path]:
    here = start.resolve()
    for directory in (here, *here.parents):
        yield directory / CONFIG_FILENAME


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start* (default: cwd), or None.

    A path in ``INVOICECTL_CONFIG`` that does not exist yields None rather
    than falling back to the directory search.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    return next((p for p in _candidates(start or Path.cwd()) if p.is_file()), None)
