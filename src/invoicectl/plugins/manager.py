"""Hook dispatch for cache-invalidation plugins.

Third-party plugins are found through the ``invoicectl.plugins`` entry
point group. The store registers its built-in listing cache directly.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from invoicectl.plugins.hookspecs import InvoiceHookSpec

PROJECT_NAME = "invoicectl"
ENTRY_POINT_GROUP = "invoicectl.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Thin wrapper over :class:`pluggy.PluginManager` with invoicectl's hookspecs."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(InvoiceHookSpec)

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def load_entry_points(self) -> int:
        """Register every plugin in the entry point group; return how many loaded.

        An entry point may name a class instead of an instance. Classes are
        instantiated with no arguments; one that fails to construct is
        dropped with a warning and not counted.
        """
        count = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        for name, plugin in list(self._pm.list_name_plugin()):
            if not inspect.isclass(plugin):
                continue
            self._pm.unregister(name=name)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Skipping plugin %s: constructor failed", name, exc_info=True)
                count -= 1
                continue
            self._pm.register(instance, name=name)
        logger.debug("Loaded %d entry-point plugin(s)", count)
        return count

    def register_plugin(self, plugin: object, name: str | None = None) -> str:
        """Register *plugin*; return the name it was registered under."""
        resolved = name or type(plugin).__name__
        self._pm.register(plugin, name=resolved)
        logger.debug("Registered plugin %s", resolved)
        return resolved

    def list_plugin_names(self) -> list[str]:
        return [name for name, _ in self._pm.list_name_plugin()]
