"""Plugin registry for plate.

A ``PluginRegistry`` is an explicit value owned by one ``Editor``; there
is no global registry.  Registering a ``Plugin`` merges its node specs,
commands, queries, normalizers and transaction transforms into tables
used for dispatch.  Name collisions are rejected so that dispatch by exact
string match is unambiguous.

Third-party plugins can also be installed as packages and discovered
via ``importlib.metadata`` entry-points under the "plate.plugins" group.

Example
-------
Build a registry from the built-in richtext preset plus a custom plugin::

    from plate.plugins.registry import PluginRegistry

    registry = PluginRegistry.richtext()
    registry.register(CalloutPlugin())

Load all installed plugins via entry-points::

    registry.load_entrypoints("plate.plugins")

Declare a plugin in a downstream ``pyproject.toml``:

.. code-block:: toml

    [project.entry-points."plate.plugins"]
    callout = "my_package.callout:CalloutPlugin"
"""
from __future__ import annotations

import importlib.metadata
import logging
from collections.abc import Iterable

from plate.errors import UnknownCommand, UnknownQuery
from plate.plugins.base import (
    CommandSpec,
    NodeRole,
    NodeSpec,
    NormalizerSpec,
    Plugin,
    QuerySpec,
    TransactionTransformSpec,
)

logger = logging.getLogger(__name__)

ENTRYPOINT_GROUP = "plate.plugins"


class PluginNotFoundError(KeyError):
    """Raised when a requested plugin id is not in the registry."""

    def __init__(self, name: str, registry_name: str) -> None:
        self.plugin_name = name
        self.registry_name = registry_name
        super().__init__(
            f"Plugin {name!r} is not registered in the {registry_name!r} registry. "
            "Check that the package is installed and its entry-points are declared."
        )


class PluginAlreadyRegisteredError(ValueError):
    """Raised when a plugin id, node kind, command or query name is taken."""

    def __init__(self, name: str, registry_name: str, what: str = "Plugin") -> None:
        self.plugin_name = name
        self.registry_name = registry_name
        super().__init__(
            f"{what} {name!r} is already registered in the {registry_name!r} registry. "
            "Use a unique name or explicitly deregister the existing entry first."
        )


class PluginRegistry:
    """Registry of plugins and the extension points they contribute.

    Parameters
    ----------
    plugins:
        Plugins to register, in order.  Normalizers run in registration
        order, so structural plugins (``core``) should come first.
    name:
        A human-readable name for this registry (used in error messages).
    """

    def __init__(self, plugins: Iterable[Plugin] = (), name: str = "editor") -> None:
        self._name = name
        self._plugins: dict[str, Plugin] = {}
        self._node_specs: dict[str, NodeSpec] = {}
        self._commands: dict[str, CommandSpec] = {}
        self._queries: dict[str, QuerySpec] = {}
        self._normalizers: list[tuple[str, NormalizerSpec]] = []
        self._transforms: list[tuple[str, TransactionTransformSpec]] = []
        for plugin in plugins:
            self.register(plugin)

    # ------------------------------------------------------------------
    # Presets
    # ------------------------------------------------------------------

    @classmethod
    def core(cls) -> "PluginRegistry":
        """Return a registry with only the structural core plugin."""
        from plate.plugins.builtin import core_plugins

        return cls(core_plugins(), name="core")

    @classmethod
    def richtext(cls) -> "PluginRegistry":
        """Return a registry with the full rich-text plugin set."""
        from plate.plugins.builtin import richtext_plugins

        return cls(richtext_plugins(), name="richtext")

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, plugin: Plugin) -> Plugin:
        """Register ``plugin`` and everything it contributes.

        Registration is all-or-nothing: every name is checked before any
        table is touched.

        Returns
        -------
        Plugin
            The plugin, unchanged, so the call can be chained.

        Raises
        ------
        PluginAlreadyRegisteredError
            If the plugin id, or any node kind, command or query name it
            contributes, is already in use.
        TypeError
            If ``plugin`` is not a ``Plugin`` instance or has no id.
        """
        if not isinstance(plugin, Plugin):
            raise TypeError(
                f"Cannot register {plugin!r}: it must be an instance of {Plugin.__name__}."
            )
        if not plugin.id:
            raise TypeError(f"Cannot register {plugin!r}: plugin id is empty.")
        if plugin.id in self._plugins:
            raise PluginAlreadyRegisteredError(plugin.id, self._name)

        specs = plugin.node_specs()
        commands = plugin.commands()
        queries = plugin.queries()
        normalizers = plugin.normalizers()
        transforms = plugin.transaction_transforms()

        self._check_unique([s.kind for s in specs], self._node_specs, "Node kind")
        self._check_unique([c.name for c in commands], self._commands, "Command")
        self._check_unique([q.name for q in queries], self._queries, "Query")

        self._plugins[plugin.id] = plugin
        self._node_specs.update((s.kind, s) for s in specs)
        self._commands.update((c.name, c) for c in commands)
        self._queries.update((q.name, q) for q in queries)
        self._normalizers.extend((plugin.id, n) for n in normalizers)
        self._transforms.extend((plugin.id, t) for t in transforms)
        logger.debug(
            "Registered plugin %r in registry %r: %d kind(s), %d command(s), "
            "%d query(ies), %d normalizer(s), %d transform(s)",
            plugin.id,
            self._name,
            len(specs),
            len(commands),
            len(queries),
            len(normalizers),
            len(transforms),
        )
        return plugin

    def _check_unique(self, names: list[str], table: dict[str, object], what: str) -> None:
        seen: set[str] = set()
        for name in names:
            if name in table or name in seen:
                raise PluginAlreadyRegisteredError(name, self._name, what)
            seen.add(name)

    def deregister(self, plugin_id: str) -> None:
        """Remove a plugin and all of its contributions.

        Raises
        ------
        PluginNotFoundError
            If ``plugin_id`` is not currently registered.
        """
        plugin = self.get(plugin_id)
        for spec in plugin.node_specs():
            self._node_specs.pop(spec.kind, None)
        for command in plugin.commands():
            self._commands.pop(command.name, None)
        for query in plugin.queries():
            self._queries.pop(query.name, None)
        self._normalizers = [(pid, n) for pid, n in self._normalizers if pid != plugin_id]
        self._transforms = [(pid, t) for pid, t in self._transforms if pid != plugin_id]
        del self._plugins[plugin_id]
        logger.debug("Deregistered plugin %r from registry %r", plugin_id, self._name)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    def get(self, plugin_id: str) -> Plugin:
        try:
            return self._plugins[plugin_id]
        except KeyError:
            raise PluginNotFoundError(plugin_id, self._name) from None

    def list_plugins(self) -> list[str]:
        """Return plugin ids in registration order."""
        return list(self._plugins)

    def command(self, name: str) -> CommandSpec:
        """Return the command registered under ``name``.

        Raises
        ------
        UnknownCommand
            If no plugin contributes ``name``.
        """
        try:
            return self._commands[name]
        except KeyError:
            raise UnknownCommand(name) from None

    def query(self, name: str) -> QuerySpec:
        try:
            return self._queries[name]
        except KeyError:
            raise UnknownQuery(name) from None

    def commands(self) -> dict[str, CommandSpec]:
        return dict(self._commands)

    def queries(self) -> dict[str, QuerySpec]:
        return dict(self._queries)

    def normalizers(self) -> list[NormalizerSpec]:
        return [n for _, n in self._normalizers]

    def transaction_transforms(self) -> list[TransactionTransformSpec]:
        return [t for _, t in self._transforms]

    def node_specs(self) -> dict[str, NodeSpec]:
        return dict(self._node_specs)

    def node_spec(self, kind: str) -> NodeSpec | None:
        return self._node_specs.get(kind)

    def is_known_kind(self, kind: str) -> bool:
        return kind in self._node_specs

    def is_inline_void(self, kind: str) -> bool:
        spec = self._node_specs.get(kind)
        return spec is not None and spec.is_void and spec.role is NodeRole.INLINE

    def is_block_void(self, kind: str) -> bool:
        spec = self._node_specs.get(kind)
        return spec is not None and spec.is_void and spec.role is NodeRole.BLOCK

    def owned_attrs(self, kind: str) -> tuple[str, ...]:
        spec = self._node_specs.get(kind)
        return spec.owned_attrs if spec is not None else ()

    def foreign_attrs(self, kind: str) -> set[str]:
        """Return attributes owned by some *other* known kind than ``kind``."""
        own = set(self.owned_attrs(kind))
        foreign: set[str] = set()
        for other, spec in self._node_specs.items():
            if other != kind:
                foreign.update(spec.owned_attrs)
        return foreign - own

    def __contains__(self, plugin_id: object) -> bool:
        """Support ``"marks" in registry`` membership test."""
        return plugin_id in self._plugins

    def __len__(self) -> int:
        """Return the number of registered plugins."""
        return len(self._plugins)

    def __repr__(self) -> str:
        return f"PluginRegistry(name={self._name!r}, plugins={self.list_plugins()})"

    # ------------------------------------------------------------------
    # Entry-point loading
    # ------------------------------------------------------------------

    def load_entrypoints(self, group: str = ENTRYPOINT_GROUP) -> None:
        """Discover and register plugins declared as package entry-points.

        Each entry-point may name either a ``Plugin`` subclass (which is
        instantiated with no arguments) or a ready ``Plugin`` instance.

        Plugins whose ``id`` is already registered (e.g., from a previous
        call, or under a differently named entry-point) are skipped with a
        debug-level log entry rather than raising an error. This makes
        repeated calls to ``load_entrypoints`` idempotent.
        """
        entry_points = importlib.metadata.entry_points(group=group)
        for ep in entry_points:
            try:
                loaded = ep.load()
                plugin = loaded() if isinstance(loaded, type) else loaded
            except Exception:
                logger.exception(
                    "Failed to load entry-point %r from group %r; skipping.",
                    ep.name,
                    group,
                )
                continue
            plugin_id = getattr(plugin, "id", None)
            if plugin_id is not None and plugin_id in self._plugins:
                logger.debug(
                    "Plugin %r from entry-point %r already registered in %r; skipping.",
                    plugin_id,
                    ep.name,
                    self._name,
                )
                continue
            try:
                self.register(plugin)
            except (PluginAlreadyRegisteredError, TypeError):
                logger.warning(
                    "Entry-point %r loaded but could not be registered "
                    "in registry %r; skipping.",
                    ep.name,
                    self._name,
                )
