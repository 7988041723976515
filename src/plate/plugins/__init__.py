"""Plugin subsystem for plate.

Plugins contribute node kinds, commands, queries, normalizers and
transaction transforms to a ``PluginRegistry``.  Built-in plugins live in ``plate.plugins.builtin``;
third-party implementations can be discovered through
``importlib.metadata`` entry-points under the "plate.plugins" group.

Example
-------
Declare a plugin in pyproject.toml:

.. code-block:: toml

    [project.entry-points."plate.plugins"]
    callout = "my_package.callout:CalloutPlugin"
"""
from __future__ import annotations

from plate.plugins.base import (
    ChildConstraint,
    CommandSpec,
    NodeRole,
    NodeSpec,
    NormalizerSpec,
    Plugin,
    QuerySpec,
    TransactionTransformSpec,
)
from plate.plugins.registry import (
    PluginAlreadyRegisteredError,
    PluginNotFoundError,
    PluginRegistry,
)

__all__ = [
    "Plugin",
    "NodeSpec",
    "NodeRole",
    "ChildConstraint",
    "CommandSpec",
    "QuerySpec",
    "NormalizerSpec",
    "TransactionTransformSpec",
    "PluginRegistry",
    "PluginNotFoundError",
    "PluginAlreadyRegisteredError",
]
