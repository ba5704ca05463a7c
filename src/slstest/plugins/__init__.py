"""
plugins/__init__.py — Plugin registry with auto-discovery and lifecycle dispatch.

Call :func:`register_all` once at startup (the CLI does this).  Thereafter
:func:`run_command` looks up a command by its words, checks its required
options and fires the hooks of each of its lifecycle events in order.

Adding a new plugin
-------------------
1. Create ``src/slstest/plugins/<name>/`` directory.
2. Add ``__init__.py`` that sets ``plugin = PluginMeta(...)``.
3. That's it — ``register_all()`` will pick it up automatically.
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
from pathlib import Path
from typing import Any

from slstest.core.exceptions import ConfigurationError
from slstest.plugins.base import CommandContext, CommandSpec, PluginMeta

log = logging.getLogger(__name__)

_PLUGINS: list[PluginMeta] = []

# Plugins loaded in this order so their hooks fire first for shared events.
# Any plugin NOT listed here is appended afterwards alphabetically.
_PREFERRED_ORDER = [
    "unit_tests",
]


def register_all() -> list[PluginMeta]:
    """Auto-discover every sub-package of ``plugins/`` and register it."""
    if _PLUGINS:
        return _PLUGINS  # idempotent

    plugins_dir = Path(__file__).parent
    found: dict[str, PluginMeta] = {}

    for _finder, name, is_pkg in pkgutil.iter_modules([str(plugins_dir)]):
        if not is_pkg:
            continue
        try:
            mod = importlib.import_module(f"{__name__}.{name}")
        except ImportError as exc:
            log.warning("Failed to load plugin %r: %s", name, exc)
            continue
        if isinstance(getattr(mod, "plugin", None), PluginMeta):
            found[name] = mod.plugin

    for name in _PREFERRED_ORDER:
        if name in found:
            _PLUGINS.append(found.pop(name))
    for meta in sorted(found.values(), key=lambda m: m.name):
        _PLUGINS.append(meta)

    return _PLUGINS


def register(meta: PluginMeta) -> None:
    """Register a plugin that does not live under ``plugins/``."""
    if any(p.name == meta.name for p in _PLUGINS):
        raise ConfigurationError(f"Plugin {meta.name!r} is already registered")
    _PLUGINS.append(meta)


def get_plugins() -> list[PluginMeta]:
    """Return the list of registered plugins (call ``register_all`` first)."""
    return list(_PLUGINS)


def get_command(path: tuple[str, ...] | list[str]) -> CommandSpec:
    key = ":".join(path)
    for meta in _PLUGINS:
        for command in meta.commands:
            if command.key == key:
                return command
    raise ConfigurationError(f"Unknown command '{' '.join(path)}'")


def run_command(path: tuple[str, ...] | list[str], context: CommandContext) -> Any:
    """Fire every hook bound to the command's lifecycle events; return the last result."""
    command = get_command(path)
    missing = command.missing_options(context.options)
    if missing:
        raise ConfigurationError(
            f"Missing required option(s) for '{' '.join(command.path)}': {', '.join('--' + m for m in missing)}"
        )

    result = None
    for event in command.event_names():
        for meta in _PLUGINS:
            hook = meta.hooks.get(event)
            if hook is None:
                continue
            log.debug("Running hook %s from plugin %s", event, meta.name)
            result = hook(context)
    return result
