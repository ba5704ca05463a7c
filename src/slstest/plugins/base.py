"""
plugins/base.py — Plugin base classes and metadata.

Every plugin package must expose a top-level ``plugin`` object that is an
instance of :class:`PluginMeta`.  The plugin registry in
``plugins/__init__.py`` auto-discovers these via ``pkgutil``.

A plugin declares commands (each with lifecycle events and options) and maps
lifecycle event names to hooks.  Event names are the command path plus the
event, joined by colons: command ``("create", "test")`` with lifecycle event
``"test"`` fires the hook registered under ``"create:test:test"``.

Minimal plugin example::

    # src/slstest/plugins/my_feature/__init__.py
    from slstest.plugins.base import CommandSpec, PluginMeta

    def _hello(ctx):
        return f"hello {ctx.service.name}"

    plugin = PluginMeta(
        name="my_feature",
        description="Does something useful.",
        commands=[CommandSpec(path=("say", "hello"), usage="Say hello", lifecycle_events=["hello"])],
        hooks={"say:hello:hello": _hello},
    )
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from slstest.core.environment import EnvironmentScope
    from slstest.core.service import ServiceConfig


@dataclass(frozen=True)
class OptionSpec:
    """One option accepted by a command."""

    name: str
    usage: str = ""
    shortcut: str | None = None
    required: bool = False


@dataclass(frozen=True)
class CommandSpec:
    """A command contributed by a plugin."""

    path: tuple[str, ...]
    """Command words, e.g. ``("invoke", "test")``."""

    usage: str = ""

    lifecycle_events: list[str] = field(default_factory=list)
    """Events fired in order when the command runs."""

    options: list[OptionSpec] = field(default_factory=list)

    @property
    def key(self) -> str:
        return ":".join(self.path)

    def event_names(self) -> list[str]:
        """Fully-qualified hook names, e.g. ``["create:test:test"]``."""
        return [f"{self.key}:{event}" for event in self.lifecycle_events]

    def missing_options(self, options: dict[str, Any]) -> list[str]:
        return [opt.name for opt in self.options if opt.required and options.get(opt.name) in (None, "", [])]


@dataclass
class CommandContext:
    """What a hook receives: the loaded service plus the command's options."""

    service: ServiceConfig
    options: dict[str, Any] = field(default_factory=dict)
    environment: EnvironmentScope | None = None


Hook = Callable[[CommandContext], Any]


@dataclass
class PluginMeta:
    """Metadata, commands and lifecycle hooks for a single plugin."""

    name: str
    """Unique snake_case identifier (e.g. ``"unit_tests"``)."""

    description: str
    """One-line human-readable description shown by ``slstest plugins``."""

    commands: list[CommandSpec] = field(default_factory=list)

    hooks: dict[str, Hook] = field(default_factory=dict)
    """Lifecycle event name → callable."""

    version: str = "1.0.0"
    """Semver string — informational only."""

    def __repr__(self) -> str:
        return (
            f"PluginMeta(name={self.name!r}, version={self.version!r}, "
            f"commands={[c.key for c in self.commands]!r})"
        )
