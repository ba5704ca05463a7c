"""
test_plugins.py — Unit tests for the plugin registry and lifecycle dispatch.
"""

import pytest

import slstest.plugins as registry
from slstest.core.environment import MemoryEnvironment
from slstest.core.exceptions import ConfigurationError
from slstest.plugins.base import CommandContext, CommandSpec, OptionSpec, PluginMeta


@pytest.fixture
def clean_registry(monkeypatch):
    """Give each test its own plugin list."""
    monkeypatch.setattr(registry, "_PLUGINS", [])
    return registry


# ── CommandSpec ────────────────────────────────────────────────────────────────


class TestCommandSpec:
    def test_event_names(self):
        spec = CommandSpec(path=("create", "test"), lifecycle_events=["test"])
        assert spec.key == "create:test"
        assert spec.event_names() == ["create:test:test"]

    def test_missing_required_options(self):
        spec = CommandSpec(
            path=("create", "test"),
            options=[OptionSpec("function", required=True), OptionSpec("reporter")],
        )
        assert spec.missing_options({}) == ["function"]
        assert spec.missing_options({"function": ""}) == ["function"]
        assert spec.missing_options({"function": "hello"}) == []

    def test_repr_lists_commands(self):
        meta = PluginMeta(name="p", description="d", commands=[CommandSpec(path=("a", "b"))])
        assert "commands=['a:b']" in repr(meta)


# ── register_all ───────────────────────────────────────────────────────────────


class TestRegisterAll:
    def test_discovers_unit_tests_plugin(self, clean_registry):
        plugins = clean_registry.register_all()
        names = [p.name for p in plugins]
        assert names[0] == "unit_tests"

    def test_is_idempotent(self, clean_registry):
        first = list(clean_registry.register_all())
        second = clean_registry.register_all()
        assert [p.name for p in first] == [p.name for p in second]

    def test_unit_tests_plugin_declares_both_commands(self, clean_registry):
        clean_registry.register_all()
        create = clean_registry.get_command(("create", "test"))
        invoke = clean_registry.get_command(("invoke", "test"))
        assert create.event_names() == ["create:test:test"]
        assert invoke.event_names() == ["invoke:test:test"]
        assert [o.name for o in create.options if o.required] == ["function"]
        assert not any(o.required for o in invoke.options)

    def test_register_rejects_duplicates(self, clean_registry):
        clean_registry.register(PluginMeta(name="dup", description=""))
        with pytest.raises(ConfigurationError, match="already registered"):
            clean_registry.register(PluginMeta(name="dup", description=""))


# ── run_command ────────────────────────────────────────────────────────────────


class TestRunCommand:
    def test_hooks_fire_in_lifecycle_order(self, clean_registry, service):
        calls = []
        clean_registry.register(
            PluginMeta(
                name="ordered",
                description="",
                commands=[CommandSpec(path=("deploy", "all"), lifecycle_events=["package", "deploy"])],
                hooks={
                    "deploy:all:deploy": lambda ctx: calls.append("deploy") or "deployed",
                    "deploy:all:package": lambda ctx: calls.append("package"),
                },
            )
        )
        result = clean_registry.run_command(("deploy", "all"), CommandContext(service=service))
        assert calls == ["package", "deploy"]
        assert result == "deployed"

    def test_unknown_command_raises(self, clean_registry, service):
        with pytest.raises(ConfigurationError, match="Unknown command 'nope run'"):
            clean_registry.run_command(("nope", "run"), CommandContext(service=service))

    def test_missing_required_option_raises(self, clean_registry, service):
        clean_registry.register_all()
        with pytest.raises(ConfigurationError, match="--function"):
            clean_registry.run_command(("create", "test"), CommandContext(service=service, options={}))

    def test_create_test_hook_scaffolds(self, clean_registry, service, service_dir):
        clean_registry.register_all()
        path = clean_registry.run_command(
            ("create", "test"), CommandContext(service=service, options={"function": "hello"})
        )
        assert path == service_dir.resolve() / "tests" / "test_hello.py"
        assert path.exists()

    def test_invoke_test_hook_without_suites(self, clean_registry, service):
        clean_registry.register_all()
        ctx = CommandContext(service=service, options={"function": []}, environment=MemoryEnvironment())
        result = clean_registry.run_command(("invoke", "test"), ctx)
        assert result.ran is False
        assert result.failures == 0
