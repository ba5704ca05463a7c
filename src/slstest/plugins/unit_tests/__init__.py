"""plugins/unit_tests — Scaffold and run pytest suites for individual functions."""

from slstest.plugins.base import CommandContext, CommandSpec, OptionSpec, PluginMeta
from slstest.plugins.unit_tests.runner import RunResult, run_tests
from slstest.plugins.unit_tests.scaffold import create_test


def _create_test(ctx: CommandContext):
    return create_test(ctx.service, ctx.options["function"])


def _invoke_test(ctx: CommandContext) -> RunResult:
    return run_tests(
        ctx.service,
        function_names=ctx.options.get("function"),
        stage=ctx.options.get("stage"),
        region=ctx.options.get("region"),
        reporter=ctx.options.get("reporter"),
        reporter_options=ctx.options.get("reporter-options"),
        environment=ctx.environment,
    )


plugin = PluginMeta(
    name="unit_tests",
    description="Create and invoke pytest unit tests for service functions.",
    commands=[
        CommandSpec(
            path=("create", "test"),
            usage="Create test",
            lifecycle_events=["test"],
            options=[OptionSpec("function", "Name of the function", shortcut="f", required=True)],
        ),
        CommandSpec(
            path=("invoke", "test"),
            usage="Invoke test(s)",
            lifecycle_events=["test"],
            options=[
                OptionSpec("function", "Name of the function", shortcut="f"),
                OptionSpec("reporter", "Reporter to use", shortcut="R"),
                OptionSpec("reporter-options", "Options for the reporter", shortcut="O"),
                OptionSpec("stage", "Stage whose variables are applied", shortcut="s"),
                OptionSpec("region", "Region whose variables are applied", shortcut="r"),
            ],
        ),
    ],
    hooks={
        "create:test:test": _create_test,
        "invoke:test:test": _invoke_test,
    },
)
