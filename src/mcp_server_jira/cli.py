"""Command line interface: one subcommand per registered Jira operation."""

import asyncio
import logging
import sys
from typing import Any, Dict, Tuple

import click

from .configuration import JiraConfig, load_config_from_env
from .core.handlers import OperationDispatcher
from .core.tools import ToolDefinition, ToolRegistry
from .error_handling import JiraInputError
from .jira.client import JiraResponse, get_jira_client
from .logging_config import configure_logging
from .session import SessionState

logger = logging.getLogger(__name__)


async def run_operation(
    config: JiraConfig, name: str, arguments: Dict[str, Any]
) -> Tuple[JiraResponse, SessionState]:
    """Run one operation in CLI mode against the configured host."""
    client = get_jira_client(config)
    if client is None:
        raise JiraInputError("No Jira host configured (set JIRA_HOST or pass --host)")

    try:
        dispatcher = OperationDispatcher(client, config)
        session = SessionState(cli_mode=True)
        response = await dispatcher.dispatch(name, arguments, session)
        return response, session
    finally:
        await client.close()


def _needs_password(tool_def: ToolDefinition, config: JiraConfig, arguments: Dict[str, Any]) -> bool:
    return tool_def.requires_auth and not arguments.get("password") and not config.password


def _build_command(tool_def: ToolDefinition) -> click.Command:
    options = [
        click.Option(
            [param.short_flag, param.long_flag, param.name],
            help=param.help + (" [required]" if param in tool_def.required else ""),
            default=None,
        )
        for param in tool_def.parameters
    ]

    @click.pass_context
    def callback(ctx: click.Context, **arguments: Any) -> None:
        config: JiraConfig = ctx.obj["config"]
        if _needs_password(tool_def, config, arguments):
            arguments["password"] = click.prompt("Password", hide_input=True)

        try:
            response, session = asyncio.run(run_operation(config, tool_def.name, arguments))
        except JiraInputError as e:
            raise click.UsageError(str(e), ctx=ctx)

        if not response.succeeded:
            for error in response.errors:
                click.echo(error, err=True)
            ctx.exit(1)

        if session.cli_output:
            click.echo(session.cli_output)

    return click.Command(
        name=tool_def.name,
        callback=callback,
        params=options,
        help=tool_def.description,
    )


@click.group()
@click.option("--host", help="Jira host (overrides JIRA_HOST)")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity")
@click.pass_context
def cli(ctx: click.Context, host: str | None, verbose: int) -> None:
    """Run operations against a Jira server."""
    logging_level = "WARNING"
    if verbose == 1:
        logging_level = "INFO"
    elif verbose >= 2:
        logging_level = "DEBUG"
    configure_logging(logging_level)

    config = load_config_from_env()
    if host:
        config = JiraConfig.model_validate({**config.model_dump(), "host": host})
    ctx.obj = {"config": config}


def _register_commands(group: click.Group) -> None:
    registry = ToolRegistry()
    registry.initialize_default_tools()
    for tool_def in registry.contracts():
        group.add_command(_build_command(tool_def))


_register_commands(cli)


def main() -> None:
    """Entry point for the jira-ops console script"""
    cli(prog_name="jira-ops")


if __name__ == "__main__":
    sys.exit(main())
