"""
Deploy Command

Create or update a stack on one endpoint, together with the configs and
secrets it references.
"""

from pathlib import Path

import click
from rich.markup import escape

from pctl.base import ServerCommand
from pctl.models.commands import DeployOptions
from pctl.models.results import ExecutionReport
from pctl.utils import load_env_file, read_text_file

from .options import (
    endpoint_options,
    parse_endpoint_selector,
    parse_env_pairs,
    parse_file_mappings,
    parse_server_config,
    server_options,
)


class DeployCommand(ServerCommand):
    """
    Deploy a stack.

    Features:
    - Create-or-update decided from live server state
    - Configs and secrets created before the stack
    - Plan preview and confirmation unless --yes
    """

    def __init__(self, options: DeployOptions, **kwargs):
        super().__init__(**kwargs)
        self.options = options

    def execute(self) -> None:
        options = self.options
        self.show_header(
            title="Deploy Stack",
            details={
                "Stack": options.stack,
                "Endpoint": options.endpoint.describe(),
                "Compose": str(options.compose),
            },
        )

        logger = self.init_logger("deploy")

        logger.step("Reading Compose File")
        compose = read_text_file(options.compose, "compose")
        inline_vars = options.inline_vars
        if options.env_file:
            # Inline --env pairs come later so they win
            inline_vars = tuple(load_env_file(options.env_file)) + inline_vars
        logger.success(f"Loaded {options.compose} ({len(inline_vars)} env var(s))")

        logger.step("Connecting")
        session = self.open_session(options.server)
        endpoint = session.endpoint(options.endpoint, logger=logger)
        logger.success(f"Endpoint {endpoint.id} selected")

        logger.step("Planning")
        plan = endpoint.deploy(
            options.stack,
            compose,
            inline_vars=inline_vars,
            configs=options.configs,
            secrets=options.secrets,
        )
        logger.success(plan.definition.stack.describe())

        logger.step("Applying")
        report = plan.execute(options.confirmed, console=self.console)
        self._print_summary(report)

    def _print_summary(self, report: ExecutionReport) -> None:
        if report.is_declined:
            self.print_warning("Deployment cancelled, nothing was changed")
            return
        self.console.print(
            f"\n[color(248)]Stack '{escape(self.options.stack)}' deployed "
            f"({len(report.applied)} operation(s)).[/color(248)]"
        )
        self.console.print(f"\n[dim]Logs saved to:[/dim] {escape(str(self.logger.log_path))}\n")


@click.command()
@server_options
@endpoint_options
@click.option(
    "-f",
    "--compose",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Compose file",
)
@click.option("-s", "--stack", required=True, help="Stack name")
@click.option("-y", "--yes", "confirmed", is_flag=True, help="Skip confirmation prompt")
@click.option("--env", "env_pairs", multiple=True, help="Stack variable KEY=VALUE (repeatable)")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Dotenv file with stack variables (--env wins)",
)
@click.option("--config", "configs", multiple=True, help="Config NAME=PATH (repeatable)")
@click.option("--secret", "secrets", multiple=True, help="Secret NAME=PATH (repeatable)")
@click.option("--verbose", "-v", is_flag=True, help="Show all output")
def deploy(
    session,
    address,
    token,
    username,
    password,
    endpoint_id,
    endpoint_name,
    tags,
    tag_ids,
    compose,
    stack,
    confirmed,
    env_pairs,
    env_file,
    configs,
    secrets,
    verbose,
):
    """
    Deploy a stack and its configs/secrets to one endpoint

    Examples:
        # Deploy with a saved session to an endpoint by name
        pctl deploy -S prod -e swarm-eu -f docker-compose.yml -s web

        # Non-interactive deploy with an API token, selected by tags
        pctl deploy -H https://portainer:9443 -t ptr_xxx --tag prod --tag eu \\
            -f stack.yml -s api --env IMAGE_TAG=1.4.2 --config nginx=./nginx.conf -y
    """
    selector = parse_endpoint_selector(endpoint_id, endpoint_name, tags, tag_ids)
    options = DeployOptions(
        server=parse_server_config(session, address, token, username, password),
        compose=compose,
        stack=stack,
        endpoint=selector,
        confirmed=confirmed,
        inline_vars=parse_env_pairs(env_pairs),
        configs=parse_file_mappings(configs, "--config"),
        secrets=parse_file_mappings(secrets, "--secret"),
        env_file=env_file,
    )
    DeployCommand(options, verbose=verbose).run()
