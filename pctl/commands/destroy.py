"""
Destroy Command

Delete stacks, configs and secrets from one endpoint.
"""

import click
from rich.markup import escape

from pctl.base import ServerCommand
from pctl.models.commands import DestroyOptions
from pctl.models.results import ExecutionReport

from .options import (
    endpoint_options,
    parse_endpoint_selector,
    parse_server_config,
    server_options,
)


class DestroyCommand(ServerCommand):
    """
    Destroy resources.

    Features:
    - Only names that exist on the endpoint are deleted
    - Stacks removed before the configs/secrets they may use
    - Plan preview and confirmation unless --yes
    """

    def __init__(self, options: DestroyOptions, **kwargs):
        super().__init__(**kwargs)
        self.options = options

    def execute(self) -> None:
        options = self.options
        self.show_header(
            title="Destroy Resources",
            subtitle="[bold red]Deleted stacks, configs and secrets cannot be restored[/bold red]",
            details={"Endpoint": options.endpoint.describe()},
        )

        logger = self.init_logger("destroy")

        logger.step("Connecting")
        session = self.open_session(options.server)
        endpoint = session.endpoint(options.endpoint, logger=logger)
        logger.success(f"Endpoint {endpoint.id} selected")

        logger.step("Planning")
        plan = endpoint.destroy(
            stacks=options.stacks,
            configs=options.configs,
            secrets=options.secrets,
        )
        logger.success(f"{plan.definition.operation_count} resource(s) to delete")

        logger.step("Applying")
        report = plan.execute(options.confirmed, console=self.console)
        self._print_summary(report)

    def _print_summary(self, report: ExecutionReport) -> None:
        if report.is_declined:
            self.print_warning("Destruction cancelled, nothing was changed")
            return
        if not report.is_applied:
            self.print_dim("Nothing matched the requested names; nothing to destroy.")
            return
        self.console.print(
            f"\n[color(248)]Destroyed {len(report.applied)} resource(s).[/color(248)]"
        )
        self.console.print(f"\n[dim]Logs saved to:[/dim] {escape(str(self.logger.log_path))}\n")


@click.command()
@server_options
@endpoint_options
@click.option("-y", "--yes", "confirmed", is_flag=True, help="Skip confirmation prompt")
@click.option("--stack", "stacks", multiple=True, help="Stack name (repeatable)")
@click.option("--config", "configs", multiple=True, help="Config name (repeatable)")
@click.option("--secret", "secrets", multiple=True, help="Secret name (repeatable)")
@click.option("--verbose", "-v", is_flag=True, help="Show all output")
def destroy(
    session,
    address,
    token,
    username,
    password,
    endpoint_id,
    endpoint_name,
    tags,
    tag_ids,
    confirmed,
    stacks,
    configs,
    secrets,
    verbose,
):
    """
    Destroy stacks, configs and secrets on one endpoint

    Warning: This action is DESTRUCTIVE and cannot be undone!

    Examples:
        # Remove a stack and its config, with confirmation
        pctl destroy -S prod -e swarm-eu --stack web --config nginx

        # Non-interactive
        pctl destroy -S prod --endpoint-id 3 --stack api --secret db-password -y
    """
    if not (stacks or configs or secrets):
        raise click.UsageError("Nothing to destroy: pass --stack, --config or --secret")
    selector = parse_endpoint_selector(endpoint_id, endpoint_name, tags, tag_ids)
    options = DestroyOptions(
        server=parse_server_config(session, address, token, username, password),
        endpoint=selector,
        confirmed=confirmed,
        stacks=stacks,
        configs=configs,
        secrets=secrets,
    )
    DestroyCommand(options, verbose=verbose).run()
