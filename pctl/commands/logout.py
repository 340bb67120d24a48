"""
Logout Command

Remove a saved session.
"""

import click

from pctl.base import ServerCommand
from pctl.models.commands import LogoutOptions


class LogoutCommand(ServerCommand):
    """Forget a saved session (absent names are not an error)."""

    def __init__(self, options: LogoutOptions, **kwargs):
        super().__init__(**kwargs)
        self.options = options

    def execute(self) -> None:
        self.session_store.remove(self.options.session_name)
        self.print_success(f"Session '{self.options.session_name}' removed")


@click.command()
@click.argument("name")
@click.option("--verbose", "-v", is_flag=True, help="Show all output")
def logout(name, verbose):
    """
    Remove a server from logged in sessions

    Examples:
        pctl logout prod
    """
    LogoutCommand(LogoutOptions(session_name=name), verbose=verbose).run()
