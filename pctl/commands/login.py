"""
Login Command

Authenticate against a server and save the session under a name.
"""

import click
from rich.markup import escape

from pctl.base import ServerCommand
from pctl.models.commands import LoginOptions, TokenLogin, UserPassLogin

from .options import prompt_password


class LoginCommand(ServerCommand):
    """
    Log in and remember the session.

    Features:
    - API tokens saved as-is
    - Username/password logins are checked against the server but never saved
    """

    def __init__(self, options: LoginOptions, **kwargs):
        super().__init__(**kwargs)
        self.options = options

    def execute(self) -> None:
        server = self.options.server
        self.show_header(
            title="Login",
            details={"Session": self.options.session_name, "Server": server.address},
        )

        logger = self.init_logger("login")
        logger.step("Authenticating")

        session = self.authenticator().login(self.options)

        logger.success(f"Session '{self.options.session_name}' saved")
        self.console.print(
            f"\n[color(248)]Logged in to[/color(248)] [cyan]{escape(session.address)}[/cyan]"
        )
        self.console.print(
            f"[dim]Use it with:[/dim] [cyan]pctl deploy -S {escape(self.options.session_name)} ...[/cyan]\n"
        )


@click.command()
@click.argument("name")
@click.option("-H", "--address", required=True, help="Server address")
@click.option("-t", "--token", envvar="PCTL_TOKEN", help="API token")
@click.option("-u", "--username", help="Username to login")
@click.option("-p", "--password", envvar="PCTL_PASSWORD", help="Password for login")
@click.option("--verbose", "-v", is_flag=True, help="Show all output")
def login(name, address, token, username, password, verbose):
    """
    Log in to a server and add it to sessions

    Examples:
        # Log in with an API token
        pctl login prod -H https://portainer.example.com -t ptr_xxx

        # Check a username/password login (it cannot be saved; use -t for that)
        pctl login prod -H https://portainer.example.com -u admin
    """
    if token and username:
        raise click.UsageError("Use either --token or --username, not both")
    if token:
        server = TokenLogin(address=address, token=token)
    elif username:
        server = UserPassLogin(
            address=address,
            username=username,
            password=password if password is not None else prompt_password(username),
        )
    else:
        raise click.UsageError("Either --token or --username is required")

    cmd = LoginCommand(LoginOptions(session_name=name, server=server), verbose=verbose)
    cmd.run()
