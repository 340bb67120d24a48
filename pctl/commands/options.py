"""
Shared CLI Options

Click option groups and parsers that turn raw flags into validated
server and endpoint descriptions.
"""

from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple

import click

from pctl.models.commands import (
    ById,
    ByName,
    ByTagIds,
    ByTagNames,
    EndpointSelector,
    FileMapping,
    InlineEnv,
    SavedSession,
    ServerConfig,
    TokenLogin,
    UserPassLogin,
)


def _apply(options: Sequence[Callable]) -> Callable:
    def decorator(func):
        for option in reversed(options):
            func = option(func)
        return func

    return decorator


def server_options(func):
    """Add the server selection flags (-S | -H with -t or -u/-p)."""
    return _apply(
        [
            click.option("-S", "--session", help="Existing session name"),
            click.option("-H", "--address", help="Server address (e.g., https://portainer:9443)"),
            click.option("-t", "--token", envvar="PCTL_TOKEN", help="API token"),
            click.option("-u", "--username", help="Username to login"),
            click.option("-p", "--password", envvar="PCTL_PASSWORD", help="Password for login"),
        ]
    )(func)


def endpoint_options(func):
    """Add the endpoint selector flags (exactly one kind must be used)."""
    return _apply(
        [
            click.option("--endpoint-id", type=int, help="Endpoint id"),
            click.option("-e", "--endpoint", "endpoint_name", help="Endpoint name"),
            click.option("--tag", "tags", multiple=True, help="Endpoint tag name (repeatable)"),
            click.option(
                "--tag-id", "tag_ids", type=int, multiple=True, help="Endpoint tag id (repeatable)"
            ),
        ]
    )(func)


def prompt_password(username: str) -> str:
    return click.prompt(f"Password for {username}", hide_input=True)


def parse_server_config(
    session: Optional[str],
    address: Optional[str],
    token: Optional[str],
    username: Optional[str],
    password: Optional[str],
) -> ServerConfig:
    """
    Pick how to reach the server.

    Precedence: saved session, then address+token, then address+username
    (password prompted when missing).

    Raises:
        click.UsageError: If no complete combination was given
    """
    if session:
        return SavedSession(session)
    if address and token:
        return TokenLogin(address=address, token=token)
    if address and username:
        return UserPassLogin(
            address=address,
            username=username,
            password=password if password is not None else prompt_password(username),
        )
    raise click.UsageError(
        "You must enter either --session or --address with --token or --username"
    )


def parse_endpoint_selector(
    endpoint_id: Optional[int],
    endpoint_name: Optional[str],
    tags: Tuple[str, ...],
    tag_ids: Tuple[int, ...],
) -> EndpointSelector:
    """
    Build the endpoint selector.

    Raises:
        click.UsageError: If none or more than one selector kind was given
    """
    selectors = []
    if endpoint_id is not None:
        selectors.append(ById(endpoint_id))
    if endpoint_name:
        selectors.append(ByName(endpoint_name))
    if tags:
        selectors.append(ByTagNames(frozenset(tags)))
    if tag_ids:
        selectors.append(ByTagIds(frozenset(tag_ids)))

    if len(selectors) != 1:
        raise click.UsageError(
            "Select the endpoint with exactly one of --endpoint-id, --endpoint, --tag or --tag-id"
        )
    return selectors[0]


def _split_pair(raw: str, option: str, what: str) -> Tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"expected {what}, got '{raw}'", param_hint=option)
    return key, value


def parse_env_pairs(raw_values: Sequence[str]) -> Tuple[InlineEnv, ...]:
    return tuple(InlineEnv(*_split_pair(raw, "--env", "KEY=VALUE")) for raw in raw_values)


def parse_file_mappings(raw_values: Sequence[str], option: str) -> Tuple[FileMapping, ...]:
    mappings = []
    for raw in raw_values:
        name, path = _split_pair(raw, option, "NAME=PATH")
        if not path:
            raise click.BadParameter(f"missing file path for '{name}'", param_hint=option)
        mappings.append(FileMapping(name, Path(path)))
    return tuple(mappings)
