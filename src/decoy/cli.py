"""Top-level Click group for the decoy CLI."""

import sys
from contextlib import contextmanager

import click

from decoy.log_config import configure_logging
from decoy.members.loader import load_members_file
from decoy.members.resolver import MemberResolver
from decoy.report.resolution_report import render_json, render_text

LOG_LEVELS = ["debug", "info", "warning", "error"]


@contextmanager
def with_error_handling():
    try:
        yield
    except ValueError as e:
        click.echo(str(e), err=True)
        sys.exit(1)


@click.group()
@click.option("--log-level", type=click.Choice(LOG_LEVELS), default="warning", show_default=True,
              help="Minimum level of diagnostic events written to stderr")
def main(log_level):
    """decoy - member resolution for generated test doubles."""
    configure_logging(log_level)


@main.command("resolve")
@click.argument("members_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--reserve", "reserved", multiple=True,
              help="Name already taken by a hand-written member (repeatable)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              show_default=True)
def resolve_cmd(members_file, reserved, output_format):
    """Resolve MEMBERS_FILE into interceptor identities."""
    with with_error_handling():
        members = load_members_file(members_file)
    resolution = MemberResolver(reserved).resolve(members)
    if output_format == "json":
        click.echo(render_json(resolution))
    else:
        click.echo(render_text(resolution), nl=False)
    if not resolution.ok:
        sys.exit(1)


@main.command("check")
@click.argument("members_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--reserve", "reserved", multiple=True,
              help="Name already taken by a hand-written member (repeatable)")
def check_cmd(members_file, reserved):
    """Report conflicting member declarations in MEMBERS_FILE."""
    with with_error_handling():
        members = load_members_file(members_file)
    resolution = MemberResolver(reserved).resolve(members)
    click.echo(render_text(resolution, show_identities=False), nl=False)
    if not resolution.ok:
        sys.exit(1)
