from __future__ import annotations

import platform
from typing import TextIO

import click
import rich_click

import termfilter
from termfilter.filters import filter_items
from termfilter.models import load_posts
from termfilter.parser import parse
from termfilter.policies import MatchPolicy

from .context import CLIContext
from .logging import configure_logging, restore_logging
from .runner import CommandOutput, run_command


@click.group(
    name="termfilter",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    cls=rich_click.RichGroup,
)
@click.option(
    "--output",
    type=click.Choice(["table", "json"]),
    default="table",
)
@click.option("--json", "json_flag", is_flag=True, help="Alias for --output json.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-essential stderr output.")
@click.option("-v", "verbose", count=True, help="Increase verbosity (-v, -vv).")
@click.option(
    "--match",
    "match_mode",
    type=click.Choice([p.value for p in MatchPolicy]),
    default=MatchPolicy.SUBSTRING.value,
    show_default=True,
    envvar="TERMFILTER_MATCH",
    help="How terms are matched against post text.",
)
@click.version_option(version=termfilter.__version__, prog_name="termfilter")
@click.pass_context
def cli(
    click_ctx: click.Context,
    *,
    output: str,
    json_flag: bool,
    quiet: bool,
    verbose: int,
    match_mode: str,
) -> None:
    if click_ctx.invoked_subcommand is None:
        click.echo(click_ctx.get_help())
        raise click.exceptions.Exit(0)

    click_ctx.obj = CLIContext(
        output="json" if json_flag else output,  # type: ignore[arg-type]
        quiet=quiet,
        verbosity=verbose,
        match=MatchPolicy(match_mode),
    )

    previous_logging = configure_logging(verbosity=verbose)
    click_ctx.call_on_close(lambda: restore_logging(previous_logging))


@cli.command(name="parse", cls=rich_click.RichCommand)
@click.argument("expression", nargs=-1, required=True)
@click.pass_obj
def parse_cmd(ctx: CLIContext, expression: tuple[str, ...]) -> None:
    """Show how a filter expression is grouped, and the terms it uses."""

    def fn(ctx: CLIContext, _warnings: list[str]) -> CommandOutput:
        expr = parse(" ".join(expression), match=ctx.match)
        return CommandOutput(data={"filter": expr.to_string(), "terms": expr.terms()})

    run_command(ctx, command="parse", fn=fn)


@cli.command(name="match", cls=rich_click.RichCommand)
@click.argument("expression", nargs=-1, required=True)
@click.option(
    "--file",
    "source",
    type=click.File("r", encoding="utf-8"),
    default="-",
    show_default=True,
    help="Posts to filter: JSON objects or plain text, one per line ('-' for stdin).",
)
@click.option("--count", "count_only", is_flag=True, help="Print only the number of matches.")
@click.pass_obj
def match_cmd(
    ctx: CLIContext,
    expression: tuple[str, ...],
    source: TextIO,
    count_only: bool,
) -> None:
    """Print the posts matched by a filter expression."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        # Parse before reading so a bad filter fails fast on stdin
        expr = parse(" ".join(expression), match=ctx.match)
        posts = list(load_posts(source))
        if not posts:
            warnings.append("No posts read from input.")
        matched = list(filter_items(expr, posts))
        if count_only:
            return CommandOutput(data={"count": len(matched)})
        rows = [p.model_dump(mode="json", include={"id", "author", "text"}) for p in matched]
        return CommandOutput(data={"count": len(matched), "posts": rows})

    run_command(ctx, command="match", fn=fn)


@cli.command(name="version", cls=rich_click.RichCommand)
@click.pass_obj
def version_cmd(ctx: CLIContext) -> None:
    """Show version information."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        data = {
            "version": termfilter.__version__,
            "pythonVersion": platform.python_version(),
            "platform": platform.platform(),
        }
        return CommandOutput(data=data)

    run_command(ctx, command="version", fn=fn)
