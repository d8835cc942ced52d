"""codequery command line interface.

Commands:
    server   Start the MCP server over stdio
    query    Run one filter query against a corpus snapshot
    filters  List the filter categories of an entity kind
    check    Validate a corpus snapshot and print entity counts
"""

from __future__ import annotations

import json
import sys
from typing import Any, NoReturn

import click

from codequery import __version__
from codequery.cli._context import cli_corpus_scope
from codequery.config import Settings
from codequery.query.formatter import QueryResult
from codequery.query.registry import get_registry
from codequery.types.entities import EntityKind
from codequery.types.errors import CodeQueryError, ErrorCode, ValidationError
from codequery.utils.logger import configure_logging, logger
from codequery.utils.toon_encoder import ToonEncoder

_KINDS = [kind.value for kind in EntityKind]
_FORMATS = ["text", "json", "toon"]


def _fail(error: CodeQueryError) -> NoReturn:
    """Print a structured error to stderr and exit with status 1."""
    click.echo(error.get_formatted_message(), err=True)
    sys.exit(1)


def _settings(ctx: click.Context) -> Settings:
    return ctx.obj["settings"]


def _parse_filters(raw_filters: tuple[str, ...]) -> dict[str, list[str]]:
    """Group ``name=value`` options by name, keeping their order.

    Values are never split further: controller values contain commas.
    """
    filters: dict[str, list[str]] = {}
    for raw in raw_filters:
        name, sep, value = raw.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValidationError(
                f"Malformed filter option {raw!r}",
                user_message="Filters must be written as name=value.",
                code=ErrorCode.INVALID_ARGS,
            )
        filters.setdefault(name, []).append(value.strip())
    return filters


def _summarize(kind: EntityKind, data: dict[str, Any]) -> str:
    if kind is EntityKind.ROUTE:
        methods = "|".join(data["methods"])
        return f"{methods:<12} {data['uri']}  ->  {data['action']}"
    if kind is EntityKind.VIEW:
        uses = ", ".join(data.get("uses", [])) or "-"
        return f"{data['name']}  (uses: {uses})"
    return data["name"]


def _render(result: QueryResult, output_format: str) -> str:
    if output_format == "json":
        return json.dumps(result.to_dict(), indent=2)
    if output_format == "toon":
        return ToonEncoder().encode(result.to_dict())

    lines = [result.message]
    items = result.items()
    records = items.values() if isinstance(items, dict) else items
    for data in records:
        lines.append(f"  {_summarize(result.kind, data)}")
    return "\n".join(lines)


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name="codequery", message="%(prog)s v%(version)s")
@click.option(
    "--log-level",
    type=click.Choice(["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level for messages written to stderr (default: $CODEQUERY_LOG_LEVEL or INFO).",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """codequery - Codebase Metadata Queries.

    Filter classes, models, routes and views extracted from a codebase,
    from the command line or as an MCP server.
    """
    try:
        settings = Settings.from_env().with_overrides(
            log_level=log_level.upper() if log_level else None
        )
    except CodeQueryError as e:
        _fail(e)
    configure_logging(settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


_corpus_option = click.option(
    "--corpus",
    "corpus_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Corpus snapshot (default: $CODEQUERY_CORPUS or .codequery/corpus.json).",
)


@cli.command()
@_corpus_option
@click.pass_context
def server(ctx: click.Context, corpus_path: str | None) -> None:
    """Start the MCP server over stdio."""
    from codequery.mcp_server.server import main as run_server

    settings = _settings(ctx).with_overrides(corpus_path=corpus_path)
    run_server(settings)


@cli.command()
@click.argument("kind", type=click.Choice(_KINDS, case_sensitive=False))
@click.option(
    "--filter",
    "-f",
    "raw_filters",
    multiple=True,
    metavar="NAME=VALUE",
    help="Filter category and one value; repeat to add values or categories.",
)
@_corpus_option
@click.option(
    "--format",
    "output_format",
    type=click.Choice(_FORMATS),
    default="text",
    show_default=True,
    help="Output format.",
)
@click.pass_context
def query(
    ctx: click.Context,
    kind: str,
    raw_filters: tuple[str, ...],
    corpus_path: str | None,
    output_format: str,
) -> None:
    """Query entities of KIND (class, model, route, view).

    \b
    Examples:
      codequery query class -f implements_interfaces_or='*Authenticatable'
      codequery query route -f uses_middleware_and=auth -f uses_middleware_and=web
      codequery query view -f used_by='pages.admin.*' --format json
    """
    settings = _settings(ctx).with_overrides(corpus_path=corpus_path)
    entity_kind = EntityKind(kind.lower())
    try:
        filters = _parse_filters(raw_filters)
        with cli_corpus_scope(settings.corpus_path, settings.view_index_name) as corpus_ctx:
            result = corpus_ctx.get_query_service().query(entity_kind, filters)
    except CodeQueryError as e:
        _fail(e)

    logger.debug(f"CLI query returned {result.count} {entity_kind.plural}")
    click.echo(_render(result, output_format))


@cli.command()
@click.argument("kind", type=click.Choice(_KINDS, case_sensitive=False))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def filters(kind: str, as_json: bool) -> None:
    """List the filter categories for KIND."""
    registry = get_registry(kind.lower())
    if as_json:
        click.echo(json.dumps({"kind": registry.kind.value, "filters": registry.describe()}, indent=2))
        return

    click.echo(f"{len(registry)} {registry.kind.value} filter categories:")
    for category in registry:
        click.echo(f"  {category.name:<40} {category.description}")
    aliases = sorted(registry.aliases)
    if aliases:
        click.echo(f"Aliases (same as the _or variant): {', '.join(aliases)}")


@cli.command()
@_corpus_option
@click.pass_context
def check(ctx: click.Context, corpus_path: str | None) -> None:
    """Validate a corpus snapshot and print entity counts.

    Exits with status 1 when the snapshot is missing or malformed.
    """
    settings = _settings(ctx).with_overrides(corpus_path=corpus_path)
    try:
        with cli_corpus_scope(settings.corpus_path) as corpus_ctx:
            corpus = corpus_ctx.get_corpus()
    except CodeQueryError as e:
        _fail(e)

    click.echo(f"Corpus OK: {settings.corpus_path}")
    for plural, count in corpus.counts().items():
        click.echo(f"  {plural:<8} {count}")
    if corpus.is_empty:
        click.echo("Warning: the corpus holds no entities.")


if __name__ == "__main__":
    cli()
