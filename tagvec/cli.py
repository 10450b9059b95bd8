"""tagvec CLI application with Typer."""

import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError

from tagvec import __version__
from tagvec.bootstrap import ApplicationContainer, bootstrap_application
from tagvec.config import Settings, get_settings, set_settings
from tagvec.index import QueryResult, Tag
from tagvec.index.models import MetaFilter
from tagvec.utils.cli_output import json_response

app = typer.Typer(
    name="tagvec",
    help="Rank tagged items by weighted cosine similarity",
    add_completion=False,
    no_args_is_help=True,
)

DatasetArg = Annotated[Path, typer.Argument(help="Dataset JSON file")]
SnapshotOpt = Annotated[
    bool,
    typer.Option("--snapshot", help="Treat the file as an exported index snapshot"),
]
TagsOpt = Annotated[
    list[str],
    typer.Option("--tag", "-t", help="Query tag as category=value[:confidence]"),
]
WhereOpt = Annotated[
    list[str] | None,
    typer.Option("--where", "-w", help="Metadata filter as key=value (repeatable)"),
]
JsonOpt = Annotated[bool, typer.Option("--json", help="Output results as JSON")]


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"tagvec version {__version__}")
        raise typer.Exit()


def parse_tag(raw: str) -> Tag:
    """Parse ``category=value[:confidence]``; confidence defaults to 1.0.

    A trailing ``:suffix`` that is not a number stays part of the value.
    """
    category, sep, rest = raw.partition("=")
    if not sep or not category.strip() or not rest:
        raise typer.BadParameter(f"Expected category=value[:confidence], got {raw!r}")

    value, colon, confidence_text = rest.rpartition(":")
    if colon:
        try:
            return Tag(category=category.strip(), value=value, confidence=float(confidence_text))
        except ValueError:
            pass
    return Tag(category=category.strip(), value=rest, confidence=1.0)


def build_meta_filter(conditions: list[str] | None) -> MetaFilter | None:
    """Return a predicate matching dict metadata against ``key=value`` pairs."""
    if not conditions:
        return None

    expected: dict[str, str] = {}
    for condition in conditions:
        key, sep, value = condition.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {condition!r}")
        expected[key] = value

    def matches(meta: Any) -> bool:
        if not isinstance(meta, dict):
            return False
        return all(str(meta.get(key)) == value for key, value in expected.items())

    return matches


def _load(source: Path, snapshot: bool) -> ApplicationContainer:
    try:
        return bootstrap_application(source, snapshot=snapshot, settings=get_settings())
    except FileNotFoundError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    except ValueError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _echo_results(results: list[QueryResult], offset: int) -> None:
    if not results:
        typer.secho("No matching items", fg=typer.colors.YELLOW)
        return
    for i, result in enumerate(results, offset + 1):
        typer.echo(f"{i}. {result.id} (similarity: {result.similarity:.4f})")


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Override TAGVEC_LOG_LEVEL"),
    ] = None,
) -> None:
    """tagvec - weighted tag similarity search."""
    settings = get_settings()
    if log_level:
        try:
            settings = Settings(**{**settings.model_dump(), "log_level": log_level.upper()})
        except ValidationError as exc:
            raise typer.BadParameter(
                f"Unknown log level {log_level!r}", param_hint="--log-level"
            ) from exc
    set_settings(settings)
    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("query")
def query_command(
    dataset: DatasetArg,
    tags: TagsOpt,
    page: Annotated[int, typer.Option("--page", "-p", help="1-based page number")] = 1,
    page_size: Annotated[
        int | None,
        typer.Option("--page-size", "-n", help="Results per page", min=1),
    ] = None,
    where: WhereOpt = None,
    snapshot: SnapshotOpt = False,
    json_output: JsonOpt = False,
) -> None:
    """Rank items in DATASET against the query tags."""
    container = _load(dataset, snapshot)
    query_tags = [parse_tag(raw) for raw in tags]
    size = page_size or container.settings.default_page_size

    results = container.index.query(
        query_tags,
        page=page,
        page_size=size,
        filter=build_meta_filter(where),
    )

    if json_output:
        typer.echo(
            json_response(
                "query_results",
                1,
                query=[tag.model_dump() for tag in query_tags],
                page=page,
                page_size=size,
                results=[result.model_dump() for result in results],
            )
        )
        return

    _echo_results(results, (max(page, 1) - 1) * size)


@app.command("first")
def first_command(
    dataset: DatasetArg,
    tags: TagsOpt,
    where: WhereOpt = None,
    snapshot: SnapshotOpt = False,
    json_output: JsonOpt = False,
) -> None:
    """Show the single best match in DATASET."""
    container = _load(dataset, snapshot)
    query_tags = [parse_tag(raw) for raw in tags]
    best = container.index.query_first(query_tags, filter=build_meta_filter(where))

    if json_output:
        typer.echo(
            json_response(
                "query_first",
                1,
                query=[tag.model_dump() for tag in query_tags],
                result=best.model_dump() if best is not None else None,
            )
        )
        return

    _echo_results([best] if best is not None else [], 0)


@app.command("stats")
def stats_command(
    dataset: DatasetArg,
    where: WhereOpt = None,
    snapshot: SnapshotOpt = False,
    json_output: JsonOpt = False,
) -> None:
    """Report item and dimension counts for DATASET."""
    container = _load(dataset, snapshot)
    stats = container.index.get_stats(build_meta_filter(where))

    if json_output:
        typer.echo(json_response("index_stats", 1, **stats.model_dump()))
        return

    typer.echo(f"Items: {stats.total_items}")
    typer.echo(f"Dimensions: {stats.total_tags}")
    typer.echo(f"Categories: {stats.memory_usage.category_map_size}")


@app.command("export")
def export_command(
    dataset: DatasetArg,
    include_items: Annotated[
        bool,
        typer.Option("--items/--no-items", help="Include item vectors"),
    ] = True,
    snapshot: SnapshotOpt = False,
) -> None:
    """Print the exported index for DATASET as JSON on stdout."""
    container = _load(dataset, snapshot)
    exported = container.index.export_index(include_items=include_items)
    typer.echo(json.dumps(exported.to_payload(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    app()
