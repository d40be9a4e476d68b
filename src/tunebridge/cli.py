#!/usr/bin/env python3
"""Command-line interface for tunebridge.

This CLI is primarily for debugging and development.
For production use, import tunebridge as a library.
"""

import json
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from tunebridge import create_registry
from tunebridge.exceptions import TuneBridgeError
from tunebridge.extractors.registry import ExtractorRegistry
from tunebridge.models.enums import QueryType
from tunebridge.models.results import ExtractorResult
from tunebridge.models.track import Track
from tunebridge.settings import Settings

logger = logging.getLogger("tunebridge")

QUERY_TYPES = [t.value for t in QueryType]


def setup_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Configure logging with Rich handler.

    Existing handlers are cleared so this can be called more than once.

    Args:
        verbose: If True, set log level to DEBUG. Otherwise WARNING.
        console: Optional Console instance to use for RichHandler.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = RichHandler(
        rich_tracebacks=True,
        show_path=False,
        console=console,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)


def build_registry(settings: Settings) -> ExtractorRegistry:
    """Create a registry configured from environment settings."""
    return create_registry(
        youtube=settings.youtube_config(),
        soundcloud=settings.soundcloud_config(),
        apple_music=settings.apple_music_config(),
        bridge_min_score=settings.bridge_min_score,
    )


def track_to_dict(track: Track) -> dict[str, object]:
    """Serializable view of a track for --json output."""
    data: dict[str, object] = {
        "title": track.title,
        "author": track.author,
        "url": track.url,
        "duration": track.duration,
        "thumbnail": track.thumbnail,
        "views": track.views,
        "source": track.source.value,
        "query_type": track.query_type.value,
    }
    if track.bridge_payload is not None:
        data["bridge"] = track.bridge_payload.track.url
    return data


def print_result(console: Console, result: ExtractorResult, title: str) -> None:
    """Print a result as a track table with an optional playlist header."""
    if result.playlist is not None:
        playlist = result.playlist
        console.print(
            f"[bold]{playlist.kind.value.capitalize()}:[/bold] {playlist.title} "
            f"[dim]by {playlist.author.name}[/dim]"
        )

    table = Table(title=title, title_justify="left", show_lines=False)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Title", style="bold cyan", overflow="fold")
    table.add_column("Author", overflow="fold")
    table.add_column("Duration", justify="right")
    table.add_column("Source")
    table.add_column("URL", style="dim", overflow="fold")

    for i, track in enumerate(result.tracks, 1):
        table.add_row(
            str(i),
            track.title,
            track.author,
            track.duration,
            track.source.value,
            track.url,
        )

    console.print(table)


def _first_track(registry: ExtractorRegistry, query: str, query_type: str) -> Track:
    result = registry.search(query, query_type)
    if not result.tracks:
        raise click.ClickException(f"No results for: {query}")
    return result.tracks[0]


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Resolve music queries into tracks and playable streams."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose=verbose)


@main.command(name="search")
@click.argument("query", metavar="QUERY")
@click.option(
    "-t",
    "--type",
    "query_type",
    type=click.Choice(QUERY_TYPES),
    default=QueryType.AUTO.value,
    show_default=True,
    help="Query type.",
)
@click.option("--limit", type=int, help="Maximum playlist tracks to fetch.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def search_cmd(query: str, query_type: str, limit: int | None, as_json: bool) -> None:
    """Resolve a URL or search text into tracks.

    \b
    Examples:
      tunebridge search "https://youtu.be/dQw4w9WgXcQ"
      tunebridge search "daft punk around the world"
      tunebridge search -t appleMusicSearch "bohemian rhapsody"
    """
    console = Console()
    registry = build_registry(Settings())
    options = {"limit": limit} if limit else None

    try:
        result = registry.search(query, query_type, request_options=options)
    except TuneBridgeError as e:
        logger.error(str(e))
        raise click.ClickException(str(e)) from e

    if not result.tracks:
        console.print("[yellow]No results[/yellow]")
        return

    if as_json:
        data = [track_to_dict(t) for t in result.tracks]
        json.dump(data, sys.stdout, indent=2, ensure_ascii=False, default=str)
    else:
        print_result(console, result, f"Results for {query}")


@main.command(name="stream")
@click.argument("query", metavar="QUERY")
@click.option(
    "-t",
    "--type",
    "query_type",
    type=click.Choice(QUERY_TYPES),
    default=QueryType.AUTO.value,
    show_default=True,
    help="Query type.",
)
def stream_cmd(query: str, query_type: str) -> None:
    """Resolve the first matching track into a stream URL.

    Apple Music tracks are bridged to YouTube.

    \b
    Examples:
      tunebridge stream "https://youtu.be/dQw4w9WgXcQ"
      tunebridge stream "https://music.apple.com/us/song/never-gonna-give-you-up/1558533900"
    """
    console = Console()
    registry = build_registry(Settings())
    track = _first_track(registry, query, query_type)

    try:
        stream = registry.stream(track)
    except TuneBridgeError as e:
        logger.error(str(e))
        raise click.ClickException(str(e)) from e

    console.print(f"[bold cyan]{track.title}[/bold cyan] [dim]by {track.author}[/dim]")
    if track.bridge_payload is not None:
        bridged = track.bridge_payload.track
        console.print(f"[dim]Bridged to {bridged.source.value}: {bridged.url}[/dim]")
    if isinstance(stream, str):
        click.echo(stream)
    else:
        console.print("[yellow]Stream is a binary file object[/yellow]")


@main.command(name="related")
@click.argument("query", metavar="QUERY")
@click.option(
    "-t",
    "--type",
    "query_type",
    type=click.Choice(QUERY_TYPES),
    default=QueryType.AUTO.value,
    show_default=True,
    help="Query type.",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def related_cmd(query: str, query_type: str, as_json: bool) -> None:
    """Show tracks related to the first matching track.

    \b
    Examples:
      tunebridge related "https://youtu.be/dQw4w9WgXcQ"
    """
    console = Console()
    registry = build_registry(Settings())
    track = _first_track(registry, query, query_type)
    result = registry.get_related_tracks(track, [track])

    if not result.tracks:
        console.print("[yellow]No related tracks[/yellow]")
        return

    if as_json:
        data = [track_to_dict(t) for t in result.tracks]
        json.dump(data, sys.stdout, indent=2, ensure_ascii=False, default=str)
    else:
        print_result(console, result, f"Related to {track.title}")


if __name__ == "__main__":
    main()
