"""
Command-line interface for browsing the song library.

Renders a viewer's library, a song's detail view, and resolves playback
using the same session objects as the API server.
"""

import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from shared import config
from shared.config import StorageConfig
from shared.constants import (
    EMPTY_STATE_MESSAGE,
    EMPTY_STATE_TITLE,
    LIBRARY_SUBTITLE,
    LIBRARY_TITLE,
    UNTITLED,
)
from shared.errors import SoundgridError
from library.grid import DetailOverlay, LibraryGridController, card_summary
from library.repository import JsonSongRepository
from library.session import LibrarySession
from storage.provider_factory import SignerFactory
from storage.resolver import MediaURLResolver

console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else config.LOG_LEVEL
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _open_session(viewer: str, songs_file: Path) -> LibrarySession:
    storage = StorageConfig.from_env()
    resolver = MediaURLResolver(SignerFactory.from_config(storage), expires_in=storage.url_expires_in)
    return LibrarySession(viewer, JsonSongRepository(songs_file), resolver, opener=click.launch)


def render_grid(grid: LibraryGridController) -> None:
    console.print(f"\n[bold]{LIBRARY_TITLE}[/bold]")
    console.print(f"[dim]{LIBRARY_SUBTITLE}[/dim]\n")

    if grid.is_empty:
        console.print(Panel.fit(
            f"[bold]{EMPTY_STATE_TITLE}[/bold]\n\n{EMPTY_STATE_MESSAGE}",
            border_style="dim",
        ))
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("", width=2)
    table.add_column("Title", style="cyan")
    table.add_column("Description")
    table.add_column("By", style="green")
    table.add_column("Badges", style="yellow")
    table.add_column("ID", style="dim")

    for card in grid.cards():
        summary = card_summary(card.song)
        marker = "▶" if card.is_active else ""
        table.add_row(
            marker,
            escape(summary["title"]),
            escape(summary["description"]),
            escape(summary["owner"]),
            ", ".join(summary["badges"]),
            card.song_id,
        )
    console.print(table)


def render_detail(overlay: DetailOverlay) -> None:
    data = overlay.to_dict()
    lines = [f"[bold]{escape(data['title'])}[/bold]"]
    if data['owner']:
        lines.append(f"[dim]{escape(data['owner'])}[/dim]")
    if data['badges']:
        lines.append(" ".join(escape(f"[{b}]") for b in data['badges']))
    if data['description']:
        lines.append(f"\n[bold]Description[/bold]\n{escape(data['description'])}")
    if data['lyrics']:
        lines.append(f"\n[bold]Lyrics[/bold]\n{escape(data['lyrics'])}")
    console.print(Panel("\n".join(lines), border_style="cyan"))


songs_file_option = click.option(
    '--songs-file',
    type=click.Path(dir_okay=False, path_type=Path),
    default=lambda: config.SONGS_FILE,
    show_default="$SOUNDGRID_SONGS_FILE",
    help='songs.json to read the library from',
)
viewer_option = click.option('--viewer', required=True, help='Viewer (user) id')


@click.group()
@click.version_option(version="1.0.0")
@click.option('-v', '--verbose', is_flag=True, help='Debug logging')
def cli(verbose):
    """
    🎵 Soundgrid

    Browse and play the shared song library.
    """
    _setup_logging(verbose)


@cli.command()
@viewer_option
@songs_file_option
def songs(viewer, songs_file):
    """List the songs visible to a viewer."""
    try:
        lib_session = _open_session(viewer, songs_file)
        grid = asyncio.run(lib_session.refresh())
    except (SoundgridError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise SystemExit(1)
    render_grid(grid)


@cli.command()
@click.argument('song_id')
@viewer_option
@songs_file_option
def show(song_id, viewer, songs_file):
    """Show the detail view of one song."""
    try:
        lib_session = _open_session(viewer, songs_file)
        grid = asyncio.run(lib_session.refresh())
        overlay = grid.open_detail(song_id)
    except (SoundgridError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise SystemExit(1)
    render_detail(overlay)


@cli.command()
@click.argument('song_id')
@viewer_option
@songs_file_option
@click.option('--download', is_flag=True, help='Open the audio URL instead of printing it')
def play(song_id, viewer, songs_file, download):
    """Resolve a song's playable URL and make it the current track."""

    async def _run(lib_session):
        grid = await lib_session.refresh()
        card = grid.card(song_id)
        if download:
            return await card.download()
        return await card.play()

    try:
        result = asyncio.run(_run(_open_session(viewer, songs_file)))
    except (SoundgridError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise SystemExit(1)

    if result is None:
        console.print(f"[red]Could not resolve audio for {song_id}[/red]")
        raise SystemExit(1)
    if download:
        console.print(f"[green]Opened[/green] {result}")
        return

    console.print(Panel.fit(
        f"[bold]{escape(result.title or UNTITLED)}[/bold]\n"
        f"[dim]{escape(result.owner_name or '')}[/dim]\n\n{result.url}",
        title="Now playing",
        border_style="green",
    ))


@cli.command()
@click.option('--host', default=lambda: config.API_HOST, show_default="$SOUNDGRID_API_HOST")
@click.option('--port', type=int, default=lambda: config.API_PORT, show_default="$SOUNDGRID_API_PORT")
@click.option('--debug', is_flag=True)
def serve(host, port, debug):
    """Run the API server."""
    from shared.api import start_api
    start_api(host=host, port=port, debug=debug)


if __name__ == '__main__':
    cli()
