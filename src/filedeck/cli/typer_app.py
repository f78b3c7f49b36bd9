"""
filedeck Typer CLI Application

Drives the file operation engine non-interactively: every command builds
a panel over its arguments, calls the matching engine action and renders
the message bus until the batch reaches a terminal state.
"""

from __future__ import annotations

from concurrent.futures import Future
from pathlib import Path
from typing import Annotated, Callable

import typer
from rich.console import Console
from rich.markup import escape

from filedeck.cli.error_handler import handle_cli_error, usage_error
from filedeck.cli.renderer import BusRenderer
from filedeck.config import Settings, default_config_path, get_config
from filedeck.core.models import Process, ProcessState
from filedeck.core.operations import FileOperationEngine
from filedeck.core.panel import Panel, PanelElement, PanelMode
from filedeck.shared.constants import Application
from filedeck.shared.logging import ROOT_LOGGER_NAME, setup_structured_logger

console = Console()

app = typer.Typer(
    name=Application.NAME,
    help="File operations with trash, archives and progress reporting.",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

_state: dict[str, bool] = {"quiet": False}


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(f"{Application.NAME} {Application.VERSION}")
        raise typer.Exit


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option("--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit."),
    ] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Do not draw progress bars.")] = False,
) -> None:
    """filedeck command-line interface."""
    settings = get_config()
    setup_structured_logger(
        ROOT_LOGGER_NAME,
        level=settings.logging.level,
        log_file=settings.logging.file,
        use_rich_console=settings.logging.console_output,
        max_bytes=settings.logging.max_bytes,
        backup_count=settings.logging.backup_count,
    )
    _state["quiet"] = quiet


def _engine(settings: Settings | None = None) -> FileOperationEngine:
    settings = settings or get_config()
    # No system clipboard round-trip for one-shot commands.
    cli_settings = settings.model_copy(
        update={"clipboard": settings.clipboard.model_copy(update={"mirror_enabled": False})}
    )
    return FileOperationEngine(cli_settings)


def _selection_panel(paths: list[Path]) -> Panel:
    absolute = [p.absolute() for p in paths]
    return Panel(location=absolute[0].parent, selected=absolute, mode=PanelMode.SELECT)


def _cursor_panel(path: Path) -> Panel:
    path = path.absolute()
    return Panel(location=path.parent, elements=[PanelElement.from_path(path)], cursor=0)


def _finish(engine: FileOperationEngine, future: Future[Process] | None, command: str) -> None:
    if future is None:
        raise usage_error("Nothing to do", command)
    process = BusRenderer(engine.bus, console, disabled=_state["quiet"]).follow(future)
    if process.state is ProcessState.FAILURE:
        console.print(f"[red]Failed:[/red] {escape(process.name)} ({process.done}/{process.total})")
        raise typer.Exit(1)
    console.print(f"[green]Done:[/green] {escape(process.name)} ({process.done}/{process.total})")


def _run(command: str, action: Callable[[FileOperationEngine], None]) -> None:
    try:
        with _engine() as engine:
            action(engine)
    except typer.Exit:
        raise
    except Exception as e:  # noqa: BLE001
        raise typer.Exit(handle_cli_error(e, command)) from e


@app.command("path-list")
def path_list_command() -> None:
    """Print configuration, log and trash locations."""
    settings = get_config()
    console.print(f"Configuration file: {escape(str(default_config_path()))}")
    console.print(f"Log file: {escape(str(Path(settings.logging.file).absolute()))}")
    console.print(f"Trash files: {escape(str(settings.trash.files_dir))}")
    console.print(f"Trash info: {escape(str(settings.trash.info_dir))}")


def _transfer(command: str, sources: list[Path], destination: Path, *, cut: bool) -> None:
    def action(engine: FileOperationEngine) -> None:
        if not destination.is_dir():
            raise usage_error(f"Destination is not a directory: {destination}", command)
        source_panel = _selection_panel(sources)
        staged = engine.cut_items(source_panel) if cut else engine.copy_items(source_panel)
        if not staged:
            raise usage_error("None of the sources exist", command)
        future = engine.paste_items(Panel(location=destination.absolute()))
        _finish(engine, future, command)

    _run(command, action)


@app.command("copy")
def copy_command(
    sources: Annotated[list[Path], typer.Argument(help="Files or directories to copy.")],
    destination: Annotated[Path, typer.Argument(help="Target directory.")],
) -> None:
    """Copy SOURCES into DESTINATION; existing names get a (N) suffix."""
    _transfer("copy", sources, destination, cut=False)


@app.command("move")
def move_command(
    sources: Annotated[list[Path], typer.Argument(help="Files or directories to move.")],
    destination: Annotated[Path, typer.Argument(help="Target directory.")],
) -> None:
    """Move SOURCES into DESTINATION; existing names get a (N) suffix."""
    _transfer("move", sources, destination, cut=True)


@app.command("trash")
def trash_command(
    paths: Annotated[list[Path], typer.Argument(help="Files or directories to trash.")],
) -> None:
    """Move PATHS to the trash."""

    def action(engine: FileOperationEngine) -> None:
        panel = _selection_panel(paths)
        _finish(engine, engine.trash_items(panel), "trash")

    _run("trash", action)


@app.command("delete")
def delete_command(
    paths: Annotated[list[Path], typer.Argument(help="Files or directories to delete.")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation.")] = False,
) -> None:
    """Delete PATHS: trashed on the trash volume, removed permanently elsewhere."""

    def action(engine: FileOperationEngine) -> None:
        panel = _selection_panel(paths)
        request = engine.request_delete(panel)
        if request is None:
            raise usage_error("Nothing to delete", "delete")
        engine.bus.drain()
        console.print(f"[bold]{escape(request.title)}?[/bold]")
        console.print(request.body, markup=False)
        if not yes and not typer.confirm("Continue", default=False):
            console.print("Cancelled")
            return
        _finish(engine, engine.confirm(request, panel), "delete")

    _run("delete", action)


@app.command("extract")
def extract_command(
    archive: Annotated[Path, typer.Argument(help="Archive to extract.")],
) -> None:
    """Extract ARCHIVE into a sibling directory named after it."""
    _run("extract", lambda engine: _finish(engine, engine.extract_item(_cursor_panel(archive)), "extract"))


@app.command("compress")
def compress_command(
    path: Annotated[Path, typer.Argument(help="File or directory to compress.")],
) -> None:
    """Compress PATH into <name>.zip beside it."""
    _run("compress", lambda engine: _finish(engine, engine.compress_item(_cursor_panel(path)), "compress"))


@app.command("create")
def create_command(
    directory: Annotated[Path, typer.Argument(help="Directory to create in.")],
    name: Annotated[str, typer.Argument(help="New name; a trailing / creates a directory.")],
) -> None:
    """Create an empty file or a directory."""

    def action(engine: FileOperationEngine) -> None:
        created = engine.create_item(Panel(location=directory.absolute()), name)
        if created is None:
            raise usage_error(f"Could not create {name!r} in {directory}", "create")
        console.print(f"Created {created}", markup=False)

    _run("create", action)


@app.command("rename")
def rename_command(
    path: Annotated[Path, typer.Argument(help="File or directory to rename.")],
    new_name: Annotated[str, typer.Argument(help="New name in the same directory.")],
) -> None:
    """Rename PATH; an existing target is refused."""

    def action(engine: FileOperationEngine) -> None:
        renamed = engine.rename_item(_cursor_panel(path), new_name)
        if renamed is None:
            raise usage_error(f"Could not rename {path} to {new_name!r}", "rename")
        console.print(f"Renamed to {renamed}", markup=False)

    _run("rename", action)


def main(argv: list[str] | None = None) -> None:
    """Console script entry point."""
    app(args=argv)
