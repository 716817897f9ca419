"""Command-line front end for the local lost & found board."""
from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer

from lost_found.board_lib import config as config_mod, log as log_mod
from lost_found.board_lib.board import Board
from lost_found.board_lib.errors import BoardError
from lost_found.board_lib.imaging import ImageBlob, decode_data_uri, extension_for
from lost_found.board_lib.models import Report

app = typer.Typer(add_completion=False, help="Report and browse lost/found items stored on this machine.")

DATA_DIR_OPTION = typer.Option(None, "--data-dir", help="Directory holding the board's JSON files")
LOG_LEVEL_OPTION = typer.Option("WARNING", "--log-level", help="Logging level")


def _warn(condition: BoardError) -> None:
    typer.secho(f"Storage Error: {condition}", fg=typer.colors.YELLOW, err=True)


def _open_board(data_dir: Optional[Path], log_level: str) -> Board:
    log_mod.setup_logging(log_level)
    cfg = config_mod.load_config(data_dir)
    return Board.open(cfg, on_condition=_warn)


def _fail(exc: BoardError) -> NoReturn:
    typer.secho(str(exc), fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command()
def submit(
    report_type: str = typer.Option(..., "--type", help="Lost or Found"),
    name: str = typer.Option("", "--name", help="Item name"),
    description: str = typer.Option("", "--description", help="Item description"),
    date: str = typer.Option("", "--date", help="When it was lost/found (free text)"),
    location: str = typer.Option("", "--location", help="Where it was lost/found"),
    contact: str = typer.Option("", "--contact", help="How to reach the reporter"),
    image: Optional[Path] = typer.Option(None, "--image", help="Optional photo of the item"),
    data_dir: Optional[Path] = DATA_DIR_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
) -> None:
    """Save a new report locally."""
    board = _open_board(data_dir, log_level)
    fields = {
        "type": report_type,
        "name": name,
        "description": description,
        "date": date,
        "location": location,
        "contact": contact,
    }
    blob = ImageBlob.from_path(image) if image else None
    try:
        report = asyncio.run(board.submit(fields, blob))
    except BoardError as exc:
        _fail(exc)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--type") from exc
    typer.echo(f'Your {report.type.value} item, "{report.name}", has been saved locally (id {report.id}).')


@app.command("list")
def list_command(
    status: str = typer.Option("any", "--status", help="any, Lost or Found"),
    query: str = typer.Option("", "--query", "-q", help="Match name, description or location"),
    as_json: bool = typer.Option(False, "--json", help="Print reports as JSON"),
    data_dir: Optional[Path] = DATA_DIR_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
) -> None:
    """Show reports, newest first."""
    board = _open_board(data_dir, log_level)
    try:
        board.set_status(status)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--status") from exc
    board.set_query(query)
    items = board.visible_items()
    if as_json:
        typer.echo(json.dumps([item.to_dict() for item in items], ensure_ascii=False, indent=2))
        return
    if not items:
        typer.echo("No items match your criteria or have been reported locally.")
        return
    for item in items:
        _print_report(item)


@app.command()
def whoami(
    data_dir: Optional[Path] = DATA_DIR_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
) -> None:
    """Print this machine's local user id."""
    board = _open_board(data_dir, log_level)
    try:
        typer.echo(board.current_identity())
    except BoardError as exc:
        _fail(exc)


@app.command("export-image")
def export_image(
    report_id: str = typer.Argument(..., help="Report id"),
    output: Path = typer.Argument(..., help="File to write; an extension is added if missing"),
    data_dir: Optional[Path] = DATA_DIR_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
) -> None:
    """Write a report's photo to disk."""
    board = _open_board(data_dir, log_level)
    report = board.store.get(report_id)
    if report is None:
        typer.echo(f"No report with id {report_id}.", err=True)
        raise typer.Exit(code=1)
    if not report.image:
        typer.echo(f"Report {report_id} has no photo.", err=True)
        raise typer.Exit(code=1)
    try:
        mime, payload = decode_data_uri(report.image)
    except ValueError as exc:
        typer.echo(f"Stored photo for {report_id} is unreadable: {exc}", err=True)
        raise typer.Exit(code=1)
    target = output if output.suffix else output.with_suffix(extension_for(mime))
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(payload)
    logging.getLogger("cli.board").info("Exported %d bytes (%s) to %s", len(payload), mime, target)
    typer.echo(str(target))


def _print_report(item: Report) -> None:
    typer.echo(f"[{item.type.value}] {item.name}  (id {item.id})")
    typer.echo(f"  {item.description}")
    typer.echo(f"  Date: {item.date} | Location: {item.location}")
    typer.echo(f"  Contact: {item.contact} | User ID: {item.reporter_id}")
    if item.image:
        typer.echo("  Photo: attached")


def run() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    run()
