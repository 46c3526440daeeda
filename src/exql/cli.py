"""CLI entry point for exql."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import cast

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from exql import __version__
from exql.errors import ExqlError
from exql.io import check_input, check_output, load_workbook, write_sql
from exql.models import RunConfig
from exql.pipeline import render_workbook

app = typer.Typer(
    name="exql",
    help="exql — Generate SQL INSERT statements from every sheet of a spreadsheet.",
    add_completion=False,
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


def _noop(*_args: object, **_kwargs: object) -> None:
    return None


def _printer(quiet: bool) -> Callable[..., None]:
    return _noop if quiet else console.print


def _err(msg: str) -> None:
    console.print(f"[red]x[/red] {escape(msg)}", soft_wrap=True)


def _sql_sink(quiet: bool) -> Callable[[str], None] | None:
    if quiet:
        return None

    def _print_sql(statement: str) -> None:
        console.print(statement, markup=False, highlight=False, soft_wrap=True)

    return _print_sql


# ── Helpers ──────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"exql v{__version__}")
        raise typer.Exit()


def execute(config: RunConfig) -> str:
    """Check paths, load the workbook, render it and write the output file.

    Returns the rendered SQL text. Nothing is written when any step fails.
    """
    echo = _printer(config.quiet)
    check_input(config.input_path)
    check_output(config.output_path, force=config.force)

    echo("[blue]>[/blue] Loading workbook …")
    workbook = load_workbook(config.input_path)
    echo(f"  {len(workbook)} sheet(s): {escape(', '.join(workbook.sheet_names))}")

    def _on_sheet(sheet_name: str) -> None:
        echo(f"[blue]>[/blue] Generating insert statements for {escape(sheet_name)}…")

    text = render_workbook(
        workbook,
        skip_trailing_row=config.skip_trailing_row,
        echo=_sql_sink(config.quiet),
        on_sheet=_on_sheet,
    )

    if config.has_output:
        write_sql(cast(Path, config.output_path), text)
        console.print(
            f"Output successfully written to {escape(str(config.output_path))}", soft_wrap=True
        )
    elif config.quiet:
        console.print(
            "[yellow]![/yellow] Nothing to output. "
            "Please provide an output path or remove the quiet flag"
        )
    return text


# ── Callbacks ────────────────────────────────────────────────────


@app.callback()
def main(
    version: bool | None = typer.Option(
        None, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """exql CLI."""


# ── run command ──────────────────────────────────────────────────


@app.command()
def run(
    input_file: Path = typer.Option(
        ..., "--input", "-i",
        help="Path of the spreadsheet (.xlsx, .xlsm, .csv or .xls).",
    ),
    output_file: Path | None = typer.Option(
        None, "--output", "-o",
        help="Path to write the SQL file. Output is only printed to the console if omitted.",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Suppress output to the console.",
    ),
    force: bool = typer.Option(
        False, "--force", "-f",
        help="Overwrite the output file if it already exists.",
    ),
    skip_trailing_row: bool = typer.Option(
        False, "--skip-trailing-row",
        help="Leave out the last populated row of every sheet (e.g. a totals row).",
    ),
) -> None:
    """Generate insert statements for each sheet of a spreadsheet.

    Exit 0 = OK, 3 = input missing, 4 = output exists, 5 = invalid sheet,
    6 = invalid cell address, 7 = unsupported input, 8 = write failure.
    """
    config = RunConfig(
        input_path=input_file,
        output_path=output_file,
        quiet=quiet,
        force=force,
        skip_trailing_row=skip_trailing_row,
    )

    if not quiet:
        console.print(Panel(
            f"[bold]exql[/bold] v{__version__}\n"
            f"Input:  {escape(str(input_file))}\n"
            f"Output: {escape(str(output_file)) if output_file else 'console'}",
            title="Generate SQL", border_style="blue",
        ))

    try:
        execute(config)
    except ExqlError as exc:
        _err(exc.message)
        raise typer.Exit(code=exc.exit_code)
    except Exception as exc:
        _err(f"Unexpected internal error: {exc}")
        raise typer.Exit(code=1)

    if not quiet:
        console.print(Panel("[green]Done[/green]", title="Complete", border_style="green"))
