"""Command line interface for DB Blender."""

import logging
import signal
import sys
from json import dumps
from pathlib import Path
from sys import stdout
from typing import Literal

from convert import (
    SUPPORTED_EXTENSIONS,
    ConversionError,
    ConversionOptions,
    OutputFormat,
    convert_file,
    convert_files,
    decode_source,
    read_csv,
    read_json,
    write_document,
)
from convert.processing import read_source
from cyclopts import App
from cyclopts.config import Env
from dump import DanglingReferenceError, UnterminatedStatementError
from inference import infer_column_types
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from watch import DirectoryWatcher

app = App(
    help="DB Blender: convert schema dumps and record files between databases",
    config=Env("DB_BLENDER_", command=False),
)

console = Console()
err_console = Console(stderr=True)

# Errors that end a run with a message instead of a traceback
RUN_ERRORS = (ConversionError, UnterminatedStatementError, DanglingReferenceError)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[bold red]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print success message to stderr."""
    err_console.print(f"[bold green]✓[/] {message}")


def print_info(message: str) -> None:
    """Print info message to stderr."""
    err_console.print(f"[bold blue]i[/] {message}")


def configure_logging(log_dir: Path | None = None, *, verbose: bool = False) -> None:
    """Log to stderr through rich and, with a log directory, to files.

    ``error.log`` receives errors only and ``combined.log`` everything at the
    configured level.
    """
    level = logging.DEBUG if verbose else logging.INFO
    handlers: list[logging.Handler] = [
        RichHandler(console=err_console, show_path=False),
    ]

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        formatter = logging.Formatter(LOG_FORMAT)
        error_log = logging.FileHandler(log_dir / "error.log", encoding="utf-8")
        error_log.setLevel(logging.ERROR)
        combined_log = logging.FileHandler(log_dir / "combined.log", encoding="utf-8")
        for handler in (error_log, combined_log):
            handler.setFormatter(formatter)
            handlers.append(handler)

    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True)


def build_options(  # noqa: PLR0913
    from_encoding: str,
    to_encoding: str,
    strip_prefix: str | None,
    output_format: OutputFormat,
    table_name: str | None,
    *,
    merge: bool,
    strict: bool,
) -> ConversionOptions:
    """Freeze command line settings into validated options, exiting on errors."""
    try:
        return ConversionOptions(
            source_encoding=from_encoding,
            target_encoding=to_encoding,
            strip_prefix=strip_prefix or None,
            merge=merge,
            output_format=output_format,
            strict_statements=strict,
            strict_references=strict,
            table_name=table_name,
        )
    except ConversionError as e:
        print_error(str(e))
        sys.exit(1)


def validate_inputs(inputs: list[Path]) -> None:
    """Validate that every input exists and has a supported extension."""
    for path in inputs:
        if not path.is_file():
            print_error(f"Input file does not exist: {path}")
            sys.exit(1)
        if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
            print_error(
                f"Input file has invalid extension: {', '.join(sorted(SUPPORTED_EXTENSIONS))}",
            )
            sys.exit(1)


@app.command
def convert(  # noqa: PLR0913
    inputs: list[Path],
    *,
    export_dir: Path | None = None,
    from_encoding: str = "auto",
    to_encoding: str = "utf8mb4",
    strip_prefix: str | None = None,
    output_format: OutputFormat = OutputFormat.MYSQL,
    table_name: str | None = None,
    merge: bool = False,
    strict: bool = False,
    verbose: bool = False,
) -> None:
    """Convert schema dumps and record files.

    Without an export directory a single output document is written to stdout.

    Parameters
    ----------
    inputs
        Input files (.sql, .csv, .json).
    export_dir
        Directory for output files and logs.
    from_encoding
        Source encoding, or "auto" to detect it.
    to_encoding
        Target encoding of the output.
    strip_prefix
        Table name prefix to remove.
    output_format
        Output format.
    table_name
        Table name for record inputs, defaults to the file name.
    merge
        Merge schema dumps into one dependency-ordered document.
    strict
        Fail on unterminated statements and references to undefined tables.
    verbose
        Log debug messages.

    """
    configure_logging(export_dir, verbose=verbose)
    validate_inputs(inputs)
    options = build_options(
        from_encoding,
        to_encoding,
        strip_prefix,
        output_format,
        table_name,
        merge=merge,
        strict=strict,
    )
    print_info(f"Output format: {options.output_format}")
    print_info(f"Encoding: {options.source_encoding} -> {options.target_encoding}")

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=err_console,
        ) as progress:
            progress.add_task(f"Converting {len(inputs)} file(s)...", total=None)
            documents = convert_files(inputs, options)

        if export_dir is None:
            if len(documents) > 1:
                print_error("Several output documents need --export-dir")
                sys.exit(1)
            stdout.buffer.write(documents[0].content)
            print_success(f"Converted {documents[0].source}")
            return

        for document in documents:
            target = write_document(document, export_dir)
            print_success(f"Converted {document.source} -> {target}")
    except RUN_ERRORS as e:
        print_error(str(e))
        sys.exit(1)


@app.command
def watch(  # noqa: PLR0913
    *,
    input_dir: Path = Path("/input"),
    export_dir: Path = Path("/export"),
    from_encoding: str = "auto",
    to_encoding: str = "utf8mb4",
    strip_prefix: str | None = None,
    output_format: OutputFormat = OutputFormat.MYSQL,
    table_name: str | None = None,
    strict: bool = False,
    stability: float = 2.0,
    verbose: bool = False,
) -> None:
    """Watch a directory and convert files as they arrive.

    Parameters
    ----------
    input_dir
        Directory to watch.
    export_dir
        Directory for output files and logs.
    from_encoding
        Source encoding, or "auto" to detect it.
    to_encoding
        Target encoding of the output.
    strip_prefix
        Table name prefix to remove.
    output_format
        Output format.
    table_name
        Table name for record inputs, defaults to the file name.
    strict
        Fail on unterminated statements and references to undefined tables.
    stability
        Seconds a file must stay unchanged before it is converted.
    verbose
        Log debug messages.

    """
    configure_logging(export_dir, verbose=verbose)
    if not input_dir.is_dir():
        print_error(f"Input directory does not exist: {input_dir}")
        sys.exit(1)

    options = build_options(
        from_encoding,
        to_encoding,
        strip_prefix,
        output_format,
        table_name,
        merge=False,
        strict=strict,
    )

    def handle(path: Path) -> None:
        target = write_document(convert_file(path, options), export_dir)
        print_success(f"Converted {path.name} -> {target}")

    watcher = DirectoryWatcher(input_dir, handle, stability=stability)

    def shutdown(signum: int, _frame: object) -> None:
        print_info(f"Received {signal.Signals(signum).name}, stopping")
        watcher.stop()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    print_info(f"Watching {input_dir}, writing to {export_dir}")
    watcher.run()


@app.command
def infer(
    path: Path,
    fmt: Literal["table", "json"] = "table",
    *,
    from_encoding: str = "auto",
) -> None:
    """Print the inferred column types of a CSV or JSON file."""
    if path.suffix.lower() not in {".csv", ".json"}:
        print_error("Type inference needs a .csv or .json file")
        sys.exit(1)

    try:
        text = decode_source(read_source(path), from_encoding)
        records = read_csv(text) if path.suffix.lower() == ".csv" else read_json(text)
    except ConversionError as e:
        print_error(str(e))
        sys.exit(1)

    column_types = infer_column_types(records)
    print_info(f"Records: {len(records)}")

    if fmt == "json":
        console.print_json(dumps({column: str(kind) for column, kind in column_types.items()}))
        return

    table = Table(title=path.name)
    table.add_column("Column", style="bold cyan")
    table.add_column("Type", style="bold yellow")
    for column, column_type in column_types.items():
        table.add_row(column, str(column_type))
    console.print(table)


def main() -> None:
    """Run the command line application."""
    app()
