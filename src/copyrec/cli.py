import logging
from pathlib import Path

import orjson
import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from copyrec.data.generator import SynthConfig, synthesize_records
from copyrec.data.records import decode_records, rows_to_arrow, rows_to_jsonl
from copyrec.errors import CopyrecError
from copyrec.layout.builder import RecordLayout
from copyrec.layout.loader import LayoutSpec, load_layout, sample_layout

app = typer.Typer(help="Read and write fixed-width copybook records.")
layout_app = typer.Typer(help="Inspect and scaffold layout files.")
dataset_app = typer.Typer(help="Dataset helpers (synthetic fixtures).")
console = Console()
SUPPORTED_FORMATS = {"json", "jsonl", "arrow"}
COLUMNS = ("name", "level", "kind", "offset", "length", "occurs")

app.add_typer(layout_app, name="layout")
app.add_typer(dataset_app, name="dataset")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def _read_bytes(path: Path) -> bytes:
    if not path.is_file():
        raise typer.BadParameter(f"Input file not found: {path}")
    return path.read_bytes()


def _print_json(payload: object) -> None:
    console.print(
        orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode(),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _load(path: Path) -> tuple[LayoutSpec, RecordLayout]:
    if not path.is_file():
        raise typer.BadParameter(f"Layout file not found: {path}")
    try:
        return load_layout(path)
    except CopyrecError as exc:
        console.print(f"[bold red]Invalid layout[/] {path}: {exc}")
        raise typer.Exit(code=1) from exc


@layout_app.command("show")
def layout_show(
    layout_path: Path = typer.Argument(..., help="Layout file (yaml/json)."),
    as_json: bool = typer.Option(False, "--json", help="Emit the field table as JSON."),
) -> None:
    """Show every field with its offset and length."""
    spec, layout = _load(layout_path)
    rows = layout.describe()
    if as_json:
        _print_json({"name": spec.name, "size": layout.size, "fields": rows})
        return

    table = Table(title=f"{spec.name} ({layout.size} bytes)")
    for column in COLUMNS:
        table.add_column(column, justify="left" if column in ("name", "kind") else "right")
    for row in rows:
        table.add_row(*(str(row[c]) for c in COLUMNS))
    console.print(table)


@layout_app.command("init")
def layout_init(
    output: Path = typer.Argument(..., help="Path to write a sample layout (.yaml/.json)."),
) -> None:
    """Write a sample layout file to edit."""
    payload = sample_layout()
    if output.suffix.lower() in {".yml", ".yaml"}:
        output.write_text(yaml.safe_dump(payload, sort_keys=False))
    else:
        output.write_bytes(orjson.dumps(payload, option=orjson.OPT_INDENT_2))
    console.print(f"[bold green]Wrote sample layout[/] to {output}")


@app.command()
def decode(
    layout_path: Path = typer.Argument(..., help="Layout file (yaml/json)."),
    input: Path = typer.Argument(..., help="Dataset of fixed-length records."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Optional path to write structured output."
    ),
    format: str = typer.Option(
        "json", "--format", "-f", help="Output format: json | jsonl | arrow."
    ),
    strip: bool = typer.Option(False, "--strip", help="Strip padding from decoded values."),
    max_records: int | None = typer.Option(
        None, "--max-records", help="Limit number of records decoded."
    ),
) -> None:
    """Decode every record of a dataset into field values."""
    fmt = format.lower()
    if fmt not in SUPPORTED_FORMATS:
        raise typer.BadParameter(f"Unsupported format '{format}'. Choose from {SUPPORTED_FORMATS}.")
    if fmt != "json" and output is None:
        raise typer.BadParameter(f"Format '{fmt}' requires --output.")

    spec, layout = _load(layout_path)
    if layout.size == 0:
        raise typer.BadParameter(f"Layout {spec.name!r} has no elementary fields to decode.")
    data = _read_bytes(input)
    console.print(f"[bold green]Read[/] {len(data)} bytes from {input}")
    leftover = len(data) % layout.size
    if leftover:
        console.print(f"[yellow]Ignoring {leftover} trailing bytes (partial record).[/]")

    rows = decode_records(
        data, layout, codepage=spec.codepage, strip=strip, max_records=max_records
    )
    if fmt == "arrow":
        rows_to_arrow(rows, layout, output)
    elif fmt == "jsonl":
        rows_to_jsonl(rows, output)
    elif output:
        output.write_bytes(orjson.dumps(rows, option=orjson.OPT_INDENT_2))
    else:
        _print_json(rows)
        return
    console.print(f"[bold green]Wrote {len(rows)} records[/] to {output}")


@dataset_app.command("synthetic")
def dataset_synthetic(
    layout_path: Path = typer.Argument(..., help="Layout file driving generation."),
    output: Path = typer.Argument(..., help="Path to write the synthetic dataset (.bin)."),
    metadata: Path | None = typer.Option(
        None, "--metadata", "-m", help="Optional path to write JSON metadata about records."
    ),
    count: int = typer.Option(8, "--count", "-c", help="Number of records to emit."),
    seed: int = typer.Option(1234, "--seed", help="Seed for reproducible generation."),
) -> None:
    """Generate fixed-length records populated with deterministic sample values."""
    spec, layout = _load(layout_path)
    cfg = SynthConfig(codepage=spec.codepage, seed=seed)
    data, meta = synthesize_records(layout, count=count, config=cfg)
    output.write_bytes(data)
    console.print(
        f"[bold green]Wrote[/] {len(data)} bytes to {output} ({count} records of {layout.size})."
    )
    if metadata:
        metadata.write_bytes(orjson.dumps(meta, option=orjson.OPT_INDENT_2))
        console.print(f"[bold green]Wrote metadata[/] to {metadata}")


if __name__ == "__main__":
    app()
