"""Typer CLI entrypoint."""

from __future__ import annotations

import logging

import typer

from droidbt.core.errors import DroidbtError
from droidbt.core.model import FieldTag, ScanReport
from droidbt.core.render import describe_device_class, summary_lines
from droidbt.core.service import ScanService

app = typer.Typer(help="Inspect paired Bluetooth devices stored in an Android bt_config.xml")

PathArgument = typer.Argument(
    None,
    help="Document to scan (default: $DROIDBT_CONFIG or /data/misc/bluedroid/bt_config.xml)",
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _build_service() -> ScanService:
    service = ScanService()
    for warning in service.load_warnings:
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _fail_if_partial(report: ScanReport) -> None:
    if report.error:
        typer.echo(f"Error: {report.error}", err=True)
        raise typer.Exit(code=1)


@app.command("scan")
def scan_document(path: str | None = PathArgument) -> None:
    """Decode every field in the document and report address conflicts."""
    try:
        service = _build_service()
        report = service.scan(path)
        for line in report.lines:
            typer.echo(line)
        for line in summary_lines(report):
            typer.echo(line)
        _fail_if_partial(report)
    except DroidbtError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("devices")
def list_devices(path: str | None = PathArgument) -> None:
    """List one line per record with its name and device class."""
    try:
        service = _build_service()
        report = service.scan(path)
        if not report.records:
            typer.echo("No device records found")
        for record in report.records:
            label = str(record.address) if record.address else record.name
            name = record.value_for("Name")
            line = f"{label} {name}" if name else label
            dev_class = record.field_value(FieldTag.DEVICE_CLASS)
            if dev_class is not None:
                line += f" [{describe_device_class(dev_class, service.tables)}]"
            typer.echo(line)
        _fail_if_partial(report)
    except DroidbtError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("conflicts")
def list_conflicts(path: str | None = PathArgument) -> None:
    """List addresses registered more than once. Exits with code 2 on conflicts."""
    try:
        service = _build_service()
        report = service.scan(path)
        if not report.conflicts:
            typer.echo("No address conflicts")
        for address in report.conflicts:
            marker = " (local adapter)" if address == report.local_address else ""
            typer.echo(f"{address}{marker}")
        _fail_if_partial(report)
    except DroidbtError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    if report.conflicts:
        raise typer.Exit(code=2)


@app.command("tables")
def list_tables() -> None:
    """List loaded symbol tables."""
    try:
        service = _build_service()
        for table in service.list_tables():
            typer.echo(f"{table.id}: {table.name} ({len(table.entries)} entries)")
    except DroidbtError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
