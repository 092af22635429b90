"""Typer CLI entrypoint."""

from __future__ import annotations

import logging

import typer

from stm32detect.core.detector import Stm32Detector
from stm32detect.core.device_table import device_table
from stm32detect.core.errors import Stm32DetectError
from stm32detect.core.protocol import DEVICE_ID_MASK
from stm32detect.core.settings import apply_overrides, load_settings

app = typer.Typer(help="Identify the STM32 attached to a running OpenOCD server")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("detect")
def detect(
    port: int | None = typer.Option(None, "--port", "-p", help="OpenOCD telnet port"),
    attempts: int | None = typer.Option(None, "--attempts", min=1, help="Read attempts per address"),
    interval: float | None = typer.Option(None, "--interval", min=0.001, help="Seconds per read attempt"),
    connect_timeout: float | None = typer.Option(None, "--connect-timeout", min=0.001, help="TCP connect timeout in seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log the telnet exchange"),
) -> None:
    """Probe the IDCODE registers and print the matching target config."""
    _configure_logging(verbose)
    try:
        settings = apply_overrides(
            load_settings(),
            port=port,
            read_attempts=attempts,
            poll_interval_s=interval,
            connect_timeout_s=connect_timeout,
        )
        result = Stm32Detector(settings).detect()
    except Stm32DetectError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    if not result.success:
        typer.echo(f"Error: {result.error}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Device ID: 0x{result.device_id:03X}")
    typer.echo(f"Config:    {result.config_file}")
    if verbose and result.idcode is not None and result.address is not None:
        typer.echo(f"IDCODE:    0x{result.idcode:08X} @ 0x{result.address:08X}")


@app.command("table")
def show_table() -> None:
    """List supported families, their target configs, and device IDs."""
    try:
        table = device_table()
    except Stm32DetectError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    for family in table.families:
        ids = ", ".join(f"0x{device_id:03X}" for device_id in family.device_ids)
        typer.echo(f"{family.name} ({family.config}): {ids}")


@app.command("lookup")
def lookup(
    device_id: str = typer.Argument(..., help="DEV_ID or full IDCODE, e.g. 0x413"),
) -> None:
    """Resolve a device ID to its target config."""
    try:
        value = int(device_id, 0)
    except ValueError:
        typer.echo(f"Error: '{device_id}' is not a number", err=True)
        raise typer.Exit(code=1) from None

    masked = value & DEVICE_ID_MASK
    try:
        family = device_table().family_for(masked)
    except Stm32DetectError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    if family is None:
        typer.echo(f"Error: device ID 0x{masked:03X} is not supported", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"0x{masked:03X}: {family.name} -> {family.config}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
