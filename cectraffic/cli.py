#!/usr/bin/env python3
"""
Command-line interface for the CEC traffic decoder.
"""

import sys
import json
import click
import asyncio
import logging
from pathlib import Path
from datetime import datetime
from collections import Counter
from rich.console import Console
from rich.table import Table
from rich.logging import RichHandler

from .config.cec_data import (
    Opcode,
    format_physical_address,
    get_device_type_name,
    get_logical_address_name,
)
from .config.loader import load_and_apply_config
from .config.settings import ApplicationSettings
from .parser.events import (
    ActiveSourceEvent,
    CecEvent,
    LineEvent,
    OpcodeEvent,
    OsdNameEvent,
    PacketEvent,
    ReportPhysicalAddressEvent,
    RoutingChangeEvent,
)
from .parser.parser import CecTrafficParser
from .streaming.buffer import LineFramer
from .streaming.client import CecClient, CecClientError, encode_command


# Set up rich console for pretty output
console = Console()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    handlers=[RichHandler(console=console, rich_tracebacks=True)],
)
logger = logging.getLogger(__name__)


def describe_event(event: CecEvent) -> str:
    """One-line human readable description of an event."""
    if isinstance(event, LineEvent):
        return event.line
    if not isinstance(event, PacketEvent):
        return ""

    packet = event.packet
    route = (
        f"{get_logical_address_name(packet.source)} -> {get_logical_address_name(packet.target)}"
        if packet.source is not None
        else ""
    )

    if isinstance(event, OsdNameEvent):
        return f"{route}: name {event.name!r}"
    if isinstance(event, RoutingChangeEvent):
        return (
            f"{route}: {format_physical_address(event.from_address)}"
            f" => {format_physical_address(event.to_address)}"
        )
    if isinstance(event, ActiveSourceEvent):
        return f"{route}: {format_physical_address(event.address)}"
    if isinstance(event, ReportPhysicalAddressEvent):
        return (
            f"{route}: {format_physical_address(event.address)}"
            f" ({get_device_type_name(event.device_type)})"
        )
    if isinstance(event, OpcodeEvent):
        args = ":".join("??" if a is None else f"{a:02x}" for a in event.args)
        return f"{route}: {event.name} {args}".rstrip()
    return f"{route}: {':'.join(packet.tokens or [])}"


def _parse_byte(value: str) -> int:
    # Always hex, as in the adapter's own tx syntax; a 0x prefix is allowed
    return int(value, 16)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--config", "config_path", type=click.Path(), help="Path to cec_config.yaml")
@click.pass_context
def cli(ctx, verbose, config_path):
    """CEC Traffic Decoder - decode cec-client output into bus events"""
    app_settings = load_and_apply_config(config_path, ApplicationSettings.from_env())
    if verbose:
        app_settings.log_level = "debug"
    logging.getLogger().setLevel(getattr(logging, app_settings.log_level.upper(), logging.INFO))

    try:
        app_settings.validate()
    except ValueError as e:
        raise click.UsageError(str(e))

    if verbose:
        app_settings.log_configuration()

    ctx.obj = app_settings


@cli.command()
@click.argument("log_file", type=click.Path(exists=True))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["summary", "json", "events"]),
    default="summary",
)
@click.option("--output", "-o", type=click.Path(), help="Output file for json format")
@click.option("--all-handlers", is_flag=True, help="Evaluate every line handler, not only the first")
@click.option("--chunk-size", type=int, default=None, help="Bytes read per chunk")
@click.pass_obj
def decode(app_settings, log_file, output_format, output, all_handlers, chunk_size):
    """Replay a captured cec-client log and report decoded events."""
    log_path = Path(log_file)
    evaluate_all = all_handlers or app_settings.decoder.evaluate_all_handlers
    chunk_size = chunk_size or app_settings.decoder.chunk_size

    if output_format == "summary":
        console.print(f"[bold green]Decoding adapter log:[/bold green] {log_path.name}")
        if not evaluate_all:
            console.print("[dim]Only the first line handler is evaluated (use --all-handlers)[/dim]")

    start_time = datetime.now()
    events = []
    parser = CecTrafficParser(evaluate_all_handlers=evaluate_all)
    parser.bus.subscribe_all(events.append)
    framer = LineFramer(on_line=parser.process_line)

    with open(log_path, "rb") as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            framer.feed(chunk)
    framer.close()

    processing_time = (datetime.now() - start_time).total_seconds()

    if output_format == "json":
        lines = [json.dumps(event.to_dict(), default=str) for event in events]
        if output:
            Path(output).write_text("\n".join(lines) + "\n")
            console.print(f"[green]Wrote {len(lines)} events to {output}[/green]")
        else:
            for line in lines:
                click.echo(line)
    elif output_format == "events":
        display_events(events)
    else:
        display_summary(events, parser, processing_time)


def display_events(events):
    """Display one row per decoded (non-line) event."""
    table = Table(title="Decoded Events")
    table.add_column("#", style="dim")
    table.add_column("Event", style="cyan", no_wrap=True)
    table.add_column("Details")

    for i, event in enumerate(e for e in events if not isinstance(e, LineEvent)):
        table.add_row(str(i + 1), event.event_type.value, describe_event(event))

    console.print(table)


def display_summary(events, parser, processing_time):
    """Display counts per event type and decoder statistics."""
    console.print("\n[bold cyan]═══ Decoding Complete ═══[/bold cyan]")

    stats = parser.get_stats()
    stats_table = Table(title="Decoder Statistics", show_header=False)
    stats_table.add_column("Metric", style="cyan")
    stats_table.add_column("Value", style="white")
    stats_table.add_row("Lines", f"{stats['lines_processed']:,}")
    stats_table.add_row("Packets", f"{stats['packets_processed']:,}")
    stats_table.add_row("Unhandled Packets", f"{stats['packets_unhandled']:,}")
    stats_table.add_row("Token Errors", str(stats["tokenizer_stats"]["errors"]))
    stats_table.add_row("Decode Errors", str(stats["parse_errors"]))
    stats_table.add_row("Processing Time", f"{processing_time:.2f}s")
    console.print(stats_table)

    counts = Counter(
        event.name if isinstance(event, OpcodeEvent) else event.event_type.value
        for event in events
        if not isinstance(event, LineEvent)
    )
    if counts:
        type_table = Table(title="\n[bold]Events by Type[/bold]")
        type_table.add_column("Event", style="cyan", no_wrap=True)
        type_table.add_column("Count", justify="right")
        for name, count in counts.most_common():
            type_table.add_row(name, str(count))
        console.print(type_table)

    names = {
        event.packet.source: event.name for event in events if isinstance(event, OsdNameEvent)
    }
    if names:
        name_table = Table(title="\n[bold]Devices[/bold]")
        name_table.add_column("Logical Address", style="cyan")
        name_table.add_column("OSD Name")
        for source, name in sorted(names.items(), key=lambda item: str(item[0])):
            name_table.add_row(get_logical_address_name(source), name)
        console.print(name_table)


@cli.command()
@click.option("--client", "client_name", default=None, help="Adapter executable")
@click.option("--osd-name", default=None, help="OSD name announced by the adapter")
@click.option("--all-handlers", is_flag=True, help="Evaluate every line handler, not only the first")
@click.option("--lines", "show_lines", is_flag=True, help="Also print every raw adapter line")
@click.pass_obj
def monitor(app_settings, client_name, osd_name, all_handlers, show_lines):
    """Spawn the adapter and print decoded events until interrupted."""
    client_settings = app_settings.client
    client = CecClient(
        osd_name=osd_name or client_settings.osd_name,
        evaluate_all_handlers=all_handlers or app_settings.decoder.evaluate_all_handlers,
        chunk_size=app_settings.decoder.chunk_size,
    )

    def print_event(event: CecEvent):
        if isinstance(event, LineEvent) and not show_lines:
            return
        stamp = datetime.now().strftime("%H:%M:%S")
        console.print(f"[dim]{stamp}[/dim] [cyan]{event.event_type.value}[/cyan] {describe_event(event)}")

    client.bus.subscribe_all(print_event)

    async def run():
        await client.start(client_name or client_settings.client, *client_settings.params)
        try:
            await client.wait()
        finally:
            if client.running:
                await client.stop()

    try:
        asyncio.run(run())
    except CecClientError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted, adapter stopped[/yellow]")


@cli.command()
@click.argument("command", nargs=-1, required=True)
def encode(command):
    """Print the transmit line for the given bytes.

    Every COMMAND value is read as hex, with or without a 0x prefix:
    "10", "0x10" and "010" all mean 0x10.
    """
    try:
        click.echo(encode_command(*(_parse_byte(value) for value in command)))
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="COMMAND")


@cli.command()
def opcodes():
    """Print the opcode table."""
    table = Table(title="CEC Opcodes")
    table.add_column("Code", style="cyan")
    table.add_column("Name")
    for opcode in sorted(Opcode, key=int):
        table.add_row(f"0x{opcode.value:02X}", opcode.name)
    console.print(table)


def main():
    """Entry point for the cectraffic command."""
    cli()


if __name__ == "__main__":
    main()
