"""
oid-space CLI

Command-line front end for enumerating ObjectId spaces.

Usage:
    oidspace count --machines 4 --processes 4 --items 10
    oidspace generate --machines 4 --processes 4 --items 10 --timestamp 2009-11-10T23:00:00Z
    oidspace generate ... --format raw --output ids.bin
    oidspace inspect 4af9f0700000000000000009
    oidspace --metrics-port 9109 generate ... --output ids.txt
"""

from pathlib import Path
from typing import BinaryIO, Optional

import pydantic
import typer
from typing_extensions import Annotated

from oid_space.generator import GenerationConfig, decode, new_generator, stream
from oid_space.kernel.errors import GenerationTooLarge, OidSpaceError
from oid_space.kernel.logging import configure_logging, get_logger, is_production
from oid_space.kernel.metrics import start_metrics_server
from oid_space.kernel.time import default_time_provider

app = typer.Typer(
    name="oidspace",
    help="oid-space - enumerate every ObjectId reachable from bounded parameters",
    add_completion=False,
)

logger = get_logger(__name__)

MachinesOpt = Annotated[int, typer.Option("--machines", min=0, help="Number of machine indexes")]
ProcessesOpt = Annotated[
    int, typer.Option("--processes", min=0, max=(1 << 16) - 1, help="Process indexes per machine")
]
ItemsOpt = Annotated[int, typer.Option("--items", min=0, help="Counter values per process")]
TimestampOpt = Annotated[
    Optional[str],
    typer.Option("--timestamp", help="ISO 8601 timestamp shared by all ids (default: now)"),
]


@app.callback()
def main(
    log_level: Annotated[
        str,
        typer.Option("--log-level", envvar="OIDSPACE_LOG_LEVEL", help="Log level"),
    ] = "WARNING",
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Emit JSON logs (default in production)"),
    ] = False,
    metrics_port: Annotated[
        Optional[int],
        typer.Option(
            "--metrics-port",
            envvar="OIDSPACE_METRICS_PORT",
            min=1,
            max=65535,
            help="Serve Prometheus metrics on this port while the command runs",
        ),
    ] = None,
) -> None:
    """Configure logging and metrics exposure for every command"""
    configure_logging(json_output=json_logs or is_production(), log_level=log_level)
    if metrics_port is not None:
        start_metrics_server(metrics_port)
        logger.info("metrics server started", port=metrics_port)


def build_config(
    machines: int, processes: int, items: int, timestamp: Optional[str]
) -> GenerationConfig:
    """Build and validate a config, exiting with status 1 when it is invalid"""
    ts = timestamp if timestamp is not None else default_time_provider.now()
    try:
        config, err = new_generator(ts, machines, processes, items)
    except pydantic.ValidationError as e:
        typer.echo(f"Error: invalid parameters: {e.errors()[0]['msg']}", err=True)
        raise typer.Exit(1)
    if err is not None:
        typer.echo(f"Error: {err}", err=True)
        raise typer.Exit(1)
    return config


@app.command()
def count(
    machines: MachinesOpt,
    processes: ProcessesOpt,
    items: ItemsOpt,
) -> None:
    """Print how many identifiers a config would produce"""
    config = build_config(machines, processes, items, None)
    typer.echo(str(config.count()))


def _write(oids, fmt: str, out: BinaryIO) -> int:
    written = 0
    for oid in oids:
        if fmt == "raw":
            out.write(oid.binary)
        else:
            out.write(f"{oid}\n".encode("ascii"))
        written += 1
    out.flush()
    return written


@app.command()
def generate(
    machines: MachinesOpt,
    processes: ProcessesOpt,
    items: ItemsOpt,
    timestamp: TimestampOpt = None,
    fmt: Annotated[
        str,
        typer.Option("--format", help="Output format: hex (one per line) or raw (12-byte records)"),
    ] = "hex",
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write to file instead of stdout"),
    ] = None,
    max_count: Annotated[
        Optional[int],
        typer.Option("--max-count", min=0, help="Refuse configs producing more identifiers"),
    ] = None,
    buffer_size: Annotated[
        int,
        typer.Option("--buffer-size", min=1, help="Producer hand-off queue capacity"),
    ] = 1024,
) -> None:
    """Stream every identifier of the config in nested order"""
    if fmt not in ("hex", "raw"):
        typer.echo(f"Error: unknown format {fmt!r} (expected hex or raw)", err=True)
        raise typer.Exit(2)

    config = build_config(machines, processes, items, timestamp)
    total = config.count()
    if max_count is not None and total > max_count:
        typer.echo(f"Error: {GenerationTooLarge(total, max_count)}", err=True)
        raise typer.Exit(1)

    try:
        with stream(config, buffer_size=buffer_size) as oids:
            if output is None:
                written = _write(oids, fmt, typer.get_binary_stream("stdout"))
            else:
                with open(output, "wb") as f:
                    written = _write(oids, fmt, f)
    except OidSpaceError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    logger.info("identifiers written", count=written, output=str(output or "-"), format=fmt)
    if output is not None:
        typer.echo(f"✓ Wrote {written} identifiers to {output}", err=True)


@app.command()
def inspect(
    identifier: Annotated[str, typer.Argument(help="24-character hex identifier")],
) -> None:
    """Decode an identifier into its four fields"""
    try:
        fields = decode(identifier)
    except OidSpaceError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Timestamp: {fields.timestamp} ({fields.time.isoformat()})")
    typer.echo(f"Machine:   {fields.machine}")
    typer.echo(f"Process:   {fields.process}")
    typer.echo(f"Counter:   {fields.counter}")


if __name__ == "__main__":
    app()
