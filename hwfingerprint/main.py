"""
hwfingerprint.main
------------
CLI entrypoint

Key contract:
- `hw-fingerprint fingerprint` prints exactly one JSON object on stdout
  (the nine-key map); events go to stderr
- exit code 1 only when WMI cannot be reached
- `hw-fingerprint platform` shows the detected platform + chosen interface
"""

from __future__ import annotations

import dataclasses
import platform
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import typer

from hwfingerprint import AGENT_VERSION
from hwfingerprint.assembler import FingerprintAssembler
from hwfingerprint.collectors.host import LocalHostIdentity
from hwfingerprint.errors import ServiceUnavailableError
from hwfingerprint.logging import EventLog
from hwfingerprint.model import fingerprint_to_json
from hwfingerprint.settings import Settings, load_settings
from hwfingerprint.strategy import select_strategy
from hwfingerprint.windows import (
    SubprocessCommandRunner,
    WindowsServiceManager,
    WmiPlatformInfo,
    WmiQuery,
)

# Explicit multi-command CLI
app = typer.Typer(
    add_completion=False,
    help="hw-fingerprint: hardware fingerprint for Windows instances",
)


# -----------------------------
# DATA CLASSES
# -----------------------------
@dataclass(frozen=True)
class EnvironmentInfo:
    """
    Snapshot of the runtime environment
    """

    python_version: str
    os: str
    machine: str
    utc_now: str


def collect_environment_info() -> EnvironmentInfo:
    return EnvironmentInfo(
        python_version=sys.version.split()[0],
        os=f"{platform.system()} {platform.release()}",
        machine=platform.machine(),
        utc_now=datetime.now(timezone.utc).isoformat(),
    )


# -----------------------------
# WIRING
# -----------------------------
def resolve_settings(interface: Optional[str], log_level: Optional[str]) -> Settings:
    """
    Env-derived settings with CLI overrides applied on top
    """
    try:
        settings = load_settings()
        overrides = {}
        if interface is not None:
            overrides["interface"] = interface.lower()
        if log_level is not None:
            overrides["log_level"] = log_level.lower()
        if overrides:
            settings = dataclasses.replace(settings, **overrides)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e

    return settings


def build_assembler(settings: Settings) -> FingerprintAssembler:
    query = WmiQuery()
    return FingerprintAssembler(
        service_manager=WindowsServiceManager(),
        platform_info=WmiPlatformInfo(query),
        command_runner=SubprocessCommandRunner(),
        structured_query=query,
        host_identity=LocalHostIdentity(),
        settings=settings,
    )


def build_platform_info() -> WmiPlatformInfo:
    return WmiPlatformInfo(WmiQuery())


# -----------------------------
# ROOT COMMAND BEHAVIOR
# -----------------------------
@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """
    Print a hint when no subcommand is given
    """
    if ctx.invoked_subcommand is None:
        typer.echo("No command provided. Try: hw-fingerprint --help")


# -----------------------------
# CLI COMMANDS
# -----------------------------
@app.command()
def version() -> None:
    """
    Print agent version & runtime env
    """
    env = collect_environment_info()

    typer.echo(f"hw-fingerprint v{AGENT_VERSION}")
    typer.echo(f"python={env.python_version}")
    typer.echo(f"os={env.os}")
    typer.echo(f"machine={env.machine}")
    typer.echo(f"utc_now={env.utc_now}")


@app.command("fingerprint")
def fingerprint(
    interface: Optional[str] = typer.Option(
        None,
        help="Access interface: auto, wmic or wql (default: HWFP_INTERFACE or auto).",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Minimum event level: debug, info, warning, error.",
    ),
    pretty: bool = typer.Option(
        False,
        "--pretty",
        help="Indent the fingerprint JSON.",
    ),
) -> None:
    """
    Compute the hardware fingerprint and print it as JSON

    Failure semantics:
    - WMI unreachable -> exit 1, nothing on stdout
    - any other failure blanks only its own key
    """
    settings = resolve_settings(interface, log_level)
    log = EventLog(settings.log_level)

    log.emit(
        "fingerprint_start",
        service=settings.service_name,
        interface=settings.interface,
    )

    try:
        try:
            result = build_assembler(settings).compute_with_outcomes()
        except ServiceUnavailableError as e:
            typer.echo(f"error: {e}", err=True)
            raise typer.Exit(code=1)

        typer.echo(fingerprint_to_json(result.fingerprint, pretty=pretty))

        log.emit(
            "fingerprint_emitted",
            strategy=result.strategy.value,
            failed=result.failed(),
        )

    finally:
        log.emit("agent_shutdown", level="debug")


@app.command("platform")
def platform_info(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Minimum event level: debug, info, warning, error.",
    ),
) -> None:
    """
    Print platform details and the interface a fingerprint would use
    """
    settings = resolve_settings(None, log_level)
    info = build_platform_info()

    for label, getter in (
        ("name", info.get_platform_name),
        ("version", info.get_platform_version),
        ("sku", info.get_platform_sku),
        ("nano_server", info.is_nano_server),
    ):
        try:
            value = getter()
        except Exception as e:
            value = f"unavailable ({type(e).__name__}: {e})"
        typer.echo(f"{label}={value}")

    strategy = select_strategy(
        info,
        threshold=settings.structured_query_min_version,
        interface=settings.interface,
        log=EventLog(settings.log_level),
    )
    typer.echo(f"interface={strategy.value}")


if __name__ == "__main__":
    app()
