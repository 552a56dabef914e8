"""Main CLI entry point for dns-changer."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from dnschanger.cli.options import BackendChoice, GlobalOptions

# Create the main app
app = typer.Typer(
    name="dns-changer",
    help="DNS Changer - view and change the DNS servers of a network interface",
)

console = Console()


def configure_logging(verbose: bool, debug: bool) -> None:
    """Send log records to stderr through rich."""
    level = logging.WARNING
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


# ============================================================================
# DNS Commands
# ============================================================================


@app.command("interfaces")
def interfaces(ctx: typer.Context):
    """List network interfaces and their DNS servers."""
    from dnschanger.cli.commands.dns import interfaces as list_interfaces

    asyncio.run(list_interfaces(ctx.obj))


@app.command("show")
def show(
    ctx: typer.Context,
    interface: str = typer.Argument(..., help="Interface name, e.g. eth0"),
):
    """Show the current DNS configuration of an interface."""
    from dnschanger.cli.commands.dns import show as show_dns

    asyncio.run(show_dns(interface, ctx.obj))


@app.command("set")
def set_dns(
    ctx: typer.Context,
    interface: str = typer.Argument(..., help="Interface name, e.g. eth0"),
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="Provider preset name"),
    address: Optional[list[str]] = typer.Option(
        None, "--address", "-a", help="DNS server address, repeat for more (primary first)"
    ),
):
    """Set DNS servers from a preset or explicit addresses."""
    from dnschanger.cli.commands.dns import set_dns as apply

    asyncio.run(apply(interface, provider, address, ctx.obj))


@app.command("auto")
def auto(
    ctx: typer.Context,
    interface: str = typer.Argument(..., help="Interface name, e.g. eth0"),
):
    """Use automatic DNS from DHCP/router."""
    from dnschanger.cli.commands.dns import automatic

    asyncio.run(automatic(interface, ctx.obj))


# ============================================================================
# Provider Commands
# ============================================================================

providers_app = typer.Typer(help="DNS provider presets")
app.add_typer(providers_app, name="providers")


@providers_app.command("list")
def providers_list(ctx: typer.Context):
    """List provider presets."""
    from dnschanger.cli.commands.providers import list_providers

    asyncio.run(list_providers(ctx.obj))


@providers_app.command("test")
def providers_test(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Provider to test (default: all)"),
    query_name: str = typer.Option("example.com", "--query", "-q", help="Name to resolve"),
    timeout: float = typer.Option(2.0, "--timeout", help="Per-query timeout in seconds"),
):
    """Measure how fast provider resolvers answer."""
    from dnschanger.cli.commands.providers import test

    asyncio.run(test(name, query_name, timeout, ctx.obj))


# ============================================================================
# Version Command
# ============================================================================


@app.command("version")
def version():
    """Show version information."""
    from dnschanger import __version__

    console.print(f"dns-changer version {__version__}")


# ============================================================================
# Main Callback (Global Options)
# ============================================================================


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    backend: BackendChoice = typer.Option(
        BackendChoice.AUTO, "--backend", "-b", envvar="DNS_CHANGER_BACKEND",
        help="Network configuration backend",
    ),
    sudo: bool = typer.Option(
        False, "--sudo/--no-sudo", envvar="DNS_CHANGER_SUDO",
        help="Run configuration writes through sudo",
    ),
    providers_file: Optional[Path] = typer.Option(
        None, "--providers-file", envvar="DNS_CHANGER_PROVIDERS_FILE",
        exists=True, dir_okay=False, help="JSON file with extra providers",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug mode"),
):
    """DNS Changer - runs the interactive menu when no command is given."""
    ctx.ensure_object(GlobalOptions)
    ctx.obj.backend = backend
    ctx.obj.use_sudo = sudo
    ctx.obj.providers_file = providers_file
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug

    configure_logging(verbose, debug)

    if ctx.invoked_subcommand is None:
        from dnschanger.cli.commands.interactive import run

        try:
            code = asyncio.run(run(ctx.obj))
        except (KeyboardInterrupt, EOFError):
            console.print("\nInterrupted")
            raise typer.Exit(code=130)
        raise typer.Exit(code=code)


if __name__ == "__main__":
    app()
