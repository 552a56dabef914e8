"""Interface and DNS read/write commands."""

from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dnschanger.cli.options import get_manager
from dnschanger.core.exceptions import DNSChangerError, PermissionDenied
from dnschanger.core.models import DNSMode

console = Console()


def fail(error: DNSChangerError) -> NoReturn:
    """Report an error and exit non-zero."""
    console.print(f"[red]✗ {escape(str(error))}[/]")
    if isinstance(error, PermissionDenied):
        console.print("[yellow]Changing DNS usually needs root. Re-run with sudo or pass --sudo.[/]")
    raise typer.Exit(code=1)


async def interfaces(options):
    """List interfaces and their resolvers."""
    try:
        manager = get_manager(options)
        found = await manager.list_interfaces()
    except DNSChangerError as e:
        fail(e)

    table = Table(title="Network Interfaces")
    table.add_column("Interface", style="cyan")
    table.add_column("Connection", style="magenta")
    table.add_column("DNS Servers", style="green")

    for iface in found:
        table.add_row(
            iface.name,
            iface.connection or "-",
            ", ".join(iface.addresses) or "-",
        )

    console.print(table)


async def show(interface: str, options):
    """Show current DNS of one interface."""
    try:
        manager = get_manager(options)
        config = await manager.get_configuration(interface)
    except DNSChangerError as e:
        fail(e)

    mode_style = "green" if config.mode == DNSMode.STATIC else "yellow"
    console.print(f"[bold]Interface:[/] {config.interface}")
    console.print(f"[bold]Mode:[/] [{mode_style}]{config.mode.value}[/]")
    if config.addresses:
        for i, address in enumerate(config.addresses, start=1):
            console.print(f"  {i}. {address}")
    else:
        console.print("  [dim]no DNS servers[/]")


async def set_dns(
    interface: str,
    provider: Optional[str],
    addresses: Optional[list[str]],
    options,
):
    """Apply a provider preset or an explicit address list."""
    if bool(provider) == bool(addresses):
        console.print("[red]✗ Give either --provider or one or more --address[/]")
        raise typer.Exit(code=1)

    try:
        manager = get_manager(options)
        if provider:
            result = await manager.apply_provider(interface, manager.catalog.get(provider))
        else:
            result = await manager.apply_dns(interface, addresses)
    except DNSChangerError as e:
        fail(e)

    console.print(f"[green]✓ {result.message}[/]")
    if options.verbose:
        console.print(f"  [dim]previous: {', '.join(result.previous.addresses) or 'none'}[/]")


async def automatic(interface: str, options):
    """Switch an interface to DHCP-provided DNS."""
    try:
        manager = get_manager(options)
        result = await manager.use_automatic(interface)
    except DNSChangerError as e:
        fail(e)

    console.print(f"[green]✓ {result.message}[/]")
