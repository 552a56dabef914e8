"""Provider catalog commands."""

from typing import Optional

from rich.console import Console
from rich.table import Table

from dnschanger.cli.commands.dns import fail
from dnschanger.cli.options import get_catalog
from dnschanger.core.exceptions import DNSChangerError
from dnschanger.core.probe import ResolverProbe

console = Console()


async def list_providers(options):
    """Show presets and the custom option."""
    try:
        catalog = get_catalog(options)
    except DNSChangerError as e:
        fail(e)

    table = Table(title="DNS Providers")
    table.add_column("#", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Addresses", style="green")
    table.add_column("Description")

    choices = catalog.choices()
    for i, choice in enumerate(choices, start=1):
        if choice.custom:
            table.add_row(str(i), "Custom", "-", "Enter your own addresses")
        else:
            table.add_row(
                str(i),
                choice.provider.name,
                ", ".join(choice.provider.addresses),
                choice.provider.description,
            )

    console.print(table)


async def test(name: Optional[str], query_name: str, timeout: float, options):
    """Probe provider addresses and report latency."""
    try:
        catalog = get_catalog(options)
        providers = [catalog.get(name)] if name else catalog.providers
    except DNSChangerError as e:
        fail(e)

    probe = ResolverProbe(query_name=query_name, timeout=timeout)

    table = Table(title=f"Resolver Latency ({query_name})")
    table.add_column("Provider", style="cyan")
    table.add_column("Address", style="magenta")
    table.add_column("Latency", style="yellow")
    table.add_column("Result")

    best: tuple[float, str] | None = None
    for provider in providers:
        results = await probe.probe_all(provider.addresses)
        for result in results:
            if result.reachable:
                latency = f"{result.latency_ms:.1f}ms"
                outcome = f"[green]{result.rcode}[/]"
                if best is None or result.latency_ms < best[0]:
                    best = (result.latency_ms, provider.name)
            else:
                latency = "-"
                outcome = f"[red]{result.error}[/]"
            table.add_row(provider.name, result.address, latency, outcome)

    console.print(table)
    if best:
        console.print(f"\nFastest: [bold]{best[1]}[/] ({best[0]:.1f}ms)")
    else:
        console.print("\n[red]No resolver answered[/]")
