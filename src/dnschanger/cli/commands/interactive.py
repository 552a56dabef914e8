"""Interactive session command."""

from rich.console import Console
from rich.rule import Rule

from dnschanger.cli.commands.dns import fail
from dnschanger.cli.options import get_manager
from dnschanger.cli.prompts import RichPrompter
from dnschanger.cli.session import InteractiveSession
from dnschanger.core.exceptions import DNSChangerError

console = Console()


async def run(options) -> int:
    """Run the menu-driven session; returns the exit code."""
    try:
        manager = get_manager(options)
    except DNSChangerError as e:
        fail(e)

    console.print(Rule("DNS Changer"))
    session = InteractiveSession(manager, RichPrompter(console))
    return await session.run()
