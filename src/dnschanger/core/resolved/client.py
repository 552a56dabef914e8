"""systemd-resolved backend implementation."""

import logging
import re

from dnschanger.core.base import BaseNetworkBackend
from dnschanger.core.exceptions import InterfaceNotFound
from dnschanger.core.models import BackendType, DNSConfiguration, DNSMode, NetworkInterface

logger = logging.getLogger(__name__)

# Link 2 (eth0): 8.8.8.8 8.8.4.4
_LINK_LINE = re.compile(r"^Link\s+\d+\s+\(([^)]+)\):\s*(.*)$")


def parse_server(token: str) -> str:
    """Strip the ``:port`` / ``#server-name`` decorations resolvectl may print."""
    server = token.split("#", 1)[0]
    if server.startswith("["):
        # [2001:db8::1]:53
        return server[1:].split("]", 1)[0]
    if server.count(":") == 1:
        return server.split(":", 1)[0]
    return server


def parse_links(output: str) -> dict[str, list[str]]:
    """Parse ``resolvectl dns`` output into link name -> servers."""
    links: dict[str, list[str]] = {}
    for line in output.splitlines():
        match = _LINK_LINE.match(line.strip())
        if not match:
            continue
        name, servers = match.group(1), match.group(2)
        links[name] = [parse_server(s) for s in servers.split()]
    return links


class ResolvedBackend(BaseNetworkBackend):
    """
    Backend for hosts using systemd-resolved.

    Uses resolvectl for per-link DNS. A single ``resolvectl dns`` call
    replaces the whole server list of a link. resolvectl does not tell
    static and DHCP servers apart, so a link reports automatic mode only
    when it has no servers.
    """

    backend_type = BackendType.RESOLVED
    executable = "resolvectl"
    not_found_markers = (
        "no such device",
        "failed to resolve interface",
        "unknown interface",
        "not found",
    )

    def __init__(
        self,
        use_sudo: bool = False,
        sudo_path: str = "sudo",
        resolvectl_path: str = "resolvectl",
    ):
        super().__init__(use_sudo=use_sudo, sudo_path=sudo_path)
        self.executable = resolvectl_path

    async def list_interfaces(self) -> list[NetworkInterface]:
        stdout, stderr, rc = await self._run("dns")
        if rc != 0:
            self._raise_for_error(stderr)

        links = parse_links(stdout)
        return [
            NetworkInterface(name=name, addresses=servers)
            for name, servers in sorted(links.items())
            if name != "lo"
        ]

    async def get_configuration(self, interface: str) -> DNSConfiguration:
        stdout, stderr, rc = await self._run("dns", interface)
        if rc != 0:
            self._raise_for_error(stderr, interface=interface)

        links = parse_links(stdout)
        if interface not in links:
            raise InterfaceNotFound(interface)

        servers = links[interface]
        return DNSConfiguration(
            interface=interface,
            mode=DNSMode.STATIC if servers else DNSMode.AUTOMATIC,
            addresses=servers,
        )

    def verify_automatic(self, config: DNSConfiguration) -> bool:
        # revert drops every runtime setting; DHCP servers may show up again
        # and read back like a static list.
        return True

    async def set_static(self, interface: str, addresses: list[str]) -> None:
        stdout, stderr, rc = await self._run("dns", interface, *addresses, privileged=True)
        if rc != 0:
            self._raise_for_error(stderr, interface=interface, write=True)
        logger.info(f"Set DNS on link {interface}: {addresses}")

    async def set_automatic(self, interface: str) -> None:
        stdout, stderr, rc = await self._run("revert", interface, privileged=True)
        if rc != 0:
            self._raise_for_error(stderr, interface=interface, write=True)
        logger.info(f"Reverted DNS on link {interface}")
